from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class StatusKind(str, Enum):
    SUCCESS = "success"
    ERROR = "error"
    INFO = "info"


class StatusResponse(BaseModel):
    status: StatusKind = StatusKind.SUCCESS
    message: str = ""


class HealthResponse(BaseModel):
    status: str
    version: str
    timestamp: int


class MetadataField(BaseModel):
    label: str
    value: str


class MetadataResponse(StatusResponse):
    metadata: Dict[str, Any] = Field(default_factory=dict)
    display: List[MetadataField] = Field(default_factory=list)


class QueuedFileInfo(BaseModel):
    filename: str
    path: str
    size: int


class QueueItemInfo(BaseModel):
    id: int
    type: str
    item_id: str
    name: str
    author: str
    website: Optional[str] = None
    files: List[QueuedFileInfo] = Field(default_factory=list)


class QueueResponse(StatusResponse):
    items: List[QueueItemInfo] = Field(default_factory=list)


class SessionResponse(BaseModel):
    authenticated: bool
    login: Optional[str] = None
    manifest_entries: int = 0
    queue: List[QueueItemInfo] = Field(default_factory=list)


class PullRequestResponse(StatusResponse):
    url: Optional[str] = None
    number: Optional[int] = None
    branch: str
    submitted: List[int] = Field(default_factory=list)


class ManifestResponse(StatusResponse):
    entries: int = 0


class TokenExchangeRequest(BaseModel):
    code: Optional[str] = None
