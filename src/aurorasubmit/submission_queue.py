# Local submission queue - items waiting for the next batch pull request.
# Created: 2026-10-19

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import Any

from aurorasubmit.identifiers import ContentType


@dataclass
class QueuedFile:
    """One file to commit, with the repository path it is committed to."""

    filename: str
    content: bytes
    desired_path: str
    max_size: int

    @property
    def size(self) -> int:
        return len(self.content)


@dataclass
class SubmissionItem:
    id: int
    type: ContentType
    item_id: str
    name: str
    author: str
    files: list[QueuedFile] = field(default_factory=list)
    website: str | None = None
    metadata: dict[str, Any] | None = None

    def summary(self) -> str:
        return f"{self.name} by {self.author} ({self.type.value})"

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "type": self.type.value,
            "item_id": self.item_id,
            "name": self.name,
            "author": self.author,
            "website": self.website,
            "files": [
                {"filename": f.filename, "path": f.desired_path, "size": f.size}
                for f in self.files
            ],
        }


class SubmissionQueue:
    """Ordered queue of submission items.

    Queue IDs increase monotonically and are never reused, even after an
    item is removed or the queue is cleared.
    """

    def __init__(self) -> None:
        self._items: list[SubmissionItem] = []
        self._next_id = 0

    def add(
        self,
        type: ContentType,
        item_id: str,
        name: str,
        author: str,
        files: list[QueuedFile],
        website: str | None = None,
        metadata: dict[str, Any] | None = None,
    ) -> SubmissionItem:
        item = SubmissionItem(
            id=self._next_id,
            type=ContentType(type),
            item_id=item_id,
            name=name,
            author=author,
            files=list(files),
            website=website,
            metadata=metadata,
        )
        self._next_id += 1
        self._items.append(item)
        return item

    def remove(self, queue_id: int) -> bool:
        """Drop the item with ``queue_id``; unknown IDs are ignored."""
        before = len(self._items)
        self._items = [item for item in self._items if item.id != queue_id]
        return len(self._items) != before

    def clear(self) -> None:
        self._items = []

    @property
    def items(self) -> list[SubmissionItem]:
        return list(self._items)

    @property
    def is_empty(self) -> bool:
        return not self._items

    def all_files(self) -> list[QueuedFile]:
        return [f for item in self._items for f in item.files]

    def has_item_id(self, item_id: str) -> bool:
        return any(item.item_id == item_id for item in self._items)

    def summary(self) -> list[str]:
        return [item.summary() for item in self._items]

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[SubmissionItem]:
        return iter(list(self._items))
