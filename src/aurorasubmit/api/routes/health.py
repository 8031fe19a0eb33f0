import time

from fastapi import APIRouter

from aurorasubmit import __version__
from aurorasubmit.api.schemas import HealthResponse

router = APIRouter(tags=["Health & Status"])


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Health check",
    description="Check the health status of the submission server",
)
async def health_check() -> HealthResponse:
    return HealthResponse(status="ok", version=__version__, timestamp=int(time.time()))
