from fastapi import APIRouter, Depends

from vite_mini.api.dependencies import get_dispatcher
from vite_mini.api.schemas import HealthResponse, ReadinessResponse
from vite_mini.core.dispatcher import Dispatcher

router = APIRouter(prefix="/__vite_mini")


@router.get("/healthz/live", response_model=HealthResponse)
async def liveness() -> HealthResponse:
    """Liveness probe."""
    return HealthResponse()


@router.get("/healthz/ready", response_model=ReadinessResponse)
async def readiness(dispatcher: Dispatcher = Depends(get_dispatcher)) -> ReadinessResponse:
    """Report the served root and pre-bundle cache state."""
    return ReadinessResponse(
        root=str(dispatcher.root),
        prebundled=len(dispatcher.cache),
        builds=dispatcher.cache.builds,
    )
