"""Backend liveness route."""

from fastapi import APIRouter
from fastapi.responses import PlainTextResponse

router = APIRouter()


@router.get("/", response_class=PlainTextResponse)
def connection_ok() -> str:
    """Let the browser verify the backend is reachable."""
    return "Backend active"


__all__ = ["router"]
