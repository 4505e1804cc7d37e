"""FastAPI application for tplog.

Endpoints:
- POST /analyze: Reconstruct sessions from a batch of events
- GET /health: Liveness check

Security:
- Set TPLOG_API_KEY env var to require authentication
- Payload size limited to 1MB by default (TPLOG_MAX_PAYLOAD_SIZE)
"""

import os

from fastapi import Depends, FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse
from fastapi.security import APIKeyHeader
from pydantic import BaseModel

from tplog.models.events import LogEvent
from tplog.models.derived import AnalysisResult
from tplog.reducers.analysis import analyze_events, sort_events


# -----------------------------------------------------------------------------
# Security configuration
# -----------------------------------------------------------------------------

API_KEY_HEADER = APIKeyHeader(name="X-API-Key", auto_error=False)
MAX_PAYLOAD_SIZE = int(os.environ.get("TPLOG_MAX_PAYLOAD_SIZE", 1024 * 1024))  # 1MB default


# -----------------------------------------------------------------------------
# Request models
# -----------------------------------------------------------------------------


class AnalyzeRequest(BaseModel):
    """Request body for POST /analyze.

    Events need not be sorted; the server sorts them by ts, keeping the
    submitted order for equal timestamps.
    """

    events: list[LogEvent]


# -----------------------------------------------------------------------------
# App factory
# -----------------------------------------------------------------------------


def create_app(
    require_api_key: bool | None = None,
    max_payload_size: int | None = None,
) -> FastAPI:
    """Create the FastAPI app.

    Args:
        require_api_key: If True, require X-API-Key header. If None, uses
                         TPLOG_API_KEY env var (enabled if set).
        max_payload_size: Maximum request payload size in bytes. Defaults to
                         TPLOG_MAX_PAYLOAD_SIZE env var or 1MB.

    Returns:
        Configured FastAPI application.
    """
    api_key = os.environ.get("TPLOG_API_KEY")
    if require_api_key is None:
        require_api_key = api_key is not None

    if max_payload_size is None:
        max_payload_size = MAX_PAYLOAD_SIZE

    app = FastAPI(
        title="tplog API",
        description="Teleport session analysis",
        version="0.1.0",
    )

    app.state.require_api_key = require_api_key
    app.state.api_key = api_key

    @app.middleware("http")
    async def reject_large_batches(request: Request, call_next):
        """Answer 413 before reading a body over the size limit."""
        declared = request.headers.get("content-length")
        if declared and int(declared) > max_payload_size:
            return JSONResponse(
                status_code=413,
                content={"detail": f"Payload too large. Maximum size is {max_payload_size} bytes."},
            )
        return await call_next(request)

    async def require_key(key: str | None = Depends(API_KEY_HEADER)):
        if app.state.require_api_key and (not key or key != app.state.api_key):
            raise HTTPException(
                status_code=401,
                detail="Invalid or missing API key. Set X-API-Key header.",
            )

    @app.post("/analyze", response_model=AnalysisResult, dependencies=[Depends(require_key)])
    async def analyze(request: AnalyzeRequest) -> AnalysisResult:
        """Reconstruct sessions and return their summaries."""
        return analyze_events(sort_events(request.events))

    @app.get("/health")
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    return app


# Default app instance
app = create_app()
