"""Status API routes."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status
from prometheus_client import Counter

from ...application.dtos import StatusResponseDTO
from ...application.use_cases.status import StatusReporter
from ...domain.errors import CollectionError
from ..dependencies import get_status_reporter

router = APIRouter(prefix="/status", tags=["status"])


status_requests_total = Counter(
    "status_requests_total",
    "Total status requests processed",
    ["status"],
)


@router.get("/", response_model=StatusResponseDTO)
async def get_status(
    reporter: StatusReporter = Depends(get_status_reporter),
) -> StatusResponseDTO:
    """Return the payments waiting for the next distribution."""
    try:
        result = await reporter.get_status()
    except CollectionError as e:
        status_requests_total.labels(status="server_error").inc()
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(e))
    status_requests_total.labels(status="success").inc()
    return result
