"""Block event API routes."""

from __future__ import annotations

import time

from fastapi import APIRouter, Depends, HTTPException, status
from prometheus_client import Counter, Histogram

from ...application.dtos import BlockEventDTO, CycleOutcomeResponseDTO
from ...application.use_cases.redistribution import RedistributionService
from ...domain.errors import (
    CollectionError,
    FeeEstimationError,
    SubmissionError,
)
from ..dependencies import get_redistribution_service

router = APIRouter(prefix="/blocks", tags=["blocks"])


distribution_cycles_total = Counter(
    "distribution_cycles_total",
    "Blocks handled, by outcome",
    ["status"],
)

distribution_cycle_duration_seconds = Histogram(
    "distribution_cycle_duration_seconds",
    "Wall time to handle a block",
    ["status"],
)

distributed_amount_nqt_total = Counter(
    "distributed_amount_nqt_total",
    "Net amount paid out to selected payers",
)


def _observe(label: str, start_time: float) -> None:
    distribution_cycles_total.labels(status=label).inc()
    elapsed = time.perf_counter() - start_time
    distribution_cycle_duration_seconds.labels(status=label).observe(elapsed)


@router.post("/", response_model=CycleOutcomeResponseDTO)
async def on_block(
    block: BlockEventDTO,
    service: RedistributionService = Depends(get_redistribution_service),
) -> CycleOutcomeResponseDTO:
    """Handle a newly accepted block and distribute the pot if it triggers."""
    start_time = time.perf_counter()
    try:
        outcome = await service.on_block(block.height)
    except CollectionError as e:
        _observe("collection_error", start_time)
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(e))
    except FeeEstimationError as e:
        _observe("fee_error", start_time)
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(e))
    except SubmissionError as e:
        _observe("submission_error", start_time)
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(e))
    except ValueError as e:
        _observe("client_error", start_time)
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    _observe(outcome.status, start_time)
    if outcome.payout is not None:
        distributed_amount_nqt_total.inc(outcome.payout.net_amount_nqt)
    return CycleOutcomeResponseDTO.from_outcome(outcome)
