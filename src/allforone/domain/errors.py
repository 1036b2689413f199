"""Domain-specific exceptions."""

from __future__ import annotations


class DistributionError(Exception):
    """Base class for every failure raised while running a distribution cycle."""


class ConfigurationError(DistributionError):
    """Raised when settings are missing or invalid."""


class SkipCondition(DistributionError):
    """Raised when a block must not trigger a cycle.

    Not a failure: off-trigger heights and heights that were already
    distributed end up here and are reported as a skipped outcome.
    """

    def __init__(self, height: int, reason: str) -> None:
        super().__init__(f"Skipping block at height {height}: {reason}")
        self.height = height
        self.reason = reason


class CollectionError(DistributionError):
    """Raised when the payment window cannot be read from the ledger."""


class FeeEstimationError(DistributionError):
    """Raised when the payout fee cannot be computed."""


class SubmissionError(DistributionError):
    """Raised when the ledger rejects or fails to accept the payout."""


class LedgerRequestError(Exception):
    """Raised by the ledger client for transport, HTTP or node-level errors."""

    def __init__(
        self,
        request_type: str,
        message: str,
        *,
        error_code: int | None = None,
    ) -> None:
        super().__init__(f"{request_type}: {message}")
        self.request_type = request_type
        self.error_code = error_code
