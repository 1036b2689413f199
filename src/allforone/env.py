from __future__ import annotations

import json
import os
from typing import Optional
from urllib.parse import urlparse

from pydantic import BaseModel, Field, SecretStr, ValidationError, field_validator

from .domain.entities import PaymentKind
from .domain.errors import ConfigurationError


class Settings(BaseModel):
    """Typed application settings built from environment variables."""

    # Distribution settings
    chain: int = Field(..., gt=0)
    frequency: int = Field(..., gt=0)
    account: str
    secret_phrase: SecretStr
    minimum_ledger_height: int = Field(2, ge=0)
    payment_kinds: dict[int, PaymentKind] = {}
    random_seed: Optional[int] = None

    # Ledger settings
    ledger_base_url: str
    ledger_timeout: float = Field(10.0, gt=0)

    # Watermark storage
    database_url: str = "redis://localhost:6379/0"

    # API settings
    api_host: str = "0.0.0.0"
    api_port: int = 8000
    api_debug: bool = False
    poll_interval: float = Field(0.0, ge=0)

    # Application settings
    app_name: str = "AllForOne"
    app_version: str = "1.0.0"

    @field_validator("account")
    @classmethod
    def validate_account(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("Monitored account cannot be empty")
        return v.strip()

    @field_validator("ledger_base_url")
    @classmethod
    def validate_ledger_base_url(cls, v: str) -> str:
        if not v:
            raise ValueError("Ledger base URL cannot be empty")
        parsed = urlparse(v)
        if parsed.scheme not in {"http", "https"}:
            raise ValueError("Ledger base URL must start with http:// or https://")
        if not parsed.netloc:
            raise ValueError("Ledger base URL must include a host")
        return v.rstrip("/")


def _parse_payment_kinds(raw: Optional[str]) -> dict[int, PaymentKind]:
    """Parse ``{"<chain>": [type, subtype]}`` JSON into a kind table."""
    if not raw:
        return {}
    try:
        data = json.loads(raw)
        return {
            int(chain): PaymentKind(type=int(pair[0]), subtype=int(pair[1]))
            for chain, pair in data.items()
        }
    except (ValueError, TypeError, IndexError, AttributeError) as e:
        raise ConfigurationError(f"Invalid ALLFORONE_PAYMENT_KINDS: {e}") from e


def _parse_int(name: str) -> Optional[int]:
    value = os.environ.get(name)
    if value is None or value == "":
        return None
    try:
        return int(value)
    except ValueError as e:
        raise ConfigurationError(f"{name} must be an integer, got {value!r}") from e


def _parse_float(name: str, default: float) -> float:
    value = os.environ.get(name)
    if value is None or value == "":
        return default
    try:
        return float(value)
    except ValueError as e:
        raise ConfigurationError(f"{name} must be a number, got {value!r}") from e


def get_settings() -> Settings:
    """Return typed settings instance sourced from env vars.

    Raises:
        ConfigurationError: if a required variable is missing or a value is invalid.
    """
    chain = _parse_int("ALLFORONE_CHAIN")
    frequency = _parse_int("ALLFORONE_FREQUENCY")
    account = os.environ.get("ALLFORONE_ACCOUNT")
    secret_phrase = os.environ.get("ALLFORONE_SECRET_PHRASE")
    ledger_base_url = os.environ.get("LEDGER_BASE_URL")
    if chain is None or frequency is None or not account or not secret_phrase:
        raise ConfigurationError(
            "ALLFORONE_CHAIN, ALLFORONE_FREQUENCY, ALLFORONE_ACCOUNT and "
            "ALLFORONE_SECRET_PHRASE are required"
        )
    if not ledger_base_url:
        raise ConfigurationError("LEDGER_BASE_URL is required")

    minimum_ledger_height = _parse_int("ALLFORONE_MIN_LEDGER_HEIGHT")
    try:
        return Settings(
            chain=chain,
            frequency=frequency,
            account=account,
            secret_phrase=secret_phrase,
            minimum_ledger_height=2
            if minimum_ledger_height is None
            else minimum_ledger_height,
            payment_kinds=_parse_payment_kinds(
                os.environ.get("ALLFORONE_PAYMENT_KINDS")
            ),
            random_seed=_parse_int("ALLFORONE_RANDOM_SEED"),
            ledger_base_url=ledger_base_url,
            ledger_timeout=_parse_float("LEDGER_TIMEOUT", 10.0),
            database_url=os.environ.get("DATABASE_URL", "redis://localhost:6379/0"),
            api_host=os.environ.get("API_HOST", "0.0.0.0"),
            api_port=_parse_int("API_PORT") or 8000,
            api_debug=os.environ.get("API_DEBUG", "false").lower() == "true",
            poll_interval=_parse_float("POLL_INTERVAL", 0.0),
            app_name=os.environ.get("APP_NAME", "AllForOne"),
            app_version=os.environ.get("APP_VERSION", "1.0.0"),
        )
    except ValidationError as e:
        raise ConfigurationError(f"Invalid settings: {e}") from e
