"""Tests for settings loading."""

from __future__ import annotations

import pytest

from allforone.domain.entities import PaymentKind
from allforone.domain.errors import ConfigurationError
from allforone.env import get_settings

REQUIRED = {
    "ALLFORONE_CHAIN": "2",
    "ALLFORONE_FREQUENCY": "10",
    "ALLFORONE_ACCOUNT": "ARDOR-ACC",
    "ALLFORONE_SECRET_PHRASE": "secret words",
    "LEDGER_BASE_URL": "http://localhost:27876/",
}

OPTIONAL = [
    "ALLFORONE_MIN_LEDGER_HEIGHT",
    "ALLFORONE_PAYMENT_KINDS",
    "ALLFORONE_RANDOM_SEED",
    "LEDGER_TIMEOUT",
    "DATABASE_URL",
    "API_HOST",
    "API_PORT",
    "API_DEBUG",
    "POLL_INTERVAL",
    "APP_NAME",
    "APP_VERSION",
]


@pytest.fixture
def env(monkeypatch: pytest.MonkeyPatch) -> pytest.MonkeyPatch:
    for name in OPTIONAL:
        monkeypatch.delenv(name, raising=False)
    for name, value in REQUIRED.items():
        monkeypatch.setenv(name, value)
    return monkeypatch


def test_defaults(env: pytest.MonkeyPatch) -> None:
    settings = get_settings()

    assert settings.chain == 2
    assert settings.frequency == 10
    assert settings.account == "ARDOR-ACC"
    assert settings.secret_phrase.get_secret_value() == "secret words"
    assert settings.ledger_base_url == "http://localhost:27876"
    assert settings.minimum_ledger_height == 2
    assert settings.payment_kinds == {}
    assert settings.random_seed is None
    assert settings.poll_interval == 0.0


def test_secret_is_not_printed(env: pytest.MonkeyPatch) -> None:
    assert "secret words" not in repr(get_settings())


@pytest.mark.parametrize("name", list(REQUIRED))
def test_missing_required_variable(env: pytest.MonkeyPatch, name: str) -> None:
    env.delenv(name)

    with pytest.raises(ConfigurationError, match="required"):
        get_settings()


def test_non_integer_frequency(env: pytest.MonkeyPatch) -> None:
    env.setenv("ALLFORONE_FREQUENCY", "ten")

    with pytest.raises(ConfigurationError, match="ALLFORONE_FREQUENCY"):
        get_settings()


def test_zero_frequency(env: pytest.MonkeyPatch) -> None:
    env.setenv("ALLFORONE_FREQUENCY", "0")

    with pytest.raises(ConfigurationError, match="Invalid settings"):
        get_settings()


def test_bad_ledger_url(env: pytest.MonkeyPatch) -> None:
    env.setenv("LEDGER_BASE_URL", "ftp://node")

    with pytest.raises(ConfigurationError, match="http"):
        get_settings()


def test_payment_kind_overrides(env: pytest.MonkeyPatch) -> None:
    env.setenv("ALLFORONE_PAYMENT_KINDS", '{"3": [7, 1]}')

    settings = get_settings()

    assert settings.payment_kinds == {3: PaymentKind(type=7, subtype=1)}


def test_bad_payment_kinds(env: pytest.MonkeyPatch) -> None:
    env.setenv("ALLFORONE_PAYMENT_KINDS", '{"3": "x"}')

    with pytest.raises(ConfigurationError, match="ALLFORONE_PAYMENT_KINDS"):
        get_settings()


def test_seed_and_poll_interval(env: pytest.MonkeyPatch) -> None:
    env.setenv("ALLFORONE_RANDOM_SEED", "42")
    env.setenv("POLL_INTERVAL", "2.5")

    settings = get_settings()

    assert settings.random_seed == 42
    assert settings.poll_interval == 2.5
