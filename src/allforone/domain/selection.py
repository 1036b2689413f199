"""Weighted random selection of the payout recipient."""

from __future__ import annotations

import random
from typing import Hashable, Iterable, Mapping, TypeVar

from .entities import PaymentEvent

K = TypeVar("K", bound=Hashable)


def build_weight_table(events: Iterable[PaymentEvent]) -> dict[str, int]:
    """Sum payment amounts per sender, keeping the order senders first appear in."""
    weights: dict[str, int] = {}
    for event in events:
        weights[event.sender] = weights.get(event.sender, 0) + event.amount_nqt
    return weights


def select_weighted(weights: Mapping[K, int | float], rng: random.Random) -> K:
    """Pick one key with probability proportional to its weight.

    Draws a single threshold uniformly in ``[0, total)`` and walks the
    mapping in iteration order, returning the first key whose running sum
    exceeds it. Integer totals are drawn with ``randrange`` so the odds are
    exact. Zero-weight keys are never returned.

    Raises:
        ValueError: if the mapping is empty, contains a negative weight or
            sums to zero.
    """
    if not weights:
        raise ValueError("Cannot select from an empty weight table")
    if any(weight < 0 for weight in weights.values()):
        raise ValueError("Weights must be non-negative")

    total = sum(weights.values())
    if total <= 0:
        raise ValueError("Weights must sum to a positive amount")

    if isinstance(total, int):
        threshold: int | float = rng.randrange(total)
    else:
        threshold = rng.random() * total

    positive = [(key, weight) for key, weight in weights.items() if weight > 0]
    running: int | float = 0
    for key, weight in positive:
        running += weight
        if running > threshold:
            return key

    # Only reachable through float rounding in the running sum.
    return positive[-1][0]
