"""Weighted index selection using the roulette-wheel method.

The functions here know nothing about items or counts. They turn a list of
non-negative weights into a cumulative distribution and pick an index from it,
with probability proportional to each weight.
"""

import bisect
import math
import random
from collections.abc import Sequence
from typing import Protocol, TypeVar

from roulette.errors import InvalidWeightsError, InvariantViolationError

T = TypeVar("T")


class RandomSource(Protocol):
    """Anything that yields uniform floats in [0, 1)."""

    def random(self) -> float: ...


def make_cumulative(weights: Sequence[float]) -> list[float]:
    """Turn absolute weights into running totals.

    ``make_cumulative([1, 2, 3])`` is ``[1, 3, 6]``.
    """
    cumulative: list[float] = []
    running: float = 0
    for weight in weights:
        running += weight
        cumulative.append(running)
    return cumulative


def validate_weights(weights: Sequence[float]) -> None:
    """Raise InvalidWeightsError unless a draw from ``weights`` is possible."""
    if not weights:
        raise InvalidWeightsError("weights must be non-empty")
    for i, weight in enumerate(weights):
        if not math.isfinite(weight):
            raise InvalidWeightsError(f"weight at index {i} is not finite: {weight}")
        if weight < 0:
            raise InvalidWeightsError(f"weight at index {i} is negative: {weight}")


def choose_cumulative(cumulative: Sequence[float], rng: RandomSource | None = None) -> int:
    """Pick an index from an already cumulative weight sequence.

    Returns the first index ``i`` with ``value < cumulative[i]`` for a value
    drawn uniformly from ``[0, total)``. Zero-weight positions share their
    running total with the previous position and so can never be chosen.
    """
    if not cumulative:
        raise InvalidWeightsError("weights must be non-empty")
    total = cumulative[-1]
    if not total > 0:
        raise InvalidWeightsError(f"total weight must be positive, got {total}")

    source = rng if rng is not None else random
    value = source.random() * total

    index = bisect.bisect_right(cumulative, value)
    if index >= len(cumulative):
        raise InvariantViolationError(
            f"no index found for draw {value} with total weight {total}"
        )
    return index


def choose(weights: Sequence[float], rng: RandomSource | None = None) -> int:
    """Pick an index from ``weights`` with probability proportional to weight.

    Raises:
        InvalidWeightsError: if ``weights`` is empty, holds a negative or
            non-finite value, or sums to zero.
    """
    validate_weights(weights)
    return choose_cumulative(make_cumulative(weights), rng)


def roulette(
    items: Sequence[T],
    weights: Sequence[float] | None = None,
    rng: RandomSource | None = None,
) -> T:
    """Pick one of ``items`` by weight.

    Every item is equally likely when ``weights`` is omitted or empty.
    """
    if not weights:
        weights = [1] * len(items)
    elif len(weights) != len(items):
        raise ValueError(
            f"items and weights must have the same length "
            f"({len(items)} != {len(weights)})"
        )
    return items[choose(weights, rng)]
