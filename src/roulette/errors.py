"""Exception types raised by the roulette package.

Missing items and out-of-range indices are reported through sentinel return
values on :class:`roulette.Roulette`, so only the sampler raises.
"""


class RouletteError(Exception):
    """Base class for all roulette errors."""


class InvalidWeightsError(RouletteError, ValueError):
    """No valid draw is possible from the given weights.

    Raised for an empty weight list, negative or non-finite weights, or a
    total weight that is not positive.
    """


class InvariantViolationError(RouletteError, AssertionError):
    """The cumulative weight scan found no index for a valid draw."""
