"""Package initialization for roulette.

A multiset of items with counts that draws items at random, weighted by count
raised to an optional exponent.
"""

import logging

from roulette.collection import NOT_FOUND, Roulette, RouletteOptions
from roulette.equality import Equivalence, deep_equal, fingerprint
from roulette.errors import InvalidWeightsError, InvariantViolationError, RouletteError
from roulette.sampler import RandomSource, choose, make_cumulative, roulette
from roulette.stats import DistributionTestResult, chi_squared_test

logging.getLogger(__name__).addHandler(logging.NullHandler())

__version__ = "0.1.0"
__all__ = [
    "NOT_FOUND",
    "DistributionTestResult",
    "Equivalence",
    "InvalidWeightsError",
    "InvariantViolationError",
    "RandomSource",
    "Roulette",
    "RouletteError",
    "RouletteOptions",
    "chi_squared_test",
    "choose",
    "deep_equal",
    "fingerprint",
    "make_cumulative",
    "roulette",
]
