"""Goodness-of-fit check for sampled frequencies."""

from collections.abc import Sequence
from dataclasses import dataclass

from scipy import stats


@dataclass(frozen=True)
class DistributionTestResult:
    """Outcome of a chi-squared test of observed draws against weights."""

    chi_squared: float
    p_value: float
    degrees_of_freedom: int

    def passes(self, alpha: float = 0.05) -> bool:
        """Whether the sample is consistent with the weights at level ``alpha``."""
        return self.p_value >= alpha


def chi_squared_test(
    observed: Sequence[int], weights: Sequence[float]
) -> DistributionTestResult:
    """Compare observed per-index counts with the counts ``weights`` predict.

    Positions with zero weight are left out of the test. Any observation at
    such a position is impossible under the weights, so the result is an
    automatic failure.
    """
    if len(observed) != len(weights):
        raise ValueError(
            f"observed and weights must have the same length "
            f"({len(observed)} != {len(weights)})"
        )

    total_weight = sum(weights)
    num_samples = sum(observed)
    if total_weight <= 0 or num_samples <= 0:
        raise ValueError("need positive total weight and at least one sample")

    if any(count and not weight for count, weight in zip(observed, weights)):
        return DistributionTestResult(
            chi_squared=float("inf"), p_value=0.0, degrees_of_freedom=0
        )

    kept_observed: list[int] = []
    expected: list[float] = []
    for count, weight in zip(observed, weights):
        if weight > 0:
            kept_observed.append(count)
            expected.append(num_samples * weight / total_weight)

    dof = len(expected) - 1
    if dof == 0:
        # A single possible outcome always matches.
        return DistributionTestResult(chi_squared=0.0, p_value=1.0, degrees_of_freedom=0)

    result = stats.chisquare(kept_observed, f_exp=expected)
    return DistributionTestResult(
        chi_squared=float(result.statistic),
        p_value=float(result.pvalue),
        degrees_of_freedom=dof,
    )
