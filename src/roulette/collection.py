"""A multiset that hands out its items at random, weighted by multiplicity.

Missing items and out-of-range positions never raise. Operations that report
a position or count return :data:`NOT_FOUND` (``-1``) when the item is absent,
and operations that return an item return ``None``.
"""

import logging
from collections.abc import Hashable, Iterable, Iterator
from dataclasses import dataclass
from typing import Generic, TypeVar

from roulette.equality import Equivalence, deep_equal, fingerprint
from roulette.errors import InvalidWeightsError
from roulette.sampler import RandomSource, choose_cumulative, make_cumulative
from roulette.stats import DistributionTestResult, chi_squared_test

logger = logging.getLogger(__name__)

T = TypeVar("T")

NOT_FOUND = -1


@dataclass(frozen=True)
class RouletteOptions:
    """Construction-time settings of a :class:`Roulette`.

    Attributes:
        equal: Predicate deciding whether two items are the same entry.
        autocalibrate: Rebuild the cached distribution after every mutation
            instead of at the next draw. Never changes what gets drawn.
        indexed: Look items up through a dict keyed by
            :func:`roulette.equality.fingerprint`. Requires the default
            ``equal``. Items that cannot be fingerprinted are still found,
            by a linear scan.
        rng: Random source for draws. ``None`` uses the ``random`` module.
    """

    equal: Equivalence = deep_equal
    autocalibrate: bool = False
    indexed: bool = False
    rng: RandomSource | None = None


def _index_key(item: object) -> Hashable | None:
    """Fingerprint of ``item``, or None when it has to be found by scanning."""
    try:
        return fingerprint(item)
    except TypeError:
        return None


@dataclass(frozen=True)
class _Projection(Generic[T]):
    items: list[T]
    weights: list[float]
    cumulative: list[float]


class Roulette(Generic[T]):
    """Collection of distinct items with counts, sampled by count.

    Each item is stored once together with the number of times it has been
    added, net of removals. :meth:`get` picks an item with probability
    proportional to its count raised to an exponent. Entries whose count has
    dropped to zero stay in the collection, keep their position, and are never
    drawn until added again; only :meth:`delete` takes an entry out.

    Example:
        >>> wheel = Roulette(["a", "b", "b"])
        >>> len(wheel), wheel.count_of("b")
        (2, 2)
    """

    def __init__(
        self,
        items: Iterable[T] | None = None,
        *,
        equal: Equivalence | None = None,
        autocalibrate: bool = False,
        indexed: bool = False,
        rng: RandomSource | None = None,
    ) -> None:
        if indexed and equal is not None and equal is not deep_equal:
            raise ValueError("indexed lookup only supports the default deep_equal")

        self.options = RouletteOptions(
            equal=equal if equal is not None else deep_equal,
            autocalibrate=autocalibrate,
            indexed=indexed,
            rng=rng,
        )
        self._items: list[T] = []
        self._counts: list[int] = []
        self._index: dict[Hashable, int] | None = {} if indexed else None
        self._calibration: _Projection[T] | None = None

        if items is not None:
            self.extend(items)

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    def index_of(self, item: T) -> int:
        """Position of the entry matching ``item``, or -1."""
        if self._index is not None:
            key = _index_key(item)
            if key is not None:
                return self._index.get(key, NOT_FOUND)

        equal = self.options.equal
        for i, existing in enumerate(self._items):
            if equal(item, existing):
                return i
        return NOT_FOUND

    def has(self, item: T) -> bool:
        """Whether ``item`` has an entry, even one with a count of zero."""
        return self.index_of(item) >= 0

    def at(self, index: int) -> T | None:
        """Item at ``index``, or None outside ``[0, len(self))``."""
        if 0 <= index < len(self._items):
            return self._items[index]
        return None

    def count_of(self, item: T) -> int:
        """Count of ``item``; 0 both for absent items and zeroed entries."""
        idx = self.index_of(item)
        if idx < 0:
            return 0
        return self._counts[idx]

    def count_at(self, index: int) -> int:
        """Count at ``index``, or 0 outside ``[0, len(self))``."""
        if 0 <= index < len(self._counts):
            return self._counts[index]
        return 0

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------

    def add(self, item: T) -> int:
        """Add one instance of ``item`` and return its new count."""
        count = self._increment(item)
        self._mutated()
        return count

    def extend(self, items: Iterable[T]) -> None:
        """Add each of ``items`` in turn.

        If iterating ``items`` fails partway, the items added so far stay added.
        """
        try:
            for item in items:
                self._increment(item)
        finally:
            # One calibration for the whole batch.
            self._mutated()

    def remove(self, item: T) -> int:
        """Take away one instance of ``item``.

        Returns the remaining count, which never goes below zero, or -1 if the
        item has no entry. The entry itself is kept.
        """
        idx = self.index_of(item)
        if idx < 0:
            return NOT_FOUND

        if self._counts[idx] > 0:
            self._counts[idx] -= 1
            self._mutated()
        return self._counts[idx]

    def remove_all(self, items: Iterable[T]) -> list[int]:
        """Call :meth:`remove` for each of ``items`` and return the results."""
        return [self.remove(item) for item in items]

    def purge(self, item: T) -> int:
        """Set the count of ``item`` to zero, keeping its entry.

        Returns the entry's index, or -1 if the item has no entry.
        """
        idx = self.index_of(item)
        if idx < 0:
            return NOT_FOUND

        self._counts[idx] = 0
        self._mutated()
        return idx

    def delete(self, item: T) -> int:
        """Remove the entry for ``item`` entirely.

        Every later entry moves down one position. Returns the index the entry
        had, or -1 if the item has no entry.
        """
        idx = self.index_of(item)
        if idx < 0:
            return NOT_FOUND

        stored = self._items.pop(idx)
        del self._counts[idx]
        if self._index is not None:
            self._index.pop(_index_key(stored), None)
            for i in range(idx, len(self._items)):
                key = _index_key(self._items[i])
                if key is not None:
                    self._index[key] = i
        logger.debug("Deleted entry at index %d", idx)

        self._mutated()
        return idx

    # ------------------------------------------------------------------
    # Sampling
    # ------------------------------------------------------------------

    def get(self, exponent: float = 1) -> T | None:
        """Draw an item at random, weighted by ``count ** exponent``.

        ``exponent=0`` makes every item with a positive count equally likely;
        larger exponents favour high counts more strongly. Returns None when no
        entry has a positive count.
        """
        projection = self._projection(exponent)
        if not projection.items:
            logger.debug("Nothing to draw from %d entries", len(self._items))
            return None

        try:
            idx = choose_cumulative(projection.cumulative, self.options.rng)
        except InvalidWeightsError as e:
            logger.debug("No valid draw with exponent %s: %s", exponent, e)
            return None
        return projection.items[idx]

    def calibrate(self) -> None:
        """Rebuild the cached distribution used by ``get()``."""
        self._calibration = self._build_projection(1)
        logger.debug(
            "Calibrated %d active entries, total weight %s",
            len(self._calibration.items),
            self._calibration.cumulative[-1] if self._calibration.cumulative else 0,
        )

    def test_distribution(
        self, num_samples: int, exponent: float = 1
    ) -> DistributionTestResult:
        """Draw ``num_samples`` times and chi-squared test the outcome.

        Raises:
            ValueError: if ``num_samples`` is not positive or there is nothing
                to draw.
        """
        if num_samples <= 0:
            raise ValueError("num_samples must be > 0")
        projection = self._projection(exponent)
        if not projection.items:
            raise ValueError("no entry has a positive count")

        observed = [0] * len(projection.items)
        for _ in range(num_samples):
            observed[choose_cumulative(projection.cumulative, self.options.rng)] += 1
        return chi_squared_test(observed, projection.weights)

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------

    def entries(self) -> list[tuple[T, int]]:
        """All ``(item, count)`` pairs in index order."""
        return list(zip(self._items, self._counts))

    def total(self) -> int:
        """Sum of all counts."""
        return sum(self._counts)

    def active_count(self) -> int:
        """Number of entries with a positive count."""
        return sum(1 for c in self._counts if c > 0)

    def __len__(self) -> int:
        return len(self._items)

    def __contains__(self, item: object) -> bool:
        return self.has(item)  # type: ignore[arg-type]

    def __iter__(self) -> Iterator[T]:
        return iter(list(self._items))

    def __repr__(self) -> str:
        return f"Roulette({self.entries()!r})"

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _increment(self, item: T) -> int:
        idx = self.index_of(item)
        if idx >= 0:
            self._counts[idx] += 1
            return self._counts[idx]

        self._items.append(item)
        self._counts.append(1)
        if self._index is not None:
            key = _index_key(item)
            if key is not None:
                self._index[key] = len(self._items) - 1
        logger.debug("New entry at index %d", len(self._items) - 1)
        return 1

    def _mutated(self) -> None:
        self._calibration = None
        if self.options.autocalibrate:
            self.calibrate()

    def _projection(self, exponent: float) -> _Projection[T]:
        if exponent != 1:
            return self._build_projection(exponent)
        if self._calibration is None:
            self._calibration = self._build_projection(1)
        return self._calibration

    def _build_projection(self, exponent: float) -> _Projection[T]:
        items: list[T] = []
        counts: list[int] = []
        for item, count in zip(self._items, self._counts):
            if count > 0:
                items.append(item)
                counts.append(count)

        if exponent == 1 or not counts:
            weights: list[float] = list(counts)
        else:
            # Scale so the heaviest weight is 1 and large exponents cannot overflow.
            base = max(counts) if exponent > 0 else min(counts)
            weights = [(count / base) ** exponent for count in counts]
        return _Projection(items, weights, make_cumulative(weights))
