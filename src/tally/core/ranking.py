import heapq
from typing import (
    Any,
    Callable,
    Iterable,
    List,
    Optional,
    Tuple,
    TypeVar,
)

_T = TypeVar("_T")
_N = TypeVar("_N")

Entry = Tuple[_T, _N]
Tiebreaker = Callable[[_T, _T], int]


def natural_order(a: Any, b: Any) -> int:
    """Three-way comparison using the elements' own ``<``."""
    if a < b:
        return -1
    if b < a:
        return 1
    return 0


def reverse_order(a: Any, b: Any) -> int:
    """Three-way comparison that sorts elements descending."""
    return natural_order(b, a)


def no_order(a: Any, b: Any) -> int:
    """Treat every pair of elements as tied; the sort keeps their input order."""
    return 0


class _RankKey:
    """
    Sort key for an (element, count) entry.

    ``a < b`` means ``a`` is listed before ``b``: higher count first, then the
    tiebreaker's order. Only ``<`` on counts is used, so partially ordered count
    types work and unsigned counts are never negated.
    """

    __slots__ = ("entry", "_tiebreaker")

    def __init__(self, entry: Entry, tiebreaker: Tiebreaker) -> None:
        self.entry = entry
        self._tiebreaker = tiebreaker

    def __lt__(self, other: "_RankKey") -> bool:
        count, other_count = self.entry[1], other.entry[1]
        if other_count < count:
            return True
        if count < other_count:
            return False
        return self._tiebreaker(self.entry[0], other.entry[0]) < 0


class _HeapSlot:
    """Inverts ``_RankKey`` so the heap root is the worst-ranked entry kept so far."""

    __slots__ = ("rank",)

    def __init__(self, rank: _RankKey) -> None:
        self.rank = rank

    def __lt__(self, other: "_HeapSlot") -> bool:
        return other.rank < self.rank


def _check_tiebreaker(tiebreaker: Tiebreaker) -> None:
    if not callable(tiebreaker):
        raise TypeError("tiebreaker must be callable")


def sort_entries(entries: Iterable[Entry], tiebreaker: Tiebreaker = natural_order) -> List[Entry]:
    """
    Return every entry ordered by count descending, ties broken by ``tiebreaker``.

    The sort is stable, so entries the tiebreaker considers equal keep the order
    in which ``entries`` produced them.
    """
    _check_tiebreaker(tiebreaker)
    return sorted(entries, key=lambda entry: _RankKey(entry, tiebreaker))


def select_top_k(
    entries: Iterable[Entry],
    k: int,
    tiebreaker: Tiebreaker = natural_order,
    size: Optional[int] = None,
) -> List[Entry]:
    """
    Return the first ``k`` entries of ``sort_entries(entries, tiebreaker)``.

    A min-heap of at most ``k`` slots is kept over a single pass, its root being
    the worst entry retained. Each further entry either replaces the root or is
    skipped, for O(n log k) comparisons instead of a full O(n log n) sort.

    Args:
        entries: (element, count) pairs.
        k (int): Number of entries wanted. Must be >= 0.
        tiebreaker: Three-way comparison applied to elements of equal count.
        size (int, optional): Number of entries, when known. If ``k`` covers all
            of them the full sort is used directly.

    Raises:
        ValueError: If ``k`` is negative.
        TypeError: If ``tiebreaker`` is not callable.
    """
    if k < 0:
        raise ValueError("k must be non-negative")
    _check_tiebreaker(tiebreaker)
    if k == 0:
        return []
    if size is not None and k >= size:
        return sort_entries(entries, tiebreaker)

    heap: List[_HeapSlot] = []
    for entry in entries:
        rank = _RankKey(entry, tiebreaker)
        if len(heap) < k:
            heapq.heappush(heap, _HeapSlot(rank))
        elif rank < heap[0].rank:
            heapq.heapreplace(heap, _HeapSlot(rank))

    return [slot.rank.entry for slot in sorted(heap, key=lambda slot: slot.rank)]
