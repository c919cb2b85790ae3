import threading
import warnings
from copy import deepcopy
from typing import (
    Any,
    Callable,
    Generic,
    Iterable,
    List,
    Optional,
    Tuple,
    TypeVar,
)

import atomics

from tally.core.counter import Counter, Operand
from tally.core.hashing import HashStrategy
from tally.core.ranking import Tiebreaker

_T = TypeVar("_T")


class ConcurrentCounter(Generic[_T]):
    """
    A thread-safe Counter wrapper using:
    - an inner ``Counter`` with integer counts
    - a reentrant lock for synchronization
    - an atomic integer holding the total of all counts, for lock-free ``total()``

    Every mutation goes through the lock and keeps the atomic total in step.
    Queries that return data (rankings, snapshots) copy under the lock, so the
    caller owns the result and later writes never reach it.
    """

    def __init__(
        self,
        initial: Optional[Iterable[_T]] = None,
        *,
        hash_strategy: Optional[HashStrategy] = None,
        width: int = 8,
    ) -> None:
        """
        Initialize the ConcurrentCounter.

        Args:
            initial (Iterable[_T], optional): Elements to count, or a Counter, Mapping or ConcurrentCounter
                of integer counts to start from.
            hash_strategy (HashStrategy, optional): Passed to the inner Counter.
            width (int, optional): Width in bytes of the atomic total (default 8,
                a signed 64-bit integer). A total that no longer fits wraps
                around, so narrow widths only suit small tallies.

        Raises:
            TypeError: If ``initial`` is not iterable or holds non-integer counts.
        """
        self._lock = threading.RLock()
        self._counter: Counter[_T, int] = Counter(count_type=int, hash_strategy=hash_strategy)
        self.counter = atomics.atomic(width=width, atype=atomics.INT)
        self.counter.store(0)

        if initial is not None:
            operand = self._integral_operand(initial)
            self._counter.update(operand)
            self.counter.store(self._counter.total())

    @staticmethod
    def _check_integral(counter: Counter) -> None:
        for count in counter.values():
            if not isinstance(count, int):
                raise TypeError(f"ConcurrentCounter counts must be int, got {type(count).__name__}")

    def _integral_operand(self, other: Any) -> Counter[_T, int]:
        """
        Turn an operand into a Counter of int counts without touching this object.

        Raises:
            TypeError: If ``other`` is not iterable or carries non-integer counts.
        """
        if isinstance(other, ConcurrentCounter):
            return other.snapshot()
        if isinstance(other, Counter):
            operand = other
        else:
            operand = Counter(other, count_type=int, hash_strategy=self._counter.hash_strategy)
        self._check_integral(operand)
        return operand

    def _resync(self) -> None:
        """Recompute the atomic total from the inner counter. Caller holds the lock."""
        self.counter.store(self._counter.total())

    def add(self, element: _T, n: int = 1) -> None:
        """
        Add ``n`` occurrences of ``element``.

        Args:
            element (_T): The element to count.
            n (int, optional): How many occurrences to add. May be negative.
        """
        if not isinstance(n, int):
            raise TypeError("n must be an int")
        with self._lock:
            self._counter[element] = self._counter.get(element) + n
            self.counter.fetch_add(n)

    def update(self, other: Operand) -> None:
        """
        Add counts from a Counter, a ConcurrentCounter, a Mapping, or an iterable of elements.

        The operand is validated before anything changes, so a failed call
        leaves the counts and the total as they were.

        Raises:
            TypeError: If ``other`` is not iterable or carries non-integer counts.
        """
        operand = self._integral_operand(other)
        with self._lock:
            self._counter.update(operand)
            self.counter.fetch_add(operand.total())

    def merge(self, other: Counter[_T, int]) -> None:
        """
        Add a whole Counter in one step.

        Typical use is reducing per-thread counters into a shared one.
        """
        self.update(other)

    def subtract(self, other: Operand) -> None:
        """
        Subtract counts, keeping only elements left with a positive count.

        Raises:
            TypeError: If ``other`` is not iterable or carries non-integer counts.
        """
        operand = self._integral_operand(other)
        with self._lock:
            self._counter.subtract(operand)
            self._resync()

    def get(self, element: _T) -> int:
        """Return the count of ``element`` (zero if absent)."""
        with self._lock:
            return self._counter.get(element)

    def __getitem__(self, element: _T) -> int:
        return self.get(element)

    def __contains__(self, element: object) -> bool:
        with self._lock:
            return element in self._counter

    def distinct(self) -> int:
        """Return the number of distinct stored elements."""
        with self._lock:
            return len(self._counter)

    def total(self) -> int:
        """Return the sum of all counts, read from the atomic total without locking."""
        return self.counter.load()

    def __len__(self) -> int:
        """Return the number of distinct stored elements."""
        return self.distinct()

    def __bool__(self) -> bool:
        return self.distinct() != 0

    def clear(self) -> None:
        """Remove every entry."""
        with self._lock:
            self._counter.clear()
            self.counter.store(0)

    def most_common(self) -> List[Tuple[_T, int]]:
        with self._lock:
            return self._counter.most_common()

    def most_common_ordered(self) -> List[Tuple[_T, int]]:
        with self._lock:
            return self._counter.most_common_ordered()

    def most_common_tiebreaker(self, tiebreaker: Tiebreaker) -> List[Tuple[_T, int]]:
        with self._lock:
            return self._counter.most_common_tiebreaker(tiebreaker)

    def k_most_common_ordered(self, k: int, tiebreaker: Optional[Tiebreaker] = None) -> List[Tuple[_T, int]]:
        with self._lock:
            return self._counter.k_most_common_ordered(k, tiebreaker)

    def snapshot(self) -> Counter[_T, int]:
        """
        Return a copy of the current tallies as a plain Counter.

        Returns:
            Counter[_T, int]: Independent of this object; safe to use without locking.
        """
        with self._lock:
            return self._counter.copy()

    def batch_update(self, func: Callable[[Counter[_T, int]], None]) -> None:
        """
        Perform several operations on the inner Counter under one lock acquisition.

        Args:
            func (Callable[[Counter[_T, int]], None]):
                Receives a working copy of the inner Counter and performs all
                the mutations. The copy replaces the inner Counter only if
                every count is still an int; the atomic total is then recomputed.

        Raises:
            TypeError: If ``func`` left a non-integer count. Nothing is applied.
        """
        with self._lock:
            working = self._counter.copy()
            func(working)
            self._check_integral(working)
            self._counter = working
            self._resync()

    def __eq__(self, other: object) -> bool:
        if isinstance(other, ConcurrentCounter):
            # one lock at a time
            other = other.snapshot()
        if isinstance(other, Counter):
            with self._lock:
                return self._counter == other
        return NotImplemented

    __hash__ = None  # type: ignore[assignment]

    # not iterable; iterate over snapshot()
    __iter__ = None  # type: ignore[assignment]

    def copy(self) -> "ConcurrentCounter[_T]":
        """Return a shallow copy of the ConcurrentCounter."""
        with self._lock:
            return ConcurrentCounter(self._counter, hash_strategy=self._counter.hash_strategy)

    def __copy__(self) -> "ConcurrentCounter[_T]":
        return self.copy()

    def __deepcopy__(self, memo: dict) -> "ConcurrentCounter[_T]":
        """
        Return a deep copy of the ConcurrentCounter.

        Args:
            memo (dict): Memoization dictionary for deepcopy.
        """
        with self._lock:
            inner = deepcopy(self._counter, memo)
        return ConcurrentCounter(inner, hash_strategy=inner.hash_strategy)

    def __enter__(self) -> Counter[_T, int]:
        """
        Enter the runtime context and acquire the lock.

        WARNING:
            The inner Counter is returned as is. The atomic total is recomputed
            on exit, but ``total()`` read by other threads meanwhile may be stale.

        Returns:
            Counter[_T, int]: The inner counter (use with caution).
        """
        warnings.warn(
            "Direct access to the inner Counter via the context manager bypasses "
            "the thread-safe interface. Use with extreme caution.",
            UserWarning
        )
        self._lock.acquire()
        return self._counter

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """
        Exit the runtime context, resynchronize the total and release the lock.
        """
        try:
            self._resync()
        finally:
            self._lock.release()

    def __repr__(self) -> str:
        with self._lock:
            return f"{self.__class__.__name__}({dict(self._counter.items())!r})"
