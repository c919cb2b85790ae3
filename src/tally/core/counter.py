from copy import deepcopy
from itertools import repeat
from types import MappingProxyType
from typing import (
    Any,
    Callable,
    Generic,
    ItemsView,
    Iterable,
    Iterator,
    KeysView,
    List,
    Mapping,
    MutableMapping,
    Optional,
    Tuple,
    TypeVar,
    Union,
    ValuesView,
)

from tally.core.hashing import DefaultHashStrategy, HashStrategy
from tally.core.ranking import (
    Tiebreaker,
    natural_order,
    no_order,
    select_top_k,
    sort_entries,
)

_T = TypeVar("_T")
_N = TypeVar("_N")

Operand = Union["Counter[_T, _N]", Mapping[_T, _N], Iterable[_T]]


class Counter(Generic[_T, _N]):
    """
    A multiset ("bag") that tallies how many times each element occurs.

    Storage is a single mapping of element -> count, built by a pluggable
    ``HashStrategy`` (a plain ``dict`` by default). Counts are instances of
    ``count_type``: ``count_type()`` is zero and ``count_type(1)`` is one. Any
    numeric type with ``+``, ``-`` and ``<`` works, signed or unsigned; its own
    overflow rules apply, the counter adds no checking.

    An element that is not stored reads as zero, and reading never stores it.
    Only assignment, ``update`` and the arithmetic operators create entries.
    Counts are free to be zero or negative.

    Arithmetic operators accept another Counter, a Mapping (taken as counts) or
    any other iterable of elements (one per occurrence):

      - ``c + d``: count sum, every result retained
      - ``c - d``: count difference, only strictly positive results retained
      - ``c & d``: per-element minimum, only strictly positive results retained
      - ``c | d``: per-element maximum

    The counter is not synchronized; see ``ConcurrentCounter`` for a locked
    wrapper.
    """

    def __init__(
        self,
        iterable: Optional[Operand] = None,
        *,
        count_type: Callable[..., _N] = int,
        hash_strategy: Optional[HashStrategy] = None,
        capacity: int = 0,
    ) -> None:
        """
        Initialize the Counter.

        Args:
            iterable (optional): Elements to count, one per occurrence. A Counter
                or Mapping is read as element -> count instead.
            count_type (callable, optional): Numeric type of the counts. Defaults to int.
            hash_strategy (HashStrategy, optional): Builds the backing mapping.
                Defaults to ``DefaultHashStrategy()``.
            capacity (int, optional): Expected number of distinct elements,
                passed to the strategy as a sizing hint.

        Raises:
            ValueError: If capacity is negative.
        """
        if capacity < 0:
            raise ValueError("capacity must be non-negative")
        self._count_type = count_type
        self._hash_strategy = hash_strategy if hash_strategy is not None else DefaultHashStrategy()
        self._zero: _N = count_type()
        self._one: _N = count_type(1)
        self._map: MutableMapping[_T, _N] = self._hash_strategy.new_map(capacity)

        if iterable is not None:
            self.update(iterable)

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    @classmethod
    def with_capacity(cls, capacity: int, **config: Any) -> "Counter[_T, _N]":
        """
        Return an empty Counter pre-sized for ``capacity`` distinct elements.

        The capacity is a performance hint, never a limit.
        """
        return cls(capacity=capacity, **config)

    @classmethod
    def from_pairs(cls, pairs: Iterable[Tuple[_T, _N]], **config: Any) -> "Counter[_T, _N]":
        """
        Build a Counter from (element, count) pairs.

        Counts are used as given; repeated elements have their counts summed.
        """
        counter = cls(**config)
        counter.update_pairs(pairs)
        return counter

    @classmethod
    def from_mapping(cls, mapping: Mapping[_T, _N], **config: Any) -> "Counter[_T, _N]":
        """
        Build a Counter whose entries are copied verbatim from ``mapping``.

        Zero and negative counts are kept as they are. ``capacity`` defaults
        to the size of ``mapping``.
        """
        config.setdefault("capacity", len(mapping))
        counter = cls(**config)
        for element, count in mapping.items():
            counter._map[element] = count
        return counter

    def _spawn(self, capacity: int = 0) -> "Counter[_T, _N]":
        """Return an empty Counter configured like this one."""
        return type(self)(
            count_type=self._count_type,
            hash_strategy=self._hash_strategy,
            capacity=capacity,
        )

    def _coerce(self, other: Any) -> Optional["Counter[_T, _N]"]:
        """Turn an operand into a Counter, or return None if it cannot be one."""
        if isinstance(other, Counter):
            return other
        if isinstance(other, Mapping):
            coerced = self._spawn(capacity=len(other))
            for element, count in other.items():
                coerced._map[element] = count
            return coerced
        if isinstance(other, Iterable):
            coerced = self._spawn()
            coerced.update(other)
            return coerced
        return None

    # ------------------------------------------------------------------
    # Configuration and storage access
    # ------------------------------------------------------------------

    @property
    def count_type(self) -> Callable[..., _N]:
        """The numeric type of the counts."""
        return self._count_type

    @property
    def hash_strategy(self) -> HashStrategy:
        """The strategy that built the backing mapping."""
        return self._hash_strategy

    @property
    def map(self) -> MutableMapping[_T, _N]:
        """
        The live backing mapping.

        Changes made through it (removing keys, clearing, assigning counts) are
        changes to the counter. Nothing checks them.
        """
        return self._map

    def view(self) -> Mapping[_T, _N]:
        """Return a read-only live view of the backing mapping."""
        return MappingProxyType(self._map)

    def into_map(self) -> MutableMapping[_T, _N]:
        """
        Hand the backing mapping over to the caller.

        The counter keeps working afterwards, on a new empty mapping.

        Returns:
            MutableMapping: The mapping that held this counter's entries.
        """
        mapping = self._map
        self._map = self._hash_strategy.new_map()
        return mapping

    # ------------------------------------------------------------------
    # Point queries and updates
    # ------------------------------------------------------------------

    def get(self, element: _T) -> _N:
        """
        Return the count of ``element``, or zero if it is not stored.

        The element is never inserted by this call.
        """
        return self._map.get(element, self._zero)

    def get_or_insert_default(self, element: _T) -> _N:
        """
        Return the count of ``element``, storing a zero entry first if it is absent.

        After this call ``element in counter`` holds.
        """
        if element not in self._map:
            self._map[element] = self._zero
        return self._map[element]

    def __getitem__(self, element: _T) -> _N:
        """Same as ``get``: missing elements read as zero and are not inserted."""
        return self._map.get(element, self._zero)

    def __setitem__(self, element: _T, count: _N) -> None:
        self._map[element] = count

    def __delitem__(self, element: _T) -> None:
        """
        Remove the entry for ``element``.

        Raises:
            KeyError: If the element is not stored.
        """
        del self._map[element]

    def __contains__(self, element: object) -> bool:
        """Return True if an entry exists for ``element``, whatever its count."""
        return element in self._map

    def __len__(self) -> int:
        """Return the number of stored entries (distinct elements)."""
        return len(self._map)

    def __iter__(self) -> Iterator[_T]:
        """Iterate over the stored elements, once each."""
        return iter(self._map)

    def keys(self) -> KeysView:
        return self._map.keys()

    def values(self) -> ValuesView:
        return self._map.values()

    def items(self) -> ItemsView:
        return self._map.items()

    def clear(self) -> None:
        """Remove every entry."""
        self._map.clear()

    def total(self) -> _N:
        """
        Return the sum of all counts.

        Zero entries contribute nothing and negative entries reduce the total.
        An empty counter totals zero.
        """
        return sum(self._map.values(), self._zero)

    def elements(self) -> Iterator[_T]:
        """
        Yield each element as many times as its count.

        Elements whose count is not strictly positive are skipped. Non-integer
        counts are truncated.
        """
        zero = self._zero
        for element, count in list(self._map.items()):
            if zero < count:
                yield from repeat(element, int(count))

    def prune(self) -> "Counter[_T, _N]":
        """
        Remove, in place, every entry whose count is not strictly positive.

        Returns:
            Counter: This counter.
        """
        zero = self._zero
        for element in [e for e, count in self._map.items() if not zero < count]:
            del self._map[element]
        return self

    # ------------------------------------------------------------------
    # Bulk updates
    # ------------------------------------------------------------------

    def update(self, other: Operand) -> None:
        """
        Add counts in place.

        Args:
            other: A Counter or Mapping, whose counts are added, or any other
                iterable, whose elements each add one.

        Raises:
            TypeError: If ``other`` is not iterable.
        """
        if isinstance(other, Counter):
            self.update_pairs(list(other._map.items()))
        elif isinstance(other, Mapping):
            self.update_pairs(other.items())
        elif not isinstance(other, Iterable):
            raise TypeError(f"cannot count a {type(other).__name__} object; it is not iterable")
        else:
            storage = self._map
            zero, one = self._zero, self._one
            for element in other:
                storage[element] = storage.get(element, zero) + one

    def update_pairs(self, pairs: Iterable[Tuple[_T, _N]]) -> None:
        """Add each (element, count) pair's count to the element's entry, in place."""
        storage = self._map
        zero = self._zero
        for element, count in pairs:
            storage[element] = storage.get(element, zero) + count

    def subtract(self, other: Operand) -> None:
        """
        Subtract counts in place, keeping only strictly positive results.

        Equivalent to ``counter -= other``.
        """
        self -= other

    # ------------------------------------------------------------------
    # Arithmetic
    # ------------------------------------------------------------------

    def _union_keys(self, other: "Counter[_T, _N]") -> List[_T]:
        keys = list(self._map)
        keys.extend(key for key in other._map if key not in self._map)
        return keys

    def __add__(self, other: Operand) -> "Counter[_T, _N]":
        if not isinstance(other, Iterable):
            return NotImplemented
        result = self.copy()
        result.update(other)
        return result

    def __radd__(self, other: Operand) -> "Counter[_T, _N]":
        left = self._coerce(other)
        if left is None:
            return NotImplemented
        return left + self

    def __iadd__(self, other: Operand) -> "Counter[_T, _N]":
        if not isinstance(other, Iterable):
            return NotImplemented
        self.update(other)
        return self

    def __sub__(self, other: Operand) -> "Counter[_T, _N]":
        right = self._coerce(other)
        if right is None:
            return NotImplemented
        result = self._spawn()
        for key in self._union_keys(right):
            left_count, right_count = self.get(key), right.get(key)
            # compare first so unsigned counts never go below zero
            if right_count < left_count:
                result._map[key] = left_count - right_count
        return result

    def __rsub__(self, other: Operand) -> "Counter[_T, _N]":
        left = self._coerce(other)
        if left is None:
            return NotImplemented
        return left - self

    def __isub__(self, other: Operand) -> "Counter[_T, _N]":
        right = self._coerce(other)
        if right is None:
            return NotImplemented
        for key in self._union_keys(right):
            left_count, right_count = self.get(key), right.get(key)
            if right_count < left_count:
                self._map[key] = left_count - right_count
            elif key in self._map:
                del self._map[key]
        return self

    def __and__(self, other: Operand) -> "Counter[_T, _N]":
        right = self._coerce(other)
        if right is None:
            return NotImplemented
        result = self._spawn()
        zero = self._zero
        for key in self._union_keys(right):
            left_count, right_count = self.get(key), right.get(key)
            smaller = right_count if right_count < left_count else left_count
            if zero < smaller:
                result._map[key] = smaller
        return result

    def __rand__(self, other: Operand) -> "Counter[_T, _N]":
        left = self._coerce(other)
        if left is None:
            return NotImplemented
        return left & self

    def __iand__(self, other: Operand) -> "Counter[_T, _N]":
        right = self._coerce(other)
        if right is None:
            return NotImplemented
        zero = self._zero
        for key in self._union_keys(right):
            left_count, right_count = self.get(key), right.get(key)
            smaller = right_count if right_count < left_count else left_count
            if zero < smaller:
                self._map[key] = smaller
            elif key in self._map:
                del self._map[key]
        return self

    def __or__(self, other: Operand) -> "Counter[_T, _N]":
        right = self._coerce(other)
        if right is None:
            return NotImplemented
        result = self._spawn()
        for key in self._union_keys(right):
            left_count, right_count = self.get(key), right.get(key)
            result._map[key] = right_count if left_count < right_count else left_count
        return result

    def __ror__(self, other: Operand) -> "Counter[_T, _N]":
        left = self._coerce(other)
        if left is None:
            return NotImplemented
        return left | self

    def __ior__(self, other: Operand) -> "Counter[_T, _N]":
        right = self._coerce(other)
        if right is None:
            return NotImplemented
        for key in self._union_keys(right):
            left_count, right_count = self.get(key), right.get(key)
            self._map[key] = right_count if left_count < right_count else left_count
        return self

    def __pos__(self) -> "Counter[_T, _N]":
        """Return a copy without the entries whose count is not strictly positive."""
        return self.copy().prune()

    # ------------------------------------------------------------------
    # Comparison
    # ------------------------------------------------------------------

    def is_subset(self, other: Operand) -> bool:
        """
        Return True if no element is counted more here than in ``other``.

        Every element stored on either side is checked, absent ones reading as
        zero, using the count type's own ordering. A negative count in ``other``
        is therefore only matched by an equal or lower count here.
        """
        right = self._coerce(other)
        if right is None:
            raise TypeError(f"cannot compare {self.__class__.__name__} with {type(other).__name__}")
        return all(self.get(key) <= right.get(key) for key in self._union_keys(right))

    def is_superset(self, other: Operand) -> bool:
        """Return True if ``other`` is a subset of this counter."""
        right = self._coerce(other)
        if right is None:
            raise TypeError(f"cannot compare {self.__class__.__name__} with {type(other).__name__}")
        return right.is_subset(self)

    def __le__(self, other: object) -> bool:
        if not isinstance(other, (Counter, Mapping)):
            return NotImplemented
        return self.is_subset(other)

    def __ge__(self, other: object) -> bool:
        if not isinstance(other, (Counter, Mapping)):
            return NotImplemented
        return self.is_superset(other)

    def __eq__(self, other: object) -> bool:
        """
        Two counters are equal when every element has the same count on both sides.

        A stored zero and an absent element compare equal. Plain mappings are
        compared as element -> count.
        """
        if not isinstance(other, (Counter, Mapping)):
            return NotImplemented
        right = self._coerce(other)
        return all(self.get(key) == right.get(key) for key in self._union_keys(right))

    __hash__ = None  # type: ignore[assignment]

    # ------------------------------------------------------------------
    # Ranking
    # ------------------------------------------------------------------

    def most_common(self) -> List[Tuple[_T, _N]]:
        """
        Return all (element, count) pairs, most common first.

        Elements with equal counts keep the backing mapping's iteration order.
        """
        return sort_entries(self._map.items(), no_order)

    def most_common_ordered(self) -> List[Tuple[_T, _N]]:
        """
        Return all (element, count) pairs, most common first, ties ascending by element.

        The result depends only on the counts, never on insertion order.
        """
        return sort_entries(self._map.items(), natural_order)

    def most_common_tiebreaker(self, tiebreaker: Tiebreaker) -> List[Tuple[_T, _N]]:
        """
        Return all (element, count) pairs, most common first, ties ordered by ``tiebreaker``.

        Args:
            tiebreaker (Callable[[_T, _T], int]): Three-way comparison of two
                elements: negative if the first goes first, positive if the
                second does, zero to keep their current order. It must be a
                consistent ordering; the result is unspecified otherwise.

        Raises:
            TypeError: If tiebreaker is not callable.

        Example:
            # reverse-alphabetical among equal counts
            counter.most_common_tiebreaker(lambda a, b: (a < b) - (a > b))
        """
        return sort_entries(self._map.items(), tiebreaker)

    def k_most_common_ordered(self, k: int, tiebreaker: Optional[Tiebreaker] = None) -> List[Tuple[_T, _N]]:
        """
        Return the ``k`` most common (element, count) pairs.

        Same result as ``most_common_ordered()[:k]`` (or the tiebreaker variant),
        computed with a bounded heap when ``k`` is smaller than the number of
        entries.

        Args:
            k (int): How many pairs to return. Values above the number of
                entries return everything.
            tiebreaker (Callable[[_T, _T], int], optional): Tie ordering.
                Defaults to ascending natural order.

        Raises:
            ValueError: If k is negative.
        """
        return select_top_k(
            self._map.items(),
            k,
            tiebreaker if tiebreaker is not None else natural_order,
            size=len(self._map),
        )

    # ------------------------------------------------------------------
    # Copying and representation
    # ------------------------------------------------------------------

    def copy(self) -> "Counter[_T, _N]":
        """
        Return a shallow copy with the same configuration and entries.

        Returns:
            Counter: An independent counter; changing one never changes the other.
        """
        new_counter = self._spawn(capacity=len(self._map))
        new_counter._map.update(self._map)
        return new_counter

    def __copy__(self) -> "Counter[_T, _N]":
        return self.copy()

    def __deepcopy__(self, memo: dict) -> "Counter[_T, _N]":
        """
        Return a deep copy of the Counter.

        Elements and counts are deep-copied; the hash strategy is shared.
        """
        new_counter = self._spawn(capacity=len(self._map))
        for element, count in self._map.items():
            new_counter._map[deepcopy(element, memo)] = deepcopy(count, memo)
        return new_counter

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({dict(self._map.items())!r})"
