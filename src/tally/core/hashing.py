from abc import ABC, abstractmethod
from typing import (
    Callable,
    Dict,
    Generic,
    Hashable,
    Iterator,
    MutableMapping,
    Tuple,
    TypeVar,
)

_K = TypeVar("_K")
_V = TypeVar("_V")


class HashStrategy(ABC):
    """
    Decides how a Counter looks its elements up.

    A strategy is a factory for the backing mapping. Every Counter derived from
    another one (copies, arithmetic results) asks the same strategy for its
    storage, so lookups stay consistent across an expression.
    """

    @abstractmethod
    def new_map(self, capacity: int = 0) -> MutableMapping:
        """
        Return a new, empty mapping.

        Args:
            capacity (int): Expected number of distinct elements. This is a
                sizing hint only; mappings that cannot be pre-sized ignore it.
        """
        pass


class DefaultHashStrategy(HashStrategy):
    """Plain ``dict`` storage: elements hash and compare with ``__hash__``/``__eq__``."""

    def new_map(self, capacity: int = 0) -> Dict:
        return {}

    def __eq__(self, other: object) -> bool:
        return isinstance(other, DefaultHashStrategy)

    def __hash__(self) -> int:
        return hash(DefaultHashStrategy)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}()"


class KeyedDict(MutableMapping, Generic[_K, _V]):
    """
    A mapping that identifies its keys by ``key_func(key)`` instead of the key itself.

    The first key stored for a given derived key becomes the representative that
    iteration yields; later keys that derive to the same value address the same
    entry. For example, with ``str.casefold`` the keys ``"Apple"`` and ``"APPLE"``
    share one slot, reported as ``"Apple"``.
    """

    __slots__ = ("_key_func", "_data")

    def __init__(self, key_func: Callable[[_K], Hashable]) -> None:
        self._key_func = key_func
        # derived key -> (representative key, value)
        self._data: Dict[Hashable, Tuple[_K, _V]] = {}

    def __getitem__(self, key: _K) -> _V:
        return self._data[self._key_func(key)][1]

    def __setitem__(self, key: _K, value: _V) -> None:
        derived = self._key_func(key)
        slot = self._data.get(derived)
        self._data[derived] = (key if slot is None else slot[0], value)

    def __delitem__(self, key: _K) -> None:
        del self._data[self._key_func(key)]

    def __contains__(self, key: object) -> bool:
        try:
            return self._key_func(key) in self._data
        except TypeError:
            return False

    def __iter__(self) -> Iterator[_K]:
        return (representative for representative, _ in self._data.values())

    def __len__(self) -> int:
        return len(self._data)

    def clear(self) -> None:
        self._data.clear()

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({dict(self.items())!r})"


class KeyFunctionStrategy(HashStrategy):
    """
    Storage keyed by a derived lookup key.

    Args:
        key (Callable): Maps an element to the hashable value used for lookups,
            e.g. ``str.casefold`` for case-insensitive counting.
    """

    def __init__(self, key: Callable[[_K], Hashable]) -> None:
        if not callable(key):
            raise TypeError("key must be callable")
        self.key = key

    def new_map(self, capacity: int = 0) -> KeyedDict:
        return KeyedDict(self.key)

    def __eq__(self, other: object) -> bool:
        return isinstance(other, KeyFunctionStrategy) and other.key == self.key

    def __hash__(self) -> int:
        return hash((KeyFunctionStrategy, self.key))

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.key!r})"
