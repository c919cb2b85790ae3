from .hashing import DefaultHashStrategy, HashStrategy, KeyedDict, KeyFunctionStrategy
from .ranking import natural_order, reverse_order
from .counter import Counter

__all__ = [
    "Counter",
    "HashStrategy",
    "DefaultHashStrategy",
    "KeyFunctionStrategy",
    "KeyedDict",
    "natural_order",
    "reverse_order",
]
