from tally.core import (
    Counter,
    DefaultHashStrategy,
    HashStrategy,
    KeyedDict,
    KeyFunctionStrategy,
    natural_order,
    reverse_order,
)
from tally.concurrency import ConcurrentCounter, Parallel
from tally.serialization import (
    from_json,
    from_mapping,
    from_yaml,
    to_json,
    to_mapping,
    to_yaml,
)
from tally.utils import CounterDecodeError, TallyError

__all__ = [
    "Counter",
    "HashStrategy",
    "DefaultHashStrategy",
    "KeyFunctionStrategy",
    "KeyedDict",
    "natural_order",
    "reverse_order",
    "ConcurrentCounter",
    "Parallel",
    "CounterDecodeError",
    "TallyError",
    "to_mapping",
    "from_mapping",
    "to_json",
    "from_json",
    "to_yaml",
    "from_yaml",
]
