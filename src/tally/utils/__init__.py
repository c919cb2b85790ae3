from .errors import TallyError, CounterDecodeError

__all__ = [
    "TallyError",
    "CounterDecodeError",
]
