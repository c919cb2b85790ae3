class TallyError(Exception):
    """Base class for errors raised by tally."""


class CounterDecodeError(TallyError, ValueError):
    """
    Raised when a serialized counter cannot be decoded.

    The payload was readable but does not describe an element -> count mapping
    (wrong top-level type, unhashable keys, non-numeric counts), or the
    underlying parser rejected it. Parser errors are chained as ``__cause__``.
    """
