"""
Encode a Counter as a plain element -> count structure and decode it back.

The counter has no format of its own: these helpers go through a ``dict`` and
hand it to ``json`` or PyYAML. Decoding checks that the payload really is an
element -> count mapping and raises ``CounterDecodeError`` otherwise.
"""
import json
import numbers
from collections.abc import Hashable, Mapping
from typing import Any, Dict

import yaml

from tally.core.counter import Counter
from tally.utils import CounterDecodeError


def to_mapping(counter: Counter) -> Dict[Any, Any]:
    """Return the counter's entries as a new plain ``dict``, zero entries included."""
    return dict(counter.items())


def from_mapping(data: Any, **config: Any) -> Counter:
    """
    Rebuild a Counter from an element -> count structure.

    Args:
        data: The decoded payload.
        **config: Counter configuration (``count_type``, ``hash_strategy``).
            Counts are converted with ``count_type`` when one is given.

    Raises:
        CounterDecodeError: If ``data`` is not a mapping of hashable keys to numbers.
    """
    if not isinstance(data, Mapping):
        raise CounterDecodeError(f"expected a mapping of element -> count, got {type(data).__name__}")

    count_type = config.get("count_type")
    entries = {}
    for element, count in data.items():
        if not isinstance(element, Hashable):
            raise CounterDecodeError(f"element {element!r} is not hashable")
        if isinstance(count, bool) or not isinstance(count, numbers.Number):
            raise CounterDecodeError(f"count for {element!r} is not a number: {count!r}")
        if count_type is not None:
            try:
                count = count_type(count)
            except (TypeError, ValueError, ArithmeticError) as exc:
                raise CounterDecodeError(f"count for {element!r} does not fit {count_type!r}") from exc
        entries[element] = count
    return Counter.from_mapping(entries, **config)


def to_json(counter: Counter, **kwargs: Any) -> str:
    """
    Serialize the counter as a JSON object.

    JSON object keys are strings, so non-string elements come back as their
    JSON key form (``1`` becomes ``"1"``). Extra keyword arguments go to
    ``json.dumps``.
    """
    return json.dumps(to_mapping(counter), **kwargs)


def from_json(text: str, **config: Any) -> Counter:
    """
    Decode a JSON object produced by ``to_json``.

    Raises:
        CounterDecodeError: On invalid JSON or a payload that is not element -> count.
    """
    try:
        data = json.loads(text)
    except (json.JSONDecodeError, TypeError) as exc:
        raise CounterDecodeError(f"invalid JSON counter: {exc}") from exc
    return from_mapping(data, **config)


def to_yaml(counter: Counter) -> str:
    """Serialize the counter as a YAML mapping; scalar keys keep their type."""
    return yaml.safe_dump(to_mapping(counter), default_flow_style=False, sort_keys=False)


def from_yaml(text: str, **config: Any) -> Counter:
    """
    Decode a YAML mapping produced by ``to_yaml``.

    Raises:
        CounterDecodeError: On invalid YAML or a payload that is not element -> count.
    """
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise CounterDecodeError(f"invalid YAML counter: {exc}") from exc
    return from_mapping(data, **config)
