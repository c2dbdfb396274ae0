"""Attribute access helpers shared by validators.

Validators never touch model attributes directly; they go through these
helpers so that unknown attributes surface as configuration errors and
collection handling stays consistent across validators.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from typing import Any

from rulekit.core.errors import InvalidRuleConfigError
from rulekit.protocols import ProcessLoggingProtocol


def is_collection(value: Any) -> bool:
    """Check whether a value is an ordered collection of elements.

    Lists, tuples and mappings count as collections. Strings, bytes and
    sets do not.
    """
    return isinstance(value, (list, tuple, Mapping))


def iter_elements(value: list | tuple | Mapping) -> Iterator[Any]:
    """Iterate over the elements of a collection in order.

    Mappings yield their values, sequences yield their items.
    """
    if isinstance(value, Mapping):
        return iter(value.values())
    return iter(value)


def get_attribute_value(model: Any, attribute: str) -> Any:
    """Read an attribute from a model.

    Raises:
        InvalidRuleConfigError: If the model has no such attribute.
    """
    try:
        return getattr(model, attribute)
    except AttributeError as exc:
        raise InvalidRuleConfigError(
            f"Unknown attribute: {type(model).__name__}.{attribute}"
        ) from exc


def set_attribute_value(model: Any, attribute: str, value: Any) -> None:
    """Overwrite an attribute on a model."""
    setattr(model, attribute, value)


def record_cleaning(
    model: Any,
    attribute: str,
    original_value: Any,
    new_value: Any,
    reason: str,
) -> None:
    """Log a filter rewrite on models that keep a process log."""
    if original_value == new_value:
        return
    if isinstance(model, ProcessLoggingProtocol):
        model.add_cleaning_process(
            attribute,
            original_value,
            new_value,
            reason,
            operation_type="filter",
        )
