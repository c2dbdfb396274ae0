"""Validator base class.

Every rule attached to a model is a Validator. A validator knows which
attributes it applies to, when it should be skipped, and how to turn the
outcome of validate_value() into an error on the model. Subclasses
normally only implement validate_value(); validators that change values
instead of checking them override validate_attribute() and report
is_filter_kind() as True.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import Any, Optional

from rulekit.config import get_validator_defaults
from rulekit.core.fields import get_attribute_value
from rulekit.core.messages import INPUT_VALUE_LABEL, format_message
from rulekit.protocols import ErrorHolderProtocol

ValidationOutcome = Optional[tuple[str, dict[str, Any]]]


def normalize_attributes(attributes: str | Sequence[str] | None) -> list[str]:
    """Turn an attribute declaration into a list of attribute names.

    A single string may hold several comma-separated names.
    """
    if attributes is None:
        return []
    if isinstance(attributes, str):
        return [name.strip() for name in attributes.split(",") if name.strip()]
    return list(attributes)


class Validator:
    """Base class for all validators.

    Options shared by every validator:
        message: Failure message template. Supports the {field} placeholder
            plus any parameters returned from validate_value().
        skip_on_empty: Skip attributes whose value is empty.
        skip_on_error: Skip attributes that already have errors.
        when: Callable (model, attribute) -> bool deciding whether to run.
        is_empty: Callable replacing the default emptiness check.

    Example:
        class EvenValidator(Validator):
            def default_message(self) -> str:
                return "{field} must be even."

            def validate_value(self, value):
                if value % 2:
                    return self.message, {}
                return None
    """

    def __init__(
        self,
        attributes: str | Sequence[str] | None = None,
        *,
        message: str | None = None,
        skip_on_empty: bool | None = None,
        skip_on_error: bool | None = None,
        when: Callable[[Any, str], bool] | None = None,
        is_empty: Callable[[Any], bool] | None = None,
    ) -> None:
        defaults = get_validator_defaults()
        self.attributes = normalize_attributes(attributes)
        self.message = message if message is not None else self.default_message()
        self.skip_on_empty = defaults.skip_on_empty if skip_on_empty is None else skip_on_empty
        self.skip_on_error = defaults.skip_on_error if skip_on_error is None else skip_on_error
        self.when = when
        self._is_empty = is_empty

    def default_message(self) -> str:
        """Message template used when none is configured."""
        return "{field} is invalid."

    def is_filter_kind(self) -> bool:
        """Whether this validator transforms values instead of checking them."""
        return False

    def validate_attributes(
        self, model: ErrorHolderProtocol, attributes: Sequence[str] | None = None
    ) -> None:
        """Validate the given attributes of a model.

        Args:
            model: Model to validate.
            attributes: Attribute names to validate. Only names this
                validator applies to are considered. None means all of them.
        """
        names = self.attributes
        if attributes is not None:
            wanted = set(attributes)
            names = [name for name in names if name in wanted]

        for attribute in names:
            if self.skip_on_error and model.has_errors(attribute):
                continue
            if self.skip_on_empty and self.is_empty(get_attribute_value(model, attribute)):
                continue
            if self.when is None or self.when(model, attribute):
                self.validate_attribute(model, attribute)

    def validate_attribute(self, model: ErrorHolderProtocol, attribute: str) -> None:
        """Validate a single attribute and record any failure on the model."""
        value = get_attribute_value(model, attribute)
        result = self.validate_value(value)
        if result is not None:
            message, params = result
            self.add_error(model, attribute, message, params)

    def validate_value(self, value: Any) -> ValidationOutcome:
        """Validate a bare value.

        Args:
            value: Value to validate.

        Returns:
            None if valid, otherwise (message template, parameters).

        Raises:
            NotImplementedError: If this validator cannot validate values
                outside a model.
        """
        raise NotImplementedError(f"{type(self).__name__} does not support validate_value().")

    def validate(self, value: Any) -> tuple[bool, str | None]:
        """Validate a value outside of any model.

        Returns:
            Tuple of (is_valid, error message). The message is None when
            the value is valid.
        """
        result = self.validate_value(value)
        if result is None:
            return True, None
        message, params = result
        return False, format_message(message, {"field": INPUT_VALUE_LABEL, **params})

    def add_error(
        self,
        model: ErrorHolderProtocol,
        attribute: str,
        message: str,
        params: dict[str, Any] | None = None,
    ) -> None:
        """Render a message template and attach it to a model attribute."""
        value = get_attribute_value(model, attribute)
        rendered = format_message(
            message, {"field": model.get_attribute_label(attribute), **(params or {})}
        )
        model.add_error(attribute, rendered, value)

    def is_empty(self, value: Any) -> bool:
        """Check whether a value counts as empty."""
        if self._is_empty is not None:
            return self._is_empty(value)
        return value is None or (isinstance(value, (str, list, tuple, dict)) and len(value) == 0)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(attributes={self.attributes!r})"
