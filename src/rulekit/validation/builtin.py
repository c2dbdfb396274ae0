from __future__ import annotations

import re
from collections.abc import Callable, Iterable, Sequence
from typing import Any

from rulekit.core.errors import InvalidRuleConfigError
from rulekit.core.fields import (
    get_attribute_value,
    is_collection,
    record_cleaning,
    set_attribute_value,
)
from rulekit.validation.base import ValidationOutcome, Validator

_INTEGER_PATTERN = re.compile(r"^\s*[+-]?\d+\s*$")
_NUMBER_PATTERN = re.compile(r"^\s*[-+]?(\d+\.?\d*|\.\d+)([eE][-+]?\d+)?\s*$")


class RequiredValidator(Validator):
    """Checks that a value is not empty."""

    def __init__(self, attributes: str | Sequence[str] | None = None, **kwargs: Any) -> None:
        kwargs.setdefault("skip_on_empty", False)
        super().__init__(attributes, **kwargs)

    def default_message(self) -> str:
        return "{field} cannot be blank."

    def validate_value(self, value: Any) -> ValidationOutcome:
        if self.is_empty(value.strip() if isinstance(value, str) else value):
            return self.message, {}
        return None


class NumberValidator(Validator):
    """Checks that a value is a number, optionally within bounds.

    Numeric strings are accepted. Booleans are not numbers here.
    """

    def __init__(
        self,
        attributes: str | Sequence[str] | None = None,
        *,
        integer_only: bool = False,
        min: float | None = None,
        max: float | None = None,
        too_small: str | None = None,
        too_big: str | None = None,
        **kwargs: Any,
    ) -> None:
        self.integer_only = integer_only
        self.min = min
        self.max = max
        super().__init__(attributes, **kwargs)
        self.too_small = too_small or "{field} must be no less than {min}."
        self.too_big = too_big or "{field} must be no greater than {max}."

    def default_message(self) -> str:
        if self.integer_only:
            return "{field} must be an integer."
        return "{field} must be a number."

    def _to_number(self, value: Any) -> float | int | None:
        if isinstance(value, bool):
            return None
        if isinstance(value, int):
            return value
        if isinstance(value, float):
            if self.integer_only and not value.is_integer():
                return None
            return value
        if isinstance(value, str):
            pattern = _INTEGER_PATTERN if self.integer_only else _NUMBER_PATTERN
            if pattern.match(value):
                try:
                    return int(value) if self.integer_only else float(value)
                except ValueError:
                    # Digit strings past the interpreter's int conversion limit
                    return None
        return None

    def validate_value(self, value: Any) -> ValidationOutcome:
        number = self._to_number(value)
        if number is None:
            return self.message, {}
        if self.min is not None and number < self.min:
            return self.too_small, {"min": self.min}
        if self.max is not None and number > self.max:
            return self.too_big, {"max": self.max}
        return None


class StringValidator(Validator):
    """Checks that a value is a string, optionally of a given length."""

    def __init__(
        self,
        attributes: str | Sequence[str] | None = None,
        *,
        min: int | None = None,
        max: int | None = None,
        length: int | None = None,
        **kwargs: Any,
    ) -> None:
        self.min = min
        self.max = max
        self.length = length
        super().__init__(attributes, **kwargs)

    def default_message(self) -> str:
        return "{field} must be a string."

    def validate_value(self, value: Any) -> ValidationOutcome:
        if not isinstance(value, str):
            return self.message, {}
        size = len(value)
        if self.length is not None and size != self.length:
            return "{field} should contain {length} characters.", {"length": self.length}
        if self.min is not None and size < self.min:
            return "{field} should contain at least {min} characters.", {"min": self.min}
        if self.max is not None and size > self.max:
            return "{field} should contain at most {max} characters.", {"max": self.max}
        return None


class BooleanValidator(Validator):
    """Checks that a value is a boolean flag.

    Non-strict mode also accepts 1, 0, "1" and "0".
    """

    def __init__(
        self,
        attributes: str | Sequence[str] | None = None,
        *,
        strict: bool = False,
        **kwargs: Any,
    ) -> None:
        self.strict = strict
        super().__init__(attributes, **kwargs)

    def default_message(self) -> str:
        return "{field} must be either true or false."

    def validate_value(self, value: Any) -> ValidationOutcome:
        if isinstance(value, bool):
            return None
        if not self.strict and value in (0, 1, "0", "1") and not isinstance(value, float):
            return None
        return self.message, {}


class RangeValidator(Validator):
    """Checks that a value is one of a fixed set of values."""

    def __init__(
        self,
        attributes: str | Sequence[str] | None = None,
        *,
        range: Iterable[Any] | None = None,
        not_in: bool = False,
        **kwargs: Any,
    ) -> None:
        if range is None:
            raise InvalidRuleConfigError("The 'range' option must be set.")
        self.range = list(range)
        self.not_in = not_in
        super().__init__(attributes, **kwargs)

    def validate_value(self, value: Any) -> ValidationOutcome:
        if (value in self.range) != self.not_in:
            return None
        return self.message, {}


class RegularExpressionValidator(Validator):
    """Checks that a string matches a regular expression."""

    def __init__(
        self,
        attributes: str | Sequence[str] | None = None,
        *,
        pattern: str | re.Pattern[str] | None = None,
        not_match: bool = False,
        **kwargs: Any,
    ) -> None:
        if pattern is None:
            raise InvalidRuleConfigError("The 'pattern' option must be set.")
        self.pattern = re.compile(pattern) if isinstance(pattern, str) else pattern
        self.not_match = not_match
        super().__init__(attributes, **kwargs)

    def validate_value(self, value: Any) -> ValidationOutcome:
        if isinstance(value, str) and (self.pattern.search(value) is None) == self.not_match:
            return None
        return self.message, {}


class FilterValidator(Validator):
    """Transforms an attribute with a callable instead of checking it.

    A filter never reports an error. With skip_on_array set, collection
    values are left untouched; inside an "each" rule this means nested
    collections are copied through unchanged.
    """

    def __init__(
        self,
        attributes: str | Sequence[str] | None = None,
        *,
        filter: Callable[[Any], Any] | None = None,
        skip_on_array: bool = False,
        **kwargs: Any,
    ) -> None:
        if filter is None or not callable(filter):
            raise InvalidRuleConfigError("The 'filter' option must be a callable.")
        self.filter = filter
        self.skip_on_array = skip_on_array
        kwargs.setdefault("skip_on_empty", False)
        super().__init__(attributes, **kwargs)

    def is_filter_kind(self) -> bool:
        return True

    def filter_value(self, value: Any) -> Any:
        """Apply the filter callable to a single value."""
        return self.filter(value)

    def validate_attribute(self, model: Any, attribute: str) -> None:
        value = get_attribute_value(model, attribute)
        if self.skip_on_array and is_collection(value):
            return
        filtered = self.filter_value(value)
        set_attribute_value(model, attribute, filtered)
        record_cleaning(model, attribute, value, filtered, f"Applied {self._filter_name()} filter")

    def _filter_name(self) -> str:
        return getattr(self.filter, "__name__", type(self.filter).__name__)


def _trim(value: Any) -> Any:
    return value.strip() if isinstance(value, str) else value


def trim_validator(attributes: str | Sequence[str] | None = None, **kwargs: Any) -> FilterValidator:
    """Create a filter that strips surrounding whitespace from strings."""
    kwargs.setdefault("filter", _trim)
    kwargs.setdefault("skip_on_array", True)
    return FilterValidator(attributes, **kwargs)


class InlineValidator(Validator):
    """Runs a callable or a model method as a validation rule.

    The method receives (attribute, params) when it is a model method name,
    or (model, attribute, params) when it is a plain callable, and reports
    failures through model.add_error().

    Inline rules validate attributes only: nesting one inside an "each" rule
    is not supported because there is no model attribute to hand over for a
    single element.
    """

    def __init__(
        self,
        attributes: str | Sequence[str] | None = None,
        *,
        method: str | Callable[..., Any] | None = None,
        params: dict[str, Any] | None = None,
        **kwargs: Any,
    ) -> None:
        if method is None:
            raise InvalidRuleConfigError("The 'method' option must be set.")
        self.method = method
        self.params = params or {}
        super().__init__(attributes, **kwargs)

    def validate_attribute(self, model: Any, attribute: str) -> None:
        if isinstance(self.method, str):
            getattr(model, self.method)(attribute, self.params)
        else:
            self.method(model, attribute, self.params)
