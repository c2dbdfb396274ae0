from __future__ import annotations

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class ElementValidatorProtocol(Protocol):
    """Protocol for validators that can be applied to a single element.

    Checking validators implement validate_value(). Filtering validators
    report is_filter_kind() as True and implement filter_value() instead.
    """

    def validate_value(self, value: Any) -> tuple[str, dict[str, Any]] | None:
        """Validate a single value.

        Args:
            value: The value to check.

        Returns:
            None if the value is valid, otherwise a tuple of message
            template and message parameters.
        """
        ...

    def is_filter_kind(self) -> bool:
        """Whether this validator transforms values instead of checking them."""
        ...


@runtime_checkable
class ErrorHolderProtocol(Protocol):
    """Protocol for models that collect validation errors per attribute."""

    def add_error(self, attribute: str, message: str, value: Any = None) -> None:
        """Attach an error message to an attribute."""
        ...

    def has_errors(self, attribute: str | None = None) -> bool:
        """Check for errors on one attribute or on any attribute."""
        ...

    def get_attribute_label(self, attribute: str) -> str:
        """Human readable label used for the {field} placeholder."""
        ...


@runtime_checkable
class ProcessLoggingProtocol(Protocol):
    """Protocol for models that keep a log of cleaning operations."""

    def add_cleaning_process(
        self,
        field: str,
        original_value: Any,
        new_value: Any,
        reason: str,
        operation_type: str = "cleaning",
    ) -> None:
        """Log a cleaning/transformation operation."""
        ...
