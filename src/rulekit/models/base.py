"""Model base class with declarative validation rules.

Model is a Pydantic base model that declares validation rules, runs them,
and keeps per-attribute errors together with a process log of errors and
cleaning operations.
"""

from __future__ import annotations

import logging
import threading
import weakref
from collections.abc import Sequence
from typing import Any

from abstract_validation_base import ProcessEntry, ProcessLog, ValidationResult
from pydantic import BaseModel, ConfigDict, Field, PrivateAttr

from rulekit.core.errors import InvalidRuleConfigError, RuleKitError
from rulekit.core.messages import generate_attribute_label
from rulekit.validation.base import Validator
from rulekit.validation.factory import ValidatorFactory, parse_rule_options

logger = logging.getLogger(__name__)

# Weak keys let model classes built at runtime be garbage collected
_validators_cache: weakref.WeakKeyDictionary[type, list[Validator]] = weakref.WeakKeyDictionary()
_validators_lock = threading.Lock()


class Model(BaseModel):
    """Base model with declarative validation rules.

    Rules are declared by overriding rules(). Each rule is either a
    Validator instance or a sequence of (attributes, validator type,
    option mappings...).

    Example:
        class Post(Model):
            title: str = ""
            tags: list[str] = []

            @classmethod
            def rules(cls):
                return [
                    ("title", "required"),
                    ("tags", "each", {"rule": ["trim"]}),
                    ("tags", "each", {"rule": ["string", {"max": 20}]}),
                ]

        post = Post(title="Hello", tags=[" a ", "b"])
        post.validate_rules()  # True, tags is now ["a", "b"]
    """

    model_config = ConfigDict(
        extra="allow",
        arbitrary_types_allowed=True,
    )

    process_log: ProcessLog = Field(default_factory=ProcessLog, exclude=True)

    _errors: dict[str, list[str]] = PrivateAttr(default_factory=dict)

    @classmethod
    def rules(cls) -> list[Any]:
        """Validation rules for this model. Override in subclasses."""
        return []

    @classmethod
    def attribute_labels(cls) -> dict[str, str]:
        """Custom attribute labels used in error messages."""
        return {}

    @classmethod
    def get_validators(cls) -> list[Validator]:
        """Get the validators declared in rules(), created once per class.

        Raises:
            InvalidRuleConfigError: If a rule declaration is malformed.
        """
        validators = _validators_cache.get(cls)
        if validators is None:
            with _validators_lock:
                validators = _validators_cache.get(cls)
                if validators is None:
                    validators = cls._create_validators()
                    _validators_cache[cls] = validators
        return validators

    @classmethod
    def _create_validators(cls) -> list[Validator]:
        validators: list[Validator] = []
        for rule in cls.rules():
            if isinstance(rule, Validator):
                validators.append(rule)
            elif isinstance(rule, (list, tuple)) and len(rule) >= 2:
                validators.append(
                    ValidatorFactory.create(rule[1], cls, rule[0], parse_rule_options(rule[2:]))
                )
            else:
                raise InvalidRuleConfigError(
                    "Invalid validation rule: a rule must specify both attribute names "
                    "and validator type."
                )
        return validators

    def get_attribute_label(self, attribute: str) -> str:
        """Get the label of an attribute for error messages."""
        return self.attribute_labels().get(attribute) or generate_attribute_label(attribute)

    def validate_rules(
        self,
        attribute_names: Sequence[str] | None = None,
        *,
        clear_errors: bool = True,
        raise_exception: bool = False,
    ) -> bool:
        """Run the declared validation rules.

        Args:
            attribute_names: Only validate these attributes. None means all.
            clear_errors: Clear existing errors before validating.
            raise_exception: Raise a RuleKitError if any attribute fails.

        Returns:
            True if no errors were recorded.

        Raises:
            RuleKitError: If raise_exception is True and validation failed.
            InvalidRuleConfigError: If a rule is misconfigured.
        """
        if clear_errors:
            self.clear_errors(attribute_names)

        for validator in self.get_validators():
            validator.validate_attributes(self, attribute_names)

        if raise_exception and self.has_errors():
            logger.warning("%s failed validation: %s", type(self).__name__, self._errors)
            raise self._create_error()
        return not self.has_errors()

    def _create_error(self) -> Exception:
        """Create the error raised by validate_rules(raise_exception=True).

        Override in subclasses for custom error types.
        """
        return RuleKitError.from_model_errors(type(self).__name__, self.get_errors())

    def add_error(self, attribute: str, message: str, value: Any = None) -> None:
        """Attach an error message to an attribute and log it.

        Args:
            attribute: Name of the attribute with the error.
            message: Rendered error message.
            value: The problematic value (optional).
        """
        self._errors.setdefault(attribute, []).append(message)
        entry = ProcessEntry(
            entry_type="error",
            field=attribute,
            message=message,
            original_value=str(value) if value is not None else None,
            context={},
        )
        self.process_log.errors.append(entry)

    def has_errors(self, attribute: str | None = None) -> bool:
        """Check for errors on one attribute, or on any attribute."""
        if attribute is None:
            return bool(self._errors)
        return bool(self._errors.get(attribute))

    def get_errors(self, attribute: str | None = None) -> Any:
        """Get error messages.

        Returns:
            The messages of one attribute as a list, or a dict of all
            attributes with errors when attribute is None.
        """
        if attribute is None:
            return {name: list(messages) for name, messages in self._errors.items()}
        return list(self._errors.get(attribute, []))

    def get_first_error(self, attribute: str) -> str | None:
        """Get the first error message of an attribute."""
        messages = self._errors.get(attribute)
        return messages[0] if messages else None

    def clear_errors(self, attribute_names: Sequence[str] | None = None) -> None:
        """Remove errors for the given attributes, or for all attributes."""
        if attribute_names is None:
            self._errors.clear()
            return
        for name in attribute_names:
            self._errors.pop(name, None)

    def add_cleaning_process(
        self,
        field: str,
        original_value: Any,
        new_value: Any,
        reason: str,
        operation_type: str = "cleaning",
    ) -> None:
        """Log a cleaning/transformation operation.

        Args:
            field: Name of the field that was cleaned.
            original_value: The original value before transformation.
            new_value: The value after transformation.
            reason: Explanation of why the cleaning was performed.
            operation_type: Category of operation (filter, cleaning, etc.).
        """
        entry = ProcessEntry(
            entry_type="cleaning",
            field=field,
            message=reason,
            original_value=str(original_value) if original_value is not None else None,
            new_value=str(new_value) if new_value is not None else None,
            context={"operation_type": operation_type},
        )
        self.process_log.cleaning.append(entry)

    def validation_result(self) -> ValidationResult:
        """Export the current errors as a ValidationResult."""
        result = ValidationResult(is_valid=not self._errors)
        for attribute, messages in self._errors.items():
            for message in messages:
                result.add_error(attribute, message)
        return result

    def audit_log(self, source: str | None = None) -> list[dict[str, Any]]:
        """Export combined cleaning and error entries.

        Args:
            source: Optional source identifier to add to each entry.

        Returns:
            List of dicts sorted by timestamp.
        """
        entries: list[dict[str, Any]] = []
        for entry in [*self.process_log.cleaning, *self.process_log.errors]:
            d = entry.model_dump()
            if source:
                d["source"] = source
            entries.append(d)
        return sorted(entries, key=lambda x: x.get("timestamp", ""))


def clear_validators_cache() -> None:
    """Forget the validators created for every model class (mainly for testing)."""
    with _validators_lock:
        _validators_cache.clear()
