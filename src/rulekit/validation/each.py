"""Per-element validation of array attributes.

EachValidator applies another validator, declared through its ``rule``
option, to every element of a list, tuple or mapping attribute:

    class Order(Model):
        items: list = []

        @classmethod
        def rules(cls):
            return [
                ("items", "each", {"rule": ["trim"]}),
                ("items", "each", {"rule": ["integer", {"min": 1}]}),
            ]

Filtering rules rewrite the attribute element by element. Checking rules
stop at the first failing element and report a single error for the
attribute.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Mapping, Sequence
from typing import Any

from rulekit.config import get_validator_defaults
from rulekit.core.errors import InvalidRuleConfigError
from rulekit.core.fields import (
    get_attribute_value,
    is_collection,
    iter_elements,
    record_cleaning,
    set_attribute_value,
)
from rulekit.protocols import ElementValidatorProtocol
from rulekit.validation.base import ValidationOutcome, Validator
from rulekit.validation.factory import ValidatorFactory, parse_rule_options

logger = logging.getLogger(__name__)


class EachValidator(Validator):
    """Validates each element of an array attribute with a nested rule.

    Options:
        rule: A validator object implementing ElementValidatorProtocol
            (usually a Validator instance), or a sequence whose first entry
            is a validator type and whose remaining entries are option
            mappings, e.g. ``["match", {"pattern": r"^[a-z]+$"}]``.
        prefer_rule_message: Report the nested validator's message when an
            element fails. The own message is then only used when the value
            is not an array. When disabled the own message is always used.

    The nested validator is created on first use and reused for the
    lifetime of this validator.
    """

    def __init__(
        self,
        attributes: str | Sequence[str] | None = None,
        *,
        rule: Any = None,
        prefer_rule_message: bool | None = None,
        **kwargs: Any,
    ) -> None:
        self.rule = rule
        if prefer_rule_message is None:
            prefer_rule_message = get_validator_defaults().prefer_rule_message
        self.prefer_rule_message = prefer_rule_message
        self._validator: ElementValidatorProtocol | None = None
        self._validator_lock = threading.Lock()
        super().__init__(attributes, **kwargs)

    def default_message(self) -> str:
        if self.prefer_rule_message:
            return "{field} should be an array."
        return "{field} is invalid."

    @property
    def validator(self) -> ElementValidatorProtocol:
        """The validator declared in ``rule``, created on first access.

        Raises:
            InvalidRuleConfigError: If the rule is malformed or names an
                unknown validator type.
        """
        validator = self._validator
        if validator is None:
            with self._validator_lock:
                if self._validator is None:
                    self._validator = self._create_validator()
                validator = self._validator
        return validator

    def _create_validator(self) -> ElementValidatorProtocol:
        rule = self.rule
        if isinstance(rule, ElementValidatorProtocol) and not isinstance(rule, type):
            return rule
        if isinstance(rule, (list, tuple)) and rule and rule[0]:
            # Late import to avoid circular dependency with models.base
            from rulekit.models.base import Model

            validator = ValidatorFactory.create(
                rule[0], Model(), self.attributes, parse_rule_options(rule[1:])
            )
            logger.debug("Resolved element validator %r for %s", validator, self.attributes)
            return validator
        raise InvalidRuleConfigError(
            "Invalid validation rule: a rule must be a sequence specifying validator type."
        )

    def validate_attribute(self, model: Any, attribute: str) -> None:
        value = get_attribute_value(model, attribute)
        validator = self.validator
        if validator.is_filter_kind() and is_collection(value):
            filtered = self._filter_elements(validator, value)
            set_attribute_value(model, attribute, filtered)
            logger.debug("Filtered %d elements of %s", len(filtered), attribute)
            record_cleaning(model, attribute, value, filtered, "Applied filter to each element")
        else:
            super().validate_attribute(model, attribute)

    def _filter_elements(self, validator: ElementValidatorProtocol, value: Any) -> Any:
        skip_nested = getattr(validator, "skip_on_array", False)

        def apply(element: Any) -> Any:
            if skip_nested and is_collection(element):
                return element
            return validator.filter_value(element)  # type: ignore[attr-defined]

        if isinstance(value, Mapping):
            return {key: apply(element) for key, element in value.items()}
        filtered = [apply(element) for element in value]
        return tuple(filtered) if isinstance(value, tuple) else filtered

    def validate_value(self, value: Any) -> ValidationOutcome:
        if not is_collection(value):
            return self.message, {}

        validator = self.validator
        for element in iter_elements(value):
            result = validator.validate_value(element)
            if result is not None:
                if self.prefer_rule_message:
                    return result
                return self.message, {}

        return None
