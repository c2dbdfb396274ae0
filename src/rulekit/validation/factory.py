"""Validator registry and factory.

Rules refer to validators by type identifier ("integer", "match", ...).
ValidatorFactory maps each identifier to a constructor and builds
configured validator instances from rule declarations.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping, Sequence
from typing import Any, ClassVar

from rulekit.core.errors import InvalidRuleConfigError
from rulekit.validation.base import Validator

logger = logging.getLogger(__name__)

ValidatorConstructor = Callable[..., Validator]


def parse_rule_options(entries: Sequence[Any]) -> dict[str, Any]:
    """Merge the option mappings that follow a validator type in a rule.

    Args:
        entries: Rule entries after the validator type.

    Returns:
        Keyword options, later mappings overriding earlier ones.

    Raises:
        InvalidRuleConfigError: If an entry is not a mapping.
    """
    options: dict[str, Any] = {}
    for entry in entries:
        if not isinstance(entry, Mapping):
            raise InvalidRuleConfigError(
                f"Invalid validation rule: options must be mappings, got {entry!r}."
            )
        options.update(entry)
    return options


class ValidatorFactory:
    """Factory for creating validators from rule declarations.

    Supports registration of custom validator types and creation of
    validators by type identifier, Validator subclass or inline callable.

    Example:
        >>> validator = ValidatorFactory.create("integer", None, ["age"], {"min": 0})

        # Register a custom validator
        >>> ValidatorFactory.register("even", EvenValidator)
        >>> validator = ValidatorFactory.create("even", None, ["count"])
    """

    _registry: ClassVar[dict[str, ValidatorConstructor]] = {}
    _defaults_registered: ClassVar[bool] = False

    @classmethod
    def _ensure_defaults_registered(cls) -> None:
        """Ensure built-in validators are registered."""
        if cls._defaults_registered:
            return

        from functools import partial

        from rulekit.validation.builtin import (
            BooleanValidator,
            FilterValidator,
            NumberValidator,
            RangeValidator,
            RegularExpressionValidator,
            RequiredValidator,
            StringValidator,
            trim_validator,
        )
        from rulekit.validation.each import EachValidator

        builtins: dict[str, ValidatorConstructor] = {
            "boolean": BooleanValidator,
            "each": EachValidator,
            "filter": FilterValidator,
            "in": RangeValidator,
            "integer": partial(NumberValidator, integer_only=True),
            "match": RegularExpressionValidator,
            "number": NumberValidator,
            "required": RequiredValidator,
            "string": StringValidator,
            "trim": trim_validator,
        }
        for name, constructor in builtins.items():
            cls._registry.setdefault(name, constructor)
        cls._defaults_registered = True

    @classmethod
    def register(cls, name: str, constructor: ValidatorConstructor) -> None:
        """Register a validator type.

        Args:
            name: Type identifier used in rules.
            constructor: Validator subclass or callable returning a Validator.
                It is called with the attribute list and keyword options.
        """
        cls._ensure_defaults_registered()
        cls._registry[name] = constructor

    @classmethod
    def unregister(cls, name: str) -> None:
        """Unregister a validator type."""
        cls._ensure_defaults_registered()
        cls._registry.pop(name, None)

    @classmethod
    def available_types(cls) -> list[str]:
        """Get list of registered type identifiers."""
        cls._ensure_defaults_registered()
        return sorted(cls._registry.keys())

    @classmethod
    def clear_registry(cls) -> None:
        """Clear the registry (mainly for testing).

        Built-in validators are registered again on next use.
        """
        cls._registry.clear()
        cls._defaults_registered = False

    @classmethod
    def create(
        cls,
        validator_type: Any,
        model: Any,
        attributes: str | Sequence[str] | None,
        options: Mapping[str, Any] | None = None,
    ) -> Validator:
        """Create a validator.

        Args:
            validator_type: A registered type identifier, a Validator
                subclass, a callable, or the name of a method on ``model``.
                Callables and model methods become InlineValidators.
            model: The model the rule is declared on. Only used to look up
                inline validation methods.
            attributes: Attribute names the validator applies to.
            options: Keyword options for the validator constructor.

        Returns:
            Configured Validator instance.

        Raises:
            InvalidRuleConfigError: If the type is unknown or the options
                are not accepted by the validator.
        """
        cls._ensure_defaults_registered()
        kwargs = dict(options or {})

        constructor: ValidatorConstructor
        if isinstance(validator_type, type) and issubclass(validator_type, Validator):
            constructor = validator_type
        elif isinstance(validator_type, str) and validator_type in cls._registry:
            constructor = cls._registry[validator_type]
        elif callable(validator_type) and not isinstance(validator_type, type):
            from rulekit.validation.builtin import InlineValidator

            constructor = InlineValidator
            kwargs["method"] = validator_type
        elif isinstance(validator_type, str) and callable(getattr(model, validator_type, None)):
            from rulekit.validation.builtin import InlineValidator

            constructor = InlineValidator
            kwargs["method"] = validator_type
        else:
            available = ", ".join(sorted(cls._registry.keys()))
            raise InvalidRuleConfigError(
                f"Unknown validator type: {validator_type!r}. Available types: {available}"
            )

        try:
            validator = constructor(attributes, **kwargs)
        except TypeError as exc:
            raise InvalidRuleConfigError(
                f"Invalid options for validator {validator_type!r}: {exc}"
            ) from exc

        logger.debug("Created %r from rule type %r", validator, validator_type)
        return validator
