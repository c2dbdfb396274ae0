"""rulekit: declarative validation rules for Pydantic models.

This package provides:
- A Model base class that declares and runs validation rules
- A registry of built-in validators, extensible by type identifier
- EachValidator for validating every element of an array attribute
- Process logging of errors and filter rewrites

Quick Start:
    >>> from rulekit import Model
    >>> class Survey(Model):
    ...     scores: list = []
    ...
    ...     @classmethod
    ...     def rules(cls):
    ...         return [("scores", "each", {"rule": ["integer", {"min": 1, "max": 5}]})]
    >>> survey = Survey(scores=[1, 4, 9])
    >>> survey.validate_rules()
    False
    >>> survey.get_first_error("scores")
    'Scores must be no greater than 5.'

    # Validate a bare value
    >>> from rulekit import EachValidator
    >>> EachValidator(rule=["integer"]).validate([1, "x"])
    (False, 'the input value must be an integer.')
"""

from __future__ import annotations  # noqa: I001

# Import order is intentional to avoid circular imports - do not auto-fix
from rulekit.core import (
    PACKAGE_NAME,
    InvalidRuleConfigError,
    RuleKitError,
    format_message,
    get_attribute_value,
    is_collection,
    set_attribute_value,
)
from rulekit.config import ValidatorDefaults, get_validator_defaults, reset_validator_defaults
from rulekit.models import Model, clear_validators_cache
from rulekit.validation import (
    BooleanValidator,
    EachValidator,
    FilterValidator,
    InlineValidator,
    NumberValidator,
    RangeValidator,
    RegularExpressionValidator,
    RequiredValidator,
    StringValidator,
    Validator,
    ValidatorFactory,
)
from rulekit.protocols import (
    ElementValidatorProtocol,
    ErrorHolderProtocol,
    ProcessLoggingProtocol,
)

__version__ = "0.1.0"

__all__ = [
    # Version
    "__version__",
    # Errors
    "PACKAGE_NAME",
    "InvalidRuleConfigError",
    "RuleKitError",
    # Attribute access and messages
    "format_message",
    "get_attribute_value",
    "set_attribute_value",
    "is_collection",
    # Configuration
    "ValidatorDefaults",
    "get_validator_defaults",
    "reset_validator_defaults",
    # Models
    "Model",
    "clear_validators_cache",
    # Validators
    "Validator",
    "BooleanValidator",
    "EachValidator",
    "FilterValidator",
    "InlineValidator",
    "NumberValidator",
    "RangeValidator",
    "RegularExpressionValidator",
    "RequiredValidator",
    "StringValidator",
    "ValidatorFactory",
    # Protocols
    "ElementValidatorProtocol",
    "ErrorHolderProtocol",
    "ProcessLoggingProtocol",
]
