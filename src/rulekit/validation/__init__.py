"""Validator implementations.

This module provides the Validator base class, the built-in validators
and the factory that creates validators from rule declarations.
"""

from rulekit.validation.base import Validator
from rulekit.validation.builtin import (
    BooleanValidator,
    FilterValidator,
    InlineValidator,
    NumberValidator,
    RangeValidator,
    RegularExpressionValidator,
    RequiredValidator,
    StringValidator,
    trim_validator,
)
from rulekit.validation.each import EachValidator
from rulekit.validation.factory import ValidatorFactory, parse_rule_options

__all__ = [
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
    "parse_rule_options",
    "trim_validator",
]
