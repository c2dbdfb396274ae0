"""rulekit core - errors, attribute access and message rendering.

These components carry no knowledge of specific validators and are shared
by the validator classes and the Model base.
"""

from __future__ import annotations

from rulekit.core.errors import PACKAGE_NAME, InvalidRuleConfigError, RuleKitError
from rulekit.core.fields import (
    get_attribute_value,
    is_collection,
    iter_elements,
    record_cleaning,
    set_attribute_value,
)
from rulekit.core.messages import INPUT_VALUE_LABEL, format_message, generate_attribute_label

__all__ = [
    # Errors
    "PACKAGE_NAME",
    "InvalidRuleConfigError",
    "RuleKitError",
    # Attribute access
    "get_attribute_value",
    "set_attribute_value",
    "is_collection",
    "iter_elements",
    "record_cleaning",
    # Messages
    "INPUT_VALUE_LABEL",
    "format_message",
    "generate_attribute_label",
]
