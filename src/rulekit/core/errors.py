"""Error classes for rule configuration and validation.

Configuration mistakes (malformed rules, unknown validator types, bad
options) raise InvalidRuleConfigError. Validation failures are normal
outcomes recorded on the model; RuleKitError is only raised when a caller
asks for failures to be raised.
"""

from __future__ import annotations

from pydantic_core import PydanticCustomError

# Package identifier for error context
PACKAGE_NAME = "rulekit"


class InvalidRuleConfigError(ValueError):
    """Raised when a validation rule or validator is configured incorrectly.

    This is a programming error in the rule declarations, not a failure of
    the data being validated, so it is never converted into a model error.
    """


class RuleKitError(PydanticCustomError):
    """Validation error raised on request by Model.validate_rules().

    Inherits from PydanticCustomError so it can travel through pydantic's
    error handling unchanged. The context always carries the package name.
    """

    @classmethod
    def from_model_errors(
        cls, model_name: str, errors: dict[str, list[str]]
    ) -> RuleKitError:
        """Build an error summarising every attribute error of a model.

        Args:
            model_name: Class name of the model that failed validation.
            errors: Mapping of attribute name to its error messages.

        Returns:
            RuleKitError whose message lists the first error of each attribute.
        """
        summary = "; ".join(f"{attribute}: {messages[0]}" for attribute, messages in errors.items())
        return cls(
            "validation_error",
            "{model} failed validation: {summary}",
            {
                "package": PACKAGE_NAME,
                "model": model_name,
                "summary": summary,
                "errors": errors,
            },
        )
