"""Model base class with declarative validation rules."""

from rulekit.models.base import Model, clear_validators_cache

__all__ = ["Model", "clear_validators_cache"]
