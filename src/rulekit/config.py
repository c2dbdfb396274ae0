from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Optional


def _env_flag(name: str, default: str = "1") -> bool:
    value = os.getenv(name, default)
    return value.lower() not in {"0", "false", "no"}


@dataclass
class ValidatorDefaults:
    """Default option values applied to validators that do not set them."""

    skip_on_empty: bool = field(default_factory=lambda: _env_flag("RULEKIT_SKIP_ON_EMPTY", "1"))
    skip_on_error: bool = field(default_factory=lambda: _env_flag("RULEKIT_SKIP_ON_ERROR", "1"))
    prefer_rule_message: bool = field(
        default_factory=lambda: _env_flag("RULEKIT_PREFER_RULE_MESSAGE", "1")
    )


_default_settings: Optional[ValidatorDefaults] = None


def get_validator_defaults() -> ValidatorDefaults:
    """Get the shared ValidatorDefaults, reading the environment on first use."""
    global _default_settings
    if _default_settings is None:
        _default_settings = ValidatorDefaults()
    return _default_settings


def reset_validator_defaults() -> None:
    """Drop the shared defaults so the environment is read again."""
    global _default_settings
    _default_settings = None
