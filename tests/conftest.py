"""Shared pytest fixtures and Hypothesis configuration.

This module provides pytest fixtures and configures Hypothesis profiles
for the test suite.
"""

from __future__ import annotations

from collections.abc import Iterator

import pytest
from hypothesis import Verbosity, settings

from rulekit.config import reset_validator_defaults
from rulekit.models import clear_validators_cache
from rulekit.validation.factory import ValidatorFactory

# Configure Hypothesis settings for the test suite
settings.register_profile("ci", max_examples=200, deadline=None)
settings.register_profile("dev", max_examples=50, deadline=None)
settings.register_profile("debug", max_examples=10, deadline=None, verbosity=Verbosity.verbose)


@pytest.fixture(autouse=True)
def fresh_state() -> Iterator[None]:
    """Reset shared validator state around every test."""
    clear_validators_cache()
    reset_validator_defaults()
    yield
    clear_validators_cache()
    reset_validator_defaults()
    ValidatorFactory.clear_registry()
