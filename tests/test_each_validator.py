from __future__ import annotations

import threading
import time
from typing import Any
from unittest.mock import patch

import pytest

from rulekit import (
    EachValidator,
    ElementValidatorProtocol,
    FilterValidator,
    InvalidRuleConfigError,
    Model,
    NumberValidator,
    Validator,
)
from rulekit.validation.factory import ValidatorFactory


class RecordingValidator(Validator):
    """Fails on values listed in ``bad`` and records every value it sees."""

    def __init__(self, attributes=None, *, bad=(), **kwargs: Any) -> None:
        self.bad = list(bad)
        self.seen: list[Any] = []
        super().__init__(attributes, **kwargs)

    def default_message(self) -> str:
        return "{field} contains {value}."

    def validate_value(self, value: Any):
        self.seen.append(value)
        if value in self.bad:
            return self.message, {"value": value}
        return None


def _times_ten(value: Any) -> Any:
    return value * 10


class OddChecker:
    """Element validator that does not derive from Validator."""

    def validate_value(self, value: Any):
        return ("{field} is odd.", {}) if value % 2 else None

    def is_filter_kind(self) -> bool:
        return False


class TestRuleResolution:
    """Tests for turning the rule option into a nested validator."""

    def test_validator_instance_is_adopted(self) -> None:
        inner = RecordingValidator()
        each = EachValidator("numbers", rule=inner)
        assert each.validator is inner

    def test_protocol_object_is_adopted(self) -> None:
        checker = OddChecker()
        assert isinstance(checker, ElementValidatorProtocol)

        each = EachValidator("numbers", rule=checker)
        assert each.validator is checker
        assert each.validate([2, 4]) == (True, None)
        assert each.validate([2, 3]) == (False, "the input value is odd.")

    def test_builtin_validators_satisfy_element_protocol(self) -> None:
        assert isinstance(NumberValidator(), ElementValidatorProtocol)
        assert isinstance(FilterValidator(filter=str), ElementValidatorProtocol)
        assert isinstance(EachValidator(rule=["integer"]).validator, ElementValidatorProtocol)

    def test_sequence_rule_creates_registered_validator(self) -> None:
        each = EachValidator("numbers", rule=["integer", {"min": 1}])
        inner = each.validator
        assert inner.integer_only is True
        assert inner.min == 1
        assert inner.attributes == ["numbers"]

    def test_resolution_happens_once(self) -> None:
        each = EachValidator("numbers", rule=["integer"])
        model = Model(numbers=[1, 2])

        with patch.object(ValidatorFactory, "create", wraps=ValidatorFactory.create) as create:
            each.validate_attribute(model, "numbers")
            each.validate_attribute(model, "numbers")
            each.validate_value([3])

        assert create.call_count == 1
        assert not model.has_errors()

    def test_concurrent_first_use_resolves_once(self) -> None:
        each = EachValidator("numbers", rule=["integer"])
        original_create = ValidatorFactory.create
        barrier = threading.Barrier(8)
        resolved: list[Validator] = []

        def slow_create(*args: Any, **kwargs: Any) -> Validator:
            time.sleep(0.05)
            return original_create(*args, **kwargs)

        def worker() -> None:
            barrier.wait()
            resolved.append(each.validator)

        with patch.object(ValidatorFactory, "create", side_effect=slow_create) as create:
            threads = [threading.Thread(target=worker) for _ in range(8)]
            for thread in threads:
                thread.start()
            for thread in threads:
                thread.join()

        assert create.call_count == 1
        assert len(resolved) == 8
        assert all(validator is resolved[0] for validator in resolved)

    @pytest.mark.parametrize(
        "rule",
        [None, [], (), [None], [""], "integer", 42, {"type": "integer"}, Validator],
    )
    def test_malformed_rule_raises_on_first_use(self, rule: Any) -> None:
        each = EachValidator("numbers", rule=rule)
        with pytest.raises(InvalidRuleConfigError, match="rule must be a sequence"):
            each.validate_value([1])

    def test_unknown_type_raises(self) -> None:
        each = EachValidator("numbers", rule=["no-such-validator"])
        with pytest.raises(InvalidRuleConfigError, match="Unknown validator type"):
            each.validate_value([1])

    def test_invalid_options_raise(self) -> None:
        each = EachValidator("numbers", rule=["integer", {"bogus": True}])
        with pytest.raises(InvalidRuleConfigError, match="Invalid options"):
            each.validate_value([1])

    def test_non_mapping_option_raises(self) -> None:
        each = EachValidator("numbers", rule=["integer", "min"])
        with pytest.raises(InvalidRuleConfigError, match="options must be mappings"):
            each.validate_value([1])

    def test_failed_resolution_is_retried(self) -> None:
        ValidatorFactory.unregister("even")
        each = EachValidator("numbers", rule=["even"])
        with pytest.raises(InvalidRuleConfigError):
            each.validate_value([2])

        ValidatorFactory.register("even", RecordingValidator)
        assert isinstance(each.validator, RecordingValidator)


class TestMessageSelection:
    """Tests for default messages and rule message preference."""

    def test_default_message_prefers_rule(self) -> None:
        assert EachValidator(rule=["integer"]).message == "{field} should be an array."

    def test_default_message_without_rule_preference(self) -> None:
        each = EachValidator(rule=["integer"], prefer_rule_message=False)
        assert each.message == "{field} is invalid."

    def test_explicit_message_is_kept(self) -> None:
        each = EachValidator(rule=["integer"], message="{field} is bad.")
        assert each.message == "{field} is bad."

    def test_rule_message_and_params_are_reported(self) -> None:
        each = EachValidator(rule=RecordingValidator(bad=[7]))
        assert each.validate_value([1, 7]) == ("{field} contains {value}.", {"value": 7})

    def test_own_message_replaces_rule_message(self) -> None:
        each = EachValidator(rule=RecordingValidator(bad=[7]), prefer_rule_message=False)
        assert each.validate_value([1, 7]) == ("{field} is invalid.", {})

    def test_own_custom_message_replaces_rule_message(self) -> None:
        each = EachValidator(
            rule=RecordingValidator(bad=[7]),
            prefer_rule_message=False,
            message="Every {field} entry must be allowed.",
        )
        assert each.validate_value([7]) == ("Every {field} entry must be allowed.", {})


class TestElementChecking:
    """Tests for checking every element with a checking validator."""

    def test_integer_rule_reports_integer_message(self) -> None:
        model = Model(scores=[1, "x", 3])
        EachValidator("scores", rule=["integer"]).validate_attribute(model, "scores")
        assert model.get_errors("scores") == ["Scores must be an integer."]

    def test_own_message_on_failure_without_rule_preference(self) -> None:
        model = Model(scores=[1, "x", 3])
        each = EachValidator("scores", rule=["integer"], prefer_rule_message=False)
        each.validate_attribute(model, "scores")
        assert model.get_errors("scores") == ["Scores is invalid."]

    def test_stops_at_first_failing_element(self) -> None:
        inner = RecordingValidator(bad=["b", "d"])
        each = EachValidator(rule=inner)
        result = each.validate_value(["a", "b", "c", "d"])
        assert result == ("{field} contains {value}.", {"value": "b"})
        assert inner.seen == ["a", "b"]

    def test_mapping_values_are_checked_in_order(self) -> None:
        inner = RecordingValidator(bad=["y"])
        each = EachValidator(rule=inner)
        assert each.validate_value({"first": "x", "second": "y", "third": "z"}) is not None
        assert inner.seen == ["x", "y"]

    def test_valid_collection_leaves_attribute_untouched(self) -> None:
        model = Model(numbers=[1, 2, 3])
        numbers = model.numbers
        EachValidator("numbers", rule=["integer"]).validate_attribute(model, "numbers")
        assert not model.has_errors()
        assert model.numbers is numbers

    @pytest.mark.parametrize("prefer", [True, False])
    @pytest.mark.parametrize("value", ["not a list", 5, None, {1, 2}, b"abc"])
    def test_non_collection_reports_own_message(self, value: Any, prefer: bool) -> None:
        inner = RecordingValidator()
        each = EachValidator(rule=inner, prefer_rule_message=prefer)
        assert each.validate_value(value) == (each.message, {})
        assert inner.seen == []

    def test_non_collection_message_on_model(self) -> None:
        model = Model(tags="a,b")
        EachValidator("tags", rule=["string"]).validate_attribute(model, "tags")
        assert model.get_first_error("tags") == "Tags should be an array."

    def test_nested_each_rules(self) -> None:
        each = EachValidator("matrix", rule=["each", {"rule": ["integer"]}])

        model = Model(matrix=[[1, 2], [3, "x"]])
        each.validate_attribute(model, "matrix")
        assert model.get_errors("matrix") == ["Matrix must be an integer."]

        model = Model(matrix=[[1], 2])
        each.validate_attribute(model, "matrix")
        assert model.get_errors("matrix") == ["Matrix should be an array."]

    def test_standalone_validate(self) -> None:
        each = EachValidator(rule=["integer"])
        assert each.validate([1, 2]) == (True, None)
        assert each.validate([1, "x"]) == (False, "the input value must be an integer.")
        assert each.validate("x") == (False, "the input value should be an array.")

    def test_inline_rule_cannot_check_elements(self) -> None:
        each = EachValidator(rule=[lambda model, attribute, params: None])
        with pytest.raises(NotImplementedError):
            each.validate_value([1])

    def test_oversized_integer_string_fails_without_raising(self) -> None:
        model = Model(ids=[1, "9" * 5000])
        each = EachValidator("ids", rule=["integer", {"max": 10}])
        each.validate_attribute(model, "ids")
        assert model.has_errors("ids")
        assert model.get_first_error("ids") in (
            "Ids must be an integer.",
            "Ids must be no greater than 10.",
        )

    def test_filter_rule_cannot_check_elements(self) -> None:
        each = EachValidator(rule=["trim"])
        with pytest.raises(NotImplementedError):
            each.validate([" a "])

    def test_filter_rule_nested_in_each_is_not_applied(self) -> None:
        model = Model(tags=[[" a "]])
        each = EachValidator("tags", rule=["each", {"rule": ["trim"]}])
        with pytest.raises(NotImplementedError):
            each.validate_attribute(model, "tags")
        assert model.tags == [[" a "]]


class TestElementFiltering:
    """Tests for rewriting attributes with a filtering validator."""

    def test_filter_skips_nested_collections(self) -> None:
        model = Model(data={"a": 1, "b": [2, 3]})
        original = model.data
        rule = FilterValidator(filter=_times_ten, skip_on_array=True)
        EachValidator("data", rule=rule).validate_attribute(model, "data")

        assert model.data == {"a": 10, "b": [2, 3]}
        assert model.data is not original
        assert original == {"a": 1, "b": [2, 3]}
        assert list(model.data) == ["a", "b"]
        assert not model.has_errors()

    def test_filter_applies_to_nested_collections_by_default(self) -> None:
        model = Model(data=[1, [2]])
        each = EachValidator("data", rule=FilterValidator(filter=_times_ten))
        each.validate_attribute(model, "data")
        assert model.data == [10, [2, 2, 2, 2, 2, 2, 2, 2, 2, 2]]

    def test_filter_keeps_sequence_type(self) -> None:
        model = Model(data=(1, 2))
        each = EachValidator("data", rule=FilterValidator(filter=_times_ten))
        each.validate_attribute(model, "data")
        assert model.data == (10, 20)

    def test_trim_rule_strips_strings(self) -> None:
        model = Model(tags=["  a ", ["  nested "], 3])
        EachValidator("tags", rule=["trim"]).validate_attribute(model, "tags")
        assert model.tags == ["a", ["  nested "], 3]

    def test_filter_records_cleaning(self) -> None:
        model = Model(tags=[" a "])
        EachValidator("tags", rule=["trim"]).validate_attribute(model, "tags")
        assert len(model.process_log.cleaning) == 1
        entry = model.process_log.cleaning[0]
        assert entry.field == "tags"
        assert entry.new_value == "['a']"

    def test_unchanged_values_are_not_logged(self) -> None:
        model = Model(tags=["a"])
        EachValidator("tags", rule=["trim"]).validate_attribute(model, "tags")
        assert model.tags == ["a"]
        assert model.process_log.cleaning == []

    def test_filter_on_non_collection_reports_array_message(self) -> None:
        model = Model(name="  bob ")
        EachValidator("name", rule=["trim"]).validate_attribute(model, "name")
        assert model.name == "  bob "
        assert model.get_errors("name") == ["Name should be an array."]

    def test_filter_errors_propagate_without_writing(self) -> None:
        model = Model(data=[1, "two", 3])
        original = model.data
        each = EachValidator("data", rule=FilterValidator(filter=lambda v: v + 1))

        with pytest.raises(TypeError):
            each.validate_attribute(model, "data")

        assert model.data is original
        assert not model.has_errors()
