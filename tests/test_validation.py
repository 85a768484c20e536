"""Tests for the rule-token validation engine."""

from datetime import date

import pytest

from actionkit.actions.validation import ValidationEngine, get_validation_engine
from actionkit.exceptions import ConfigurationDefect, UnknownRuleError, ValidationFailure


@pytest.fixture
def engine():
    return ValidationEngine()


def errors_for(engine, rules, data):
    with pytest.raises(ValidationFailure) as excinfo:
        engine.validate(rules, data)
    return excinfo.value.errors


class TestPresence:
    """Tests for required, nullable and friends."""

    def test_required_missing(self, engine):
        errors = errors_for(engine, {"email": ["required"]}, {})
        assert errors == {"email": ["The email field is required."]}

    def test_required_blank_string(self, engine):
        errors = errors_for(engine, {"first_name": ["required"]}, {"first_name": "  "})
        assert errors == {"first_name": ["The first name field is required."]}

    def test_optional_absent_skips_value_rules(self, engine):
        assert engine.validate({"reason": ["nullable", "string", "max:5"]}, {}) == {}

    def test_nullable_none_passes(self, engine):
        validated = engine.validate({"reason": ["nullable", "string"]}, {"reason": None})
        assert validated == {"reason": None}

    def test_filled_rejects_present_blank(self, engine):
        errors = errors_for(engine, {"name": ["filled"]}, {"name": ""})
        assert errors == {"name": ["The name field must have a value."]}

    def test_present(self, engine):
        errors = errors_for(engine, {"name": ["present"]}, {})
        assert errors == {"name": ["The name field must be present."]}

    def test_bail_stops_after_first_failure(self, engine):
        errors = errors_for(engine, {"code": ["bail", "integer", "min:5"]}, {"code": "abc"})
        assert errors == {"code": ["The code field must be an integer."]}

    def test_without_bail_collects_all(self, engine):
        errors = errors_for(engine, {"code": ["integer", "min:5"]}, {"code": "abc"})
        assert len(errors["code"]) == 2


class TestValueRules:
    """Tests for type, format and size rules."""

    def test_email(self, engine):
        assert engine.validate({"email": ["email"]}, {"email": "jane@acme.io"})
        errors = errors_for(engine, {"email": ["email"]}, {"email": "not-an-email"})
        assert errors == {"email": ["The email field must be a valid email address."]}

    def test_url(self, engine):
        assert engine.validate({"site": ["url"]}, {"site": "https://example.com/path"})
        errors = errors_for(engine, {"site": ["url"]}, {"site": "nope"})
        assert errors == {"site": ["The site field must be a valid URL."]}

    def test_string_min_counts_characters(self, engine):
        errors = errors_for(engine, {"password": ["string", "min:8"]}, {"password": "short"})
        assert errors == {"password": ["The password field must be at least 8 characters."]}

    def test_numeric_max_compares_value(self, engine):
        errors = errors_for(engine, {"age": ["integer", "max:10"]}, {"age": "12"})
        assert errors == {"age": ["The age field must not be greater than 10."]}

    def test_between_for_arrays(self, engine):
        errors = errors_for(engine, {"tags": ["array", "between:1,2"]}, {"tags": ["a", "b", "c"]})
        assert errors == {"tags": ["The tags field must be between 1 and 2 items."]}

    def test_in(self, engine):
        assert engine.validate({"status": ["in:active,inactive"]}, {"status": "active"})
        errors = errors_for(engine, {"status": ["in:active,inactive"]}, {"status": "archived"})
        assert errors == {"status": ["The selected status is invalid."]}

    def test_boolean_accepts_strings(self, engine):
        assert engine.validate({"flag": ["boolean"]}, {"flag": "true"}) == {"flag": "true"}
        errors = errors_for(engine, {"flag": ["boolean"]}, {"flag": "maybe"})
        assert errors == {"flag": ["The flag field must be true or false."]}

    def test_regex_keeps_commas(self, engine):
        rules = {"code": ["regex:/^[A-Z]{2,3}$/"]}
        assert engine.validate(rules, {"code": "ABC"})
        assert errors_for(engine, rules, {"code": "ABCD"})

    def test_confirmed(self, engine):
        rules = {"password": ["confirmed"]}
        assert engine.validate(rules, {"password": "secret", "password_confirmation": "secret"})
        errors = errors_for(engine, rules, {"password": "secret", "password_confirmation": "other"})
        assert errors == {"password": ["The password field confirmation does not match."]}

    def test_after_other_field(self, engine):
        rules = {"ends_at": ["date", "after:starts_at"]}
        data = {"starts_at": "2024-01-10", "ends_at": "2024-01-05"}
        errors = errors_for(engine, rules, data)
        assert errors == {"ends_at": ["The ends at field must be a date after starts_at."]}

    def test_date_accepts_date_objects(self, engine):
        assert engine.validate({"day": ["date"]}, {"day": date(2024, 5, 1)})

    def test_ulid(self, engine):
        assert engine.validate({"id": ["ulid"]}, {"id": "01ARZ3NDEKTSV4RRFFQ69G5FAV"})
        assert errors_for(engine, {"id": ["ulid"]}, {"id": "not-a-ulid"})


class TestEngine:
    """Tests for engine behaviour."""

    def test_validated_contains_declared_present_attributes_only(self, engine):
        validated = engine.validate(
            {"email": ["required", "email"], "reason": ["nullable"]},
            {"email": "jane@acme.io", "extra": "x"},
        )
        assert validated == {"email": "jane@acme.io"}

    def test_unknown_rule_raises_before_validation(self, engine):
        with pytest.raises(UnknownRuleError, match="shiny"):
            engine.validate({"name": ["required", "shiny"]}, {})

    @pytest.mark.parametrize("rule, detail", [
        ("max", "needs 1 argument"),
        ("between:1", "needs 2 argument"),
        ("max:abc", "needs numeric arguments"),
        ("digits:2.5", "needs integer arguments"),
    ])
    def test_malformed_rule_arguments_raise_before_validation(self, engine, rule, detail):
        with pytest.raises(ConfigurationDefect, match=detail):
            engine.validate({"name": [rule]}, {"name": "Jane"})

    def test_extended_rules_skip_argument_checks(self, engine):
        engine.extend("max", lambda ctx: None)
        assert engine.validate({"name": ["max"]}, {"name": "Jane"}) == {"name": "Jane"}

    def test_extend(self, engine):
        engine.extend("even", lambda ctx: None if int(ctx.value) % 2 == 0 else f"The {ctx.label} field must be even.")
        assert engine.knows("even")
        assert engine.validate({"count": ["even"]}, {"count": 4}) == {"count": 4}
        errors = errors_for(engine, {"count": ["even"]}, {"count": 3})
        assert errors == {"count": ["The count field must be even."]}

    def test_failure_messages_and_summary(self, engine):
        failure = ValidationFailure({"email": ["a", "b"], "name": ["c"]})
        assert failure.messages() == ["email: a", "email: b", "name: c"]
        assert failure.summary() == "email: a, b\nname: c"

    def test_global_engine_is_shared(self):
        assert get_validation_engine() is get_validation_engine()
