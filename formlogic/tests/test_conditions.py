"""
Unit tests for the condition evaluator.

Tests cover:
- Operator applicability table and helpers
- "is equals to" / "is either" membership with string coercion
- "Others" matching on live-form sentinel and submitted prefix
- "is any of" order-independent checkbox comparison
- "is less than or equal to" / "is more than or equal to" numeric coercion
- Absent, empty and mismatched answers never satisfy a condition
"""

import pytest

from conftest import checkbox_value, client, cond, field, submitted
from formlogic.core.conditions import (
    LOGIC_MAP,
    evaluate_condition,
    get_applicable_if_fields,
    get_applicable_if_states,
)
from formlogic.core.schema import FieldType, LogicConditionState


# =============================================================
# Test: Applicability table
# =============================================================


class TestApplicability:
    """Which operators are allowed for which field types."""

    def test_checkbox_only_any_of(self):
        assert get_applicable_if_states(FieldType.CHECKBOX) == [LogicConditionState.ANY_OF]

    def test_numeric_types(self):
        for field_type in (FieldType.NUMBER, FieldType.DECIMAL, FieldType.RATING):
            assert get_applicable_if_states(field_type) == [
                LogicConditionState.EQUAL,
                LogicConditionState.LTE,
                LogicConditionState.GTE,
            ]

    def test_unsupported_type_has_no_states(self):
        assert get_applicable_if_states(FieldType.EMAIL) == []
        assert FieldType.TABLE not in LOGIC_MAP

    def test_applicable_if_fields(self):
        fields = [
            field("a", "dropdown"),
            field("b", "email"),
            field("c", "yes_no"),
            field("d", "attachment"),
        ]
        assert [f.id for f in get_applicable_if_fields(fields)] == ["a", "c"]

    def test_operator_outside_table_is_false(self):
        """Checkbox does not support "is equals to"."""
        response = client("c1", "checkbox", checkbox_value(["a"]))
        assert evaluate_condition(response, cond("c1", "is equals to", "a")) is False

    def test_unsupported_field_type_is_false(self):
        response = client("t1", "textfield", "hello")
        assert evaluate_condition(response, cond("t1", "is equals to", "hello")) is False


# =============================================================
# Test: "is equals to" / "is either"
# =============================================================


class TestEqualAndEither:
    """Membership tests with string coercion."""

    def test_equal_match(self):
        response = client("d1", "dropdown", "Option A")
        assert evaluate_condition(response, cond("d1", "is equals to", "Option A")) is True

    def test_equal_mismatch(self):
        response = client("d1", "dropdown", "Option B")
        assert evaluate_condition(response, cond("d1", "is equals to", "Option A")) is False

    def test_either_match(self):
        response = submitted("r1", "radiobutton", answer="Blue")
        assert evaluate_condition(response, cond("r1", "is either", ["Red", "Blue"])) is True

    def test_either_mismatch(self):
        response = submitted("r1", "radiobutton", answer="Green")
        assert evaluate_condition(response, cond("r1", "is either", ["Red", "Blue"])) is False

    def test_number_equal_coerces_to_string(self):
        response = client("n1", "number", "5")
        assert evaluate_condition(response, cond("n1", "is equals to", 5)) is True

    def test_integral_float_matches_integer_answer(self):
        response = submitted("n1", "number", answer="5")
        assert evaluate_condition(response, cond("n1", "is equals to", 5.0)) is True

    def test_numeric_answer_value(self):
        response = client("n1", "rating", 3)
        assert evaluate_condition(response, cond("n1", "is equals to", "3")) is True

    def test_yes_no(self):
        response = submitted("y1", "yes_no", answer="Yes")
        assert evaluate_condition(response, cond("y1", "is equals to", "Yes")) is True
        assert evaluate_condition(response, cond("y1", "is equals to", "No")) is False

    def test_match_is_case_sensitive(self):
        response = client("d1", "dropdown", "option a")
        assert evaluate_condition(response, cond("d1", "is equals to", "Option A")) is False


# =============================================================
# Test: "Others" option
# =============================================================


class TestOthers:
    """Both serializations of an "Others" selection match "Others"."""

    def test_radio_submitted_prefix(self):
        response = submitted("r1", "radiobutton", answer="Others: custom text")
        assert evaluate_condition(response, cond("r1", "is equals to", "Others")) is True

    def test_radio_live_sentinel(self):
        response = client("r1", "radiobutton", "radioButtonOthers")
        assert evaluate_condition(response, cond("r1", "is equals to", "Others")) is True

    def test_radio_others_in_either_list(self):
        response = client("r1", "radiobutton", "radioButtonOthers")
        assert evaluate_condition(response, cond("r1", "is either", ["Red", "Others"])) is True

    def test_regular_option_still_matches_with_others_in_list(self):
        response = submitted("r1", "radiobutton", answer="Red")
        assert evaluate_condition(response, cond("r1", "is either", ["Red", "Others"])) is True

    def test_sentinel_only_for_radio(self):
        response = client("d1", "dropdown", "radioButtonOthers")
        assert evaluate_condition(response, cond("d1", "is equals to", "Others")) is False

    def test_dropdown_prefix_matches(self):
        response = submitted("d1", "dropdown", answer="Others: something")
        assert evaluate_condition(response, cond("d1", "is equals to", "Others")) is True

    def test_sentinel_without_others_condition(self):
        response = client("r1", "radiobutton", "radioButtonOthers")
        assert evaluate_condition(response, cond("r1", "is equals to", "Red")) is False

    def test_prefix_without_others_condition(self):
        response = submitted("r1", "radiobutton", answer="Others: Red")
        assert evaluate_condition(response, cond("r1", "is equals to", "Red")) is False

    def test_literal_others_option(self):
        """An option literally named "Others" matches too."""
        response = submitted("r1", "radiobutton", answer="Others")
        assert evaluate_condition(response, cond("r1", "is equals to", "Others")) is True


# =============================================================
# Test: "is any of"
# =============================================================


class TestAnyOf:
    """Checkbox answers compared to candidates regardless of option order."""

    def test_exact_match_different_order(self):
        response = client("c1", "checkbox", checkbox_value(["b", "a"]))
        condition = cond("c1", "is any of", [checkbox_value(["a", "b"])])
        assert evaluate_condition(response, condition) is True

    def test_matches_second_candidate(self):
        response = client("c1", "checkbox", checkbox_value(["c"]))
        condition = cond("c1", "is any of", [checkbox_value(["a"]), checkbox_value(["c"])])
        assert evaluate_condition(response, condition) is True

    def test_subset_does_not_match(self):
        response = client("c1", "checkbox", checkbox_value(["a"]))
        condition = cond("c1", "is any of", [checkbox_value(["a", "b"])])
        assert evaluate_condition(response, condition) is False

    def test_others_flag_must_match(self):
        response = client("c1", "checkbox", checkbox_value(["a"], others=True))
        condition = cond("c1", "is any of", [checkbox_value(["a"], others=False)])
        assert evaluate_condition(response, condition) is False

    def test_others_only(self):
        response = submitted("c1", "checkbox", answer_array=checkbox_value([], others=True))
        condition = cond("c1", "is any of", [checkbox_value([], others=True)])
        assert evaluate_condition(response, condition) is True

    def test_unadapted_answer_array_is_false(self):
        response = submitted("c1", "checkbox", answer_array=["a"])
        condition = cond("c1", "is any of", [checkbox_value(["a"])])
        assert evaluate_condition(response, condition) is False

    def test_scalar_condition_value_is_false(self):
        response = client("c1", "checkbox", checkbox_value(["a"]))
        assert evaluate_condition(response, cond("c1", "is any of", ["a"])) is False

    def test_does_not_mutate_inputs(self):
        current = checkbox_value(["b", "a"])
        candidate = checkbox_value(["d", "c"])
        evaluate_condition(client("c1", "checkbox", current), cond("c1", "is any of", [candidate]))
        assert current.options == ["b", "a"]
        assert candidate.options == ["d", "c"]


# =============================================================
# Test: Numeric comparisons
# =============================================================


class TestNumeric:
    """Less-or-equal and more-or-equal with numeric coercion."""

    @pytest.mark.parametrize("answer,expected", [("4", True), ("5", True), ("6", False)])
    def test_lte(self, answer, expected):
        response = submitted("n1", "number", answer=answer)
        assert evaluate_condition(response, cond("n1", "is less than or equal to", 5)) is expected

    @pytest.mark.parametrize("answer,expected", [("4", False), ("5", True), ("6", True)])
    def test_gte(self, answer, expected):
        response = submitted("n1", "number", answer=answer)
        assert evaluate_condition(response, cond("n1", "is more than or equal to", 5)) is expected

    def test_decimal_values(self):
        response = client("d1", "decimal", "2.5")
        assert evaluate_condition(response, cond("d1", "is more than or equal to", "2.25")) is True

    def test_string_condition_value(self):
        response = client("n1", "rating", 4)
        assert evaluate_condition(response, cond("n1", "is less than or equal to", "4")) is True

    def test_empty_answer_is_false(self):
        response = client("n1", "number", "")
        assert evaluate_condition(response, cond("n1", "is more than or equal to", 5)) is False

    def test_non_numeric_answer_is_false(self):
        response = client("n1", "number", "abc")
        assert evaluate_condition(response, cond("n1", "is more than or equal to", 5)) is False
        assert evaluate_condition(response, cond("n1", "is less than or equal to", 5)) is False

    def test_non_numeric_condition_value_is_false(self):
        response = client("n1", "number", "3")
        assert evaluate_condition(response, cond("n1", "is less than or equal to", "lots")) is False

    def test_zero_answer_is_not_empty(self):
        response = client("n1", "number", 0)
        assert evaluate_condition(response, cond("n1", "is less than or equal to", 1)) is True


# =============================================================
# Test: Absent and empty answers
# =============================================================


class TestAbsentAnswers:
    """Missing answers are "not satisfied", never an error."""

    def test_no_response(self):
        assert evaluate_condition(None, cond("d1", "is equals to", "x")) is False

    def test_client_none_value(self):
        response = client("d1", "dropdown", None)
        assert evaluate_condition(response, cond("d1", "is equals to", "x")) is False

    def test_client_empty_string(self):
        response = client("d1", "dropdown", "")
        assert evaluate_condition(response, cond("d1", "is equals to", "")) is False

    def test_submission_without_answer(self):
        response = submitted("d1", "dropdown")
        assert evaluate_condition(response, cond("d1", "is equals to", "x")) is False

    def test_submission_empty_answer_array(self):
        response = submitted("r1", "radiobutton", answer_array=[])
        assert evaluate_condition(response, cond("r1", "is equals to", "x")) is False
