"""
Deterministic condition evaluator.

Decides whether a single condition is satisfied by the current answer
of its subject field. Which operators apply to which field types is a
fixed table (`LOGIC_MAP`); any combination outside it is never
satisfied. Absent, empty or malformed answers are "not satisfied",
never an error.
"""

from formlogic.core.answers import (
    OTHERS_ANSWER_PREFIX,
    RADIO_OTHERS_SENTINEL,
    ClientFieldResponse,
    SubmissionResponse,
    get_current_value,
)
from formlogic.core.schema import (
    CheckboxConditionValue,
    Condition,
    FieldType,
    FormField,
    LogicConditionState,
)
from formlogic.core.utils import as_list, is_empty_value, to_number, to_str

# Option label that matches an "Others" selection on choice fields
OTHERS_OPTION = "Others"

_NUMERIC_STATES = (
    LogicConditionState.EQUAL,
    LogicConditionState.LTE,
    LogicConditionState.GTE,
)

LOGIC_MAP: dict[FieldType, tuple[LogicConditionState, ...]] = {
    FieldType.CHECKBOX: (LogicConditionState.ANY_OF,),
    FieldType.DROPDOWN: (LogicConditionState.EQUAL, LogicConditionState.EITHER),
    FieldType.NUMBER: _NUMERIC_STATES,
    FieldType.DECIMAL: _NUMERIC_STATES,
    FieldType.RATING: _NUMERIC_STATES,
    FieldType.YES_NO: (LogicConditionState.EQUAL,),
    FieldType.RADIO: (LogicConditionState.EQUAL, LogicConditionState.EITHER),
}


def get_applicable_if_fields(fields: list[FormField]) -> list[FormField]:
    """Return the fields that may be used as the subject of a condition."""
    return [field for field in fields if field.field_type in LOGIC_MAP]


def get_applicable_if_states(field_type: FieldType) -> list[LogicConditionState]:
    """Return the operators allowed for a field type (empty if unsupported)."""
    return list(LOGIC_MAP.get(field_type, ()))


def is_logic_checkbox_condition(condition: Condition) -> bool:
    """True if the condition's value is a list of checkbox candidates."""
    return isinstance(condition.value, list) and all(
        isinstance(candidate, CheckboxConditionValue) for candidate in condition.value
    )


def evaluate_condition(
    response: ClientFieldResponse | SubmissionResponse | None,
    condition: Condition,
) -> bool:
    """Evaluate one condition against the answer of its subject field.

    Args:
        response: The subject field's response (either shape), or None
            if the field has no response.
        condition: The condition to evaluate.

    Returns:
        True if the answer satisfies the condition, False otherwise.
    """
    if response is None:
        return False

    if condition.operator not in LOGIC_MAP.get(response.field_type, ()):
        return False

    current_value = get_current_value(response)
    if is_empty_value(current_value):
        return False

    match condition.operator:
        case LogicConditionState.EQUAL | LogicConditionState.EITHER:
            return _matches_any_value(response.field_type, current_value, condition)

        case LogicConditionState.ANY_OF:
            return _matches_checkbox_value(current_value, condition)

        case LogicConditionState.LTE:
            return to_number(current_value) <= to_number(condition.value)

        case LogicConditionState.GTE:
            return to_number(current_value) >= to_number(condition.value)

    return False


def _matches_any_value(field_type: FieldType, current_value, condition: Condition) -> bool:
    """Membership test for "is equals to" and "is either".

    An "Others" condition value also matches an "Others" selection. The
    live form binds a sentinel value to radio fields for it, while a
    submitted answer carries the "Others: " prefix.
    """
    condition_values = [to_str(v) for v in as_list(condition.value)]
    current = to_str(current_value)

    if OTHERS_OPTION in condition_values:
        if field_type == FieldType.RADIO:
            condition_values.append(RADIO_OTHERS_SENTINEL)
        # TODO: an option literally named "Others: ..." also passes here even
        # when the field has no "Others" option enabled.
        return current in condition_values or current.startswith(OTHERS_ANSWER_PREFIX)

    return current in condition_values


def _matches_checkbox_value(current_value, condition: Condition) -> bool:
    """Order-independent comparison of a checkbox answer to each candidate."""
    if not isinstance(current_value, CheckboxConditionValue):
        return False
    if not is_logic_checkbox_condition(condition):
        return False

    current = current_value.sorted()
    return any(candidate.sorted() == current for candidate in condition.value)
