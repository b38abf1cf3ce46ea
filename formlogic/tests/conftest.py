"""
Shared test fixtures and helpers for the form logic test suite.

Provides small builders for fields, conditions, logic units and the
two answer shapes, so tests read as form descriptions rather than
nested dicts.
"""

from pathlib import Path
from typing import Any

import pytest

from formlogic.core.answers import ClientFieldResponse, SubmissionResponse
from formlogic.core.schema import (
    CheckboxConditionValue,
    Condition,
    FormDefinition,
    FormField,
    LogicUnit,
)

FORMS_DIR = Path(__file__).parent.parent / "forms"


def field(field_id: str, field_type: str = "textfield", **kwargs: Any) -> FormField:
    """Build a FormField."""
    return FormField(id=field_id, field_type=field_type, **kwargs)


def cond(field_id: str, operator: str, value: Any) -> Condition:
    """Build a Condition, e.g. cond("d1", "is equals to", "Option A")."""
    return Condition(field=field_id, operator=operator, value=value)


def show(conditions: list[Condition], targets: list[str], unit_id: str | None = None) -> LogicUnit:
    """Build a showFields logic unit."""
    return LogicUnit(id=unit_id, logic_type="showFields", conditions=conditions, show=targets)


def prevent(conditions: list[Condition], unit_id: str | None = None, message: str | None = None) -> LogicUnit:
    """Build a preventSubmit logic unit."""
    return LogicUnit(
        id=unit_id,
        logic_type="preventSubmit",
        conditions=conditions,
        prevent_submit_message=message,
    )


def make_form(
    fields: list[FormField],
    logics: list[LogicUnit] | None = None,
    form_id: str | None = "form_1",
    version: int | str | None = 1,
) -> FormDefinition:
    """Build a FormDefinition."""
    return FormDefinition(
        form_id=form_id,
        version=version,
        form_fields=fields,
        form_logics=logics or [],
    )


def client(field_id: str, field_type: str, value: Any) -> ClientFieldResponse:
    """Build a live-form response."""
    return ClientFieldResponse(id=field_id, field_type=field_type, field_value=value)


def submitted(
    field_id: str,
    field_type: str,
    answer: str | int | float | None = None,
    answer_array: Any = None,
) -> SubmissionResponse:
    """Build a finalized submission response."""
    return SubmissionResponse(
        id=field_id,
        field_type=field_type,
        answer=answer,
        answer_array=answer_array,
    )


def checkbox_value(options: list[str], others: bool = False) -> CheckboxConditionValue:
    return CheckboxConditionValue(options=options, others=others)


@pytest.fixture
def dropdown_form() -> FormDefinition:
    """Dropdown d1 reveals email e1; number n1 has no logic."""
    return make_form(
        fields=[
            field("d1", "dropdown"),
            field("e1", "email"),
            field("n1", "number"),
        ],
        logics=[show([cond("d1", "is equals to", "Option A")], ["e1"], unit_id="show_e1")],
    )
