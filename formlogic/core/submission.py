"""
Submission gate.

Decides whether a set of answers must be blocked from submission by a
preventSubmit logic unit, and bundles visibility and blocking into one
evaluation result for callers that need both.
"""

from typing import Any, Iterable

from pydantic import BaseModel, Field

from formlogic.core.answers import adapt_checkbox_responses, coerce_responses, index_responses
from formlogic.core.grouping import LogicIndex, build_logic_index
from formlogic.core.schema import FormDefinition, LogicUnit
from formlogic.core.visibility import compute_visible_field_ids, is_logic_unit_satisfied


class LogicEvaluation(BaseModel):
    """Visible fields and the blocking unit (if any) for one answer set."""

    visible_field_ids: list[str] = Field(
        default_factory=list,
        description="Visible field IDs in form declaration order",
    )
    blocking_logic: LogicUnit | None = None
    has_invalid_logic: bool = False

    @property
    def is_blocked(self) -> bool:
        return self.blocking_logic is not None


def get_logic_unit_preventing_submit(
    responses: Iterable[Any],
    form: FormDefinition,
    visible_field_ids: set[str] | None = None,
    logic_index: LogicIndex | None = None,
) -> LogicUnit | None:
    """Return the first preventSubmit unit satisfied by the responses.

    Args:
        responses: Responses in either answer shape (models or dicts).
        form: The form the responses belong to.
        visible_field_ids: Currently visible fields. Resolved from the
            responses if omitted.
        logic_index: A prebuilt (e.g. cached) index for this form.

    Returns:
        The blocking logic unit, or None if submission may proceed.
    """
    if logic_index is None:
        logic_index = build_logic_index(form)
    responses = adapt_checkbox_responses(form, coerce_responses(responses))

    if visible_field_ids is None:
        visible_field_ids = compute_visible_field_ids(responses, logic_index, form.field_ids)

    responses_by_id = index_responses(responses)
    for logic_unit in logic_index.prevent_submit:
        if is_logic_unit_satisfied(responses_by_id, logic_unit.conditions, visible_field_ids):
            return logic_unit
    return None


def evaluate_form_logic(
    responses: Iterable[Any],
    form: FormDefinition,
    logic_index: LogicIndex | None = None,
) -> LogicEvaluation:
    """Resolve visibility and the submission gate in one pass."""
    if logic_index is None:
        logic_index = build_logic_index(form)
    responses = adapt_checkbox_responses(form, coerce_responses(responses))

    visible = compute_visible_field_ids(responses, logic_index, form.field_ids)
    blocking = get_logic_unit_preventing_submit(
        responses,
        form,
        visible_field_ids=visible,
        logic_index=logic_index,
    )
    return LogicEvaluation(
        visible_field_ids=[field_id for field_id in form.field_ids if field_id in visible],
        blocking_logic=blocking,
        has_invalid_logic=logic_index.has_invalid_logic,
    )
