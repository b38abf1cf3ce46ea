"""
Deterministic visibility resolver for form fields.

Computes the set of visible fields as a least fixed point: sweeps over
the form's fields are repeated, adding every field whose visibility is
unconditional or has become satisfied, until a sweep adds nothing.

A condition only counts if its subject field is itself visible, so
hidden fields never gate other fields. Fields whose visibility depends
on each other in a cycle stay hidden.
"""

from typing import Any, Iterable, Mapping, Sequence

from formlogic.core.answers import (
    ClientFieldResponse,
    SubmissionResponse,
    adapt_checkbox_responses,
    coerce_responses,
    index_responses,
)
from formlogic.core.conditions import evaluate_condition
from formlogic.core.grouping import LogicIndex, build_logic_index
from formlogic.core.schema import Condition, FormDefinition


class LogicInvariantError(RuntimeError):
    """Raised when the fixed-point loop fails to converge.

    The visible set grows on every sweep that changes it and is bounded
    by the field list, so this signals a bug rather than bad input.
    """


def is_logic_unit_satisfied(
    responses_by_id: Mapping[str, ClientFieldResponse | SubmissionResponse],
    conditions: Sequence[Condition],
    visible_field_ids: set[str],
) -> bool:
    """Check whether every condition of an AND-group holds.

    Each condition's subject field must be visible and its response must
    fulfil the condition.

    Args:
        responses_by_id: Responses keyed by field ID.
        conditions: The AND-group to check.
        visible_field_ids: Fields currently known to be visible.

    Returns:
        True if all conditions are satisfied, False otherwise.
    """
    return all(
        condition.field in visible_field_ids
        and evaluate_condition(responses_by_id.get(condition.field), condition)
        for condition in conditions
    )


def compute_visible_field_ids(
    responses: Iterable[Any],
    logic_index: LogicIndex,
    field_ids: Sequence[str] | None = None,
) -> set[str]:
    """Resolve which fields are visible for the given responses.

    The first sweep adds every field without logic, the next adds fields
    revealed by those, and so on until nothing changes.

    Args:
        responses: Responses in either answer shape (models or dicts).
        logic_index: The compiled logic of the form.
        field_ids: Fields to resolve; defaults to the index's field list.

    Returns:
        The set of visible field IDs.

    Raises:
        LogicInvariantError: If the loop exceeds len(field_ids) + 1 sweeps.
    """
    responses_by_id = index_responses(coerce_responses(responses))
    ordered_ids = list(logic_index.field_ids if field_ids is None else field_ids)

    visible_field_ids: set[str] = set()
    max_sweeps = len(ordered_ids) + 1

    for _ in range(max_sweeps):
        changes_made = False
        for field_id in ordered_ids:
            if field_id in visible_field_ids:
                continue

            # Just one group has to hold, e.g. show X if (Y=yes and Z=yes) or (A=1)
            groups = logic_index.groups_for(field_id)
            if not groups or any(
                is_logic_unit_satisfied(responses_by_id, group, visible_field_ids)
                for group in groups
            ):
                visible_field_ids.add(field_id)
                changes_made = True

        if not changes_made:
            return visible_field_ids

    raise LogicInvariantError(
        f"Visibility did not converge after {max_sweeps} sweeps "
        f"over {len(ordered_ids)} fields"
    )


def get_visible_field_ids(
    responses: Iterable[Any],
    form: FormDefinition,
    logic_index: LogicIndex | None = None,
) -> set[str]:
    """Resolve visible fields directly from a form definition.

    Args:
        responses: Responses in either answer shape (models or dicts).
            Raw checkbox answers are adapted against the form first.
        form: The form whose fields to resolve.
        logic_index: A prebuilt (e.g. cached) index for this form. Built
            from the form if omitted.

    Returns:
        The set of visible field IDs.
    """
    if logic_index is None:
        logic_index = build_logic_index(form)
    responses = adapt_checkbox_responses(form, coerce_responses(responses))
    return compute_visible_field_ids(responses, logic_index, form.field_ids)
