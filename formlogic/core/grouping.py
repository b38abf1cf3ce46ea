"""
Logic grouping index.

Compiles a form's logic units into a per-field index of AND-groups:
a target field is visible if any one of its groups is fully satisfied.
Units whose conditions reference fields missing from the form are
discarded; show targets missing from the form are skipped.
"""

import logging
from types import MappingProxyType
from typing import Mapping

from pydantic import BaseModel, ConfigDict, Field, field_validator

from formlogic.core.schema import Condition, FormDefinition, LogicUnit

logger = logging.getLogger(__name__)

AndGroup = tuple[Condition, ...]


class LogicIndex(BaseModel):
    """Immutable, cacheable result of compiling a form's logic.

    Attributes:
        form_id: ID of the compiled form, if it has one.
        field_ids: Field IDs in declaration order.
        groups: Target field ID -> AND-groups, in authoring order.
        prevent_submit: Valid preventSubmit units, in authoring order.
        has_invalid_logic: True if any unit was discarded.
    """

    model_config = ConfigDict(frozen=True)

    form_id: str | None = None
    field_ids: tuple[str, ...] = ()
    groups: Mapping[str, tuple[AndGroup, ...]] = Field(default_factory=dict, validate_default=True)
    prevent_submit: tuple[LogicUnit, ...] = ()
    has_invalid_logic: bool = False

    @field_validator("groups", mode="after")
    @classmethod
    def freeze_groups(cls, v: Mapping[str, tuple[AndGroup, ...]]) -> Mapping[str, tuple[AndGroup, ...]]:
        """Wrap the groups in a read-only view so shared indexes stay unchanged."""
        return MappingProxyType(dict(v))

    def groups_for(self, field_id: str) -> tuple[AndGroup, ...]:
        """Return the AND-groups gating a field (empty if always visible)."""
        return self.groups.get(field_id, ())


def all_conditions_exist(conditions: list[Condition], field_ids: set[str]) -> bool:
    """True if every condition's subject field is part of the form."""
    return all(condition.field in field_ids for condition in conditions)


def group_logic_units_by_field(form: FormDefinition) -> dict[str, tuple[AndGroup, ...]]:
    """Group showFields logic by the field each unit reveals.

    Example:
        Show email (1001) and number (1002) if dropdown (1003) is
        "Option 1" and yes_no (1004) is "Yes" gives

            {"1001": ((cond_1003, cond_1004),),
             "1002": ((cond_1003, cond_1004),)}

        If field 1001 is deleted, 1002 keeps its group; 1001 is just
        left out of the index.

    Args:
        form: The form whose logic to group.

    Returns:
        Target field ID -> AND-groups, in authoring order.
    """
    return dict(build_logic_index(form).groups)


def get_prevent_submit_conditions(form: FormDefinition) -> list[LogicUnit]:
    """Return the valid preventSubmit units of a form, in authoring order."""
    return list(build_logic_index(form).prevent_submit)


def build_logic_index(form: FormDefinition) -> LogicIndex:
    """Compile a form's logic units into a LogicIndex.

    A unit with any condition referencing an unknown field is dropped
    entirely. Dropping is reported once per build as an INFO record and
    never interrupts the build.

    Args:
        form: The form to compile.

    Returns:
        The compiled LogicIndex.
    """
    field_ids = set(form.field_ids)
    grouped: dict[str, list[AndGroup]] = {}
    prevent_submit: list[LogicUnit] = []
    has_invalid_logic = False

    for logic_unit in form.form_logics:
        if not all_conditions_exist(logic_unit.conditions, field_ids):
            has_invalid_logic = True
            continue

        if logic_unit.is_prevent_submit:
            prevent_submit.append(logic_unit)
            continue

        and_group = tuple(logic_unit.conditions)
        for target_id in logic_unit.show:
            if target_id in field_ids:
                grouped.setdefault(target_id, []).append(and_group)

    if has_invalid_logic:
        if form.form_id:
            logger.info('formId="%s" message="Form has invalid logic"', form.form_id)
        else:
            logger.info('message="Form has invalid logic"')

    return LogicIndex(
        form_id=form.form_id,
        field_ids=tuple(form.field_ids),
        groups={field_id: tuple(groups) for field_id, groups in grouped.items()},
        prevent_submit=tuple(prevent_submit),
        has_invalid_logic=has_invalid_logic,
    )
