"""
Answer shapes accepted by the logic engine.

A form's answers are represented differently depending on where they
come from:
- Live form (client): each field carries its current `field_value`.
- Finalized submission (server): each response carries either an
  `answer` value or an `answer_array` list.

Both shapes are accepted everywhere. The shape is detected once, at
validation time, by checking which accessor the raw value has.
"""

from typing import Annotated, Any, Iterable, Sequence

from pydantic import (
    BaseModel,
    ConfigDict,
    Discriminator,
    Field,
    Tag,
    TypeAdapter,
)

from formlogic.core.schema import CheckboxConditionValue, FieldType, FormDefinition, FormField

# Value the live form binds to a radio field when its "Others" option is picked
RADIO_OTHERS_SENTINEL = "radioButtonOthers"

# Prefix of a submitted answer for an "Others" option, e.g. "Others: custom text"
OTHERS_ANSWER_PREFIX = "Others: "

AnswerValue = str | int | float | CheckboxConditionValue | list[bool] | list[str] | list[list[str]]


class ClientFieldResponse(BaseModel):
    """A field on a live, possibly partially-filled form."""

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(..., alias="_id")
    field_type: FieldType = Field(..., alias="fieldType")
    field_value: str | int | float | CheckboxConditionValue | list[bool] | None = Field(
        ...,
        alias="fieldValue",
    )


class SubmissionResponse(BaseModel):
    """A response from a finalized submission payload."""

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(..., alias="_id")
    field_type: FieldType = Field(..., alias="fieldType")
    answer: str | int | float | None = None
    answer_array: CheckboxConditionValue | list[str] | list[list[str]] | None = Field(
        default=None,
        alias="answerArray",
    )


def _response_shape(value: Any) -> str:
    """Detect which answer shape a raw value has."""
    if isinstance(value, dict):
        return "client" if ("field_value" in value or "fieldValue" in value) else "submission"
    return "client" if hasattr(value, "field_value") else "submission"


LogicResponse = Annotated[
    Annotated[ClientFieldResponse, Tag("client")]
    | Annotated[SubmissionResponse, Tag("submission")],
    Discriminator(_response_shape),
]

_responses_adapter = TypeAdapter(list[LogicResponse])


def coerce_responses(responses: Iterable[Any]) -> list[ClientFieldResponse | SubmissionResponse]:
    """Validate a mix of raw dicts and models into typed responses.

    Model instances pass through unchanged; dicts of either shape are
    validated into the matching model.

    Raises:
        pydantic.ValidationError: If a response matches neither shape.
    """
    items = list(responses)
    if all(isinstance(r, (ClientFieldResponse, SubmissionResponse)) for r in items):
        return items
    return _responses_adapter.validate_python(items)


def get_current_value(response: ClientFieldResponse | SubmissionResponse) -> AnswerValue | None:
    """Return the answer held by a response, whatever its shape."""
    if isinstance(response, ClientFieldResponse):
        return response.field_value
    if response.answer is not None:
        return response.answer
    if response.answer_array is not None:
        return response.answer_array
    return None


def index_responses(
    responses: Sequence[ClientFieldResponse | SubmissionResponse],
) -> dict[str, ClientFieldResponse | SubmissionResponse]:
    """Key responses by field ID. The first response for an ID wins."""
    by_id: dict[str, ClientFieldResponse | SubmissionResponse] = {}
    for response in responses:
        by_id.setdefault(response.id, response)
    return by_id


# -----------------------------------------------------------------
# Checkbox adaptors
# -----------------------------------------------------------------


def checkbox_value_from_selection(field: FormField, checked: Sequence[bool]) -> CheckboxConditionValue:
    """Build a checkbox value from the live form's per-option flags.

    `checked` holds one flag per declared option, followed by one flag
    for the "Others" option when the field enables it.
    """
    options = [
        option for option, is_checked in zip(field.field_options, checked)
        if is_checked
    ]
    others = False
    if field.others_radio_button and len(checked) > len(field.field_options):
        others = bool(checked[len(field.field_options)])
    return CheckboxConditionValue(options=options, others=others)


def checkbox_value_from_answer_array(field: FormField, answer_array: Sequence[str]) -> CheckboxConditionValue:
    """Build a checkbox value from a submitted list of selected options.

    Entries that are declared options are kept as options. An entry
    starting with "Others: " that is not a declared option marks the
    "Others" option as selected.
    """
    declared = set(field.field_options)
    options: list[str] = []
    others = False
    for entry in answer_array:
        if entry in declared:
            options.append(entry)
        elif entry.startswith(OTHERS_ANSWER_PREFIX):
            others = True
    return CheckboxConditionValue(options=options, others=others)


def adapt_checkbox_responses(
    form: FormDefinition,
    responses: Sequence[ClientFieldResponse | SubmissionResponse],
) -> list[ClientFieldResponse | SubmissionResponse]:
    """Convert raw checkbox answers of either shape into checkbox values.

    Live-form responses holding per-option flags and submission
    responses holding a flat list of strings are converted; everything
    else, including responses for fields the form does not declare, is
    returned unchanged.
    """
    adapted: list[ClientFieldResponse | SubmissionResponse] = []
    for response in responses:
        if response.field_type != FieldType.CHECKBOX:
            adapted.append(response)
            continue

        field = form.get_field(response.id)
        if field is None:
            adapted.append(response)
            continue

        if isinstance(response, ClientFieldResponse):
            if isinstance(response.field_value, list):
                response = response.model_copy(
                    update={"field_value": checkbox_value_from_selection(field, response.field_value)}
                )
        elif isinstance(response.answer_array, list) and all(
            isinstance(entry, str) for entry in response.answer_array
        ):
            response = response.model_copy(
                update={"answer_array": checkbox_value_from_answer_array(field, response.answer_array)}
            )
        adapted.append(response)
    return adapted
