"""
Form and logic definition models.

These Pydantic models define the contract between the form document
store and the logic engine. Attribute names are snake_case; the stored
camelCase names (`_id`, `fieldType`, `logicType`, ...) are accepted as
aliases so documents can be validated as-is.

Only schema-level shape is checked here. Cross-references between logic
rules and form fields are not validated: rules pointing at unknown
fields are discarded later by the grouping step.
"""

from enum import Enum

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, model_validator


# --- Enums ---


class FieldType(str, Enum):
    """Supported form field types."""

    SECTION = "section"
    STATEMENT = "statement"
    EMAIL = "email"
    MOBILE = "mobile"
    HOME_NO = "homeno"
    NUMBER = "number"
    DECIMAL = "decimal"
    SHORT_TEXT = "textfield"
    LONG_TEXT = "textarea"
    DROPDOWN = "dropdown"
    COUNTRY_REGION = "country_region"
    YES_NO = "yes_no"
    CHECKBOX = "checkbox"
    RADIO = "radiobutton"
    ATTACHMENT = "attachment"
    DATE = "date"
    RATING = "rating"
    NRIC = "nric"
    TABLE = "table"
    IMAGE = "image"
    UEN = "uen"
    CHILDREN = "children"


class LogicConditionState(str, Enum):
    """Comparison operators available to logic conditions."""

    EQUAL = "is equals to"
    EITHER = "is either"
    ANY_OF = "is any of"
    LTE = "is less than or equal to"
    GTE = "is more than or equal to"


class LogicType(str, Enum):
    """The effect a logic unit has when its conditions are satisfied."""

    SHOW_FIELDS = "showFields"
    PREVENT_SUBMIT = "preventSubmit"


ScalarValue = str | int | float


# --- Condition Models ---


class CheckboxConditionValue(BaseModel):
    """Normalized checkbox selection.

    Used both as an authored AnyOf candidate and as a checkbox answer,
    so the two can be compared regardless of option order.
    """

    options: list[str] = Field(default_factory=list)
    others: bool = False

    def sorted(self) -> "CheckboxConditionValue":
        """Return a copy with `options` in sorted order."""
        return CheckboxConditionValue(options=sorted(self.options), others=self.others)


class Condition(BaseModel):
    """A single comparison between a field's answer and an authored value."""

    model_config = ConfigDict(populate_by_name=True)

    field: str = Field(
        ...,
        min_length=1,
        description="ID of the field whose answer is compared",
    )
    operator: LogicConditionState = Field(
        ...,
        validation_alias=AliasChoices("operator", "state"),
        description="The comparison operator to apply",
    )
    value: ScalarValue | list[ScalarValue] | list[CheckboxConditionValue] = Field(
        ...,
        description="Scalar (is equals to), list (is either) or checkbox candidates (is any of)",
    )


class LogicUnit(BaseModel):
    """One authored rule: conditions joined with AND, plus an effect."""

    model_config = ConfigDict(populate_by_name=True)

    id: str | None = Field(default=None, alias="_id")
    logic_type: LogicType = Field(..., alias="logicType")
    conditions: list[Condition] = Field(
        ...,
        min_length=1,
        description="Conditions that must all hold (AND logic)",
    )
    show: list[str] = Field(
        default_factory=list,
        description="Field IDs revealed by a showFields unit",
    )
    prevent_submit_message: str | None = Field(default=None, alias="preventSubmitMessage")

    @property
    def is_show_fields(self) -> bool:
        return self.logic_type == LogicType.SHOW_FIELDS

    @property
    def is_prevent_submit(self) -> bool:
        return self.logic_type == LogicType.PREVENT_SUBMIT


# --- Form Field ---


class FormField(BaseModel):
    """Definition of a single form field, as far as logic is concerned."""

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(..., min_length=1, alias="_id")
    field_type: FieldType = Field(..., alias="fieldType")
    title: str | None = None
    field_options: list[str] = Field(default_factory=list, alias="fieldOptions")
    others_radio_button: bool = Field(default=False, alias="othersRadioButton")


# --- Top-Level Form Definition ---


class FormDefinition(BaseModel):
    """A form's ordered field list and its logic units."""

    model_config = ConfigDict(populate_by_name=True)

    form_id: str | None = Field(default=None, alias="_id")
    title: str | None = None
    version: int | str | None = Field(
        default=None,
        description="Changes whenever fields or logic change; used as a cache key",
    )
    form_fields: list[FormField] = Field(default_factory=list)
    form_logics: list[LogicUnit] = Field(default_factory=list)

    @model_validator(mode="after")
    def validate_unique_field_ids(self) -> "FormDefinition":
        """Field IDs must be unique within a form."""
        seen = set()
        for f in self.form_fields:
            if f.id in seen:
                raise ValueError(f"Duplicate field ID: '{f.id}'")
            seen.add(f.id)
        return self

    @property
    def field_ids(self) -> list[str]:
        """Field IDs in declaration order."""
        return [f.id for f in self.form_fields]

    def get_field(self, field_id: str) -> FormField | None:
        for field in self.form_fields:
            if field.id == field_id:
                return field
        return None
