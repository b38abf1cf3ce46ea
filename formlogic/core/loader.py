"""
Form definition loader.

Reads form definitions (fields + logic) from YAML or JSON files, as
exported from the form document store.
"""

import json
import logging
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from formlogic.core.schema import FormDefinition

logger = logging.getLogger(__name__)

SUPPORTED_SUFFIXES = (".yaml", ".yml", ".json")


class FormDefinitionError(ValueError):
    """Raised when a form definition file cannot be read or validated."""

    def __init__(self, path: Path | str, message: str):
        self.path = str(path)
        self.message = message
        super().__init__(f"{self.path}: {message}")


def _read_raw(path: Path) -> Any:
    text = path.read_text(encoding="utf-8")
    if path.suffix == ".json":
        return json.loads(text)
    return yaml.safe_load(text)


def load_form_definition(path: Path | str) -> FormDefinition:
    """Load and validate a form definition file.

    Args:
        path: Path to a .yaml, .yml or .json file.

    Returns:
        The validated FormDefinition.

    Raises:
        FormDefinitionError: If the file is missing, has an unsupported
            suffix, cannot be parsed, or does not validate.
    """
    path = Path(path)
    if path.suffix not in SUPPORTED_SUFFIXES:
        raise FormDefinitionError(path, f"unsupported file type '{path.suffix}'")

    try:
        raw = _read_raw(path)
    except OSError as e:
        raise FormDefinitionError(path, f"cannot read file ({e})") from e
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise FormDefinitionError(path, f"cannot parse file ({e})") from e

    if not isinstance(raw, dict):
        raise FormDefinitionError(path, "top level must be a mapping")

    try:
        return FormDefinition.model_validate(raw)
    except ValidationError as e:
        raise FormDefinitionError(path, str(e)) from e


def list_form_definitions(directory: Path | str) -> list[dict[str, Any]]:
    """Summarize the valid form definitions in a directory.

    Files that fail to load are skipped with a warning.
    """
    directory = Path(directory)
    forms: list[dict[str, Any]] = []
    if not directory.is_dir():
        return forms

    for path in sorted(directory.iterdir()):
        if path.suffix not in SUPPORTED_SUFFIXES:
            continue
        try:
            form = load_form_definition(path)
        except FormDefinitionError as e:
            logger.warning("Skipping form definition %s: %s", path.name, e.message)
            continue
        forms.append({
            "filename": path.name,
            "title": form.title or path.stem,
            "form_id": form.form_id,
            "field_count": len(form.form_fields),
            "logic_count": len(form.form_logics),
        })
    return forms
