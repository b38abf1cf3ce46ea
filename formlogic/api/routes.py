"""
FastAPI routes for the form logic service.

Endpoints:
- POST /logic/visible-fields - resolve visible fields for an answer set
- POST /logic/prevent-submit - find the logic unit blocking submission
- POST /logic/evaluate       - both of the above in one call
- GET  /forms                - list example form definitions
- GET  /forms/{filename}     - get a specific form definition
- POST /cache/invalidate     - drop cached logic for a form
- GET  /health               - health check
"""

import logging
from pathlib import Path
from typing import Any

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel

from formlogic.core.answers import coerce_responses
from formlogic.core.cache import LogicIndexCache
from formlogic.core.grouping import LogicIndex, build_logic_index
from formlogic.core.loader import FormDefinitionError, list_form_definitions, load_form_definition
from formlogic.core.schema import FormDefinition
from formlogic.core.submission import evaluate_form_logic, get_logic_unit_preventing_submit
from formlogic.core.visibility import LogicInvariantError, get_visible_field_ids

logger = logging.getLogger(__name__)

router = APIRouter()

# These will be injected by the app factory
_index_cache: LogicIndexCache | None = None
_forms_dir: Path = Path(__file__).parent.parent / "forms"


def configure_routes(index_cache: LogicIndexCache | None, forms_dir: Path | str | None = None):
    """Inject the logic index cache and forms directory into the routes module.

    Called by the app factory during startup. Passing no cache compiles
    logic on every request.
    """
    global _index_cache, _forms_dir
    _index_cache = index_cache
    if forms_dir is not None:
        _forms_dir = Path(forms_dir)


# --- Request / Response Models ---


class LogicRequest(BaseModel):
    """Request body for the /logic endpoints."""

    form: FormDefinition
    responses: list[dict[str, Any]]


class PreventSubmitRequest(LogicRequest):
    """Request body for /logic/prevent-submit."""

    visible_field_ids: list[str] | None = None


class VisibleFieldsResponse(BaseModel):
    visible_field_ids: list[str]
    has_invalid_logic: bool


class PreventSubmitResponse(BaseModel):
    blocked: bool
    logic_unit: dict[str, Any] | None = None
    message: str | None = None


class EvaluateResponse(VisibleFieldsResponse, PreventSubmitResponse):
    pass


class InvalidateRequest(BaseModel):
    form_id: str


# --- Helpers ---


def _get_logic_index(form: FormDefinition) -> LogicIndex:
    if _index_cache is None:
        return build_logic_index(form)
    return _index_cache.get_or_build(form)


def _prepare_responses(request: LogicRequest) -> list:
    """Validate responses of either shape, rejecting malformed ones with a 422."""
    try:
        responses = coerce_responses(request.responses)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=f"Invalid responses: {e}")
    return responses


def _prevent_submit_payload(logic_unit) -> dict[str, Any]:
    if logic_unit is None:
        return {"blocked": False, "logic_unit": None, "message": None}
    return {
        "blocked": True,
        "logic_unit": logic_unit.model_dump(mode="json", by_alias=True),
        "message": logic_unit.prevent_submit_message,
    }


# --- Endpoints ---


@router.post("/logic/visible-fields", response_model=VisibleFieldsResponse)
async def visible_fields(request: LogicRequest):
    """Resolve which fields are visible for the given responses."""
    responses = _prepare_responses(request)
    logic_index = _get_logic_index(request.form)
    try:
        visible = get_visible_field_ids(responses, request.form, logic_index=logic_index)
    except LogicInvariantError as e:
        logger.error("Error resolving visibility: %s", e, exc_info=True)
        raise HTTPException(status_code=500, detail=f"Error resolving visibility: {str(e)}")

    return VisibleFieldsResponse(
        visible_field_ids=[fid for fid in request.form.field_ids if fid in visible],
        has_invalid_logic=logic_index.has_invalid_logic,
    )


@router.post("/logic/prevent-submit", response_model=PreventSubmitResponse)
async def prevent_submit(request: PreventSubmitRequest):
    """Return the first preventSubmit unit blocking the responses, if any."""
    responses = _prepare_responses(request)
    logic_index = _get_logic_index(request.form)
    visible = set(request.visible_field_ids) if request.visible_field_ids is not None else None
    try:
        logic_unit = get_logic_unit_preventing_submit(
            responses,
            request.form,
            visible_field_ids=visible,
            logic_index=logic_index,
        )
    except LogicInvariantError as e:
        logger.error("Error checking submission: %s", e, exc_info=True)
        raise HTTPException(status_code=500, detail=f"Error checking submission: {str(e)}")

    if logic_unit is not None:
        logger.info(
            "Submission blocked for form %s by logic unit %s",
            request.form.form_id,
            logic_unit.id,
        )
    return PreventSubmitResponse(**_prevent_submit_payload(logic_unit))


@router.post("/logic/evaluate", response_model=EvaluateResponse)
async def evaluate(request: LogicRequest):
    """Resolve visibility and the submission gate in one call."""
    responses = _prepare_responses(request)
    logic_index = _get_logic_index(request.form)
    try:
        result = evaluate_form_logic(responses, request.form, logic_index=logic_index)
    except LogicInvariantError as e:
        logger.error("Error evaluating form logic: %s", e, exc_info=True)
        raise HTTPException(status_code=500, detail=f"Error evaluating form logic: {str(e)}")

    return EvaluateResponse(
        visible_field_ids=result.visible_field_ids,
        has_invalid_logic=result.has_invalid_logic,
        **_prevent_submit_payload(result.blocking_logic),
    )


@router.get("/forms")
async def list_forms():
    """List available example form definitions."""
    return {"forms": list_form_definitions(_forms_dir)}


@router.get("/forms/{filename}")
async def get_form(filename: str):
    """Get a specific form definition by filename."""
    path = _forms_dir / filename
    if path.parent != _forms_dir or not path.exists():
        raise HTTPException(status_code=404, detail=f"Form '{filename}' not found")

    try:
        form = load_form_definition(path)
    except FormDefinitionError as e:
        raise HTTPException(status_code=500, detail=f"Error reading form file '{filename}': {e.message}")
    return {"filename": filename, "form": form.model_dump(mode="json", by_alias=True)}


@router.post("/cache/invalidate")
async def invalidate_cache(request: InvalidateRequest):
    """Drop every cached logic index of a form."""
    if _index_cache is None:
        return {"success": False, "removed": 0, "message": "Cache disabled"}

    removed = _index_cache.invalidate(request.form_id)
    return {
        "success": removed > 0,
        "removed": removed,
        "message": "Cache invalidated" if removed else "Form not cached",
    }


@router.get("/health")
async def health_check():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "cache_enabled": _index_cache is not None,
        "cached_indexes": _index_cache.count() if _index_cache else 0,
    }
