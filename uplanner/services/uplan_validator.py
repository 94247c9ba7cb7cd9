"""Completeness check of a U-Plan document before FAS submission."""

from __future__ import annotations

from typing import Any

from pydantic import ValidationError

from uplanner.contracts.result import CompletenessReport
from uplanner.contracts.uplan import Uplan

OPERATION_VOLUMES = "operationVolumes"

# Error types that only mean "not filled in yet".
_DRAFT_TOLERATED = frozenset({"missing", "string_too_short", "missing_value"})


def _path(loc: tuple[Any, ...]) -> str:
    return ".".join(str(part) for part in loc)


def _collect(document: dict[str, Any] | None, draft: bool) -> CompletenessReport:
    field_errors: dict[str, list[str]] = {}

    try:
        Uplan.model_validate(document or {})
    except ValidationError as exc:
        for error in exc.errors():
            if draft and error["type"] in _DRAFT_TOLERATED:
                continue
            path = _path(error["loc"]) or "document"
            field_errors.setdefault(path, []).append(error["msg"])

    if not draft and not (document or {}).get(OPERATION_VOLUMES):
        field_errors.setdefault(OPERATION_VOLUMES, []).append(
            "At least one operation volume is required"
        )

    return CompletenessReport(
        is_complete=not field_errors,
        missing_fields=list(field_errors),
        field_errors=field_errors,
    )


def validate_uplan(document: dict[str, Any] | None) -> CompletenessReport:
    """Check that a document has every field FAS requires.

    ``missing_fields`` lists the dotted wire paths of offending fields in
    declaration order, each path once. ``field_errors`` maps each of them
    to the validation messages.
    """
    return _collect(document, draft=False)


def validate_uplan_draft(document: dict[str, Any] | None) -> CompletenessReport:
    """Like ``validate_uplan`` but tolerates fields that are still empty.

    Used when the operator saves a partially edited document.
    """
    return _collect(document, draft=True)
