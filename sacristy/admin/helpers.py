"""Shared helpers for admin controllers."""

from __future__ import annotations

import re
from typing import Any
from uuid import UUID

from litestar import Request

from sacristy.admin.navigation import build_admin_nav
from sacristy.entities import EntitySchema, FieldSpec
from sacristy.lib.errors import FormValidationError
from sacristy.lib.flash import pop_toasts

_TIME_RE = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")
_TRUE_VALUES = frozenset({"on", "true", "1", "yes"})


def get_admin_context(request: Request) -> dict:
    """Common admin template context: nav, current path and pending toasts."""
    return {
        "admin_nav": build_admin_nav(request.app, request.url.path),
        "current_path": request.url.path,
        "site_name": request.app.state.site_name,
        "toasts": pop_toasts(request),
    }


def _parse_value(spec: FieldSpec, raw: Any) -> Any:
    if spec.kind == "bool":
        return str(raw or "").strip().lower() in _TRUE_VALUES

    text = str(raw if raw is not None else "").strip()
    if not text:
        return spec.default

    if spec.kind == "int":
        try:
            return int(text)
        except ValueError:
            raise FormValidationError(f"{spec.label}: número inválido ({text})", field=spec.name)

    if spec.kind == "time":
        if not _TIME_RE.match(text):
            raise FormValidationError(f"{spec.label}: horário inválido ({text})", field=spec.name)
        return text

    if spec.kind == "choice":
        allowed = {value for value, _ in spec.choices}
        if text not in allowed:
            raise FormValidationError(f"{spec.label}: opção inválida ({text})", field=spec.name)
        return text

    if spec.kind == "album":
        try:
            return UUID(text)
        except ValueError:
            raise FormValidationError(f"{spec.label}: álbum inválido", field=spec.name)

    return text


def extract_entity_form_data(schema: EntitySchema, data: dict) -> dict[str, Any]:
    """Convert a submitted form into typed column values.

    Raises:
        FormValidationError: If a value can't be parsed. Required fields are
            checked by the service once defaults have been applied.
    """
    return {spec.name: _parse_value(spec, data.get(spec.name)) for spec in schema.fields}


def form_values(schema: EntitySchema, entity: Any | None) -> dict[str, Any]:
    """Values to pre-fill the edit form with."""
    values = {}
    for spec in schema.fields:
        value = getattr(entity, spec.name, None) if entity is not None else spec.default
        values[spec.name] = "" if value is None else value
    return values
