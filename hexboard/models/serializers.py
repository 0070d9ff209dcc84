"""JSON serialization helpers for board and template models.

Thin wrappers around Pydantic's built-in serialization so that the HTTP layer
and template exporters can move models to and from JSON without depending on
Pydantic internals.  Templates are always written with their camelCase wire
names.
"""

from __future__ import annotations

import json
import typing

import pydantic

from ..errors import InvalidTemplate
from .template import MapTemplate


def serialize_model(model: pydantic.BaseModel) -> dict[str, typing.Any]:
    """Return a JSON-serializable dict representation of any Pydantic model."""
    return model.model_dump(mode='json')


def serialize_to_json(model: pydantic.BaseModel) -> str:
    """Serialize any Pydantic model to a compact JSON string."""
    return model.model_dump_json()


def template_to_dict(template: MapTemplate) -> dict[str, typing.Any]:
    """Return the template in its JSON wire shape (camelCase keys)."""
    return template.model_dump(mode='json', by_alias=True, exclude_none=True)


def template_to_json(template: MapTemplate, indent: int | None = 2) -> str:
    """Serialize a template to a JSON document, pretty-printed by default."""
    return template.model_dump_json(by_alias=True, exclude_none=True, indent=indent)


def template_from_json(json_str: str) -> MapTemplate:
    """Parse a JSON document into a MapTemplate."""
    try:
        return MapTemplate.model_validate(json.loads(json_str))
    except (json.JSONDecodeError, pydantic.ValidationError) as exc:
        raise InvalidTemplate(f'Invalid board template: {exc}') from exc
