"""Load and query the OpenAPI spec.

Reads the spec JSON and extracts component schemas, operations and the
request/response schemas the generator needs.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

DEFAULT_SPEC_PATH = Path("spec3.sdk.json")

_FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"


def load_spec(path: Path | str | None = None) -> dict[str, Any]:
    """Load the OpenAPI spec from disk."""
    spec_file = Path(path) if path else DEFAULT_SPEC_PATH
    with open(spec_file, encoding="utf-8") as f:
        return json.load(f)


def get_paths(spec: dict[str, Any]) -> dict[str, Any]:
    """Extract paths from the spec."""
    return spec.get("paths", {})


def get_schemas(spec: dict[str, Any]) -> dict[str, Any]:
    """Extract component schemas from the spec."""
    return spec.get("components", {}).get("schemas", {})


def resolve_ref(spec: dict[str, Any], ref: str) -> dict[str, Any]:
    """Resolve a $ref pointer in the spec."""
    parts = ref.lstrip("#/").split("/")
    node = spec
    for part in parts:
        node = node[part]
    return node


def is_ref(schema: dict[str, Any]) -> bool:
    return "$ref" in schema


def get_path_item(spec: dict[str, Any], path: str) -> dict[str, Any]:
    """Return the path item for `path`, following a top-level $ref."""
    item = get_paths(spec)[path]
    if is_ref(item):
        item = resolve_ref(spec, item["$ref"])
    return item


def get_ok_response_schema(operation: dict[str, Any]) -> dict[str, Any] | None:
    """Schema of the JSON body returned with a 200 response."""
    response = operation.get("responses", {}).get("200", {})
    return response.get("content", {}).get("application/json", {}).get("schema")


def get_request_form_parameters(operation: dict[str, Any]) -> dict[str, Any] | None:
    """Schema of the form-encoded request body, if the operation has one.

    Stripe attaches an empty form body to most GET and DELETE operations;
    those count as no body at all.
    """
    content = operation.get("requestBody", {}).get("content", {})
    schema = content.get(_FORM_CONTENT_TYPE, {}).get("schema")
    if schema is None:
        return None
    if not is_ref(schema) and as_object_type(schema) is not None and not schema.get("properties"):
        return None
    return schema


def as_object_type(schema: dict[str, Any]) -> dict[str, Any] | None:
    """Return `schema` if it describes an object, else None."""
    if schema.get("type") == "object" or "properties" in schema:
        return schema
    return None


def as_object_enum_name(schema: dict[str, Any]) -> str | None:
    """Value of the `object` discriminator property, when it has exactly one."""
    obj = as_object_type(schema)
    if obj is None:
        return None
    object_prop = obj.get("properties", {}).get("object", {})
    values = object_prop.get("enum") or []
    if len(values) == 1:
        return values[0]
    return None


def as_data_array_item(schema: dict[str, Any]) -> dict[str, Any] | None:
    """Item schema of the `data` array of a list object."""
    data = schema.get("properties", {}).get("data", {})
    if data.get("type") != "array":
        return None
    return data.get("items")


def is_enum_with_just_empty_string(schema: dict[str, Any]) -> bool:
    """Stripe marks "unset this value" options as a string enum of just ""."""
    if is_ref(schema):
        return False
    return schema.get("enum") == [""]
