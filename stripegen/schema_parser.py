"""Infer Rust types from OpenAPI schemas.

Handles:
- $ref to component schemas (boxed for the recursive `api_errors`)
- Field-name type overrides (metadata, expires_at, ...)
- Integer width and timestamp inference
- String enums -> plain Rust enums
- Stripe list objects -> `List<T>`
- Inline objects -> anonymous structs, named later while printing
- anyOf/oneOf -> a single option, `Expandable<T>`, `RangeQueryTs` or a fielded enum
- Required/nullable handling and serde attributes on struct fields
"""

from __future__ import annotations

from typing import Any, Iterable

from . import rust_type as rt
from .errors import GeneratorError
from .loader import as_data_array_item, as_object_enum_name, is_enum_with_just_empty_string, is_ref
from .mappings import DEFAULT_OVERRIDES, Overrides
from .naming import create_ident, field_ident
from .objects import (
    EnumVariant,
    FieldedEnumVariant,
    RustEnum,
    RustFieldedEnum,
    RustStruct,
    StructField,
)
from .rust_type import ExtType, IntType, ObjectType, RustType, SimpleRustType, SimpleType

# Integer fields known to never be negative, by field name
_UNSIGNED_FIELDS: dict[str, IntType] = {
    "attempt_count": IntType.U64,
    "count": IntType.U64,
    "interval_count": IntType.U64,
    "quantity": IntType.U64,
    "size": IntType.U64,
    "total_count": IntType.U64,
    "days_until_due": IntType.U32,
    "expires_after_days": IntType.U32,
    "trial_period_days": IntType.U32,
    "monthly_anchor": IntType.U8,
}


def infer_integer_type(field_name: str | None, fmt: str | None) -> RustType:
    """Pick the integer type for a field."""
    if fmt == "unix-time":
        return rt.ext(ExtType.TIMESTAMP)
    if field_name in _UNSIGNED_FIELDS:
        return rt.simple(SimpleType.int(_UNSIGNED_FIELDS[field_name]))
    return rt.simple(SimpleType.int(IntType.I64))


def _doc(schema: dict[str, Any]) -> str | None:
    return schema.get("description") or None


def _is_currency_field(field_name: str | None) -> bool:
    return field_name is not None and (
        field_name == "currency" or field_name.endswith("_currency")
    )


def infer_schema_type(
    schema: dict[str, Any],
    field_name: str | None = None,
    overrides: Overrides = DEFAULT_OVERRIDES,
) -> RustType:
    """Resolve an inline (non-$ref) schema to a RustType."""
    forced = overrides.forced_field_type(field_name)
    if forced is not None:
        return rt.ext(forced)

    for key in ("anyOf", "oneOf"):
        if key in schema:
            return _infer_union_type(schema, schema[key], field_name, overrides)

    schema_type = schema.get("type")
    if schema_type == "boolean":
        return rt.simple(rt.BOOL)
    if schema_type == "number":
        return rt.simple(rt.FLOAT)
    if schema_type == "integer":
        return infer_integer_type(field_name, schema.get("format"))
    if schema_type == "string":
        if _is_currency_field(field_name):
            return rt.ext(ExtType.CURRENCY)
        variants = build_enum_variants(schema.get("enum") or [])
        if not variants:
            return rt.simple(rt.STRING)
        enum_obj = RustEnum(doc_comment=_doc(schema), default_variant=variants[0].variant_name)
        for variant in variants:
            enum_obj.add_variant(variant)
        return ObjectType(enum_obj)
    if schema_type == "array":
        items = schema.get("items")
        if items is None:
            raise GeneratorError(f"Array schema for field {field_name!r} has no items")
        return rt.vec(infer_schema_or_ref_type(items, field_name, overrides))
    if schema_type == "object" or "properties" in schema:
        return _infer_object_type(schema, field_name, overrides)

    raise GeneratorError(f"Unhandled schema for field {field_name!r}: {schema!r}")


def _infer_object_type(
    schema: dict[str, Any],
    field_name: str | None,
    overrides: Overrides,
) -> RustType:
    if as_object_enum_name(schema) == "list":
        item = as_data_array_item(schema)
        if item is None:
            raise GeneratorError(f"List object for field {field_name!r} has no data items")
        return rt.list_of(infer_schema_or_ref_type(item, field_name, overrides))

    additional = schema.get("additionalProperties")
    if isinstance(additional, dict) and additional:
        return infer_schema_or_ref_type(additional, field_name, overrides)

    return ObjectType(build_struct(schema, _doc(schema), overrides))


def _infer_union_type(
    schema: dict[str, Any],
    options: list[dict[str, Any]],
    field_name: str | None,
    overrides: Overrides,
) -> RustType:
    options = [o for o in options if not is_enum_with_just_empty_string(o)]
    if not options:
        raise GeneratorError(f"No usable anyOf/oneOf options for field {field_name!r}")
    if len(options) == 1:
        return infer_schema_or_ref_type(options[0], field_name, overrides)

    expansion = schema.get("x-expansionResources")
    if expansion:
        expanded = infer_schema_type({"oneOf": expansion["oneOf"]}, field_name, overrides)
        return rt.expandable(expanded)

    first = options[0]
    if not is_ref(first) and first.get("title") == "range_query_specs":
        return rt.ext(ExtType.RANGE_QUERY_TS)

    return ObjectType(build_fielded_enum(options, field_name, _doc(schema), overrides))


def infer_schema_or_ref_type(
    schema: dict[str, Any],
    field_name: str | None = None,
    overrides: Overrides = DEFAULT_OVERRIDES,
) -> RustType:
    """Resolve a schema or $ref to a RustType."""
    if is_ref(schema):
        typ = rt.from_reference(schema["$ref"])
    else:
        typ = infer_schema_type(schema, field_name, overrides)
    if typ.should_box():
        return rt.boxed(typ)
    return typ


def build_enum_variants(options: Iterable[Any]) -> list[EnumVariant]:
    """Build enum variants from wire values, skipping blank ones."""
    variants = []
    for option in options:
        wire_name = str(option)
        if not wire_name.strip():
            continue
        if wire_name == "*":
            variant_name = create_ident("all")
        elif wire_name[0].isdigit():
            variant_name = "V" + wire_name.replace("-", "_").replace(".", "_")
        elif "+" in wire_name or "-" in wire_name:
            # Timezones, e.g. Etc/GMT+7 and Etc/GMT-7
            variant_name = create_ident(wire_name.replace("+", "Plus").replace("-", "Minus"))
        else:
            variant_name = create_ident(wire_name)
        variants.append(EnumVariant(wire_name=wire_name, variant_name=variant_name))
    return variants


def _infer_variant_name(schema: dict[str, Any], rust_type: RustType) -> str | None:
    """Guess a variant name for an inline anyOf option."""
    if schema.get("title"):
        return schema["title"]
    if "The ID of" in (schema.get("description") or ""):
        return "Id"
    if isinstance(rust_type, ObjectType) and isinstance(rust_type.obj, RustEnum):
        # Small enums read well as e.g. `NoneOrAuto`
        if len(rust_type.obj.variants) in (1, 2):
            return "Or".join(v.variant_name for v in rust_type.obj.variants)
    if isinstance(rust_type, SimpleRustType):
        return str(rust_type.simple)
    return None


def build_fielded_enum(
    options: list[dict[str, Any]],
    field_name: str | None,
    doc_comment: str | None = None,
    overrides: Overrides = DEFAULT_OVERRIDES,
) -> RustFieldedEnum:
    """Build an untagged enum with one variant per anyOf option."""
    enum_obj = RustFieldedEnum(doc_comment=doc_comment)
    for option in options:
        if is_ref(option):
            typ = rt.from_reference(option["$ref"])
            path = typ.as_component_path()
            enum_obj.add_variant(FieldedEnumVariant(variant_name=create_ident(path), rust_type=typ))
            continue
        typ = infer_schema_type(option, field_name, overrides)
        variant_name = _infer_variant_name(option, typ)
        if variant_name is None:
            raise GeneratorError(f"Could not infer a variant name for {option!r}")
        enum_obj.add_variant(FieldedEnumVariant(variant_name=create_ident(variant_name), rust_type=typ))
    return enum_obj


def build_struct_field(
    base_type: RustType,
    field_name: str,
    schema: dict[str, Any],
    required: bool,
) -> StructField:
    """Wrap a field's inferred type and attach its serde attributes."""
    name = field_ident(field_name)
    nullable = not is_ref(schema) and bool(schema.get("nullable"))
    rust_type = base_type.as_nullable() if not required or nullable else base_type

    struct_field = StructField(field_name=name, rust_type=rust_type)
    if not is_ref(schema):
        struct_field.doc_comment = _doc(schema)
    if name != field_name:
        struct_field.rename_as = field_name
    if not required:
        struct_field.skip_serializing_if = rust_type.as_skip_serializing()
        struct_field.deser_default = rust_type.as_deser_default()
    return struct_field


def build_struct(
    schema: dict[str, Any],
    doc_comment: str | None = None,
    overrides: Overrides = DEFAULT_OVERRIDES,
    skip_fields: Iterable[str] = (),
) -> RustStruct:
    """Build a struct from an object schema's properties, in declaration order."""
    skipped = set(skip_fields)
    required = set(schema.get("required", []))
    rust_struct = RustStruct(doc_comment=doc_comment)
    for prop_name, prop_schema in schema.get("properties", {}).items():
        if prop_name in skipped:
            continue
        typ = infer_schema_or_ref_type(prop_schema, prop_name, overrides)
        rust_struct.add_field(build_struct_field(typ, prop_name, prop_schema, prop_name in required))
    return rust_struct
