"""Object descriptions: structs, plain enums and fielded (untagged) enums."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Union

from .paths import ComponentPath
from .rust_type import DeserDefault, RustType


@dataclass
class StructField:
    """A single field of a struct."""

    field_name: str
    rust_type: RustType
    doc_comment: str | None = None
    # Wire name, when it differs from `field_name`
    rename_as: str | None = None
    skip_serializing_if: str | None = None
    deser_default: DeserDefault | None = None


@dataclass
class RustStruct:
    fields: list[StructField] = field(default_factory=list)
    doc_comment: str | None = None

    def add_field(self, struct_field: StructField) -> None:
        self.fields.append(struct_field)

    def all_fields_optional(self) -> bool:
        return all(f.rust_type.is_option() for f in self.fields)


@dataclass
class EnumVariant:
    """A field-less variant, e.g. `Active` for the wire value "active"."""

    wire_name: str
    variant_name: str


@dataclass
class RustEnum:
    variants: list[EnumVariant] = field(default_factory=list)
    doc_comment: str | None = None
    default_variant: str | None = None

    def add_variant(self, variant: EnumVariant) -> None:
        self.variants.append(variant)


@dataclass
class FieldedEnumVariant:
    """A variant of the form `Ident(Type)`."""

    variant_name: str
    rust_type: RustType
    wire_name: str | None = None
    rename_as: str | None = None


@dataclass
class RustFieldedEnum:
    variants: list[FieldedEnumVariant] = field(default_factory=list)
    doc_comment: str | None = None
    default_variant: str | None = None

    def add_variant(self, variant: FieldedEnumVariant) -> None:
        self.variants.append(variant)


RustObject = Union[RustStruct, RustEnum, RustFieldedEnum]


def _contained_types(obj: RustObject) -> list[RustType]:
    if isinstance(obj, RustStruct):
        return [f.rust_type for f in obj.fields]
    if isinstance(obj, RustFieldedEnum):
        return [v.rust_type for v in obj.variants]
    if isinstance(obj, RustEnum):
        return []
    raise TypeError(f"Unknown object kind: {type(obj).__name__}")


def schema_deps(obj: RustObject) -> list[ComponentPath]:
    """Components referenced by `obj`, including through inline nested objects."""
    deps: list[ComponentPath] = []
    pending = [obj]
    while pending:
        current = pending.pop()
        for rust_type in _contained_types(current):
            path = rust_type.as_component_path()
            if path is not None:
                deps.append(path)
            nested = rust_type.as_rust_obj()
            if nested is not None:
                pending.append(nested)
    return deps
