"""Internal model of a type as it will appear in emitted Rust source.

A `RustType` is one of:
  - `SimpleRustType`: a primitive, external, id or component-reference type
  - `CompoundType`: `Option<T>`, `Vec<T>`, `List<T>`, `Box<T>` or `Expandable<T>`
  - `ObjectType`: an object description that may not have a name yet

Printing is the only place objects get named; see
`ComponentGenerator.make_type_printable`.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Union

from .errors import InvariantViolation
from .naming import create_ident
from .paths import ComponentPath

if TYPE_CHECKING:
    from .objects import RustObject


class IntType(Enum):
    U8 = "u8"
    U32 = "u32"
    U64 = "u64"
    I64 = "i64"


class ExtType(Enum):
    """Types defined by hand in the client crate."""

    CURRENCY = "Currency"
    RANGE_QUERY_TS = "RangeQueryTs"
    METADATA = "Metadata"
    DELAY_DAYS = "DelayDays"
    SCHEDULED = "Scheduled"
    UP_TO = "UpTo"
    TIMESTAMP = "Timestamp"
    PAYMENT_INTENT_OFF_SESSION = "PaymentIntentOffSession"

    @property
    def import_from(self) -> str:
        return _EXT_IMPORTS[self]


_EXT_IMPORTS: dict[ExtType, str] = {
    ExtType.CURRENCY: "currency",
    ExtType.RANGE_QUERY_TS: "params",
    ExtType.METADATA: "params",
    ExtType.TIMESTAMP: "params",
    ExtType.DELAY_DAYS: "resources",
    ExtType.SCHEDULED: "resources",
    ExtType.UP_TO: "resources",
    ExtType.PAYMENT_INTENT_OFF_SESSION: "resources",
}


class CompoundKind(Enum):
    OPTION = "Option"
    VEC = "Vec"
    BOX = "Box"
    LIST = "List"
    EXPANDABLE = "Expandable"

    def print_with_import(self) -> str:
        if self in (CompoundKind.LIST, CompoundKind.EXPANDABLE):
            return f"crate::params::{self.value}"
        return self.value


@dataclass(frozen=True)
class SimpleType:
    """A type printed by name, possibly living in another crate module."""

    name: str
    import_from: str | None = None
    component: ComponentPath | None = None

    def __str__(self) -> str:
        return self.name

    def print_with_import(self) -> str:
        if self.import_from:
            return f"crate::{self.import_from}::{self.name}"
        return self.name

    @classmethod
    def int(cls, int_type: IntType) -> "SimpleType":
        return cls(int_type.value)

    @classmethod
    def ext(cls, ext_type: ExtType) -> "SimpleType":
        return cls(ext_type.value, ext_type.import_from)

    @classmethod
    def id(cls, ident: str) -> "SimpleType":
        return cls(ident, "ids")

    @classmethod
    def for_component(cls, path: ComponentPath) -> "SimpleType":
        return cls(create_ident(path), "generated", component=path)


@dataclass(frozen=True)
class DeserDefault:
    """How a missing field is filled in on deserialization."""

    function: str | None = None

    def to_serde_attr(self) -> str:
        if self.function:
            return f'#[serde(default = "{self.function}")]'
        return "#[serde(default)]"


BOOL = SimpleType("bool")
FLOAT = SimpleType("f64")
STRING = SimpleType("String")


class _TypeMethods:
    """Behaviour shared by every `RustType` variant."""

    def as_nullable(self) -> "RustType":
        """Wrap in `Option` unless the type already expresses absence."""
        if isinstance(self, CompoundType) and self.kind in (CompoundKind.OPTION, CompoundKind.LIST):
            return self
        return CompoundType(CompoundKind.OPTION, self)

    def is_option(self) -> bool:
        return isinstance(self, CompoundType) and self.kind == CompoundKind.OPTION

    def as_skip_serializing(self) -> str | None:
        if self.is_option():
            return "Option::is_none"
        return None

    def as_deser_default(self) -> "DeserDefault | None":
        if self == SimpleRustType(BOOL):
            return DeserDefault()
        if isinstance(self, CompoundType) and self.kind in (CompoundKind.VEC, CompoundKind.LIST):
            return DeserDefault()
        if isinstance(self, SimpleRustType) and self.simple == SimpleType.id("InvoiceId"):
            return DeserDefault("InvoiceId::none")
        return None

    def should_box(self) -> bool:
        """References to the recursive error schema must be boxed."""
        return isinstance(self, SimpleRustType) and self.simple.component == "api_errors"

    def as_component_path(self) -> ComponentPath | None:
        if isinstance(self, SimpleRustType):
            return self.simple.component
        if isinstance(self, CompoundType):
            return self.inner.as_component_path()
        return None

    def as_rust_obj(self) -> "RustObject | None":
        if isinstance(self, ObjectType):
            return self.obj
        if isinstance(self, CompoundType):
            return self.inner.as_rust_obj()
        return None

    def object_name(self) -> str | None:
        """Name pre-assigned to the embedded object, if any."""
        if isinstance(self, ObjectType):
            return self.name
        if isinstance(self, CompoundType):
            return self.inner.object_name()
        return None

    def to_printable(self, fallback_name: str | None = None) -> str:
        """Render the type as Rust source.

        An embedded object is printed under its pre-assigned name, else under
        `fallback_name`; printing one with no name at all is an invariant
        violation.
        """
        if isinstance(self, SimpleRustType):
            return self.simple.print_with_import()
        if isinstance(self, CompoundType):
            inner = self.inner.to_printable(fallback_name)
            return f"{self.kind.print_with_import()}<{inner}>"
        name = self.name or fallback_name
        if not name:
            raise InvariantViolation(
                "Cannot print a type embedding an object whose name is not known"
            )
        return name


@dataclass(frozen=True)
class SimpleRustType(_TypeMethods):
    simple: SimpleType


@dataclass(frozen=True)
class CompoundType(_TypeMethods):
    kind: CompoundKind
    inner: "RustType"


@dataclass(frozen=True)
class ObjectType(_TypeMethods):
    obj: "RustObject"
    name: str | None = None


RustType = Union[SimpleRustType, CompoundType, ObjectType]


def simple(simple_type: SimpleType) -> SimpleRustType:
    return SimpleRustType(simple_type)


def ext(ext_type: ExtType) -> SimpleRustType:
    return SimpleRustType(SimpleType.ext(ext_type))


def option(inner: RustType) -> CompoundType:
    return CompoundType(CompoundKind.OPTION, inner)


def vec(inner: RustType) -> CompoundType:
    return CompoundType(CompoundKind.VEC, inner)


def boxed(inner: RustType) -> CompoundType:
    return CompoundType(CompoundKind.BOX, inner)


def list_of(inner: RustType) -> CompoundType:
    return CompoundType(CompoundKind.LIST, inner)


def expandable(inner: RustType) -> CompoundType:
    return CompoundType(CompoundKind.EXPANDABLE, inner)


def from_reference(reference: str) -> SimpleRustType:
    return SimpleRustType(SimpleType.for_component(ComponentPath.from_reference(reference)))
