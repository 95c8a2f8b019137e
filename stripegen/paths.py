"""Identity of named schemas ("components")."""

from __future__ import annotations

from .errors import InvariantViolation
from .naming import to_snake_case

_SCHEMA_REF_PREFIX = "#/components/schemas/"


class ComponentPath(str):
    """Normalized key naming one component schema.

    Dots are replaced by underscores; the result must already be snake_case.
    Doubles as the output file stem and as the node key in the dependency graph.
    """

    __slots__ = ()

    def __new__(cls, path: str) -> "ComponentPath":
        normalized = path.replace(".", "_")
        if to_snake_case(normalized) != normalized:
            raise InvariantViolation(
                f"Component path {path!r} is not snake_case once normalized"
            )
        return super().__new__(cls, normalized)

    @classmethod
    def from_reference(cls, reference: str) -> "ComponentPath":
        """Build the path for a `$ref` pointer into the component schemas."""
        if reference.startswith(_SCHEMA_REF_PREFIX):
            reference = reference[len(_SCHEMA_REF_PREFIX):]
        return cls(reference)

    def __repr__(self) -> str:
        return f"ComponentPath({str(self)!r})"
