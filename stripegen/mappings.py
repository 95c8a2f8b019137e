"""Override tables for names and types the schema cannot express.

Both tables are read-only once built. The generator receives an `Overrides`
instance explicitly; `DEFAULT_OVERRIDES` holds the built-in entries.
"""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping

from .rust_type import ExtType

# Resource names whose id type would be ambiguous or collide with another
_ID_RENAMES: dict[str, str] = {
    "fee_refund": "application_fee_refund",
    "invoiceitem": "invoice_item",
    "line_item": "invoice_line_item",
    "source_transaction": "charge",
    "item": "checkout_session_item",
}

# Field names that always map to a hand-written type, whatever the schema says
_FIELD_TYPES: dict[str, ExtType] = {
    "metadata": ExtType.METADATA,
    "delay_days": ExtType.DELAY_DAYS,
    "expires_at": ExtType.SCHEDULED,
    "off_session": ExtType.PAYMENT_INTENT_OFF_SESSION,
    "up_to": ExtType.UP_TO,
}


@dataclass(frozen=True)
class Overrides:
    id_renames: Mapping[str, str]
    field_types: Mapping[str, ExtType]

    def __post_init__(self) -> None:
        object.__setattr__(self, "id_renames", MappingProxyType(dict(self.id_renames)))
        object.__setattr__(self, "field_types", MappingProxyType(dict(self.field_types)))

    def id_name(self, schema_path: str) -> str:
        """Resource name used to build the id type of `schema_path`."""
        return self.id_renames.get(schema_path, schema_path)

    def forced_field_type(self, field_name: str | None) -> ExtType | None:
        if field_name is None:
            return None
        return self.field_types.get(field_name)

    def merged(
        self,
        id_renames: Mapping[str, str] | None = None,
        field_types: Mapping[str, ExtType] | None = None,
    ) -> "Overrides":
        """Return a copy extended (and, on key clashes, overridden) by new entries."""
        return Overrides(
            id_renames={**self.id_renames, **(id_renames or {})},
            field_types={**self.field_types, **(field_types or {})},
        )


DEFAULT_OVERRIDES = Overrides(id_renames=_ID_RENAMES, field_types=_FIELD_TYPES)
