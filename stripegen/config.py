"""Generator configuration.

Settings come from defaults, an optional JSON file and keyword overrides
(usually CLI flags), applied in that order:

    {
      "out_dir": "src/resources/generated",
      "path_prefix": "/v1",
      "emit_object_trait": true,
      "id_renames": {"item": "checkout_session_item"},
      "field_types": {"metadata": "Metadata"}
    }

`field_types` values are names of hand-written client types (`ExtType`).
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any

from .errors import GeneratorError
from .mappings import DEFAULT_OVERRIDES, Overrides
from .rust_type import ExtType


class ConfigError(GeneratorError):
    """Raised for a missing or malformed configuration file."""


@dataclass
class GeneratorConfig:
    out_dir: Path = Path("out")
    path_prefix: str = "/v1"
    emit_object_trait: bool = True
    # Extra entries merged over the built-in override tables
    id_renames: dict[str, str] = field(default_factory=dict)
    field_types: dict[str, str] = field(default_factory=dict)

    def overrides(self) -> Overrides:
        """Built-in override tables extended by this configuration."""
        return DEFAULT_OVERRIDES.merged(
            id_renames=self.id_renames,
            field_types={name: ExtType(value) for name, value in self.field_types.items()},
        )


def _read_config_file(path: Path) -> dict[str, Any]:
    if not path.exists():
        raise ConfigError(f"Configuration file not found: {path}")
    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise ConfigError(f"Invalid JSON in configuration file {path}: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"Configuration file must contain a JSON object: {path}")
    return data


def _check_scalars(values: dict[str, Any]) -> None:
    if "out_dir" in values and not isinstance(values["out_dir"], (str, Path)):
        raise ConfigError(f"out_dir must be a path, got {values['out_dir']!r}")
    if "path_prefix" in values and not isinstance(values["path_prefix"], str):
        raise ConfigError(f"path_prefix must be a string, got {values['path_prefix']!r}")
    if "emit_object_trait" in values and not isinstance(values["emit_object_trait"], bool):
        raise ConfigError(
            f"emit_object_trait must be true or false, got {values['emit_object_trait']!r}"
        )


def _validate(config: GeneratorConfig) -> None:
    if not isinstance(config.id_renames, dict) or not all(
        isinstance(v, str) for v in config.id_renames.values()
    ):
        raise ConfigError("id_renames must map schema names to schema names")
    if not isinstance(config.field_types, dict):
        raise ConfigError("field_types must map field names to type names")
    known = {t.value for t in ExtType}
    for name, value in config.field_types.items():
        if not isinstance(value, str) or value not in known:
            raise ConfigError(
                f"Unknown type {value!r} for field {name!r}; expected one of {sorted(known)}"
            )


def load_config(path: Path | str | None = None, **overrides: Any) -> GeneratorConfig:
    """Build a GeneratorConfig from an optional JSON file plus keyword overrides.

    Keyword overrides set to None are ignored, so unset CLI flags can be
    passed straight through.
    """
    values: dict[str, Any] = {}
    if path is not None:
        values.update(_read_config_file(Path(path)))
    values.update({k: v for k, v in overrides.items() if v is not None})

    known_fields = {f.name for f in fields(GeneratorConfig)}
    unknown = sorted(set(values) - known_fields)
    if unknown:
        raise ConfigError(f"Unknown configuration keys: {', '.join(unknown)}")

    _check_scalars(values)
    if "out_dir" in values:
        values["out_dir"] = Path(values["out_dir"])
    config = GeneratorConfig(**values)
    _validate(config)
    return config
