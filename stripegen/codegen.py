"""Build every component from the spec and write the generated files.

For each component schema: build the top-level object, its id type and its
request specs, then hand the result to a `ComponentGenerator` when writing.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import networkx as nx

from .component_generator import Component, ComponentGenerator
from .config import GeneratorConfig
from .errors import GeneratorError
from .graph import build_dependency_graph, component_dependencies, to_dot
from .loader import as_object_type, get_schemas, is_ref
from .mappings import Overrides
from .naming import create_ident
from .objects import RustObject
from .operations import build_requests, parse_operations
from .paths import ComponentPath
from .schema_parser import build_fielded_enum, build_struct
from .templates import render_mod_file

logger = logging.getLogger(__name__)


@dataclass
class WriteReport:
    written: list[Path] = field(default_factory=list)
    failed: list[Path] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failed


def gen_object(path: str, schema: dict[str, Any], overrides: Overrides) -> RustObject:
    """Build the object for a top-level component schema."""
    if schema.get("description"):
        doc = schema["description"]
    elif schema.get("title"):
        doc = f"The resource representing a Stripe {schema['title']}"
    else:
        doc = None

    if "anyOf" in schema:
        return build_fielded_enum(schema["anyOf"], None, doc, overrides)
    if as_object_type(schema) is not None:
        # The `object` discriminator is implied by the type itself
        return build_struct(schema, doc, overrides, skip_fields=("object",))
    raise GeneratorError(f"Unexpected top level schema at path {path}")


def extract_obj_id(path: str, schema: dict[str, Any], overrides: Overrides) -> str | None:
    """Name of the id type for objects with an `id` property."""
    obj = as_object_type(schema)
    if obj is None or "id" not in obj.get("properties", {}):
        return None
    return create_ident(f"{overrides.id_name(path)}_id")


class CodeGen:
    def __init__(self, spec: dict[str, Any], config: GeneratorConfig | None = None):
        self.spec = spec
        self.config = config or GeneratorConfig()
        self.overrides = self.config.overrides()
        self.components: dict[ComponentPath, Component] = {}
        self.build_components()

    def build_components(self) -> None:
        for name, schema in get_schemas(self.spec).items():
            if is_ref(schema):
                raise GeneratorError(f"Did not expect a top level $ref at {name}")
            path = ComponentPath(name)
            logger.info("Generating component at path %s", path)
            operations = parse_operations(schema)
            self.components[path] = Component(
                path=path,
                object=gen_object(name, schema, self.overrides),
                id_type=extract_obj_id(name, schema, self.overrides),
                requests=build_requests(self.spec, operations, self.overrides),
            )

    def dependency_graph(self) -> nx.DiGraph:
        return build_dependency_graph(self.components)

    def graphviz(self) -> str:
        return to_dot(self.dependency_graph())

    def write_files(
        self,
        out_dir: Path | str | None = None,
        single_object: str | None = None,
    ) -> WriteReport:
        """Write one `<path>.rs` per component plus `mod.rs`.

        With `single_object`, only that component and the components it
        depends on are written. A file that cannot be written is logged and
        reported; the others are still written.
        """
        out = Path(out_dir) if out_dir is not None else self.config.out_dir
        if single_object is not None:
            paths = component_dependencies(self.dependency_graph(), ComponentPath(single_object))
        else:
            paths = sorted(self.components)

        out.mkdir(parents=True, exist_ok=True)
        report = WriteReport()
        written_paths = []
        for path in paths:
            generator = ComponentGenerator(self.components[path], self.config)
            try:
                report.written.append(generator.write_file(out))
            except OSError as e:
                logger.error("Could not write %s: %s", path, e)
                report.failed.append(out / f"{path}.rs")
                continue
            written_paths.append(path)

        # Only components whose file was written
        mod_path = out / "mod.rs"
        try:
            mod_path.write_text(render_mod_file(written_paths), encoding="utf-8")
            report.written.append(mod_path)
        except OSError as e:
            logger.error("Could not write %s: %s", mod_path, e)
            report.failed.append(mod_path)
        return report
