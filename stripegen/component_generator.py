"""Generate the Rust source file for one component.

Objects are discovered while printing: a field or variant whose type embeds
an anonymous object gets a name derived from its parent, and that object is
queued to be emitted later in the same file. The queue is drained in FIFO
order so the component's own type comes first, followed by the objects it
introduces, breadth-first. Request functions go at the end.
"""

from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass, field
from pathlib import Path

from .config import GeneratorConfig
from .errors import InvariantViolation
from .naming import create_ident, joined_ident
from .objects import RustEnum, RustFieldedEnum, RustObject, RustStruct
from .operations import RequestSpec
from .paths import ComponentPath
from .rust_type import RustType
from .templates import (
    FIELDED_ENUM_DERIVES,
    FieldLine,
    VariantLine,
    render_enum,
    render_fielded_enum,
    render_object_trait,
    render_request,
    render_struct,
    struct_derives,
)

logger = logging.getLogger(__name__)


@dataclass
class Component:
    path: ComponentPath
    object: RustObject
    id_type: str | None = None
    requests: list[RequestSpec] = field(default_factory=list)

    @property
    def ident(self) -> str:
        return create_ident(self.path)


class ComponentGenerator:
    def __init__(self, component: Component, config: GeneratorConfig | None = None):
        self.component = component
        self.config = config or GeneratorConfig()
        self.objects: deque[tuple[str, RustObject]] = deque()
        # Every object named so far in this file, by name
        self.arena: dict[str, RustObject] = {}

    def add_object(self, name: str, obj: RustObject) -> None:
        """Register `obj` under `name` and queue it for emission.

        Registering the same object twice is a no-op.

        Raises:
            InvariantViolation: a different object already has this name.
        """
        existing = self.arena.get(name)
        if existing is not None:
            if existing != obj:
                raise InvariantViolation(
                    f"Two different objects named {name} in component {self.component.path}"
                )
            return
        self.arena[name] = obj
        self.objects.append((name, obj))

    def make_type_printable(self, rust_type: RustType, ident: str) -> str:
        """Print `rust_type`, naming and queueing any object it embeds.

        A name assigned while building the type wins over `ident`.
        """
        obj = rust_type.as_rust_obj()
        if obj is None:
            return rust_type.to_printable()
        name = rust_type.object_name() or ident
        self.add_object(name, obj)
        return rust_type.to_printable(name)

    def gen_struct(self, name: str, struct: RustStruct) -> str:
        lines = [
            FieldLine(f, self.make_type_printable(f.rust_type, joined_ident(name, f.field_name)))
            for f in struct.fields
        ]
        return render_struct(
            name,
            lines,
            struct_derives(struct.all_fields_optional()),
            struct.doc_comment,
        )

    def gen_fielded_enum(self, name: str, enum: RustFieldedEnum) -> str:
        lines = [
            VariantLine(v, self.make_type_printable(v.rust_type, joined_ident(name, v.variant_name)))
            for v in enum.variants
        ]
        return render_fielded_enum(
            name,
            lines,
            FIELDED_ENUM_DERIVES,
            enum.doc_comment,
            enum.default_variant,
        )

    def gen_object(self, name: str, obj: RustObject) -> str:
        logger.debug("Emitting %s in %s", name, self.component.path)
        if isinstance(obj, RustStruct):
            return self.gen_struct(name, obj)
        if isinstance(obj, RustEnum):
            return render_enum(name, obj)
        if isinstance(obj, RustFieldedEnum):
            return self.gen_fielded_enum(name, obj)
        raise TypeError(f"Unknown object kind: {type(obj).__name__}")

    def gen_request(self, request: RequestSpec) -> str:
        func_name = request.func_name
        returned = self.make_type_printable(request.returned, joined_ident("Returned", func_name))
        params_type = request.params_type
        printed_params = None
        if params_type is not None:
            printed_params = self.make_type_printable(params_type, joined_ident(func_name, "params"))
        return render_request(request, returned, printed_params, self.config.path_prefix)

    def gen_code(self) -> str:
        """Generate the full contents of the component's file."""
        component = self.component
        self.add_object(component.ident, component.object)

        # Rendered before the worklist is drained so the objects they introduce
        # are emitted, but placed at the end of the file
        requests = [self.gen_request(req) for req in component.requests]

        blocks = []
        while self.objects:
            name, obj = self.objects.popleft()
            blocks.append(self.gen_object(name, obj))
            if (
                name == component.ident
                and isinstance(obj, RustStruct)
                and self.config.emit_object_trait
            ):
                blocks.append(render_object_trait(name, component.id_type))

        blocks.extend(requests)
        return "\n".join(blocks)

    def write_file(self, out_dir: Path) -> Path:
        """Generate the code and write it to `<out_dir>/<path>.rs`."""
        out_path = Path(out_dir) / f"{self.component.path}.rs"
        out_path.write_text(self.gen_code(), encoding="utf-8")
        return out_path
