"""Render Rust source from object descriptions.

Every renderer takes types that are already printed; naming anonymous
objects is the job of `ComponentGenerator`. The jinja2 templates live in
the `templates/` directory next to this module.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Iterable

import jinja2

from .naming import create_ident, to_snake_case
from .objects import FieldedEnumVariant, RustEnum, StructField
from .operations import DeleteParams, GetParams, RequestSpec

TEMPLATE_DIR = Path(__file__).parent / "templates"

_PLACEHOLDER = re.compile(r"\{([^{}]+)\}")


class Derive(Enum):
    """Traits an emitted type can derive, in the order they are printed."""

    CLONE = "Clone"
    COPY = "Copy"
    DEBUG = "Debug"
    DEFAULT = "Default"
    DESERIALIZE = "serde::Deserialize"
    EQ = "Eq"
    ORD = "Ord"
    PARTIAL_EQ = "PartialEq"
    PARTIAL_ORD = "PartialOrd"
    SERIALIZE = "serde::Serialize"


BASE_DERIVES = (Derive.CLONE, Derive.DEBUG)

ENUM_DERIVES = (
    Derive.COPY,
    Derive.EQ,
    Derive.ORD,
    Derive.PARTIAL_EQ,
    Derive.PARTIAL_ORD,
    Derive.DESERIALIZE,
    Derive.SERIALIZE,
)

FIELDED_ENUM_DERIVES = (Derive.SERIALIZE, Derive.DESERIALIZE)


def derives_line(extra: Iterable[Derive] = ()) -> str:
    """Comma separated derive list: the baseline plus `extra`, deduplicated."""
    order = list(Derive)
    selected = sorted(set(BASE_DERIVES) | set(extra), key=order.index)
    return ", ".join(d.value for d in selected)


def struct_derives(all_fields_optional: bool) -> list[Derive]:
    derives = [Derive.DESERIALIZE, Derive.SERIALIZE]
    if all_fields_optional:
        derives.append(Derive.DEFAULT)
    return derives


def rust_str(value: str) -> str:
    """Escape text for use inside a Rust string literal."""
    return (
        str(value)
        .replace("\\", "\\\\")
        .replace('"', '\\"')
        .replace("\n", "\\n")
    )


def doc_comment(doc: str | None, depth: int = 0) -> str:
    """Format `doc` as `///` lines indented by `depth` levels.

    The first sentence of the first paragraph gets a paragraph of its own so
    rustdoc shows it as the summary line. Returns "" for an empty doc, else
    text ending in a newline.
    """
    if not doc or not doc.strip():
        return ""
    text = doc.strip()
    first, newline, remainder = text.partition("\n")
    summary, sep, rest = first.partition(". ")
    if sep and rest.strip():
        text = f"{summary}.\n\n{rest.strip()}{newline}{remainder}"

    indent = "    " * depth
    lines = []
    for line in text.splitlines():
        line = line.rstrip()
        lines.append(f"{indent}/// {line}" if line else f"{indent}///")
    return "\n".join(lines) + "\n"


def _make_environment() -> jinja2.Environment:
    env = jinja2.Environment(
        loader=jinja2.FileSystemLoader(str(TEMPLATE_DIR)),
        keep_trailing_newline=True,
        trim_blocks=True,
        lstrip_blocks=True,
        undefined=jinja2.StrictUndefined,
    )
    env.filters["rust_str"] = rust_str
    env.filters["doc_comment"] = doc_comment
    env.filters["snake_case"] = to_snake_case
    env.filters["ident"] = create_ident
    return env


_ENV = _make_environment()


def _render(template_name: str, **context) -> str:
    return _ENV.get_template(template_name).render(**context)


@dataclass
class FieldLine:
    """A struct field together with its printed type."""

    field: StructField
    printed: str


@dataclass
class VariantLine:
    """A fielded enum variant together with its printed type."""

    variant: FieldedEnumVariant
    printed: str


def render_struct(
    name: str,
    fields: list[FieldLine],
    derives: Iterable[Derive],
    doc: str | None = None,
) -> str:
    return _render(
        "struct.rs.j2",
        name=name,
        fields=fields,
        derives=derives_line(derives),
        doc=doc,
    )


def render_enum(name: str, enum: RustEnum) -> str:
    return _render(
        "enum.rs.j2",
        name=name,
        variants=enum.variants,
        derives=derives_line(ENUM_DERIVES),
        doc=enum.doc_comment,
        default_variant=enum.default_variant,
    )


def render_fielded_enum(
    name: str,
    variants: list[VariantLine],
    derives: Iterable[Derive] = FIELDED_ENUM_DERIVES,
    doc: str | None = None,
    default_variant: str | None = None,
) -> str:
    return _render(
        "fielded_enum.rs.j2",
        name=name,
        variants=variants,
        derives=derives_line(derives),
        doc=doc,
        default_variant=default_variant,
    )


def request_path_arg(request: RequestSpec, path_prefix: str = "/v1") -> str:
    """First argument of the client call: a literal or a `format!` expression."""
    request.check_path_params()
    path = request.operation.path
    if path_prefix and path.startswith(path_prefix):
        path = path[len(path_prefix):]
    placeholders = _PLACEHOLDER.findall(path)
    if not placeholders:
        return f'"{rust_str(path)}"'
    args = ", ".join(f"{p} = {p}" for p in placeholders)
    return f'&format!("{rust_str(path)}", {args})'


def render_request(
    request: RequestSpec,
    returned: str,
    params_type: str | None,
    path_prefix: str = "/v1",
) -> str:
    """Render one request function.

    Raises:
        InvariantViolation: path placeholders and declared path params differ.
    """
    path_arg = request_path_arg(request, path_prefix)
    params = [{"name": p.name, "type": str(p.rust_type)} for p in request.path_params]
    has_params = params_type is not None and not isinstance(request.params, DeleteParams)
    if has_params:
        params.append({"name": "params", "type": params_type})

    if isinstance(request.params, GetParams):
        call = "get_query"
    elif isinstance(request.params, DeleteParams):
        call = "delete"
    else:
        call = "post_form"

    return _render(
        "request.rs.j2",
        func_name=request.func_name,
        description=request.description,
        params=params,
        returned=returned,
        call=call,
        path_arg=path_arg,
        has_params=has_params,
    )


def render_object_trait(name: str, id_type: str | None) -> str:
    """`impl crate::Object`; `object()` is left as `todo!()`."""
    return _render(
        "object_trait.rs.j2",
        name=name,
        id_type=f"crate::ids::{id_type}" if id_type else "()",
        id_body="self.id.clone()" if id_type else "",
    )


def render_mod_file(paths: Iterable[str]) -> str:
    return _render("mod.rs.j2", paths=list(paths))


def render_dot(nodes: Iterable[str], edges: Iterable[tuple[str, str]]) -> str:
    return _render("graph.dot.j2", nodes=list(nodes), edges=list(edges))
