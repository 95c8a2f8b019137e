"""Derive Rust identifiers from wire-format names.

Type identifiers are UpperCamelCase, field identifiers snake_case:
  - "balance"                          -> "Balance"
  - "issuing.card"                     -> "IssuingCard"
  - ("Invoice", "status_transitions")  -> "InvoiceStatusTransitions"
  - "statementDescriptor"              -> "statement_descriptor" (field)
  - "type"                             -> "type_" (field)

Nothing is validated here: any string produces some identifier.
"""

from __future__ import annotations

import re

# Keywords that cannot be used as a bare field name in Rust
_RUST_KEYWORDS = {
    "as", "async", "await", "box", "break", "const", "continue", "crate",
    "dyn", "else", "enum", "extern", "false", "fn", "for", "if", "impl", "in",
    "let", "loop", "match", "mod", "move", "mut", "pub", "ref", "return",
    "self", "static", "struct", "super", "trait", "true", "type", "unsafe",
    "use", "where", "while", "yield",
}

_NON_ALNUM = re.compile(r"[^A-Za-z0-9]+")


def _split_words(name: str) -> list[str]:
    """Split a name on separators and case boundaries."""
    words: list[str] = []
    for chunk in _NON_ALNUM.split(name):
        if not chunk:
            continue
        chunk = re.sub(r"([A-Z]+)([A-Z][a-z])", r"\1 \2", chunk)
        chunk = re.sub(r"([a-z\d])([A-Z])", r"\1 \2", chunk)
        words.extend(chunk.split())
    return words


def to_upper_camel_case(name: str) -> str:
    """Convert any name to UpperCamelCase."""
    return "".join(word[0].upper() + word[1:].lower() for word in _split_words(name))


def to_snake_case(name: str) -> str:
    """Convert any name to snake_case."""
    return "_".join(word.lower() for word in _split_words(name))


def create_ident(name: str) -> str:
    """Build a type identifier from a wire name."""
    return to_upper_camel_case(name.replace(".", "_"))


def joined_ident(parent: str, child: str) -> str:
    """Build a type identifier qualified by its parent context.

    This is how anonymous nested objects get their names.
    """
    return create_ident(f"{parent}_{child}")


def field_ident(wire_name: str) -> str:
    """Build a struct field identifier from a wire name."""
    name = to_snake_case(wire_name)
    if name in _RUST_KEYWORDS:
        return f"{name}_"
    return name
