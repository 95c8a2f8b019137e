"""Exceptions raised while generating code."""

from __future__ import annotations


class GeneratorError(Exception):
    """Base exception for code generation errors."""


class InvariantViolation(GeneratorError):
    """A generation-time invariant was broken.

    Raised instead of emitting code that is probably wrong. Generation of the
    current run stops when one of these escapes.
    """
