"""Backend package - descriptors to Frida snippet text."""

from .frida import (
    GenerationFailure,
    SnippetError,
    UnsupportedSelection,
    emit_class,
    emit_class_declaration,
    emit_field,
    emit_method,
    generate,
    is_supported,
)

__all__ = [
    "GenerationFailure",
    "SnippetError",
    "UnsupportedSelection",
    "emit_class",
    "emit_class_declaration",
    "emit_field",
    "emit_method",
    "generate",
    "is_supported",
]
