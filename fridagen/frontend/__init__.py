"""Frontend package - program-model dump to descriptors and selections."""

from .loader import LoadError, SelectionError, load_model, parse_model, resolve_selection
from .types import TypeParseError, parse_type

__all__ = [
    "LoadError",
    "SelectionError",
    "TypeParseError",
    "load_model",
    "parse_model",
    "parse_type",
    "resolve_selection",
]
