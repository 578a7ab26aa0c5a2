"""Type-string parsing: Java source form or JVM descriptor form to ArgType.

Accepted forms:
    int, java.lang.String, byte[][]            (source form)
    I, Ljava/lang/String;, [[B                 (descriptor form)

A single upper-case letter is read as a primitive descriptor, so classes
in the default package named with one capital letter are not expressible.
"""

from __future__ import annotations

from ..model import PRIMITIVES, ArgType, ArrayType, ObjectType, VOID

DESCRIPTOR_PRIMITIVES: dict[str, str] = {
    "Z": "boolean",
    "B": "byte",
    "C": "char",
    "S": "short",
    "I": "int",
    "J": "long",
    "F": "float",
    "D": "double",
    "V": "void",
}


class TypeParseError(Exception):
    """Malformed type string."""

    def __init__(self, msg: str, text: str):
        self.msg: str = msg
        self.text: str = text
        super().__init__(msg + ": '" + text + "'")


def _is_ident_char(c: str) -> bool:
    return c.isalnum() or c == "_" or c == "$"


def _check_binary_name(name: str, text: str) -> None:
    """Validate a dotted binary name like java.util.Map$Entry."""
    if name == "":
        raise TypeParseError("empty class name", text)
    parts = name.split(".")
    i = 0
    while i < len(parts):
        part = parts[i]
        if part == "":
            raise TypeParseError("empty name segment", text)
        if part[0].isdigit():
            raise TypeParseError("name segment starts with a digit", text)
        j = 0
        while j < len(part):
            if not _is_ident_char(part[j]):
                raise TypeParseError("invalid character '" + part[j] + "'", text)
            j += 1
        i += 1


def _parse_descriptor(text: str, pos: int) -> tuple[ArgType, int]:
    """Parse one descriptor starting at pos. Returns (type, next_pos)."""
    if pos >= len(text):
        raise TypeParseError("truncated descriptor", text)
    c = text[pos]
    if c == "[":
        element, end = _parse_descriptor(text, pos + 1)
        if element == VOID:
            raise TypeParseError("array of void", text)
        return (ArrayType(element), end)
    if c == "L":
        semi = text.find(";", pos)
        if semi < 0:
            raise TypeParseError("unterminated class descriptor", text)
        name = text[pos + 1 : semi].replace("/", ".")
        _check_binary_name(name, text)
        return (ObjectType(name), semi + 1)
    if c in DESCRIPTOR_PRIMITIVES:
        return (PRIMITIVES[DESCRIPTOR_PRIMITIVES[c]], pos + 1)
    raise TypeParseError("unknown descriptor '" + c + "'", text)


def _is_descriptor(text: str) -> bool:
    if text.startswith("["):
        return True
    if text.startswith("L") and text.endswith(";"):
        return True
    return len(text) == 1 and text in DESCRIPTOR_PRIMITIVES


def parse_type(text: str) -> ArgType:
    """Parse a type string in either accepted form."""
    text = text.strip()
    if text == "":
        raise TypeParseError("empty type", text)
    if _is_descriptor(text):
        typ, end = _parse_descriptor(text, 0)
        if end != len(text):
            raise TypeParseError("trailing characters after descriptor", text)
        return typ
    dims = 0
    base = text
    while base.endswith("[]"):
        base = base[:-2].rstrip()
        dims += 1
    if "[" in base or "]" in base:
        raise TypeParseError("unbalanced array brackets", text)
    if base in PRIMITIVES:
        typ: ArgType = PRIMITIVES[base]
        if dims > 0 and typ == VOID:
            raise TypeParseError("array of void", text)
    else:
        _check_binary_name(base, text)
        typ = ObjectType(base)
    while dims > 0:
        typ = ArrayType(typ)
        dims -= 1
    return typ
