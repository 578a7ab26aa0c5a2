"""Shared utilities for snippet emitters."""

from __future__ import annotations

_SIMPLE_ESCAPES: dict[str, str] = {
    "'": "\\'",
    '"': '\\"',
    "\\": "\\\\",
    "/": "\\/",
    "\b": "\\b",
    "\n": "\\n",
    "\t": "\\t",
    "\f": "\\f",
    "\r": "\\r",
}


def _unicode_escape(code: int) -> str:
    return "\\u" + format(code, "04X")


def escape_ecmascript(value: str) -> str:
    """Escape a string for use in an ECMAScript string literal (without quotes).

    Quotes, backslash and '/' get a backslash; control characters and
    everything outside printable ASCII become \\uXXXX escapes. Characters
    beyond the BMP are written as a UTF-16 surrogate pair.
    """
    result: list[str] = []
    i = 0
    while i < len(value):
        c = value[i]
        code = ord(c)
        if c in _SIMPLE_ESCAPES:
            result.append(_SIMPLE_ESCAPES[c])
        elif code < 0x20 or (0x7F < code <= 0xFFFF):
            result.append(_unicode_escape(code))
        elif code > 0xFFFF:
            code -= 0x10000
            result.append(_unicode_escape(0xD800 + (code >> 10)))
            result.append(_unicode_escape(0xDC00 + (code & 0x3FF)))
        else:
            result.append(c)
        i += 1
    return "".join(result)


def escape_template(value: str) -> str:
    """Escape text placed inside a `...` template literal.

    Backticks and '${' are escaped; apply after escape_ecmascript.
    """
    return value.replace("`", "\\`").replace("${", "\\${")


# JavaScript reserved words, not usable as local identifiers
JS_RESERVED = frozenset(
    {
        "await",
        "break",
        "case",
        "catch",
        "class",
        "const",
        "continue",
        "debugger",
        "default",
        "delete",
        "do",
        "else",
        "enum",
        "export",
        "extends",
        "false",
        "finally",
        "for",
        "function",
        "if",
        "implements",
        "import",
        "in",
        "instanceof",
        "interface",
        "let",
        "new",
        "null",
        "package",
        "private",
        "protected",
        "public",
        "return",
        "static",
        "super",
        "switch",
        "this",
        "throw",
        "true",
        "try",
        "typeof",
        "var",
        "void",
        "while",
        "with",
        "yield",
    }
)


def is_js_identifier(name: str) -> bool:
    """True if name can be declared as a JavaScript local."""
    if name == "" or name in JS_RESERVED:
        return False
    c = name[0]
    if not (c.isalpha() or c == "_" or c == "$"):
        return False
    i = 1
    while i < len(name):
        c = name[i]
        if not (c.isalnum() or c == "_" or c == "$"):
            return False
        i += 1
    return True


class Emitter:
    """Accumulates snippet lines with indentation tracking."""

    def __init__(self, indent_str: str = "    ") -> None:
        self.indent: int = 0
        self.lines: list[str] = []
        self._indent_str = indent_str

    def line(self, text: str = "") -> None:
        """Emit a line with current indentation."""
        if text:
            self.lines.append(self._indent_str * self.indent + text)
        else:
            self.lines.append("")

    def output(self) -> str:
        """Return the accumulated output as a string."""
        return "\n".join(self.lines)
