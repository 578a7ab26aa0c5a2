"""Frida backend: descriptors -> Frida Java-bridge hook snippets.

A class selection declares the class handle, reads every field and hooks
every method except the static initializer. A method or field selection
emits the class handle followed by that one member's block.

Raw names are the only lookup keys; aliases only name locals and log text.
"""

from __future__ import annotations

import logging

from ..model import (
    STATIC_INIT_NAME,
    VOID,
    ArgType,
    ClassDescriptor,
    ClassRef,
    FieldDescriptor,
    FieldRef,
    MethodDescriptor,
    MethodRef,
)
from .util import Emitter, escape_ecmascript, escape_template

logger = logging.getLogger(__name__)

# Frida's name for constructors, distinct from any real method name
FRIDA_CONSTRUCTOR = "$init"


class SnippetError(Exception):
    """Base for snippet generation failures."""


class UnsupportedSelection(SnippetError):
    """Selected element is not a class, method or field."""

    def __init__(self, kind: str):
        self.kind: str = kind
        super().__init__("Unsupported node type: " + kind)


class GenerationFailure(SnippetError):
    """Composition failed, typically on a malformed descriptor."""


class SnippetContext:
    """Per-call lookup cache. Never shared between generate() calls."""

    def __init__(self) -> None:
        self._methods_by_name: dict[int, dict[str, list[MethodDescriptor]]] = {}

    def methods_named(self, cls: ClassDescriptor, raw_name: str) -> list[MethodDescriptor]:
        """Methods of cls whose raw name equals raw_name, in declaration order."""
        key = id(cls)
        index = self._methods_by_name.get(key)
        if index is None:
            index = {}
            for mth in cls.methods:
                index.setdefault(mth.raw_name, []).append(mth)
            self._methods_by_name[key] = index
        return index.get(raw_name, [])


def format_arg_type(typ: ArgType) -> str:
    """Render one parameter type as a quoted overload() argument."""
    if typ.is_array:
        type_str = typ.signature().replace("/", ".")
    else:
        type_str = str(typ)
    return "'" + type_str + "'"


def is_overloaded(mth: MethodDescriptor, ctx: SnippetContext | None = None) -> bool:
    """True if the owning class has another method with this raw name."""
    if ctx is None:
        ctx = SnippetContext()
    for other in ctx.methods_named(mth.owner, mth.raw_name):
        if other.short_id != mth.short_id:
            return True
    return False


def emit_class_declaration(cls: ClassDescriptor) -> str:
    """The handle-declaration statement for cls."""
    raw_name = escape_ecmascript(cls.raw_name)
    return f'let {cls.alias} = Java.use("{raw_name}");'


def emit_method(mth: MethodDescriptor, embedded: bool = False, ctx: SnippetContext | None = None) -> str:
    """Hook block for one method; standalone blocks declare the class first."""
    if ctx is None:
        ctx = SnippetContext()
    cls = mth.owner
    if mth.is_constructor:
        key = FRIDA_CONSTRUCTOR
        name = FRIDA_CONSTRUCTOR
    else:
        key = escape_ecmascript(mth.raw_name)
        name = escape_template(escape_ecmascript(mth.alias))
    overload = ""
    if is_overloaded(mth, ctx):
        overload = ".overload(" + ", ".join(format_arg_type(t) for t in mth.arg_types) + ")"
    args = ", ".join(mth.arg_names)
    log_args = ""
    if mth.arg_names:
        log_args = ": " + ", ".join(a + "=${" + a + "}" for a in mth.arg_names)
    alias = cls.alias
    e = Emitter()
    e.line("" if embedded else emit_class_declaration(cls))
    e.line(f'{alias}["{key}"]{overload}.implementation = function ({args}) {{')
    e.indent += 1
    e.line(f"console.log(`start [Method] {alias}.{name} is called{log_args}`);")
    if mth.is_constructor or mth.return_type == VOID:
        e.line(f'this["{key}"]({args});')
        e.line(f"console.log(`end   [Method] {alias}.{name} result=void`);")
    else:
        e.line(f'let result = this["{key}"]({args});')
        e.line(f"console.log(`end   [Method] {alias}.{name} result=${{result}}`);")
        e.line("return result;")
    e.indent -= 1
    e.line("};")
    return e.output()


def field_lookup_key(fld: FieldDescriptor, ctx: SnippetContext | None = None) -> str:
    """Raw field name, underscore-prefixed when a method shares it."""
    if ctx is None:
        ctx = SnippetContext()
    if ctx.methods_named(fld.owner, fld.raw_name):
        return "_" + fld.raw_name
    return fld.raw_name


def emit_field(fld: FieldDescriptor, embedded: bool = False, ctx: SnippetContext | None = None) -> str:
    """Value read and log line for one field."""
    cls = fld.owner
    key = escape_ecmascript(field_lookup_key(fld, ctx))
    log_key = escape_template(key)
    alias = cls.alias
    e = Emitter()
    e.line("" if embedded else emit_class_declaration(cls))
    e.line(f"let {fld.alias} = {alias}.{key}.value;")
    e.line(f"console.log(` [Field] {alias}.{log_key}.value-> ${{{fld.alias}}}`);")
    e.line()
    return e.output()


def emit_class(cls: ClassDescriptor, ctx: SnippetContext | None = None) -> str:
    """Declaration plus every field probe and method hook, in declaration order."""
    if ctx is None:
        ctx = SnippetContext()
    blocks = [emit_class_declaration(cls)]
    for fld in cls.fields:
        blocks.append(emit_field(fld, True, ctx))
    for mth in cls.methods:
        if mth.raw_name == STATIC_INIT_NAME:
            logger.debug("skipping static initializer of %s", cls.raw_name)
            continue
        blocks.append(emit_method(mth, True, ctx))
    return "\n".join(blocks)


def _kind_name(selection: object) -> str:
    if selection is None:
        return "null"
    return type(selection).__module__ + "." + type(selection).__qualname__


def is_supported(selection: object) -> bool:
    """True if generate() accepts this selection."""
    return isinstance(selection, (ClassRef, MethodRef, FieldRef))


def generate(selection: object) -> str:
    """Emit the Frida snippet for a class, method or field selection."""
    ctx = SnippetContext()
    try:
        match selection:
            case ClassRef(cls=cls):
                return emit_class(cls, ctx)
            case MethodRef(method=mth):
                return emit_method(mth, False, ctx)
            case FieldRef(field=fld):
                return emit_field(fld, False, ctx)
            case _:
                raise UnsupportedSelection(_kind_name(selection))
    except SnippetError:
        raise
    except Exception as e:
        raise GenerationFailure(
            "failed to generate snippet for " + _kind_name(selection) + ": " + str(e)
        ) from e
