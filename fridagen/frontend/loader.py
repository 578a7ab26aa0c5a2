"""Load a program model from its JSON dump and resolve user selections.

Document shape:

    {"classes": [
        {"name": "com.example.Foo", "alias": "Foo",
         "fields": [{"name": "bar", "alias": "bar", "type": "int"}],
         "methods": [{"name": "baz", "alias": "baz", "args": ["int"],
                      "argNames": ["i0"], "ret": "void"}]}
    ]}

Only "name" is required on every entry.
"""

from __future__ import annotations

import json
import logging

from ..model import (
    CONSTRUCTOR_NAME,
    VOID,
    ArgType,
    ClassDescriptor,
    ClassRef,
    FieldDescriptor,
    FieldRef,
    MethodDescriptor,
    MethodRef,
    ProgramModel,
    Selection,
)
from ..backend.util import is_js_identifier
from .types import TypeParseError, parse_type

logger = logging.getLogger(__name__)


class LoadError(Exception):
    """Malformed model document, with the path of the offending entry."""

    def __init__(self, msg: str, path: str = ""):
        self.msg: str = msg
        self.path: str = path
        if path:
            super().__init__(path + ": " + msg)
        else:
            super().__init__(msg)


class SelectionError(Exception):
    """Selector matched no member, or more than one."""


def _get_str(entry: dict, key: str, path: str, default: str | None = None) -> str:
    if key not in entry:
        if default is None:
            raise LoadError("missing '" + key + "'", path)
        return default
    value = entry[key]
    if not isinstance(value, str):
        raise LoadError("'" + key + "' must be a string", path)
    if value == "":
        raise LoadError("'" + key + "' must not be empty", path)
    return value


def _get_list(entry: dict, key: str, path: str) -> list:
    value = entry.get(key, [])
    if not isinstance(value, list):
        raise LoadError("'" + key + "' must be a list", path)
    return value


def _get_type(text: object, path: str) -> ArgType:
    if not isinstance(text, str):
        raise LoadError("type must be a string", path)
    try:
        return parse_type(text)
    except TypeParseError as e:
        raise LoadError(str(e), path) from e


def _check_identifier(name: str, what: str, path: str) -> None:
    if not is_js_identifier(name):
        raise LoadError(what + " '" + name + "' must be a valid identifier", path)


def _simple_name(raw_name: str) -> str:
    return raw_name.rsplit(".", 1)[-1]


def _load_field(entry: object, path: str) -> FieldDescriptor:
    if not isinstance(entry, dict):
        raise LoadError("field entry must be an object", path)
    raw_name = _get_str(entry, "name", path)
    alias = _get_str(entry, "alias", path, raw_name)
    _check_identifier(alias, "field alias", path)
    typ = None
    if "type" in entry:
        typ = _get_type(entry["type"], path + ".type")
    return FieldDescriptor(raw_name, alias, typ)


def _load_method(entry: object, path: str) -> MethodDescriptor:
    if not isinstance(entry, dict):
        raise LoadError("method entry must be an object", path)
    raw_name = _get_str(entry, "name", path)
    alias = _get_str(entry, "alias", path, raw_name)
    args = _get_list(entry, "args", path)
    arg_types: list[ArgType] = []
    i = 0
    while i < len(args):
        arg_types.append(_get_type(args[i], path + ".args[" + str(i) + "]"))
        i += 1
    if "argNames" in entry:
        arg_names = _get_list(entry, "argNames", path)
        if len(arg_names) != len(arg_types):
            raise LoadError(
                "argNames has "
                + str(len(arg_names))
                + " entries, expected "
                + str(len(arg_types)),
                path,
            )
        i = 0
        while i < len(arg_names):
            if not isinstance(arg_names[i], str) or arg_names[i] == "":
                raise LoadError("argument name must be a non-empty string", path + ".argNames[" + str(i) + "]")
            _check_identifier(arg_names[i], "argument name", path + ".argNames[" + str(i) + "]")
            i += 1
    else:
        arg_names = ["p" + str(i) for i in range(len(arg_types))]
    ret = VOID
    if "ret" in entry:
        ret = _get_type(entry["ret"], path + ".ret")
    is_constructor = entry.get("constructor", raw_name == CONSTRUCTOR_NAME)
    if not isinstance(is_constructor, bool):
        raise LoadError("'constructor' must be a boolean", path)
    return MethodDescriptor(
        raw_name=raw_name,
        alias=alias,
        arg_types=arg_types,
        return_type=ret,
        arg_names=list(arg_names),
        is_constructor=is_constructor,
    )


def _load_class(entry: object, path: str) -> ClassDescriptor:
    if not isinstance(entry, dict):
        raise LoadError("class entry must be an object", path)
    raw_name = _get_str(entry, "name", path)
    alias = _get_str(entry, "alias", path, _simple_name(raw_name))
    _check_identifier(alias, "class alias", path)
    cls = ClassDescriptor(raw_name, alias)
    fields = _get_list(entry, "fields", path)
    for i, fentry in enumerate(fields):
        cls.add_field(_load_field(fentry, path + ".fields[" + str(i) + "]"))
    methods = _get_list(entry, "methods", path)
    seen: dict[str, int] = {}
    for i, mentry in enumerate(methods):
        mpath = path + ".methods[" + str(i) + "]"
        mth = _load_method(mentry, mpath)
        if mth.short_id in seen:
            raise LoadError("duplicate method signature " + mth.short_id, mpath)
        seen[mth.short_id] = i
        cls.add_method(mth)
    return cls


def load_model(data: object) -> ProgramModel:
    """Build a ProgramModel from an already-decoded JSON document."""
    if not isinstance(data, dict):
        raise LoadError("top level must be an object")
    classes = _get_list(data, "classes", "")
    model = ProgramModel()
    for i, entry in enumerate(classes):
        path = "classes[" + str(i) + "]"
        cls = _load_class(entry, path)
        if cls.raw_name in model.classes:
            raise LoadError("duplicate class " + cls.raw_name, path)
        model.add_class(cls)
    logger.debug("loaded %d classes", len(model.classes))
    return model


def parse_model(source: str) -> ProgramModel:
    """Decode JSON text and build a ProgramModel."""
    try:
        data = json.loads(source)
    except json.JSONDecodeError as e:
        raise LoadError("invalid JSON at line " + str(e.lineno) + ", column " + str(e.colno) + ": " + e.msg) from e
    return load_model(data)


def _find_method(cls: ClassDescriptor, selector: str) -> MethodDescriptor:
    """Match by signature identity first, then raw name, then alias."""
    for mth in cls.methods:
        if mth.short_id == selector:
            return mth
    matches = [m for m in cls.methods if m.raw_name == selector]
    if len(matches) == 0:
        matches = [m for m in cls.methods if m.alias == selector]
    if len(matches) == 0:
        raise SelectionError("no method '" + selector + "' in " + cls.raw_name)
    if len(matches) > 1:
        ids = ", ".join(m.short_id for m in matches)
        raise SelectionError("method '" + selector + "' is ambiguous in " + cls.raw_name + ": " + ids)
    return matches[0]


def _find_field(cls: ClassDescriptor, selector: str) -> FieldDescriptor:
    matches = [f for f in cls.fields if f.raw_name == selector]
    if len(matches) == 0:
        matches = [f for f in cls.fields if f.alias == selector]
    if len(matches) == 0:
        raise SelectionError("no field '" + selector + "' in " + cls.raw_name)
    if len(matches) > 1:
        raise SelectionError("field '" + selector + "' is ambiguous in " + cls.raw_name)
    return matches[0]


def resolve_selection(
    model: ProgramModel,
    class_name: str,
    method: str | None = None,
    field: str | None = None,
) -> Selection:
    """Turn command-line selectors into a ClassRef, MethodRef or FieldRef."""
    if method is not None and field is not None:
        raise SelectionError("select either a method or a field, not both")
    cls = model.get_class(class_name)
    if cls is None:
        raise SelectionError("no class '" + class_name + "'")
    if method is not None:
        return MethodRef(_find_method(cls, method))
    if field is not None:
        return FieldRef(_find_field(cls, field))
    return ClassRef(cls)
