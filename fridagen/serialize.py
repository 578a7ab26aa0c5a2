"""Serialization of model objects to JSON-compatible dicts."""

from __future__ import annotations

from .model import (
    ClassDescriptor,
    ClassRef,
    FieldDescriptor,
    FieldRef,
    MethodDescriptor,
    MethodRef,
    ProgramModel,
    Selection,
)


def field_to_dict(fld: FieldDescriptor) -> dict[str, object]:
    d: dict[str, object] = {"name": fld.raw_name, "alias": fld.alias}
    if fld.typ is not None:
        d["type"] = str(fld.typ)
    return d


def method_to_dict(mth: MethodDescriptor) -> dict[str, object]:
    return {
        "name": mth.raw_name,
        "alias": mth.alias,
        "id": mth.short_id,
        "args": [str(t) for t in mth.arg_types],
        "argNames": list(mth.arg_names),
        "ret": str(mth.return_type),
        "constructor": mth.is_constructor,
    }


def class_to_dict(cls: ClassDescriptor) -> dict[str, object]:
    return {
        "name": cls.raw_name,
        "alias": cls.alias,
        "fields": [field_to_dict(f) for f in cls.fields],
        "methods": [method_to_dict(m) for m in cls.methods],
    }


def model_to_dict(model: ProgramModel) -> dict[str, object]:
    """Serialize a whole model, classes in load order."""
    return {"classes": [class_to_dict(c) for c in model.classes.values()]}


def selection_to_dict(selection: Selection) -> dict[str, object]:
    """Describe a resolved selection: its kind, class and member."""
    match selection:
        case ClassRef(cls=cls):
            return {"kind": "class", "class": cls.raw_name}
        case MethodRef(method=mth):
            return {"kind": "method", "class": mth.owner.raw_name, "method": mth.short_id}
        case FieldRef(field=fld):
            return {"kind": "field", "class": fld.owner.raw_name, "field": fld.raw_name}
    raise TypeError("not a selection: " + type(selection).__name__)
