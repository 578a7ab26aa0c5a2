"""Program model - read-only descriptors of a compiled class and its members.

This module defines the descriptor types the generator reads. Each type's
docstring documents its semantics and invariants.

Architecture:
    JSON dump -> Frontend (load, select) -> [Model] -> Backend -> Frida snippet

Descriptors are built once by the frontend and never mutated afterwards.
Members keep a non-owning back-reference to their owning class, excluded
from equality and repr.
"""

from __future__ import annotations

from dataclasses import dataclass, field


# ============================================================
# TYPES
#
# Argument and return types. Each renders two ways: the JVM descriptor
# (signature()) and the Java source form (str()).
# ============================================================


@dataclass(frozen=True)
class ArgType:
    """Base for all argument types. Abstract."""

    @property
    def is_array(self) -> bool:
        return False

    def signature(self) -> str:
        raise NotImplementedError


@dataclass(frozen=True)
class PrimitiveType(ArgType):
    """Primitive JVM type.

    | Name    | Descriptor |
    |---------|------------|
    | boolean | Z          |
    | byte    | B          |
    | char    | C          |
    | short   | S          |
    | int     | I          |
    | long    | J          |
    | float   | F          |
    | double  | D          |
    | void    | V          |
    """

    name: str
    descriptor: str

    def signature(self) -> str:
        return self.descriptor

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class ObjectType(ArgType):
    """Reference type named by its fully qualified binary name.

    Invariants:
    - name uses '.' between packages and '$' for nested classes
    """

    name: str

    def signature(self) -> str:
        return "L" + self.name.replace(".", "/") + ";"

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class ArrayType(ArgType):
    """Array of element type. Multi-dimensional arrays nest."""

    element: ArgType

    @property
    def is_array(self) -> bool:
        return True

    def signature(self) -> str:
        return "[" + self.element.signature()

    def __str__(self) -> str:
        return str(self.element) + "[]"


BOOLEAN = PrimitiveType("boolean", "Z")
BYTE = PrimitiveType("byte", "B")
CHAR = PrimitiveType("char", "C")
SHORT = PrimitiveType("short", "S")
INT = PrimitiveType("int", "I")
LONG = PrimitiveType("long", "J")
FLOAT = PrimitiveType("float", "F")
DOUBLE = PrimitiveType("double", "D")
VOID = PrimitiveType("void", "V")

PRIMITIVES: dict[str, PrimitiveType] = {
    t.name: t for t in (BOOLEAN, BYTE, CHAR, SHORT, INT, LONG, FLOAT, DOUBLE, VOID)
}

CONSTRUCTOR_NAME = "<init>"
STATIC_INIT_NAME = "<clinit>"


# ============================================================
# DESCRIPTORS
# ============================================================


@dataclass
class FieldDescriptor:
    """A field declared by a class.

    Invariants:
    - raw_name is the lookup key in the target runtime
    - alias is for generated local identifiers only
    """

    raw_name: str
    alias: str
    typ: ArgType | None = None
    owner: ClassDescriptor | None = field(default=None, repr=False, compare=False)


@dataclass
class MethodDescriptor:
    """A method or constructor declared by a class.

    Invariants:
    - arg_names has one entry per arg_types entry, in declaration order
    - short_id is unique per (raw_name, arg_types) within the owning class
    - Two methods with equal raw_name and different short_id are overloads
    """

    raw_name: str
    alias: str
    arg_types: list[ArgType] = field(default_factory=list)
    return_type: ArgType = VOID
    arg_names: list[str] = field(default_factory=list)
    is_constructor: bool = False
    owner: ClassDescriptor | None = field(default=None, repr=False, compare=False)

    @property
    def short_id(self) -> str:
        """Signature identity, e.g. 'baz(ILjava/lang/String;)V'."""
        args = "".join(t.signature() for t in self.arg_types)
        return self.raw_name + "(" + args + ")" + self.return_type.signature()


@dataclass
class ClassDescriptor:
    """A class with its members in declaration order.

    Invariants:
    - raw_name is the binary name used for Java.use() lookups
    - alias is a valid JavaScript identifier
    - every member's owner is this class
    """

    raw_name: str
    alias: str
    fields: list[FieldDescriptor] = field(default_factory=list)
    methods: list[MethodDescriptor] = field(default_factory=list)

    def add_field(self, fld: FieldDescriptor) -> None:
        fld.owner = self
        self.fields.append(fld)

    def add_method(self, mth: MethodDescriptor) -> None:
        mth.owner = self
        self.methods.append(mth)


@dataclass
class ProgramModel:
    """All classes known to the generator, keyed by raw binary name."""

    classes: dict[str, ClassDescriptor] = field(default_factory=dict)

    def add_class(self, cls: ClassDescriptor) -> None:
        self.classes[cls.raw_name] = cls

    def get_class(self, name: str) -> ClassDescriptor | None:
        """Look up a class by raw name, falling back to a unique alias."""
        if name in self.classes:
            return self.classes[name]
        matches = [c for c in self.classes.values() if c.alias == name]
        if len(matches) == 1:
            return matches[0]
        return None


# ============================================================
# SELECTIONS
#
# The element a user asked a snippet for. Closed union; the
# dispatcher matches on it exhaustively.
# ============================================================


@dataclass(frozen=True)
class ClassRef:
    """Whole class: declaration plus every field and method."""

    cls: ClassDescriptor


@dataclass(frozen=True)
class MethodRef:
    """Single method hook."""

    method: MethodDescriptor


@dataclass(frozen=True)
class FieldRef:
    """Single field probe."""

    field: FieldDescriptor


Selection = ClassRef | MethodRef | FieldRef
