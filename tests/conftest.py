"""Pytest configuration for the fridagen test suite."""

import sys
from pathlib import Path

import pytest

ROOT_DIR = Path(__file__).parent.parent

# Add repository root to path for fridagen imports
sys.path.insert(0, str(ROOT_DIR))

from fridagen.model import (  # noqa: E402
    INT,
    VOID,
    ArrayType,
    ClassDescriptor,
    FieldDescriptor,
    MethodDescriptor,
    ObjectType,
)


def parse_tests_file(path: Path) -> list[tuple[str, list[str], list[str]]]:
    """Parse a .tests file into (name, input_lines, expected_lines) tuples.

    Format:

        === test name
        input lines
        ---
        expected lines
        ---
    """
    lines = path.read_text(encoding="utf-8").split("\n")
    result: list[tuple[str, list[str], list[str]]] = []
    i = 0
    while i < len(lines):
        line = lines[i]
        if line.startswith("=== "):
            test_name = line[4:].strip()
            i += 1
            input_lines: list[str] = []
            while i < len(lines) and not lines[i].startswith("---"):
                input_lines.append(lines[i])
                i += 1
            if i < len(lines) and lines[i] == "---":
                i += 1
            expected_lines: list[str] = []
            while i < len(lines) and not lines[i].startswith("---"):
                expected_lines.append(lines[i])
                i += 1
            if i < len(lines) and lines[i] == "---":
                i += 1
            result.append((test_name, input_lines, expected_lines))
        else:
            i += 1
    return result


def discover_tests(directory: Path) -> list[tuple[str, list[str], list[str]]]:
    """All cases under directory, ids formatted as '<file stem>/<name>'."""
    results = []
    for test_file in sorted(directory.glob("*.tests")):
        for name, input_lines, expected_lines in parse_tests_file(test_file):
            results.append((f"{test_file.stem}/{name}", input_lines, expected_lines))
    return results


@pytest.fixture
def foo_class() -> ClassDescriptor:
    """com.example.Foo with field bar and void method baz(int)."""
    cls = ClassDescriptor("com.example.Foo", "Foo")
    cls.add_field(FieldDescriptor("bar", "bar", INT))
    cls.add_method(MethodDescriptor("baz", "baz", [INT], VOID, ["i0"]))
    return cls


@pytest.fixture
def overloaded_class() -> ClassDescriptor:
    """com.example.Bar with two baz overloads, a constructor and a static initializer."""
    cls = ClassDescriptor("com.example.Bar", "Bar")
    cls.add_method(MethodDescriptor("<clinit>", "<clinit>", [], VOID, []))
    cls.add_method(MethodDescriptor("<init>", "<init>", [], VOID, [], is_constructor=True))
    cls.add_method(
        MethodDescriptor("baz", "baz", [INT], ObjectType("java.lang.String"), ["i"])
    )
    cls.add_method(
        MethodDescriptor(
            "baz", "baz", [ArrayType(ObjectType("java.lang.String"))], VOID, ["strArr"]
        )
    )
    return cls
