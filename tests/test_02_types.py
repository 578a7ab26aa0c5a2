"""Type-string parser tests.

Test cases live in 02_types/*.tests files. Expected is one of:

    <signature> | <display form>
    error: <message substring>
"""

from pathlib import Path

import pytest

from conftest import discover_tests
from fridagen.frontend.types import TypeParseError, parse_type
from fridagen.model import INT, ArrayType, ObjectType

TYPES_DIR = Path(__file__).parent / "02_types"


def pytest_generate_tests(metafunc):
    """Parametrize test_type over type test files."""
    if "type_input" in metafunc.fixturenames:
        params = [
            pytest.param("\n".join(inp), "\n".join(exp).strip(), id=test_id)
            for test_id, inp, exp in discover_tests(TYPES_DIR)
        ]
        metafunc.parametrize("type_input,type_expected", params)


def test_type(type_input: str, type_expected: str):
    """Verify parse_type renders or rejects the input as expected."""
    if type_expected.startswith("error:"):
        expected_msg = type_expected[6:].strip()
        with pytest.raises(TypeParseError) as excinfo:
            parse_type(type_input)
        assert expected_msg in str(excinfo.value)
        return
    typ = parse_type(type_input)
    assert f"{typ.signature()} | {typ}" == type_expected


def test_source_and_descriptor_forms_agree():
    assert parse_type("java.lang.String[]") == parse_type("[Ljava/lang/String;")
    assert parse_type("int") == parse_type("I") == INT


def test_array_flag():
    assert parse_type("int[]").is_array
    assert not parse_type("int").is_array
    assert parse_type("[[J") == ArrayType(ArrayType(parse_type("long")))


def test_error_keeps_input_text():
    with pytest.raises(TypeParseError) as excinfo:
        parse_type("a..b")
    assert excinfo.value.text == "a..b"
    assert excinfo.value.msg == "empty name segment"


def test_object_type_signature():
    assert ObjectType("com.example.Foo").signature() == "Lcom/example/Foo;"
