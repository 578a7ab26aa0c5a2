"""Snippet generation tests driven by 04_snippets/*.tests files.

Each case's input section starts with a 'select:' line carrying CLI
selection flags, followed by the JSON program model. The expected section
is the exact snippet, compared after trimming surrounding blank lines.
"""

from pathlib import Path

import pytest

from conftest import discover_tests
from fridagen.cli import parse_args, run_pipeline

SNIPPETS_DIR = Path(__file__).parent / "04_snippets"


def pytest_generate_tests(metafunc):
    """Parametrize test_snippet over snippet test files."""
    if "snippet_input" in metafunc.fixturenames:
        params = [
            pytest.param(inp, "\n".join(exp).strip("\n"), id=test_id)
            for test_id, inp, exp in discover_tests(SNIPPETS_DIR)
        ]
        metafunc.parametrize("snippet_input,snippet_expected", params)


def test_snippet(snippet_input: list[str], snippet_expected: str):
    """Verify the generated snippet matches the expected text."""
    assert snippet_input[0].startswith("select:"), "first input line must be 'select:'"
    opts = parse_args(snippet_input[0][7:].split())
    source = "\n".join(snippet_input[1:])
    exit_code, output = run_pipeline(
        source, opts.class_name, opts.method, opts.field, opts.stop_at
    )
    assert exit_code == 0
    actual = output.strip("\n")
    if actual != snippet_expected:
        pytest.fail(
            f"Snippet mismatch:\n--- expected ---\n{snippet_expected}\n--- got ---\n{actual}"
        )
