"""fridagen entry point - model dump in, Frida snippet out."""

from __future__ import annotations

import json
import logging
import sys
from dataclasses import dataclass

import pyperclip

from .backend.frida import SnippetError, generate
from .frontend.loader import LoadError, SelectionError, parse_model, resolve_selection
from .serialize import model_to_dict, selection_to_dict

logger = logging.getLogger(__name__)

PHASES: list[str] = [
    "load",
    "select",
]

USAGE: str = """\
fridagen [OPTIONS] [MODEL] --class NAME [--method SEL | --field SEL] [-o OUTPUT]

Generate a Frida hook snippet for a class, method or field described in
the JSON program model MODEL (stdin if omitted).

Options:
  --class NAME        Class raw binary name or alias
  --method SEL        Method raw name, alias, or signature id like baz(I)V
  --field SEL         Field raw name or alias
  --stop-at PHASE     Stop after phase: load, select
  --copy              Also copy the snippet to the clipboard
  -v, --verbose       Log generated snippets to stderr
  --debug             Log debug diagnostics to stderr
  -o, --output FILE   Write output to FILE instead of stdout
  --help              Show this help message
"""


class UsageError(Exception):
    """Bad command line."""


@dataclass
class Options:
    class_name: str | None = None
    method: str | None = None
    field: str | None = None
    stop_at: str | None = None
    copy: bool = False
    log_level: int = logging.WARNING
    input_file: str | None = None
    output_file: str | None = None
    show_help: bool = False


_VALUE_FLAGS: dict[str, str] = {
    "--class": "class_name",
    "--method": "method",
    "--field": "field",
    "--stop-at": "stop_at",
    "-o": "output_file",
    "--output": "output_file",
}


def parse_args(args: list[str]) -> Options:
    """Parse command-line arguments into Options. Raises UsageError."""
    opts = Options()
    i = 0
    while i < len(args):
        arg = args[i]
        if arg == "--help" or arg == "-h":
            opts.show_help = True
            return opts
        elif arg in _VALUE_FLAGS:
            if i + 1 >= len(args):
                raise UsageError(arg + " requires an argument")
            setattr(opts, _VALUE_FLAGS[arg], args[i + 1])
            i += 2
        elif arg == "--copy":
            opts.copy = True
            i += 1
        elif arg == "-v" or arg == "--verbose":
            opts.log_level = min(opts.log_level, logging.INFO)
            i += 1
        elif arg == "--debug":
            opts.log_level = logging.DEBUG
            i += 1
        elif arg.startswith("-") and arg != "-":
            raise UsageError("unknown flag '" + arg + "'")
        else:
            if opts.input_file is not None:
                raise UsageError("unexpected argument '" + arg + "'")
            opts.input_file = None if arg == "-" else arg
            i += 1
    if opts.stop_at is not None and opts.stop_at not in PHASES:
        raise UsageError("unknown phase '" + opts.stop_at + "'")
    if opts.method is not None and opts.field is not None:
        raise UsageError("--method and --field are mutually exclusive")
    if opts.class_name is None and opts.stop_at != "load":
        raise UsageError("--class is required")
    return opts


_log_handler: logging.Handler | None = None


def configure_logging(level: int) -> None:
    """Route the fridagen logger hierarchy to stderr at level."""
    global _log_handler
    root = logging.getLogger("fridagen")
    if _log_handler is not None:
        root.removeHandler(_log_handler)
    _log_handler = logging.StreamHandler(sys.stderr)
    _log_handler.setFormatter(logging.Formatter("%(levelname)s %(name)s: %(message)s"))
    root.addHandler(_log_handler)
    root.setLevel(level)


def read_source(input_file: str | None) -> tuple[str, int]:
    """Read source from file or stdin. Returns (source, exit_code) where exit_code 0 means OK."""
    if input_file is not None:
        try:
            with open(input_file, "rb") as f:
                raw = f.read()
        except OSError:
            print("error: cannot open '" + input_file + "'", file=sys.stderr)
            return ("", 1)
    else:
        raw = sys.stdin.buffer.read()
    try:
        source = raw.decode("utf-8")
    except ValueError:
        print("error: invalid utf-8 in input", file=sys.stderr)
        return ("", 1)
    return (source, 0)


def write_output(output: str, output_file: str | None) -> int:
    """Write output to file or stdout. Returns 0 on success, 1 on error."""
    if output_file is not None:
        try:
            with open(output_file, "w", encoding="utf-8") as f:
                f.write(output + "\n")
        except OSError:
            print("error: cannot write '" + output_file + "'", file=sys.stderr)
            return 1
        return 0
    print(output)
    return 0


def copy_to_clipboard(text: str) -> int:
    """Place text on the system clipboard. Returns 0 on success, 1 on error."""
    try:
        pyperclip.copy(text)
    except pyperclip.PyperclipException as e:
        logger.error("clipboard copy failed", exc_info=True)
        print("error: cannot copy to clipboard: " + str(e), file=sys.stderr)
        return 1
    return 0


def run_pipeline(
    source: str,
    class_name: str | None,
    method: str | None,
    field: str | None,
    stop_at: str | None,
) -> tuple[int, str]:
    """Load, select and generate. Returns (exit_code, output)."""
    try:
        model = parse_model(source)
    except LoadError as e:
        print("error: " + str(e), file=sys.stderr)
        return (1, "")
    if stop_at == "load":
        return (0, json.dumps(model_to_dict(model), indent=2))
    if class_name is None:
        print("error: --class is required", file=sys.stderr)
        return (2, "")
    try:
        selection = resolve_selection(model, class_name, method, field)
    except SelectionError as e:
        print("error: " + str(e), file=sys.stderr)
        return (1, "")
    if stop_at == "select":
        return (0, json.dumps(selection_to_dict(selection), indent=2))
    try:
        snippet = generate(selection)
    except SnippetError as e:
        logger.error("Failed to generate Frida code snippet", exc_info=True)
        print("error: " + str(e), file=sys.stderr)
        return (1, "")
    logger.info("Frida snippet:\n%s", snippet)
    return (0, snippet)


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    try:
        opts = parse_args(argv if argv is not None else sys.argv[1:])
    except UsageError as e:
        print("error: " + str(e), file=sys.stderr)
        return 2
    if opts.show_help:
        print(USAGE, end="")
        return 0
    configure_logging(opts.log_level)
    source, err = read_source(opts.input_file)
    if err != 0:
        return err
    if len(source.strip()) == 0:
        print("error: no input provided", file=sys.stderr)
        return 2
    exit_code, output = run_pipeline(
        source, opts.class_name, opts.method, opts.field, opts.stop_at
    )
    if exit_code != 0:
        return exit_code
    if opts.copy and opts.stop_at is None:
        err = copy_to_clipboard(output)
        if err != 0:
            return err
    return write_output(output, opts.output_file)


if __name__ == "__main__":
    sys.exit(main())
