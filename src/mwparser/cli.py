"""Command-line interface: parse wiki markup and print the syntax tree."""

from __future__ import annotations

import argparse
import sys
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from mwparser.errors import CONTEXT_LINES, ParseError

FORMATS = ("yaml", "json")


@dataclass(frozen=True, slots=True)
class CliOptions:
    """Parsed CLI options."""

    input_file: Path | None
    output_file: Path | None
    output_format: str
    positions: bool
    memoize: bool
    context_lines: int
    debug: bool


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser (separate function for testability)."""
    p = argparse.ArgumentParser(
        prog="mwtoast",
        description="Parse wiki markup into a syntax tree",
    )
    p.add_argument("input", nargs="?", default="-", help="Input file (default: stdin)")
    p.add_argument("-o", "--output", help="Output file (default: stdout)")
    p.add_argument(
        "-f",
        "--format",
        choices=FORMATS,
        default=None,
        help="Output format (default: yaml)",
    )
    p.add_argument(
        "--no-positions",
        dest="positions",
        action="store_false",
        default=None,
        help="Omit source positions from the output",
    )
    p.add_argument(
        "--memoize",
        action="store_true",
        default=None,
        help="Cache rule results per offset (packrat parsing)",
    )
    p.add_argument(
        "--context-lines",
        type=int,
        default=None,
        metavar="N",
        help=f"Source lines shown around a syntax error (default: {CONTEXT_LINES})",
    )
    p.add_argument(
        "--config",
        metavar="FILE",
        help="Config file (default: auto-discover mwparser.toml)",
    )
    p.add_argument("--debug", action="store_true", help="Dump AST to stderr")
    return p


def load_config(config_path: Path | None, input_dir: Path) -> dict[str, Any]:
    """Load a TOML config file, returning an empty dict on missing/absent file."""
    path = config_path if config_path is not None else input_dir / "mwparser.toml"

    if not path.is_file():
        return {}

    with open(path, "rb") as f:
        return tomllib.load(f)


def _table(config: dict[str, Any], name: str) -> dict[str, Any]:
    value = config.get(name, {})
    if not isinstance(value, dict):
        raise argparse.ArgumentTypeError(f"config: [{name}] must be a table")
    return value


def resolve_options(args: argparse.Namespace) -> CliOptions:
    """Merge config file and CLI args into CliOptions.

    Precedence: defaults < config file < CLI flags.
    """
    input_file = None if args.input == "-" else Path(args.input)
    input_dir = input_file.parent if input_file is not None else Path(".")
    if not input_dir.parts:
        input_dir = Path(".")

    config_path = Path(args.config) if args.config else None
    try:
        config = load_config(config_path, input_dir)
    except tomllib.TOMLDecodeError as exc:
        raise argparse.ArgumentTypeError(f"invalid config file: {exc}") from exc

    output = _table(config, "output")
    parser_cfg = _table(config, "parser")
    errors_cfg = _table(config, "errors")

    output_format = output.get("format", "yaml")
    if output_format not in FORMATS:
        raise argparse.ArgumentTypeError(f"config: unknown output format {output_format!r}")
    if args.format is not None:
        output_format = args.format

    positions = output.get("position-tracking", True)
    if not isinstance(positions, bool):
        raise argparse.ArgumentTypeError("config: position-tracking must be true or false")
    if args.positions is not None:
        positions = args.positions

    memoize = parser_cfg.get("memoize", False)
    if not isinstance(memoize, bool):
        raise argparse.ArgumentTypeError("config: memoize must be true or false")
    if args.memoize is not None:
        memoize = args.memoize

    context_lines = errors_cfg.get("context-lines", CONTEXT_LINES)
    if args.context_lines is not None:
        context_lines = args.context_lines
    if isinstance(context_lines, bool) or not isinstance(context_lines, int) or context_lines < 0:
        raise argparse.ArgumentTypeError("context lines must be a non-negative integer")

    output_file = Path(args.output) if args.output else None

    return CliOptions(
        input_file=input_file,
        output_file=output_file,
        output_format=output_format,
        positions=positions,
        memoize=memoize,
        context_lines=context_lines,
        debug=args.debug,
    )


def read_source(options: CliOptions) -> str:
    if options.input_file is None:
        return sys.stdin.read()
    return options.input_file.read_text(encoding="utf-8")


def convert(source: str, options: CliOptions) -> str:
    """Parse source and serialize the tree in the configured format."""
    from mwparser.debug import dump_ast
    from mwparser.parser import parse_document
    from mwparser.serialize import to_json, to_yaml

    doc = parse_document(source, memoize=options.memoize)

    if options.debug:
        dump_ast(doc, file=sys.stderr, positions=options.positions)

    if options.output_format == "json":
        return to_json(doc, positions=options.positions) + "\n"
    return to_yaml(doc, positions=options.positions)


def main(argv: list[str] | None = None) -> int:
    """CLI entry point. Returns exit code (0/1/2). Does not call sys.exit()."""
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        options = resolve_options(args)
    except argparse.ArgumentTypeError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2

    try:
        source = read_source(options)
    except OSError as exc:
        print(f"error: cannot read input: {exc}", file=sys.stderr)
        return 2

    try:
        text = convert(source, options)
    except ParseError as exc:
        filename = str(options.input_file) if options.input_file else "<stdin>"
        print(exc.format(filename, context=options.context_lines), file=sys.stderr)
        return 1

    if options.output_file:
        options.output_file.write_text(text, encoding="utf-8")
    else:
        sys.stdout.write(text)

    return 0
