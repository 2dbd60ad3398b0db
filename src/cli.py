"""Command-line interface for sketch-preproc."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

import orjson

from preproc.config import ConfigError, load_config
from preproc.models import SketchWarning
from preproc.transpiler import PreprocessError, PreprocessResult, preprocess
from utils import sketch_class_name


def _add_common_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("sketch", help="Path to the sketch source file")
    parser.add_argument(
        "--package",
        default=None,
        help="Java package of the generated class (default: config package_name)",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="sketch-preproc")
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Enable debug logging"
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    transpile_parser = subparsers.add_parser(
        "transpile", help="Generate Java source for a sketch"
    )
    _add_common_args(transpile_parser)
    transpile_parser.add_argument(
        "--out",
        default=None,
        help="Output file for the generated source (default: stdout)",
    )

    inspect_parser = subparsers.add_parser(
        "inspect", help="Show size()/smooth() analysis as JSON"
    )
    _add_common_args(inspect_parser)

    return parser


def _write_warning(warning: SketchWarning) -> None:
    sys.stderr.write(f"warning: {warning.message}\n")
    if warning.hint:
        sys.stderr.write(f"  {warning.hint}\n")


def _run(sketch_path: Path, package: str | None) -> PreprocessResult:
    config = load_config(sketch_path.parent)
    source = sketch_path.read_text(encoding="utf-8")
    return preprocess(
        source,
        sketch_class_name(sketch_path),
        package_name=package,
        config=config,
        report=_write_warning,
    )


def _handle_transpile(result: PreprocessResult, out: str | None) -> int:
    if out is None:
        sys.stdout.write(result.code)
        return 0
    Path(out).expanduser().write_text(result.code, encoding="utf-8")
    return 0


def _handle_inspect(result: PreprocessResult) -> int:
    payload = {
        "mode": result.mode.value,
        "line_offset": result.line_offset,
        "metadata": result.metadata.model_dump(mode="json"),
        "calls": [
            {
                **visited.call_site.model_dump(mode="json"),
                "scope": visited.scope.value,
                "valid": visited.result.valid,
            }
            for visited in result.calls
        ],
        "edits": [edit.model_dump(mode="json") for edit in result.edits],
        "accessors": [accessor.model_dump() for accessor in result.accessors],
        "warnings": [warning.model_dump() for warning in result.warnings],
    }
    opts = orjson.OPT_SORT_KEYS | orjson.OPT_INDENT_2
    sys.stdout.write(orjson.dumps(payload, option=opts).decode("utf8"))
    sys.stdout.write("\n")
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    sketch_path = Path(args.sketch).expanduser().resolve()
    try:
        result = _run(sketch_path, args.package)
    except OSError as exc:
        sys.stderr.write(f"error: cannot read sketch {sketch_path}: {exc}\n")
        return 1
    except (ConfigError, PreprocessError) as exc:
        sys.stderr.write(f"error: {exc}\n")
        return 1

    if args.command == "transpile":
        return _handle_transpile(result, args.out)

    if args.command == "inspect":
        return _handle_inspect(result)

    raise AssertionError


if __name__ == "__main__":
    raise SystemExit(main())
