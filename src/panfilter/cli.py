#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Command-line filter driver for panfilter.

The driver reads a wire-format document, runs one filter over it and writes
the result. Document converters pass the target format as an extra
argument; after the filter name the driver accepts and ignores it.

Examples
--------
Demote headers in a converter pipeline::

    $ pandoc -t json input.md | panfilter behead | pandoc -f json -t html

Run a filter function from your own module::

    $ panfilter mypkg.filters:drop_math --kind inline --input doc.json

Inspect a decoded document::

    $ panfilter --dump --input doc.json --rich

A converter that runs filter executables itself (pandoc's ``--filter``)
passes only the target format, which would be read as a filter name. Point
it at a wrapper script that names the filter instead::

    #!/bin/sh
    exec panfilter behead "$@"

or at a Python script that calls :func:`panfilter.filter.run_filter`.

Codec options come from ``.panfilter.toml`` (or ``.yaml``/``.json``, or
``[tool.panfilter]`` in pyproject.toml) and ``PANFILTER_*`` environment
variables; command-line arguments override both.

Exit codes: 0 success, 1 filter failure, 2 usage or configuration error,
3 malformed input document.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional

from panfilter import __version__
from panfilter.constants import (
    CITATION_MODE_KEYS,
    EXIT_DECODE_ERROR,
    EXIT_SUCCESS,
    EXIT_TRANSFORM_ERROR,
    EXIT_VALIDATION_ERROR,
)
from panfilter.exceptions import DecodeError, TransformError, ValidationError
from panfilter.logging_utils import configure_logging
from panfilter.options import CodecOptions

logger = logging.getLogger(__name__)

_KIND_CHOICES = ["document", "meta", "meta_value", "block", "inline", "citation"]


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser for the filter driver."""
    parser = argparse.ArgumentParser(
        prog="panfilter",
        description="Run a document filter over converter JSON read from stdin or a file.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="Exit codes: 0 success, 1 filter failure, 2 usage/config error, 3 malformed input.",
    )
    parser.add_argument(
        "filter",
        nargs="?",
        help="Built-in filter name (see --list) or module:function reference",
    )
    parser.add_argument(
        "target_format",
        nargs="?",
        help="Output format passed by the document converter (ignored)",
    )
    parser.add_argument("--kind", choices=_KIND_CHOICES, help="Node kind the filter operates on")
    parser.add_argument("--input", "-i", help="Read the document from this file instead of stdin")
    parser.add_argument("--output", "-o", help="Write the result to this file instead of stdout")
    parser.add_argument("--config", help="Configuration file (default: search the working directory and parents)")
    parser.add_argument("--no-config", action="store_true", help="Do not search for a configuration file")
    parser.add_argument(
        "--citation-mode-key",
        choices=list(CITATION_MODE_KEYS),
        help="Wire field name for a citation's mode",
    )
    parser.add_argument("--indent", type=int, help="Indent output JSON by this many spaces")
    parser.add_argument("--list", action="store_true", help="List available filters and exit")
    parser.add_argument("--dump", action="store_true", help="Decode the input and print its tree instead of filtering")
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Logging level (default: WARNING)",
    )
    parser.add_argument("--log-file", help="Also write log messages to this file")
    parser.add_argument("--trace", action="store_true", help="Debug logging with timestamps and logger names")
    parser.add_argument("--rich", action="store_true", help="Use rich formatting for errors and --dump output")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def _setup_logging_level(parsed_args: argparse.Namespace) -> None:
    log_level = logging.DEBUG if parsed_args.trace else getattr(logging, parsed_args.log_level.upper())
    configure_logging(
        log_level, log_file=parsed_args.log_file, trace_mode=parsed_args.trace, use_rich=parsed_args.rich
    )


def _print_error(message: str, use_rich: bool) -> None:
    if use_rich:
        from rich.console import Console
        from rich.markup import escape

        Console(stderr=True).print(f"[bold red]Error:[/bold red] {escape(message)}", highlight=False)
    else:
        print(f"Error: {message}", file=sys.stderr)


def _read_input(path: Optional[str]) -> str | bytes:
    if path is None:
        stream = getattr(sys.stdin, "buffer", sys.stdin)
        return stream.read()
    try:
        return Path(path).read_bytes()
    except OSError as e:
        raise ValidationError(f"Cannot read input file {path}: {e}", parameter_name="input", original_error=e) from e


def _write_output(text: str, path: Optional[str]) -> None:
    if path is not None:
        try:
            Path(path).write_text(text, encoding="utf-8")
        except OSError as e:
            raise ValidationError(
                f"Cannot write output file {path}: {e}", parameter_name="output", original_error=e
            ) from e
        return

    buffer = getattr(sys.stdout, "buffer", None)
    if buffer is not None:
        sys.stdout.flush()
        buffer.write(text.encode("utf-8"))
        buffer.flush()
    else:
        sys.stdout.write(text)
        sys.stdout.flush()


def _list_filters(use_rich: bool) -> None:
    from panfilter.filters import list_filters

    filters = list_filters()
    if use_rich:
        from rich.console import Console
        from rich.table import Table

        table = Table(title="Available filters")
        table.add_column("Name", style="cyan")
        table.add_column("Kind")
        table.add_column("Description")
        for name, spec in sorted(filters.items()):
            table.add_row(name, spec.kind.value, spec.description)
        Console().print(table)
        return

    for name, spec in sorted(filters.items()):
        print(f"{name:<16} {spec.kind.value:<11} {spec.description}")


def _dump(wire_text: str | bytes, parsed_args: argparse.Namespace, options: CodecOptions) -> str:
    from panfilter.ast.serialization import decode_json

    document = decode_json(wire_text, options)
    if parsed_args.rich:
        from rich.pretty import pretty_repr

        return pretty_repr(document) + "\n"
    return repr(document) + "\n"


def _run(parsed_args: argparse.Namespace) -> int:
    from panfilter.config import load_codec_options
    from panfilter.filter import apply_filter
    from panfilter.filters import get_filter

    options = load_codec_options(
        config_path=parsed_args.config,
        overrides={"citation_mode_key": parsed_args.citation_mode_key, "indent": parsed_args.indent},
        discover=not parsed_args.no_config,
    )
    logger.debug("Codec options: %s", options)

    spec = None
    if not parsed_args.dump:
        if not parsed_args.filter:
            raise ValidationError("A filter name or module:function reference is required", parameter_name="filter")
        spec = get_filter(parsed_args.filter, kind=parsed_args.kind)
        logger.info("Running filter %s over %s nodes", spec.name, spec.kind.value)
    if parsed_args.target_format:
        logger.debug("Ignoring target format argument %r", parsed_args.target_format)

    wire_text = _read_input(parsed_args.input)

    if spec is None:
        result = _dump(wire_text, parsed_args, options)
    else:
        result = apply_filter(wire_text, spec.kind, spec.transform, options)

    _write_output(result, parsed_args.output)
    return EXIT_SUCCESS


def main(args: list[str] | None = None) -> int:
    """Execute the filter driver and return its exit code."""
    parser = create_parser()
    parsed_args = parser.parse_args(args)

    _setup_logging_level(parsed_args)

    if parsed_args.list:
        _list_filters(parsed_args.rich)
        return EXIT_SUCCESS

    try:
        return _run(parsed_args)
    except ValidationError as e:
        _print_error(str(e), parsed_args.rich)
        return EXIT_VALIDATION_ERROR
    except DecodeError as e:
        _print_error(f"Malformed input document [{e.kind.value}]: {e}", parsed_args.rich)
        return EXIT_DECODE_ERROR
    except TransformError as e:
        _print_error(str(e), parsed_args.rich)
        return EXIT_TRANSFORM_ERROR
    except Exception as e:
        logger.debug("Filter raised an exception", exc_info=True)
        _print_error(f"Filter failed: {type(e).__name__}: {e}", parsed_args.rich)
        return EXIT_TRANSFORM_ERROR


if __name__ == "__main__":
    sys.exit(main())
