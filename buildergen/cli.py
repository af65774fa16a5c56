"""
Command line entry point.

Usage:
    buildergen generate schema.json -o models_gen.py
    buildergen generate schema.json -o models_gen.py --check

Exit status is 0 on success, 1 when a declaration could not be generated
or ``--check`` found the output stale, and 2 when the schema or
configuration could not be read.
"""

import argparse
import sys
from pathlib import Path
from typing import List, Optional

from . import __version__
from .config import GeneratorConfig, LoggingConfig
from .emitter import emit_schema
from .errors import SchemaError
from .frontend import load_schema
from .logging import get_logger, setup_logging

logger = get_logger(__name__)

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_BAD_INPUT = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="buildergen",
        description="Generate record types with fluent companion builders from a schema.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--log-level", default=None, help="DEBUG, INFO, WARNING or ERROR")
    parser.add_argument("--log-file", default=None, help="Also write log output to this file")

    subparsers = parser.add_subparsers(dest="command", required=True)
    generate = subparsers.add_parser("generate", help="Generate a module from a JSON schema")
    generate.add_argument("schema", type=Path, help="JSON schema document")
    generate.add_argument("-o", "--output", type=Path, default=None, help="Output file (default: stdout)")
    generate.add_argument("--config", type=Path, default=None, help="JSON generator configuration")
    generate.add_argument(
        "--check",
        action="store_true",
        help="Do not write; fail if the output file is missing or out of date",
    )
    return parser


def _report(diagnostics) -> None:
    for diagnostic in diagnostics:
        print(str(diagnostic), file=sys.stderr)


def run_generate(args: argparse.Namespace) -> int:
    try:
        config = GeneratorConfig.load(args.config)
        schema = load_schema(args.schema)
    except SchemaError as e:
        where = f"{e.location}: " if e.location else ""
        print(f"{where}error: {e.message}", file=sys.stderr)
        return EXIT_BAD_INPUT

    result = emit_schema(schema, config)
    _report(result.diagnostics)

    if args.check:
        if args.output is None:
            print("error: --check needs --output", file=sys.stderr)
            return EXIT_BAD_INPUT
        current = args.output.read_text(encoding="utf-8") if args.output.exists() else None
        if current != result.source:
            print(f"{args.output} is out of date", file=sys.stderr)
            return EXIT_FAILED
        logger.info(f"{args.output} is up to date")
    elif args.output is None:
        sys.stdout.write(result.source)
    else:
        args.output.parent.mkdir(parents=True, exist_ok=True)
        args.output.write_text(result.source, encoding="utf-8")
        logger.info(f"Wrote {len(result.units)} declarations to {args.output}")

    return EXIT_OK if result.ok else EXIT_FAILED


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging_config = LoggingConfig(level=args.log_level, log_file=args.log_file)
    try:
        setup_logging(logging_config.level, logging_config.log_file)
    except (ValueError, OSError) as e:
        print(f"error: {e}", file=sys.stderr)
        return EXIT_BAD_INPUT

    if args.command == "generate":
        return run_generate(args)
    parser.error(f"unknown command {args.command}")
    return EXIT_BAD_INPUT


if __name__ == "__main__":
    sys.exit(main())
