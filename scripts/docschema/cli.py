"""Command-line interface for docschema."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from enum import IntEnum
from pathlib import Path
from typing import Optional

from scripts.docschema.config import (
    DEFAULT_CONFIG_PATH,
    ConfigError,
    GenerateConfig,
    load_config,
)
from scripts.docschema.generator import generate


class ExitCode(IntEnum):
    """Process exit codes."""

    SUCCESS = 0
    CONFIG_ERROR = 1
    NOT_FOUND = 2


def _get_config(config_path: Optional[str]) -> GenerateConfig:
    """Load config from an explicit path, else ./docschema.yaml, else defaults."""
    if config_path:
        path = Path(config_path)
        if not path.exists():
            raise ConfigError("Config file not found", file=config_path, error_type="config_not_found")
        return load_config(path)
    return load_config(Path.cwd() / DEFAULT_CONFIG_PATH)


def cmd_generate(args: argparse.Namespace) -> int:
    """Generate the schema of an entry file and print it as JSON."""
    try:
        config = _get_config(args.config)
    except ConfigError as e:
        print(json.dumps(e.to_json()), file=sys.stderr)
        return ExitCode.CONFIG_ERROR

    if args.source:
        config.source_files_paths = [*config.source_files_paths, *args.source]
    if args.strict_order:
        config.strict_declaration_order = True
    if args.strict_comment:
        config.strict_comment = True

    schema = generate(args.entry, config)
    if schema is None:
        error = {"error": "entry_not_found", "message": f"Entry file not found: {args.entry}"}
        print(json.dumps(error), file=sys.stderr)
        return ExitCode.NOT_FOUND

    output = json.dumps(schema, indent=2, ensure_ascii=False)
    if args.output:
        output_path = Path(args.output)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(output + "\n", encoding="utf-8")
        print(f"Wrote schema to {output_path}")
    else:
        print(output)
    return ExitCode.SUCCESS


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        prog="docschema",
        description="Extract documentation schemas from annotated TypeScript declarations",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Log resolution details",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    # generate command
    generate_parser = subparsers.add_parser(
        "generate",
        help="Generate the schema of an entry file",
    )
    generate_parser.add_argument("entry", help="Entry source file")
    generate_parser.add_argument(
        "--source",
        "-s",
        action="append",
        default=[],
        help="Glob of additional source files (repeatable)",
    )
    generate_parser.add_argument(
        "--config",
        "-c",
        help=f"Path to config file (default: {DEFAULT_CONFIG_PATH})",
    )
    generate_parser.add_argument(
        "--strict-order",
        action="store_true",
        help="Output an ordered list instead of a map",
    )
    generate_parser.add_argument(
        "--strict-comment",
        action="store_true",
        help="Only explicit tags document a property",
    )
    generate_parser.add_argument("--output", "-o", help="Write JSON to this file")

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    commands = {
        "generate": cmd_generate,
    }

    return commands[args.command](args)


if __name__ == "__main__":
    sys.exit(main())
