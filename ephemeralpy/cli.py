"""Command-line entry point: ``python -m ephemeralpy SOURCE [-o OUTPUT]``."""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from ephemeralpy.compiler.transformer import EphemeralTransformer

EXIT_OK = 0
EXIT_DIAGNOSTICS = 1
EXIT_BAD_INPUT = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ephemeralpy",
        description="Hoist ephemeral({...}) dict literals into reused, pre-declared dicts.",
    )
    parser.add_argument("source", help="Python file to rewrite")
    parser.add_argument(
        "-o", "--output",
        help="Write the rewritten source here instead of stdout",
    )
    parser.add_argument(
        "--marker",
        default=EphemeralTransformer.MARKER_NAME,
        help="Name of the marker function (default: %(default)s)",
    )
    parser.add_argument(
        "--prefix",
        default=EphemeralTransformer.NAME_PREFIX,
        help="Prefix of generated binding names (default: %(default)s)",
    )
    parser.add_argument(
        "--strict",
        action="store_true",
        help="Exit with status 1 if any call site could not be rewritten",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Log every rewrite",
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(message)s",
        stream=sys.stderr,
    )

    path = Path(args.source)
    transformer = EphemeralTransformer(
        marker_name=args.marker,
        prefix=args.prefix,
        filename=str(path),
    )

    try:
        source = path.read_text(encoding="utf-8")
        output = transformer.transform_source(source)
    except (OSError, SyntaxError) as exc:
        print(f"ephemeralpy: {exc}", file=sys.stderr)
        return EXIT_BAD_INPUT

    if args.output:
        Path(args.output).write_text(output + "\n", encoding="utf-8")
    else:
        sys.stdout.write(output + "\n")

    if args.strict and transformer.diagnostics:
        return EXIT_DIAGNOSTICS
    return EXIT_OK
