"""Main CLI entry point for bitschema."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from .. import __version__
from ..cli.analyze import analyze_file
from ..exceptions import BitschemaError


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the bitschema CLI.

    Returns:
        Exit code (0 for success, non-zero for error)
    """
    parser = argparse.ArgumentParser(
        prog="bitschema",
        description="bitschema: Packed Binary Record Decoder Compiler",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  bitschema --analyze records.py                 Show the bit layout of each record
  bitschema --analyze records.py --emit          Also print the generated decoders
  bitschema --analyze records.py --byte-order little
        """,
    )

    parser.add_argument(
        "--analyze",
        metavar="FILE",
        type=str,
        help="Analyze the BaseMessage records defined in FILE",
    )

    parser.add_argument(
        "--byte-order",
        choices=["big", "little"],
        default=None,
        help="Byte order for multi-byte integers (default: per record, big-endian)",
    )

    parser.add_argument(
        "--emit",
        action="store_true",
        help="Print the generated Python decode function of each record",
    )

    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"bitschema {__version__}",
    )

    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(
            level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s"
        )

    # Handle --analyze
    if args.analyze:
        file_path = Path(args.analyze)
        if not file_path.exists():
            print(f"Error: File not found: {file_path}", file=sys.stderr)
            return 1

        try:
            analyze_file(file_path, byte_order=args.byte_order, emit=args.emit)
            return 0
        except BitschemaError as e:
            print(f"Error: invalid schema in {file_path}: {e}", file=sys.stderr)
            return 2
        except Exception as e:
            print(f"Error analyzing file: {e}", file=sys.stderr)
            return 1

    # If no command specified, show help
    parser.print_help()
    return 0


if __name__ == "__main__":
    sys.exit(main())
