#!/usr/bin/env python3

import argparse
from collections.abc import Callable, Sequence


def _coerce_exit_code(code: object) -> int:
    if code is None:
        return 0
    if isinstance(code, int):
        return code
    return 1


def _run_command(command: Callable[[argparse.Namespace], None], args: argparse.Namespace) -> int:
    """Run a command handler, turning its sys.exit() into a return code."""
    try:
        command(args)
    except SystemExit as exc:
        return _coerce_exit_code(exc.code)
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    """Main entry point for the CLI."""
    parser = argparse.ArgumentParser(
        description="Receipt scanning utilities",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Commands:
  scan <image>               OCR a receipt image and extract its fields
  parse <ocr.json>           Extract fields from a saved OCR payload

Environment:
  TALLYSCAN_HOME             Project root holding config/ and receipts/
  TALLYSCAN_LOG_LEVEL        DEBUG, INFO, WARNING or ERROR
""",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # scan command
    scan_parser = subparsers.add_parser("scan", help="Scan a receipt image")
    scan_parser.add_argument("image", help="Path to receipt image")
    scan_parser.add_argument(
        "--ocr-url", default="http://localhost:8001", help="OCR service URL (default: http://localhost:8001)"
    )
    scan_parser.add_argument("--json", action="store_true", help="Print the result as JSON")
    scan_parser.add_argument(
        "--save-ocr-json", action="store_true", help="Keep the raw OCR payload under receipts/ocr_json/"
    )

    # parse command
    parse_parser = subparsers.add_parser("parse", help="Parse a saved OCR JSON payload")
    parse_parser.add_argument("ocr_json", help="Path to OCR JSON file")
    parse_parser.add_argument("--json", action="store_true", help="Print the result as JSON")

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 1

    if args.command == "scan":
        from tallyscan.cli.receipt import cmd_scan

        return _run_command(cmd_scan, args)
    if args.command == "parse":
        from tallyscan.cli.receipt import cmd_parse

        return _run_command(cmd_parse, args)

    return 1


if __name__ == "__main__":
    raise SystemExit(main())
