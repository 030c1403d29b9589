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


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="splitscan",
        description="Receipt line-item reconstruction CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Commands:
  parse <ocr.json>           Parse a saved OCR result or fragment payload
  scan <image>               Send a receipt photo to the OCR service and parse it
  serve [--host] [--port]    Start the receipt HTTP server (accepts --config)

Parser tolerances and weights are read from config/parser.toml
(or $SPLITSCAN_PARSER_CONFIG) unless --config is given.
""",
    )
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    parse_parser = subparsers.add_parser("parse", help="Parse a saved OCR JSON file")
    parse_parser.add_argument("ocr_json", help="PaddleOCR result (detections) or fragment payload (fragments)")
    parse_parser.add_argument("--config", default=None, help="Parser config TOML file")
    parse_parser.add_argument("--json", action="store_true", help="Print items as JSON")

    scan_parser = subparsers.add_parser("scan", help="Scan a receipt image")
    scan_parser.add_argument("image", help="Path to receipt image")
    scan_parser.add_argument("--ocr-url", default=None, help="OCR service URL (default: $OCR_SERVICE_URL)")
    scan_parser.add_argument("--config", default=None, help="Parser config TOML file")
    scan_parser.add_argument("--json", action="store_true", help="Print items as JSON")
    scan_parser.add_argument("--save-ocr-json", action="store_true", help="Keep the raw OCR response on disk")

    serve_parser = subparsers.add_parser("serve", help="Start receipt HTTP server")
    serve_parser.add_argument("--host", default="127.0.0.1", help="Host to bind to (default: 127.0.0.1)")
    serve_parser.add_argument("--port", type=int, default=8080, help="Port to bind to (default: 8080)")
    serve_parser.add_argument("--config", default=None, help="Parser config TOML file")

    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Main entry point for the CLI."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.debug:
        import logging

        from splitscan.runtime import set_log_level

        set_log_level(logging.DEBUG)

    if args.command is None:
        parser.print_help()
        return 1

    if args.command == "parse":
        from splitscan.cli.receipt import cmd_parse

        return _run_command(cmd_parse, args)
    elif args.command == "scan":
        from splitscan.cli.receipt import cmd_scan

        return _run_command(cmd_scan, args)
    elif args.command == "serve":
        from splitscan.cli.receipt import cmd_serve

        return _run_command(cmd_serve, args)

    return 1


if __name__ == "__main__":
    raise SystemExit(main())
