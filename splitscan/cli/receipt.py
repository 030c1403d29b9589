"""Receipt command handlers used by the CLI."""

import argparse
import json
import sys
from pathlib import Path

from splitscan.application.receipts.scan import ReceiptScanResult
from splitscan.receipt.formatter import format_line_items, line_item_to_dict
from splitscan.receipt.line_item_parser import ReceiptLineItemParser
from splitscan.runtime import get_logger, load_parser_config

logger = get_logger(__name__)


def _build_parser(args: argparse.Namespace) -> ReceiptLineItemParser:
    try:
        config = load_parser_config(getattr(args, "config", None))
    except ValueError as e:
        # tomllib.TOMLDecodeError is a ValueError too.
        print(f"Invalid parser config: {e}")
        sys.exit(1)
    return ReceiptLineItemParser(config)


def _print_result(result: ReceiptScanResult, as_json: bool) -> None:
    if as_json:
        payload = {
            "items": [line_item_to_dict(item) for item in result.items],
            "warnings": [warning.message for warning in result.warnings],
        }
        print(json.dumps(payload, indent=2))
        return

    print(f"Fragments: {len(result.fragments)}")
    print(format_line_items(result.items))
    for warning in result.warnings:
        print(f"warning: {warning.message}")


def _exit_on_failure(result: ReceiptScanResult) -> None:
    if result.status == "parsed":
        return
    logger.error("%s", result.error)
    if result.status == "ocr_unavailable":
        print(f"OCR service unavailable: {result.error}")
        print("Make sure the OCR service is running before scanning receipts.")
    else:
        print(f"Error: {result.error}")
    sys.exit(1)


def cmd_parse(args: argparse.Namespace) -> None:
    """Parse a saved OCR JSON file and print its line items."""
    from splitscan.application.receipts.scan import run_fragment_parse

    result = run_fragment_parse(Path(args.ocr_json), _build_parser(args))
    _exit_on_failure(result)
    _print_result(result, args.json)


def cmd_scan(args: argparse.Namespace) -> None:
    """Send a receipt image to the OCR service and print its line items."""
    from splitscan.application.receipts.scan import ReceiptScanRequest, run_receipt_scan
    from splitscan.runtime.ocr_client import get_ocr_service_url

    result = run_receipt_scan(
        ReceiptScanRequest(
            image_path=Path(args.image),
            ocr_url=args.ocr_url or get_ocr_service_url(),
            parser=_build_parser(args),
            save_ocr_json=args.save_ocr_json,
        )
    )
    _exit_on_failure(result)
    _print_result(result, args.json)
    if result.ocr_json_path is not None:
        print(f"Saved OCR JSON to: {result.ocr_json_path}")


def cmd_serve(args: argparse.Namespace) -> None:
    """Start the FastAPI server."""
    import uvicorn

    from splitscan.runtime.receipt_server import create_app

    app = create_app(parser=_build_parser(args))

    print(f"Starting receipt server on {args.host}:{args.port}")
    print(f"Endpoints: http://{args.host}:{args.port}/items | /upload | /health")
    print("Press Ctrl+C to stop")

    uvicorn.run(app, host=args.host, port=args.port)
