"""Receipt scan workflow orchestration."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Literal

import httpx

from splitscan.domain.receipt import ParseWarning, ReceiptLineItem, TextFragment
from splitscan.receipt.line_item_parser import ReceiptLineItemParser
from splitscan.receipt.ocr_helpers import FragmentFormatError, load_fragments
from splitscan.runtime.ocr_client import OCRServiceUnavailable, call_ocr_service, save_ocr_json

ScanStatus = Literal[
    "file_not_found",
    "invalid_input",
    "ocr_unavailable",
    "parsed",
]


@dataclass(frozen=True)
class ReceiptScanRequest:
    """Inputs for running the receipt scan workflow."""

    image_path: Path
    ocr_url: str
    parser: ReceiptLineItemParser
    save_ocr_json: bool = False
    ocr_json_dir: Path | None = None
    transport: httpx.BaseTransport | None = None


@dataclass(frozen=True)
class ReceiptScanResult:
    """Outcome from the receipt scan workflow."""

    status: ScanStatus
    items: list[ReceiptLineItem] = field(default_factory=list)
    fragments: list[TextFragment] = field(default_factory=list)
    warnings: list[ParseWarning] = field(default_factory=list)
    ocr_json_path: Path | None = None
    error: str | None = None


def run_receipt_scan(request: ReceiptScanRequest) -> ReceiptScanResult:
    """Run scan flow: image -> OCR service -> fragments -> line items."""
    if not request.image_path.exists():
        return ReceiptScanResult(
            status="file_not_found",
            error=f"Receipt file not found: {request.image_path}",
        )

    try:
        raw_ocr_result, fragments = call_ocr_service(
            request.image_path,
            request.ocr_url,
            transport=request.transport,
        )
    except OCRServiceUnavailable as exc:
        return ReceiptScanResult(status="ocr_unavailable", error=str(exc))
    except FragmentFormatError as exc:
        return ReceiptScanResult(status="invalid_input", error=f"Unexpected OCR response: {exc}")
    except OSError as exc:
        return ReceiptScanResult(status="invalid_input", error=f"Cannot read receipt image: {exc}")

    ocr_json_path = None
    if request.save_ocr_json:
        ocr_json_path = save_ocr_json(raw_ocr_result, request.image_path, output_dir=request.ocr_json_dir)

    warnings: list[ParseWarning] = []
    items = request.parser.parse(fragments, warning_sink=warnings)
    return ReceiptScanResult(
        status="parsed",
        items=items,
        fragments=fragments,
        warnings=warnings,
        ocr_json_path=ocr_json_path,
    )


def run_fragment_parse(path: Path, parser: ReceiptLineItemParser) -> ReceiptScanResult:
    """Parse a saved OCR JSON (PaddleOCR result or fragment payload) without the service."""
    if not path.exists():
        return ReceiptScanResult(status="file_not_found", error=f"OCR JSON not found: {path}")

    try:
        document = json.loads(path.read_text())
    except json.JSONDecodeError as exc:
        return ReceiptScanResult(status="invalid_input", error=f"Invalid JSON in {path}: {exc}")
    if not isinstance(document, dict):
        return ReceiptScanResult(status="invalid_input", error=f"Expected a JSON object in {path}")

    try:
        fragments = load_fragments(document)
    except FragmentFormatError as exc:
        return ReceiptScanResult(status="invalid_input", error=str(exc))

    warnings: list[ParseWarning] = []
    items = parser.parse(fragments, warning_sink=warnings)
    return ReceiptScanResult(status="parsed", items=items, fragments=fragments, warnings=warnings)
