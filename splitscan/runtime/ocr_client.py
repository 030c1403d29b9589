"""Runtime helpers for talking to the OCR service (non-HTTP-server side)."""

import json
import os
import time
from pathlib import Path
from typing import Any

import httpx

from splitscan.domain.receipt import TextFragment
from splitscan.receipt.ocr_helpers import FragmentFormatError, fragments_from_paddleocr, resize_image_bytes
from splitscan.runtime.logging import get_logger
from splitscan.runtime.paths import get_paths

logger = get_logger(__name__)

DEFAULT_OCR_SERVICE_URL = "http://localhost:8001"
OCR_TIMEOUT_SECONDS = 60.0


def get_ocr_service_url() -> str:
    return os.environ.get("OCR_SERVICE_URL", DEFAULT_OCR_SERVICE_URL)


class OCRServiceUnavailable(RuntimeError):
    """Raised when the OCR service cannot be reached or returns an error."""


def call_ocr_service(
    receipt_path: Path,
    ocr_url: str,
    transport: httpx.BaseTransport | None = None,
) -> tuple[dict[str, Any], list[TextFragment]]:
    """
    Send a receipt image to the OCR service.

    Returns:
        Tuple of (raw_result, fragments).
    """
    ocr_url = ocr_url.rstrip("/")
    logger.info("Sending receipt to OCR service at %s...", ocr_url)

    image_bytes = receipt_path.read_bytes()
    resized_bytes = resize_image_bytes(image_bytes)

    try:
        start_time = time.time()
        with httpx.Client(timeout=OCR_TIMEOUT_SECONDS, transport=transport) as client:
            response = client.post(
                f"{ocr_url}/ocr",
                files={"file": (receipt_path.name, resized_bytes, "image/jpeg")},
            )
        logger.info("OCR service returned in %.2f seconds", time.time() - start_time)
    except httpx.RequestError as e:
        logger.error("Failed to connect to OCR service: %s", e)
        raise OCRServiceUnavailable(f"Failed to connect to OCR service: {e}") from e

    if response.status_code != 200:
        logger.error("OCR service error: %s", response.status_code)
        raise OCRServiceUnavailable(f"OCR service error: {response.status_code}")

    try:
        raw_result = response.json()
    except json.JSONDecodeError as e:
        raise FragmentFormatError(f"OCR service returned non-JSON body: {e}") from e
    if not isinstance(raw_result, dict):
        raise FragmentFormatError("OCR service returned a non-object JSON body")
    return raw_result, fragments_from_paddleocr(raw_result)


def save_ocr_json(ocr_result: dict[str, Any], receipt_path: Path, output_dir: Path | None = None) -> Path:
    """Save a raw OCR result so the receipt can be re-parsed without the service."""
    if output_dir is None:
        output_dir = get_paths().receipts_ocr_json
    output_dir.mkdir(parents=True, exist_ok=True)
    ocr_json_path = output_dir / f"{receipt_path.stem}.json"
    ocr_json_path.write_text(json.dumps(ocr_result, indent=2))
    logger.debug("OCR JSON saved to: %s", ocr_json_path)
    return ocr_json_path
