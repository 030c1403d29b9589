"""FastAPI server turning receipt photos or detector fragments into line items."""

import json
from typing import Any

import httpx
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from splitscan.domain.receipt import ParseWarning, ReceiptLineItem
from splitscan.receipt.formatter import line_item_to_dict
from splitscan.receipt.line_item_parser import ReceiptLineItemParser
from splitscan.receipt.ocr_helpers import (
    OCR_IMAGE_PADDING,
    FragmentFormatError,
    fragments_from_paddleocr,
    fragments_from_payload,
    resize_image_bytes,
)
from splitscan.runtime.logging import get_logger
from splitscan.runtime.ocr_client import OCR_TIMEOUT_SECONDS, get_ocr_service_url
from splitscan.runtime.parser_rules import load_parser_config

logger = get_logger(__name__)


def _image_size(payload: dict[str, Any]) -> tuple[float, float] | None:
    width = payload.get("image_width")
    height = payload.get("image_height")
    if isinstance(width, int | float) and isinstance(height, int | float) and width > 0 and height > 0:
        return float(width), float(height)
    return None


def _items_response(
    items: list[ReceiptLineItem],
    warnings: list[ParseWarning],
    image_size: tuple[float, float] | None,
) -> dict[str, Any]:
    return {
        "status": "success",
        "items": [line_item_to_dict(item, image_size=image_size) for item in items],
        "warnings": [warning.message for warning in warnings],
    }


def _error(message: str, status_code: int) -> JSONResponse:
    return JSONResponse({"status": "error", "message": message}, status_code=status_code)


def create_app(
    parser: ReceiptLineItemParser | None = None,
    ocr_url: str | None = None,
    ocr_transport: httpx.AsyncBaseTransport | None = None,
) -> FastAPI:
    """
    Build the HTTP app.

    Args:
        parser: Line-item parser; defaults to one built from the runtime config
        ocr_url: OCR service base URL; defaults to OCR_SERVICE_URL
        ocr_transport: Optional httpx transport for the OCR client
    """
    item_parser = parser or ReceiptLineItemParser(load_parser_config())
    service_url = (ocr_url or get_ocr_service_url()).rstrip("/")

    app = FastAPI(title="Receipt Line Items")
    app.state.parser = item_parser

    @app.post("/items")
    async def parse_fragments(request: Request) -> JSONResponse:
        """Parse a detector fragment payload that was produced elsewhere."""
        try:
            payload = await request.json()
        except json.JSONDecodeError:
            return _error("Request body is not valid JSON", 400)
        if not isinstance(payload, dict):
            return _error("Request body must be a JSON object", 400)

        try:
            fragments = fragments_from_payload(payload)
        except FragmentFormatError as e:
            return _error(str(e), 400)

        warnings: list[ParseWarning] = []
        items = item_parser.parse(fragments, warning_sink=warnings)
        logger.info("Parsed %d fragments into %d items", len(fragments), len(items))
        return JSONResponse(_items_response(items, warnings, _image_size(payload)))

    @app.post("/upload")
    async def upload_receipt(request: Request) -> JSONResponse:
        """Receive a receipt photo, run OCR, and return its line items."""
        form = await request.form()

        file = None
        for value in form.values():
            if hasattr(value, "read"):
                file = value
                break

        if file is None:
            return _error("No file found in request", 400)

        filename = getattr(file, "filename", None) or "receipt.jpg"
        contents = await file.read()
        try:
            resized_contents = resize_image_bytes(contents)
        except OSError as e:
            logger.warning("Unreadable image upload %s: %s", filename, e)
            return _error("Uploaded file is not a readable image", 400)

        try:
            async with httpx.AsyncClient(timeout=OCR_TIMEOUT_SECONDS, transport=ocr_transport) as client:
                response = await client.post(
                    f"{service_url}/ocr",
                    files={"file": (filename, resized_contents, "image/jpeg")},
                )
        except httpx.RequestError as e:
            logger.error("OCR service unavailable: %s", e)
            return _error("OCR service unavailable", 502)

        if response.status_code != 200:
            logger.error("OCR service error: %s", response.status_code)
            return _error("Receipt processing failed", 502)

        try:
            raw_result = response.json()
            if not isinstance(raw_result, dict):
                raise FragmentFormatError(f"expected a JSON object, got {type(raw_result).__name__}")
            fragments = fragments_from_paddleocr(raw_result)
        except (json.JSONDecodeError, FragmentFormatError) as e:
            logger.error("Unexpected OCR service response: %s", e)
            return _error("Receipt processing failed", 502)

        warnings: list[ParseWarning] = []
        items = item_parser.parse(fragments, warning_sink=warnings)
        logger.info("Parsed %s: %d fragments, %d items", filename, len(fragments), len(items))

        image_size = (
            float(raw_result["image_width"]) - 2 * OCR_IMAGE_PADDING,
            float(raw_result["image_height"]) - 2 * OCR_IMAGE_PADDING,
        )
        body = _items_response(items, warnings, image_size)
        body["image_filename"] = filename
        return JSONResponse(body)

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Health check endpoint."""
        return {"status": "ok"}

    return app


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(create_app(), host="0.0.0.0", port=8000)
