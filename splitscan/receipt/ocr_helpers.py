"""Adapters from text-detector output to `TextFragment` lists."""

from __future__ import annotations

import io
from collections.abc import Mapping, Sequence
from typing import Any

from splitscan.domain.receipt import NormalizedRect, TextFragment

from .geometry import from_image_rect

MAX_IMAGE_DIMENSION = 3000  # Resize if either dimension exceeds this
OCR_IMAGE_PADDING = 50  # White padding around image to prevent edge truncation

# Vision-style box keys accepted as aliases of the detector-frame names.
_BOX_KEY_ALIASES = {
    "primary": ("primary", "x"),
    "secondary": ("secondary", "y"),
    "primary_size": ("primary_size", "width"),
    "secondary_size": ("secondary_size", "height"),
}


class FragmentFormatError(ValueError):
    """Raised when a detector payload cannot be read as text fragments."""


def resize_image_bytes(
    image_bytes: bytes, max_dimension: int = MAX_IMAGE_DIMENSION, padding: int = OCR_IMAGE_PADDING
) -> bytes:
    """
    Prepare a receipt photo for the OCR service.

    Applies EXIF orientation, downsizes so neither side exceeds
    `max_dimension`, then adds white padding so text at the photo edge is
    not truncated.

    Returns:
        JPEG bytes
    """
    from PIL import Image, ImageOps

    img = ImageOps.exif_transpose(Image.open(io.BytesIO(image_bytes)))

    width, height = img.size
    scale = max_dimension / max(width, height)
    if scale < 1:
        img = img.resize((max(1, int(width * scale)), max(1, int(height * scale))), Image.Resampling.LANCZOS)

    if padding > 0:
        img = ImageOps.expand(img, border=padding, fill="white")

    buffer = io.BytesIO()
    img.convert("RGB").save(buffer, format="JPEG", quality=95)
    return buffer.getvalue()


def _clamp(value: float, low: float = 0.0, high: float = 1.0) -> float:
    return max(low, min(high, value))


def fragments_from_paddleocr(raw_result: Mapping[str, Any], padding: int = OCR_IMAGE_PADDING) -> list[TextFragment]:
    """
    Convert a PaddleOCR-style service response into fragments.

    Expected shape::

        {"image_width": W, "image_height": H,
         "detections": [[[[x1, y1], [x2, y2], [x3, y3], [x4, y4]], [text, confidence]], ...]}

    Width/height describe the padded image sent to OCR; padding is removed
    before normalizing so boxes line up with the original photo.
    """
    try:
        image_width = float(raw_result["image_width"]) - 2 * padding
        image_height = float(raw_result["image_height"]) - 2 * padding
    except (KeyError, TypeError, ValueError) as e:
        raise FragmentFormatError(f"OCR result is missing image dimensions: {e}") from e
    if image_width <= 0 or image_height <= 0:
        raise FragmentFormatError(f"Invalid image size after padding: {image_width}x{image_height}")

    fragments: list[TextFragment] = []
    for detection in raw_result.get("detections") or []:
        try:
            quad, (text, confidence) = detection
            xs = [float(point[0]) - padding for point in quad]
            ys = [float(point[1]) - padding for point in quad]
        except (TypeError, ValueError, IndexError) as e:
            raise FragmentFormatError(f"Malformed detection: {detection!r}") from e

        box = from_image_rect(
            min(xs),
            min(ys),
            max(xs) - min(xs),
            max(ys) - min(ys),
            image_width,
            image_height,
        )
        fragments.append(
            TextFragment(
                text=str(text),
                confidence=float(confidence),
                box=NormalizedRect(
                    primary=_clamp(box.primary),
                    secondary=_clamp(box.secondary),
                    primary_size=_clamp(box.primary_size),
                    secondary_size=_clamp(box.secondary_size),
                ),
            )
        )
    return fragments


def _read_box(box: Mapping[str, Any]) -> NormalizedRect:
    values: dict[str, float] = {}
    for field_name, aliases in _BOX_KEY_ALIASES.items():
        for alias in aliases:
            if alias in box:
                values[field_name] = float(box[alias])
                break
    if "primary" not in values or "secondary" not in values:
        raise FragmentFormatError(f"Box needs primary/secondary (or x/y) coordinates: {dict(box)!r}")
    return NormalizedRect(**values)


def fragments_from_payload(payload: Mapping[str, Any]) -> list[TextFragment]:
    """
    Read fragments from the JSON shape used by the HTTP API and CLI::

        {"fragments": [{"text": "MILK", "confidence": 0.98,
                        "box": {"primary": 0.10, "secondary": 0.20,
                                "primary_size": 0.01, "secondary_size": 0.10}}]}
    """
    raw_fragments = payload.get("fragments")
    if not isinstance(raw_fragments, Sequence) or isinstance(raw_fragments, str):
        raise FragmentFormatError("Payload must contain a 'fragments' list")

    fragments: list[TextFragment] = []
    for i, raw in enumerate(raw_fragments):
        if not isinstance(raw, Mapping):
            raise FragmentFormatError(f"Fragment {i} is not an object")
        text = raw.get("text")
        box = raw.get("box")
        if not isinstance(text, str) or not isinstance(box, Mapping):
            raise FragmentFormatError(f"Fragment {i} needs 'text' and 'box'")
        try:
            fragments.append(
                TextFragment(
                    text=text,
                    confidence=float(raw.get("confidence", 1.0)),
                    box=_read_box(box),
                )
            )
        except FragmentFormatError:
            raise
        except (TypeError, ValueError) as e:
            raise FragmentFormatError(f"Fragment {i} has non-numeric values: {e}") from e
    return fragments


def load_fragments(document: Mapping[str, Any], padding: int = OCR_IMAGE_PADDING) -> list[TextFragment]:
    """Dispatch on document shape: PaddleOCR `detections` or plain `fragments`."""
    if "detections" in document:
        return fragments_from_paddleocr(document, padding=padding)
    if "fragments" in document:
        return fragments_from_payload(document)
    raise FragmentFormatError("Expected an OCR result with 'detections' or a payload with 'fragments'")
