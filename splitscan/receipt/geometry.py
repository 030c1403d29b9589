"""Coordinate mapping between the detector frame and the displayed image.

The text detector reports boxes in a unit square whose axes are rotated
relative to the photo as shown to the user. Everything in the item parser
works on those raw normalized values; only highlighting/rendering needs the
pixel rectangle produced here.
"""

from __future__ import annotations

from splitscan.domain.receipt import NormalizedRect, PixelRect


def to_image_rect(box: NormalizedRect, image_width: float, image_height: float) -> PixelRect:
    """
    Map a detector-frame box to displayed-image pixels.

    Rotates the unit square 90 degrees, flips the vertical axis, then scales
    by the image size.

    Args:
        box: Normalized detector-frame rectangle
        image_width: Displayed image width in pixels
        image_height: Displayed image height in pixels

    Returns:
        Rectangle in pixel space with origin at the top-left corner
    """
    rotated_x = box.secondary
    rotated_y = 1 - box.primary - box.primary_size
    rotated_width = box.secondary_size
    rotated_height = box.primary_size

    return PixelRect(
        x=rotated_x * image_width,
        y=(1 - rotated_y - rotated_height) * image_height,
        width=rotated_width * image_width,
        height=rotated_height * image_height,
    )


def from_image_rect(
    x: float,
    y: float,
    width: float,
    height: float,
    image_width: float,
    image_height: float,
) -> NormalizedRect:
    """Inverse of `to_image_rect`: pixel rectangle -> detector-frame box."""
    if image_width <= 0 or image_height <= 0:
        raise ValueError(f"Image size must be positive, got {image_width}x{image_height}")
    return NormalizedRect(
        primary=y / image_height,
        secondary=x / image_width,
        primary_size=height / image_height,
        secondary_size=width / image_width,
    )
