"""
Module: builder.layout.images

Purpose:
    Place question images: decode data URIs, probe natural size with PIL,
    scale into a bounding box keeping the aspect ratio, and reserve the
    vertical space. Anything that cannot be decoded becomes a one-line
    text placeholder; image problems never abort a document.

Key Functions:
    - place_image(): Decide size/position and record the draw operation
    - fit_dimensions(): Aspect-preserving fit into a box
    - decode_data_uri(): data URI -> (bytes, format)

Key Classes:
    - ImagePlacement: Consumed height + recorded operation
    - ImageDecodeError: Image reference could not be decoded

Dependencies:
    - PIL: Natural image dimensions
    - base64 (std)
    - core.utils.serialization: Extension from a data URI MIME type

Used By:
    - builder.layout.composer: Question images
"""

from __future__ import annotations

import base64
import binascii
import io
import logging
import re
from dataclasses import dataclass
from typing import Optional, Tuple
from urllib.parse import unquote_to_bytes

from PIL import Image, UnidentifiedImageError

from quiz_toolkit.core.utils.serialization import get_image_extension

from .context import LayoutContext
from .models import DrawOp, ImageOp, TextOp
from .text import Point

logger = logging.getLogger(__name__)

DEFAULT_FORMAT = "jpeg"
DEFAULT_BOX_WIDTH_RATIO = 0.8

_DATA_URI = re.compile(r"^data:(?P<mime>[^;,]*)(?P<params>[^,]*),(?P<payload>.*)$", re.DOTALL)


class ImageDecodeError(Exception):
    """Image reference could not be decoded."""
    pass


@dataclass(frozen=True)
class ImagePlacement:
    """
    Result of placing an image (immutable).

    Attributes:
        consumed_height: Vertical space used from the origin, in millimetres
        op: Recorded ImageOp, placeholder TextOp, or None for no image
    """

    consumed_height: float
    op: Optional[DrawOp] = None

    @property
    def is_placeholder(self) -> bool:
        return isinstance(self.op, TextOp)


def image_format_from_uri(uri: str) -> str:
    """
    Image format named by a data URI's MIME type.

    Example:
        >>> image_format_from_uri("data:image/webp;base64,UklG...")
        'webp'
        >>> image_format_from_uri("data:image/jpg;base64,/9j/...")
        'jpeg'
    """
    if not uri.startswith("data:image/"):
        return DEFAULT_FORMAT
    extension = get_image_extension(uri)
    return DEFAULT_FORMAT if extension == "jpg" else extension


def decode_data_uri(uri: str) -> Tuple[bytes, str]:
    """
    Decode a data URI.

    Returns:
        (raw bytes, image format)

    Raises:
        ImageDecodeError: Not a data URI, bad base64, or empty payload
    """
    match = _DATA_URI.match(uri)
    if match is None:
        raise ImageDecodeError("Not a data URI")

    payload = match.group("payload")
    try:
        if ";base64" in match.group("params").lower():
            data = base64.b64decode(payload, validate=True)
        else:
            data = unquote_to_bytes(payload)
    except (binascii.Error, ValueError) as e:
        raise ImageDecodeError(f"Invalid data URI payload: {e}") from e

    if not data:
        raise ImageDecodeError("Data URI has no image data")
    return data, image_format_from_uri(uri)


def probe_dimensions(data: bytes) -> Optional[Tuple[int, int]]:
    """
    Natural (width, height) of encoded image bytes.

    Only the header is read. Returns None when PIL reports no usable size.

    Raises:
        ImageDecodeError: PIL cannot identify the image or its size
            exceeds the decompression-bomb limit
    """
    try:
        with Image.open(io.BytesIO(data)) as img:
            width, height = img.size
    except (UnidentifiedImageError, OSError) as e:
        raise ImageDecodeError(f"Unreadable image data: {e}") from e
    except Image.DecompressionBombError as e:
        raise ImageDecodeError(f"Image too large: {e}") from e
    if width <= 0 or height <= 0:
        return None
    return width, height


def fit_dimensions(
    natural_width: float,
    natural_height: float,
    max_width: float,
    max_height: float,
) -> Tuple[float, float]:
    """
    Largest size within max_width x max_height with the natural aspect ratio.

    Example:
        >>> fit_dimensions(1600, 900, 100, 60)
        (100.0, 56.25)
    """
    aspect = natural_width / natural_height
    width = min(max_width, max_height * aspect)
    height = width / aspect
    if height > max_height:
        height = max_height
        width = height * aspect
    return float(width), float(height)


def place_image(
    ctx: LayoutContext,
    image_ref: Optional[str],
    origin: Point,
    max_width: float,
    max_height: float,
) -> ImagePlacement:
    """
    Place an image with its top-left corner at origin.

    Args:
        ctx: Layout context to draw into
        image_ref: Data URI, bare path, or None
        origin: Top-left corner of the image box
        max_width: Bounding box width
        max_height: Bounding box height

    Returns:
        ImagePlacement; consumed_height is 0 when image_ref is empty

    Example:
        >>> placement = place_image(ctx, None, Point(30, 80), 100, 60)
        >>> placement.consumed_height
        0.0
    """
    if not image_ref:
        return ImagePlacement(consumed_height=0.0)

    if not image_ref.startswith("data:"):
        # Bare paths point into an export ZIP the layout engine cannot read
        logger.warning(f"Image reference is not embedded, using placeholder: {image_ref}")
        return _placeholder(ctx, origin, f"[Image: {image_ref}]")

    try:
        data, image_format = decode_data_uri(image_ref)
        dimensions = probe_dimensions(data)
    except ImageDecodeError as e:
        logger.warning(f"Image could not be decoded, using placeholder: {e}")
        return _placeholder(ctx, origin, "[Image unavailable]")

    if dimensions is None:
        width = max_width * DEFAULT_BOX_WIDTH_RATIO
        height = min(ctx.config.default_image_height, max_height)
        logger.debug(f"Image size unavailable, using default {width:.1f}x{height:.1f}mm box")
    else:
        width, height = fit_dimensions(dimensions[0], dimensions[1], max_width, max_height)

    op = ctx.add_image(ImageOp(
        x=origin.x,
        y=origin.y,
        width=width,
        height=height,
        data=data,
        image_format=image_format,
    ))
    return ImagePlacement(consumed_height=height, op=op)


def _placeholder(ctx: LayoutContext, origin: Point, text: str) -> ImagePlacement:
    """One italic text line standing in for an image."""
    config = ctx.config
    font = ctx.base_font.sized(config.info_font_pt).styled(italic=True)
    baseline = origin.y + config.placeholder_height * 0.7
    op = ctx.draw_text(origin.x, baseline, text, font)
    return ImagePlacement(consumed_height=config.placeholder_height, op=op)
