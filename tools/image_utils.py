"""Cover image helpers: data URIs, normalisation, and placeholder art."""

import base64
import binascii
import hashlib
import io
import logging
import re
from dataclasses import dataclass
from typing import Optional

from PIL import Image, ImageDraw, UnidentifiedImageError

logger = logging.getLogger(__name__)

_DATA_URI_RE = re.compile(r"^data:image/(png|jpeg|jpg);base64,(.*)$", re.DOTALL)

# Formats an e-book container can embed as a cover without conversion
_NATIVE_FORMATS = {"PNG": "image/png", "JPEG": "image/jpeg"}

PLACEHOLDER_SIZE = (600, 800)  # 3:4


@dataclass(frozen=True)
class DecodedImage:
    mime_type: str
    data: bytes

    @property
    def extension(self) -> str:
        return "png" if self.mime_type == "image/png" else "jpg"


def encode_data_uri(data: bytes, mime_type: str) -> str:
    return f"data:{mime_type};base64,{base64.b64encode(data).decode('ascii')}"


def decode_data_uri(uri: Optional[str]) -> Optional[DecodedImage]:
    """Decode a PNG/JPEG base64 data URI; returns None if it is unusable."""
    if not uri:
        return None
    match = _DATA_URI_RE.match(uri.strip())
    if not match:
        return None
    subtype = match.group(1)
    try:
        data = base64.b64decode(match.group(2), validate=True)
    except (binascii.Error, ValueError):
        return None
    if not data:
        return None
    mime_type = "image/png" if subtype == "png" else "image/jpeg"
    return DecodedImage(mime_type=mime_type, data=data)


def normalize_image(data: bytes) -> Optional[str]:
    """Verify image bytes and return them as a PNG/JPEG data URI.

    Other formats are re-encoded to PNG. Returns None when Pillow cannot
    decode the bytes.
    """
    if not data:
        return None
    try:
        with Image.open(io.BytesIO(data)) as img:
            fmt = img.format
            img.verify()
    except (UnidentifiedImageError, OSError, SyntaxError, ValueError) as e:
        logger.warning("Discarding undecodable image (%d bytes): %s", len(data), e)
        return None

    if fmt in _NATIVE_FORMATS:
        return encode_data_uri(data, _NATIVE_FORMATS[fmt])

    # verify() leaves the image unusable; reopen to convert
    with Image.open(io.BytesIO(data)) as img:
        buf = io.BytesIO()
        img.convert("RGB").save(buf, format="PNG")
    logger.debug("Converted %s cover to PNG", fmt)
    return encode_data_uri(buf.getvalue(), "image/png")


def placeholder_cover(title: str, genre: str = "", tone: str = "") -> str:
    """Render a deterministic abstract cover as a PNG data URI.

    Colours come from a hash of the inputs, so the same brief always yields
    the same bytes.
    """
    digest = hashlib.sha256(f"{title}|{genre}|{tone}".encode("utf-8")).digest()
    top = tuple(digest[0:3])
    bottom = tuple(digest[3:6])
    accent = tuple(255 - c for c in digest[6:9])

    width, height = PLACEHOLDER_SIZE
    img = Image.new("RGB", PLACEHOLDER_SIZE, top)
    draw = ImageDraw.Draw(img)
    for y in range(height):
        t = y / (height - 1)
        color = tuple(int(a + (b - a) * t) for a, b in zip(top, bottom))
        draw.line([(0, y), (width, y)], fill=color)

    band_y = height * (40 + digest[9] % 30) // 100
    draw.rectangle([0, band_y, width, band_y + height // 40], fill=accent)
    radius = width // 6 + digest[10] % (width // 6)
    cx = width * (25 + digest[11] % 50) // 100
    cy = height * (20 + digest[12] % 30) // 100
    draw.ellipse([cx - radius, cy - radius, cx + radius, cy + radius], outline=accent, width=6)

    buf = io.BytesIO()
    img.save(buf, format="PNG")
    return encode_data_uri(buf.getvalue(), "image/png")
