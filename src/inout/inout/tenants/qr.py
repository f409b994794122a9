from __future__ import annotations

import io
import math

import qrcode
from PIL import Image

from ..core.constants import DEFAULT_QR_IMAGE_SIZE
from ..core.exceptions import ValidationError

QR_BORDER = 2


def render_qr_png(content: str, *, min_size: int = DEFAULT_QR_IMAGE_SIZE) -> bytes:
    """Render ``content`` as a PNG QR code at least ``min_size`` pixels wide."""
    qr = qrcode.QRCode(
        version=None,
        error_correction=qrcode.constants.ERROR_CORRECT_M,
        box_size=10,
        border=QR_BORDER,
    )
    qr.add_data(content)
    qr.make(fit=True)

    modules = qr.modules_count + 2 * QR_BORDER
    qr.box_size = max(1, math.ceil(min_size / modules))

    img = qr.make_image(fill_color="black", back_color="white")

    buf = io.BytesIO()
    img.save(buf, format="PNG")
    return buf.getvalue()


def decode_qr_image(image_bytes: bytes) -> str:
    """Return the text of the first QR code found in an uploaded photo."""
    from pyzbar.pyzbar import ZBarSymbol, decode as pyzbar_decode

    try:
        img = Image.open(io.BytesIO(image_bytes)).convert("RGB")
    except (OSError, ValueError) as e:
        raise ValidationError("Uploaded file is not a readable image") from e

    decoded = pyzbar_decode(img, symbols=[ZBarSymbol.QRCODE])
    if not decoded:
        raise ValidationError("No QR code detected in the image")
    try:
        return decoded[0].data.decode("utf-8").strip()
    except UnicodeDecodeError as e:
        raise ValidationError("QR code does not contain text") from e
