"""QR verification images embedded in invoices."""

from __future__ import annotations

from pathlib import Path

import qrcode
from PIL import Image
from qrcode.image.pil import PilImage

DEFAULT_SIZE = 200


def verification_payload(identifier: str, base: object) -> str:
    """Text encoded in the QR code of one invoice."""

    return f"Invoice for Student ID: {identifier}\nAmount: Rs. {base}"


def write_verification_image(
    payload: str,
    destination: Path,
    size: int = DEFAULT_SIZE,
) -> Path:
    """Encode ``payload`` as a ``size`` x ``size`` PNG at ``destination``."""

    qr = qrcode.QRCode(
        error_correction=qrcode.constants.ERROR_CORRECT_M,
        box_size=10,
        border=4,
    )
    qr.add_data(payload)
    qr.make(fit=True)

    image = qr.make_image(
        image_factory=PilImage, fill_color="black", back_color="white"
    ).get_image()
    image = image.convert("L").resize((size, size), Image.Resampling.NEAREST)

    destination = Path(destination)
    destination.parent.mkdir(parents=True, exist_ok=True)
    image.save(destination, format="PNG")
    return destination


__all__ = ["DEFAULT_SIZE", "verification_payload", "write_verification_image"]
