"""
enrollment.py - new secrets and otpauth:// provisioning for authenticator apps.
"""

import base64
import io
import logging
import os
import re
from urllib.parse import quote

import qrcode

from totp_core.base32 import base32_encode

logger = logging.getLogger(__name__)

SECRET_BYTES = 20           # 160-bit secret (common practice)
MIN_SECRET_BYTES = 10
MAX_SECRET_BYTES = 64
DEFAULT_ISSUER = "Panel"
DEFAULT_ACCOUNT = "user"

# encodeURIComponent leaves these unescaped; authenticator apps expect the same
_URI_SAFE = "!~*'()"
_WHITESPACE = re.compile(r"\s+")


def generate_base32_secret(num_bytes: int = SECRET_BYTES) -> str:
    """
    Generate a random secret and return it as Base32 (no padding).

    - `num_bytes` is clamped to [10, 64].
    - Bytes come from os.urandom (CSPRNG). If the OS cannot provide entropy
      the OSError propagates: enrollment must not continue without it.
    """
    n = max(MIN_SECRET_BYTES, min(MAX_SECRET_BYTES, int(num_bytes)))
    raw = os.urandom(n)
    logger.debug("Generated %d-bit secret", n * 8)
    return base32_encode(raw)


def format_otpauth_uri(issuer: str, account: str, secret_b32: str) -> str:
    """
    Build the TOTP key URI that authenticator apps import (usually via QR).

    otpauth://totp/{issuer}:{account}?secret=...&issuer=...&algorithm=SHA1&digits=6&period=30

    Blank issuer/account fall back to "Panel"/"user". Whitespace inside the
    secret is removed. Each part is percent-encoded on its own.
    """
    issuer_q = quote(str(issuer or "").strip() or DEFAULT_ISSUER, safe=_URI_SAFE)
    account_q = quote(str(account or "").strip() or DEFAULT_ACCOUNT, safe=_URI_SAFE)
    secret_q = quote(_WHITESPACE.sub("", str(secret_b32 or "").strip()), safe=_URI_SAFE)
    return (
        f"otpauth://totp/{issuer_q}:{account_q}?secret={secret_q}&issuer={issuer_q}"
        f"&algorithm=SHA1&digits=6&period=30"
    )


def provisioning_qr_png(uri: str) -> bytes:
    """Render an otpauth URI as a PNG QR code."""
    qr = qrcode.QRCode(version=1, box_size=10, border=5)
    qr.add_data(uri)
    qr.make(fit=True)
    img = qr.make_image(fill_color="black", back_color="white")

    buffer = io.BytesIO()
    img.save(buffer, format="PNG")
    return buffer.getvalue()


def provisioning_qr_data_uri(uri: str) -> str:
    """Same QR code as a data: URI, ready for an <img src=...>."""
    img_str = base64.b64encode(provisioning_qr_png(uri)).decode("ascii")
    return f"data:image/png;base64,{img_str}"
