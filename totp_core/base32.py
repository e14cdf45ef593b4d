"""
base32.py - Base32 codec (RFC 4648 alphabet, no padding) for OTP secrets.

Authenticator apps show and accept the secret in Base32 without the trailing
'=' padding, so the encoder never emits it. The default decoder is lenient:
hand-typed or copy-pasted secrets often carry spaces, dashes or lowercase
letters, and the decoder just drops anything outside the alphabet.

Use `base32_decode_strict` when the caller wants a validation error instead.
"""

import base64
import binascii
import re

ALPHABET = "ABCDEFGHIJKLMNOPQRSTUVWXYZ234567"

_NOT_ALPHABET = re.compile(r"[^A-Z2-7]")
_WHITESPACE = re.compile(r"\s+")

# Character counts (mod 8) that can never end on a byte boundary:
# 1 char = 5 bits, 3 chars = 15 bits, 6 chars = 30 bits. The last char only
# holds bits that get discarded anyway.
_DANGLING = {1, 3, 6}


def _pad(text: str) -> str:
    return text + "=" * (-len(text) % 8)


def base32_encode(data: bytes) -> str:
    """
    Encode raw bytes to Base32 text, '=' padding stripped.

    A trailing partial 5-bit group is zero-filled on the right, exactly as
    `base64.b32encode` does before it appends the padding we strip here.
    """
    return base64.b32encode(bytes(data)).decode("ascii").rstrip("=")


def base32_decode(text: str) -> bytes:
    """
    Best-effort Base32 decode. Never raises.

    - upper-cases the input
    - drops every character outside A-Z / 2-7 (whitespace, '=', '-', ...)
    - drops trailing bits that do not complete a byte

    Garbage in gives a shorter (possibly empty) byte string out.
    """
    cleaned = _NOT_ALPHABET.sub("", str(text or "").upper())
    if len(cleaned) % 8 in _DANGLING:
        cleaned = cleaned[:-1]
    return base64.b32decode(_pad(cleaned))


def base32_decode_strict(text: str) -> bytes:
    """
    Validating Base32 decode.

    Case and whitespace are forgiven, missing '=' padding is restored.
    Anything else that is not valid Base32 raises ValueError.
    """
    cleaned = _WHITESPACE.sub("", str(text or "")).rstrip("=")
    if len(cleaned) % 8 in _DANGLING:
        raise ValueError("Invalid Base32 secret")
    try:
        return base64.b32decode(_pad(cleaned), casefold=True)
    except binascii.Error as e:
        raise ValueError("Invalid Base32 secret") from e
