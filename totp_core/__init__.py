"""
totp_core package
=================

Two-factor authentication primitives: HOTP (RFC 4226) and TOTP (RFC 6238)
with HMAC-SHA1, 6 digits and a 30 second step, plus the helpers needed to
enroll an authenticator app.

The package never stores anything. The calling system keeps the Base32
secret next to its account record and passes it in on every call:

1. Enrollment
        secret = generate_base32_secret()
        uri = format_otpauth_uri("MyService", "alice@example", secret)
        # show `uri` as a QR code: provisioning_qr_data_uri(uri)

2. Login
        if verify_totp(secret, submitted_code, window=1):
            ...

>>> from totp_core import generate_base32_secret, generate_code, verify_totp
>>> secret = generate_base32_secret()
>>> verify_totp(secret, generate_code(secret))
True
"""

from totp_core.base32 import base32_decode, base32_decode_strict, base32_encode
from totp_core.enrollment import (
    format_otpauth_uri,
    generate_base32_secret,
    provisioning_qr_data_uri,
    provisioning_qr_png,
)
from totp_core.otp_core import (
    current_counter,
    generate_code,
    hotp,
    seconds_remaining,
    totp,
    verify_hotp,
    verify_totp,
)

__version__ = "0.1.0"

__all__ = [
    "base32_decode",
    "base32_decode_strict",
    "base32_encode",
    "current_counter",
    "format_otpauth_uri",
    "generate_base32_secret",
    "generate_code",
    "hotp",
    "provisioning_qr_data_uri",
    "provisioning_qr_png",
    "seconds_remaining",
    "totp",
    "verify_hotp",
    "verify_totp",
]
