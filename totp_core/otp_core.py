"""
otp_core.py - HOTP (RFC 4226) and TOTP (RFC 6238) generation and verification.

Pure functions only: the secret comes in as an argument, nothing is stored,
nothing is written. Callers (CLI, web backend, their own login flow) keep the
secret wherever they like and pass it in on every call.

Fixed parameters, matching what Google Authenticator / Authy expect by default:
- HMAC-SHA1
- 6 digits
- 30 second time step

Time is handled in milliseconds since the Unix epoch. Every function accepts
it explicitly; when left out, the wall clock is read once through
`current_time_ms()`.
"""

import hashlib
import hmac
import logging
import re
import struct
import time
from typing import Optional, Tuple

from totp_core.base32 import base32_decode

logger = logging.getLogger(__name__)

# --- Config / constants ----------------------------------------------------
DEFAULT_DIGITS = 6          # code length
PERIOD_MS = 30_000          # TOTP step (milliseconds)
DEFAULT_WINDOW = 1          # +/- steps accepted by default
MAX_WINDOW = 5              # hard cap: at most 11 HMACs per verification
MAX_COUNTER = 0xFFFFFFFFFFFFFFFF

_MODULUS = 10 ** DEFAULT_DIGITS
_CODE_RE = re.compile(r"[0-9]{%d}" % DEFAULT_DIGITS)
_WHITESPACE = re.compile(r"\s+")


def current_time_ms() -> int:
    """Wall clock in milliseconds since the epoch."""
    return int(time.time() * 1000)


# --- RFC 4226 helpers ------------------------------------------------------
def int_to_bytes(i: int) -> bytes:
    """
    Counter -> 8-byte big-endian message, as RFC 4226 requires.

    Example: int_to_bytes(1) -> b'\\x00\\x00\\x00\\x00\\x00\\x00\\x00\\x01'
    """
    return struct.pack(">Q", i)


def dynamic_truncate(hmac_digest: bytes) -> int:
    """
    RFC 4226 dynamic truncation.

    - offset = low nibble of the last byte (0..15)
    - read 4 bytes at offset as a big-endian integer
    - clear the top bit, leaving a 31-bit unsigned value
    """
    offset = hmac_digest[-1] & 0x0F
    return struct.unpack(">I", hmac_digest[offset:offset + 4])[0] & 0x7FFFFFFF


def hotp(key: bytes, counter: int) -> str:
    """
    HOTP code for raw key bytes and a counter.

    Steps:
    1. message = 8-byte big-endian counter
    2. HMAC-SHA1(key, message) -> 20 bytes
    3. dynamic truncation -> 31-bit integer
    4. modulo 10^6, zero-padded to 6 digits

    An empty key is accepted here; verification refuses empty secrets one
    level up.

    Raises:
        ValueError: counter outside the unsigned 64-bit range
    """
    if counter < 0 or counter > MAX_COUNTER:
        raise ValueError("counter must fit in an unsigned 64-bit integer")
    digest = hmac.new(bytes(key), int_to_bytes(counter), hashlib.sha1).digest()
    return str(dynamic_truncate(digest) % _MODULUS).zfill(DEFAULT_DIGITS)


def _normalize_code(code: str) -> Optional[str]:
    value = _WHITESPACE.sub("", str(code or ""))
    if not _CODE_RE.fullmatch(value):
        return None
    return value


def _clamp(value: int, low: int, high: int) -> int:
    return max(low, min(high, int(value)))


# --- TOTP (RFC 6238) -------------------------------------------------------
def current_counter(now_ms: int) -> int:
    """Time step index: floor(now_ms / 30000)."""
    return int(now_ms // PERIOD_MS)


def seconds_remaining(now_ms: int) -> int:
    """Whole seconds (1..30) until the code for `now_ms` rolls over."""
    left_ms = PERIOD_MS - int(now_ms % PERIOD_MS)
    return -(-left_ms // 1000)


def generate_code(secret_b32: str, now_ms: Optional[int] = None) -> str:
    """
    Current 6-digit TOTP code for a Base32 secret.

    Raises ValueError for times whose step falls outside the unsigned 64-bit
    counter range: before the epoch, or past the last 64-bit step. Those are
    refused on purpose; verification never raises for them and finds no match.
    """
    if now_ms is None:
        now_ms = current_time_ms()
    return hotp(base32_decode(secret_b32), current_counter(now_ms))


def totp(secret_b32: str, now_ms: Optional[int] = None) -> Tuple[str, int]:
    """
    Code plus how long it stays valid.

    Returns:
        (code, remaining_seconds)
    """
    if now_ms is None:
        now_ms = current_time_ms()
    return generate_code(secret_b32, now_ms), seconds_remaining(now_ms)


def verify_totp(
    secret_b32: str,
    code: str,
    window: int = DEFAULT_WINDOW,
    now_ms: Optional[int] = None,
) -> bool:
    """
    Check a user-submitted TOTP code.

    Returns False (never raises) when:
    - the secret decodes to nothing
    - the code is not exactly 6 ASCII digits once whitespace is removed
    - no step in [counter - window, counter + window] produces the code

    `window` is clamped to [0, 5].
    """
    key = base32_decode(str(secret_b32 or "").strip())
    if not key:
        logger.debug("TOTP verify rejected: empty secret")
        return False
    value = _normalize_code(code)
    if value is None:
        logger.debug("TOTP verify rejected: malformed code")
        return False

    if now_ms is None:
        now_ms = current_time_ms()
    w = _clamp(window, 0, MAX_WINDOW)
    counter = current_counter(now_ms)
    for offset in range(-w, w + 1):
        test_counter = counter + offset
        if test_counter < 0 or test_counter > MAX_COUNTER:
            continue
        if hmac.compare_digest(hotp(key, test_counter), value):
            logger.debug("TOTP verify ok: counter=%d offset=%+d", counter, offset)
            return True
    logger.debug("TOTP verify failed: counter=%d window=%d", counter, w)
    return False


def verify_hotp(
    secret_b32: str,
    code: str,
    counter: int,
    look_ahead: int = DEFAULT_WINDOW,
) -> Tuple[bool, int]:
    """
    Check an event-based HOTP code against `counter` .. `counter + look_ahead`.

    The caller owns the counter. On success the counter to store next is
    returned (one past the matching value); on failure the counter comes back
    unchanged.
    """
    key = base32_decode(str(secret_b32 or "").strip())
    value = _normalize_code(code)
    if not key or value is None or counter < 0:
        return False, counter

    ahead = _clamp(look_ahead, 0, MAX_WINDOW)
    for i in range(ahead + 1):
        test_counter = counter + i
        if test_counter > MAX_COUNTER:
            break
        if hmac.compare_digest(hotp(key, test_counter), value):
            logger.debug("HOTP verify ok: counter=%d step=%d", counter, i)
            return True, test_counter + 1
    return False, counter
