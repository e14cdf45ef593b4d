#!/usr/bin/env python3
"""
otp_cli.py - command-line wrapper around totp_core.

Nothing is stored: the secret is passed with --secret or read from the
TOTP_SECRET environment variable on every call.

Subcommands:
- secret : generate a new Base32 secret
- uri    : print the otpauth:// URI for an authenticator app
- qr     : write that URI as a PNG QR code
- totp   : print the current TOTP code
- hotp   : print the HOTP code for a counter
- verify : check a TOTP or HOTP code

eg..:
    totp-core secret --bytes 32
    totp-core uri --issuer MyService --account alice@example --secret JBSWY3DPEHPK3PXP
    TOTP_SECRET=JBSWY3DPEHPK3PXP totp-core verify totp --code 123456 --window 2
"""

import argparse
import logging
import os
import sys
from typing import List, Optional

from totp_core import enrollment, otp_core
from totp_core.base32 import base32_decode

SECRET_ENV = "TOTP_SECRET"

logger = logging.getLogger(__name__)


def _secret(args) -> str:
    secret = args.secret or os.environ.get(SECRET_ENV, "")
    if not secret.strip():
        args.parser.error(f"a secret is required (--secret or {SECRET_ENV})")
    return secret


# --- CLI command handlers ---
def cmd_secret(args) -> int:
    print(enrollment.generate_base32_secret(args.bytes))
    return 0


def cmd_uri(args) -> int:
    print(enrollment.format_otpauth_uri(args.issuer, args.account, _secret(args)))
    return 0


def cmd_qr(args) -> int:
    uri = enrollment.format_otpauth_uri(args.issuer, args.account, _secret(args))
    with open(args.output, "wb") as f:
        f.write(enrollment.provisioning_qr_png(uri))
    logger.info("QR code written to %s", args.output)
    print(args.output)
    return 0


def cmd_totp(args) -> int:
    code, remaining = otp_core.totp(_secret(args), args.at)
    print(f"TOTP: {code}  (valid ~{remaining:2d}s)")
    return 0


def cmd_hotp(args) -> int:
    key = base32_decode(_secret(args))
    print(f"HOTP(counter={args.counter}): {otp_core.hotp(key, args.counter)}")
    return 0


def cmd_verify_totp(args) -> int:
    ok = otp_core.verify_totp(_secret(args), args.code, window=args.window, now_ms=args.at)
    if ok:
        print("[+] TOTP code is VALID")
        return 0
    print("[-] TOTP code is INVALID")
    return 1


def cmd_verify_hotp(args) -> int:
    ok, new_counter = otp_core.verify_hotp(
        _secret(args), args.code, args.counter, look_ahead=args.look_ahead
    )
    if ok:
        print(f"[+] HOTP code is VALID (next counter = {new_counter})")
        return 0
    print("[-] HOTP code is INVALID")
    return 1


# --- Argparse builder ---
def _counter(value: str) -> int:
    n = int(value)
    if n < 0 or n > otp_core.MAX_COUNTER:
        raise argparse.ArgumentTypeError("counter must be between 0 and 2**64-1")
    return n


def build_parser() -> argparse.ArgumentParser:
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--secret", help=f"Base32 secret (default: ${SECRET_ENV})")
    common.add_argument("--verbose", action="store_true", help="Verbose output")

    p = argparse.ArgumentParser(prog="totp-core", description="Stateless TOTP/HOTP (HMAC-SHA1, 6 digits, 30s) tool")
    sub = p.add_subparsers(dest="cmd")

    ps = sub.add_parser("secret", help="Generate a new Base32 secret", parents=[common])
    ps.add_argument("--bytes", type=int, default=enrollment.SECRET_BYTES,
                    help="Secret length in bytes (clamped to 10..64)")
    ps.set_defaults(func=cmd_secret)

    pu = sub.add_parser("uri", help="Print the otpauth:// URI", parents=[common])
    pu.add_argument("--issuer", default=enrollment.DEFAULT_ISSUER)
    pu.add_argument("--account", default=enrollment.DEFAULT_ACCOUNT)
    pu.set_defaults(func=cmd_uri)

    pq = sub.add_parser("qr", help="Write the otpauth:// URI as a PNG QR code", parents=[common])
    pq.add_argument("--issuer", default=enrollment.DEFAULT_ISSUER)
    pq.add_argument("--account", default=enrollment.DEFAULT_ACCOUNT)
    pq.add_argument("--output", required=True, help="PNG file to write")
    pq.set_defaults(func=cmd_qr)

    pt = sub.add_parser("totp", help="Show the current TOTP code", parents=[common])
    pt.add_argument("--at", type=int, help="Time in ms since epoch (default: now)")
    pt.set_defaults(func=cmd_totp)

    ph = sub.add_parser("hotp", help="Generate the HOTP code for a counter", parents=[common])
    ph.add_argument("--counter", type=_counter, required=True)
    ph.set_defaults(func=cmd_hotp)

    pv = sub.add_parser("verify", help="Verify an OTP code (TOTP or HOTP)")
    sub_v = pv.add_subparsers(dest="verify_type")

    pvt = sub_v.add_parser("totp", help="Verify a TOTP code", parents=[common])
    pvt.add_argument("--code", required=True, help="OTP code to verify")
    pvt.add_argument("--window", type=int, default=otp_core.DEFAULT_WINDOW,
                     help="Allowed +/- step window (clamped to 0..5)")
    pvt.add_argument("--at", type=int, help="Time in ms since epoch (default: now)")
    pvt.set_defaults(func=cmd_verify_totp)

    pvh = sub_v.add_parser("hotp", help="Verify a HOTP code", parents=[common])
    pvh.add_argument("--code", required=True, help="OTP code to verify")
    pvh.add_argument("--counter", type=_counter, required=True, help="Current HOTP counter")
    pvh.add_argument("--look-ahead", type=int, default=otp_core.DEFAULT_WINDOW,
                     help="Allowed counter look-ahead (clamped to 0..5)")
    pvh.set_defaults(func=cmd_verify_hotp)

    return p


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if not hasattr(args, "func"):
        parser.print_help()
        return 2

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="[%(levelname)s] %(name)s: %(message)s",
    )
    args.parser = parser
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
