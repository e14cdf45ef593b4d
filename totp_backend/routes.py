"""
OTP BACKEND API ROUTES - FLASK BLUEPRINT

Stateless JSON endpoints over totp_core. No user table, no secret storage:
the Base32 secret travels in the request body and the caller's own system
is responsible for keeping it. Time always comes from the server clock.

eg..:
curl -X POST http://localhost:5000/api/secret -H "Content-Type: application/json" -d "{}"
curl -X POST http://localhost:5000/api/verify_totp -H "Content-Type: application/json"
     -d '{"secret": "JBSWY3DPEHPK3PXP", "code": "123456"}'
"""

import logging

from flask import Blueprint, current_app, jsonify, request

from totp_core import enrollment, otp_core

logger = logging.getLogger(__name__)

otp_bp = Blueprint("otp", __name__, url_prefix="/api")


def _json_body():
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        return None
    return data


def _bad_request(message: str):
    return jsonify({"error": message}), 400


def _missing_strings(data, *fields):
    """Name of the first field that is absent or not a JSON string."""
    for field in fields:
        if not isinstance(data.get(field), str):
            return field
    return None


@otp_bp.route("/health", methods=["GET"])
def health():
    return jsonify({"status": "ok"})


@otp_bp.route("/secret", methods=["POST"])
def generate_secret():
    """
    New Base32 secret for enrollment.
    Body (optional): {"bytes": 20}
    """
    data = _json_body() or {}
    try:
        num_bytes = int(data.get("bytes", enrollment.SECRET_BYTES))
    except (TypeError, ValueError, OverflowError):
        return _bad_request("'bytes' must be an integer")

    secret = enrollment.generate_base32_secret(num_bytes)
    logger.info("Generated enrollment secret")
    return jsonify({"secret": secret})


def _uri_from(data):
    issuer = data.get("issuer") or current_app.config["TOTP_ISSUER"]
    return enrollment.format_otpauth_uri(issuer, data.get("account", ""), data["secret"])


@otp_bp.route("/otpauth_uri", methods=["POST"])
def otpauth_uri():
    """
    Body: {"secret": "...", "issuer": "MyService", "account": "alice@example"}
    """
    data = _json_body()
    if not data or _missing_strings(data, "secret"):
        return _bad_request("'secret' string is required in JSON body")
    return jsonify({"uri": _uri_from(data)})


@otp_bp.route("/qr_code", methods=["POST"])
def qr_code():
    """
    Same body as /otpauth_uri; answers with a PNG QR code as a data: URI.
    """
    data = _json_body()
    if not data or _missing_strings(data, "secret"):
        return _bad_request("'secret' string is required in JSON body")

    uri = _uri_from(data)
    return jsonify({"qr_code": enrollment.provisioning_qr_data_uri(uri), "uri": uri})


@otp_bp.route("/totp", methods=["POST"])
def current_totp():
    """
    Body: {"secret": "..."}
    """
    data = _json_body()
    if not data or _missing_strings(data, "secret"):
        return _bad_request("'secret' string is required in JSON body")

    code, remaining = otp_core.totp(data["secret"])
    return jsonify({
        "code": code,
        "remaining": remaining,
        "period": otp_core.PERIOD_MS // 1000,
    })


@otp_bp.route("/verify_totp", methods=["POST"])
def verify_totp():
    """
    Body: {"secret": "...", "code": "123456", "window": 1}

    A wrong code is a normal answer ({"valid": false}), not an error.
    """
    data = _json_body()
    if not data or _missing_strings(data, "secret", "code"):
        return _bad_request("'secret' and 'code' strings are required in JSON body")
    try:
        window = int(data.get("window", current_app.config["TOTP_WINDOW"]))
    except (TypeError, ValueError, OverflowError):
        return _bad_request("'window' must be an integer")

    is_valid = otp_core.verify_totp(data["secret"], data["code"], window=window)
    logger.info("TOTP verification %s", "accepted" if is_valid else "rejected")
    return jsonify({"valid": is_valid})
