"""
FLASK APP ENTRY POINT - OTP BACKEND SERVER

Builds the Flask app, enables CORS so a separate frontend can call it, and
registers the OTP blueprint.

Environment:
- TOTP_ISSUER : default issuer label in otpauth URIs (default "Panel")
- TOTP_WINDOW : default +/- step window for /api/verify_totp (default 1)
"""

import logging
import os
from typing import Any, Dict, Optional

from flask import Flask
from flask_cors import CORS

from totp_core import enrollment, otp_core
from totp_backend.routes import otp_bp

logger = logging.getLogger(__name__)


def create_app(config: Optional[Dict[str, Any]] = None) -> Flask:
    app = Flask(__name__)

    app.config["TOTP_ISSUER"] = os.getenv("TOTP_ISSUER", enrollment.DEFAULT_ISSUER)
    app.config["TOTP_WINDOW"] = int(os.getenv("TOTP_WINDOW", str(otp_core.DEFAULT_WINDOW)))
    if config:
        app.config.update(config)

    # Frontend may run on another host/port
    CORS(app)

    app.register_blueprint(otp_bp)
    logger.debug("OTP backend ready (issuer=%s)", app.config["TOTP_ISSUER"])
    return app


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    create_app().run(host="0.0.0.0", port=5000)
