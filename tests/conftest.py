from __future__ import annotations

import pytest

from totp_backend import create_app


# 2023-11-14T22:13:20Z, 20 seconds into its 30s step
FIXED_NOW_MS = 1_700_000_000_000


@pytest.fixture
def app():
    return create_app({"TESTING": True, "TOTP_ISSUER": "TestIssuer", "TOTP_WINDOW": 1})


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def frozen_clock(monkeypatch):
    monkeypatch.setattr("totp_core.otp_core.current_time_ms", lambda: FIXED_NOW_MS)
    return FIXED_NOW_MS
