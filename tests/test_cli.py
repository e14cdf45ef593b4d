"""Tests for the command-line tool."""

from __future__ import annotations

import pytest

from totp_core.base32 import base32_decode
from totp_core.otp_cli import SECRET_ENV, main

RFC_SECRET = "GEZDGNBVGY3TQOJQGEZDGNBVGY3TQOJQ"


@pytest.fixture(autouse=True)
def no_env_secret(monkeypatch):
    monkeypatch.delenv(SECRET_ENV, raising=False)


def test_secret(capsys):
    assert main(["secret"]) == 0
    assert len(base32_decode(capsys.readouterr().out.strip())) == 20


def test_secret_bytes_clamped(capsys):
    assert main(["secret", "--bytes", "1000"]) == 0
    assert len(base32_decode(capsys.readouterr().out.strip())) == 64


def test_uri(capsys):
    assert main(["uri", "--issuer", "My App", "--account", "bob", "--secret", "AB CD"]) == 0
    assert capsys.readouterr().out.strip() == (
        "otpauth://totp/My%20App:bob?secret=ABCD&issuer=My%20App&algorithm=SHA1&digits=6&period=30"
    )


def test_secret_from_environment(monkeypatch, capsys):
    monkeypatch.setenv(SECRET_ENV, RFC_SECRET)
    assert main(["totp", "--at", "59000"]) == 0
    assert "287082" in capsys.readouterr().out


def test_missing_secret_is_usage_error(capsys):
    with pytest.raises(SystemExit) as exc:
        main(["totp"])
    assert exc.value.code == 2
    assert SECRET_ENV in capsys.readouterr().err


def test_hotp(capsys):
    assert main(["hotp", "--secret", RFC_SECRET, "--counter", "0"]) == 0
    assert capsys.readouterr().out.strip() == "HOTP(counter=0): 755224"


def test_hotp_rejects_negative_counter():
    with pytest.raises(SystemExit) as exc:
        main(["hotp", "--secret", RFC_SECRET, "--counter", "-1"])
    assert exc.value.code == 2


def test_verify_totp(capsys):
    assert main(["verify", "totp", "--secret", RFC_SECRET, "--code", "287082", "--at", "59000"]) == 0
    assert "VALID" in capsys.readouterr().out

    assert main(["verify", "totp", "--secret", RFC_SECRET, "--code", "000000", "--at", "59000", "--window", "0"]) == 1
    assert "INVALID" in capsys.readouterr().out


def test_verify_hotp(capsys):
    assert main(["verify", "hotp", "--secret", RFC_SECRET, "--code", "359152", "--counter", "1"]) == 0
    assert "next counter = 3" in capsys.readouterr().out

    assert main(["verify", "hotp", "--secret", RFC_SECRET, "--code", "755224", "--counter", "1"]) == 1


def test_qr_writes_png(tmp_path, capsys):
    out = tmp_path / "qr.png"
    assert main(["qr", "--secret", RFC_SECRET, "--account", "alice", "--output", str(out)]) == 0
    assert out.read_bytes().startswith(b"\x89PNG")
    assert str(out) in capsys.readouterr().out


def test_no_command_prints_help(capsys):
    assert main([]) == 2
    assert "usage" in capsys.readouterr().out.lower()
