"""
Stateless Flask JSON API over totp_core.
"""

from totp_backend.app import create_app

__all__ = ["create_app"]
