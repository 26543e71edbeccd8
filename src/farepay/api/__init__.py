"""HTTP API for validators."""

from farepay.api.app import create_app

__all__ = ["create_app"]
