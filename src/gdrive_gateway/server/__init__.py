"""HTTP surface of the gateway."""

from gdrive_gateway.server.app import create_app

__all__ = ["create_app"]
