"""REST routers for the gateway."""

from gdrive_gateway.server.routes import auth, docs, drive, sheets

__all__ = ["auth", "drive", "docs", "sheets"]
