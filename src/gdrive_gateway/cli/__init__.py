"""Command-line interface for gdrive-gateway."""
