"""REST gateway for Google Drive, Docs, and Sheets."""

from gdrive_gateway.__version__ import __version__

__all__ = ["__version__"]
