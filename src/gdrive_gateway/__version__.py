"""Version of the installed gdrive-gateway distribution."""

from importlib.metadata import PackageNotFoundError, version
from pathlib import Path

DISTRIBUTION = "gdrive-gateway"
VERSION_FILE = Path(__file__).resolve().parents[2] / "VERSION"


def _get_version() -> str:
    # A source checkout carries VERSION at the project root
    if VERSION_FILE.exists():
        return VERSION_FILE.read_text().strip()
    try:
        return version(DISTRIBUTION)
    except PackageNotFoundError:
        return "0.0.0"


__version__ = _get_version()
