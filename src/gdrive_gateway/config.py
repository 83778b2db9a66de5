"""Configuration loading for gdrive-gateway.

Settings come from an optional YAML file, overridden by environment variables.

Environment Variables:
    CONFIG_FILE_PATH: YAML configuration file (default: config.yaml)
    GOOGLE_CREDENTIALS_FILE: OAuth client-secret JSON (default: credentials/credentials.json)
    GOOGLE_TOKENS_FILE: Token store file (default: credentials/tokens.json)
    GOOGLE_OAUTH_REDIRECT_URI: Redirect URI (default: http://localhost:8080/api/auth/callback)
    GOOGLE_DRIVE_ROOT_FOLDER_ID: Default Drive folder for listing and upload (optional)
    FRONTEND_URL: Where the OAuth callback redirects to (default: http://localhost:5173)
    CORS_ORIGINS: Comma-separated allowed origins
    HOST / PORT: Bind address for `gdrive-gateway serve`
    LOG_LEVEL: Logging level (default: INFO)

Example config.yaml:
    ```yaml
    google:
      credentials_file: credentials/credentials.json
      tokens_file: credentials/tokens.json
      redirect_uri: http://localhost:8080/api/auth/callback
    drive:
      root_folder_id: 1AbCdEf
    server:
      host: 0.0.0.0
      port: 8080
      frontend_url: http://localhost:5173
      cors_origins: [http://localhost:5173]
      log_level: DEBUG
    ```
"""

import logging
import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILE = "config.yaml"
DEFAULT_CREDENTIALS_FILE = "credentials/credentials.json"
DEFAULT_TOKENS_FILE = "credentials/tokens.json"
DEFAULT_REDIRECT_URI = "http://localhost:8080/api/auth/callback"
DEFAULT_FRONTEND_URL = "http://localhost:5173"
DEFAULT_CORS_ORIGINS = ["http://localhost:5173", "http://localhost:3000"]


class Settings(BaseModel):
    """Runtime settings for the gateway."""

    credentials_file: Path = Path(DEFAULT_CREDENTIALS_FILE)
    tokens_file: Path = Path(DEFAULT_TOKENS_FILE)
    redirect_uri: str = DEFAULT_REDIRECT_URI
    root_folder_id: str | None = None
    frontend_url: str = DEFAULT_FRONTEND_URL
    cors_origins: list[str] = Field(default_factory=lambda: list(DEFAULT_CORS_ORIGINS))
    host: str = "127.0.0.1"
    port: int = 8080
    log_level: str = "INFO"


def load_yaml_config(config_path: Path) -> dict[str, Any]:
    """Load configuration from a YAML file.

    Args:
        config_path: Path to the YAML file.

    Returns:
        Parsed configuration, or an empty dict if the file does not exist.
    """
    if not config_path.exists():
        logger.debug(f"Configuration file not found: {config_path}")
        return {}

    try:
        with open(config_path) as f:
            return yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        logger.warning(f"Error loading configuration file {config_path}: {e}")
        return {}


def _split_origins(value: str) -> list[str]:
    return [origin.strip() for origin in value.split(",") if origin.strip()]


def load_settings(config_path: Path | None = None) -> Settings:
    """Build settings from YAML and environment variables.

    Environment variables take precedence over the YAML file.

    Args:
        config_path: YAML file to read. Defaults to $CONFIG_FILE_PATH or config.yaml.

    Returns:
        Populated Settings instance.
    """
    if config_path is None:
        config_path = Path(os.environ.get("CONFIG_FILE_PATH", DEFAULT_CONFIG_FILE))

    yaml_config = load_yaml_config(config_path)
    google_config = yaml_config.get("google", {}) or {}
    drive_config = yaml_config.get("drive", {}) or {}
    server_config = yaml_config.get("server", {}) or {}

    values: dict[str, Any] = {}

    # YAML values first
    for key in ("credentials_file", "tokens_file", "redirect_uri"):
        if key in google_config:
            values[key] = google_config[key]
    if "root_folder_id" in drive_config:
        values["root_folder_id"] = drive_config["root_folder_id"]
    for key in ("frontend_url", "cors_origins", "host", "port", "log_level"):
        if key in server_config:
            values[key] = server_config[key]

    # Environment overrides
    env_map = {
        "GOOGLE_CREDENTIALS_FILE": "credentials_file",
        "GOOGLE_TOKENS_FILE": "tokens_file",
        "GOOGLE_OAUTH_REDIRECT_URI": "redirect_uri",
        "GOOGLE_DRIVE_ROOT_FOLDER_ID": "root_folder_id",
        "FRONTEND_URL": "frontend_url",
        "HOST": "host",
        "PORT": "port",
        "LOG_LEVEL": "log_level",
    }
    for env_name, key in env_map.items():
        env_value = os.environ.get(env_name)
        if env_value:
            values[key] = env_value

    cors_env = os.environ.get("CORS_ORIGINS")
    if cors_env:
        values["cors_origins"] = _split_origins(cors_env)
    elif isinstance(values.get("cors_origins"), str):
        values["cors_origins"] = _split_origins(values["cors_origins"])

    # A blank root folder means "no folder restriction"
    root_folder_id = str(values.get("root_folder_id") or "").strip()
    values["root_folder_id"] = root_folder_id or None

    return Settings(**values)
