"""Command-line interface for gdrive-gateway."""

import asyncio
import logging
import sys
import webbrowser

import click

from gdrive_gateway.__version__ import __version__
from gdrive_gateway.config import load_settings


@click.group()
@click.version_option(version=__version__)
def main() -> None:
    """gdrive-gateway - REST gateway for Google Drive, Docs and Sheets.

    Exposes a small JSON API over:
    - Drive (list, inspect, download, upload, trash, delete)
    - Docs (read, create, append, replace)
    - Sheets (read, write, append, clear)
    """
    pass


@main.command()
@click.option("--host", default=None, help="Bind address (default: settings HOST)")
@click.option("--port", type=int, default=None, help="Bind port (default: settings PORT)")
@click.option("--reload", is_flag=True, help="Reload on code changes (development only)")
def serve(host: str | None, port: int | None, reload: bool) -> None:
    """Start the HTTP server.

    Settings are read from config.yaml (or $CONFIG_FILE_PATH) and
    environment variables. Authenticate through GET /api/auth/url or
    'gdrive-gateway setup'.
    """
    import uvicorn

    settings = load_settings()
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    bind_host = host or settings.host
    bind_port = port or settings.port
    click.echo(f"Starting gdrive-gateway {__version__} on http://{bind_host}:{bind_port}", err=True)

    try:
        uvicorn.run(
            "gdrive_gateway.server.app:create_app",
            factory=True,
            host=bind_host,
            port=bind_port,
            reload=reload,
            log_level=settings.log_level.lower(),
        )
    except KeyboardInterrupt:
        click.echo("\nServer stopped.", err=True)


@main.command()
@click.option("--code", default=None, help="Authorization code to exchange for tokens")
@click.option("--no-browser", is_flag=True, help="Print the consent URL without opening it")
def setup(code: str | None, no_browser: bool) -> None:
    """Set up Google OAuth authentication.

    Without --code this prints (and opens) the Google consent URL. Once the
    server is running, completing consent stores tokens automatically via
    the callback. Pass --code to exchange an authorization code directly.
    """
    from gdrive_gateway.auth import CredentialManager, TokenStatus
    from gdrive_gateway.errors import GatewayError

    settings = load_settings()
    manager = CredentialManager.from_settings(settings)

    if code:
        try:
            asyncio.run(manager.exchange_code(code))
        except GatewayError as e:
            click.echo(f"❌ Authentication failed: {e}")
            sys.exit(1)
        click.echo("✓ Authentication successful!")
        click.echo(f"Token stored at: {manager.token_path}")
        return

    status, _ = manager.get_status()
    if status == TokenStatus.VALID:
        click.echo("✓ Already authenticated!")
        click.echo(f"Token stored at: {manager.token_path}")
        click.echo("")
        if not click.confirm("Re-authenticate?"):
            return

    try:
        auth_url = manager.authorization_url()
    except GatewayError as e:
        click.echo(f"❌ Error: {e}")
        sys.exit(1)

    click.echo("Open this URL in a browser to grant access:")
    click.echo("")
    click.echo(f"  {auth_url}")
    click.echo("")
    click.echo(f"Google will redirect to {settings.redirect_uri}.")
    click.echo("Keep 'gdrive-gateway serve' running, or rerun with --code=<code>.")

    if not no_browser:
        webbrowser.open(auth_url)


@main.command()
def logout() -> None:
    """Delete stored OAuth tokens."""
    from gdrive_gateway.auth import CredentialManager

    manager = CredentialManager.from_settings(load_settings())
    manager.logout()
    click.echo("✓ Logged out.")


@main.command()
def doctor() -> None:
    """Check installation, configuration and authentication status.

    Verifies:
    1. Python dependencies installed
    2. OAuth client secrets present
    3. Token validity
    """
    from gdrive_gateway.auth import CredentialManager, TokenStatus

    click.echo("gdrive-gateway Status:")
    click.echo("")

    click.echo("Dependencies:")
    try:
        import fastapi  # noqa: F401
        import google.auth  # noqa: F401
        import google_auth_oauthlib  # noqa: F401

        click.echo("  ✓ fastapi installed")
        click.echo("  ✓ google-auth installed")
        click.echo("  ✓ google-auth-oauthlib installed")
    except ImportError as e:
        click.echo(f"  ❌ Missing dependency: {e}")
        sys.exit(1)

    click.echo("")

    settings = load_settings()
    manager = CredentialManager.from_settings(settings)

    click.echo("Configuration:")
    if settings.credentials_file.exists():
        click.echo(f"  ✓ Client secrets: {settings.credentials_file}")
    else:
        click.echo(f"  ❌ Client secrets not found: {settings.credentials_file}")
    click.echo(f"  Redirect URI: {settings.redirect_uri}")
    click.echo(f"  Root folder: {settings.root_folder_id or '(none)'}")
    click.echo("")

    status, stored = manager.get_status()

    click.echo("Authentication:")
    click.echo(f"  Token file: {manager.token_path}")

    if status == TokenStatus.MISSING:
        click.echo("  ❌ Not authenticated")
        click.echo("")
        click.echo("Run 'gdrive-gateway setup' to authenticate.")
        sys.exit(1)
    elif status == TokenStatus.INVALID:
        click.echo("  ❌ Token file corrupted")
        click.echo("")
        click.echo("Run 'gdrive-gateway setup' to re-authenticate.")
        sys.exit(1)
    elif status == TokenStatus.EXPIRED:
        click.echo("  ⚠️  Token expired (will refresh automatically on use)")
    elif status == TokenStatus.VALID:
        click.echo("  ✓ Authenticated")
        if stored:
            click.echo(
                f"  Token expires: {stored.token.expires_at.strftime('%Y-%m-%d %H:%M:%S UTC')}"
            )
            click.echo(f"  Scopes: {len(stored.token.scopes)} configured")

    click.echo("")
    click.echo("✓ Ready to use!")


if __name__ == "__main__":
    main()
