#!/usr/bin/env python3
"""
Application Entry Script.

Main entry point for the notes backend. All functionality is accessible
through command-line options.

Usage:
    python run.py --help
    python run.py --action server --verbose
    python run.py --action health --debug
    python run.py --action config
    python run.py --action seed
"""

import asyncio
import subprocess
import sys
from pathlib import Path

import click

# Ensure project root is in path for absolute imports
PROJECT_ROOT = Path(__file__).parent
sys.path.insert(0, str(PROJECT_ROOT))

from notekeeper.backend.core.logging import get_logger, setup_logging


def validate_project_root() -> Path:
    """Validate that we're running from the project root."""
    if not (PROJECT_ROOT / ".project_root").exists():
        click.echo(
            click.style("Error: .project_root not found. Run from project root.", fg="red"),
            err=True,
        )
        sys.exit(1)
    return PROJECT_ROOT


@click.command()
@click.option(
    "--action",
    type=click.Choice(["server", "health", "config", "seed", "info"]),
    default="info",
    help="Action to perform.",
)
@click.option(
    "--verbose", "-v",
    is_flag=True,
    help="Enable verbose output (INFO level logging).",
)
@click.option(
    "--debug", "-d",
    is_flag=True,
    help="Enable debug output (DEBUG level logging).",
)
@click.option(
    "--host",
    default=None,
    help="Server host (for server action).",
)
@click.option(
    "--port",
    default=None,
    type=int,
    help="Server port (for server action).",
)
@click.option(
    "--reload",
    is_flag=True,
    help="Enable auto-reload (for server action).",
)
def main(
    action: str,
    verbose: bool,
    debug: bool,
    host: str | None,
    port: int | None,
    reload: bool,
) -> None:
    """
    Notekeeper Entry Point.

    Run the application server, check health, view configuration,
    or load sample notes.

    Examples:

        # Start development server
        python run.py --action server --reload --verbose

        # Check application health
        python run.py --action health --debug

        # View loaded configuration
        python run.py --action config

        # Replace all notes with the sample set
        python run.py --action seed

        # Show application info
        python run.py --action info
    """
    validate_project_root()

    if debug:
        log_level = "DEBUG"
    elif verbose:
        log_level = "INFO"
    else:
        log_level = "WARNING"

    setup_logging(level=log_level, format_type="console")
    logger = get_logger(__name__)

    logger.debug("Starting application", extra={"action": action, "log_level": log_level})

    if action == "server":
        run_server(logger, host, port, reload)
    elif action == "health":
        check_health(logger)
    elif action == "config":
        show_config(logger)
    elif action == "seed":
        run_seed(logger)
    elif action == "info":
        show_info(logger)


def run_server(logger, host: str | None, port: int | None, reload: bool) -> None:
    """Start the FastAPI development server."""
    from notekeeper.backend.core.config import get_app_config

    server = get_app_config().application.server
    server_host = host or server.host
    server_port = port or server.port

    logger.info(
        "Starting server",
        extra={"host": server_host, "port": server_port, "reload": reload},
    )

    cmd = [
        sys.executable, "-m", "uvicorn",
        "notekeeper.backend.main:app",
        "--host", server_host,
        "--port", str(server_port),
    ]

    if reload:
        cmd.append("--reload")

    click.echo(f"Starting server at http://{server_host}:{server_port}")
    click.echo("Press Ctrl+C to stop\n")

    try:
        subprocess.run(cmd, check=True)
    except KeyboardInterrupt:
        logger.info("Server stopped")
    except subprocess.CalledProcessError as e:
        logger.error("Server failed to start", extra={"exit_code": e.returncode})
        sys.exit(e.returncode)


def check_health(logger) -> None:
    """Check application health by testing imports and configuration."""
    click.echo("Checking application health...\n")

    checks = []

    # Check 1: Configuration loading
    try:
        from notekeeper.backend.core.config import get_app_config

        app_config = get_app_config()
        app_name = app_config.application.name
        checks.append(("YAML configuration", True, f"App: {app_name}"))
        logger.debug("Configuration loaded", extra={"app_name": app_name})
    except (RuntimeError, FileNotFoundError, ValueError) as e:
        checks.append(("YAML configuration", False, str(e)))
        logger.error("Configuration failed", extra={"error": str(e)})

    # Check 2: Database URL
    try:
        from sqlalchemy.engine import make_url

        from notekeeper.backend.core.config import get_database_url

        url = make_url(get_database_url())
        checks.append(("Database URL", True, f"Backend: {url.get_backend_name()}"))
        logger.debug("Database URL resolved", extra={"backend": url.get_backend_name()})
    except (RuntimeError, FileNotFoundError, ValueError) as e:
        checks.append(("Database URL", False, str(e)))
        logger.error("Database URL failed", extra={"error": str(e)})

    # Check 3: FastAPI app
    try:
        from notekeeper.backend.main import get_app

        fastapi_app = get_app()
        checks.append(("FastAPI application", True, f"Title: {fastapi_app.title}"))
        logger.debug("FastAPI app loaded", extra={"title": fastapi_app.title})
    except (ImportError, RuntimeError, FileNotFoundError, ValueError) as e:
        checks.append(("FastAPI application", False, str(e)))
        logger.error("FastAPI app failed", extra={"error": str(e)})

    # Check 4: Procedure set
    try:
        from notekeeper.backend.api.rpc.procedures import PROCEDURES

        checks.append(("Procedures", True, f"{len(PROCEDURES)} registered"))
        logger.debug("Procedures loaded", extra={"count": len(PROCEDURES)})
    except ImportError as e:
        checks.append(("Procedures", False, str(e)))
        logger.error("Procedures failed", extra={"error": str(e)})

    click.echo("Health Check Results:")
    click.echo("-" * 50)

    all_passed = True
    for name, passed, detail in checks:
        status = click.style("✓ PASS", fg="green") if passed else click.style("✗ FAIL", fg="red")
        detail_str = f" ({detail})" if detail else ""
        click.echo(f"  {status}  {name}{detail_str}")
        if not passed:
            all_passed = False

    click.echo("-" * 50)

    if all_passed:
        click.echo(click.style("\nAll checks passed!", fg="green"))
    else:
        click.echo(click.style("\nSome checks failed. See details above.", fg="yellow"))
        sys.exit(1)


def _echo_section(title: str, values: dict, indent: int = 2) -> None:
    if title:
        click.echo(f"\n{title}")
        click.echo("-" * 40)
    for key, value in values.items():
        if isinstance(value, dict):
            click.echo(f"{' ' * indent}{key}:")
            _echo_section("", value, indent + 2)
        else:
            click.echo(f"{' ' * indent}{key}: {value}")


def show_config(logger) -> None:
    """Display loaded configuration."""
    click.echo("Application Configuration:")

    try:
        from notekeeper.backend.core.config import get_app_config

        app_config = get_app_config()
    except (RuntimeError, FileNotFoundError, ValueError) as e:
        logger.error("Failed to load configuration", extra={"error": str(e)})
        click.echo(click.style(f"Error loading configuration: {e}", fg="red"))
        sys.exit(1)

    _echo_section("Application Settings (from YAML):", app_config.application.model_dump())
    _echo_section("Database Settings (from YAML):", app_config.database.model_dump())
    _echo_section("Logging Settings (from YAML):", app_config.logging.model_dump())
    _echo_section("Feature Flags (from YAML):", app_config.features.model_dump())

    logger.info("Configuration displayed successfully")


def run_seed(logger) -> None:
    """Replace all notes with the sample set."""
    from sqlalchemy.exc import SQLAlchemyError

    from notekeeper.backend.core.database import (
        create_tables,
        dispose_engine,
        get_session_factory,
        session_scope,
    )
    from notekeeper.backend.core.exceptions import ApplicationError
    from notekeeper.backend.seed import seed_database

    async def _seed() -> list:
        try:
            await create_tables()
            async with session_scope(get_session_factory()) as session:
                return await seed_database(session)
        finally:
            await dispose_engine()

    click.echo("Seeding database...")

    try:
        notes = asyncio.run(_seed())
    except (SQLAlchemyError, ApplicationError) as e:
        logger.error("Seeding failed", extra={"error": str(e)})
        click.echo(click.style(f"Error during seeding: {e}", fg="red"))
        sys.exit(1)

    click.echo(f"\nCreated {len(notes)} sample notes:")
    for note in notes:
        click.echo(f"  - {note.title} ({', '.join(note.tags)})")
    click.echo(click.style("\nDatabase seeding completed!", fg="green"))


def show_info(logger) -> None:
    """Display application information."""
    click.echo("Notekeeper")
    click.echo("=" * 40)

    try:
        from notekeeper.backend.core.config import get_app_config

        app_settings = get_app_config().application
        click.echo(f"Name: {app_settings.name}")
        click.echo(f"Version: {app_settings.version}")
        click.echo(f"Description: {app_settings.description}")
    except (RuntimeError, FileNotFoundError, ValueError):
        click.echo("Name: Notekeeper")
        click.echo("Version: unknown")

    click.echo()
    click.echo("Available Actions:")
    click.echo("  --action server   Start the development server")
    click.echo("  --action health   Check application health")
    click.echo("  --action config   Display configuration")
    click.echo("  --action seed     Replace all notes with sample notes")
    click.echo("  --action info     Show this information")
    click.echo()
    click.echo("Logging Options:")
    click.echo("  --verbose, -v     Enable INFO level logging")
    click.echo("  --debug, -d       Enable DEBUG level logging")
    click.echo()
    click.echo("Examples:")
    click.echo("  python run.py --action server --reload --verbose")
    click.echo("  python run.py --action health --debug")
    click.echo("  python run.py --action seed")

    logger.debug("Info displayed")


if __name__ == "__main__":
    main()
