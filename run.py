#!/usr/bin/env python3
"""
Notes backend command line.

    python run.py --action server --reload -v   uvicorn on application.yaml host/port
    python run.py --action init-db              create the notes and owners tables
    python run.py --action config               print the validated YAML settings
    python run.py --action test --test-type unit --coverage
    python run.py                               application info (default)
"""

import asyncio
import subprocess
import sys
from collections.abc import Callable
from pathlib import Path
from typing import Any

import click

PROJECT_ROOT = Path(__file__).parent
sys.path.insert(0, str(PROJECT_ROOT))

from modules.backend.core.logging import get_logger, setup_logging  # noqa: E402

ACTIONS: dict[str, str] = {
    "server": "Start the development server",
    "init-db": "Create database tables",
    "config": "Display configuration",
    "test": "Run test suite",
    "info": "Show this information",
}

TEST_SUITES = {"all": "tests/", "unit": "tests/unit", "integration": "tests/integration"}


def validate_project_root() -> Path:
    """Exit with status 1 unless run.py sits next to the .project_root marker."""
    if not (PROJECT_ROOT / ".project_root").exists():
        click.secho("Error: .project_root not found. Run from project root.", fg="red", err=True)
        sys.exit(1)
    return PROJECT_ROOT


def run_server(logger: Any, host: str | None, port: int | None, reload: bool, **_: Any) -> None:
    """Run uvicorn in a child process; --host/--port override application.yaml."""
    from modules.backend.core.config import get_app_config

    server = get_app_config().application.server
    host = host or server.host
    port = port or server.port

    cmd = [sys.executable, "-m", "uvicorn", "modules.backend.main:app", "--host", host, "--port", str(port)]
    if reload:
        cmd.append("--reload")

    logger.info("Starting server", extra={"host": host, "port": port, "reload": reload})
    click.echo(f"Starting server at http://{host}:{port}\nPress Ctrl+C to stop\n")
    try:
        subprocess.run(cmd, check=True)
    except KeyboardInterrupt:
        logger.info("Server stopped")
    except subprocess.CalledProcessError as e:
        logger.error("Server exited with an error", extra={"exit_code": e.returncode})
        sys.exit(e.returncode)


def init_db(logger: Any, **_: Any) -> None:
    """Create missing tables; existing tables and rows are left alone."""
    from sqlalchemy.exc import SQLAlchemyError

    from modules.backend.core.database import dispose_engine, get_engine
    from modules.backend.models.base import Base
    from modules.backend.models.note import Note  # noqa: F401
    from modules.backend.models.owner import Owner  # noqa: F401

    async def create_tables() -> None:
        async with get_engine().begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        await dispose_engine()

    try:
        asyncio.run(create_tables())
    except (SQLAlchemyError, OSError) as e:
        logger.error("Schema creation failed", extra={"error": str(e)})
        click.secho(f"Error creating schema: {e}", fg="red")
        sys.exit(1)

    tables = ", ".join(sorted(Base.metadata.tables))
    logger.info("Schema created", extra={"tables": tables})
    click.secho(f"Schema ready: {tables}", fg="green")


def show_config(logger: Any, **_: Any) -> None:
    """Print every validated YAML section."""
    from modules.backend.core.config import SECTIONS, get_app_config

    click.echo("Application Configuration:\n")
    try:
        sections = get_app_config().as_dict()
    except (FileNotFoundError, ValueError) as e:
        logger.error("Failed to load configuration", extra={"error": str(e)})
        click.secho(f"Error loading configuration: {e}", fg="red")
        sys.exit(1)

    for name, values in sections.items():
        click.echo(f"{name.title()} Settings ({SECTIONS[name][0]}):")
        click.echo("-" * 40)
        for key, value in values.items():
            click.echo(f"  {key}: {value}")
        click.echo()

    logger.info("Configuration displayed", extra={"sections": list(sections)})


def run_tests(logger: Any, test_type: str, coverage: bool, **_: Any) -> None:
    """Run pytest on the chosen suite and exit with its status."""
    cmd = [sys.executable, "-m", "pytest", TEST_SUITES[test_type], "-v"]
    if coverage:
        cmd += ["--cov=modules/backend", "--cov-report=term-missing"]

    logger.info("Running tests", extra={"type": test_type, "coverage": coverage})
    click.echo(f"Running: {' '.join(cmd)}\n")
    try:
        result = subprocess.run(cmd)
    except FileNotFoundError:
        logger.error("pytest not found. Install with: pip install -e .[test]")
        sys.exit(1)
    sys.exit(result.returncode)


def show_info(logger: Any, **_: Any) -> None:
    from modules.backend.core.config import get_app_config, get_server_base_url

    application = get_app_config().application
    click.echo(application.name)
    click.echo("=" * 40)
    click.echo(f"Version: {application.version}")
    click.echo(f"Description: {application.description}")
    click.echo(f"Base URL: {get_server_base_url()}{application.api_prefix}")
    click.echo("\nAvailable Actions:")
    for action, summary in ACTIONS.items():
        click.echo(f"  --action {action:<8} {summary}")


HANDLERS: dict[str, Callable[..., None]] = {
    "server": run_server,
    "init-db": init_db,
    "config": show_config,
    "test": run_tests,
    "info": show_info,
}


@click.command()
@click.option("--action", type=click.Choice(list(ACTIONS)), default="info", help="Action to perform.")
@click.option("--verbose", "-v", is_flag=True, help="INFO level logging.")
@click.option("--debug", "-d", is_flag=True, help="DEBUG level logging.")
@click.option("--host", default=None, help="Server host (server action).")
@click.option("--port", default=None, type=int, help="Server port (server action).")
@click.option("--reload", is_flag=True, help="Auto-reload on code changes (server action).")
@click.option(
    "--test-type",
    type=click.Choice(list(TEST_SUITES)),
    default="all",
    help="Suite to run (test action).",
)
@click.option("--coverage", is_flag=True, help="Collect coverage (test action).")
def main(action: str, verbose: bool, debug: bool, **options: Any) -> None:
    """
    Notes Backend Entry Point.

    Serve the API, create the schema, inspect configuration or run the
    test suites.
    """
    validate_project_root()

    log_level = "DEBUG" if debug else "INFO" if verbose else "WARNING"
    setup_logging(level=log_level, format_type="console")
    logger = get_logger(__name__)
    logger.debug("Running action", extra={"action": action, "log_level": log_level})

    HANDLERS[action](logger, **options)


if __name__ == "__main__":
    main()
