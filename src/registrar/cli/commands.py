"""CLI commands for registrar.

Commands:
- enroll: Enroll a student into a course
- paginate: List all students page by page

Both commands open the store, create and seed the schema, run, and close
the store. Command names are matched case-insensitively.

A second entry point, registrar-enroll, always runs enrollment against the
short sample dataset.
"""

import dataclasses
import sqlite3
from pathlib import Path

import structlog
import typer
from rich.console import Console

from registrar.config.app_config import AppConfig, ConfigError, load_app_config
from registrar.core.enrollment import enroll as do_enroll
from registrar.core.pagination import PageSizeError, iter_pages, render_page, validate_page_size
from registrar.db.database import ConnectionManager, DatabaseUnavailableError
from registrar.db.schema import bootstrap
from registrar.logging_setup import configure_logging

logger = structlog.get_logger(__name__)

USAGE_MESSAGE = (
    "The program requires an argument, which can be either 'paginate' or 'enroll'"
)

app = typer.Typer(
    name="registrar",
    help="Enroll students into courses or page through the student list.",
    add_completion=False,
    context_settings={"token_normalize_func": str.lower},
)

enroll_app = typer.Typer(
    name="registrar-enroll",
    help="Enroll a student into a course (short sample dataset).",
    add_completion=False,
)

console = Console()
err_console = Console(stderr=True)


def _error(operation: str, message: str) -> None:
    """Print a one-line diagnostic to standard error."""
    err_console.print(
        f"[ERROR] {operation} : {message}",
        style="red",
        markup=False,
        highlight=False,
        soft_wrap=True,
    )


def _print(line: str) -> None:
    console.print(line, markup=False, highlight=False, soft_wrap=True)


def _load_config_or_exit(config_path: Path | None, database: str | None) -> AppConfig:
    """Load configuration and apply the --database override."""
    # Default level until the config names one
    configure_logging()

    try:
        config = load_app_config(config_path=config_path)
    except ConfigError as e:
        _error("config", str(e))
        raise typer.Exit(code=1)

    if database:
        config = dataclasses.replace(
            config, database=dataclasses.replace(config.database, path=database)
        )

    try:
        configure_logging(config.log_level)
    except ValueError as e:
        _error("config", str(e))
        raise typer.Exit(code=1)

    return config


def _open_store_or_exit(config: AppConfig, variant: str) -> tuple[ConnectionManager, sqlite3.Connection]:
    """Open the store and load the schema, or exit on connection failure."""
    manager = ConnectionManager(
        config.database.path, foreign_keys=config.database.foreign_keys
    )
    try:
        conn = manager.open()
    except DatabaseUnavailableError as e:
        _error("connect", str(e))
        raise typer.Exit(code=1)

    report = bootstrap(conn, variant=variant, skip_existing=config.seed.skip_existing)
    for error in report.errors:
        _error(error.step, error.message)

    logger.info(
        "cli.initialized",
        database=config.database.path,
        variant=variant,
        skipped=report.skipped,
    )
    _print("Initialization complete!!")
    return manager, conn


def _run_enroll(
    conn: sqlite3.Connection, student_id: int | None, course_id: int | None
) -> None:
    if student_id is None:
        student_id = typer.prompt("Please enter student id", type=int)
    if course_id is None:
        course_id = typer.prompt("Please enter course id", type=int)

    result = do_enroll(conn, student_id, course_id)

    if result.success:
        _print(result.message)
    else:
        _error("enroll", result.message)


def _run_paginate(conn: sqlite3.Connection, config: AppConfig, page_size: int | None) -> None:
    bounds = config.pagination
    if page_size is None:
        page_size = typer.prompt(
            f"Enter page size (an integer in [{bounds.min_page_size},{bounds.max_page_size}])",
            type=int,
        )

    try:
        validate_page_size(page_size, bounds.min_page_size, bounds.max_page_size)
    except PageSizeError as e:
        logger.info("pagination.rejected", page_size=page_size)
        _error("paginate", str(e))
        return

    # Pages are printed as they are fetched
    try:
        for page in iter_pages(conn, page_size):
            for line in render_page(page):
                _print(line)
    except sqlite3.Error as e:
        logger.error("pagination.store_error", page_size=page_size, error=str(e))
        _error("paginate", str(e))


# =============================================================================
# registrar
# =============================================================================


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    database: str | None = typer.Option(
        None, "--database", "-d", help="SQLite database path (default: in-memory)"
    ),
    config_path: Path | None = typer.Option(
        None, "--config", "-c", help="Path to a registrar YAML config file"
    ),
) -> None:
    """Enroll students into courses or page through the student list."""
    if ctx.invoked_subcommand is None:
        err_console.print(USAGE_MESSAGE, markup=False, highlight=False, soft_wrap=True)
        raise typer.Exit(code=1)

    ctx.obj = _load_config_or_exit(config_path, database)


@app.command()
def enroll(
    ctx: typer.Context,
    student_id: int | None = typer.Option(
        None, "--student-id", "-s", help="Student id (prompted if omitted)"
    ),
    course_id: int | None = typer.Option(
        None, "--course-id", "-k", help="Course id (prompted if omitted)"
    ),
) -> None:
    """Enroll a student into a course."""
    config: AppConfig = ctx.obj
    manager, conn = _open_store_or_exit(config, config.seed.variant)
    try:
        _run_enroll(conn, student_id, course_id)
    finally:
        manager.close()


@app.command()
def paginate(
    ctx: typer.Context,
    page_size: int | None = typer.Option(
        None, "--page-size", "-n", help="Students per page (prompted if omitted)"
    ),
) -> None:
    """List all students, page by page."""
    config: AppConfig = ctx.obj
    manager, conn = _open_store_or_exit(config, config.seed.variant)
    try:
        _run_paginate(conn, config, page_size)
    finally:
        manager.close()


# =============================================================================
# registrar-enroll
# =============================================================================


@enroll_app.command()
def enroll_only(
    database: str | None = typer.Option(
        None, "--database", "-d", help="SQLite database path (default: in-memory)"
    ),
    config_path: Path | None = typer.Option(
        None, "--config", "-c", help="Path to a registrar YAML config file"
    ),
) -> None:
    """Enroll a student into a course, reading both ids from standard input."""
    config = _load_config_or_exit(config_path, database)
    manager, conn = _open_store_or_exit(config, "short")
    try:
        _run_enroll(conn, None, None)
    finally:
        manager.close()
