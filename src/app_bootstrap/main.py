"""Main entry point for the application using Typer and Pydantic Settings."""

import typer
from loguru import logger
from pydantic import ValidationError
from rich.console import Console

from app_bootstrap.application import Application
from app_bootstrap.event_bus.core import EventDeliveryError
from app_bootstrap.exceptions import StartupError
from app_bootstrap.logging import setup_logging, setup_sqlalchemy_logging
from app_bootstrap.settings import load_settings
from app_bootstrap.utils.json import stringify

app = typer.Typer()
console = Console()


LOG_LEVEL_OPTION = typer.Option(
    None,
    help="Log level (overrides log.level / APP_LOG_LEVEL)",
    metavar="<level>",
    case_sensitive=False,
)  # fmt: skip
SQL_LOG_OPTION = typer.Option(
    None,
    help="Enable/disable SQL statement logging (overrides sql.log / APP_SQL_LOG)",
)  # fmt: skip
DATABASE_URL_OPTION = typer.Option(
    None,
    help="Database URL (overrides database.url / APP_DATABASE_URL)",
    metavar="<dsn>",
)  # fmt: skip
INIT_SCHEMA_OPTION = typer.Option(
    None,
    "--init-schema/--no-init-schema",
    help="Run the schema script on startup (overrides database.init.schema / APP_DATABASE_INIT_SCHEMA)",
)  # fmt: skip


@app.command()
def run(
    log_level: str = LOG_LEVEL_OPTION,
    sql_log: bool = SQL_LOG_OPTION,
    database_url: str = DATABASE_URL_OPTION,
    init_schema: bool = INIT_SCHEMA_OPTION,
) -> None:
    """Start the application and bootstrap the database."""
    try:
        settings = load_settings(
            log_level=log_level,
            sql_log=sql_log,
            database_url=database_url,
            database_init_schema=init_schema,
        )
    except ValidationError as e:
        logger.error(f"Invalid configuration: {e}")
        raise SystemExit(1) from None

    setup_logging(settings.log_level)
    setup_sqlalchemy_logging()

    console.print("[bold]Wanna open a bank account![/bold]")

    application = Application(settings)
    try:
        results = application.start()
    except (StartupError, EventDeliveryError) as e:
        logger.opt(exception=e).error(f"Application startup failed: {e}")
        application.shutdown()
        raise SystemExit(1) from None

    logger.debug(f"Startup results: {stringify(results)}")
    console.print("[green]Application is ready[/green]")


if __name__ == "__main__":
    app()
