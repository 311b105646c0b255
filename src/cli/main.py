"""Main CLI entry point for confluence-export-migrate command.

This module provides the Typer application that serves as the entry point
for the confluence-export-migrate command-line tool. It takes the export
root and the output root as positional arguments; every option is optional.
"""

import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Optional

import typer

from src.cli.config import ConfigLoader
from src.cli.errors import CLIError
from src.cli.migrate_command import MigrateCommand
from src.cli.models import ExitCode, MigrationConfig
from src.cli.output import OutputHandler

__version__ = "0.1.0"

app = typer.Typer(
    name="confluence-export-migrate",
    help="""Migrate a Confluence XML space export to Markdown files.

EXAMPLE:
  confluence-export-migrate ./export/ ./wiki

Writes one <Slug>.md per page and copies embedded attachments to <Slug>/.""",
    add_completion=False,
    rich_markup_mode=None,  # Disable Rich markup to avoid compatibility issues
)

# Module logger
logger = logging.getLogger(__name__)


def _configure_logging(verbosity: int, logdir: Optional[str] = None) -> None:
    """Configure logging based on verbosity level.

    Configures only the 'src' namespace logger to avoid affecting third-party
    libraries. The root logger is left unchanged.

    Args:
        verbosity: Verbosity level (0=WARNING, 1=INFO, 2=DEBUG)
        logdir: Optional directory for log files (creates timestamped log file)
    """
    if verbosity == 0:
        level = logging.WARNING
    elif verbosity == 1:
        level = logging.INFO
    else:  # verbosity >= 2
        level = logging.DEBUG

    app_logger = logging.getLogger("src")
    app_logger.setLevel(level)

    log_format = "%(asctime)s [%(levelname)8s] %(message)s"
    date_format = "%Y-%m-%d %H:%M:%S"
    formatter = logging.Formatter(log_format, datefmt=date_format)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    app_logger.addHandler(console_handler)

    if logdir:
        log_path = Path(logdir)
        log_path.mkdir(parents=True, exist_ok=True)

        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        log_file = log_path / f"confluence-export-migrate_{timestamp}.log"

        file_format = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        file_formatter = logging.Formatter(file_format, datefmt=date_format)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(level)
        file_handler.setFormatter(file_formatter)
        app_logger.addHandler(file_handler)

        logger.info(f"Logging to file: {log_file}")


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"confluence-export-migrate version {__version__}")
        raise typer.Exit()


@app.command()
def main_command(
    export_dir: Path = typer.Argument(
        ...,
        help="Root directory of the Confluence XML export (contains entities.xml)",
        metavar="EXPORT_DIR",
    ),
    output_dir: Path = typer.Argument(
        ...,
        help="Directory to write Markdown files and attachments to",
        metavar="OUTPUT_DIR",
    ),
    config_file: Optional[str] = typer.Option(
        None,
        "--config",
        help="YAML file with migration options",
        metavar="FILE",
    ),
    logdir: Optional[str] = typer.Option(
        None,
        "--logdir",
        help="Directory for log files (creates timestamped log file)",
    ),
    verbosity: int = typer.Option(
        0,
        "--verbosity",
        "-v",
        help="Verbosity level: 0=summary, 1=info, 2=debug",
    ),
    no_color: bool = typer.Option(
        False,
        "--no-color",
        help="Disable colored output",
    ),
    version: bool = typer.Option(
        False,
        "--version",
        "-V",
        help="Show version and exit",
        callback=_version_callback,
        is_eager=True,
    ),
) -> None:
    """Migrate a Confluence XML space export to Markdown files.

    \b
    EXAMPLE:
      confluence-export-migrate ./export/ ./wiki
      confluence-export-migrate ./export/ ./wiki --config migrate.yaml -v 1

    \b
    OUTPUT:
      <OUTPUT_DIR>/<Slug>.md             one document per page (latest version)
      <OUTPUT_DIR>/<Slug>/<attachment>   attachments embedded in that page
    """
    _configure_logging(verbosity, logdir)
    output = OutputHandler(verbosity=verbosity, no_color=no_color)

    try:
        config = ConfigLoader.load(config_file) if config_file else MigrationConfig()
    except CLIError as e:
        logger.error(f"Invalid configuration: {e}")
        output.error(str(e))
        raise typer.Exit(ExitCode.GENERAL_ERROR)

    try:
        command = MigrateCommand(
            export_root=export_dir,
            output_root=output_dir,
            config=config,
            output_handler=output,
        )
        exit_code = command.run()
    except Exception as e:
        logger.exception("Unexpected error during migration")
        output.error(f"Unexpected error: {e}")
        raise typer.Exit(ExitCode.GENERAL_ERROR)

    raise typer.Exit(exit_code)


def main() -> None:
    """Main entry point for the CLI application.

    This function is called when the module is executed directly or
    when the console script is invoked.
    """
    app()


# Allow running as: python -m src.cli.main
if __name__ == "__main__":
    main()
