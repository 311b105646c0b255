"""Command-line interface for Confluence export migration.

This package provides the `confluence-export-migrate` CLI tool that turns a
Confluence XML space export into Markdown documents with their attachments,
with progress indication and error handling.
"""

from .config import ConfigLoader
from .migrate_command import MigrateCommand
from .models import ExitCode, MigrationConfig
from .errors import CLIError, ConfigError, ConfigFilesystemError

__all__ = [
    'ConfigLoader',
    'MigrateCommand',
    'ExitCode',
    'MigrationConfig',
    'CLIError',
    'ConfigError',
    'ConfigFilesystemError',
]
