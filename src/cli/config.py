"""YAML configuration loading and validation.

Configuration is optional: without a file every option keeps its default and
the run behaves like the bare two-argument invocation.

Configuration file structure:
    revision_encoding: varint      # or "decimal"
    pandoc_executable: pandoc
    pandoc_timeout: null           # seconds, null for no deadline
    document_extension: .md
"""

from typing import Any, Dict

import yaml

from src.export_reader.revision import REVISION_ENCODINGS

from .errors import ConfigError, ConfigFilesystemError
from .models import MigrationConfig


class ConfigLoader:
    """Handles configuration file loading and validation."""

    # Default values for optional fields
    DEFAULTS = {
        'revision_encoding': 'varint',
        'pandoc_executable': 'pandoc',
        'pandoc_timeout': None,
        'document_extension': '.md',
    }

    @classmethod
    def load(cls, config_path: str) -> MigrationConfig:
        """Load and parse configuration from a YAML file.

        Args:
            config_path: Path to the YAML configuration file

        Returns:
            MigrationConfig object with parsed configuration

        Raises:
            ConfigFilesystemError: If file cannot be read
            ConfigError: If configuration is invalid or malformed
        """
        try:
            with open(config_path, 'r', encoding='utf-8') as f:
                content = f.read()
        except FileNotFoundError:
            raise ConfigFilesystemError(config_path, 'Configuration file not found')
        except PermissionError:
            raise ConfigFilesystemError(config_path, 'Permission denied')
        except OSError as e:
            raise ConfigFilesystemError(config_path, str(e))

        try:
            config_dict = yaml.safe_load(content)
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML syntax: {str(e)}")

        # An empty file means "all defaults"
        if config_dict is None:
            return MigrationConfig()

        if not isinstance(config_dict, dict):
            raise ConfigError(
                f"Configuration must be a YAML dictionary, got {type(config_dict).__name__}"
            )

        return cls.parse(config_dict)

    @classmethod
    def parse(cls, config_dict: Dict[str, Any]) -> MigrationConfig:
        """Validate a configuration dictionary.

        Args:
            config_dict: Raw configuration dictionary from YAML

        Returns:
            Validated MigrationConfig object

        Raises:
            ConfigError: If configuration is invalid
        """
        unknown_fields = set(config_dict.keys()) - set(cls.DEFAULTS.keys())
        if unknown_fields:
            raise ConfigError(f"Unknown fields: {', '.join(sorted(unknown_fields))}")

        values = {**cls.DEFAULTS, **config_dict}

        revision_encoding = values['revision_encoding']
        if revision_encoding not in REVISION_ENCODINGS:
            raise ConfigError(
                f"Must be one of: {', '.join(REVISION_ENCODINGS)}",
                'revision_encoding'
            )

        pandoc_executable = values['pandoc_executable']
        if not isinstance(pandoc_executable, str) or not pandoc_executable.strip():
            raise ConfigError("Must be a non-empty string", 'pandoc_executable')

        pandoc_timeout = values['pandoc_timeout']
        if pandoc_timeout is not None:
            if isinstance(pandoc_timeout, bool) or not isinstance(pandoc_timeout, (int, float)):
                raise ConfigError("Must be a number of seconds or null", 'pandoc_timeout')
            if pandoc_timeout <= 0:
                raise ConfigError("Must be positive", 'pandoc_timeout')

        document_extension = values['document_extension']
        if not isinstance(document_extension, str) or not document_extension.startswith('.'):
            raise ConfigError("Must be a string starting with '.'", 'document_extension')
        if '/' in document_extension or '\\' in document_extension:
            raise ConfigError("Must not contain path separators", 'document_extension')

        return MigrationConfig(
            revision_encoding=revision_encoding,
            pandoc_executable=pandoc_executable,
            pandoc_timeout=float(pandoc_timeout) if pandoc_timeout is not None else None,
            document_extension=document_extension,
        )
