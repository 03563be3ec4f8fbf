# src/transmute/core/config.py
"""
Deployment settings for transmute.

Uses Pydantic for validation and Dynaconf for multi-source loading.
Settings are frozen (immutable) after construction and turned into a
runtime Configuration with ``TransmuteSettings.to_configuration``.

Example YAML:
    excluded_fields: [password_hash]
    expandable_fields: [orders]
    field_names:
      customer_name: customer.name
    logging:
      level: DEBUG
      json_output: true
"""

import os
import re
from collections.abc import Sequence
from pathlib import Path
from typing import TYPE_CHECKING, Any, Literal

from pydantic import BaseModel, Field, field_validator

from transmute.contracts.inclusion import ExcludedFields, ExpandableFields
from transmute.contracts.simple_converters import SimpleConverters

if TYPE_CHECKING:
    from transmute.engine.configuration import Configuration
    from transmute.engine.field_handler import FieldHandler

ENVVAR_PREFIX = "TRANSMUTE"

# ${VAR} or ${VAR:-default}
_ENV_VAR_PATTERN = re.compile(r"\$\{([A-Za-z_][A-Za-z0-9_]*)(?::-([^}]*))?\}")


class LoggingSettings(BaseModel):
    """Log output configuration, applied by ``configure_from``."""

    model_config = {"frozen": True}

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Root log level",
    )
    json_output: bool = Field(
        default=False,
        description="Render JSON lines instead of the console format",
    )

    @field_validator("level", mode="before")
    @classmethod
    def _upper_level(cls, value: Any) -> Any:
        return value.upper() if isinstance(value, str) else value


class TransmuteSettings(BaseModel):
    """Field-inclusion policy and name mappings applied to every conversion.

    ``excluded_fields``: None excludes nothing, an empty list excludes every field.
    ``expandable_fields``: None expands all, an empty list expands none.
    """

    model_config = {"frozen": True}

    excluded_fields: tuple[str, ...] | None = Field(
        default=None,
        description="Destination fields conversion must never write",
    )
    expandable_fields: tuple[str, ...] | None = Field(
        default=None,
        description="Expandable-marked fields to convert (None = all)",
    )
    field_names: dict[str, str] = Field(
        default_factory=dict,
        description="Destination field name -> source name or dotted path",
    )
    logging: LoggingSettings = Field(
        default_factory=LoggingSettings,
        description="Log output configuration",
    )

    @field_validator("field_names")
    @classmethod
    def _non_empty_names(cls, value: dict[str, str]) -> dict[str, str]:
        for destination, source in value.items():
            if not destination or not source:
                raise ValueError(f"field_names entries must be non-empty, got {destination!r}: {source!r}")
        return value

    def to_configuration(
        self,
        handlers: "Sequence[FieldHandler] | None" = None,
        simple_converters: SimpleConverters | None = None,
    ) -> "Configuration":
        """Build the runtime Configuration these settings describe.

        Args:
            handlers: Caller handler list (defaults to the built-in chain)
            simple_converters: Converters to register (defaults to none)

        Returns:
            The configuration; the shared default when nothing is customised
        """
        from transmute.engine.configuration import Configuration
        from transmute.engine.strategies import default_strategies

        return Configuration.of(
            handlers=handlers,
            strategies=default_strategies(self.field_names),
            excluded_fields=ExcludedFields.of(self.excluded_fields),
            expandable_fields=ExpandableFields.of(self.expandable_fields),
            simple_converters=simple_converters,
        )


def _expand_env_vars(config: dict[str, Any]) -> dict[str, Any]:
    """Recursively expand ${VAR} and ${VAR:-default} patterns in config values."""

    def _expand_string(value: str) -> str:
        def replacer(match: re.Match[str]) -> str:
            env_value = os.environ.get(match.group(1))
            if env_value is not None:
                return env_value
            default = match.group(2)
            return default if default is not None else match.group(0)

        return _ENV_VAR_PATTERN.sub(replacer, value)

    def _expand_value(value: Any) -> Any:
        if isinstance(value, str):
            return _expand_string(value)
        elif isinstance(value, dict):
            return {k: _expand_value(v) for k, v in value.items()}
        elif isinstance(value, list):
            return [_expand_value(item) for item in value]
        else:
            return value

    return {k: _expand_value(v) for k, v in config.items()}


def load_settings(config_path: Path) -> TransmuteSettings:
    """Load settings from a YAML file with environment variable overrides.

    Precedence, highest first:
    1. Environment variables (TRANSMUTE_*), ``__`` separating nested keys
    2. Config file
    3. Defaults from the Pydantic schema

    Args:
        config_path: Path to YAML configuration file

    Returns:
        Validated TransmuteSettings instance

    Raises:
        ValidationError: If configuration fails Pydantic validation
        FileNotFoundError: If config file doesn't exist
    """
    from dynaconf import Dynaconf

    # Dynaconf silently accepts missing files
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    dynaconf_settings = Dynaconf(
        envvar_prefix=ENVVAR_PREFIX,
        settings_files=[str(config_path)],
        environments=False,
        load_dotenv=False,
        merge_enabled=True,
    )

    # Dynaconf returns uppercase keys and its own bookkeeping entries
    internal_keys = {"LOAD_DOTENV", "ENVIRONMENTS", "SETTINGS_FILES"}
    raw_config = {k.lower(): v for k, v in dynaconf_settings.as_dict().items() if k not in internal_keys}
    if isinstance(raw_config.get("logging"), dict):
        raw_config["logging"] = {k.lower(): v for k, v in raw_config["logging"].items()}

    raw_config = _expand_env_vars(raw_config)

    return TransmuteSettings(**raw_config)
