"""Configuration management for deskclean.

Settings live in a YAML file (``~/.deskclean/config.yaml`` by default) and are
layered as defaults < file < ``DESKCLEAN__SECTION__KEY`` environment variables
< CLI overrides. Every load returns a fresh, validated snapshot.
"""

from __future__ import annotations

import os
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Mapping

import yaml

from .exceptions import ConfigError
from .models import DeskCleanConfig, LoggingSettings, OrganizationOptions, Preferences
from .resolver import ENV_PREFIX, expand_dotted, flatten_for_env, resolve_with_precedence

DEFAULT_CONFIG_PATH = Path("~/.deskclean/config.yaml")
_HEADER_LINES = (
    "# deskclean configuration file",
    "# Manage with `deskclean config set` or `deskclean config edit`.",
)


class ConfigManager:
    """Read, validate, and write the deskclean configuration file."""

    def __init__(
        self,
        config_path: Path | None = None,
        *,
        env: Mapping[str, str] | None = None,
    ) -> None:
        """Initialize the manager.

        Args:
            config_path: Location of the YAML file; defaults to ``~/.deskclean/config.yaml``.
            env: Environment mapping consulted for overrides; defaults to ``os.environ``.
        """
        self._config_path = Path(config_path or DEFAULT_CONFIG_PATH).expanduser()
        self._env = os.environ if env is None else env

    @property
    def config_path(self) -> Path:
        return self._config_path

    def load(
        self,
        *,
        cli_overrides: Mapping[str, Any] | None = None,
        include_env: bool = True,
        ensure_file: bool = True,
        env_overrides: Mapping[str, str] | None = None,
    ) -> DeskCleanConfig:
        """Return a validated configuration snapshot.

        Args:
            cli_overrides: Highest-precedence values; dotted keys are allowed.
            include_env: Whether ``DESKCLEAN__`` variables are applied.
            ensure_file: Create the file with defaults when it is missing.
            env_overrides: Environment mapping to use instead of the manager's.

        Raises:
            ConfigError: If the file cannot be parsed or values are invalid.
        """
        if ensure_file:
            self.ensure_exists()

        env_layer = None
        if include_env:
            env_layer = self._env_layer(self._env if env_overrides is None else env_overrides)

        return resolve_with_precedence(
            defaults=DeskCleanConfig(),
            file_overrides=self._read_file(),
            env_overrides=env_layer,
            cli_overrides=cli_overrides,
        )

    def load_preferences(self) -> Preferences:
        """Return just the preferences section of a fresh snapshot."""
        return self.load().preferences

    def load_file_overrides(self) -> dict[str, Any]:
        """Return the raw mapping stored on disk, without defaults applied."""
        return self._read_file()

    def set_value(self, key: str, value: Any) -> None:
        """Persist ``value`` at the dotted ``key`` after validating the result.

        Args:
            key: Dotted path such as ``preferences.auto_clean_interval``.
            value: Already-parsed value to store.

        Raises:
            ConfigError: If the key is malformed or the new value is invalid.
        """
        segments = [segment.strip() for segment in key.split(".") if segment.strip()]
        if len(segments) < 2:
            raise ConfigError(
                "Keys must name a section and a setting, e.g. 'preferences.auto_clean_interval'."
            )

        data = self._read_file()
        section = data.get(segments[0])
        if section is not None and not isinstance(section, dict):
            raise ConfigError(f"Cannot assign into '{segments[0]}' because it is not a mapping.")

        update = expand_dotted({".".join(segments): value}, source_name="cli")
        data[segments[0]] = {**(section or {}), **update[segments[0]]}
        validated = resolve_with_precedence(defaults=DeskCleanConfig(), file_overrides=data)
        if len(segments) == 2:
            # Store the coerced value so the file reads back the same way.
            dumped = validated.model_dump(mode="json").get(segments[0], {})
            if segments[1] in dumped:
                data[segments[0]][segments[1]] = dumped[segments[1]]
        self._write_file(data)

    def replace(self, data: Mapping[str, Any]) -> None:
        """Validate ``data`` as a whole file and write it.

        Raises:
            ConfigError: If ``data`` does not form a valid configuration.
        """
        if not isinstance(data, Mapping):
            raise ConfigError("Configuration file must contain a mapping at the top level.")
        resolve_with_precedence(defaults=DeskCleanConfig(), file_overrides=data)
        self._write_file(data)

    def save(self, config: DeskCleanConfig | Mapping[str, Any]) -> None:
        """Write ``config`` to disk without validation."""
        if isinstance(config, DeskCleanConfig):
            self._write_file(config.model_dump(mode="python"))
        else:
            self._write_file(config)

    def ensure_exists(self) -> Path:
        """Write the default configuration if no file exists yet."""
        if not self._config_path.exists():
            self._write_file(DeskCleanConfig().model_dump(mode="python"))
        return self._config_path

    def read_text(self) -> str:
        if not self._config_path.exists():
            return ""
        return self._config_path.read_text(encoding="utf-8")

    def _read_file(self) -> dict[str, Any]:
        text = self.read_text()
        if not text:
            return {}
        try:
            raw = yaml.safe_load(text)
        except yaml.YAMLError as exc:
            raise ConfigError(f"Failed to parse {self._config_path}: {exc}") from exc
        if raw is None:
            return {}
        if not isinstance(raw, dict):
            raise ConfigError("Configuration file must contain a mapping at the top level.")
        return raw

    def _write_file(self, data: Mapping[str, Any]) -> None:
        stamp = datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")
        body = yaml.safe_dump(dict(data), sort_keys=False)
        self._config_path.parent.mkdir(parents=True, exist_ok=True)
        self._config_path.write_text(
            "\n".join((*_HEADER_LINES, f"# Last updated: {stamp}", body)), encoding="utf-8"
        )

    @staticmethod
    def _env_layer(env: Mapping[str, str]) -> dict[str, Any] | None:
        """Translate ``DESKCLEAN__SECTION__KEY`` variables into a nested mapping.

        Values are parsed as YAML so ``true``, ``15``, or ``{raw: Pictures}``
        arrive typed; unparsable values are kept as plain strings.
        """
        dotted: dict[str, Any] = {}
        for name, raw_value in env.items():
            if not name.startswith(ENV_PREFIX):
                continue
            segments = [part.lower() for part in name[len(ENV_PREFIX) :].split("__") if part]
            if not segments:
                continue
            try:
                dotted[".".join(segments)] = yaml.safe_load(raw_value)
            except yaml.YAMLError:
                dotted[".".join(segments)] = raw_value
        if not dotted:
            return None
        return expand_dotted(dotted, source_name="environment")


__all__ = [
    "ConfigManager",
    "DEFAULT_CONFIG_PATH",
    "DeskCleanConfig",
    "Preferences",
    "OrganizationOptions",
    "LoggingSettings",
    "resolve_with_precedence",
    "flatten_for_env",
    "ConfigError",
]
