"""Configuration resolution helpers."""

from __future__ import annotations

from collections.abc import Mapping as MappingABC
from copy import deepcopy
from typing import Any, Dict, Iterable, Mapping

import yaml
from pydantic import ValidationError

from .exceptions import ConfigError
from .models import DeskCleanConfig

ENV_PREFIX = "DESKCLEAN__"


def resolve_with_precedence(
    *,
    defaults: DeskCleanConfig,
    file_overrides: Mapping[str, Any] | None = None,
    env_overrides: Mapping[str, Any] | None = None,
    cli_overrides: Mapping[str, Any] | None = None,
) -> DeskCleanConfig:
    """Merge configuration layers: defaults, then file, environment, and CLI values.

    Args:
        defaults: Baseline configuration.
        file_overrides: Values read from the YAML configuration file.
        env_overrides: Nested values derived from ``DESKCLEAN__`` variables.
        cli_overrides: Values supplied on the command line; dotted keys allowed.

    Returns:
        DeskCleanConfig: Validated configuration snapshot.

    Raises:
        ConfigError: If a layer is malformed or the merged data fails validation.
    """
    merged: dict[str, Any] = defaults.model_dump(mode="python")
    layers: Iterable[tuple[str, Mapping[str, Any] | None]] = (
        ("file", file_overrides),
        ("environment", env_overrides),
        ("cli", cli_overrides),
    )
    for name, layer in layers:
        if layer is None:
            continue
        merged = _deep_merge(merged, expand_dotted(layer, source_name=name))

    try:
        return DeskCleanConfig.model_validate(merged)
    except ValidationError as exc:
        raise ConfigError(f"Invalid configuration values: {exc}") from exc


def flatten_for_env(config: DeskCleanConfig) -> Dict[str, str]:
    """Flatten the config into ``DESKCLEAN__SECTION__KEY`` environment mappings."""
    flat: Dict[str, str] = {}

    def _walk(prefix: list[str], value: Any) -> None:
        if isinstance(value, dict) and value and prefix[-1] != "extension_overrides":
            for key, child in value.items():
                _walk(prefix + [str(key)], child)
            return
        env_key = ENV_PREFIX + "__".join(part.upper() for part in prefix)
        if isinstance(value, (dict, list)):
            flat[env_key] = yaml.safe_dump(value, default_flow_style=True).strip()
        elif value is None:
            flat[env_key] = "null"
        elif isinstance(value, bool):
            flat[env_key] = "true" if value else "false"
        else:
            flat[env_key] = str(value)

    for section, values in config.model_dump(mode="python").items():
        _walk([section], values)
    return flat


def expand_dotted(source: Mapping[str, Any], *, source_name: str) -> dict[str, Any]:
    """Expand ``section.key`` style keys into nested dictionaries.

    Only the keys of ``source`` itself are split on dots. Keys inside nested
    mappings are kept verbatim, so ``extension_overrides`` entries such as
    ``tar.gz`` or ``.RAW`` survive intact.

    Raises:
        ConfigError: If the layer is not a mapping or keys collide with scalars.
    """
    if not isinstance(source, MappingABC):
        raise ConfigError(f"{source_name.capitalize()} overrides must be a mapping.")

    result: dict[str, Any] = {}
    for key, value in source.items():
        if not isinstance(key, str):
            raise ConfigError(f"{source_name.capitalize()} override keys must be strings.")
        path = key.split(".")
        node = result
        for segment in path[:-1]:
            child = node.setdefault(segment, {})
            if not isinstance(child, dict):
                raise ConfigError(
                    f"{source_name.capitalize()} override for {key} conflicts with existing value."
                )
            node = child
        leaf = path[-1]
        if isinstance(value, MappingABC):
            existing = node.get(leaf)
            node[leaf] = _deep_merge(existing if isinstance(existing, dict) else {}, value)
        else:
            node[leaf] = value
    return result


def _deep_merge(base: Mapping[str, Any], overrides: Mapping[str, Any]) -> dict[str, Any]:
    merged = {key: deepcopy(value) for key, value in base.items()}
    for key, value in overrides.items():
        current = merged.get(key)
        if isinstance(value, MappingABC) and isinstance(current, dict) and current:
            merged[key] = _deep_merge(current, value)
        else:
            merged[key] = deepcopy(value)
    return merged


__all__ = ["resolve_with_precedence", "flatten_for_env", "expand_dotted", "ENV_PREFIX"]
