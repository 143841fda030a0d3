"""Locate, read and write the CLI config file.

Lookup order for `load_config`: a runtime model or dict, an explicit path,
`PHOTON_CONFIG`/`PHOTON_CONFIG_FILE`, `~/.photon-cli/config.yml`, and finally
the legacy `~/.photon-cli/.photon-config`, which is migrated to the new
location on first read.
"""

from __future__ import annotations

import json
import logging
import os
import tomllib
from collections.abc import Callable
from pathlib import Path
from typing import Any

import tomli_w
import yaml

from photonctl.config.models import CLIConfig, ConfigInput, ResolvedConfig
from photonctl.constants import DEFAULT_CONFIG_FILE, DEFAULT_LEGACY_CONFIG_FILE
from photonctl.errors import ConfigError

logger = logging.getLogger(__name__)

CONFIG_PATH_ENVS = ("PHOTON_CONFIG", "PHOTON_CONFIG_FILE")

# The legacy file has no extension and always held JSON.
_DECODERS: dict[str, Callable[[str], Any]] = {
    ".yml": yaml.safe_load,
    ".yaml": yaml.safe_load,
    ".json": json.loads,
    ".toml": tomllib.loads,
    "": json.loads,
}

_ENCODERS: dict[str, Callable[[dict[str, Any]], str]] = {
    ".yml": lambda data: yaml.safe_dump(data, sort_keys=False),
    ".yaml": lambda data: yaml.safe_dump(data, sort_keys=False),
    ".json": lambda data: json.dumps(data, indent=2) + "\n",
    ".toml": tomli_w.dumps,
    "": lambda data: yaml.safe_dump(data, sort_keys=False),
}


def default_config_path() -> Path:
    return Path(DEFAULT_CONFIG_FILE).expanduser()


def legacy_config_path() -> Path:
    return Path(DEFAULT_LEGACY_CONFIG_FILE).expanduser()


def _read(path: Path, *, source: str) -> ResolvedConfig:
    decode = _DECODERS.get(path.suffix.lower())
    if decode is None:
        raise ConfigError(f"unsupported config extension for '{path}' (expected .yml, .json or .toml)")

    try:
        text = path.read_text(encoding="utf-8")
        payload = decode(text) if text.strip() else {}
    except (OSError, ValueError, yaml.YAMLError) as exc:
        raise ConfigError(f"failed to parse config file '{path}': {exc}") from exc
    if payload is None:
        payload = {}
    if not isinstance(payload, dict):
        raise ConfigError(f"config file '{path}' must contain a mapping")

    try:
        data = CLIConfig.model_validate(payload)
    except ValueError as exc:
        raise ConfigError(f"invalid config structure for '{path}': {exc}") from exc
    return ResolvedConfig(source=source, path=path.resolve(), data=data)


def _from_path(path: Path, *, source: str, missing: str) -> ResolvedConfig:
    """Read `path`, or return an empty config remembered at that location if it does not exist yet."""

    if path.exists():
        return _read(path, source=source)
    return ResolvedConfig(source=missing, path=path, data=CLIConfig())


def load_config(
    config: ConfigInput | str | Path | None = None,
    *,
    config_path: str | Path | None = None,
) -> ResolvedConfig:
    """Resolve the active CLI configuration."""

    if isinstance(config, (str, Path)):
        config_path = config_path or config
        config = None

    if isinstance(config, CLIConfig):
        return ResolvedConfig(source="runtime-model", data=config)
    if config is not None:
        return ResolvedConfig(source="runtime-dict", data=CLIConfig.model_validate(config))

    if config_path is not None:
        path = Path(config_path).expanduser().resolve()
        return _from_path(path, source="explicit-path", missing="explicit-path-missing")

    for env_name in CONFIG_PATH_ENVS:
        if env_path := os.getenv(env_name):
            path = Path(env_path).expanduser().resolve()
            return _from_path(path, source=f"env:{env_name}", missing=f"env:{env_name}:missing")

    default = default_config_path()
    if default.exists():
        return _read(default.resolve(), source="default-path")

    legacy = legacy_config_path()
    if legacy.is_file():
        migrated = _read(legacy.resolve(), source="legacy-path").data
        written = save_config(migrated, path=default)
        logger.info(f"migrated legacy config {legacy} to {written}")
        return ResolvedConfig(source="legacy-migrated", path=written, data=migrated)

    return ResolvedConfig(source="default-empty", path=default.resolve(), data=CLIConfig())


def save_config(config: CLIConfig, *, path: Path | None = None) -> Path:
    """Write `config` in the format implied by the file suffix, readable only by the owner.

    Tokens are written in clear text; the 0600 mode is their only protection.
    """

    target = (path or default_config_path()).expanduser()
    encode = _ENCODERS.get(target.suffix.lower())
    if encode is None:
        raise ConfigError(f"unsupported config extension: {target.suffix}")

    payload = config.model_dump(mode="json", exclude_none=True)
    for secret in ("token", "refresh_token"):
        value = getattr(config, secret)
        if value is not None:
            payload[secret] = value.get_secret_value()

    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(encode(payload), encoding="utf-8")
    target.chmod(0o600)
    return target.resolve()
