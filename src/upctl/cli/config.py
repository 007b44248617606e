"""Configuration resolution for the CLI layer.

Sources, later wins::

    built-in defaults < TOML config file < UPCTL_* environment < flags

The result is a frozen :class:`~upctl.core.models.ClientConfig`; nothing
downstream reads the environment or the config file again.

Config file example::

    endpoint = "https://upload.example.com/api/v1"
    apikey = "0123456789abcdef"
    retries = 5

    [[apicontexts]]
    context = "support"
    key = "fedcba9876543210"
"""

from __future__ import annotations

import argparse
import os
import tomllib
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from upctl.core.models import ApiContext, ClientConfig
from upctl.exceptions import ConfigError

DEFAULT_ENDPOINT: str = "http://localhost:8080/api/v1"
DEFAULT_RETRIES: int = 3
DEFAULT_TIMEOUT: float = 300.0

DEFAULT_CONFIG_PATH: Path = Path("~/.config/upctl/upctl.toml")

ENV_PREFIX: str = "UPCTL_"

_SCALAR_KEYS: tuple[str, ...] = ("endpoint", "apikey", "retries", "debug", "timeout")


def resolve_config(
    args: argparse.Namespace,
    *,
    version: str,
    environ: Mapping[str, str] | None = None,
) -> ClientConfig:
    """Merge every configuration source into a :class:`ClientConfig`.

    Parameters
    ----------
    args:
        Parsed command line.  Reads ``config``, ``endpoint``, ``apikey``,
        ``retries`` and ``debug``; unset flags are ``None``.
    version:
        Client version injected into the config for the User-Agent.
    environ:
        Environment mapping; defaults to :data:`os.environ`.

    Raises
    ------
    ConfigError
        If the config file cannot be read or a value has the wrong type.
    """
    env = os.environ if environ is None else environ

    values: dict[str, Any] = {
        "endpoint": DEFAULT_ENDPOINT,
        "apikey": None,
        "retries": DEFAULT_RETRIES,
        "debug": False,
        "timeout": DEFAULT_TIMEOUT,
    }

    file_data = load_config_file(_config_path(args, env))
    values.update({key: file_data[key] for key in _SCALAR_KEYS if key in file_data})

    for key in _SCALAR_KEYS:
        raw = env.get(ENV_PREFIX + key.upper())
        if raw is not None and raw != "":
            values[key] = raw

    for key in ("endpoint", "apikey", "retries", "debug"):
        flag = getattr(args, key, None)
        if flag is not None:
            values[key] = flag

    return ClientConfig(
        endpoint=_as_str("endpoint", values["endpoint"]),
        version=version,
        api_key=_as_str("apikey", values["apikey"]) if values["apikey"] else None,
        retries=_as_int("retries", values["retries"]),
        debug=_as_bool("debug", values["debug"]),
        timeout=_as_float("timeout", values["timeout"]),
        apicontexts=_parse_apicontexts(file_data.get("apicontexts", [])),
    )


# ---------------------------------------------------------------------------
# Config file
# ---------------------------------------------------------------------------

def _config_path(args: argparse.Namespace, env: Mapping[str, str]) -> Path | None:
    """Return the config file to load, or ``None`` when there is none.

    An explicitly requested file must exist; the default location is
    optional.
    """
    explicit = getattr(args, "config", None) or env.get(ENV_PREFIX + "CONFIG")
    if explicit:
        path = Path(explicit).expanduser()
        if not path.is_file():
            raise ConfigError(f"Config file not found: {path}")
        return path

    default = DEFAULT_CONFIG_PATH.expanduser()
    return default if default.is_file() else None


def load_config_file(path: Path | None) -> dict[str, Any]:
    """Parse the TOML config file at *path* (empty dict for ``None``)."""
    if path is None:
        return {}
    try:
        with path.open("rb") as fh:
            return tomllib.load(fh)
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(f"Invalid config file {path}: {exc}") from exc
    except OSError as exc:
        raise ConfigError(f"Cannot read config file {path}: {exc.strerror or exc}") from exc


def _parse_apicontexts(raw: object) -> tuple[ApiContext, ...]:
    if not isinstance(raw, list):
        raise ConfigError("'apicontexts' must be a list of tables")

    contexts: list[ApiContext] = []
    for entry in raw:
        if not isinstance(entry, dict):
            raise ConfigError("'apicontexts' entries must be tables")
        name = entry.get("context")
        key = entry.get("key")
        if not isinstance(name, str) or not isinstance(key, str) or not name or not key:
            raise ConfigError(
                "Each 'apicontexts' entry needs non-empty 'context' and 'key' strings",
            )
        contexts.append(ApiContext(context=name, key=key))
    return tuple(contexts)


# ---------------------------------------------------------------------------
# Value coercion (file values are typed, environment values are strings)
# ---------------------------------------------------------------------------

def _as_str(name: str, value: object) -> str:
    if not isinstance(value, str) or not value:
        raise ConfigError(f"'{name}' must be a non-empty string")
    return value


def _as_int(name: str, value: object) -> int:
    if isinstance(value, bool):
        raise ConfigError(f"'{name}' must be an integer")
    try:
        number = int(value)  # type: ignore[call-overload]
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"'{name}' must be an integer, got {value!r}") from exc
    if number < 0:
        raise ConfigError(f"'{name}' must not be negative")
    return number


def _as_float(name: str, value: object) -> float:
    if isinstance(value, bool):
        raise ConfigError(f"'{name}' must be a number")
    try:
        number = float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"'{name}' must be a number, got {value!r}") from exc
    if number <= 0:
        raise ConfigError(f"'{name}' must be positive")
    return number


_TRUE = frozenset({"1", "true", "yes", "on"})
_FALSE = frozenset({"0", "false", "no", "off"})


def _as_bool(name: str, value: object) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in _TRUE:
            return True
        if lowered in _FALSE:
            return False
    raise ConfigError(f"'{name}' must be a boolean, got {value!r}")
