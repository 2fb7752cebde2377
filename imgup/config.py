"""Layered configuration: built-in defaults, config file, then environment.

The config file uses dotenv ``KEY=value`` syntax and lives at
``$IMGUP_CONFIG`` or ``$XDG_CONFIG_HOME/imgup/config``. Environment
variables with the same names override file values, and command-line
flags are applied on top by the option parser.
"""

from __future__ import annotations

import math
import os
import re
from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from pathlib import Path

from dotenv import dotenv_values

from imgup.errors import ConfigError, ValidationError
from imgup.models.request import OutputFormat
from imgup.parsers.duration import parse_duration
from imgup.sources.clipboard import ClipboardBackend
from imgup.sources.screenshot import ScreenshotTool

API_KEY_VAR = "IMGBB_API_KEY"
CONFIG_PATH_VAR = "IMGUP_CONFIG"

CONFIG_KEYS = (
    API_KEY_VAR,
    "DEFAULT_EXPIRATION",
    "OUTPUT_FORMAT",
    "SCREENSHOT_TOOL",
    "DEFAULT_MONITOR",
    "CLIPBOARD_BACKEND",
    "NOTIFY",
    "UPLOAD_TIMEOUT",
)

DEFAULT_UPLOAD_TIMEOUT = 300.0

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


@dataclass(frozen=True)
class Settings:
    """Resolved configuration for one invocation."""

    api_key: str | None = None
    default_expiration: int | None = None
    output_format: OutputFormat = OutputFormat.RAW
    screenshot_tool: ScreenshotTool = ScreenshotTool.FLAMESHOT
    default_monitor: int = 0
    clipboard_backend: ClipboardBackend = ClipboardBackend.X11
    notify: bool = True
    copy_to_clipboard: bool = True
    upload_timeout: float = DEFAULT_UPLOAD_TIMEOUT
    verbose: bool = False
    config_path: Path | None = field(default=None, compare=False)


def default_config_path(environ: Mapping[str, str]) -> Path:
    explicit = environ.get(CONFIG_PATH_VAR)
    if explicit:
        return Path(explicit).expanduser()
    base = environ.get("XDG_CONFIG_HOME") or str(Path.home() / ".config")
    return Path(base).expanduser() / "imgup" / "config"


def read_config_file(path: Path) -> dict[str, str]:
    """
    Read key-value pairs from a dotenv-style config file.

    A missing file yields no values. Keys without a value are dropped.

    Args:
        path: Config file location

    Returns:
        dict[str, str]: Raw values keyed by variable name
    """
    if not path.is_file():
        return {}
    try:
        raw = dotenv_values(path)
    except OSError as e:
        raise ConfigError(f"Cannot read config file {path}: {e}") from e
    return {key: value for key, value in raw.items() if value is not None}


def _parse_bool(key: str, value: str) -> bool:
    lowered = value.strip().lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    raise ConfigError(f"Invalid {key} '{value}': expected true/false, yes/no, on/off or 1/0")


def _parse_monitor(key: str, value: str) -> int:
    if not re.fullmatch(r"[0-9]+", value.strip()):
        raise ConfigError(f"Invalid {key} '{value}': expected a non-negative monitor number")
    return int(value)


def _parse_timeout(key: str, value: str) -> float:
    try:
        timeout = float(value)
    except ValueError:
        raise ConfigError(f"Invalid {key} '{value}': expected a number of seconds") from None
    if not math.isfinite(timeout):
        raise ConfigError(f"Invalid {key} '{value}': must be a finite number of seconds")
    if timeout <= 0:
        raise ConfigError(f"Invalid {key} '{value}': must be greater than zero")
    return timeout


def load_settings(
    environ: Mapping[str, str] | None = None, config_path: Path | None = None
) -> Settings:
    """
    Build settings from the config file and the environment.

    Environment values override file values; empty environment values are
    treated as unset so they do not mask the file.

    Args:
        environ: Environment mapping (defaults to ``os.environ``)
        config_path: Config file override (defaults to the XDG location)

    Returns:
        Settings: Immutable settings for this run

    Raises:
        ConfigError: If any configured value is invalid
    """
    env = os.environ if environ is None else environ
    path = config_path or default_config_path(env)

    values = read_config_file(path)
    for key in CONFIG_KEYS:
        if env.get(key):
            values[key] = env[key]

    settings = Settings(
        clipboard_backend=ClipboardBackend.detect(env),
        config_path=path,
    )
    overrides: dict[str, object] = {}

    api_key = values.get(API_KEY_VAR, "").strip()
    if api_key:
        overrides["api_key"] = api_key

    if "DEFAULT_EXPIRATION" in values:
        try:
            overrides["default_expiration"] = parse_duration(values["DEFAULT_EXPIRATION"].strip())
        except ValidationError as e:
            raise ConfigError(f"DEFAULT_EXPIRATION: {e.message}") from e

    if "OUTPUT_FORMAT" in values:
        try:
            overrides["output_format"] = OutputFormat.from_name(values["OUTPUT_FORMAT"])
        except ValueError as e:
            raise ConfigError(str(e)) from e

    if "SCREENSHOT_TOOL" in values:
        overrides["screenshot_tool"] = ScreenshotTool.from_name(values["SCREENSHOT_TOOL"])

    if "DEFAULT_MONITOR" in values:
        overrides["default_monitor"] = _parse_monitor("DEFAULT_MONITOR", values["DEFAULT_MONITOR"])

    if "CLIPBOARD_BACKEND" in values:
        overrides["clipboard_backend"] = ClipboardBackend.from_name(values["CLIPBOARD_BACKEND"])

    if "NOTIFY" in values:
        overrides["notify"] = _parse_bool("NOTIFY", values["NOTIFY"])

    if "UPLOAD_TIMEOUT" in values:
        overrides["upload_timeout"] = _parse_timeout("UPLOAD_TIMEOUT", values["UPLOAD_TIMEOUT"])

    return replace(settings, **overrides)
