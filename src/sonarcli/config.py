"""Configuration management with XDG paths, atomic writes, and precedence resolution.

This module handles all persistent configuration for sonar-cli:

* **Directory layout** -- XDG Base Directory compliant on Linux/BSD,
  ``~/.sonar-cli/`` on macOS and Windows. See :func:`get_config_dir` and
  :func:`get_data_dir`.
* **Global config** -- A single :class:`~sonarcli.models.GlobalConfig`
  JSON file storing the default server URL, timeout and output settings.
* **Precedence resolution** -- :func:`resolve_settings` merges CLI flags,
  environment variables and the global config into the
  :class:`~sonarcli.models.ConnectionSettings` used to build the client.

All file writes use an atomic temp-file-then-rename strategy
(:func:`_atomic_write`) to prevent data loss on crash or power failure.
"""

from __future__ import annotations

import json
import os
import platform
import tempfile
from pathlib import Path
from typing import Optional

from sonarcli.exceptions import ConfigError
from sonarcli.models import ConnectionSettings, GlobalConfig

_APP_NAME = "sonar-cli"
_CONFIG_FILENAME = "config.json"

ENV_URL = "SONAR_CLI_URL"
ENV_TOKEN = "SONAR_CLI_TOKEN"
ENV_USERNAME = "SONAR_CLI_USERNAME"
ENV_PASSWORD = "SONAR_CLI_PASSWORD"

MISSING_URL_MESSAGE = "server URL must be provided via --url flag or SONAR_CLI_URL env var"


# --- XDG path resolution ---


def _is_xdg_platform() -> bool:
    """Return True if the platform supports XDG Base Directory spec (Linux/FreeBSD)."""
    return platform.system() == "Linux" or platform.system().endswith("BSD")


def _fallback_base_dir() -> Path:
    """Fallback base directory for non-XDG platforms (macOS, Windows)."""
    return Path.home() / f".{_APP_NAME}"


def _xdg_base(env_var: str, default_segments: tuple[str, ...]) -> Path:
    """Resolve an XDG base directory from an env var with fallback segments under $HOME."""
    env_value = os.environ.get(env_var, "")
    if env_value:
        return Path(env_value)
    base = Path.home()
    for seg in default_segments:
        base = base / seg
    return base


def get_config_dir() -> Path:
    """Return the configuration directory, creating it if necessary.

    On Linux/BSD: ``$XDG_CONFIG_HOME/sonar-cli/`` (default ``~/.config/sonar-cli/``).
    On macOS/Windows: ``~/.sonar-cli/``.
    """
    if _is_xdg_platform():
        path = _xdg_base("XDG_CONFIG_HOME", (".config",)) / _APP_NAME
    else:
        path = _fallback_base_dir()
    path.mkdir(parents=True, exist_ok=True)
    return path


def get_data_dir() -> Path:
    """Return the data directory (crash logs), creating it if necessary.

    On Linux/BSD: ``$XDG_DATA_HOME/sonar-cli/`` (default ``~/.local/share/sonar-cli/``).
    On macOS/Windows: ``~/.sonar-cli/logs/``.
    """
    if _is_xdg_platform():
        path = _xdg_base("XDG_DATA_HOME", (".local", "share")) / _APP_NAME
    else:
        path = _fallback_base_dir() / "logs"
    path.mkdir(parents=True, exist_ok=True)
    return path


# --- Atomic file writes ---


def _atomic_write(path: Path, data: str) -> None:
    """Write data to file atomically using temp file + rename.

    The temporary file is created in the same directory as *path* so that
    ``os.replace`` is an atomic rename on POSIX systems. On any failure the
    temp file is cleaned up.
    """
    path.parent.mkdir(parents=True, exist_ok=True)

    fd = None
    tmp_path: Optional[str] = None
    try:
        fd = tempfile.NamedTemporaryFile(
            mode="w",
            dir=path.parent,
            prefix=f".{path.name}.",
            suffix=".tmp",
            delete=False,
            encoding="utf-8",
        )
        tmp_path = fd.name
        fd.write(data)
        fd.flush()
        os.fsync(fd.fileno())
        fd.close()
        fd = None
        os.replace(tmp_path, path)
    except BaseException:
        if fd is not None:
            fd.close()
        if tmp_path is not None:
            try:
                os.unlink(tmp_path)
            except OSError:
                pass
        raise


# --- Global config ---


def config_file_path() -> Path:
    """Path to the global config file."""
    return get_config_dir() / _CONFIG_FILENAME


def load_global_config() -> GlobalConfig:
    """Load the global configuration from the config directory.

    Returns:
        The deserialised :class:`~sonarcli.models.GlobalConfig`. If the
        file does not exist, a default instance is returned.

    Raises:
        ConfigError: If the file exists but contains invalid JSON or fails
            Pydantic validation.
    """
    path = config_file_path()
    if not path.is_file():
        return GlobalConfig()
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
        return GlobalConfig.model_validate(data)
    except (json.JSONDecodeError, ValueError) as exc:
        raise ConfigError(f"Invalid global config at {path}: {exc}") from exc


def save_global_config(config: GlobalConfig) -> None:
    """Persist the global configuration atomically to disk."""
    data = config.model_dump(mode="json")
    _atomic_write(config_file_path(), json.dumps(data, indent=2) + "\n")


# --- Precedence resolution ---


def _pick(cli_value: Optional[str], env_var: str, fallback: Optional[str] = None) -> Optional[str]:
    if cli_value:
        return cli_value
    env_value = os.environ.get(env_var)
    if env_value:
        return env_value
    return fallback


def resolve_settings(
    cli_url: Optional[str] = None,
    cli_token: Optional[str] = None,
    cli_username: Optional[str] = None,
    cli_password: Optional[str] = None,
    cli_timeout: Optional[float] = None,
    global_config: Optional[GlobalConfig] = None,
) -> ConnectionSettings:
    """Resolve the connection settings with the full precedence chain.

    Precedence (high to low):
        1. CLI flags
        2. Environment variables (``SONAR_CLI_URL``, ``SONAR_CLI_TOKEN``,
           ``SONAR_CLI_USERNAME``, ``SONAR_CLI_PASSWORD``)
        3. User config (``~/.config/sonar-cli/config.json``), URL and
           timeout only
        4. Defaults

    Args:
        cli_url: ``--url`` value.
        cli_token: ``--token`` value.
        cli_username: ``--username`` value.
        cli_password: ``--password`` value.
        cli_timeout: ``--timeout`` value.
        global_config: Already loaded config; loaded from disk when omitted.

    Returns:
        The effective :class:`~sonarcli.models.ConnectionSettings`. The URL
        may still be ``None``; see :func:`require_url`.
    """
    cfg = global_config if global_config is not None else load_global_config()
    return ConnectionSettings(
        url=_pick(cli_url, ENV_URL, cfg.url),
        token=_pick(cli_token, ENV_TOKEN),
        username=_pick(cli_username, ENV_USERNAME),
        password=_pick(cli_password, ENV_PASSWORD),
        timeout=cli_timeout if cli_timeout is not None else cfg.timeout,
    )


def require_url(settings: ConnectionSettings) -> str:
    """Return the server URL from *settings*.

    Raises:
        ConfigError: If no URL was given by flag, environment or config file.
    """
    if not settings.url:
        raise ConfigError(MISSING_URL_MESSAGE)
    return settings.url
