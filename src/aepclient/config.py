"""Client configuration with XDG paths, atomic writes, and environment overrides.

The configuration is a single :class:`~aepclient.models.ClientConfig` JSON
file.  Its default location is XDG Base Directory compliant on Linux/BSD
(``$XDG_CONFIG_HOME/aepclient/config.json``) and ``~/.aepclient/config.json``
on macOS and Windows.

Precedence (high to low):
    1. Environment variables (``AEPCLIENT_TIMEOUT``)
    2. The config file
    3. Model defaults

Writes use a temp-file-then-rename strategy (:func:`_atomic_write`) so a
crash never leaves a half-written file behind.
"""

from __future__ import annotations

import json
import os
import platform
import tempfile
from pathlib import Path
from typing import Optional

from pydantic import ValidationError

from aepclient.exceptions import ConfigError
from aepclient.models import ClientConfig

_APP_NAME = "aepclient"
_CONFIG_FILENAME = "config.json"

ENV_TIMEOUT = "AEPCLIENT_TIMEOUT"


# --- XDG path resolution ---


def _is_xdg_platform() -> bool:
    """Return True if the platform supports XDG Base Directory spec (Linux/FreeBSD)."""
    return platform.system() == "Linux" or platform.system().endswith("BSD")


def get_config_dir() -> Path:
    """Return the configuration directory, creating it if necessary.

    On Linux/BSD: ``$XDG_CONFIG_HOME/aepclient/`` (default ``~/.config/aepclient/``).
    On macOS/Windows: ``~/.aepclient/``.
    """
    if _is_xdg_platform():
        env_value = os.environ.get("XDG_CONFIG_HOME", "")
        base = Path(env_value) if env_value else Path.home() / ".config"
        path = base / _APP_NAME
    else:
        path = Path.home() / f".{_APP_NAME}"
    path.mkdir(parents=True, exist_ok=True)
    return path


def default_config_path() -> Path:
    return get_config_dir() / _CONFIG_FILENAME


# --- Atomic file writes ---


def _atomic_write(path: Path, data: str) -> None:
    """Write data to file atomically using temp file + rename.

    The temporary file is created in the same directory as *path* so that
    ``os.replace`` is an atomic rename on POSIX systems.  On any failure the
    temp file is removed.
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


# --- Load / save ---


def load_config(path: Optional[Path] = None) -> ClientConfig:
    """Load the client configuration and apply environment overrides.

    Args:
        path: Config file to read.  Defaults to :func:`default_config_path`.

    Returns:
        The effective configuration.  A missing file yields the defaults.

    Raises:
        ConfigError: If the file cannot be read, contains invalid JSON, fails
            validation, or an environment override has an invalid value.
    """
    path = path if path is not None else default_config_path()
    config = ClientConfig()
    if path.is_file():
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
            config = ClientConfig.model_validate(data)
        except OSError as exc:
            raise ConfigError(f"Cannot read config at {path}: {exc}") from exc
        except (json.JSONDecodeError, ValidationError) as exc:
            raise ConfigError(f"Invalid config at {path}: {exc}") from exc

    env_timeout = os.environ.get(ENV_TIMEOUT)
    if env_timeout:
        try:
            config.timeout = float(env_timeout)
        except ValueError as exc:
            raise ConfigError(
                f"{ENV_TIMEOUT} must be a number of seconds, got {env_timeout!r}"
            ) from exc

    return config


def save_config(config: ClientConfig, path: Optional[Path] = None) -> Path:
    """Persist *config* atomically and return the path written."""
    path = path if path is not None else default_config_path()
    data = config.model_dump(mode="json")
    _atomic_write(path, json.dumps(data, indent=2) + "\n")
    return path
