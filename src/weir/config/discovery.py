"""Config file discovery and loading.

Walk-up finder, similar to how git finds .git/.  In each directory a
``weir.toml`` wins over a ``pyproject.toml`` carrying a ``[tool.weir]``
table; a pyproject without that table is skipped.  The WEIR_CONFIG env var
and the --config CLI flag bypass the walk.
"""

from __future__ import annotations

import os
import tomllib
from pathlib import Path
from typing import Any

from weir.config.models import WeirConfig

CONFIG_FILENAME = "weir.toml"
PYPROJECT_FILENAME = "pyproject.toml"
CONFIG_ENV_VAR = "WEIR_CONFIG"


def _pyproject_has_table(path: Path) -> bool:
    try:
        data = tomllib.loads(path.read_text(encoding="utf-8"))
    except (OSError, tomllib.TOMLDecodeError):
        return False
    return isinstance(data.get("tool", {}).get("weir"), dict)


def find_config(start: Path | None = None) -> Path | None:
    """Walk up from *start* (default: cwd) looking for a config file.

    Returns the path to the config file, or None if not found.
    """
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        p = Path(env_path)
        return p if p.is_file() else None

    current = (start or Path.cwd()).resolve()
    while True:
        candidate = current / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
        pyproject = current / PYPROJECT_FILENAME
        if pyproject.is_file() and _pyproject_has_table(pyproject):
            return pyproject
        parent = current.parent
        if parent == current:
            return None
        current = parent


def read_config_data(path: Path) -> dict[str, Any]:
    """Parse *path* and return the weir settings table.

    For ``pyproject.toml`` that is ``[tool.weir]``; for any other file it
    is the whole document.  Raises ``tomllib.TOMLDecodeError`` on bad TOML.
    """
    data: dict[str, Any] = tomllib.loads(path.read_text(encoding="utf-8"))
    if path.name == PYPROJECT_FILENAME:
        return dict(data.get("tool", {}).get("weir", {}))
    return data


def load_config(path: Path | None = None, cwd: Path | None = None) -> WeirConfig:
    """Load and validate config.

    If *path* is None, uses find_config(*cwd*) to discover the file.
    Returns default WeirConfig if no file is found.
    """
    if path is None:
        path = find_config(cwd)
    if path is None:
        return WeirConfig()
    return WeirConfig.model_validate(read_config_data(path))
