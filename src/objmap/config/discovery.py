"""Config file discovery and loading.

objmap settings live either in a dedicated ``objmap.toml`` or in the
``[tool.objmap]`` table of a ``pyproject.toml``. Discovery walks up from
the working directory like git looks for ``.git/``; in each directory
``objmap.toml`` wins over ``pyproject.toml``, and a ``pyproject.toml``
without a ``[tool.objmap]`` table is skipped. ``OBJMAP_CONFIG`` and the
``--config`` flag name a file directly.
"""

from __future__ import annotations

import os
import tomllib
from pathlib import Path
from typing import Any

from objmap.config.models import ObjmapConfig

CONFIG_FILENAME = "objmap.toml"
PYPROJECT_FILENAME = "pyproject.toml"
CONFIG_ENV_VAR = "OBJMAP_CONFIG"


def read_config_table(path: Path) -> dict[str, Any]:
    """The objmap settings stored in *path*.

    For a ``pyproject.toml`` that is the ``[tool.objmap]`` table (empty when
    absent); any other file is read whole.

    Raises:
        tomllib.TOMLDecodeError: If *path* is not valid TOML.
    """
    data = tomllib.loads(path.read_text(encoding="utf-8"))
    if path.name == PYPROJECT_FILENAME:
        return data.get("tool", {}).get("objmap", {})
    return data


def _declares_objmap(pyproject: Path) -> bool:
    try:
        return "objmap" in tomllib.loads(pyproject.read_text(encoding="utf-8")).get("tool", {})
    except tomllib.TOMLDecodeError:
        return False


def find_config(start: Path | None = None) -> Path | None:
    """Walk up from *start* (default: cwd) looking for objmap settings.

    ``OBJMAP_CONFIG`` wins when set; a path that does not exist yields None.
    """
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        p = Path(env_path)
        return p if p.is_file() else None

    current = (start or Path.cwd()).resolve()
    for directory in (current, *current.parents):
        candidate = directory / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
        pyproject = directory / PYPROJECT_FILENAME
        if pyproject.is_file() and _declares_objmap(pyproject):
            return pyproject
    return None


def load_config(path: Path | None = None, cwd: Path | None = None) -> ObjmapConfig:
    """Load and validate the settings sections of *path*.

    Falls back to ``find_config(cwd)`` when *path* is None, and to the
    defaults when nothing is found.
    """
    path = path or find_config(cwd)
    if path is None:
        return ObjmapConfig()
    return ObjmapConfig.model_validate(read_config_table(path))
