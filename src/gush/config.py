"""Layered configuration store.

Configuration is read from, in increasing priority: built-in defaults,
the user file (``<home>/.gush.yml``), the project file
(``<cwd>/.gush.yml``) and explicit overrides. Sources are deep-merged so
a project file can override a single leaf of the home file without
restating its siblings.
"""

from __future__ import annotations

import copy
import logging
import os
import re
import tempfile
from pathlib import Path
from typing import Any

import yaml
from dotenv import find_dotenv, load_dotenv

from .errors import ConfigError

logger = logging.getLogger(__name__)

CONFIG_FILENAME = ".gush.yml"
_BRACKET_SEGMENT = re.compile(r"\[([^\[\]]*)\]")


class _Missing:
    """Marker returned by :meth:`Config.get` for paths that do not exist."""

    _instance: _Missing | None = None

    def __new__(cls) -> _Missing:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "MISSING"


MISSING: Any = _Missing()


def split_path(path: str) -> list[str]:
    """Split a dotted (``a.b.c``) or bracketed (``[a][b][c]``) path.

    Raises:
        ValueError: If the path is empty or a bracketed path is malformed.
    """
    if not path:
        raise ValueError("Configuration path must not be empty")
    if path.startswith("["):
        segments = _BRACKET_SEGMENT.findall(path)
        if "".join(f"[{s}]" for s in segments) != path:
            raise ValueError(f"Malformed configuration path '{path}'")
        return segments
    return path.split(".")


def deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Return a new dict with ``override`` merged into ``base`` key by key."""
    result = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(result.get(key), dict) and isinstance(value, dict):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = copy.deepcopy(value)
    return result


class Config:
    """Addressable configuration tree.

    Args:
        tree: Initial tree. Copied, never referenced.
    """

    def __init__(self, tree: dict[str, Any] | None = None) -> None:
        self._tree: dict[str, Any] = copy.deepcopy(tree) if tree else {}

    def get(self, path: str, default: Any = MISSING) -> Any:
        """Resolve ``path`` to its value.

        Args:
            path: Dotted or bracketed path, e.g. ``adapters.github.config``.
            default: Returned when the path does not exist.

        Returns:
            The stored value, or ``default`` (``MISSING`` unless given).
        """
        node: Any = self._tree
        for segment in split_path(path):
            if not isinstance(node, dict) or segment not in node:
                return default
            node = node[segment]
        return node

    def has(self, path: str) -> bool:
        return self.get(path) is not MISSING

    def merge(self, partial: dict[str, Any]) -> None:
        """Deep-merge ``partial`` in; its leaves win over existing ones."""
        self._tree = deep_merge(self._tree, partial)

    def raw(self) -> dict[str, Any]:
        """Return a copy of the whole tree."""
        return copy.deepcopy(self._tree)

    def __repr__(self) -> str:
        return f"Config({sorted(self._tree)!r})"


def default_home() -> Path:
    """Return the gush home directory (``$GUSH_HOME`` or ``~/.gush``)."""
    return Path(os.getenv("GUSH_HOME") or Path.home() / ".gush").expanduser()


def default_tree(home: Path, local: Path) -> dict[str, Any]:
    """Built-in defaults, the lowest-priority configuration layer."""
    return {
        "home": str(home),
        "home_config": str(home / CONFIG_FILENAME),
        "cache-dir": str(home / "cache"),
        "local": str(local),
        "local_config": str(local / CONFIG_FILENAME),
    }


def read_config_file(path: Path) -> dict[str, Any]:
    """Read one YAML configuration file.

    A missing file yields an empty mapping. A document holding only a
    ``parameters`` mapping is unwrapped.

    Raises:
        ConfigError: If the file cannot be read or is not a YAML mapping.
    """
    if not path.is_file():
        return {}
    try:
        text = path.read_text()
    except OSError as exc:
        raise ConfigError(f"Cannot read configuration file {path}: {exc}") from exc
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Malformed configuration file {path}: {exc}") from exc

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(
            f"Malformed configuration file {path}: expected a mapping, "
            f"got {type(data).__name__}"
        )
    if list(data) == ["parameters"] and isinstance(data["parameters"], dict):
        data = data["parameters"]
    logger.debug("Loaded configuration from %s", path)
    return data


def load_config(
    home: Path | None = None,
    local: Path | None = None,
    overrides: dict[str, Any] | None = None,
) -> Config:
    """Build the configuration for one invocation.

    Args:
        home: Directory holding the user file. Defaults to :func:`default_home`.
        local: Project directory. Defaults to the current directory.
        overrides: Highest-priority values, e.g. from command-line flags.

    Returns:
        The merged :class:`Config`.

    Raises:
        ConfigError: If any configuration file is malformed.
    """
    load_dotenv(find_dotenv(usecwd=True))
    home = Path(home) if home is not None else default_home()
    local = Path(local) if local is not None else Path.cwd()

    config = Config(default_tree(home, local))
    config.merge(read_config_file(home / CONFIG_FILENAME))
    if local.resolve() != home.resolve():
        config.merge(read_config_file(local / CONFIG_FILENAME))
    if overrides:
        config.merge(overrides)
    return config


def save_config(path: Path, tree: dict[str, Any]) -> Path:
    """Write ``tree`` to ``path`` under a ``parameters`` wrapper.

    Writes to a temporary file first, then renames it into place.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    data = yaml.safe_dump({"parameters": tree}, default_flow_style=False, sort_keys=False)

    fd, tmp_path = tempfile.mkstemp(dir=str(path.parent), suffix=".tmp", prefix=".gush-")
    closed = False
    try:
        os.write(fd, data.encode())
        os.close(fd)
        closed = True
        os.replace(tmp_path, str(path))
    except Exception:
        if not closed:
            os.close(fd)
        if os.path.exists(tmp_path):
            os.unlink(tmp_path)
        raise
    return path
