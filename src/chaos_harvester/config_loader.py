"""
YAML configuration discovery and loading for chaos_harvester.

Config files are found by convention, merged so that the project-level
file wins, and ``${VAR}`` / ``${VAR:-default}`` references are resolved
against the environment.

Usage:
    from chaos_harvester.config_loader import load_hierarchical_config

    raw = load_hierarchical_config()
"""

import logging
import os
import re
from pathlib import Path
from typing import Any

import yaml

from .exceptions import ConfigError

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "CHAOS_HARVESTER_CONFIG"

# Matches ${VAR} and ${VAR:-default}
_ENV_REF = re.compile(r"\$\{([^}:]+?)(?::-(.*?))?\}")


def interpolate_env_vars(value: str) -> str:
    """Resolve ``${VAR}`` and ``${VAR:-default}`` references in *value*.

    An unset or empty VAR resolves to *default*, or to ``""`` when no
    default is given. A ``${`` without a closing brace is kept as is.
    """

    def _lookup(match: re.Match) -> str:
        current = os.environ.get(match.group(1))
        if current:
            return current
        return match.group(2) or ""

    return _ENV_REF.sub(_lookup, value)


def _interpolate_tree(node: Any) -> Any:
    if isinstance(node, str):
        return interpolate_env_vars(node)
    if isinstance(node, dict):
        return {key: _interpolate_tree(val) for key, val in node.items()}
    if isinstance(node, list):
        return [_interpolate_tree(item) for item in node]
    return node


def read_config_file(path: Path) -> dict[str, Any]:
    """Parse one YAML config file.

    Returns an empty dict for empty files.

    Raises:
        ConfigError: If the file is not valid YAML or its root is not a mapping.
    """
    try:
        with open(path, "r", encoding="utf-8") as fh:
            data = yaml.safe_load(fh)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid YAML in {path}: {exc}") from exc

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(
            f"Config file {path} must contain a mapping, got {type(data).__name__}"
        )
    return data


def discover_config_files() -> list[Path]:
    """Return existing config file paths, highest precedence first.

    Search order:
        1. ``CHAOS_HARVESTER_CONFIG`` env var (explicit single path)
        2. ``.chaos_harvester/config.yml`` in CWD (project-level)
        3. ``~/.config/chaos_harvester/config.yml`` (XDG global)
    """
    candidates: list[Path] = []

    explicit = os.environ.get(CONFIG_ENV_VAR)
    if explicit:
        candidates.append(Path(explicit).expanduser().resolve())

    candidates.append(Path.cwd() / ".chaos_harvester" / "config.yml")
    candidates.append(
        Path.home() / ".config" / "chaos_harvester" / "config.yml"
    )

    return [p for p in candidates if p.exists()]


def load_hierarchical_config() -> dict[str, Any]:
    """Load and merge all discovered config files.

    Files are applied from lowest precedence to highest; top-level
    sections of a higher-precedence file replace whole sections of a
    lower one. Env var references are resolved after the merge.

    Returns an empty dict when no config files exist (zero-config).
    """
    paths = discover_config_files()
    if not paths:
        logger.debug("No config files found, using defaults")
        return {}

    merged: dict[str, Any] = {}
    for path in reversed(paths):
        logger.debug("Loading config: %s", path)
        merged.update(read_config_file(path))

    return _interpolate_tree(merged)
