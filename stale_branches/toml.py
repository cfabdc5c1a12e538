"""TOML reading utilities.

Uses tomlkit to read either a standalone configuration file or the
[tool.stale-branches] table of a pyproject.toml.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import tomlkit
from tomlkit.exceptions import ParseError

TOOL_NAME = "stale-branches"


class ConfigError(RuntimeError):
    """Raised when configuration cannot be read or is invalid."""


def load_toml(path: Path) -> tomlkit.TOMLDocument:
    """Load and parse a TOML file.

    Raises:
        ConfigError: If the file cannot be read or is not valid TOML.
    """
    try:
        return tomlkit.parse(Path(path).read_text())
    except OSError as exc:
        raise ConfigError(f"Cannot read {path}: {exc}") from exc
    except ParseError as exc:
        raise ConfigError(f"Invalid TOML in {path}: {exc}") from exc


def get_tool_table(doc: tomlkit.TOMLDocument) -> dict[str, Any]:
    """Extract the stale-branches settings from a parsed document.

    A pyproject.toml keeps them under [tool.stale-branches]; a standalone
    file keeps them at the top level. Returns plain Python values.
    """
    data = doc.unwrap()
    tool = data.get("tool", {}).get(TOOL_NAME)
    if tool is not None:
        return tool
    # A pyproject.toml without our table has nothing for us
    if "project" in data or "tool" in data or "build-system" in data:
        return {}
    return data
