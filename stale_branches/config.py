"""Configuration for branch resolution.

Example (pyproject.toml):

    [tool.stale-branches]
    branch-prefix = "greenkeeper/"

    [tool.stale-branches.monorepo-groups]
    babel7 = ["@babel/core", "@babel/preset-env"]
"""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .monorepo import MonorepoDefinitions
from .toml import ConfigError, get_tool_table, load_toml

DEFAULT_BRANCH_PREFIX = "greenkeeper/"


class StaleBranchesConfig(BaseModel):
    """Static settings passed explicitly to every resolution call.

    Attributes:
        branch_prefix: Prepended to every update branch name.
        monorepo_groups: Release group name → packages published in it.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="forbid")

    branch_prefix: str = Field(default=DEFAULT_BRANCH_PREFIX, alias="branch-prefix")
    monorepo_groups: dict[str, list[str]] = Field(
        default_factory=dict, alias="monorepo-groups"
    )

    def monorepo_definitions(self) -> MonorepoDefinitions:
        return MonorepoDefinitions(self.monorepo_groups)


def load_config(path: Path | None = None) -> StaleBranchesConfig:
    """Load configuration from a TOML file.

    Args:
        path: A standalone config file or a pyproject.toml. If None,
              defaults are returned.

    Raises:
        ConfigError: If the file is unreadable or holds invalid settings.
    """
    if path is None:
        return StaleBranchesConfig()
    table = get_tool_table(load_toml(path))
    try:
        return StaleBranchesConfig.model_validate(table)
    except ValidationError as exc:
        raise ConfigError(f"Invalid configuration in {path}:\n{exc}") from exc


__all__ = ["ConfigError", "DEFAULT_BRANCH_PREFIX", "StaleBranchesConfig", "load_config"]
