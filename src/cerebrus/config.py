"""Configuration management for Cerebrus.

Two layers:

- ``ActionContext`` describes a single invocation (which PR, which repo, which
  mode). It is built once at the boundary, either from GitHub Action inputs or
  from CLI options, and passed explicitly to everything else.
- ``CerebrusConfig`` holds project settings that rarely change, optionally
  overridden by a ``.cerebrus.json`` file at the repository root.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from pathlib import Path

from pydantic import BaseModel, Field, ValidationError, field_validator

from cerebrus.exceptions import ConfigError

CONFIG_FILE = ".cerebrus.json"
MODES = ("rules", "changenotes", "size:calc", "size:comment")


class CerebrusConfig(BaseModel):
    """Project settings."""

    releases_info_path: str = "editions/tw5.com/tiddlers/releasenotes/ReleasesInfo.multids"
    docs_url: str = "https://tiddlywiki.com/prerelease/#Release%20Notes%20and%20Changes"
    size_threshold_kb: int = 20
    build_output: str = "output/empty.html"


class ActionContext(BaseModel):
    """Everything one run needs to know about the pull request it checks."""

    repo: str
    pr_number: int = Field(gt=0)
    base_ref: str = ""
    token: str = ""
    mode: str = "rules"
    dry_run: bool = False
    pr_size: int | None = None
    base_size: int | None = None
    repo_path: str = "."

    @field_validator("repo")
    @classmethod
    def _check_repo(cls, value: str) -> str:
        owner, _, name = value.partition("/")
        if not owner or not name or "/" in name:
            raise ValueError(f"repo must look like 'owner/name', got {value!r}")
        return value

    @field_validator("mode")
    @classmethod
    def _check_mode(cls, value: str) -> str:
        if value not in MODES:
            raise ValueError(f"unknown mode {value!r}, expected one of {', '.join(MODES)}")
        return value

    @property
    def owner(self) -> str:
        return self.repo.split("/")[0]

    @property
    def repo_name(self) -> str:
        return self.repo.split("/")[1]

    @property
    def repo_url(self) -> str:
        return f"https://github.com/{self.repo}"


def is_github_actions(environ: Mapping[str, str]) -> bool:
    """True when running inside a GitHub Actions job."""
    return environ.get("GITHUB_ACTIONS") == "true"


def _action_input(environ: Mapping[str, str], name: str) -> str:
    # The runner exposes `with:` inputs as INPUT_<NAME>, upper-cased, dashes kept.
    return environ.get(f"INPUT_{name.upper()}", "").strip()


def context_from_action_env(environ: Mapping[str, str]) -> ActionContext:
    """Build the run context from GitHub Action inputs.

    Raises:
        ConfigError: a required input is missing or malformed.
    """
    required = ("repo", "pr_number", "base_ref", "github_token")
    missing = [name for name in required if not _action_input(environ, name)]
    if missing:
        raise ConfigError(f"Missing required action inputs: {', '.join(missing)}")

    data: dict = {
        "repo": _action_input(environ, "repo"),
        "pr_number": _action_input(environ, "pr_number"),
        "base_ref": _action_input(environ, "base_ref"),
        "token": _action_input(environ, "github_token"),
        "mode": _action_input(environ, "mode") or "rules",
        "dry_run": _action_input(environ, "dry_run") == "true",
        "repo_path": environ.get("GITHUB_WORKSPACE", "."),
    }
    # Sizes are validated later by the size comment handler, which owns their rules.
    for key in ("pr_size", "base_size"):
        raw = _action_input(environ, key)
        if raw:
            try:
                data[key] = int(float(raw))
            except (ValueError, OverflowError) as e:
                raise ConfigError(f"Invalid {key} input: {raw}") from e
    return build_context(**data)


def build_context(**values) -> ActionContext:
    """Validate raw values into an ActionContext, raising ConfigError on failure."""
    try:
        return ActionContext(**values)
    except ValidationError as e:
        raise ConfigError(str(e)) from e


def load_config(root: Path) -> CerebrusConfig:
    """Load settings from .cerebrus.json, falling back to defaults."""
    config_path = root / CONFIG_FILE
    if config_path.exists():
        try:
            data = json.loads(config_path.read_text())
            return CerebrusConfig(**data)
        except (json.JSONDecodeError, ValidationError) as e:
            raise ConfigError(f"Invalid {CONFIG_FILE}: {e}") from e
    return CerebrusConfig()


def save_config(root: Path, config: CerebrusConfig) -> None:
    """Save settings to .cerebrus.json."""
    config_path = root / CONFIG_FILE
    config_path.write_text(json.dumps(config.model_dump(), indent=2))
