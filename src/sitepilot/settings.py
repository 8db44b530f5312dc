# settings.py
# Build-wide defaults + per-project overrides, merged once into an
# immutable SiteSettings that is passed to every component.

from __future__ import annotations

import os
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Literal, Mapping, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, HttpUrl, ValidationError, field_validator

from .workflow import DEFAULT_INSTALL

PUBLISH_BRANCH_ENV = "SITEPILOT_PUBLISH_BRANCH"
PYTHON_VERSION_ENV = "SITEPILOT_PYTHON_VERSION"

DEFAULT_PROJECT = "docs"
DEFAULT_VERSION = "0.0.0-SNAPSHOT"


@dataclass
class ConfigError(Exception):
    source: str
    message: str

    def __str__(self) -> str:
        return f"invalid configuration in {self.source}: {self.message}"


class LayoutSettings(BaseModel):
    """Page geometry of the generated site, in px."""
    model_config = ConfigDict(frozen=True, extra="forbid")

    content_width: int = 860
    navigation_width: int = 275
    top_bar_height: int = 50
    block_spacing: int = 10
    line_height: float = 1.5
    anchor_placement: Literal["left", "right", "none"] = "right"


class SiteSettings(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    project: str = DEFAULT_PROJECT
    site_name: Optional[str] = None
    version: str = DEFAULT_VERSION

    # navigation
    api_url: Optional[HttpUrl] = None
    repo_url: Optional[str] = None
    default_repo_url: str = "https://github.com/typelevel"
    home_url: str = "https://typelevel.org"
    chat_url: Optional[str] = "https://discord.gg/XF3CXcMzqD"
    twitter_url: Optional[str] = "https://twitter.com/typelevel"
    layout: LayoutSettings = Field(default_factory=LayoutSettings)

    # generation
    source_dir: Path = Path("docs")
    mdoc_out: Path = Path("target/mdoc")
    target_dir: Path = Path("target/docs")
    evaluate_command: Optional[Tuple[str, ...]] = None
    render_command: Tuple[str, ...] = ("mkdocs", "build", "--clean", "--config-file", "{config}")

    # CI
    publish_branch: Optional[str] = "main"
    publish_action_version: str = "v3.8.0"
    python_version: str = "3.12"
    runtimes: Tuple[str, ...] = ("ubuntu-latest",)
    install_commands: Tuple[str, ...] = DEFAULT_INSTALL
    workflow_file: Path = Path(".github/workflows/site.yml")
    overrides_file: Path = Path("sitepilot_workflow.py")

    @field_validator("publish_branch", mode="before")
    @classmethod
    def _tag_only(cls, v: Any) -> Any:
        # TOML has no null: `publish_branch = false` (or "") means tag releases only
        if v is False or v == "":
            return None
        return v

    @property
    def site_dir(self) -> Path:
        return self.target_dir / "site"

    @property
    def display_name(self) -> str:
        return self.site_name or self.project


def _read_pyproject(path: Path) -> Dict[str, Any]:
    if not path.exists():
        return {}
    try:
        with path.open("rb") as f:
            return tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(str(path), str(e)) from e


def _merge(base: Dict[str, Any], override: Mapping[str, Any]) -> Dict[str, Any]:
    out = dict(base)
    for k, v in override.items():
        if isinstance(v, Mapping) and isinstance(out.get(k), Mapping):
            out[k] = _merge(dict(out[k]), v)
        else:
            out[k] = v
    return out


def load_settings(
    root: str | Path = ".",
    project: Optional[str] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> SiteSettings:
    """
    Read `[tool.sitepilot]` from `<root>/pyproject.toml`.

    Precedence, lowest first: defaults, `[project]` name/version,
    `[tool.sitepilot]`, `[tool.sitepilot.projects.<project>]`, environment.
    """
    pyproject = Path(root) / "pyproject.toml"
    data = _read_pyproject(pyproject)
    env = os.environ if environ is None else environ

    merged: Dict[str, Any] = {}
    meta = data.get("project", {})
    if "name" in meta:
        merged["project"] = meta["name"]
    if "version" in meta:
        merged["version"] = meta["version"]

    tool = dict(data.get("tool", {}).get("sitepilot", {}))
    per_project = tool.pop("projects", {})
    merged = _merge(merged, tool)

    project_id = project or merged.get("project", DEFAULT_PROJECT)
    merged["project"] = project_id
    merged = _merge(merged, per_project.get(project_id, {}))

    if PUBLISH_BRANCH_ENV in env:
        merged["publish_branch"] = env[PUBLISH_BRANCH_ENV]
    if PYTHON_VERSION_ENV in env:
        merged["python_version"] = env[PYTHON_VERSION_ENV]

    try:
        return SiteSettings.model_validate(merged)
    except ValidationError as e:
        raise ConfigError(str(pyproject), str(e)) from e
