# site.py
from __future__ import annotations

import re
import shutil
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Dict, Optional, Sequence

import yaml

from .assets import open_favicon
from .runner import format_command, run_command
from .settings import SiteSettings
from .theme import STYLESHEET, ThemeConfig, layout_css, renderer_config

_VARIABLE = re.compile(r"@([A-Z][A-Z0-9_]*)@")


@dataclass(frozen=True)
class SiteTask:
    """Evaluate the docs sources, then render the site from the evaluated tree."""
    evaluate: Callable[[], Path]
    render: Callable[[Path], Path]

    def __call__(self) -> Path:
        evaluated = self.evaluate()
        return self.render(evaluated)


def build_site_task(evaluate: Callable[[], Path], render: Callable[[Path], Path]) -> SiteTask:
    return SiteTask(evaluate=evaluate, render=render)


# ---------------------------------------------------------------------
# Steps
# ---------------------------------------------------------------------

def substitute(text: str, variables: Dict[str, str]) -> str:
    """Replace @NAME@ tokens; unknown names are left alone."""
    return _VARIABLE.sub(lambda m: variables.get(m.group(1), m.group(0)), text)


@dataclass(frozen=True)
class MdocStep:
    """
    Materialize the docs sources into `out`.

    Markdown files get their @VARIABLES@ substituted; everything else is
    copied as is. An optional external evaluator then runs over `out`.
    """
    source: Path
    out: Path
    variables: Dict[str, str] = field(default_factory=dict)
    command: Optional[Sequence[str]] = None
    cwd: Path = Path(".")

    def __call__(self) -> Path:
        if not self.source.is_dir():
            raise FileNotFoundError(f"docs source directory not found: {self.source}")

        # `out` is wiped and refilled from `source`, so neither may contain the other
        source, out = self.source.resolve(), self.out.resolve()
        if source == out or out.is_relative_to(source) or source.is_relative_to(out):
            raise ValueError(f"docs output {self.out} overlaps docs sources {self.source}")

        if self.out.exists():
            shutil.rmtree(self.out)
        shutil.copytree(self.source, self.out)

        for md in self.out.rglob("*.md"):
            text = md.read_text(encoding="utf-8")
            md.write_text(substitute(text, self.variables), encoding="utf-8")

        if self.command:
            argv = format_command(self.command, **{"in": self.source, "out": self.out})
            run_command("evaluate docs", argv, cwd=self.cwd)

        return self.out


@dataclass(frozen=True)
class RenderStep:
    """Render the site with an external renderer configured from `theme`."""
    theme: ThemeConfig
    site_dir: Path
    config_path: Path
    command: Sequence[str]
    cwd: Path = Path(".")

    def _write_assets(self, docs_dir: Path) -> None:
        favicon = docs_dir / self.theme.favicon
        favicon.parent.mkdir(parents=True, exist_ok=True)
        with open_favicon() as src, favicon.open("wb") as dst:
            shutil.copyfileobj(src, dst)

        css = docs_dir / STYLESHEET
        css.parent.mkdir(parents=True, exist_ok=True)
        css.write_text(layout_css(self.theme.layout), encoding="utf-8")

    def __call__(self, docs_dir: Path) -> Path:
        self._write_assets(docs_dir)

        config = renderer_config(self.theme, docs_dir.resolve(), self.site_dir.resolve())
        self.config_path.parent.mkdir(parents=True, exist_ok=True)
        self.config_path.write_text(
            yaml.safe_dump(config, sort_keys=False, allow_unicode=True),
            encoding="utf-8",
        )

        argv = format_command(
            self.command,
            config=self.config_path,
            **{"in": docs_dir, "out": self.site_dir},
        )
        run_command("render site", argv, cwd=self.cwd)
        return self.site_dir


def site_task(
    settings: SiteSettings,
    theme: ThemeConfig,
    variables: Dict[str, str],
    root: Path = Path("."),
) -> SiteTask:
    """The site task for one project, with paths resolved against `root`."""
    mdoc_out = root / settings.mdoc_out
    return build_site_task(
        MdocStep(
            source=root / settings.source_dir,
            out=mdoc_out,
            variables=variables,
            command=settings.evaluate_command,
            cwd=root,
        ),
        RenderStep(
            theme=theme,
            site_dir=root / settings.site_dir,
            config_path=root / settings.target_dir / "mkdocs.yml",
            command=settings.render_command,
            cwd=root,
        ),
    )
