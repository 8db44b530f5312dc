# theme.py
# Look and feel of the generated site, expressed as renderer configuration.

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

from .assets import FAVICON
from .settings import LayoutSettings, SiteSettings

STYLESHEET = "stylesheets/sitepilot.css"

ICON_API = "material/api"
ICON_GITHUB = "fontawesome/brands/github"
ICON_CHAT = "fontawesome/brands/discord"
ICON_TWITTER = "fontawesome/brands/twitter"


@dataclass(frozen=True)
class IconLink:
    url: str
    icon: str
    title: Optional[str] = None


@dataclass(frozen=True)
class HomeLink:
    url: str
    image: str


@dataclass(frozen=True)
class ThemeConfig:
    site_name: str
    layout: LayoutSettings
    home: HomeLink
    favicon: str = FAVICON
    nav_links: List[IconLink] = field(default_factory=list)


def nav_links(
    api_url: Optional[str],
    repo_url: str,
    chat_url: Optional[str] = None,
    twitter_url: Optional[str] = None,
) -> List[IconLink]:
    """Top bar links: API docs (when configured), repository, chat, twitter."""
    links = []
    if api_url:
        links.append(IconLink(api_url, ICON_API, "API docs"))
    links.append(IconLink(repo_url, ICON_GITHUB, "Source"))
    if chat_url:
        links.append(IconLink(chat_url, ICON_CHAT, "Chat"))
    if twitter_url:
        links.append(IconLink(twitter_url, ICON_TWITTER, "Twitter"))
    return links


def build_theme(settings: SiteSettings, logo_uri: str, repo_url: Optional[str] = None) -> ThemeConfig:
    return ThemeConfig(
        site_name=settings.display_name,
        layout=settings.layout,
        home=HomeLink(settings.home_url, logo_uri),
        nav_links=nav_links(
            str(settings.api_url) if settings.api_url else None,
            settings.repo_url or repo_url or settings.default_repo_url,
            settings.chat_url,
            settings.twitter_url,
        ),
    )


def layout_css(layout: LayoutSettings) -> str:
    lines = [
        ":root {",
        f"  --sitepilot-content-width: {layout.content_width}px;",
        f"  --sitepilot-navigation-width: {layout.navigation_width}px;",
        f"  --sitepilot-top-bar-height: {layout.top_bar_height}px;",
        f"  --sitepilot-block-spacing: {layout.block_spacing}px;",
        "}",
        ".md-grid { max-width: calc(var(--sitepilot-content-width) + 2 * var(--sitepilot-navigation-width)); }",
        ".md-content { max-width: var(--sitepilot-content-width); }",
        ".md-sidebar { width: var(--sitepilot-navigation-width); }",
        ".md-header { height: var(--sitepilot-top-bar-height); }",
        f".md-typeset {{ line-height: {layout.line_height}; }}",
        ".md-typeset p, .md-typeset pre, .md-typeset ul, .md-typeset ol"
        " { margin-block: var(--sitepilot-block-spacing); }",
    ]
    if layout.anchor_placement == "left":
        lines.append(".md-typeset .headerlink { float: left; margin-left: -1em; }")
    return "\n".join(lines) + "\n"


def renderer_config(theme: ThemeConfig, docs_dir: Path, site_dir: Path) -> Dict[str, Any]:
    """MkDocs configuration using the Material theme."""
    return {
        "site_name": theme.site_name,
        "docs_dir": str(docs_dir),
        "site_dir": str(site_dir),
        "theme": {
            "name": "material",
            "logo": theme.home.image,
            "favicon": theme.favicon,
        },
        "extra": {
            "homepage": theme.home.url,
            "social": [
                {"icon": link.icon, "link": link.url, **({"name": link.title} if link.title else {})}
                for link in theme.nav_links
            ],
        },
        "extra_css": [STYLESHEET],
        # GitHub flavoured markdown + syntax highlighting
        "markdown_extensions": [
            "tables",
            "pymdownx.tilde",
            "pymdownx.tasklist",
            "pymdownx.highlight",
            "pymdownx.superfences",
            {"toc": {"permalink": theme.layout.anchor_placement != "none"}},
        ],
    }
