# versions.py
from __future__ import annotations

from typing import Callable, Dict, Iterable, Optional

from .git_facts.git import previous_releases
from .git_facts.semver import Version

ReleaseProvider = Callable[[], Iterable[Version]]


def resolve_display_version(
    current: str,
    releases: Optional[ReleaseProvider] = None,
) -> str:
    """
    The version the docs should advertise.

    That is the most recent final release before HEAD; a project with no
    final release yet shows its own build version (e.g. 0.1.0-SNAPSHOT).
    Errors from the release provider propagate.
    """
    provider = releases or previous_releases
    for v in provider():
        if not v.is_prerelease:
            return str(v)
    return current


def site_variables(
    current: str,
    releases: Optional[ReleaseProvider] = None,
) -> Dict[str, str]:
    """Variables substituted into the docs as @VERSION@ and @SNAPSHOT_VERSION@."""
    return {
        "VERSION": resolve_display_version(current, releases),
        "SNAPSHOT_VERSION": current,
    }
