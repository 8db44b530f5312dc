# git.py
# Small, focused wrapper around the Git CLI.
# All Git interactions go through here so the rest of the codebase
# never calls subprocess("git ...") directly.

from __future__ import annotations

import re
import subprocess
from pathlib import Path
from typing import List, Optional

from .semver import Version


def _git(args: list[str], cwd: Optional[str | Path] = None) -> str:
    """
    Execute a git command and return its stdout as a clean string.

    Every other function in this module builds on this one.

    Args:
        args: List of git arguments (e.g. ["tag", "--list"])
        cwd: Optional working directory in which to run the git command.

    Returns:
        Stdout from the git command with surrounding whitespace removed.

    Raises:
        subprocess.CalledProcessError: git exited with a non-zero status.
        FileNotFoundError: git is not installed.
    """
    out = subprocess.check_output(
        ["git", *args],
        cwd=cwd,
        text=True,
    )
    return out.strip()


def get_remote_url(remote: str = "origin", cwd: Optional[str | Path] = None) -> str:
    """URL configured for `remote`."""
    return _git(["remote", "get-url", remote], cwd=cwd)


def previous_releases(
    from_head: bool = False,
    strict: bool = True,
    cwd: Optional[str | Path] = None,
) -> List[Version]:
    """
    Versions released before HEAD, most recent first.

    Tags on HEAD itself are excluded, so a build of a tagged commit still
    sees the release before it. Tags that are not `v`-prefixed versions are
    ignored.

    Args:
        from_head: Only consider tags reachable from HEAD.
        strict: Require a patch component (v1.2.3, not v1.2).
        cwd: Optional working directory.

    Returns:
        Parsed versions, sorted descending.
    """
    args = ["tag", "--no-contains", "HEAD"]
    if from_head:
        args += ["--merged", "HEAD"]

    out = _git(args, cwd=cwd)
    if not out:
        return []

    versions = []
    for line in out.splitlines():
        v = Version.from_tag(line)
        if v is None:
            continue
        if strict and not v.is_semver:
            continue
        versions.append(v)

    return sorted(versions, reverse=True)


_SCP_LIKE = re.compile(r"^[\w.-]+@([\w.-]+):(.+)$")


def browse_url(remote_url: str) -> str:
    """
    Turn a clone URL into the URL a browser would open.

        git@github.com:org/repo.git  -> https://github.com/org/repo
        https://github.com/org/repo.git -> https://github.com/org/repo
    """
    url = remote_url.strip()
    m = _SCP_LIKE.match(url)
    if m:
        url = f"https://{m.group(1)}/{m.group(2)}"
    elif url.startswith("ssh://"):
        url = "https://" + url[len("ssh://"):].split("@", 1)[-1]
    if url.endswith(".git"):
        url = url[: -len(".git")]
    return url.rstrip("/")
