from __future__ import annotations

import subprocess

import pytest

from sitepilot.git_facts import git
from sitepilot.git_facts.git import browse_url, previous_releases
from sitepilot.git_facts.semver import Version
from sitepilot.versions import resolve_display_version, site_variables


def test_latest_final_release_wins(releases):
    assert resolve_display_version("2.1.0-SNAPSHOT", lambda: releases) == "1.5.0"


def test_no_releases_keeps_current_version():
    assert resolve_display_version("0.1.0-SNAPSHOT", lambda: []) == "0.1.0-SNAPSHOT"


def test_only_prereleases_keeps_current_version():
    only_pre = [Version(1, 0, 0, "M2"), Version(1, 0, 0, "M1")]
    assert resolve_display_version("1.0.0-SNAPSHOT", lambda: only_pre) == "1.0.0-SNAPSHOT"


def test_provider_errors_propagate():
    def broken():
        raise subprocess.CalledProcessError(128, ["git", "tag"])

    with pytest.raises(subprocess.CalledProcessError):
        resolve_display_version("1.0.0", broken)


def test_site_variables(releases):
    assert site_variables("2.1.0-SNAPSHOT", lambda: releases) == {
        "VERSION": "1.5.0",
        "SNAPSHOT_VERSION": "2.1.0-SNAPSHOT",
    }


def test_version_parsing_and_order():
    assert Version.from_tag("v1.2.3") == Version(1, 2, 3)
    assert Version.from_tag("v1.2.3-RC1") == Version(1, 2, 3, "RC1")
    assert Version.from_tag("v1.2") == Version(1, 2)
    assert Version.from_tag("1.2.3") is None
    assert Version.from_tag("release-1") is None

    assert Version(1, 2, 3, "RC1") < Version(1, 2, 3)
    assert Version(1, 2, 3) < Version(1, 10, 0)
    assert str(Version(1, 2, 3, "RC1")) == "1.2.3-RC1"
    assert Version(2, 0, 0, "RC1").is_prerelease
    assert not Version(2, 0, 0).is_prerelease


def test_previous_releases_parses_and_sorts(monkeypatch):
    calls = []

    def fake_git(args, cwd=None):
        calls.append(args)
        return "v1.4.0\nv1.10.0\nnot-a-version\nv2.0.0-RC1\nv1.5\nv1.5.0\n"

    monkeypatch.setattr(git, "_git", fake_git)

    versions = previous_releases()
    assert [str(v) for v in versions] == ["2.0.0-RC1", "1.10.0", "1.5.0", "1.4.0"]
    assert calls == [["tag", "--no-contains", "HEAD"]]


def test_previous_releases_non_strict_and_from_head(monkeypatch):
    seen = {}

    def fake_git(args, cwd=None):
        seen["args"] = args
        return "v1.5\nv1.4.0"

    monkeypatch.setattr(git, "_git", fake_git)

    assert [str(v) for v in previous_releases(from_head=True, strict=False)] == ["1.5", "1.4.0"]
    assert seen["args"][-2:] == ["--merged", "HEAD"]


def test_previous_releases_without_tags(monkeypatch):
    monkeypatch.setattr(git, "_git", lambda args, cwd=None: "")
    assert previous_releases() == []


@pytest.mark.parametrize(
    "remote, expected",
    [
        ("git@github.com:typelevel/sitepilot.git", "https://github.com/typelevel/sitepilot"),
        ("https://github.com/typelevel/sitepilot.git", "https://github.com/typelevel/sitepilot"),
        ("https://github.com/typelevel/sitepilot/", "https://github.com/typelevel/sitepilot"),
        ("ssh://git@github.com/typelevel/sitepilot.git", "https://github.com/typelevel/sitepilot"),
    ],
)
def test_browse_url(remote, expected):
    assert browse_url(remote) == expected


def test_prerelease_numbers_compare_numerically():
    assert Version(1, 0, 0, "RC2") < Version(1, 0, 0, "RC10")
    assert Version(1, 0, 0, "M1") < Version(1, 0, 0, "RC1")
    assert Version(1, 0, 0, "RC10") < Version(1, 0, 0)

    tags = ["v1.0.0-RC10", "v1.0.0-RC2", "v1.0.0", "v1.0.0-RC9"]
    ordered = sorted((Version.from_tag(t) for t in tags), reverse=True)
    assert [str(v) for v in ordered] == ["1.0.0", "1.0.0-RC10", "1.0.0-RC9", "1.0.0-RC2"]
