# semver.py
# Release versions as they appear in git tags (v1.2.3, v1.2, v1.2.3-RC1).

from __future__ import annotations

import re
from dataclasses import dataclass
from functools import total_ordering
from typing import Optional

_VERSION = r"(0|[1-9]\d*)\.(0|[1-9]\d*)(?:\.(0|[1-9]\d*))?(?:-(.+))?"
TAG_RE = re.compile(rf"^v{_VERSION}$")
_PRERELEASE_PART = re.compile(r"\d+|\D+")


def _prerelease_key(label: Optional[str]) -> tuple:
    # numeric runs compare as numbers: RC2 < RC10
    if label is None:
        return ()
    return tuple(
        (0, int(part), "") if part.isdigit() else (1, 0, part)
        for part in _PRERELEASE_PART.findall(label)
    )


@total_ordering
@dataclass(frozen=True)
class Version:
    major: int
    minor: int
    patch: Optional[int] = None
    prerelease: Optional[str] = None

    @classmethod
    def from_tag(cls, tag: str) -> Optional[Version]:
        """Parse a `v`-prefixed tag name; returns None for any other tag."""
        m = TAG_RE.match(tag.strip())
        return cls._from_match(m) if m else None

    @classmethod
    def _from_match(cls, m: re.Match) -> Version:
        major, minor, patch, pre = m.groups()
        return cls(
            major=int(major),
            minor=int(minor),
            patch=int(patch) if patch is not None else None,
            prerelease=pre,
        )

    @property
    def is_prerelease(self) -> bool:
        return self.prerelease is not None

    @property
    def is_semver(self) -> bool:
        return self.patch is not None

    def _key(self) -> tuple:
        # a final release sorts above its own pre-releases
        return (
            self.major,
            self.minor,
            self.patch if self.patch is not None else -1,
            self.prerelease is None,
            _prerelease_key(self.prerelease),
        )

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return self._key() < other._key()

    def __str__(self) -> str:
        out = f"{self.major}.{self.minor}"
        if self.patch is not None:
            out += f".{self.patch}"
        if self.prerelease is not None:
            out += f"-{self.prerelease}"
        return out
