# publish.py
from __future__ import annotations

from typing import Optional, Tuple

from .model import Branch, Contains, EndsWith, Equals, Ref, RefPredicate, StartsWith, Tag

NOT_PULL_REQUEST = "github.event_name != 'pull_request'"
REF_VARIABLE = "github.ref"
RELEASE_TAG_PREFIX = "v"


def compile_ref(ref: Ref) -> str:
    if isinstance(ref, Branch):
        return f"refs/heads/{ref.name}"
    if isinstance(ref, Tag):
        return f"refs/tags/{ref.name}"
    raise TypeError(f"Unknown ref: {ref!r}")


def _kind_prefix(ref: Ref) -> str:
    return "refs/heads/" if isinstance(ref, Branch) else "refs/tags/"


def compile_branch_predicate(target: str, predicate: RefPredicate) -> str:
    """Compile a ref predicate into a GitHub Actions expression over `target`."""
    if isinstance(predicate, Equals):
        return f"{target} == '{compile_ref(predicate.ref)}'"
    if isinstance(predicate, StartsWith):
        return f"startsWith({target}, '{compile_ref(predicate.ref)}')"
    if isinstance(predicate, EndsWith):
        return f"(startsWith({target}, '{_kind_prefix(predicate.ref)}') && endsWith({target}, '{predicate.ref.name}'))"
    if isinstance(predicate, Contains):
        return f"(startsWith({target}, '{_kind_prefix(predicate.ref)}') && contains({target}, '{predicate.ref.name}'))"
    raise TypeError(f"Unknown ref predicate: {predicate!r}")


def publish_predicate(branch: Optional[str]) -> RefPredicate:
    # either publish from a branch or on release tags, never both
    if branch is None:
        return StartsWith(Tag(RELEASE_TAG_PREFIX))
    return Equals(Branch(branch))


def build_publish_condition(branch: Optional[str]) -> Tuple[RefPredicate, str]:
    """
    Predicate and `if:` expression for the publish step.

    Pull-request runs never publish, whatever the ref.
    """
    predicate = publish_predicate(branch)
    compiled = compile_branch_predicate(REF_VARIABLE, predicate)
    return predicate, f"{NOT_PULL_REQUEST} && {compiled}"
