# model.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Union


# ---------------------------------------------------------------------
# Refs and ref predicates
# ---------------------------------------------------------------------

@dataclass(frozen=True)
class Branch:
    name: str


@dataclass(frozen=True)
class Tag:
    name: str


Ref = Union[Branch, Tag]


@dataclass(frozen=True)
class Equals:
    ref: Ref


@dataclass(frozen=True)
class StartsWith:
    ref: Ref


@dataclass(frozen=True)
class EndsWith:
    ref: Ref


@dataclass(frozen=True)
class Contains:
    ref: Ref


RefPredicate = Union[Equals, StartsWith, EndsWith, Contains]


# ---------------------------------------------------------------------
# Workflow steps
# ---------------------------------------------------------------------

@dataclass(frozen=True)
class UseRef:
    """A public action, `owner/repo@ref`."""
    owner: str
    repo: str
    ref: str

    def __str__(self) -> str:
        return f"{self.owner}/{self.repo}@{self.ref}"


@dataclass(frozen=True)
class Run:
    """Shell commands run in one step."""
    commands: List[str]
    name: Optional[str] = None
    cond: Optional[str] = None
    env: Dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class Invoke:
    """Commands of the sitepilot CLI itself, one invocation per command."""
    commands: List[str]
    name: Optional[str] = None
    cond: Optional[str] = None
    env: Dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class Use:
    """A step that runs a published action."""
    ref: UseRef
    params: Dict[str, str] = field(default_factory=dict)
    name: Optional[str] = None
    cond: Optional[str] = None
    env: Dict[str, str] = field(default_factory=dict)


WorkflowStep = Union[Run, Invoke, Use]
STEP_TYPES = (Run, Invoke, Use)


@dataclass(frozen=True)
class WorkflowJob:
    """
    A CI job: id, display name, a single-axis runtime matrix and ordered steps.

    `pythons` and `oses` become the `python` and `os` matrix axes.
    """
    id: str
    name: str
    steps: List[WorkflowStep]
    pythons: List[str] = field(default_factory=list)
    oses: List[str] = field(default_factory=list)
