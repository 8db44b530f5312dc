# workflow.py
from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Dict, List, Sequence

import yaml

from .model import Invoke, Run, Use, UseRef, WorkflowJob, WorkflowStep

CLI = "sitepilot"
SITE_JOB_ID = "site"
SITE_JOB_NAME = "Generate Site"
PUBLISH_BRANCH = "gh-pages"
GITHUB_TOKEN = "${{ secrets.GITHUB_TOKEN }}"


def publish_action(version: str = "v3.8.0") -> UseRef:
    return UseRef("peaceiris", "actions-gh-pages", version)


def publish_dir(build_root: str | Path, target_dir: str | Path) -> str:
    """`<target_dir>/site`, relative to the build root."""
    root = Path(build_root).resolve()
    site = (root / target_dir / "site").resolve()
    return Path(os.path.relpath(site, root)).as_posix()


# ---------------------------------------------------------------------
# Step lists
# ---------------------------------------------------------------------

# the generate step calls the sitepilot CLI, which renders with mkdocs
DEFAULT_INSTALL = (
    "python -m pip install --upgrade pip",
    "python -m pip install -e . 'sitepilot[mkdocs]'",
)


def job_setup_steps(install: Sequence[str] = DEFAULT_INSTALL) -> List[WorkflowStep]:
    return [
        Use(UseRef("actions", "checkout", "v4"), {"fetch-depth": "0"}, name="Checkout current branch (full)"),
        Use(UseRef("actions", "setup-python", "v5"), {"python-version": "${{ matrix.python }}"}, name="Setup Python"),
        Run(list(install), name="Install project"),
    ]


def generate_steps(project: str) -> List[WorkflowStep]:
    return [Invoke([f"site --project {project}"], name="Generate site")]


def publish_steps(publish_dir: str, cond: str, action_version: str = "v3.8.0") -> List[WorkflowStep]:
    return [
        Use(
            publish_action(action_version),
            {
                "github_token": GITHUB_TOKEN,
                "publish_dir": publish_dir,
                "publish_branch": PUBLISH_BRANCH,
            },
            name="Publish site",
            cond=cond,
        )
    ]


def site_job(
    setup: Sequence[WorkflowStep],
    generate: Sequence[WorkflowStep],
    publish: Sequence[WorkflowStep],
    python_version: str,
    runtimes: Sequence[str],
) -> WorkflowJob:
    """The `site` job: setup, then generate, then publish, on a one-entry matrix."""
    if not runtimes:
        raise ValueError("site job needs at least one runtime")
    return WorkflowJob(
        id=SITE_JOB_ID,
        name=SITE_JOB_NAME,
        steps=[*setup, *generate, *publish],
        pythons=[python_version],
        oses=[runtimes[0]],
    )


# ---------------------------------------------------------------------
# Serialization
# ---------------------------------------------------------------------

def compile_step(step: WorkflowStep) -> Dict[str, Any]:
    out: Dict[str, Any] = {}
    if step.name:
        out["name"] = step.name
    if step.cond:
        out["if"] = step.cond

    if isinstance(step, Use):
        out["uses"] = str(step.ref)
        if step.params:
            out["with"] = dict(step.params)
    elif isinstance(step, Invoke):
        out["run"] = "\n".join(f"{CLI} {cmd}" for cmd in step.commands)
    elif isinstance(step, Run):
        out["run"] = "\n".join(step.commands)
    else:
        raise TypeError(f"Unknown workflow step: {step!r}")

    if step.env:
        out["env"] = dict(step.env)
    return out


def compile_job(job: WorkflowJob) -> Dict[str, Any]:
    out: Dict[str, Any] = {"name": job.name}

    matrix: Dict[str, Any] = {}
    if job.oses:
        matrix["os"] = list(job.oses)
    if job.pythons:
        matrix["python"] = list(job.pythons)
    if matrix:
        out["strategy"] = {"matrix": matrix}

    out["runs-on"] = "${{ matrix.os }}" if job.oses else "ubuntu-latest"
    out["steps"] = [compile_step(s) for s in job.steps]
    return out


def render_workflow(jobs: Sequence[WorkflowJob], name: str = "Site") -> str:
    doc = {
        "name": name,
        "on": {
            "pull_request": {"branches": ["**"]},
            "push": {"branches": ["**"], "tags": ["v*"]},
        },
        "permissions": {"contents": "write"},
        "jobs": {job.id: compile_job(job) for job in jobs},
    }
    header = f"# This file was generated by {CLI}. Regenerate it with `{CLI} workflow`.\n\n"
    return header + yaml.safe_dump(doc, sort_keys=False, width=1000)


def check_workflow(path: str | Path, expected: str) -> bool:
    """True when the workflow on disk matches `expected`."""
    p = Path(path)
    if not p.exists():
        return False
    return p.read_text(encoding="utf-8") == expected
