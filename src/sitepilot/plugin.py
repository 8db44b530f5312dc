# plugin.py
# Wires settings, versions, theme and steps into the two things sitepilot
# produces: the site task and the `site` CI job.

from __future__ import annotations

from pathlib import Path
from typing import Optional

from .assets import logo_data_uri
from .model import WorkflowJob
from .publish import build_publish_condition
from .runner import StepOverrides, load_step_overrides
from .settings import SiteSettings
from .site import SiteTask, site_task
from .theme import build_theme
from .versions import ReleaseProvider, site_variables
from .workflow import generate_steps, job_setup_steps, publish_dir, publish_steps, site_job


def site_task_for(
    settings: SiteSettings,
    root: Path = Path("."),
    releases: Optional[ReleaseProvider] = None,
    repo_url: Optional[str] = None,
) -> SiteTask:
    variables = site_variables(settings.version, releases)
    theme = build_theme(settings, logo_data_uri(), repo_url)
    return site_task(settings, theme, variables, root)


def site_job_for(
    settings: SiteSettings,
    root: Path = Path("."),
    overrides: Optional[StepOverrides] = None,
) -> WorkflowJob:
    if overrides is None:
        overrides = load_step_overrides(root / settings.overrides_file)

    generate = overrides.generate
    if generate is None:
        generate = generate_steps(settings.project)

    publish = overrides.publish
    if publish is None:
        _predicate, cond = build_publish_condition(settings.publish_branch)
        publish = publish_steps(
            publish_dir(root, settings.target_dir),
            cond,
            settings.publish_action_version,
        )

    return site_job(
        job_setup_steps(settings.install_commands),
        generate,
        publish,
        python_version=settings.python_version,
        runtimes=settings.runtimes,
    )
