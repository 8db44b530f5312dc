# cli.py
from __future__ import annotations

import subprocess
import sys
from pathlib import Path

import click

from sitepilot.assets import ResourceNotFound
from sitepilot.git_facts.git import browse_url, get_remote_url, previous_releases
from sitepilot.plugin import site_job_for, site_task_for
from sitepilot.runner import CIError, StepFailure
from sitepilot.settings import ConfigError, SiteSettings, load_settings
from sitepilot.ui.console import Console, get_console, set_console
from sitepilot.versions import resolve_display_version
from sitepilot.workflow import check_workflow, render_workflow


def _load(root: str, project: str | None) -> SiteSettings:
    console = get_console()
    try:
        settings = load_settings(root, project)
    except ConfigError as e:
        console.print_error(
            "Invalid configuration",
            str(e),
            suggestion="Check the [tool.sitepilot] table in pyproject.toml.",
        )
        sys.exit(1)
    console.print_debug(f"settings: {settings.model_dump_json()}")
    return settings


def _repo_url(root: str) -> str | None:
    try:
        return browse_url(get_remote_url("origin", cwd=root))
    except (subprocess.CalledProcessError, FileNotFoundError):
        get_console().print_debug("no git remote 'origin', using the default repository link")
        return None


def _fail(e: Exception) -> None:
    get_console().print_exception(e)
    sys.exit(1)


@click.group()
@click.option(
    "--debug",
    is_flag=True,
    default=False,
    help="Enable debug mode (show stack traces and detailed output)",
)
@click.pass_context
def cli(ctx, debug):
    """sitepilot: generate a project's documentation site and its CI publishing job."""
    console = Console(debug=debug)
    set_console(console)
    ctx.ensure_object(dict)
    ctx.obj["debug"] = debug


@cli.command()
@click.option("--project", default=None, help="Project id (defaults to [project].name)")
@click.option("--root", default=".", show_default=True, help="Build root containing pyproject.toml")
@click.pass_context
def site(ctx, project, root):
    """Generate the site: evaluate the docs, then render them."""
    console = get_console()
    settings = _load(root, project)

    try:
        task = site_task_for(
            settings,
            Path(root),
            releases=lambda: previous_releases(cwd=root),
            repo_url=_repo_url(root),
        )
        console.print_site_started(
            project=settings.project,
            version=settings.version,
            source=str(settings.source_dir),
        )
        out = task()
        console.print_success(f"site written to {out}")

    except ResourceNotFound as e:
        console.print_error(
            "Broken installation",
            str(e),
            suggestion="Reinstall sitepilot:\n  pip install --force-reinstall sitepilot",
        )
        sys.exit(1)
    except (StepFailure, CIError) as e:
        console.print_error("Site generation failed", str(e))
        sys.exit(1)
    except KeyboardInterrupt:
        console.print_info("\nInterrupted by user")
        sys.exit(130)
    except Exception as e:
        _fail(e)


@cli.command()
@click.option("--project", default=None, help="Project id (defaults to [project].name)")
@click.option("--root", default=".", show_default=True, help="Build root containing pyproject.toml")
@click.option("--output", default=None, help="Workflow file (defaults to the workflow_file setting)")
@click.option("--check", is_flag=True, default=False, help="Fail if the workflow file is out of date")
@click.pass_context
def workflow(ctx, project, root, output, check):
    """Write the GitHub Actions workflow containing the site job."""
    console = get_console()
    settings = _load(root, project)
    path = Path(output) if output else Path(root) / settings.workflow_file

    try:
        job = site_job_for(settings, Path(root))
        text = render_workflow([job])
    except Exception as e:
        _fail(e)
        return

    if check:
        if not check_workflow(path, text):
            console.print_error(
                "Workflow is out of date",
                f"{path} does not match the generated workflow.",
                suggestion="Regenerate it:\n  sitepilot workflow",
            )
            sys.exit(1)
        console.print_info(f"{path} is up to date")
        return

    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    console.print_info(f"Wrote {path}")


@cli.command()
@click.option("--project", default=None, help="Project id (defaults to [project].name)")
@click.option("--root", default=".", show_default=True, help="Build root containing pyproject.toml")
@click.pass_context
def version(ctx, project, root):
    """Print the version the docs advertise."""
    settings = _load(root, project)
    try:
        click.echo(resolve_display_version(settings.version, lambda: previous_releases(cwd=root)))
    except (subprocess.CalledProcessError, FileNotFoundError) as e:
        get_console().print_error(
            "Could not read release tags",
            str(e),
            suggestion="Run inside a git checkout with git on PATH.",
        )
        sys.exit(1)


if __name__ == "__main__":
    cli()
