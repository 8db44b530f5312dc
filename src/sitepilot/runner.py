# runner.py
from __future__ import annotations

import os
import runpy
import subprocess
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Sequence

from .model import STEP_TYPES, WorkflowStep
from .ui.console import get_console


@dataclass
class CIError(Exception):
    """
    Structured error with enough context for:
      - clean CLI output
      - debugging without full tracebacks
    """
    kind: str
    step: str | None
    message: str
    details: dict = field(default_factory=dict)

    def __str__(self) -> str:
        lines = [f"{self.kind}: {self.message}"]
        if self.step:
            lines.append(f"step={self.step}")
        for k, v in self.details.items():
            lines.append(f"{k}={v}")
        return "\n".join(lines)


@dataclass
class StepFailure(Exception):
    step: str
    cmd: str
    exit_code: int
    stderr: str = ""

    def __str__(self) -> str:
        msg = f"step '{self.step}' failed (exit={self.exit_code}): {self.cmd}"
        if self.stderr:
            msg += f"\n{self.stderr}"
        return msg


TOOL_HINTS = {
    "mkdocs": "Install MkDocs (e.g., pip install 'sitepilot[mkdocs]').",
    "git": "Install Git or fix PATH.",
    "python3": "Install Python 3 or fix PATH (python3).",
    "pytest": "Install pytest (e.g., pip install pytest).",
}


# ----------------------------------------------------------------------
# Execution primitives
# ----------------------------------------------------------------------

def format_command(argv: Sequence[str], **placeholders: object) -> List[str]:
    """Fill `{name}` placeholders in each argument."""
    values = {k: str(v) for k, v in placeholders.items()}
    return [arg.format(**values) for arg in argv]


def run_command(
    name: str,
    argv: Sequence[str],
    cwd: str | Path = ".",
    env: Optional[Dict[str, str]] = None,
) -> None:
    """
    Run an external tool to completion.

    Raises:
        CIError: the tool is not installed.
        StepFailure: the tool exited non-zero.
    """
    cwd = Path(cwd).resolve()
    if not cwd.exists():
        raise FileNotFoundError(f"step '{name}' cwd not found: {cwd}")

    full_env = os.environ.copy()
    full_env.update(env or {})

    console = get_console()
    console.print_step(name)
    console.print_debug(f"$ {' '.join(argv)} (cwd={cwd})")

    try:
        proc = subprocess.run(
            list(argv),
            cwd=str(cwd),
            env=full_env,
            text=True,
            capture_output=True,  # so output can be shown on failure
        )
    except FileNotFoundError as e:
        tool = argv[0]
        raise CIError(
            kind="tool_unavailable",
            step=name,
            message=f"{tool} is not available",
            details={"hint": TOOL_HINTS.get(tool, f"Install {tool} or fix PATH."), "tool": tool},
        ) from e

    if proc.stdout:
        console.print_debug(proc.stdout.rstrip())

    if proc.returncode != 0:
        raise StepFailure(
            step=name,
            cmd=" ".join(argv),
            exit_code=proc.returncode,
            stderr=proc.stderr[-4000:],
        )


# ----------------------------------------------------------------------
# Step overrides (local file)
# ----------------------------------------------------------------------

@dataclass(frozen=True)
class StepOverrides:
    generate: Optional[List[WorkflowStep]] = None
    publish: Optional[List[WorkflowStep]] = None


def _steps_from(globals_dict: dict, fn_name: str, const_name: str, path: Path) -> Optional[List[WorkflowStep]]:
    steps = None
    if fn_name in globals_dict and callable(globals_dict[fn_name]):
        steps = globals_dict[fn_name]()
    elif const_name in globals_dict:
        steps = globals_dict[const_name]
    else:
        return None

    if not isinstance(steps, list) or not all(isinstance(s, STEP_TYPES) for s in steps):
        raise TypeError(
            f"{path.name}: {fn_name}() / {const_name} must be a list of workflow steps "
            "(Run, Invoke or Use)."
        )
    return steps


def load_step_overrides(path: str | Path) -> StepOverrides:
    """
    Load generate/publish step overrides from a python file.

    The file may define any of:
      - generate_steps() -> list of steps, or GENERATE = [...]
      - publish_steps() -> list of steps, or PUBLISH = [...]

    A missing file means no overrides.
    """
    wf_path = Path(path).expanduser().resolve()
    if not wf_path.exists():
        return StepOverrides()
    if wf_path.suffix != ".py":
        raise ValueError(f"Step overrides must be a .py file, got: {wf_path.name}")

    module_name = f"sitepilot_workflow_{wf_path.stem}"
    globals_dict = runpy.run_path(str(wf_path), run_name=module_name)

    return StepOverrides(
        generate=_steps_from(globals_dict, "generate_steps", "GENERATE", wf_path),
        publish=_steps_from(globals_dict, "publish_steps", "PUBLISH", wf_path),
    )
