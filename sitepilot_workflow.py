# sitepilot_workflow.py
# Step overrides for this repository's own site job.
from __future__ import annotations

from sitepilot.model import Invoke, Run


def generate_steps():
    return [
        Run(["python -m pytest -q"], name="Test before publishing docs"),
        Invoke(["site --project sitepilot"], name="Generate site"),
    ]
