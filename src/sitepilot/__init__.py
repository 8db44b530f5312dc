from .model import Branch, Contains, EndsWith, Equals, Invoke, Run, StartsWith, Tag, Use, UseRef, WorkflowJob
from .plugin import site_job_for, site_task_for
from .settings import SiteSettings, load_settings

__all__ = [
    "Branch", "Contains", "EndsWith", "Equals", "Invoke", "Run", "StartsWith", "Tag", "Use", "UseRef",
    "WorkflowJob", "site_job_for", "site_task_for", "SiteSettings", "load_settings",
]
