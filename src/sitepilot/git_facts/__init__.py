from .git import browse_url, get_remote_url, previous_releases
from .semver import Version

__all__ = ["browse_url", "get_remote_url", "previous_releases", "Version"]
