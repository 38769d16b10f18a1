"""
GitLab target - mirrors gists as native GitLab snippets.
"""

from .adapter import GitLabAdapter
from .client import GitLabApiClient


__all__ = ["GitLabAdapter", "GitLabApiClient"]
