"""
Gitea target - mirrors gists as repositories on Gitea, Codeberg or Forgejo.
"""

from .adapter import GiteaAdapter
from .client import GiteaApiClient


__all__ = ["GiteaAdapter", "GiteaApiClient"]
