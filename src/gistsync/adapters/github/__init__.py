"""
GitHub source - reads the gists that get mirrored.
"""

from .client import GitHubApiClient
from .source import GitHubGistSource, parse_gist


__all__ = ["GitHubApiClient", "GitHubGistSource", "parse_gist"]
