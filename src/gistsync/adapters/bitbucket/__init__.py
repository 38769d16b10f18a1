"""
Bitbucket target - mirrors gists as Bitbucket Cloud snippets.
"""

from .adapter import BitbucketAdapter
from .client import BitbucketApiClient


__all__ = ["BitbucketAdapter", "BitbucketApiClient"]
