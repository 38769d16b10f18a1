"""
Adapters - concrete implementations of the core ports.

- github: gist source
- gitlab, gitea, bitbucket, keybase: snippet targets
- config: TOML/YAML configuration loading
- hooks: shell hook execution
"""

from .config import FileConfigProvider
from .github import GitHubGistSource
from .hooks import ShellHookRunner


__all__ = ["FileConfigProvider", "GitHubGistSource", "ShellHookRunner"]
