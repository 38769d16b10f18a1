"""
gist-sync - Mirror GitHub gists to snippets on other code hosting platforms.

Layout:
- core: domain model, ports (interfaces) and exceptions
- adapters: platform clients (GitHub, GitLab, Gitea family, Bitbucket, Keybase),
  configuration loading and hook execution
- application: the sync engine (identifier derivation, filters, orchestrator)
- cli: command line entry point
"""

__version__ = "1.0.0"

__all__ = ["__version__"]
