"""
Keybase target - mirrors gists as Keybase encrypted git repositories.
"""

from .adapter import KeybaseAdapter
from .cli import KeybaseCli


__all__ = ["KeybaseAdapter", "KeybaseCli"]
