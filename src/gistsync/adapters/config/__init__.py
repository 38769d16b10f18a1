"""
Configuration adapters.
"""

from .file_provider import FileConfigProvider, default_config_paths


__all__ = ["FileConfigProvider", "default_config_paths"]
