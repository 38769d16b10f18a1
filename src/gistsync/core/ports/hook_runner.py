"""
Hook Runner Port - runs user-configured commands around a sync run.
"""

from abc import ABC, abstractmethod


class HookRunnerPort(ABC):
    """Executes lifecycle hooks. Implementations never raise."""

    @abstractmethod
    def run(self, name: str, command: str) -> bool:
        """
        Run a hook command.

        Args:
            name: Hook name for logging (pre_sync, post_sync, on_error).
            command: Command line to execute.

        Returns:
            True if the command exited successfully.
        """
        ...
