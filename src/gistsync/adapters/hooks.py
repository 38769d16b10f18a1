"""
Shell Hook Runner - runs lifecycle hooks through the system shell.

Hooks are best effort: a failing or missing command is logged and the sync
carries on.
"""

import logging
import subprocess

from ..core.ports.hook_runner import HookRunnerPort


DEFAULT_HOOK_TIMEOUT = 300.0


class ShellHookRunner(HookRunnerPort):
    """Runs hook commands with ``shell=True`` and a timeout."""

    def __init__(self, timeout: float = DEFAULT_HOOK_TIMEOUT):
        self.timeout = timeout
        self.logger = logging.getLogger("ShellHookRunner")

    def run(self, name: str, command: str) -> bool:
        if not command:
            return True

        self.logger.info(f"Running {name} hook: {command}")
        try:
            result = subprocess.run(
                command,
                shell=True,
                capture_output=True,
                text=True,
                timeout=self.timeout,
            )
        except subprocess.TimeoutExpired:
            self.logger.warning(f"{name} hook timed out after {self.timeout}s")
            return False
        except OSError as e:
            self.logger.warning(f"{name} hook could not be started: {e}")
            return False

        if result.stdout:
            self.logger.debug(f"{name} hook output: {result.stdout.strip()}")
        if result.returncode != 0:
            stderr = (result.stderr or "").strip()
            self.logger.warning(f"{name} hook failed with exit code {result.returncode}: {stderr}")
            return False
        return True
