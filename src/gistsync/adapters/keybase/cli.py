"""
Keybase CLI wrapper - runs ``keybase`` and ``git`` as subprocesses.

Keybase has no HTTP API for git repositories; everything goes through the
locally installed, logged-in ``keybase`` client and git's keybase://
remote helper.
"""

import logging
import shutil
import subprocess
import tempfile
from pathlib import Path

from ...core.domain.entities import SnippetFile
from ...core.exceptions import RequestTimeoutError, TransientError


DEFAULT_COMMAND_TIMEOUT = 120.0
COMMIT_MESSAGE = "Sync from gist-sync"


class KeybaseCli:
    """
    Thin wrapper over the keybase and git executables.

    Mutating commands respect dry_run mode.
    """

    PROVIDER = "Keybase"

    def __init__(
        self,
        dry_run: bool = True,
        timeout: float = DEFAULT_COMMAND_TIMEOUT,
        work_dir: str | None = None,
        keybase_bin: str = "keybase",
        git_bin: str = "git",
    ):
        self.dry_run = dry_run
        self.timeout = timeout
        self.work_dir = work_dir
        self.keybase_bin = keybase_bin
        self.git_bin = git_bin
        self.logger = logging.getLogger("KeybaseCli")

    # -------------------------------------------------------------------------
    # Process Execution
    # -------------------------------------------------------------------------

    def run(
        self, args: list[str], cwd: Path | None = None, check: bool = True
    ) -> subprocess.CompletedProcess:
        """
        Run a command and capture its output.

        Raises:
            TransientError: If the executable is missing or exits non-zero
                (when check is set).
            RequestTimeoutError: If the command does not finish in time.
        """
        self.logger.debug(f"Running: {' '.join(args)}")
        try:
            result = subprocess.run(
                args,
                cwd=cwd,
                capture_output=True,
                text=True,
                timeout=self.timeout,
            )
        except FileNotFoundError as e:
            raise TransientError(
                f"{args[0]} executable not found",
                resource=args[0],
                provider=self.PROVIDER,
                cause=e,
            ) from e
        except subprocess.TimeoutExpired as e:
            raise RequestTimeoutError(
                f"{' '.join(args[:3])} timed out after {self.timeout}s",
                resource=args[0],
                provider=self.PROVIDER,
                cause=e,
            ) from e

        if check and result.returncode != 0:
            stderr = (result.stderr or "").strip()[:500]
            raise TransientError(
                f"{' '.join(args[:3])} failed with exit code {result.returncode}: {stderr}",
                resource=args[0],
                provider=self.PROVIDER,
            )
        return result

    def keybase(self, *args: str, check: bool = True) -> subprocess.CompletedProcess:
        return self.run([self.keybase_bin, *args], check=check)

    def git(
        self, *args: str, cwd: Path | None = None, check: bool = True
    ) -> subprocess.CompletedProcess:
        return self.run([self.git_bin, *args], cwd=cwd, check=check)

    # -------------------------------------------------------------------------
    # Keybase Commands
    # -------------------------------------------------------------------------

    def is_available(self) -> bool:
        """True if the keybase client is installed and logged in."""
        if shutil.which(self.keybase_bin) is None:
            return False
        try:
            return self.keybase("status", check=False).returncode == 0
        except TransientError:
            return False

    def list_repo_urls(self, team: str | None = None) -> list[str]:
        """keybase:// URLs of the personal (or team) git repositories."""
        args = ["git", "list"]
        if team:
            args += ["--team", team]
        output = self.keybase(*args).stdout or ""
        urls = []
        for line in output.splitlines():
            for token in line.split():
                if token.startswith("keybase://"):
                    urls.append(token)
        return urls

    def create_repo(self, name: str, team: str | None = None) -> None:
        if self.dry_run:
            self.logger.info(f"[DRY-RUN] Would create Keybase repository {name}")
            return
        args = ["git", "create", name]
        if team:
            args += ["--team", team]
        self.keybase(*args)

    # -------------------------------------------------------------------------
    # Git Operations
    # -------------------------------------------------------------------------

    def push_files(self, remote_url: str, files: tuple[SnippetFile, ...]) -> bool:
        """
        Make the repository's tree equal to `files` and push it.

        Returns:
            True if a commit was pushed, False if nothing changed.
        """
        if self.dry_run:
            self.logger.info(f"[DRY-RUN] Would push {len(files)} files to {remote_url}")
            return False

        with tempfile.TemporaryDirectory(prefix="gist-sync-", dir=self.work_dir) as tmp:
            workdir = Path(tmp) / "repo"
            cloned = self.git("clone", "--quiet", remote_url, str(workdir), check=False)
            if cloned.returncode != 0:
                workdir.mkdir()
                self.git("init", "--quiet", cwd=workdir)
                self.git("remote", "add", "origin", remote_url, cwd=workdir)

            for path in workdir.iterdir():
                if path.name == ".git":
                    continue
                if path.is_dir():
                    shutil.rmtree(path)
                else:
                    path.unlink()

            for f in files:
                target = workdir / f.filename
                target.parent.mkdir(parents=True, exist_ok=True)
                target.write_text(f.content or "", encoding="utf-8")

            self.git("add", "-A", cwd=workdir)
            if self.git("diff", "--cached", "--quiet", cwd=workdir, check=False).returncode == 0:
                self.logger.debug(f"No changes to push to {remote_url}")
                return False

            self.git("commit", "--quiet", "-m", COMMIT_MESSAGE, cwd=workdir)
            pushed = self.git("push", "--quiet", "origin", "HEAD:main", cwd=workdir, check=False)
            if pushed.returncode != 0:
                self.git("push", "--quiet", "origin", "HEAD:master", cwd=workdir)
            return True
