"""
Output - Console output formatting.

Provides pretty-printed output with colors and formatting.
"""

import sys

from gistsync.application.sync import SyncResult
from gistsync.core.domain.enums import OutcomeResult


class Colors:
    """ANSI color codes for terminal output."""

    RESET = "\033[0m"
    BOLD = "\033[1m"
    DIM = "\033[2m"

    RED = "\033[31m"
    GREEN = "\033[32m"
    YELLOW = "\033[33m"
    BLUE = "\033[34m"
    CYAN = "\033[36m"

    BG_YELLOW = "\033[43m"


class Symbols:
    """Unicode symbols for terminal output."""

    CHECK = "✓"
    CROSS = "✗"
    ARROW = "→"
    DOT = "•"
    WARN = "⚠"
    INFO = "ℹ"
    GEAR = "⚙"

    BOX_H = "─"


STATUS_BY_RESULT = {
    OutcomeResult.SKIPPED: "skip",
    OutcomeResult.FAILED: "fail",
}


class Console:
    """
    Console output helper with colors and formatting.

    Attributes:
        color: Whether to use ANSI color codes.
        verbose: Whether to print debug messages and every outcome.
        quiet: Whether to suppress most output (for cron and CI).
    """

    def __init__(
        self,
        color: bool = True,
        verbose: bool = False,
        quiet: bool = False,
    ):
        """
        Initialize the console output helper.

        Args:
            color: Enable colored output. Automatically disabled if stdout is not a TTY.
            verbose: Enable verbose output.
            quiet: Suppress most output, only show errors and final summary.
        """
        self.color = color and sys.stdout.isatty()
        self.verbose = verbose and not quiet
        self.quiet = quiet

    def _c(self, text: str, *codes: str) -> str:
        """Apply color codes to text (plain text if color is disabled)."""
        if not self.color:
            return text
        return "".join(codes) + text + Colors.RESET

    def print(self, text: str = "", force: bool = False) -> None:
        """
        Print text to stdout.

        Args:
            text: Text to print. Defaults to empty string for blank line.
            force: Print even in quiet mode.
        """
        if self.quiet and not force:
            return
        print(text)

    def header(self, text: str) -> None:
        if self.quiet:
            return
        width = max(len(text) + 4, 50)
        border = Colors.CYAN + Symbols.BOX_H * width + Colors.RESET if self.color else "-" * width

        self.print()
        self.print(border)
        self.print(self._c(f"  {text}", Colors.BOLD, Colors.CYAN))
        self.print(border)
        self.print()

    def section(self, text: str) -> None:
        if self.quiet:
            return
        self.print()
        self.print(self._c(f"{Symbols.ARROW} {text}", Colors.BOLD, Colors.BLUE))

    def success(self, text: str) -> None:
        if self.quiet:
            return
        self.print(self._c(f"  {Symbols.CHECK} {text}", Colors.GREEN))

    def error(self, text: str) -> None:
        """Print an error message. Always prints, even in quiet mode."""
        print(self._c(f"  {Symbols.CROSS} {text}", Colors.RED))

    def warning(self, text: str) -> None:
        if self.quiet:
            return
        self.print(self._c(f"  {Symbols.WARN} {text}", Colors.YELLOW))

    def info(self, text: str) -> None:
        if self.quiet:
            return
        self.print(self._c(f"  {Symbols.INFO} {text}", Colors.CYAN))

    def detail(self, text: str) -> None:
        if self.quiet:
            return
        self.print(self._c(f"    {text}", Colors.DIM))

    def debug(self, text: str) -> None:
        """Print debug message (only visible in verbose mode)."""
        if self.verbose:
            self.print(self._c(f"  [DEBUG] {text}", Colors.DIM))

    def item(self, text: str, status: str | None = None) -> None:
        """
        Print a list item with optional status indicator.

        Args:
            text: Item text to display.
            status: Optional status string. Special values:
                - "ok": Shows green checkmark
                - "skip": Shows yellow SKIP label
                - "fail": Shows red cross
                - Any other string: Shows dimmed label
        """
        if self.quiet:
            return
        status_str = ""
        if status == "ok":
            status_str = self._c(f" [{Symbols.CHECK}]", Colors.GREEN)
        elif status == "skip":
            status_str = self._c(" [SKIP]", Colors.YELLOW)
        elif status == "fail":
            status_str = self._c(f" [{Symbols.CROSS}]", Colors.RED)
        elif status:
            status_str = self._c(f" [{status}]", Colors.DIM)

        self.print(f"    {Symbols.DOT} {text}{status_str}")

    def table(self, headers: list[str], rows: list[list[str]]) -> None:
        """
        Print a formatted table with headers.

        Column widths are computed from the content.
        """
        if self.quiet:
            return
        widths = [len(h) for h in headers]
        for row in rows:
            for i, cell in enumerate(row):
                if i < len(widths):
                    widths[i] = max(widths[i], len(str(cell)))

        header_line = "  " + "  ".join(
            self._c(h.ljust(widths[i]), Colors.BOLD) for i, h in enumerate(headers)
        )
        self.print(header_line)
        self.print("  " + "  ".join("-" * w for w in widths))

        for row in rows:
            row_line = "  " + "  ".join(
                str(cell).ljust(widths[i]) if i < len(widths) else str(cell)
                for i, cell in enumerate(row)
            )
            self.print(row_line)

    def progress(self, current: int, total: int, message: str = "") -> None:
        """
        Print an updating progress bar.

        Updates in place on a TTY, prints one line per message otherwise.
        """
        if self.quiet or total <= 0:
            return

        width = 30
        filled = int(width * current / total)
        bar = "█" * filled + "░" * (width - filled)
        pct = int(100 * current / total)

        if sys.stdout.isatty():
            line = f"\r  [{bar}] {pct:>3}% {message[:40]:<40}"
            sys.stdout.write(line)
            sys.stdout.flush()
            if current >= total:
                self.print()
        else:
            self.print(f"  [{bar}] {pct:>3}% {message}")

    def dry_run_banner(self) -> None:
        if self.quiet:
            return
        self.print()
        banner = f"  {Symbols.GEAR} DRY-RUN MODE - No changes will be made"
        if self.color:
            self.print(f"{Colors.BG_YELLOW}{Colors.BOLD}{banner}{Colors.RESET}")
        else:
            self.print(f"*** {banner} ***")
        self.print()

    def sync_result(self, result: SyncResult) -> None:
        """
        Print a formatted sync result summary.

        In quiet mode, prints a single line summary suitable for cron and CI,
        followed by any errors.

        Args:
            result: SyncResult of the run.
        """
        if self.quiet:
            status = "OK" if result.success else "FAILED"
            mode = "dry-run" if result.dry_run else "executed"
            parts = [
                f"status={status}",
                f"mode={mode}",
                f"gists={result.gists_listed}",
                f"created={result.created}",
                f"updated={result.updated}",
                f"skipped={result.skipped}",
                f"deleted={result.deleted}",
            ]
            if result.failed:
                parts.append(f"failed={result.failed}")
            if result.cancelled:
                parts.append("cancelled=true")
            print(" ".join(parts))

            for e in result.errors:
                print(f"ERROR: {e}")
            return

        self.print()
        self.section("Sync Complete")
        self.print()

        if result.dry_run:
            mode_text = f"{Symbols.GEAR} Mode: DRY-RUN (no changes made)"
            self.print(f"  {self._c(mode_text, Colors.YELLOW)}")
        else:
            mode_text = f"{Symbols.CHECK} Mode: LIVE EXECUTION"
            self.print(f"  {self._c(mode_text, Colors.GREEN)}")
        if result.cancelled:
            self.warning("Cancelled before all gists were processed")
        self.print()

        if self.verbose:
            for outcome in result.outcomes:
                label = f"{outcome.target_name}: {outcome.identifier}"
                status = STATUS_BY_RESULT.get(outcome.result, outcome.result.value)
                self.item(label, status)
            self.print()

        stats = [
            ["Gists", str(result.gists_listed)],
            ["Created", str(result.created)],
            ["Updated", str(result.updated)],
            ["Skipped", str(result.skipped)],
        ]
        if result.deleted:
            stats.append(["Deleted", str(result.deleted)])
        stats.append(["Failed", str(result.failed)])
        self.table(["Metric", "Count"], stats)

        if result.warnings:
            self.print()
            self.warning(f"{len(result.warnings)} warning(s):")
            for w in result.warnings[:5]:
                self.detail(w)
            if len(result.warnings) > 5:
                self.detail(f"... and {len(result.warnings) - 5} more")

        if result.errors:
            self.print()
            self.error(f"{len(result.errors)} error(s):")
            for e in result.errors[:5]:
                self.detail(e)
            if len(result.errors) > 5:
                self.detail(f"... and {len(result.errors) - 5} more")

        self.print()
        if result.success:
            self.success("Sync completed successfully!")
        elif result.partial_success:
            self.warning("Sync completed with some failures")
        else:
            self.error("Sync completed with errors")
