"""pswap - interactive Textual view of one scan."""

from pathlib import Path

from textual.app import App, ComposeResult
from textual.containers import Container
from textual.widgets import DataTable, Footer, Static

from pswap.models import ProcessStatus
from pswap.reader import (
    PROC_ROOT,
    SortKey,
    SwapReport,
    SystemSwap,
    collect_report,
    sort_statuses,
    system_swap,
)


def format_kb(size: int) -> str:
    """Format a kB amount as a human-readable string."""
    for unit in ["K", "M", "G"]:
        if size < 1024:
            return f"{size:5d}{unit}" if unit == "K" else f"{size:5.1f}{unit}"
        size = size / 1024
    return f"{size:.1f}T"


class SwapSummary(Static):
    """Header widget showing totals for the scan."""

    DEFAULT_CSS = """
    SwapSummary {
        height: auto;
        padding: 1;
        background: $surface;
    }
    """

    def __init__(self, report: SwapReport, system: SystemSwap | None = None, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self._report = report
        self._system = system

    def on_mount(self) -> None:
        self.update(self.render_summary())

    def render_summary(self) -> str:
        """Build the summary text."""
        report = self._report
        lines = [
            f"Processes: {len(report.statuses)}    Failed: {len(report.errors)}",
            f"Process swap total: {format_kb(report.total_swap_kb).strip()}",
        ]
        if self._system is not None:
            used = format_kb(self._system.used_kb).strip()
            total = format_kb(self._system.total_kb).strip()
            lines.append(f"System swap: {used}/{total}")
        return "\n".join(lines)


class SwapTable(Container):
    """Container for the per-process swap table."""

    DEFAULT_CSS = """
    SwapTable {
        height: 1fr;
        border: solid $primary;
    }
    """

    def __init__(self, statuses: list[ProcessStatus], *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self._statuses = statuses
        self._sort_key: SortKey = SortKey.SWAP

    @property
    def sort_key(self) -> SortKey:
        """Get current sort key."""
        return self._sort_key

    def cycle_sort(self) -> SortKey:
        """Cycle to the next sort key, re-sort the rows and return the key."""
        keys = list(SortKey)
        next_index = (keys.index(self._sort_key) + 1) % len(keys)
        self._sort_key = keys[next_index]
        self._populate()
        return self._sort_key

    def compose(self) -> ComposeResult:
        yield DataTable(id="swap-table")

    def on_mount(self) -> None:
        table = self.query_one("#swap-table", DataTable)
        table.cursor_type = "row"
        table.add_column("PID", key="pid", width=8)
        table.add_column("SWAP", key="swap", width=10)
        table.add_column("NAME", key="name")
        self._populate()

    def _populate(self) -> None:
        table = self.query_one("#swap-table", DataTable)
        table.clear()
        # pid is not unique when records without a Pid line are accepted
        for index, status in enumerate(sort_statuses(self._statuses, self._sort_key)):
            table.add_row(
                str(status.pid),
                format_kb(status.swap_kb_or_zero),
                status.name,
                key=f"{status.pid}-{index}",
            )


class PswapApp(App):
    """Interactive swap report. Shows a single scan; it does not refresh."""

    TITLE = "pswap"
    SUB_TITLE = "Per-process swap usage"

    CSS = """
    Screen {
        layout: vertical;
    }

    #swap-summary {
        dock: top;
        height: auto;
    }
    """

    BINDINGS = [
        ("q", "quit", "Quit"),
        ("f6", "sort", "Sort"),
    ]

    def __init__(
        self,
        report: SwapReport | None = None,
        *,
        proc_root: Path | str = PROC_ROOT,
        system: SystemSwap | None = None,
    ) -> None:
        """
        Initialize the PswapApp.

        Args:
            report: Scan to display. Collected from proc_root when omitted.
            proc_root: Directory scanned when no report is given.
            system: Host-wide swap figures. Read via psutil when omitted.
        """
        super().__init__()
        self._report = report if report is not None else collect_report(proc_root)
        if system is None:
            try:
                system = system_swap()
            except (OSError, RuntimeError):
                system = None
        self._system = system

    @property
    def report(self) -> SwapReport:
        return self._report

    def compose(self) -> ComposeResult:
        yield SwapSummary(self._report, self._system, id="swap-summary")
        yield SwapTable(self._report.statuses)
        yield Footer()

    def action_sort(self) -> None:
        """Cycle through sort keys."""
        new_sort_key = self.query_one(SwapTable).cycle_sort()
        self.notify(f"Sort: {new_sort_key.value.upper()}")

    def action_quit(self) -> None:
        self.exit()

