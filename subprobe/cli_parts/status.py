from __future__ import annotations

from typing import Optional

from rich import box
from rich.panel import Panel
from rich.table import Table

from ..core import DEFAULT_WORDLIST
from ..output import console
from ..version import __version__
from .setup import _compact_home


def render_runtime_status_panel(
    target: str,
    candidate_count: int,
    threads: int,
    dns: Optional[str],
    timeout: Optional[float],
    wordlist: Optional[str],
    show_all: bool,
) -> None:
    """Render the startup header with the effective runtime settings."""
    status = Table(box=box.MINIMAL, show_header=False, pad_edge=False, expand=False)
    status.add_column("Key", width=12, no_wrap=True)
    status.add_column("Value", width=60, no_wrap=True, overflow="ellipsis")
    status.add_row("Target", target)
    status.add_row("Candidates", str(candidate_count))
    status.add_row("Threads", str(threads))
    status.add_row("DNS", dns or "system resolver")
    status.add_row("DNS Timeout", "resolver default" if timeout is None else str(timeout))
    status.add_row("Wordlist", wordlist or f"built-in ({_compact_home(DEFAULT_WORDLIST)})")
    status.add_row("View", "all results" if show_all else "successful only")
    console.print(Panel(status, title=f"Subprobe v{__version__}", border_style="blue", width=80, expand=False))


def wordlist_start_message(wordlist: Optional[str], count: int) -> str:
    if wordlist:
        return f"Loaded {count} subdomains from {wordlist}"
    return f"Loaded {count} subdomains (built-in list)"
