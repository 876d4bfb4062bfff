from __future__ import annotations

"""Terminal rendering helpers for subprobe.

This module contains presentation-only logic for scan progress and results.
It does not perform network or persistence operations.
"""

import json
import sys
from datetime import timedelta
from typing import Any, List, Optional, Sequence

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from .core import DEFAULT_WORDLIST, ValidationResult, ValidationStatus, fmt_td
from .storage import get_db_path

console = Console()
err_console = Console(stderr=True)


# Shared layout constants.
KV_FIELD_WIDTH = 24
SUMMARY_DOMAIN_WIDTH = 36
SUMMARY_IP_WIDTH = 40
SUMMARY_STATUS_WIDTH = 18
SUMMARY_METHOD_WIDTH = 8


def _table_width() -> int:
    try:
        return max(80, int(console.size.width) - 2)
    except Exception:
        return 100


def _new_table(
    *,
    title: Optional[str] = None,
    box_style: Any = box.SIMPLE,
    show_header: bool = True,
    header_style: Optional[str] = None,
) -> Table:
    return Table(
        title=title,
        box=box_style,
        show_header=show_header,
        header_style=header_style,
        title_justify="left",
        width=_table_width(),
        expand=False,
        pad_edge=False,
    )


def _add_kv_columns(table: Table) -> None:
    value_width = max(24, _table_width() - KV_FIELD_WIDTH - 8)
    table.add_column("Field", style="cyan", width=KV_FIELD_WIDTH, no_wrap=True)
    table.add_column("Value", width=value_width, overflow="fold", no_wrap=False)


def _fmt_status(status: ValidationStatus) -> str:
    if status is ValidationStatus.DNS_RESOLVED:
        return f"[green]{status.value}[/green]"
    if status in (ValidationStatus.HTTP_ACCESSIBLE, ValidationStatus.HTTPS_ACCESSIBLE):
        return f"[yellow]{status.value}[/yellow]"
    return f"[red]{status.value}[/red]"


def _fmt_optional(value: Any) -> str:
    if value in (None, ""):
        return "-"
    return str(value)


def format_progress(message: str) -> str:
    """Colorize a progress message for the console."""
    if message.startswith("Found subdomain:"):
        return f"[green][+][/green] {message}"
    if message.startswith("Wildcard DNS detected"):
        return f"[yellow][!][/yellow] {message}"
    if message in ("Scan completed", "Scan stopped"):
        return f"[bold cyan]{message}[/bold cyan]"
    return f"[cyan][*][/cyan] {message}"


def output(
    target_domain: str,
    results: Sequence[ValidationResult],
    elapsed: Optional[timedelta] = None,
    show_all: bool = False,
) -> None:
    """Render the results table shown after a scan.

    By default only successful results are listed; `show_all` includes
    failed candidates too.
    """
    items: List[ValidationResult] = list(results) if show_all else [r for r in results if r.ok]
    found = sum(1 for r in results if r.ok)
    if not items:
        err_console.print("[yellow]No results to display.[/yellow]")
    else:
        table = _new_table(box_style=box.SIMPLE_HEAVY, show_header=True, header_style="bold cyan")
        table.add_column("Subdomain", style="cyan", width=SUMMARY_DOMAIN_WIDTH, no_wrap=True, overflow="ellipsis")
        table.add_column("IP Address", width=SUMMARY_IP_WIDTH, overflow="fold")
        table.add_column("Status", width=SUMMARY_STATUS_WIDTH, no_wrap=True)
        table.add_column("Method", justify="center", width=SUMMARY_METHOD_WIDTH, no_wrap=True)
        if show_all:
            table.add_column("Error", overflow="fold")

        for item in items:
            row = [
                item.fqdn(target_domain),
                _fmt_optional(item.ip),
                _fmt_status(item.status),
                _fmt_optional(item.method.value),
            ]
            if show_all:
                row.append(_fmt_optional(item.error.reason if item.error else None))
            table.add_row(*row)
        console.print(table)

    console.print(
        Panel.fit(
            f"[bold]Found:[/bold] {found}  [bold]Checked:[/bold] {len(results)}  [bold]Elapsed:[/bold] {fmt_td(elapsed)}",
            border_style="cyan",
        )
    )


def print_json_output(results: Sequence[ValidationResult]) -> None:
    try:
        sys.stdout.write(json.dumps([r.to_dict() for r in results], ensure_ascii=False, indent=2))
        sys.stdout.write("\n")
    except BrokenPipeError:
        # Preserve CLI behavior on piped output (e.g. `| head`) without traceback noise.
        return


def print_scan_status(
    timeout: Optional[float],
    threads: int,
    dns: Optional[str],
    wordlist: Optional[str] = None,
    target_count: Optional[int] = None,
) -> None:
    default_status = "present" if DEFAULT_WORDLIST.is_file() else "missing"
    wordlist_mode = "custom" if wordlist else "default"

    table = _new_table(title="Scan Status", box_style=box.MINIMAL_DOUBLE_HEAD)
    _add_kv_columns(table)
    table.add_row("DNS Timeout", "resolver default" if timeout is None else str(timeout))
    table.add_row("Threads", str(threads))
    table.add_row("DNS", dns or "system resolver")
    table.add_row("Wordlist Mode", wordlist_mode)
    if wordlist:
        table.add_row("Wordlist", wordlist)
    table.add_row("Default Wordlist", f"{DEFAULT_WORDLIST} ({default_status})")
    if target_count is not None:
        table.add_row("Candidates", str(target_count))
    table.add_row("Settings DB", str(get_db_path()))
    console.print(table)
