from __future__ import annotations

"""Command-line interface for subprobe.

This module translates CLI flags into runtime settings, executes scans through
`subprobe.core`, and renders progress, results and exports.
"""

import argparse
import logging
import os
import re
import sys
from datetime import datetime
from typing import Callable, List, Optional

from rich.progress import (
    BarColumn,
    Progress,
    SpinnerColumn,
    TextColumn,
    TimeElapsedColumn,
)

from .core import DEFAULT_WORKERS, Scanner, ValidationResult, Wordlist, logger
from .cli_parts.setup import THREAD_CHOICES, load_saved_runtime_settings as _load_saved_runtime_settings, setup_mode as _setup_mode
from .cli_parts.status import render_runtime_status_panel as _render_runtime_status_panel, wordlist_start_message as _wordlist_start_message
from .errors import DictionaryLoadFailure, ExportFailure
from .output import console, err_console, format_progress, output, print_json_output, print_scan_status
from .storage import export_results
from .version import __version__

LABEL_RE = re.compile(r"^[a-z0-9-]+$")


def _normalize_domain_input(value: str) -> Optional[str]:
    host = (value or "").strip().lower()
    if not host:
        return None

    host = re.sub(r"^\w+://", "", host)
    host = host.split("/", 1)[0].split(":", 1)[0].strip(".")
    if host.startswith("www."):
        host = host[4:]
    if not host or " " in host:
        return None

    try:
        host = host.encode("idna").decode("ascii")
    except UnicodeError:
        return None

    if len(host) > 253:
        return None
    labels = host.split(".")
    if any(not lbl or len(lbl) > 63 for lbl in labels):
        return None
    if any(not LABEL_RE.match(lbl) or lbl.startswith("-") or lbl.endswith("-") for lbl in labels):
        return None
    return host


def _parse_threads(raw: Optional[str], default: int) -> int:
    if raw is None:
        return default
    try:
        value = int(str(raw).strip())
    except ValueError:
        return DEFAULT_WORKERS
    return value if value > 0 else DEFAULT_WORKERS


def _drain_progress(scanner: Scanner, emit: Callable[[str], None]) -> None:
    """Forward progress messages until the scan closes the stream.

    The first Ctrl-C asks workers to stop and keeps draining; a second one
    propagates.
    """
    while True:
        try:
            for message in scanner.progress():
                emit(message)
            return
        except KeyboardInterrupt:
            if scanner.stopped:
                raise
            scanner.stop()
            err_console.print("[yellow]Stopping: waiting for in-flight probes...[/yellow]")


def _run_with_rich_progress(scanner: Scanner, candidates: List[str], threads: int) -> None:
    """Execute scanning with a Rich progress bar bound to worker callbacks."""
    with Progress(
        SpinnerColumn(),
        TextColumn("[bold cyan]{task.description}"),
        BarColumn(),
        TextColumn("{task.completed}/{task.total}"),
        TimeElapsedColumn(),
        console=console,
    ) as progress:
        task_id = progress.add_task(f"Scanning {scanner.target_domain}", total=max(len(candidates), 1))

        def cb(done: int, total: int) -> None:
            progress.update(task_id, total=max(total, 1), completed=done)

        scanner.start(candidates, threads, progress_callback=cb)
        _drain_progress(scanner, lambda message: progress.console.print(format_progress(message)))
        scanner.wait()


def _run_silent(scanner: Scanner, candidates: List[str], threads: int) -> None:
    scanner.start(candidates, threads)
    _drain_progress(scanner, lambda message: None)
    scanner.wait()


def main() -> None:
    """CLI entrypoint.

    This function is responsible for argument parsing, config layering
    (CLI > saved setup > environment > built-in defaults), the scan itself
    and result handling.
    """
    parser = argparse.ArgumentParser(
        prog="subprobe",
        description=(
            f"subprobe v.{__version__} - Subdomain discovery with wildcard filtering\n"
            "CLI options > saved setup (--setup) > environment > built-in defaults."
        ),
    )
    target_group = parser.add_argument_group("Target")
    target_group.add_argument("-d", "--domain", help="Target domain (e.g. example.com).")
    target_group.add_argument(
        "-w",
        "--wordlist",
        help="Dictionary file, one label per line (default: built-in list of 100).",
        dest="wordlist",
    )

    runtime_group = parser.add_argument_group("Runtime Overrides")
    runtime_group.add_argument(
        "-t",
        "--threads",
        help=f"Concurrent workers, e.g. {', '.join(str(c) for c in THREAD_CHOICES)} (overrides saved setup).",
        dest="threads",
    )
    runtime_group.add_argument("--dns", help="DNS server (overrides saved setup).", dest="dns")
    runtime_group.add_argument(
        "--timeout",
        help="DNS timeout in seconds (overrides saved setup).",
        dest="timeout",
        type=float,
    )

    output_group = parser.add_argument_group("Output")
    output_group.add_argument("--all", help="Show failed candidates too.", dest="show_all", action="store_true")
    output_group.add_argument(
        "--export",
        nargs="?",
        const="",
        metavar="PATH",
        help="Export successful results to a text file (default name if PATH is omitted).",
    )
    output_group.add_argument("--silent", help="Silent mode (hide progress).", action="store_true")
    output_group.add_argument("--json", help="JSON-only output (forces --silent).", action="store_true")
    output_group.add_argument("--status", help="Print effective runtime status and continue.", action="store_true")
    output_group.add_argument("--debug", help="Log probe failures and scan lifecycle to stderr.", action="store_true")

    setup_group = parser.add_argument_group("Setup")
    setup_group.add_argument(
        "--setup",
        help="Interactive setup: save runtime defaults in the local DB.",
        action="store_true",
    )
    args = parser.parse_args()
    if args.json:
        args.silent = True
    if args.debug:
        logger.setLevel(logging.DEBUG)

    if args.setup:
        _setup_mode()
        return

    saved = _load_saved_runtime_settings()
    threads = _parse_threads(args.threads, saved["threads"])
    dns = args.dns or saved["dns"]
    timeout = args.timeout if args.timeout is not None else saved["timeout"]
    wordlist_path = args.wordlist if args.wordlist is not None else saved["wordlist"]

    if args.status and not args.json:
        print_scan_status(timeout, threads, dns, wordlist_path)

    if not args.domain:
        if args.status:
            return
        parser.print_help(sys.stderr)
        return

    domain = _normalize_domain_input(args.domain)
    if not domain:
        err_console.print(f"[red]Invalid domain input:[/red] {args.domain}")
        sys.exit(1)

    try:
        candidates = Wordlist(wordlist_path).load()
    except DictionaryLoadFailure as exc:
        err_console.print(f"[red]Failed to load subdomain dictionary:[/red] {exc}")
        sys.exit(1)

    if not args.silent:
        _render_runtime_status_panel(
            target=domain,
            candidate_count=len(candidates),
            threads=threads,
            dns=dns,
            timeout=timeout,
            wordlist=wordlist_path,
            show_all=args.show_all,
        )
        console.print(f"[cyan]{_wordlist_start_message(wordlist_path, len(candidates))}[/cyan]")

    scanner = Scanner(domain, dns_server=dns, timeout=timeout)
    start_time = datetime.now()
    if args.silent:
        _run_silent(scanner, candidates, threads)
    else:
        _run_with_rich_progress(scanner, candidates, threads)
    elapsed = datetime.now() - start_time

    results: List[ValidationResult] = scanner.snapshot()
    if args.json:
        print_json_output(results if args.show_all else [r for r in results if r.ok])
    else:
        output(domain, results, elapsed, show_all=args.show_all)

    if args.export is not None:
        try:
            path = export_results(domain, results, args.export or None)
        except ExportFailure as exc:
            err_console.print(f"[red]Export failed:[/red] {exc}")
            sys.exit(1)
        if not args.json:
            console.print(f"[green]Results exported to:[/green] {path}")


if __name__ == "__main__":
    try:
        main()
    except KeyboardInterrupt:
        err_console.print("\n[yellow]Interrupted[/yellow]")
        try:
            sys.exit(0)
        except SystemExit:
            os._exit(0)
