from __future__ import annotations

import os
import sys
from pathlib import Path
from typing import Optional

from rich import box
from rich.panel import Panel
from rich.table import Table

from ..core import DEFAULT_WORDLIST, DEFAULT_WORKERS
from ..output import console, err_console
from ..storage import get_settings, set_setting

THREAD_CHOICES = (5, 10, 20, 50, 100)


def _compact_home(path: Path) -> str:
    home = Path.home().resolve()
    resolved = path.expanduser().resolve()
    try:
        rel = resolved.relative_to(home)
        return f"~/{rel.as_posix()}" if str(rel) != "." else "~"
    except ValueError:
        return str(resolved)


def _normalize_optional(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    text = value.strip()
    return text if text else None


def _parse_float(value: Optional[str]) -> Optional[float]:
    if value is None or value == "":
        return None
    try:
        parsed = float(value)
    except ValueError:
        return None
    return parsed if parsed > 0 else None


def _parse_int(value: Optional[str]) -> Optional[int]:
    if value is None or value == "":
        return None
    try:
        parsed = int(value)
    except ValueError:
        return None
    return parsed if parsed > 0 else None


def load_saved_runtime_settings() -> dict:
    """Return runtime defaults: saved setup, then environment, then built-ins."""
    saved = get_settings(prefix="runtime.")

    def _pick(key: str, env: str) -> Optional[str]:
        return _normalize_optional(saved.get(key)) or _normalize_optional(os.getenv(env))

    return {
        "dns": _pick("runtime.dns", "SUBPROBE_DNS"),
        "timeout": _parse_float(_pick("runtime.timeout", "SUBPROBE_TIMEOUT")),
        "threads": _parse_int(_pick("runtime.threads", "SUBPROBE_THREADS")) or DEFAULT_WORKERS,
        "wordlist": _pick("runtime.wordlist", "SUBPROBE_WORDLIST"),
    }


def setup_mode() -> None:
    """Interactive setup editor for persisted runtime defaults."""
    if not sys.stdin.isatty():
        err_console.print("[red]--setup requires interactive terminal.[/red]")
        return

    current = load_saved_runtime_settings()
    config = {
        "dns": current["dns"],
        "timeout": current["timeout"],
        "threads": current["threads"],
        "wordlist": current["wordlist"],
    }
    default_wordlist_path = _compact_home(DEFAULT_WORDLIST)
    console.print(Panel.fit("Subprobe Setup", border_style="blue"))
    console.print("Select ID 1-4 to edit a single field. Use 0 to save and exit.")
    console.print("Use '-' to clear optional values (DNS/timeout/wordlist).")

    def _render_table(title: str) -> None:
        table = Table(title=title, box=box.SIMPLE_HEAVY)
        table.add_column("ID", style="cyan", justify="right")
        table.add_column("Key", style="cyan")
        table.add_column("Value", overflow="fold")
        table.add_row("1", "DNS", str(config["dns"] or "system resolver"))
        table.add_row("2", "DNS Timeout", str(config["timeout"] or "resolver default"))
        table.add_row("3", "Threads", str(config["threads"]))
        table.add_row(
            "4",
            "Wordlist",
            str(config["wordlist"]) if config["wordlist"] else f"default ({default_wordlist_path})",
        )
        console.print(table)

    def _ask_text(label: str, current_value: Optional[str]) -> Optional[str]:
        prompt = f"{label} [{current_value if current_value is not None else ''}]: "
        raw = input(prompt).strip()
        if raw == "":
            return current_value
        if raw == "-":
            return None
        return raw

    while True:
        _render_table("Current Setup")
        console.print("0 save and exit")
        choice = input("Select field [1-4] or 0 to save: ").strip()
        if choice == "0":
            break
        if choice == "1":
            config["dns"] = _ask_text("DNS server", config["dns"])
            continue
        if choice == "2":
            raw_timeout = input(f"DNS timeout seconds [{config['timeout'] or ''}]: ").strip()
            if raw_timeout == "-":
                config["timeout"] = None
            elif raw_timeout:
                parsed = _parse_float(raw_timeout)
                if parsed is None:
                    err_console.print("[yellow]Invalid timeout, value unchanged.[/yellow]")
                else:
                    config["timeout"] = parsed
            continue
        if choice == "3":
            choices = "/".join(str(c) for c in THREAD_CHOICES)
            raw_threads = input(f"Threads ({choices}) [{config['threads']}]: ").strip()
            if raw_threads:
                parsed_threads = _parse_int(raw_threads)
                if parsed_threads is None:
                    err_console.print("[yellow]Invalid threads, value unchanged.[/yellow]")
                else:
                    config["threads"] = parsed_threads
            continue
        if choice == "4":
            config["wordlist"] = _ask_text("Wordlist path", config["wordlist"])
            continue
        err_console.print("[red]Invalid selection.[/red] Use 0-4.")

    set_setting("runtime.dns", config["dns"])
    set_setting("runtime.timeout", None if config["timeout"] is None else str(config["timeout"]))
    set_setting("runtime.threads", str(config["threads"]))
    set_setting("runtime.wordlist", config["wordlist"])

    _render_table("Saved Setup")
