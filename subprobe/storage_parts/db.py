from __future__ import annotations

import os
import sqlite3
from pathlib import Path
from typing import Dict, Optional


def _harden_user_file(path: Path) -> None:
    try:
        os.chmod(path, 0o600)
    except OSError:
        pass


def get_db_path() -> Path:
    custom = os.getenv("SUBPROBE_DB")
    if custom:
        path = Path(custom).expanduser().resolve()
    else:
        path = Path.home() / ".subprobe" / "settings.db"
    path.parent.mkdir(parents=True, exist_ok=True)
    return path


def init_db(db_path: Optional[Path] = None) -> Path:
    """Initialize DB schema and return DB path.

    Called by all storage entrypoints to ensure schema is available.
    """
    path = db_path or get_db_path()
    conn = sqlite3.connect(path)
    try:
        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS settings (
                key TEXT PRIMARY KEY,
                value TEXT,
                updated_at TEXT NOT NULL DEFAULT (datetime('now'))
            )
            """
        )
        conn.commit()
    finally:
        conn.close()
    _harden_user_file(path)
    return path


def get_setting(key: str, db_path: Optional[Path] = None) -> Optional[str]:
    path = init_db(db_path)
    conn = sqlite3.connect(path)
    try:
        row = conn.execute("SELECT value FROM settings WHERE key = ?", (key,)).fetchone()
        return str(row[0]) if row and row[0] is not None else None
    finally:
        conn.close()


def get_settings(prefix: Optional[str] = None, db_path: Optional[Path] = None) -> Dict[str, Optional[str]]:
    path = init_db(db_path)
    conn = sqlite3.connect(path)
    try:
        if prefix:
            rows = conn.execute(
                "SELECT key, value FROM settings WHERE key LIKE ? ORDER BY key",
                (f"{prefix}%",),
            ).fetchall()
        else:
            rows = conn.execute("SELECT key, value FROM settings ORDER BY key").fetchall()
        return {str(k): (None if v is None else str(v)) for k, v in rows}
    finally:
        conn.close()


def set_setting(key: str, value: Optional[str], db_path: Optional[Path] = None) -> None:
    path = init_db(db_path)
    conn = sqlite3.connect(path)
    try:
        conn.execute(
            """
            INSERT INTO settings (key, value, updated_at)
            VALUES (?, ?, datetime('now'))
            ON CONFLICT(key) DO UPDATE SET value=excluded.value, updated_at=datetime('now')
            """,
            (key, value),
        )
        conn.commit()
    finally:
        conn.close()


def reset_settings(db_path: Optional[Path] = None) -> int:
    """Delete all saved settings and return the number of removed rows."""
    path = init_db(db_path)
    conn = sqlite3.connect(path)
    try:
        cur = conn.cursor()
        cur.execute("DELETE FROM settings")
        conn.commit()
        return int(cur.rowcount or 0)
    finally:
        conn.close()
