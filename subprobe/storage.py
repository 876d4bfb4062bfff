from __future__ import annotations

"""Settings persistence and result export facade for subprobe.

Public storage API remains stable while implementation is split by concern:
- `subprobe.storage_parts.db`: SQLite-backed saved runtime settings
- `subprobe.storage_parts.export`: plain-text export of scan results
"""

from .storage_parts.db import (
    get_db_path,
    get_setting,
    get_settings,
    init_db,
    reset_settings,
    set_setting,
)
from .storage_parts.export import build_export_text, default_export_name, export_results

__all__ = [
    "get_db_path",
    "init_db",
    "get_setting",
    "get_settings",
    "set_setting",
    "reset_settings",
    "build_export_text",
    "default_export_name",
    "export_results",
]
