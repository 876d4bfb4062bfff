from __future__ import annotations

import re
from datetime import datetime
from pathlib import Path
from typing import List, Optional, Sequence

from ..engine.models import ValidationResult
from ..errors import ExportFailure

RULE_WIDTH = 50


def _safe_name(text: str) -> str:
    return re.sub(r"[^A-Za-z0-9_.-]+", "_", text).strip("_") or "scan"


def default_export_name(target_domain: str, when: Optional[datetime] = None) -> str:
    stamp = (when or datetime.now()).strftime("%Y%m%d_%H%M%S")
    return f"subdomain_results_{_safe_name(target_domain)}_{stamp}.txt"


def _rows_for_export(target_domain: str, results: Sequence[ValidationResult]) -> List[str]:
    rows: List[str] = []
    for item in results:
        if not item.ok:
            continue
        rows.append(f"{item.fqdn(target_domain)}\t{item.ip}\t{item.status.value}\t{item.method.value}")
    return rows


def build_export_text(target_domain: str, results: Sequence[ValidationResult], when: Optional[datetime] = None) -> str:
    scan_time = (when or datetime.now()).strftime("%Y-%m-%d %H:%M:%S")
    lines = [
        f"Subdomain Scan Results - {target_domain}",
        f"Scan Time: {scan_time}",
        "=" * RULE_WIDTH,
        "Subdomain\tIP Address\tStatus\tMethod",
    ]
    lines.extend(_rows_for_export(target_domain, results))
    return "\n".join(lines) + "\n"


def export_results(
    target_domain: str,
    results: Sequence[ValidationResult],
    output_path: Optional[str] = None,
) -> str:
    """Write the successful results to a tab-separated text file.

    Failed results are part of the snapshot but never exported. Returns the
    path written.
    """
    if not results:
        raise ExportFailure("No results to export")

    now = datetime.now()
    out = Path(output_path) if output_path else Path.cwd() / default_export_name(target_domain, now)
    if out.exists() and out.is_dir():
        raise ExportFailure(f"Output path is a directory: {out}")

    try:
        out.parent.mkdir(parents=True, exist_ok=True)
        out.write_text(build_export_text(target_domain, results, now), encoding="utf-8")
    except OSError as exc:
        raise ExportFailure(f"Failed to create file: {exc}") from exc
    return str(out)
