from __future__ import annotations

import threading
from typing import Dict, Iterable, List, Optional, Tuple

import pytest

from subprobe.errors import LookupFailure


class FakeResolver:
    """Answer lookups from a fixed host table.

    Hosts missing from the table resolve to `wildcard_ip` when set, otherwise
    fail like an NXDOMAIN.
    """

    def __init__(self, table: Optional[Dict[str, List[str]]] = None, wildcard_ip: Optional[str] = None):
        self.table = dict(table or {})
        self.wildcard_ip = wildcard_ip
        self.calls: List[str] = []
        self._lock = threading.Lock()

    def lookup(self, host: str) -> List[str]:
        with self._lock:
            self.calls.append(host)
        if host in self.table:
            return list(self.table[host])
        if self.wildcard_ip:
            return [self.wildcard_ip]
        raise LookupFailure(host, "no such host")


class FakeProber:
    """Reachability answers keyed by (host, scheme)."""

    def __init__(self, reachable: Iterable[Tuple[str, str]] = ()):
        self.reachable = set(reachable)
        self.calls: List[Tuple[str, str]] = []
        self.closed = False
        self._lock = threading.Lock()

    def check(self, host: str, scheme: str = "http") -> bool:
        with self._lock:
            self.calls.append((host, scheme))
        return (host, scheme) in self.reachable

    def close(self) -> None:
        self.closed = True


@pytest.fixture
def make_resolver():
    return FakeResolver


@pytest.fixture
def make_prober():
    return FakeProber


@pytest.fixture(autouse=True)
def _isolated_settings_db(tmp_path, monkeypatch):
    monkeypatch.setenv("SUBPROBE_DB", str(tmp_path / "settings.db"))
    for name in ("SUBPROBE_DNS", "SUBPROBE_TIMEOUT", "SUBPROBE_THREADS", "SUBPROBE_WORDLIST"):
        monkeypatch.delenv(name, raising=False)
