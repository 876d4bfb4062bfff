"""Exception types raised by subprobe.

Per-candidate probe failures are captured on results instead of propagating;
dictionary and export failures surface to the CLI, which reports them.
"""

from __future__ import annotations

from typing import Optional


class SubprobeError(Exception):
    """Base class for all subprobe errors."""


class LookupFailure(SubprobeError):
    """DNS resolution of a host returned no usable address."""

    def __init__(self, host: str, reason: str):
        self.host = host
        self.reason = reason
        super().__init__(f"lookup {host}: {reason}")


class ProbeFailure(SubprobeError):
    """HTTP(S) request failed or answered with a non-matching status."""

    def __init__(self, url: str, reason: str, status_code: Optional[int] = None):
        self.url = url
        self.reason = reason
        self.status_code = status_code
        super().__init__(f"{url}: {reason}")


class DictionaryLoadFailure(SubprobeError):
    pass


class ExportFailure(SubprobeError):
    pass
