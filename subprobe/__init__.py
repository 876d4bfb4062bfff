"""Public package surface for subprobe.

Importing `subprobe` exposes the high-level API function (`SUBPROBE`), the
`Scanner` engine and package version, keeping internals hidden by default.
"""

from .core import SUBPROBE, Scanner
from .version import __version__

__all__ = ["SUBPROBE", "Scanner", "__version__"]
