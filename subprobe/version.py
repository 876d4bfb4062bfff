"""Version information for subprobe."""

__version__ = "2.0.0"
