from __future__ import annotations

"""Compatibility facade for subprobe core engine.

Public imports remain stable while implementation lives in `subprobe.engine`.
"""

from .engine.models import ValidationMethod, ValidationResult, ValidationStatus, WildcardSignature
from .engine.probes import SUCCESS_CODES, USER_AGENT, ReachabilityProbe, ResolverProbe
from .engine.runtime import DEFAULT_WORKERS, SUBPROBE, Scanner, fmt_td, logger
from .engine.validator import Validator
from .engine.wildcard import detect_wildcard
from .engine.wordlist import DEFAULT_WORDLIST, ROOT, Wordlist

__all__ = [
    "ROOT",
    "DEFAULT_WORDLIST",
    "DEFAULT_WORKERS",
    "SUCCESS_CODES",
    "USER_AGENT",
    "ReachabilityProbe",
    "ResolverProbe",
    "SUBPROBE",
    "Scanner",
    "ValidationMethod",
    "ValidationResult",
    "ValidationStatus",
    "Validator",
    "WildcardSignature",
    "Wordlist",
    "detect_wildcard",
    "fmt_td",
    "logger",
]
