from __future__ import annotations

"""Wildcard DNS detection."""

import logging
import random
import string
import time
from typing import List, Optional

from ..errors import LookupFailure
from .models import WildcardSignature
from .probes import ResolverProbe

logger = logging.getLogger("subprobe")

PROBE_PREFIXES = ("random", "test", "invalid")


def probe_labels(now: Optional[float] = None) -> List[str]:
    """Build throwaway labels that are virtually certain not to exist."""
    stamp = int(now if now is not None else time.time())
    labels: List[str] = []
    for prefix in PROBE_PREFIXES:
        noise = "".join(random.choice(string.ascii_lowercase) for _ in range(6))
        labels.append(f"{prefix}{stamp}{noise}")
    return labels


def detect_wildcard(target_domain: str, resolver: ResolverProbe) -> WildcardSignature:
    """Resolve the throwaway labels and union every address they return.

    A failed lookup counts as "no address" and is not retried.
    """
    ips: List[str] = []
    for label in probe_labels():
        fqdn = f"{label}.{target_domain}"
        try:
            found = resolver.lookup(fqdn)
        except LookupFailure as exc:
            logger.debug("Wildcard probe %s: %s", fqdn, exc.reason)
            continue
        for ip in found:
            if ip not in ips:
                ips.append(ip)
    return WildcardSignature.from_ips(ips)
