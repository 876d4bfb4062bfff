from __future__ import annotations

"""Fallback validation chain: DNS, then HTTP, then HTTPS."""

import logging

from ..errors import LookupFailure
from .models import ValidationMethod, ValidationResult, ValidationStatus
from .probes import ReachabilityProbe, ResolverProbe

logger = logging.getLogger("subprobe")


class Validator:
    """Classify candidate labels under a fixed target domain.

    The chain stops at the first probe that succeeds, so a name that resolves
    is never requested over HTTP(S). When every stage fails the DNS error is
    kept on the result, since it is the first failure in the chain.
    """

    def __init__(self, target_domain: str, resolver: ResolverProbe, prober: ReachabilityProbe):
        self.target_domain = target_domain
        self.resolver = resolver
        self.prober = prober

    def validate(self, candidate: str) -> ValidationResult:
        fqdn = f"{candidate}.{self.target_domain}"

        try:
            ips = self.resolver.lookup(fqdn)
        except LookupFailure as exc:
            lookup_error = exc
        else:
            return ValidationResult(
                subdomain=candidate,
                ip=ips[0],
                status=ValidationStatus.DNS_RESOLVED,
                method=ValidationMethod.DNS,
            )

        if self.prober.check(fqdn, "http"):
            return ValidationResult(
                subdomain=candidate,
                status=ValidationStatus.HTTP_ACCESSIBLE,
                method=ValidationMethod.HTTP,
            )

        if self.prober.check(fqdn, "https"):
            return ValidationResult(
                subdomain=candidate,
                status=ValidationStatus.HTTPS_ACCESSIBLE,
                method=ValidationMethod.HTTPS,
            )

        logger.debug("No route to %s: %s", fqdn, lookup_error.reason)
        return ValidationResult(subdomain=candidate, status=ValidationStatus.FAILED, error=lookup_error)
