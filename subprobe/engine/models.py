"""Result and signature models shared by the engine and its consumers."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterable, Optional

from ..errors import LookupFailure


class ValidationStatus(str, Enum):
    NOT_VALIDATED = "Not validated"
    DNS_RESOLVED = "DNS resolved"
    HTTP_ACCESSIBLE = "HTTP accessible"
    HTTPS_ACCESSIBLE = "HTTPS accessible"
    FAILED = "Failed"


class ValidationMethod(str, Enum):
    NONE = ""
    DNS = "DNS"
    HTTP = "HTTP"
    HTTPS = "HTTPS"


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of the validation chain for one candidate label."""

    subdomain: str
    ip: str = ""
    status: ValidationStatus = ValidationStatus.NOT_VALIDATED
    method: ValidationMethod = ValidationMethod.NONE
    error: Optional[LookupFailure] = field(default=None, compare=False)

    @property
    def ok(self) -> bool:
        return self.status not in (ValidationStatus.FAILED, ValidationStatus.NOT_VALIDATED)

    def fqdn(self, target_domain: str) -> str:
        return f"{self.subdomain}.{target_domain}"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "subdomain": self.subdomain,
            "ip": self.ip,
            "status": self.status.value,
            "method": self.method.value,
            "error": str(self.error) if self.error else None,
        }


@dataclass(frozen=True)
class WildcardSignature:
    """Addresses returned for labels that should not exist."""

    ips: frozenset = frozenset()

    @classmethod
    def from_ips(cls, ips: Iterable[str]) -> "WildcardSignature":
        return cls(frozenset(ip for ip in ips if ip))

    @property
    def has_wildcard(self) -> bool:
        return bool(self.ips)

    def matches(self, result: ValidationResult) -> bool:
        # HTTP/HTTPS-only successes carry no address and are never matched.
        return bool(result.ip) and result.ip in self.ips
