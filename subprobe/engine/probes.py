from __future__ import annotations

"""Single-shot network probes used by the validator.

- `ResolverProbe`: one DNS lookup (A, then AAAA) through dnspython
- `ReachabilityProbe`: one HEAD request over HTTP or HTTPS through httpx

Both raise the matching `subprobe.errors` type on failure and never retry.
"""

import ipaddress
import logging
from typing import List, Optional

import dns.exception
import dns.resolver
import httpx

from ..errors import LookupFailure, ProbeFailure

USER_AGENT = "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36"
SUCCESS_CODES = frozenset({200, 301, 302, 403})
DEFAULT_HTTP_TIMEOUT = 5.0

logger = logging.getLogger("subprobe")


class ResolverProbe:
    """Resolve a fully-qualified name to its addresses.

    Uses the system resolver configuration unless `dns_server` is given.
    `timeout` bounds a single query; `lifetime` bounds the whole lookup.
    """

    def __init__(self, dns_server: Optional[str] = None, timeout: Optional[float] = None):
        if dns_server:
            resolver = dns.resolver.Resolver(configure=False)
            resolver.nameservers = [dns_server]
        else:
            resolver = dns.resolver.Resolver()
        if timeout:
            resolver.timeout = timeout
            resolver.lifetime = max(timeout * 2, timeout + 1.0)
        self.dns_server = dns_server
        self.resolver = resolver

    def lookup(self, host: str) -> List[str]:
        ips: List[str] = []
        last_error: Optional[str] = None
        for qtype in ("A", "AAAA"):
            try:
                answers = self.resolver.resolve(host, qtype)
            except dns.resolver.NXDOMAIN:
                raise LookupFailure(host, "no such host")
            except dns.resolver.NoAnswer:
                last_error = f"no {qtype} record"
                continue
            except dns.resolver.NoNameservers:
                last_error = "no nameserver answered"
                continue
            except dns.exception.Timeout:
                last_error = "timeout"
                continue
            except dns.exception.DNSException as exc:
                last_error = f"{exc.__class__.__name__}: {exc}"
                continue

            for rr in answers:
                ip_text = str(rr).strip()
                try:
                    ipaddress.ip_address(ip_text)
                except ValueError:
                    continue
                if ip_text not in ips:
                    ips.append(ip_text)
            if ips:
                break

        if not ips:
            raise LookupFailure(host, last_error or "no address")
        return ips


class ReachabilityProbe:
    """HEAD a host over plain HTTP or HTTPS and classify the status code.

    Certificate validation is disabled: self-signed or misconfigured hosts
    count as reachable. Redirects are not followed, so 301/302 are judged
    as returned by the host itself.
    """

    def __init__(self, client: Optional[httpx.Client] = None, timeout: float = DEFAULT_HTTP_TIMEOUT):
        self.timeout = timeout
        self._owns_client = client is None
        self.client = client or httpx.Client(
            verify=False,
            timeout=httpx.Timeout(timeout),
            follow_redirects=False,
        )

    def head(self, url: str) -> int:
        try:
            response = self.client.head(
                url,
                timeout=self.timeout,
                follow_redirects=False,
                headers={"User-Agent": USER_AGENT},
            )
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            message = str(exc).strip()
            reason = f"{exc.__class__.__name__}: {message}" if message else exc.__class__.__name__
            raise ProbeFailure(url, reason) from exc
        if response.status_code not in SUCCESS_CODES:
            raise ProbeFailure(url, f"HTTP {response.status_code}", status_code=response.status_code)
        return response.status_code

    def check(self, host: str, scheme: str = "http") -> bool:
        url = f"{scheme}://{host}"
        try:
            self.head(url)
        except ProbeFailure as exc:
            logger.debug("Probe failed %s", exc)
            return False
        return True

    def close(self) -> None:
        if self._owns_client:
            self.client.close()

    def __enter__(self) -> "ReachabilityProbe":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
