from __future__ import annotations

import dns.exception
import dns.resolver
import httpx
import pytest

from subprobe.core import SUCCESS_CODES, USER_AGENT, ReachabilityProbe, ResolverProbe
from subprobe.errors import LookupFailure, ProbeFailure


def _prober(handler) -> ReachabilityProbe:
    client = httpx.Client(transport=httpx.MockTransport(handler), verify=False)
    return ReachabilityProbe(client=client)


@pytest.mark.parametrize("status", sorted(SUCCESS_CODES))
def test_success_codes_count_as_reachable(status):
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(status)

    prober = _prober(handler)
    assert prober.check("www.example.com", "https") is True
    assert seen[0].method == "HEAD"
    assert seen[0].url.scheme == "https"
    assert seen[0].url.host == "www.example.com"
    assert seen[0].headers["User-Agent"] == USER_AGENT


def test_other_status_is_a_probe_failure():
    prober = _prober(lambda request: httpx.Response(404))
    with pytest.raises(ProbeFailure) as excinfo:
        prober.head("http://www.example.com")
    assert excinfo.value.status_code == 404
    assert prober.check("www.example.com") is False


def test_transport_error_is_a_probe_failure():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    prober = _prober(handler)
    with pytest.raises(ProbeFailure) as excinfo:
        prober.head("http://down.example.com")
    assert "ConnectError" in excinfo.value.reason
    assert excinfo.value.status_code is None


def test_redirects_are_not_followed():
    calls = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append((request.url.scheme, request.url.host))
        return httpx.Response(301, headers={"Location": "https://elsewhere.example.org/"})

    assert _prober(handler).check("old.example.com") is True
    assert calls == [("http", "old.example.com")]


def test_injected_client_is_not_closed():
    client = httpx.Client(transport=httpx.MockTransport(lambda request: httpx.Response(200)))
    with ReachabilityProbe(client=client):
        pass
    assert client.is_closed is False


class _Answer(list):
    pass


def test_resolver_returns_a_records(monkeypatch):
    probe = ResolverProbe(dns_server="192.0.2.53", timeout=1.0)
    assert probe.resolver.nameservers == ["192.0.2.53"]

    def fake_resolve(host, qtype):
        assert qtype == "A"
        return _Answer(["93.184.216.34", "not-an-ip", "93.184.216.34"])

    monkeypatch.setattr(probe.resolver, "resolve", fake_resolve)
    assert probe.lookup("www.example.com") == ["93.184.216.34"]


def test_resolver_falls_back_to_aaaa(monkeypatch):
    probe = ResolverProbe(dns_server="192.0.2.53")

    def fake_resolve(host, qtype):
        if qtype == "A":
            raise dns.resolver.NoAnswer()
        return _Answer(["2001:db8::1"])

    monkeypatch.setattr(probe.resolver, "resolve", fake_resolve)
    assert probe.lookup("v6.example.com") == ["2001:db8::1"]


def test_resolver_nxdomain_is_a_lookup_failure(monkeypatch):
    probe = ResolverProbe(dns_server="192.0.2.53")

    def fake_resolve(host, qtype):
        raise dns.resolver.NXDOMAIN()

    monkeypatch.setattr(probe.resolver, "resolve", fake_resolve)
    with pytest.raises(LookupFailure) as excinfo:
        probe.lookup("missing.example.com")
    assert excinfo.value.host == "missing.example.com"
    assert excinfo.value.reason == "no such host"


def test_resolver_timeout_is_a_lookup_failure(monkeypatch):
    probe = ResolverProbe(dns_server="192.0.2.53")

    def fake_resolve(host, qtype):
        raise dns.exception.Timeout()

    monkeypatch.setattr(probe.resolver, "resolve", fake_resolve)
    with pytest.raises(LookupFailure) as excinfo:
        probe.lookup("slow.example.com")
    assert excinfo.value.reason == "timeout"
