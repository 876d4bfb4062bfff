from __future__ import annotations

from subprobe.core import ValidationMethod, ValidationStatus, Validator
from subprobe.errors import LookupFailure


def test_dns_success_skips_http_probes(make_resolver, make_prober):
    resolver = make_resolver({"www.example.com": ["93.184.216.34", "93.184.216.35"]})
    prober = make_prober([("www.example.com", "http")])
    result = Validator("example.com", resolver, prober).validate("www")
    assert result.status is ValidationStatus.DNS_RESOLVED
    assert result.method is ValidationMethod.DNS
    assert result.ip == "93.184.216.34"
    assert result.error is None
    assert prober.calls == []


def test_http_fallback_after_dns_failure(make_resolver, make_prober):
    prober = make_prober([("intra.example.com", "http"), ("intra.example.com", "https")])
    result = Validator("example.com", make_resolver(), prober).validate("intra")
    assert result.status is ValidationStatus.HTTP_ACCESSIBLE
    assert result.method is ValidationMethod.HTTP
    assert result.ip == ""
    assert prober.calls == [("intra.example.com", "http")]


def test_https_fallback_after_http_failure(make_resolver, make_prober):
    prober = make_prober([("secure.example.com", "https")])
    result = Validator("example.com", make_resolver(), prober).validate("secure")
    assert result.status is ValidationStatus.HTTPS_ACCESSIBLE
    assert result.method is ValidationMethod.HTTPS
    assert prober.calls == [("secure.example.com", "http"), ("secure.example.com", "https")]


def test_all_probes_fail_keeps_dns_error(make_resolver, make_prober):
    result = Validator("example.com", make_resolver(), make_prober()).validate("doesnotexist123")
    assert result.status is ValidationStatus.FAILED
    assert result.method is ValidationMethod.NONE
    assert isinstance(result.error, LookupFailure)
    assert result.error.host == "doesnotexist123.example.com"
    assert result.ok is False


def test_result_to_dict_is_json_friendly(make_resolver, make_prober):
    result = Validator("example.com", make_resolver(), make_prober()).validate("nope")
    data = result.to_dict()
    assert data["subdomain"] == "nope"
    assert data["status"] == "Failed"
    assert data["method"] == ""
    assert "nope.example.com" in data["error"]
