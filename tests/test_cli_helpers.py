from __future__ import annotations

from subprobe.cli import _normalize_domain_input, _parse_threads
from subprobe.output import format_progress


def test_normalize_domain_input_accepts_url_and_plain_domain():
    assert _normalize_domain_input("https://www.Example.com/path?q=1") == "example.com"
    assert _normalize_domain_input("sub.example.com.") == "sub.example.com"
    assert _normalize_domain_input("example.com:8443") == "example.com"
    assert _normalize_domain_input("not a domain") is None
    assert _normalize_domain_input("") is None
    assert _normalize_domain_input("-bad-.example.com") is None


def test_parse_threads_defaults_on_malformed_values():
    assert _parse_threads(None, 20) == 20
    assert _parse_threads("50", 20) == 50
    assert _parse_threads("fifty", 20) == 10
    assert _parse_threads("0", 20) == 10
    assert _parse_threads("-3", 20) == 10


def test_format_progress_tags_messages():
    assert format_progress("Found subdomain: www.example.com (1.2.3.4) - DNS resolved").startswith("[green][+]")
    assert format_progress("Wildcard DNS detected, IPs: ['10.0.0.1']").startswith("[yellow][!]")
    assert format_progress("Scan completed") == "[bold cyan]Scan completed[/bold cyan]"
    assert format_progress("Checking for wildcard DNS...").startswith("[cyan][*]")
