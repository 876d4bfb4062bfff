from __future__ import annotations

import json
import sys
from pathlib import Path

import pytest

import subprobe.cli as cli
from subprobe.core import Scanner


@pytest.fixture
def fake_scanner(monkeypatch, make_resolver, make_prober):
    resolver = make_resolver({"www.example.com": ["93.184.216.34"]})
    prober = make_prober([("portal.example.com", "https")])
    built = []

    def factory(domain, dns_server=None, timeout=None):
        scanner = Scanner(domain, dns_server=dns_server, timeout=timeout, resolver=resolver, prober=prober)
        built.append(scanner)
        return scanner

    monkeypatch.setattr(cli, "Scanner", factory)
    return built


def _run(monkeypatch, *argv):
    monkeypatch.setattr(sys, "argv", ["subprobe", *argv])
    cli.main()


def test_json_output_lists_successful_results(monkeypatch, capsys, tmp_path: Path, fake_scanner):
    words = tmp_path / "words.txt"
    words.write_text("www\nportal\nghost\n", encoding="utf-8")
    _run(monkeypatch, "-d", "https://www.example.com", "-w", str(words), "-t", "3", "--json")

    payload = json.loads(capsys.readouterr().out)
    assert sorted(item["subdomain"] for item in payload) == ["portal", "www"]
    assert fake_scanner[0].target_domain == "example.com"


def test_json_all_includes_failed(monkeypatch, capsys, tmp_path: Path, fake_scanner):
    words = tmp_path / "words.txt"
    words.write_text("www\nghost\n", encoding="utf-8")
    _run(monkeypatch, "-d", "example.com", "-w", str(words), "--json", "--all")

    payload = json.loads(capsys.readouterr().out)
    statuses = {item["subdomain"]: item["status"] for item in payload}
    assert statuses == {"www": "DNS resolved", "ghost": "Failed"}


def test_export_flag_writes_file(monkeypatch, tmp_path: Path, fake_scanner):
    words = tmp_path / "words.txt"
    words.write_text("www\n", encoding="utf-8")
    out = tmp_path / "results.txt"
    _run(monkeypatch, "-d", "example.com", "-w", str(words), "--silent", "--export", str(out))
    assert "www.example.com\t93.184.216.34\tDNS resolved\tDNS" in out.read_text(encoding="utf-8")


def test_invalid_domain_exits_non_zero(monkeypatch, fake_scanner):
    with pytest.raises(SystemExit) as excinfo:
        _run(monkeypatch, "-d", "not a domain", "--silent")
    assert excinfo.value.code == 1
    assert fake_scanner == []


def test_missing_wordlist_exits_non_zero(monkeypatch, tmp_path: Path, fake_scanner):
    with pytest.raises(SystemExit) as excinfo:
        _run(monkeypatch, "-d", "example.com", "-w", str(tmp_path / "missing.txt"), "--silent")
    assert excinfo.value.code == 1
