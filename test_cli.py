"""
End-to-end tests for the domain-expiry-check command line.

Usage:
    pytest test_cli.py
"""

import io
import json
import logging

import httpx
import pytest

from domain_expiry_check import __version__, cli

BOOTSTRAP_URL = "https://data.iana.org/rdap/dns.json"

BOOTSTRAP = {
    "services": [
        [["com"], ["https://rdap.example/com/v1/"]],
        [["org"], ["https://rdap.example/org/"]],
    ],
}


def domain_json(name, registrar, expiry):
    return {
        "objectClassName": "domain",
        "ldhName": name,
        "entities": [
            {"roles": ["registrar"], "vcardArray": ["vcard", [["fn", {}, "text", registrar]]]},
        ],
        "events": [{"eventAction": "expiration", "eventDate": expiry}],
    }


DOMAINS = {
    "example.com": domain_json("example.com", "Example Registrar", "2099-01-01T00:00:00Z"),
    "example.org": domain_json("example.org", "Org Registrar", "2098-06-30T12:00:00Z"),
}


class FakeInternet:
    """Serves the bootstrap document and RDAP domain objects."""

    def __init__(self, bootstrap_status=200):
        self.bootstrap_status = bootstrap_status
        self.requests = []

    def __call__(self, request):
        self.requests.append(str(request.url))
        if str(request.url) == BOOTSTRAP_URL:
            if self.bootstrap_status != 200:
                return httpx.Response(self.bootstrap_status)
            return httpx.Response(200, json=BOOTSTRAP)
        name = request.url.path.rsplit("/", 1)[-1]
        if name in DOMAINS:
            return httpx.Response(200, json=DOMAINS[name])
        return httpx.Response(404)


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch, tmp_path):
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path))
    for name in ("DOMAIN_EXPIRY_BOOTSTRAP_URL", "DOMAIN_EXPIRY_TIMEOUT", "DOMAIN_EXPIRY_DEBUG"):
        monkeypatch.delenv(name, raising=False)
    yield
    if cli._handler is not None:
        logging.getLogger().removeHandler(cli._handler)
        cli._handler = None


def run(argv, internet=None):
    internet = internet or FakeInternet()
    return cli.main(argv, transport=httpx.MockTransport(internet)), internet


# =============================================================================
# check
# =============================================================================

def test_check_text_output(capsys):
    status, internet = run(["check", "-d", "example.com"])
    out = capsys.readouterr().out

    assert status == 0
    lines = out.split("\n")
    assert lines[0] == "Domain: example.com"
    assert lines[1] == "Registrar: Example Registrar"
    assert lines[2] == "Expiry Date: 2099-01-01T00:00:00Z"
    assert lines[3].startswith("Days to Expire: ")
    assert lines[4] == ""
    assert internet.requests == [BOOTSTRAP_URL, "https://rdap.example/com/v1/domain/example.com"]


def test_check_json_output_with_comma_list_and_repeats(capsys):
    status, internet = run(["c", "-d", "example.com,example.org", "--domain", "example.com", "-o", "json"])
    data = json.loads(capsys.readouterr().out)

    assert status == 0
    assert [d["domain_name"] for d in data] == ["example.com", "example.org", "example.com"]
    assert data[1]["registrar"] == "Org Registrar"
    assert data[1]["expiry_date"] == "2098-06-30T12:00:00Z"
    assert all(d["failed"] is False for d in data)
    # bootstrap fetched once for the whole run
    assert internet.requests.count(BOOTSTRAP_URL) == 1


def test_check_reads_env_var(monkeypatch, capsys):
    monkeypatch.setenv("MY_DOMAINS", "example.com,example.org")
    status, _ = run(["check", "-e", "MY_DOMAINS", "-o", "json"])
    data = json.loads(capsys.readouterr().out)

    assert status == 0
    assert [d["domain_name"] for d in data] == ["example.com", "example.org"]


def test_check_prompts_on_stdin(monkeypatch, capsys):
    monkeypatch.setattr("sys.stdin", io.StringIO("example.org\n"))
    status, _ = run(["check"])
    out = capsys.readouterr().out

    assert status == 0
    assert out.startswith("Enter domain names (comma-separated):\nDomain: example.org\n")


def test_check_skips_unsupported_tld(capsys):
    status, _ = run(["check", "-d", "example.com,example.zz", "-o", "json"])
    captured = capsys.readouterr()
    data = json.loads(captured.out)

    assert status == 0
    assert [d["domain_name"] for d in data] == ["example.com"]
    assert "Error checking domain example.zz: no RDAP service found for example.zz" in captured.err
    assert captured.err.startswith("domain-expiry-check: ")


def test_check_no_domains_fails(monkeypatch, capsys):
    monkeypatch.setattr("sys.stdin", io.StringIO(""))
    status, internet = run(["check", "-e", "UNSET_DOMAINS_VAR"])
    captured = capsys.readouterr()

    assert status == 1
    assert captured.out == "Enter domain names (comma-separated):\n"
    assert "no domain names provided" in captured.err
    assert internet.requests == []


def test_check_directory_unavailable(capsys):
    status, internet = run(["check", "-d", "example.com,example.org", "-o", "json"], FakeInternet(503))
    captured = capsys.readouterr()

    assert status == 0
    assert json.loads(captured.out) == []
    assert captured.err.count("service directory unavailable") == 2
    assert internet.requests == [BOOTSTRAP_URL]


def test_bootstrap_url_from_environment(monkeypatch, capsys):
    mirror = "https://mirror.example/dns.json"
    monkeypatch.setenv("DOMAIN_EXPIRY_BOOTSTRAP_URL", mirror)
    status, internet = run(["check", "-d", "example.com"])
    capsys.readouterr()

    assert status == 0
    assert internet.requests[0] == mirror


# =============================================================================
# top level
# =============================================================================

def test_no_command_prints_help(capsys):
    status, internet = run([])
    out = capsys.readouterr().out

    assert status == 0
    assert "usage: domain-expiry-check" in out
    assert internet.requests == []


def test_version(capsys):
    with pytest.raises(SystemExit) as exc:
        cli.main(["--version"])
    assert exc.value.code == 0
    assert __version__ in capsys.readouterr().out


def test_invalid_output_format(capsys):
    with pytest.raises(SystemExit) as exc:
        cli.main(["check", "-d", "example.com", "-o", "yaml"])
    assert exc.value.code == 2
