import json

import pytest
from click.testing import CliRunner

from domaincheck import cli as cli_mod
from domaincheck.checkers import AvailabilityService

from .fakes import WHOIS_NOT_FOUND


@pytest.fixture
def service(make_service, resolver, whois_lookup, monkeypatch):
    resolver.answers['swift.com'] = 'resolve'
    whois_lookup.texts['swift.io'] = WHOIS_NOT_FOUND
    service = make_service()
    monkeypatch.setattr(AvailabilityService, 'from_config', classmethod(lambda cls, path: service))
    return service


def test_check_expands_words_and_writes_json(service, tmp_path):
    output = tmp_path / "out" / "results.json"

    result = CliRunner().invoke(cli_mod.cli, ['check', 'swift', '--tlds', 'com,io', '-o', str(output), '--stats'])

    assert result.exit_code == 0, result.output
    assert 'swift.com' in result.output
    assert 'entry_count' in result.output
    data = json.loads(output.read_text())
    assert [(d['domain'], d['status']) for d in data] == [('swift.com', 'taken'), ('swift.io', 'available')]


def test_check_reads_wordlist(service, tmp_path):
    wordlist = tmp_path / "words.txt"
    wordlist.write_text("swift.io\n\n")

    result = CliRunner().invoke(cli_mod.cli, ['check', '-w', str(wordlist)])

    assert result.exit_code == 0, result.output
    assert 'swift.io' in result.output


def test_check_rejects_invalid_domain(service):
    result = CliRunner().invoke(cli_mod.cli, ['check', 'bad_domain.com'])

    assert result.exit_code == 1
    assert 'Invalid domain' in result.output


def test_check_requires_input(service):
    result = CliRunner().invoke(cli_mod.cli, ['check'])

    assert result.exit_code == 1
    assert 'No domains provided' in result.output


def test_pricing_without_credentials(service):
    result = CliRunner().invoke(cli_mod.cli, ['pricing', 'io'])

    assert result.exit_code == 1
    assert 'not configured' in result.output
