import asyncio
import threading
import time

import pytest
import whois
from whois.exceptions import WhoisDomainNotFoundError

from domaincheck.checkers import WhoisPhrases, WhoisProbe
from domaincheck.errors import ConfigurationError
from domaincheck.models import Availability

from .fakes import WHOIS_NOT_FOUND, WHOIS_REGISTERED, FakeWhois


@pytest.fixture(scope="module")
def phrases():
    return WhoisPhrases.load()


@pytest.mark.parametrize("text", [
    WHOIS_NOT_FOUND,
    "NOT FOUND",
    "%% No entries found for the selected source(s).",
    "Status: free",
    "The queried object does not exist: Domain not registered",
])
def test_available_phrases(phrases, text):
    assert phrases.classify(text) is Availability.AVAILABLE


def test_premium_phrases(phrases):
    assert phrases.classify("This domain is listed on our Marketplace") is Availability.PREMIUM


def test_availability_wins_over_premium(phrases):
    assert phrases.classify("No match for domain. Premium names available.") is Availability.AVAILABLE


def test_no_match_is_taken(phrases):
    assert phrases.classify(WHOIS_REGISTERED) is Availability.TAKEN


def test_custom_phrases_file(tmp_path):
    path = tmp_path / "phrases.yaml"
    path.write_text("available:\n  - NICHT VERGEBEN\npremium: []\n")

    custom = WhoisPhrases.load(path)

    assert custom.available == ('nicht vergeben',)
    assert custom.classify("Status: nicht vergeben") is Availability.AVAILABLE
    assert custom.classify("No match for domain") is Availability.TAKEN


def test_unreadable_phrases_file(tmp_path):
    with pytest.raises(ConfigurationError):
        WhoisPhrases.load(tmp_path / "missing.yaml")


def _check(lookup, timeout=1.0):
    probe = WhoisProbe(timeout=timeout, lookup=lookup)
    return asyncio.run(probe.check('xjk19zz.io'))


def test_not_found_text_is_available():
    result = _check(FakeWhois(default=WHOIS_NOT_FOUND))
    assert result.availability is Availability.AVAILABLE
    assert result.method == 'whois'


def test_registered_text_is_taken():
    assert _check(FakeWhois()).availability is Availability.TAKEN


def test_not_found_exception_is_classified_by_its_text():
    lookup = FakeWhois(default=WhoisDomainNotFoundError(WHOIS_NOT_FOUND))
    assert _check(lookup).availability is Availability.AVAILABLE


def test_record_object_text_is_used():
    class Record:
        text = WHOIS_NOT_FOUND

    assert _check(FakeWhois(default=Record())).availability is Availability.AVAILABLE


def test_lookup_error_is_taken():
    lookup = FakeWhois(default=ConnectionResetError("connection reset"))
    result = _check(lookup)
    assert result.availability is Availability.TAKEN
    assert result.error_detail is None


def test_rate_limited_response_is_taken():
    lookup = FakeWhois(default="Too many requests, try again later. No match for domain")
    assert _check(lookup).availability is Availability.TAKEN


def test_timeout_is_taken():
    release = threading.Event()

    def slow_lookup(domain):
        release.wait(5)
        return WHOIS_NOT_FOUND

    probe = WhoisProbe(timeout=0.05, lookup=slow_lookup)

    try:
        started = time.monotonic()
        result = asyncio.run(probe.check('slow.io'))
        elapsed = time.monotonic() - started

        # The lookup thread is still blocked when the verdict comes back
        assert not release.is_set()
    finally:
        release.set()

    assert result.availability is Availability.TAKEN
    assert result.method == 'whois'
    assert elapsed < 1.0


def test_default_lookup_uses_probe_deadline():
    probe = WhoisProbe(timeout=2.5)

    assert probe._lookup.func is whois.whois
    assert probe._lookup.keywords == {'timeout': 2.5}
