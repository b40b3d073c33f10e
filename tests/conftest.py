import pytest

from domaincheck.checkers import AvailabilityService, DNSProbe, WhoisProbe

from .fakes import FakeRegistrar, FakeResolver, FakeWhois


@pytest.fixture
def resolver():
    return FakeResolver()


@pytest.fixture
def whois_lookup():
    return FakeWhois()


@pytest.fixture
def make_service(resolver, whois_lookup):
    """Build an AvailabilityService wired to the fakes."""

    def _make(registrar=None, cache=None, whois_timeout=1.0):
        return AvailabilityService(
            cache=cache,
            registrar_probe=registrar or FakeRegistrar(ready=False),
            dns_probe=DNSProbe(resolver=resolver),
            whois_probe=WhoisProbe(timeout=whois_timeout, lookup=whois_lookup)
        )

    return _make
