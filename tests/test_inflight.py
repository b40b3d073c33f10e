import asyncio

import pytest

from domaincheck.models import Availability, CheckResult
from domaincheck.utils.inflight import InFlightRegistry


def test_concurrent_callers_share_one_resolution():
    registry = InFlightRegistry()
    calls = []

    async def resolver():
        calls.append(1)
        await asyncio.sleep(0.01)
        return CheckResult(domain='a.com', availability=Availability.AVAILABLE, method='whois')

    async def scenario():
        return await asyncio.gather(*(registry.resolve_or_join('a.com', resolver) for _ in range(10)))

    results = asyncio.run(scenario())

    assert len(calls) == 1
    assert all(r is results[0] for r in results)
    assert registry.joined == 9
    assert len(registry) == 0


def test_entry_removed_before_outcome_is_seen():
    registry = InFlightRegistry()
    seen = []

    async def resolver():
        await asyncio.sleep(0)
        return 'done'

    async def scenario():
        await registry.resolve_or_join('a.com', resolver)
        seen.append(registry.is_pending('a.com'))

    asyncio.run(scenario())
    assert seen == [False]


def test_failure_propagates_to_all_callers_and_clears_entry():
    registry = InFlightRegistry()
    calls = []

    async def failing():
        calls.append(1)
        await asyncio.sleep(0.01)
        raise RuntimeError("probe exploded")

    async def scenario():
        return await asyncio.gather(
            *(registry.resolve_or_join('a.com', failing) for _ in range(3)),
            return_exceptions=True
        )

    outcomes = asyncio.run(scenario())

    assert len(calls) == 1
    assert all(isinstance(o, RuntimeError) for o in outcomes)
    assert not registry.is_pending('a.com')


def test_domain_resolvable_again_after_failure():
    registry = InFlightRegistry()
    attempts = []

    async def flaky():
        attempts.append(1)
        if len(attempts) == 1:
            raise RuntimeError("transient")
        return 'ok'

    async def scenario():
        with pytest.raises(RuntimeError):
            await registry.resolve_or_join('a.com', flaky)
        return await registry.resolve_or_join('a.com', flaky)

    assert asyncio.run(scenario()) == 'ok'
    assert len(attempts) == 2


def test_different_domains_resolve_independently():
    registry = InFlightRegistry()
    calls = []

    def make(domain):
        async def resolver():
            calls.append(domain)
            await asyncio.sleep(0)
            return domain
        return resolver

    async def scenario():
        return await asyncio.gather(
            registry.resolve_or_join('a.com', make('a.com')),
            registry.resolve_or_join('b.io', make('b.io')),
        )

    assert asyncio.run(scenario()) == ['a.com', 'b.io']
    assert sorted(calls) == ['a.com', 'b.io']
