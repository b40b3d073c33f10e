"""Coalescing of concurrent lookups for the same domain."""

import asyncio
import logging
from typing import Awaitable, Callable, Dict, TypeVar


logger = logging.getLogger(__name__)

T = TypeVar('T')


class InFlightRegistry:
    """Runs at most one resolver per domain at a time.

    A caller that asks for a domain already being resolved awaits the pending
    task instead of starting another one. The registry entry is removed inside
    the task itself, so it is gone before any waiter sees the outcome, whether
    the resolver returned or raised.
    """

    def __init__(self):
        self._pending: Dict[str, asyncio.Task] = {}
        self.joined = 0

    async def resolve_or_join(self, domain: str, resolver: Callable[[], Awaitable[T]]) -> T:
        task = self._pending.get(domain)
        if task is None:
            # No await between the lookup above and this registration.
            task = asyncio.ensure_future(self._settle(domain, resolver))
            self._pending[domain] = task
        else:
            self.joined += 1
            logger.debug("Check already in progress for %s", domain)
        # Shielded so that one cancelled waiter does not cancel the others.
        return await asyncio.shield(task)

    async def _settle(self, domain: str, resolver: Callable[[], Awaitable[T]]) -> T:
        try:
            return await resolver()
        finally:
            self._pending.pop(domain, None)

    def is_pending(self, domain: str) -> bool:
        return domain in self._pending

    def __len__(self) -> int:
        return len(self._pending)
