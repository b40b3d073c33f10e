"""Batch fan-out over the single-domain resolver."""

import asyncio
import logging
from typing import Awaitable, Callable, Dict, List, Sequence

from ..models import CheckResult, normalize_domain


logger = logging.getLogger(__name__)


class BulkResolver:
    """Resolves a batch of domains, one result per input position.

    Duplicates are resolved once and the shared result is placed at every
    position they occur. A failure for one domain becomes an Error result for
    that domain only.
    """

    def __init__(self, resolve: Callable[[str], Awaitable[CheckResult]]):
        self._resolve = resolve

    async def _resolve_one(self, domain: str) -> CheckResult:
        try:
            return await self._resolve(domain)
        except Exception as e:
            logger.error("Error checking %s: %s", domain, e)
            return CheckResult.error(domain, str(e) or type(e).__name__)

    async def check_many(self, domains: Sequence[str]) -> List[CheckResult]:
        normalized = [normalize_domain(d) for d in domains]
        unique = list(dict.fromkeys(normalized))

        results = await asyncio.gather(*(self._resolve_one(d) for d in unique))
        by_domain: Dict[str, CheckResult] = dict(zip(unique, results))

        return [by_domain[d] for d in normalized]
