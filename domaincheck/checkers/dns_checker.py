"""DNS-based domain availability checker."""

import asyncio
import logging
from typing import Optional

import dns.asyncresolver
import dns.exception
import dns.resolver

from ..errors import ProbeTimeoutError, UpstreamError


logger = logging.getLogger(__name__)


class DNSProbe:
    """Fast DNS-based domain availability pre-filter.

    A domain whose A record resolves is registered. A domain the resolver
    reports as nonexistent is only *possibly* available; that needs WHOIS to
    confirm. Every other resolver failure is raised as UpstreamError, since a
    broken resolver says nothing about the domain.
    """

    name = 'dns'

    def __init__(
        self,
        timeout: float = 3.0,
        max_concurrent: int = 20,
        resolver: Optional[dns.asyncresolver.Resolver] = None
    ):
        self.timeout = timeout
        self.max_concurrent = max_concurrent
        self._resolver = resolver
        self._semaphore: Optional[asyncio.Semaphore] = None
        self._semaphore_loop = None

    def _get_resolver(self) -> dns.asyncresolver.Resolver:
        if self._resolver is None:
            resolver = dns.asyncresolver.Resolver()
            resolver.timeout = self.timeout
            resolver.lifetime = self.timeout
            self._resolver = resolver
        return self._resolver

    def _get_semaphore(self) -> asyncio.Semaphore:
        loop = asyncio.get_running_loop()
        if self._semaphore is None or self._semaphore_loop is not loop:
            self._semaphore = asyncio.Semaphore(self.max_concurrent)
            self._semaphore_loop = loop
        return self._semaphore

    async def check(self, domain: str) -> bool:
        """Check if a domain is possibly available via DNS.

        Returns True if the name does not exist (possibly available), False
        if it resolves (taken). Raises UpstreamError if the resolver failed.
        """
        async with self._get_semaphore():
            try:
                await self._get_resolver().resolve(domain, 'A')
                logger.debug("%s resolves", domain)
                return False  # Has records, not available
            except dns.resolver.NXDOMAIN:
                return True  # No domain, possibly available
            except dns.resolver.NoAnswer:
                return True  # No A record, let WHOIS decide
            except dns.exception.Timeout as e:
                raise ProbeTimeoutError(f"DNS lookup timed out for {domain}", source=self.name) from e
            except dns.exception.DNSException as e:
                raise UpstreamError(f"DNS lookup failed for {domain}: {e}", source=self.name) from e
            except OSError as e:
                raise UpstreamError(f"DNS transport error for {domain}: {e}", source=self.name) from e
