"""Combined availability checking service."""

import asyncio
import logging
from datetime import timedelta
from typing import Any, Dict, List, Optional, Sequence

from ..config import Settings, load_config
from ..models import CheckResult, TLDPricing, normalize_domain
from ..utils.cache import AvailabilityCache
from ..utils.inflight import InFlightRegistry
from .bulk_resolver import BulkResolver
from .dns_checker import DNSProbe
from .pipeline import ResolutionPipeline
from .registrar_checker import RegistrarProbe
from .whois_checker import WhoisPhrases, WhoisProbe


logger = logging.getLogger(__name__)


class AvailabilityService:
    """Unified service for checking domain availability.

    Owns the cache and the in-flight registry, so two services never share
    state. Probes can be passed in to replace the configured ones.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        cache: Optional[AvailabilityCache] = None,
        inflight: Optional[InFlightRegistry] = None,
        registrar_probe: Optional[RegistrarProbe] = None,
        dns_probe: Optional[DNSProbe] = None,
        whois_probe: Optional[WhoisProbe] = None
    ):
        self.settings = settings or Settings()
        self.cache = cache if cache is not None else AvailabilityCache(ttl_hours=self.settings.cache.ttl_hours)
        self.inflight = inflight if inflight is not None else InFlightRegistry()
        self.registrar_probe = registrar_probe or RegistrarProbe(
            self.settings.registrar,
            pricing_ttl_hours=self.settings.cache.pricing_ttl_hours
        )
        self.dns_probe = dns_probe or DNSProbe(
            timeout=self.settings.dns.timeout,
            max_concurrent=self.settings.dns.max_concurrent
        )
        self.whois_probe = whois_probe or WhoisProbe(
            timeout=self.settings.whois.timeout,
            max_concurrent=self.settings.whois.max_concurrent,
            phrases=WhoisPhrases.load(self.settings.whois.phrases_file)
        )
        self.registrar_ttl = timedelta(hours=self.settings.cache.registrar_ttl_hours)
        self.bulk = BulkResolver(self.check_availability)

        if self.registrar_probe.is_ready():
            logger.info("Domain checking: using registrar API")
        else:
            logger.warning("Domain checking: registrar not configured, using DNS/WHOIS fallback")

    @classmethod
    def from_config(cls, config_path: str = "config/config.yaml") -> 'AvailabilityService':
        return cls(settings=load_config(config_path))

    def _new_pipeline(self, domain: str) -> ResolutionPipeline:
        return ResolutionPipeline(
            domain,
            dns_probe=self.dns_probe,
            whois_probe=self.whois_probe,
            registrar_probe=self.registrar_probe,
            cache=self.cache,
            registrar_ttl=self.registrar_ttl
        )

    async def check_availability(self, domain: str) -> CheckResult:
        """Check a single domain's availability.

        Answers from the cache when possible; otherwise joins a pending check
        for the same domain, or starts one.
        """
        domain = normalize_domain(domain)

        # Cache lookup and in-flight registration happen without yielding
        cached = self.cache.get(domain)
        if cached is not None:
            return cached.as_cached()

        return await self.inflight.resolve_or_join(domain, lambda: self._new_pipeline(domain).run())

    async def check_multiple_domains(self, domains: Sequence[str]) -> List[CheckResult]:
        """Check many domains; results match the input length and order."""
        return await self.bulk.check_many(domains)

    async def get_tld_pricing(self, tld: str) -> TLDPricing:
        return await self.registrar_probe.get_tld_pricing(tld)

    def get_cache_stats(self) -> Dict[str, Any]:
        stats: Dict[str, Any] = dict(self.cache.stats())
        stats['in_flight_count'] = len(self.inflight)
        stats['registrar_configured'] = self.registrar_probe.is_ready()
        return stats

    def clear_cache(self):
        self.cache.clear()
        logger.info("Domain cache cleared")

    def check_single(self, domain: str) -> CheckResult:
        """Synchronous wrapper for check_availability."""
        return asyncio.run(self.check_availability(domain))

    def check_batch(self, domains: Sequence[str]) -> List[CheckResult]:
        """Synchronous wrapper for check_multiple_domains."""
        return asyncio.run(self.check_multiple_domains(domains))

    def check_word_across_tlds(self, word: str, tlds: List[str]) -> Dict[str, CheckResult]:
        """Check a single word across multiple TLDs."""
        domains = [f"{word}.{tld.lstrip('.')}" for tld in tlds]
        results = self.check_batch(domains)
        return {r.domain: r for r in results}
