"""Per-domain fallback pipeline: registrar, then DNS, then WHOIS."""

import logging
from datetime import timedelta
from enum import Enum
from typing import List, Optional

from ..errors import ConfigurationError
from ..models import Availability, CheckResult
from ..utils.cache import AvailabilityCache
from .dns_checker import DNSProbe
from .registrar_checker import RegistrarProbe
from .whois_checker import WhoisProbe


logger = logging.getLogger(__name__)


class PipelineState(str, Enum):
    NOT_STARTED = 'not_started'
    TRYING_REGISTRAR = 'trying_registrar'
    TRYING_DNS = 'trying_dns'
    TRYING_WHOIS = 'trying_whois'
    RESOLVED = 'resolved'


class ResolutionPipeline:
    """Resolves one domain by trying each probe tier in turn.

    ``run()`` always returns a CheckResult: probe failures move the pipeline
    to the next tier, and running out of tiers yields an Error result. Only
    non-error results are written to the cache.
    """

    def __init__(
        self,
        domain: str,
        dns_probe: DNSProbe,
        whois_probe: WhoisProbe,
        registrar_probe: Optional[RegistrarProbe] = None,
        cache: Optional[AvailabilityCache] = None,
        registrar_ttl: Optional[timedelta] = None
    ):
        self.domain = domain
        self.dns_probe = dns_probe
        self.whois_probe = whois_probe
        self.registrar_probe = registrar_probe
        self.cache = cache
        self.registrar_ttl = registrar_ttl
        self.state = PipelineState.NOT_STARTED
        self.history: List[PipelineState] = [self.state]
        self.result: Optional[CheckResult] = None

    def _enter(self, state: PipelineState):
        self.state = state
        self.history.append(state)

    async def run(self) -> CheckResult:
        if self.result is not None:
            return self.result

        try:
            result = await self._resolve()
        except Exception as e:
            logger.exception("Unexpected failure while checking %s", self.domain)
            result = CheckResult.error(self.domain, f"{type(e).__name__}: {e}")

        self._enter(PipelineState.RESOLVED)
        self.result = result

        if result.is_error:
            logger.error("%s: error (%s)", self.domain, result.error_detail)
        else:
            logger.info("%s: %s (%s)", self.domain, result.availability.value, result.method)
            if self.cache is not None:
                ttl = self.registrar_ttl if result.method == RegistrarProbe.name else None
                self.cache.set(self.domain, result, ttl=ttl)
        return result

    async def _resolve(self) -> CheckResult:
        registrar_error = None

        self._enter(PipelineState.TRYING_REGISTRAR)
        if self.registrar_probe is not None and self.registrar_probe.is_ready():
            try:
                return await self.registrar_probe.check(self.domain)
            except ConfigurationError as e:
                logger.debug("Registrar not usable for %s: %s", self.domain, e)
            except Exception as e:
                registrar_error = e
                logger.warning("Registrar check failed for %s, falling back to DNS/WHOIS: %s", self.domain, e)

        self._enter(PipelineState.TRYING_DNS)
        try:
            possibly_available = await self.dns_probe.check(self.domain)
        except Exception as e:
            detail = f"dns: {e}"
            if registrar_error is not None:
                detail = f"registrar: {registrar_error}; {detail}"
            return CheckResult.error(self.domain, detail)

        if not possibly_available:
            # A resolving name is registered; WHOIS has nothing to add
            return CheckResult(domain=self.domain, availability=Availability.TAKEN, method=DNSProbe.name)

        self._enter(PipelineState.TRYING_WHOIS)
        return await self.whois_probe.check(self.domain)
