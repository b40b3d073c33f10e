"""Registrar API availability checker.

Talks to a Cloudflare-style registrar API:

- ``GET /accounts/{account}/registrar/domains/{domain}/check`` for an exact check,
- ``GET /accounts/{account}/registrar/domains/search?name=..&tlds=..`` as fallback,
- ``GET /accounts/{account}/registrar/domains/pricing?tld=..`` for TLD list prices.

Every response is wrapped in ``{"success": bool, "result": ...}``.
"""

import logging
from typing import Any, Dict, Optional

import httpx

from ..config import RegistrarSettings
from ..errors import ConfigurationError, UpstreamError
from ..models import Availability, CheckResult, Pricing, TLDPricing
from ..utils.cache import AvailabilityCache


logger = logging.getLogger(__name__)


def _as_float(value: Any) -> Optional[float]:
    if value is None or value == '':
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


class RegistrarProbe:
    """Authoritative availability lookup against the registrar API."""

    name = 'registrar'

    def __init__(
        self,
        settings: Optional[RegistrarSettings] = None,
        pricing_ttl_hours: float = 24
    ):
        self.settings = settings or RegistrarSettings()
        self._pricing_cache = AvailabilityCache(ttl_hours=pricing_ttl_hours)

    def is_ready(self) -> bool:
        """Check if credentials are configured."""
        return self.settings.configured

    def _build_client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=f"{self.settings.base_url.rstrip('/')}/accounts/{self.settings.account_id}/registrar/domains",
            headers={
                'Authorization': f"Bearer {self.settings.api_token}",
                'Content-Type': 'application/json'
            },
            timeout=httpx.Timeout(self.settings.timeout)
        )

    def _require_ready(self):
        if not self.is_ready():
            raise ConfigurationError("Registrar API credentials not configured")

    async def _get_result(self, client: httpx.AsyncClient, path: str, params: Optional[Dict[str, str]] = None) -> Any:
        """GET an endpoint and unwrap its ``result``; raise UpstreamError otherwise."""
        try:
            response = await client.get(path, params=params)
        except httpx.HTTPError as e:
            raise UpstreamError(f"Registrar request failed: {e}", source=self.name) from e

        if response.is_error:
            raise UpstreamError(f"Registrar API error: {response.status_code}", source=self.name)

        try:
            data = response.json()
        except ValueError as e:
            raise UpstreamError("Registrar returned a non-JSON response", source=self.name) from e

        if not isinstance(data, dict) or not data.get('success') or data.get('result') is None:
            raise UpstreamError("Unexpected response from registrar", source=self.name)
        return data['result']

    def _to_result(self, domain: str, entry: Dict[str, Any]) -> CheckResult:
        if entry.get('available') is True:
            availability = Availability.PREMIUM if entry.get('premium') else Availability.AVAILABLE
            amount = _as_float(entry.get('price'))
            price = Pricing(amount, entry.get('currency') or 'USD') if amount is not None else None
        else:
            availability = Availability.TAKEN
            price = None
        return CheckResult(domain=domain, availability=availability, method=self.name, price=price)

    async def check(self, domain: str) -> CheckResult:
        """Check a domain, falling back to the search endpoint on failure.

        Raises ConfigurationError when unconfigured and UpstreamError when
        neither endpoint gives an answer.
        """
        self._require_ready()

        async with self._build_client() as client:
            try:
                entry = await self._get_result(client, f"/{domain}/check")
                if not isinstance(entry, dict):
                    raise UpstreamError("Unexpected response from registrar", source=self.name)
                return self._to_result(domain, entry)
            except UpstreamError as e:
                logger.debug("Registrar exact check failed for %s (%s), trying search", domain, e)

            return await self._search(client, domain)

    async def _search(self, client: httpx.AsyncClient, domain: str) -> CheckResult:
        labels = domain.split('.')
        if len(labels) < 2:
            raise UpstreamError(f"Invalid domain format: {domain}", source=self.name)
        name, tld = '.'.join(labels[:-1]), labels[-1]

        entries = await self._get_result(client, "/search", params={'name': name, 'tlds': tld})
        if not isinstance(entries, list):
            raise UpstreamError("Unexpected search response from registrar", source=self.name)

        for entry in entries:
            if isinstance(entry, dict) and entry.get('name') == domain:
                return self._to_result(domain, entry)

        # No exact match is reported as taken, never as unknown
        logger.info("Registrar search had no exact match for %s, treating as taken", domain)
        return CheckResult(domain=domain, availability=Availability.TAKEN, method=self.name)

    async def get_tld_pricing(self, tld: str) -> TLDPricing:
        """Get registrar list prices for a TLD (e.g. 'com', 'io')."""
        self._require_ready()
        tld = tld.strip().lower().lstrip('.')

        cached = self._pricing_cache.get(tld)
        if cached is not None:
            return cached

        async with self._build_client() as client:
            data = await self._get_result(client, "/pricing", params={'tld': tld})
        if not isinstance(data, dict):
            raise UpstreamError(f"Unexpected pricing response for .{tld}", source=self.name)

        pricing = TLDPricing(
            tld=tld,
            registration=_as_float(data.get('registration_price')),
            renewal=_as_float(data.get('renewal_price')),
            transfer=_as_float(data.get('transfer_price')),
            currency=data.get('currency') or 'USD'
        )
        self._pricing_cache.set(tld, pricing)
        return pricing
