"""Value types shared by the probes, the pipeline and the service."""

import re
from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional

from .errors import ValidationError


DOMAIN_PATTERN = re.compile(r'^[a-z0-9]+([\-.][a-z0-9]+)*\.[a-z]{2,}$')


class Availability(str, Enum):
    """Verdict for a single domain."""
    AVAILABLE = 'available'
    TAKEN = 'taken'
    PREMIUM = 'premium'
    ERROR = 'error'


@dataclass(frozen=True)
class Pricing:
    amount: float
    currency: str = 'USD'

    def to_dict(self) -> Dict[str, Any]:
        return {'amount': self.amount, 'currency': self.currency}


@dataclass(frozen=True)
class CheckResult:
    """Result of a domain availability check.

    Results are shared between every caller that asked for the same domain,
    so they are immutable. ``price`` is only set for available or premium
    domains, ``error_detail`` only for errors.
    """
    domain: str
    availability: Availability
    method: str
    price: Optional[Pricing] = None
    checked_at: datetime = field(default_factory=datetime.now)
    error_detail: Optional[str] = None
    cached: bool = False

    @property
    def available(self) -> bool:
        return self.availability is Availability.AVAILABLE

    @property
    def is_error(self) -> bool:
        return self.availability is Availability.ERROR

    def as_cached(self) -> 'CheckResult':
        return replace(self, cached=True)

    def to_dict(self) -> Dict[str, Any]:
        result = {
            'domain': self.domain,
            'available': self.available,
            'status': self.availability.value,
            'method': self.method,
            'checked_at': self.checked_at.isoformat(),
            'cached': self.cached
        }
        if self.price:
            result['price'] = self.price.to_dict()
        if self.error_detail:
            result['error'] = self.error_detail
        return result

    @classmethod
    def error(cls, domain: str, detail: str) -> 'CheckResult':
        return cls(
            domain=domain,
            availability=Availability.ERROR,
            method='error',
            error_detail=detail
        )


@dataclass(frozen=True)
class TLDPricing:
    """Registrar list prices for a TLD."""
    tld: str
    registration: Optional[float]
    renewal: Optional[float]
    transfer: Optional[float]
    currency: str = 'USD'

    def to_dict(self) -> Dict[str, Any]:
        return {
            'tld': self.tld,
            'registration': self.registration,
            'renewal': self.renewal,
            'transfer': self.transfer,
            'currency': self.currency
        }


def normalize_domain(domain: str) -> str:
    """Lowercase and trim a domain; the only form used as a lookup key."""
    return domain.strip().lower()


def validate_domain(domain: str) -> str:
    """Normalize ``domain`` and check its syntax.

    Returns the normalized domain, raises ValidationError if it is malformed.
    """
    if not isinstance(domain, str) or not domain.strip():
        raise ValidationError("Domain name is required")
    normalized = normalize_domain(domain)
    if not DOMAIN_PATTERN.match(normalized):
        raise ValidationError(f"Invalid domain name format: {domain!r} (example: example.com)")
    return normalized
