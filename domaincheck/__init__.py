"""Domain availability checking with registrar, DNS and WHOIS fallback."""

from .checkers import AvailabilityService
from .config import Settings, load_config
from .errors import ConfigurationError, DomainCheckError, ProbeTimeoutError, UpstreamError, ValidationError
from .models import Availability, CheckResult, Pricing, TLDPricing, normalize_domain, validate_domain

__version__ = "0.2.0"

__all__ = [
    'AvailabilityService', 'Settings', 'load_config',
    'DomainCheckError', 'ConfigurationError', 'UpstreamError', 'ProbeTimeoutError', 'ValidationError',
    'Availability', 'CheckResult', 'Pricing', 'TLDPricing', 'normalize_domain', 'validate_domain'
]
