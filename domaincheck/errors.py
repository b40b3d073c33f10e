"""Error types raised by the availability probes."""

from typing import Optional


class DomainCheckError(Exception):
    """Base class for all domain check errors."""


class ConfigurationError(DomainCheckError):
    """A probe is not configured, or the config file is unusable."""


class UpstreamError(DomainCheckError):
    """An external lookup failed: transport, HTTP status or response shape."""

    def __init__(self, message: str, source: Optional[str] = None):
        super().__init__(message)
        self.source = source


class ProbeTimeoutError(UpstreamError):
    """An external lookup did not answer within its deadline."""


class ValidationError(DomainCheckError, ValueError):
    """A domain string is not a syntactically valid domain name."""
