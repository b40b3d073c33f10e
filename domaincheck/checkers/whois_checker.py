"""WHOIS-based domain availability checker."""

import asyncio
import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from functools import partial
from pathlib import Path
from typing import Any, Callable, Optional, Tuple, Union

import whois
import yaml
from whois.exceptions import WhoisDomainNotFoundError

from ..errors import ConfigurationError
from ..models import Availability, CheckResult


logger = logging.getLogger(__name__)

DEFAULT_PHRASES_FILE = Path(__file__).resolve().parent.parent / 'data' / 'whois_phrases.yaml'


@dataclass(frozen=True)
class WhoisPhrases:
    """Vocabulary used to classify raw WHOIS text."""
    available: Tuple[str, ...]
    premium: Tuple[str, ...]
    rate_limited: Tuple[str, ...] = ()

    @classmethod
    def load(cls, path: Optional[Union[str, Path]] = None) -> 'WhoisPhrases':
        path = Path(path) if path else DEFAULT_PHRASES_FILE
        try:
            with open(path) as f:
                data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            raise ConfigurationError(f"Cannot load WHOIS phrases from {path}: {e}") from e
        if not isinstance(data, dict):
            raise ConfigurationError(f"WHOIS phrases file {path} must contain a mapping")

        def phrases(key: str) -> Tuple[str, ...]:
            return tuple(str(p).lower() for p in data.get(key) or [])

        return cls(
            available=phrases('available'),
            premium=phrases('premium'),
            rate_limited=phrases('rate_limited')
        )

    def classify(self, text: str) -> Availability:
        """Classify WHOIS text; the first category with a matching phrase wins."""
        lowered = text.lower()
        for availability, phrases in (
            (Availability.AVAILABLE, self.available),
            (Availability.PREMIUM, self.premium),
        ):
            if any(p in lowered for p in phrases):
                return availability
        return Availability.TAKEN

    def is_rate_limited(self, text: str) -> bool:
        lowered = text.lower()
        return any(p in lowered for p in self.rate_limited)


def _record_text(record: Any) -> str:
    if isinstance(record, str):
        return record
    return getattr(record, 'text', None) or str(record)


class WhoisProbe:
    """WHOIS-based verification of a DNS "possibly available" answer.

    Never raises and never returns an error: a lookup that times out, fails,
    or is refused by a rate-limiting server yields Taken.
    """

    name = 'whois'

    def __init__(
        self,
        timeout: float = 5.0,
        max_concurrent: int = 5,
        phrases: Optional[WhoisPhrases] = None,
        lookup: Optional[Callable[[str], Any]] = None
    ):
        self.timeout = timeout
        self.max_concurrent = max_concurrent
        self.phrases = phrases or WhoisPhrases.load()
        # The socket deadline matches the probe deadline
        self._lookup = lookup or partial(whois.whois, timeout=timeout)
        self._executor: Optional[ThreadPoolExecutor] = None
        self._semaphore: Optional[asyncio.Semaphore] = None
        self._semaphore_loop = None

    def _get_semaphore(self) -> asyncio.Semaphore:
        loop = asyncio.get_running_loop()
        if self._semaphore is None or self._semaphore_loop is not loop:
            self._semaphore = asyncio.Semaphore(self.max_concurrent)
            self._semaphore_loop = loop
        return self._semaphore

    def _get_executor(self) -> ThreadPoolExecutor:
        # Kept off the loop default executor, which asyncio.run joins on exit
        if self._executor is None:
            self._executor = ThreadPoolExecutor(
                max_workers=self.max_concurrent * 2,
                thread_name_prefix="whois"
            )
        return self._executor

    async def _fetch_text(self, domain: str) -> str:
        try:
            loop = asyncio.get_running_loop()
            record = await loop.run_in_executor(self._get_executor(), self._lookup, domain)
        except WhoisDomainNotFoundError as e:
            # The message is the server's "not found" response
            return str(e)
        return _record_text(record)

    def _result(self, domain: str, availability: Availability) -> CheckResult:
        return CheckResult(domain=domain, availability=availability, method=self.name)

    async def check(self, domain: str) -> CheckResult:
        async with self._get_semaphore():
            try:
                text = await asyncio.wait_for(self._fetch_text(domain), timeout=self.timeout)
            except asyncio.TimeoutError:
                logger.warning("WHOIS lookup timed out for %s after %.1fs, assuming taken", domain, self.timeout)
                return self._result(domain, Availability.TAKEN)
            except Exception as e:
                logger.warning("WHOIS check failed for %s: %s", domain, e)
                return self._result(domain, Availability.TAKEN)

        if self.phrases.is_rate_limited(text):
            logger.warning("WHOIS server rate limited the lookup for %s, assuming taken", domain)
            return self._result(domain, Availability.TAKEN)

        return self._result(domain, self.phrases.classify(text))
