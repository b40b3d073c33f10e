"""Configuration loading for the availability checker."""

import os
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from .errors import ConfigurationError


DEFAULT_CONFIG_PATH = "config/config.yaml"


@dataclass
class DNSSettings:
    timeout: float = 3.0
    max_concurrent: int = 20


@dataclass
class WhoisSettings:
    timeout: float = 5.0
    max_concurrent: int = 5
    phrases_file: Optional[str] = None


@dataclass
class CacheSettings:
    ttl_hours: float = 24
    registrar_ttl_hours: float = 6
    pricing_ttl_hours: float = 24


@dataclass
class RegistrarSettings:
    base_url: str = "https://api.cloudflare.com/client/v4"
    timeout: float = 10.0
    api_token: Optional[str] = None
    account_id: Optional[str] = None

    @property
    def configured(self) -> bool:
        return bool(self.api_token and self.account_id)


@dataclass
class Settings:
    dns: DNSSettings = field(default_factory=DNSSettings)
    whois: WhoisSettings = field(default_factory=WhoisSettings)
    cache: CacheSettings = field(default_factory=CacheSettings)
    registrar: RegistrarSettings = field(default_factory=RegistrarSettings)


def _section(cls, data: Any, name: str):
    if data is None:
        return cls()
    if not isinstance(data, dict):
        raise ConfigurationError(f"Config section '{name}' must be a mapping")
    known = {f.name for f in fields(cls)}
    return cls(**{k: v for k, v in data.items() if k in known})


def settings_from_dict(data: Dict[str, Any], env: Optional[Dict[str, str]] = None) -> Settings:
    """Build Settings from a parsed config mapping plus environment overrides."""
    env = os.environ if env is None else env
    settings = Settings(
        dns=_section(DNSSettings, data.get('dns'), 'dns'),
        whois=_section(WhoisSettings, data.get('whois'), 'whois'),
        cache=_section(CacheSettings, data.get('cache'), 'cache'),
        registrar=_section(RegistrarSettings, data.get('registrar'), 'registrar'),
    )

    # Credentials live in the environment, not in the checked-in YAML
    if env.get('CLOUDFLARE_API_TOKEN'):
        settings.registrar.api_token = env['CLOUDFLARE_API_TOKEN']
    if env.get('CLOUDFLARE_ACCOUNT_ID'):
        settings.registrar.account_id = env['CLOUDFLARE_ACCOUNT_ID']
    return settings


def load_config(config_path: str = DEFAULT_CONFIG_PATH, env: Optional[Dict[str, str]] = None) -> Settings:
    """Load configuration from YAML file."""
    config_file = Path(config_path)
    data: Any = {}
    if config_file.exists():
        try:
            with open(config_file) as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid config file {config_file}: {e}") from e
    if not isinstance(data, dict):
        raise ConfigurationError(f"Config file {config_file} must contain a mapping")
    return settings_from_dict(data, env=env)
