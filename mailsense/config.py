from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="MAILSENSE_",
        extra="ignore",
    )

    # Application
    debug: bool = Field(default=False)
    log_level: str = Field(default="INFO")
    config_path: str = Field(default="mailsense.yml")

    # Syntax / normalization
    idn_enabled: bool = Field(default=True)  # Use the idna library for IDN domains
    strict_syntax: bool = Field(default=False)

    # DNS checks
    dns_enabled: bool = Field(default=False)
    dns_timeout: float = Field(default=5.0)
    dns_nameservers: list[str] = Field(default_factory=list)
    dns_concurrency: int = Field(default=10)

    # Suggestions
    similarity_threshold: float = Field(default=80.0)


class DomainListsConfig:
    """Allow/block list seeds from the YAML config."""

    def __init__(self, data: dict[str, Any]) -> None:
        self.allowed: list[str] = [d.strip().lower() for d in data.get("allowed", []) if d]
        self.blocked: list[str] = [d.strip().lower() for d in data.get("blocked", []) if d]


class AppConfig:
    """Combined configuration from .env and the YAML config file."""

    def __init__(self, settings: Settings | None = None) -> None:
        self.settings = settings or Settings()
        self._load_yaml()

    def _load_yaml(self) -> None:
        config_path = Path(self.settings.config_path)
        if config_path.exists():
            with open(config_path) as f:
                data = yaml.safe_load(f) or {}
        else:
            data = {}

        self.domains = DomainListsConfig(data.get("domains", {}))


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


@lru_cache
def get_config() -> AppConfig:
    """Get cached full config instance."""
    return AppConfig(get_settings())
