"""
Application settings.

Typed snapshot of the environment for the pipeline, collector and cache.
Built from config.env loaders; call get_settings() at process start and
pass the values into the objects that need them.
"""

from __future__ import annotations

from dataclasses import dataclass

from airdrop_finder.config.env import (
    get_cache_ttl_sec,
    get_collector_timeout_sec,
    get_supported_chains,
)


@dataclass(frozen=True)
class Settings:
    """Airdrop Finder runtime settings."""

    cache_ttl_sec: int
    supported_chains: tuple[int, ...]
    collector_timeout_sec: float


def get_settings() -> Settings:
    """
    Return the current application settings.

    Reads the environment (and .env) on every call so tests can monkeypatch
    variables without reloading modules.
    """
    return Settings(
        cache_ttl_sec=get_cache_ttl_sec(),
        supported_chains=get_supported_chains(),
        collector_timeout_sec=get_collector_timeout_sec(),
    )
