"""
Configuration management for Airdrop Finder.

Loads settings from environment variables and an optional .env file.
Exposes a single source of truth for cache TTLs, chains and collector limits.
"""

from airdrop_finder.config.settings import Settings, get_settings  # noqa: F401

__all__ = ["Settings", "get_settings"]
