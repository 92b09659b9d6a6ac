"""
Configuration management for the EventWatch process.

Loads and validates settings from environment variables and an optional
.env file. Exposes a single source of truth for all service configuration.
"""

from backend_eventwatch.config.settings import WatcherSettings, get_settings  # noqa: F401

__all__ = ["WatcherSettings", "get_settings"]
