"""
Keyed State Configuration Settings

This module contains the configuration constants for the keyed state store.
Values can be overridden through environment variables.
"""

import os
from dataclasses import dataclass


@dataclass
class Settings:
    """Store configuration settings."""

    # Subscription settings
    SUBSCRIPTION_BUFFER_SIZE: int = int(os.environ.get("KEYED_STATE_BUFFER_SIZE", "0"))  # 0 means unbounded

    # Concurrency settings
    THREAD_SAFE: bool = os.environ.get("KEYED_STATE_THREAD_SAFE", "true").lower() == "true"

    # Logging settings
    DEBUG: bool = os.environ.get("KEYED_STATE_DEBUG", "false").lower() == "true"
    LOG_LEVEL: str = os.environ.get("KEYED_STATE_LOG_LEVEL", "INFO")


# Global settings instance
settings = Settings()
