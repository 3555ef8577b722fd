"""
Configuration module for easy_orm.

Provides environment-driven settings for the default HTTP transport.
"""

from .settings import TransportConfig, TransportConfigurationError, config

__all__ = ["TransportConfig", "TransportConfigurationError", "config"]
