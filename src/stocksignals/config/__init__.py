"""
Configuration module for stocksignals.

Exports the main Settings class and get_settings function for application-wide
configuration management.
"""

from .settings import IndicatorSettings, LoggingSettings, Settings, SignalSettings, get_settings

__all__ = ["Settings", "IndicatorSettings", "SignalSettings", "LoggingSettings", "get_settings"]
