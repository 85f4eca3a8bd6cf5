"""
Configuration module for drainer settings
"""

from .settings import Settings, AWSSettings, RancherSettings, DrainerSettings, LoggingSettings

__all__ = [
    "Settings",
    "AWSSettings",
    "RancherSettings",
    "DrainerSettings",
    "LoggingSettings"
]
