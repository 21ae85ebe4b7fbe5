"""Configuration module for the Guardian SDK."""
from .settings import GuardianSettings, load_settings

__all__ = ["GuardianSettings", "load_settings"]
