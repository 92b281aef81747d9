"""Configuration module for the FRAM provider."""
from .settings import ProviderConfig, load_settings

__all__ = ["ProviderConfig", "load_settings"]
