"""Declarative provider for FRAM (PingAM / PingOne Advanced Identity Cloud) configuration."""

__version__ = "0.1.0"
