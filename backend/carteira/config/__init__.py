"""Configuration package for the Carteira service."""

from .settings import AppSettings, get_settings

__all__ = ["AppSettings", "get_settings"]
