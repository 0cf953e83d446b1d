"""
Application configuration.
"""

from .loader import AppConfig, load_config

__all__ = ["AppConfig", "load_config"]
