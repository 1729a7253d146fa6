"""
Module: config
Description: Configuration loading for the Flying Events client.
"""

from .settings import ClientSettings

__all__ = ["ClientSettings"]
