"""
Module: auth
Description: Package initialization for credential handling.

This package contains the application credential lifecycle:
- credentials: Bearer token state and expiry decoding
- token: Token exchange against the remote API
"""

__all__ = []
