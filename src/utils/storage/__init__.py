# src/utils/storage/__init__.py
# Created: 2026-10-19 09:12:40
# Author: accounts-client

"""
Key-value storage for access tokens.
"""

from .token_store import (
    TokenStore,
    InMemoryTokenStore,
    FileTokenStore,
    ACCESS_TOKEN_KEY
)

__all__ = [
    'TokenStore',
    'InMemoryTokenStore',
    'FileTokenStore',
    'ACCESS_TOKEN_KEY'
]
