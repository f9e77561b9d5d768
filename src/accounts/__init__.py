# src/accounts/__init__.py
# Created: 2026-10-19 09:12:40
# Author: accounts-client

"""
Registration, login, profile and token refresh operations.
"""

from .account_service import (
    AccountService,
    AccountServiceError,
    RegistrationError,
    LoginError,
    ProfileError,
    TokenRefreshError,
    create_account_service
)

__all__ = [
    'AccountService',
    'AccountServiceError',
    'RegistrationError',
    'LoginError',
    'ProfileError',
    'TokenRefreshError',
    'create_account_service'
]
