# src/utils/api/__init__.py
# Created: 2026-10-19 09:12:40
# Author: accounts-client

"""
API utilities for making HTTP requests and classifying failed responses.
"""

from .api_client import (
    APIClient,
    APIConfig,
    APIResponse,
    APIError,
    RequestError,
    RequestMethod,
    bearer
)

from .response_handler import (
    ErrorKind,
    ErrorPayload,
    TOKEN_NOT_VALID,
    classify_error,
    decode_body,
    no_response
)

__all__ = [
    'APIClient',
    'APIConfig',
    'APIResponse',
    'APIError',
    'RequestError',
    'RequestMethod',
    'bearer',
    'ErrorKind',
    'ErrorPayload',
    'TOKEN_NOT_VALID',
    'classify_error',
    'decode_body',
    'no_response'
]
