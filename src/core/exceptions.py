from typing import Any, Dict, Optional

class AccountsError(Exception):
    """Base exception class for all accounts client exceptions"""
    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

class ConfigError(AccountsError):
    """Raised when there is a configuration error"""
    pass

class LoggerError(AccountsError):
    """Raised when there is a logging error"""
    pass

class StorageError(AccountsError):
    """Raised when the token store cannot be read or written"""
    pass
