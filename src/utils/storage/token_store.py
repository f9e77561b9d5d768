# src/utils/storage/token_store.py
# Created: 2026-10-19 09:12:40
# Author: accounts-client

from typing import Dict, Optional, Protocol, Union
from pathlib import Path
import json
import logging
import aiofiles

from src.core.exceptions import StorageError

logger = logging.getLogger(__name__)

ACCESS_TOKEN_KEY = "token"

class TokenStore(Protocol):
    """Protocol for key-value token storage"""
    async def get(self, key: str) -> Optional[str]:
        """Get the value stored under key"""
        ...

    async def set(self, key: str, value: str) -> None:
        """Overwrite the value stored under key"""
        ...

class InMemoryTokenStore:
    """Token store kept in a dict, lost when the process exits"""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._values: Dict[str, str] = dict(initial or {})

    async def get(self, key: str) -> Optional[str]:
        return self._values.get(key)

    async def set(self, key: str, value: str) -> None:
        self._values[key] = value

class FileTokenStore:
    """
    Token store persisted as a JSON object in a single file.

    Every write rewrites the whole file; concurrent writers overwrite each
    other, the last one wins.
    """

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    async def _read_all(self) -> Dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            async with aiofiles.open(self.path, 'r') as f:
                content = await f.read()
        except OSError as e:
            raise StorageError(f"Failed to read token store {self.path}: {str(e)}")

        if not content.strip():
            return {}
        try:
            values = json.loads(content)
        except ValueError as e:
            raise StorageError(f"Token store {self.path} is not valid JSON: {str(e)}")
        if not isinstance(values, dict):
            raise StorageError(f"Token store {self.path} must hold a JSON object")
        return values

    async def get(self, key: str) -> Optional[str]:
        return (await self._read_all()).get(key)

    async def set(self, key: str, value: str) -> None:
        values = await self._read_all()
        values[key] = value
        try:
            if not self.path.parent.exists():
                self.path.parent.mkdir(parents=True, exist_ok=True)
            async with aiofiles.open(self.path, 'w') as f:
                await f.write(json.dumps(values, indent=2))
        except OSError as e:
            logger.error(f"Failed to write token store: {str(e)}")
            raise StorageError(f"Failed to write token store {self.path}: {str(e)}")
        logger.debug(f"Stored value for '{key}' in {self.path}")
