# src/utils/api/response_handler.py
# Created: 2026-10-19 09:12:40
# Author: accounts-client

from typing import Any, Optional, List, Union
from dataclasses import dataclass
from enum import Enum
import json
import logging

logger = logging.getLogger(__name__)

TOKEN_NOT_VALID = "token_not_valid"

class ErrorKind(Enum):
    """Shapes a failure body can take"""
    NO_RESPONSE = "no_response"  # transport failure, nothing received
    TEXT = "text"                # plain string body
    FIELDS = "fields"            # JSON object or array
    OPAQUE = "opaque"            # empty body or any other JSON value

@dataclass(frozen=True)
class ErrorPayload:
    """
    Failure body of an API call, classified once when it is received.

    Call sites ask the payload for its detail, its joined field values or
    whether it signals an expired token instead of inspecting the raw body.
    """
    kind: ErrorKind
    raw: Any = None
    status: Optional[int] = None

    @property
    def detail(self) -> Optional[str]:
        """Server-provided ``detail`` field, if present and non-empty"""
        if self.kind is ErrorKind.FIELDS and isinstance(self.raw, dict):
            detail = self.raw.get("detail")
            if detail:
                return _stringify(detail)
        return None

    @property
    def is_token_expired(self) -> bool:
        if self.kind is ErrorKind.TEXT:
            return "token" in self.raw
        if self.kind is ErrorKind.FIELDS and isinstance(self.raw, dict):
            return bool(self.raw.get("detail")) and self.raw.get("code") == TOKEN_NOT_VALID
        return False

    def field_values(self) -> List[str]:
        """Values of a field payload in payload order, lists flattened one level"""
        if self.kind is not ErrorKind.FIELDS:
            return []
        values = self.raw.values() if isinstance(self.raw, dict) else self.raw
        flat: List[str] = []
        for value in values:
            if isinstance(value, list):
                flat.extend(_stringify(item) for item in value)
            else:
                flat.append(_stringify(value))
        return flat

    def joined_values(self) -> str:
        return " ".join(self.field_values())

    def message(self, fallback: str, join_fields: bool = False) -> str:
        """
        Human-readable message for this payload

        Args:
            fallback: Message used when the payload carries nothing usable
            join_fields: Whether field values may be joined when there is no detail

        Returns:
            The detail, the joined field values, or the fallback
        """
        if self.detail:
            return self.detail
        if join_fields:
            joined = self.joined_values()
            if joined:
                return joined
        return fallback

def _stringify(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, list):
        return ",".join(_stringify(item) for item in value)
    return json.dumps(value)

def decode_body(raw: Union[bytes, str], charset: Optional[str] = None) -> Any:
    """
    Decode a response body: JSON when it parses, raw text otherwise, None when empty

    Bytes are decoded with the declared charset (UTF-8 when missing or unknown),
    undecodable bytes becoming U+FFFD.
    """
    if isinstance(raw, bytes):
        try:
            text = raw.decode(charset or "utf-8", errors="replace")
        except LookupError:
            logger.debug(f"Unknown charset {charset!r}, decoding as UTF-8")
            text = raw.decode("utf-8", errors="replace")
    else:
        text = raw
    if not text:
        return None
    try:
        return json.loads(text)
    except ValueError:
        logger.debug("Response body is not JSON, keeping raw text")
        return text

def classify_error(body: Any, status: Optional[int] = None) -> ErrorPayload:
    """Classify a decoded failure body into an ErrorPayload"""
    if isinstance(body, str):
        kind = ErrorKind.TEXT if body else ErrorKind.OPAQUE
    elif isinstance(body, (dict, list)):
        kind = ErrorKind.FIELDS
    else:
        kind = ErrorKind.OPAQUE
    return ErrorPayload(kind=kind, raw=body, status=status)

def no_response() -> ErrorPayload:
    """Payload for a request that never got a response"""
    return ErrorPayload(kind=ErrorKind.NO_RESPONSE)
