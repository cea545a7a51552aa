"""Helpers for safe debug logging.

Customer records carry personal contact details.  This module provides a
small utility to redact those fields before emitting DEBUG logs.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

from pydantic import BaseModel

_REDACTED = "<redacted>"

# Matched against the end of the lower-cased key, so ``customerEmail`` and
# ``billing_address`` are covered too.
_SENSITIVE_SUFFIXES: tuple[str, ...] = (
    "email",
    "phone",
    "address",
    # Free text may quote contact details
    "notes",
)


def _is_sensitive(key: str) -> bool:
    return key.lower().endswith(_SENSITIVE_SUFFIXES)


def redact_for_log(value: Any, *, max_string: int = 512, _depth: int = 0) -> Any:
    """Return a redacted copy of *value* suitable for debug logs.

    Records are dumped in their stored camelCase form first.  Empty
    sensitive values are kept so logs still show that a field was cleared.
    """
    if _depth > 20:
        return "<max-depth>"

    if value is None or isinstance(value, (bool, int, float)):
        return value

    if isinstance(value, str):
        return value if len(value) <= max_string else f"{value[:max_string]}…<truncated>"

    if isinstance(value, BaseModel):
        value = value.model_dump(mode="json", by_alias=True, exclude_none=True)

    if isinstance(value, Mapping):
        redacted: dict[str, Any] = {}
        for k, v in value.items():
            key = str(k)
            if v and _is_sensitive(key):
                redacted[key] = _REDACTED
            else:
                redacted[key] = redact_for_log(v, max_string=max_string, _depth=_depth + 1)
        return redacted

    if isinstance(value, Sequence) and not isinstance(value, (bytes, bytearray)):
        return [redact_for_log(v, max_string=max_string, _depth=_depth + 1) for v in value]

    # Dates and other scalars: their str() is safe and readable.
    return str(value)
