"""URL-safe share tokens for session results.

A record is dumped to compact JSON, UTF-8 encoded and base64url encoded with
the ``=`` padding stripped, so the token can sit in a ``#r=<token>`` fragment.
"""

from __future__ import annotations

import base64
import binascii
import json
import re
from typing import Any

from slothodoro.exceptions import DecodeError

SHARE_BASE_URL = "https://owleggsbot.github.io/slothodoro/"

_TOKEN_RE = re.compile(r"[A-Za-z0-9_-]*")
_FRAGMENT_RE = re.compile(r"#r=([A-Za-z0-9_-]+)")


def encode(record: Any) -> str:
    """Encode a JSON-safe record as an unpadded base64url token."""
    payload = json.dumps(record, separators=(",", ":"), ensure_ascii=False)
    token = base64.urlsafe_b64encode(payload.encode("utf-8")).decode("ascii")
    return token.rstrip("=")


def decode(token: str) -> Any:
    """Decode a token produced by :func:`encode`.

    Raises:
        DecodeError: On characters outside the base64url alphabet, a length
            that no padding can repair, invalid UTF-8, invalid JSON or JSON
            nested too deeply to parse.
    """
    if not isinstance(token, str) or not _TOKEN_RE.fullmatch(token):
        raise DecodeError("Token contains characters outside the base64url alphabet")
    if len(token) % 4 == 1:
        raise DecodeError("Token length cannot be repaired with padding")

    padded = token + "=" * (-len(token) % 4)
    try:
        raw = base64.urlsafe_b64decode(padded.encode("ascii"))
        return json.loads(raw.decode("utf-8"))
    except (binascii.Error, UnicodeDecodeError, ValueError, RecursionError) as e:
        raise DecodeError(f"Malformed share token: {e}") from e


def share_fragment(record: Any) -> str:
    """``#r=<token>`` fragment for a record."""
    return f"#r={encode(record)}"


def share_url(record: Any, base_url: str = SHARE_BASE_URL) -> str:
    return base_url + share_fragment(record)


def token_from_fragment(text: str) -> str:
    """Pull the token out of a share URL or fragment; bare tokens pass through."""
    text = text.strip()
    match = _FRAGMENT_RE.search(text)
    if match:
        return match.group(1)
    return text
