"""Turn loosely-typed agent results into plain mappings.

Agent results arrive as a JSON string, a mapping whose values may themselves
be JSON strings, or nothing at all. Everything here is total: malformed input
degrades to partial structure and is never raised to the caller.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Dict, Mapping

from ..models.payload import Payload, Structured, Unparsed

logger = logging.getLogger(__name__)


def _try_json(text: str) -> tuple[bool, Any]:
    try:
        return True, json.loads(text)
    except (TypeError, ValueError):
        return False, None


def _unwrap_fields(data: Mapping[str, Any]) -> Dict[str, Any]:
    """Shallow copy, decoding string fields that hold JSON."""
    unwrapped = dict(data)
    for key, value in unwrapped.items():
        if not isinstance(value, str):
            continue
        ok, decoded = _try_json(value)
        # A JSON string literal would decode to another str; leave those alone
        # so a second pass changes nothing.
        if ok and not isinstance(decoded, str):
            unwrapped[key] = decoded
    return unwrapped


def decode_payload(value: Any) -> Payload:
    """Decode an agent result into ``Unparsed`` or ``Structured``."""
    if not value:
        return Structured()

    if isinstance(value, bytes):
        value = value.decode("utf-8", errors="replace")

    if isinstance(value, str):
        ok, decoded = _try_json(value)
        if ok and isinstance(decoded, Mapping):
            return Structured(_unwrap_fields(decoded))
        logger.debug("Agent result is not a JSON object, keeping as text (%d chars)", len(value))
        return Unparsed(value)

    if isinstance(value, Mapping):
        return Structured(_unwrap_fields(value))

    logger.debug("Ignoring agent result of unexpected type %s", type(value).__name__)
    return Structured()


def normalize_result(value: Any) -> Dict[str, Any]:
    """Normalize an agent result into a mapping safe for field access.

    >>> normalize_result('{"a": 1}')
    {'a': 1}
    >>> normalize_result("hello")
    {'text': 'hello'}
    >>> normalize_result({"x": '{"y": 2}', "z": "plain"})
    {'x': {'y': 2}, 'z': 'plain'}
    """
    return decode_payload(value).as_mapping()
