"""Precision-safe JSON decoding for Billbee responses.

Billbee order and article identifiers are 17-digit integers. JSON decoders
that map numbers onto doubles silently round them, so the API's own clients
quote them before decoding. The default strategy here does the same with a
text rewrite: every ``:`` immediately followed by exactly 17 digits becomes
``:"<digits>"``.

Some marketplaces embed their order ids inside string values, e.g.
``"ExternalId": "AmazonOrderId:12345678901234567"``. The rewrite would insert
quotes into that string and break the document, so those substrings are
masked with placeholder tokens first and restored afterwards.

All functions are pure; nothing is cached between calls.
"""
from __future__ import annotations

import json
import re
import uuid
from typing import Any, Dict, Tuple

from .errors import DecodeError

BIG_INT_DIGITS = 17

BIG_INT_PATTERN = re.compile(r":(\d{%d})(?![\d.eE])" % BIG_INT_DIGITS)
VENDOR_ID_PATTERN = re.compile(r"[A-Za-z_]*Order[Ii][Dd]:\d{%d,}" % BIG_INT_DIGITS)

_CONTEXT_CHARS = 40


def mask_vendor_ids(text: str) -> Tuple[str, Dict[str, str]]:
    """Replace embedded vendor order ids with unique placeholder tokens."""
    nonce = uuid.uuid4().hex
    masked: Dict[str, str] = {}

    def _replace(match: re.Match) -> str:
        token = f"__billbee_mask_{nonce}_{len(masked)}__"
        masked[token] = match.group(0)
        return token

    return VENDOR_ID_PATTERN.sub(_replace, text), masked


def restore_vendor_ids(text: str, masked: Dict[str, str]) -> str:
    for token, original in masked.items():
        text = text.replace(token, original)
    return text


def quote_big_ints(text: str) -> str:
    return BIG_INT_PATTERN.sub(r':"\1"', text)


def stringify_big_ints(text: str) -> str:
    """Quote 17-digit object values while leaving vendor ids intact."""
    masked_text, masked = mask_vendor_ids(text)
    return restore_vendor_ids(quote_big_ints(masked_text), masked)


class _WideInt(int):
    """Integer literal of the big-int width, tagged by the decoder."""


def _parse_int(literal: str) -> int:
    if len(literal) == BIG_INT_DIGITS and literal.isdigit():
        return _WideInt(literal)
    return int(literal)


def _quote_wide_values(pairs: list) -> Dict[str, Any]:
    return {key: str(int(value)) if isinstance(value, _WideInt) else value for key, value in pairs}

def _plain_ints(value: Any) -> Any:
    if isinstance(value, _WideInt):
        return int(value)
    if isinstance(value, dict):
        return {key: _plain_ints(item) for key, item in value.items()}
    if isinstance(value, list):
        return [_plain_ints(item) for item in value]
    return value



def _loads(text: str, **kwargs: Any) -> Any:
    try:
        return json.loads(text, **kwargs)
    except json.JSONDecodeError as exc:
        start = max(exc.pos - _CONTEXT_CHARS, 0)
        context = exc.doc[start : exc.pos + _CONTEXT_CHARS]
        raise DecodeError(f"invalid JSON response: {exc.msg}", context=context, position=exc.pos) from exc


def decode_body(text: str, *, preserve_precision: bool = True, strategy: str = "regex") -> Any:
    """Decode a response body.

    ``strategy="structural"`` lets the JSON decoder tag integer literals
    instead of scanning text, so strings can never be rewritten. It applies
    the same width rule to object values; array items stay plain integers.
    """
    if not text or not text.strip():
        return None
    if not preserve_precision:
        return _loads(text)
    if strategy == "structural":
        return _plain_ints(_loads(text, parse_int=_parse_int, object_pairs_hook=_quote_wide_values))
    if strategy != "regex":
        raise ValueError(f"unknown decode strategy: {strategy}")
    return _loads(stringify_big_ints(text))
