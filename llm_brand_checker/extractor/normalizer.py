"""
Response normalization for LLM Brand Checker.

Turns a provider response of unknown shape into a single plain-text string.
Provider schemas differ across vendors and API versions, so the payload is
probed against a small set of known shapes in priority order, and anything
unrecognized degrades to its JSON form.

Known shapes (first match wins):
    1. Plain string
    2. Combined output text:        {"output_text": "..."}
    3. Responses-style output list: {"output": ["..." | {"content": ...}]}
    4. Chat-completions choices:    {"choices": [{"text"} | {"message": {"content"}}]}
    5. Generative-content:          {"candidates": [{"content": {"parts": [...]}}]}
    6. Wrapped result:              {"result": {"output": "..."}}
    7. Anything else:               JSON form of the payload, or str() for
                                    objects that are not JSON-like

Fields are read from mapping keys or object attributes, so SDK response
objects work as well as decoded JSON.

Example:
    >>> normalize({"choices": [{"message": {"content": "1. Acme"}}]})
    '1. Acme'
    >>> normalize({"candidates": [{"content": {"parts": [{"text": "a"}, {"text": "b"}]}}]})
    'a\\nb'
    >>> normalize(None)
    ''
"""

import json
import logging
from collections.abc import Mapping
from typing import Any

logger = logging.getLogger(__name__)

_MISSING = object()

_JSON_TYPES = (dict, list, tuple, int, float, bool, type(None))


def _field(obj: Any, name: str) -> Any:
    """Read `name` from a mapping key or an object attribute, None if absent."""
    if isinstance(obj, Mapping):
        return obj.get(name)
    value = getattr(obj, name, _MISSING)
    if value is _MISSING or callable(value):
        return None
    return value


def _is_structured(obj: Any) -> bool:
    return not isinstance(obj, str | bytes | int | float | bool) and obj is not None


def _first(value: Any) -> Any:
    """Return the first entry of a non-empty list/tuple, else None."""
    if isinstance(value, list | tuple) and value:
        return value[0]
    return None


def _stringify(value: Any) -> str:
    """JSON form of JSON-like values, plain str() for any other object."""
    if isinstance(value, str):
        return value
    if not isinstance(value, _JSON_TYPES):
        return str(value)
    try:
        return json.dumps(value, ensure_ascii=False, default=str)
    except (TypeError, ValueError):
        return str(value)


def _part_text(part: Any) -> str:
    if _is_structured(part):
        text = _field(part, "text")
        if text:
            return str(text)
    return _stringify(part)


def _from_output(entry: Any) -> str | None:
    if isinstance(entry, str):
        return entry
    content = _field(entry, "content")
    # Empty content falls through to the next shape
    if isinstance(content, str) and content:
        return content
    if isinstance(content, list | tuple):
        return "\n".join(_part_text(part) for part in content)
    return None


def _from_choice(choice: Any) -> str | None:
    text = _field(choice, "text")
    if text:
        return str(text)
    message = _field(choice, "message")
    if message is not None:
        content = _field(message, "content")
        if content:
            return str(content)
    return None


def _from_candidate(candidate: Any) -> str:
    content = _field(candidate, "content")

    parts = _field(content, "parts") if content is not None else None
    if isinstance(parts, list | tuple) and parts:
        texts = [str(_field(p, "text")) for p in parts if _field(p, "text")]
        return "\n".join(texts)

    for name in ("text", "output"):
        value = _field(candidate, name)
        if value:
            return str(value)

    if content:
        if isinstance(content, str):
            return content
        text = _field(content, "text")
        if text:
            return str(text)
        return _stringify(content)

    return _stringify(candidate)


def _probe(raw: Any) -> str:
    if isinstance(raw, str):
        return raw

    output_text = _field(raw, "output_text")
    if output_text:
        return str(output_text)

    entry = _first(_field(raw, "output"))
    if entry is not None:
        text = _from_output(entry)
        if text is not None:
            return text

    choice = _first(_field(raw, "choices"))
    if choice is not None:
        text = _from_choice(choice)
        if text is not None:
            return text

    candidate = _first(_field(raw, "candidates"))
    if candidate is not None:
        return _from_candidate(candidate)

    result = _field(raw, "result")
    if result is not None:
        output = _field(result, "output")
        if output:
            return str(output)

    return _stringify(raw)


def normalize(raw: Any) -> str:
    """
    Extract plain text from a provider response of arbitrary shape.

    Never raises. Returns "" for None and whenever probing fails internally,
    so callers can treat empty text as "no content".

    Args:
        raw: Provider payload (decoded JSON, SDK object, or plain string)

    Returns:
        Best-effort plain text for the brand matcher
    """
    if raw is None:
        return ""
    try:
        return _probe(raw)
    except Exception as e:
        logger.warning(
            f"Failed to normalize provider response of type {type(raw).__name__}: {e}"
        )
        return ""
