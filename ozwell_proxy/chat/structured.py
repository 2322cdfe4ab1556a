"""Structured output negotiation.

The backend has no native JSON mode. Structured output is approximated in
two steps:
- request side: the schema is spelled out in the system message
- response side: the reply is parsed as JSON, and when that fails a
  best-effort extraction recovers the fields of the language/title schema
  some chat clients use to name conversations

Nothing here raises on a mismatch; the raw text is returned instead.
"""

from __future__ import annotations

import json
import logging
import re
from typing import Any, Mapping, Optional

logger = logging.getLogger("ozwell-proxy")

LANGUAGE_TITLE_EXAMPLE = '{"language": "English", "title": "Short Title"}'

_CODE_FENCE = re.compile(r"^```[A-Za-z0-9_-]*\s*\n?(.*?)\n?```$", re.DOTALL)

_LANGUAGE_PATTERNS = (
    re.compile(r"\blanguage\s+is\s*:?\s*[\"'“]?([A-Za-z][\w-]*)", re.IGNORECASE),
    re.compile(r"\bdetected\s+language\s*(?:is\s*)?:?\s*[\"'“]?([A-Za-z][\w-]*)", re.IGNORECASE),
    re.compile(r"\blanguage\s*:\s*[\"'“]?([A-Za-z][\w-]*)", re.IGNORECASE),
    re.compile(r"^\s*1[.)]\s*[\"'“]?([A-Za-z][\w-]*)", re.MULTILINE),
)

_TITLE_PATTERNS = (
    re.compile(r"\btitle\s*(?:is\s*)?:\s*(.+)", re.IGNORECASE),
    re.compile(r"[\"“]([^\"”\n]+)[\"”]"),
    re.compile(r"^\s*2[.)]\s*(.+)$", re.MULTILINE),
)
_EXPLICIT_TITLE_PATTERNS = _TITLE_PATTERNS[:1]
_FALLBACK_TITLE_PATTERNS = _TITLE_PATTERNS[1:]

Span = tuple[int, int]


def get_response_schema(response_format: Optional[Mapping[str, Any]]) -> Optional[dict[str, Any]]:
    """Return the JSON schema of a ``json_schema`` response format, if any.

    Accepts both ``{"type": "json_schema", "schema": {...}}`` and the OpenAI
    envelope ``{"type": "json_schema", "json_schema": {"schema": {...}}}``.
    """
    if not isinstance(response_format, Mapping):
        return None
    if response_format.get("type") != "json_schema":
        return None
    schema = response_format.get("schema")
    if not isinstance(schema, Mapping):
        envelope = response_format.get("json_schema")
        if isinstance(envelope, Mapping):
            schema = envelope.get("schema")
    if isinstance(schema, Mapping) and schema:
        return dict(schema)
    return None


def wants_json_object(response_format: Optional[Mapping[str, Any]]) -> bool:
    return isinstance(response_format, Mapping) and response_format.get("type") == "json_object"


def has_language_title_properties(schema: Optional[Mapping[str, Any]]) -> bool:
    if not isinstance(schema, Mapping):
        return False
    properties = schema.get("properties")
    if not isinstance(properties, Mapping):
        return False
    return "language" in properties and "title" in properties


def apply_response_format(
    system_message: str, response_format: Optional[Mapping[str, Any]]
) -> str:
    """Append structured output instructions to ``system_message``."""
    schema = get_response_schema(response_format)
    if schema is not None:
        instruction = (
            "Respond with a valid JSON object matching schema: "
            f"{json.dumps(schema, ensure_ascii=False)}"
        )
        if has_language_title_properties(schema):
            instruction += f"\nExample response: {LANGUAGE_TITLE_EXAMPLE}"
        logger.debug("Added JSON schema instructions to system message")
        return f"{system_message}\n\n{instruction}"
    if wants_json_object(response_format):
        return f"{system_message}\n\nRespond with a valid JSON object."
    return system_message


def _strip_code_fence(text: str) -> str:
    stripped = text.strip()
    match = _CODE_FENCE.match(stripped)
    if match:
        return match.group(1).strip()
    return stripped


def _parse_strict_json(text: str) -> tuple[bool, Any]:
    try:
        return True, json.loads(_strip_code_fence(text))
    except (TypeError, ValueError):
        return False, None


def _clean_value(value: str) -> str:
    return value.strip().rstrip(",;}").strip().strip("\"'“”").strip()


def _overlaps(span: Span, claimed: list[Span]) -> bool:
    start, end = span
    return any(start < other_end and other_start < end for other_start, other_end in claimed)


def _first_match(patterns, text: str, claimed: list[Span]) -> tuple[Optional[str], Optional[Span]]:
    """Return the first non-empty match outside the ``claimed`` spans."""
    for pattern in patterns:
        for match in pattern.finditer(text):
            if _overlaps(match.span(), claimed):
                continue
            value = _clean_value(match.group(1))
            if value:
                return value, match.span()
    return None, None


def extract_language_title(text: str) -> dict[str, str]:
    """Best-effort recovery of ``language`` and ``title`` from free text.

    Recognises phrasings such as ``language is French``, ``detected language
    French``, ``title: "Bonjour"``, a quoted phrase, or a two-item numbered
    list. Only fields that matched are present in the result.

    An explicit ``title:`` line is claimed first and the language is looked
    for outside it; the fallback title patterns then skip the language match,
    so one piece of text never fills both fields.
    """
    extracted: dict[str, str] = {}
    claimed: list[Span] = []

    title, title_span = _first_match(_EXPLICIT_TITLE_PATTERNS, text, claimed)
    if title_span:
        claimed.append(title_span)

    language, language_span = _first_match(_LANGUAGE_PATTERNS, text, claimed)
    if language_span:
        claimed.append(language_span)
        extracted["language"] = language

    if title is None:
        title, _ = _first_match(_FALLBACK_TITLE_PATTERNS, text, claimed)
    if title:
        extracted["title"] = title
    return extracted


def parse_structured_response(
    text: str, response_format: Optional[Mapping[str, Any]]
) -> Any:
    """Coerce backend ``text`` into the requested JSON shape.

    Returns the parsed JSON value when ``text`` is JSON, a partial mapping
    recovered by ``extract_language_title`` for the language/title schema,
    and ``text`` unchanged otherwise.
    """
    parsed_ok, parsed = _parse_strict_json(text)
    if parsed_ok:
        return parsed

    if has_language_title_properties(get_response_schema(response_format)):
        extracted = extract_language_title(text)
        if extracted:
            logger.info(
                "Recovered structured fields from free text: %s",
                sorted(extracted),
            )
            return extracted

    logger.debug("Structured output extraction matched nothing; returning raw text")
    return text


def render_structured_content(
    text: str, response_format: Optional[Mapping[str, Any]]
) -> str:
    """Return the assistant ``content`` string for a structured request."""
    if get_response_schema(response_format) is None and not wants_json_object(response_format):
        return text
    parsed_ok, _ = _parse_strict_json(text)
    if parsed_ok:
        return _strip_code_fence(text)
    result = parse_structured_response(text, response_format)
    if isinstance(result, str):
        return result
    return json.dumps(result, ensure_ascii=False)
