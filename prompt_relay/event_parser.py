# prompt_relay/event_parser.py
"""
Resolve the prompt text from a loosely-typed invocation event.

Accepted shapes (first match wins):
  {"body": "{\"prompt\": \"...\"}"}   — Function URL / API Gateway proxy event
  {"body": {"prompt": "..."}}         — pre-parsed body (console test events)
  {"prompt": "..."}                   — direct invoke

A missing or unusable prompt never fails the invocation; DEFAULT_PROMPT is used.
"""

import base64
import json
from typing import Any, Dict, Optional, Tuple

DEFAULT_PROMPT = "Explain what AWS Lambda does in one sentence."

SOURCE_BODY_STRING = "body_string"
SOURCE_BODY_MAPPING = "body_mapping"
SOURCE_EVENT = "event"
SOURCE_DEFAULT = "default"


def _decode_body(body: str, is_base64: bool) -> str:
    if not is_base64:
        return body
    return base64.b64decode(body, validate=True).decode("utf-8")


def _parse_body_string(body: str, is_base64: bool = False) -> Dict[str, Any]:
    try:
        parsed = json.loads(_decode_body(body, is_base64))
    except (ValueError, RecursionError):
        # ValueError covers JSONDecodeError, UnicodeDecodeError and binascii.Error;
        # deeply nested bodies exhaust the decoder stack
        return {}
    return parsed if isinstance(parsed, dict) else {}


def _source_mapping(event: Any) -> Tuple[Dict[str, Any], str]:
    if not isinstance(event, dict):
        return {}, SOURCE_DEFAULT

    body = event.get("body")
    if isinstance(body, str):
        return _parse_body_string(body, event.get("isBase64Encoded") is True), SOURCE_BODY_STRING
    if isinstance(body, dict):
        return body, SOURCE_BODY_MAPPING

    return event, SOURCE_EVENT


def _prompt_text(value: Any) -> Optional[str]:
    if isinstance(value, str):
        return value or None
    # bool is an int subclass; true/false is not a prompt
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return None


def resolve_prompt_with_source(event: Any) -> Tuple[str, str]:
    """
    Return (prompt, source) where source names the extraction path that produced
    the prompt, or "default" when the fallback sentence was substituted.
    """
    source_map, source = _source_mapping(event)
    prompt = _prompt_text(source_map.get("prompt"))
    if prompt is None:
        return DEFAULT_PROMPT, SOURCE_DEFAULT
    return prompt, source


def resolve_prompt(event: Any) -> str:
    return resolve_prompt_with_source(event)[0]
