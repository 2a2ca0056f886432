# tests/test_event_parser.py
import base64
import json

import pytest

from prompt_relay.event_parser import (
    DEFAULT_PROMPT,
    resolve_prompt,
    resolve_prompt_with_source,
)


def test_top_level_prompt():
    assert resolve_prompt({"prompt": "How are you?"}) == "How are you?"


def test_body_json_string():
    event = {"body": json.dumps({"prompt": "Tell me a joke"})}
    assert resolve_prompt_with_source(event) == ("Tell me a joke", "body_string")


def test_body_mapping():
    event = {"body": {"prompt": "Summarize S3"}}
    assert resolve_prompt_with_source(event) == ("Summarize S3", "body_mapping")


def test_prompt_is_returned_verbatim():
    # whitespace and unicode are not normalized
    text = "  ¿Qué es Bedrock?\n"
    assert resolve_prompt({"prompt": text}) == text
    assert resolve_prompt({"body": json.dumps({"prompt": text})}) == text


def test_body_takes_precedence_over_top_level_prompt():
    event = {"prompt": "outer", "body": json.dumps({"prompt": "inner"})}
    assert resolve_prompt(event) == "inner"


def test_body_without_prompt_does_not_fall_back_to_event():
    event = {"prompt": "outer", "body": {"other": 1}}
    assert resolve_prompt_with_source(event) == (DEFAULT_PROMPT, "default")


@pytest.mark.parametrize("event", [
    {},
    {"body": "not json at all"},
    {"body": ""},
    {"body": 42},
    {"body": None},
    {"body": "[\"prompt\"]"},
    {"body": "{\"prompt\": \"\"}"},
    {"prompt": ""},
    {"prompt": None},
    {"prompt": ["a", "b"]},
    {"prompt": True},
    {"body": "[" * 100000},
    {"body": "{\"a\":" * 100000},
    None,
    "just a string",
    [1, 2, 3],
    7,
])
def test_unusable_inputs_fall_back_to_default(event):
    assert resolve_prompt(event) == DEFAULT_PROMPT


def test_numeric_body_falls_back_to_event_itself():
    event = {"body": 5, "prompt": "from the event"}
    assert resolve_prompt_with_source(event) == ("from the event", "event")


def test_numeric_prompt_is_rendered_as_text():
    assert resolve_prompt({"prompt": 12}) == "12"


def test_base64_encoded_body():
    raw = json.dumps({"prompt": "encoded hello"}).encode("utf-8")
    event = {"body": base64.b64encode(raw).decode("ascii"), "isBase64Encoded": True}
    assert resolve_prompt(event) == "encoded hello"


def test_invalid_base64_body_falls_back_to_default():
    event = {"body": "%%%not-base64%%%", "isBase64Encoded": True}
    assert resolve_prompt(event) == DEFAULT_PROMPT


def test_base64_flag_false_parses_plain_text():
    event = {"body": json.dumps({"prompt": "plain"}), "isBase64Encoded": False}
    assert resolve_prompt(event) == "plain"


def test_default_source_reported():
    assert resolve_prompt_with_source({}) == (DEFAULT_PROMPT, "default")
    assert resolve_prompt_with_source({"prompt": "x"}) == ("x", "event")
