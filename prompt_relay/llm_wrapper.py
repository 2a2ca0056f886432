# prompt_relay/llm_wrapper.py
"""
Bedrock Runtime wrapper (Converse API).

A single-turn request is built from the resolved prompt with fixed generation
parameters, sent through a bedrock-runtime client and returned as the raw
Converse payload:
{
  "output": {"message": {"role": "assistant", "content": [{"text": "..."}, ...]}},
  "stopReason": "end_turn",
  "usage": {"inputTokens": 12, "outputTokens": 34, "totalTokens": 46},
  "metrics": {"latencyMs": 420}
}

Usage:
  from prompt_relay.llm_wrapper import call_llm, extract_output_text
  payload = call_llm(client, model_id="anthropic.claude-3-haiku-20240307-v1:0", prompt="Hi")
  text = extract_output_text(payload)
"""

import time
from typing import Any, Dict, List

import boto3

from prompt_relay.errors import InferenceError

MAX_TOKENS = 150
TEMPERATURE = 0.2

MOCK_MAX_CHARS = 1000


def make_bedrock_client(region: str):
    return boto3.client("bedrock-runtime", region_name=region)


def build_converse_request(model_id: str, prompt: str) -> Dict[str, Any]:
    return {
        "modelId": model_id,
        "messages": [
            {"role": "user", "content": [{"text": prompt}]},
        ],
        "inferenceConfig": {
            "maxTokens": MAX_TOKENS,
            "temperature": TEMPERATURE,
        },
    }


def call_llm(client, model_id: str, prompt: str) -> Dict[str, Any]:
    """
    Send one user message to `model_id` and return the raw Converse response.
    Raises InferenceError (chained) on any client failure.
    """
    request = build_converse_request(model_id, prompt)
    try:
        return client.converse(**request)
    except Exception as e:
        raise InferenceError(f"Bedrock converse failed ({model_id}): {e}") from e


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_list(value: Any) -> List[Any]:
    return value if isinstance(value, list) else []


def extract_output_text(payload: Any) -> str:
    """
    Concatenate output.message.content[*].text in order.
    Any missing or mistyped level yields "" instead of raising.
    """
    message = _as_dict(_as_dict(_as_dict(payload).get("output")).get("message"))
    text = ""
    for block in _as_list(message.get("content")):
        fragment = _as_dict(block).get("text")
        if isinstance(fragment, str):
            text += fragment
    return text


class MockBedrockClient:
    """
    Deterministic stand-in used in dev/tests (MOCK_BEDROCK=true). Echoes the user
    text back as the assistant reply, truncated.
    """

    def __init__(self):
        self.calls: List[Dict[str, Any]] = []

    def converse(self, **kwargs) -> Dict[str, Any]:
        self.calls.append(kwargs)
        user_texts = [
            block.get("text", "")
            for m in kwargs.get("messages", []) if m.get("role") == "user"
            for block in m.get("content", [])
        ]
        text = ("\n\n").join(user_texts)[:MOCK_MAX_CHARS]
        return {
            "output": {"message": {"role": "assistant", "content": [{"text": text}]}},
            "stopReason": "end_turn",
            "usage": {"inputTokens": len(text.split()), "outputTokens": len(text.split()),
                      "totalTokens": 2 * len(text.split())},
            "metrics": {"latencyMs": 0},
            "ResponseMetadata": {"RequestId": f"mock-{int(time.time() * 1000)}"},
        }
