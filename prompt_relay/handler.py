# prompt_relay/handler.py
import json
import time
import datetime
from functools import lru_cache
from typing import Any, Callable, Dict, Optional

# Import modules (not bare functions) so monkeypatching in tests works correctly
import prompt_relay.llm_wrapper as _llm
import prompt_relay.storage as _storage
from prompt_relay.event_parser import resolve_prompt_with_source
from prompt_relay.config import RelayConfig
from prompt_relay.schemas import ArtifactRecord, InvocationBody
from prompt_relay import monitoring

RESPONSE_HEADERS = {
    "Content-Type": "application/json",
    "Access-Control-Allow-Origin": "*",
}


class PromptRelayHandler:
    """
    One linear pass per invocation:
    1. Resolve prompt from the event (never fails, falls back to the default)
    2. Bedrock converse call
    3. Extract output text (missing structure -> "")
    4. Write artifact {model, prompt, response} under a timestamped key
    5. Return a 200 proxy response

    Failures in 2 or 4 propagate to the runtime; nothing is written or returned.
    """

    def __init__(self, config: RelayConfig, inference_client, artifact_store: _storage.ArtifactStore,
                 clock: Optional[Callable[[], datetime.datetime]] = None):
        self.config = config
        self.inference_client = inference_client
        self.artifact_store = artifact_store
        self._clock = clock or (lambda: datetime.datetime.now(datetime.timezone.utc))

    def _invoke_model(self, prompt: str) -> Dict[str, Any]:
        start = time.time()
        try:
            return _llm.call_llm(self.inference_client, self.config.model_id, prompt)
        finally:
            monitoring.observe_inference(start)

    def _write_artifact(self, prompt: str, output: str) -> str:
        key = _storage.make_artifact_key(self._clock())
        record = ArtifactRecord(model=self.config.model_id, prompt=prompt, response=output)
        self.artifact_store.put(key, record.model_dump_json().encode("utf-8"), _storage.JSON_CONTENT_TYPE)
        return key

    def handle(self, event: Any) -> Dict[str, Any]:
        prompt, source = resolve_prompt_with_source(event)
        monitoring.inc_prompt_source(source)

        try:
            payload = self._invoke_model(prompt)
            output = _llm.extract_output_text(payload)
            meta = payload if isinstance(payload, dict) else {}
            usage = meta.get("usage") if isinstance(meta.get("usage"), dict) else {}
            monitoring.logger.info("Inference complete", extra={
                "model": self.config.model_id,
                "prompt_source": source,
                "prompt_chars": len(prompt),
                "output_chars": len(output),
                "input_tokens": usage.get("inputTokens"),
                "output_tokens": usage.get("outputTokens"),
                "stop_reason": meta.get("stopReason"),
            })

            key = self._write_artifact(prompt, output)
        except Exception:
            monitoring.inc_invocation("fail")
            monitoring.logger.exception("Invocation failed", extra={"model": self.config.model_id})
            raise

        monitoring.inc_invocation("success")
        monitoring.logger.info("Artifact written", extra={
            "s3_key": key,
            "backend": self.artifact_store.backend,
        })

        body = InvocationBody(model=self.config.model_id, s3_key=key, output=output)
        return {
            "statusCode": 200,
            "headers": dict(RESPONSE_HEADERS),
            "body": json.dumps(body.model_dump()),
        }


def build_handler(config: RelayConfig) -> PromptRelayHandler:
    if config.mock_inference:
        inference_client = _llm.MockBedrockClient()
    else:
        inference_client = _llm.make_bedrock_client(config.region)
    return PromptRelayHandler(
        config=config,
        inference_client=inference_client,
        artifact_store=_storage.make_artifact_store(config),
    )


@lru_cache
def get_handler() -> PromptRelayHandler:
    """Configuration and clients are built once per process (Lambda cold start)."""
    return build_handler(RelayConfig.from_env())


def lambda_handler(event, context):
    return get_handler().handle(event)
