# prompt_relay/monitoring.py
"""
Centralized monitoring: structured JSON logging, Prometheus metrics, optional Sentry.

Env vars:
- PROMETHEUS_ENABLED (default: true)
- SENTRY_DSN (optional)
- LOG_AS_JSON (default: true)
- LOG_LEVEL (default: INFO)
- ENVIRONMENT (default: development)

Prompt and output text are never logged, only their lengths.
"""

import os
import logging
import time
from typing import Optional, Tuple

import sentry_sdk
from pythonjsonlogger import jsonlogger
from prometheus_client import (
    Counter, Histogram,
    generate_latest, CONTENT_TYPE_LATEST, REGISTRY,
)

# --- ENV flags
PROMETHEUS_ENABLED = os.getenv("PROMETHEUS_ENABLED", "true").lower() in ("1", "true", "yes")
SENTRY_DSN = os.getenv("SENTRY_DSN", None)
LOG_AS_JSON = os.getenv("LOG_AS_JSON", "true").lower() in ("1", "true", "yes")
ENVIRONMENT = os.getenv("ENVIRONMENT", "development")


# --- Logger setup
def setup_logger(name: str = "prompt-relay", level: Optional[int] = None) -> logging.Logger:
    level = logging.getLevelName(os.getenv("LOG_LEVEL", "INFO").upper()) if level is None else level
    logger = logging.getLogger(name)
    logger.setLevel(level)
    # Lambda's root logger already has a handler; keep records from printing twice
    logger.propagate = False
    if not logger.handlers:
        handler = logging.StreamHandler()
        if LOG_AS_JSON:
            handler.setFormatter(jsonlogger.JsonFormatter(
                "%(asctime)s %(levelname)s %(name)s %(message)s"
            ))
        logger.addHandler(handler)
    return logger


logger = setup_logger()

# --- Sentry (optional)
if SENTRY_DSN:
    sentry_sdk.init(dsn=SENTRY_DSN, environment=ENVIRONMENT)
    logger.info("Sentry initialized")


# --- Prometheus metrics
INVOCATION_COUNT = Counter(
    "relay_invocations_total",
    "Handler invocations",
    ["outcome"],
)

PROMPT_SOURCE_COUNT = Counter(
    "relay_prompt_source_total",
    "Where the prompt was resolved from",
    ["source"],
)

INFERENCE_LATENCY = Histogram(
    "relay_inference_latency_seconds",
    "Inference call latency in seconds",
)

ARTIFACT_WRITES = Counter(
    "relay_artifact_writes_total",
    "Artifact store writes",
    ["backend", "outcome"],
)


# --- Helper wrappers (never crash the handler)
def inc_invocation(outcome: str):
    try:
        INVOCATION_COUNT.labels(outcome=outcome).inc()
    except Exception:
        pass


def inc_prompt_source(source: str):
    try:
        PROMPT_SOURCE_COUNT.labels(source=source).inc()
    except Exception:
        pass


def observe_inference(start_ts: float):
    try:
        INFERENCE_LATENCY.observe(time.time() - start_ts)
    except Exception:
        pass


def inc_artifact_write(backend: str, outcome: str):
    try:
        ARTIFACT_WRITES.labels(backend=backend, outcome=outcome).inc()
    except Exception:
        pass


def prometheus_metrics_response() -> Tuple[bytes, str]:
    """Return (body_bytes, content_type) for Prometheus scrape."""
    try:
        return generate_latest(REGISTRY), CONTENT_TYPE_LATEST
    except Exception:
        return b"", CONTENT_TYPE_LATEST
