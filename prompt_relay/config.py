# prompt_relay/config.py
"""
Runtime configuration, read once per process and passed into the handler.

Env vars:
- BUCKET_NAME (default: llm-artifacts-demo-bucket)
- MODEL_ID (default: anthropic.claude-3-haiku-20240307-v1:0)
- AWS_REGION / AWS_DEFAULT_REGION (default: us-east-1)
- MOCK_BEDROCK (default: false) — deterministic local stand-in for Bedrock
- ARTIFACT_BACKEND (default: s3) — "s3" or "sql"
- DATABASE_URL (default: sqlite:///./relay_artifacts.db) — used by the sql backend
"""

import os
from dataclasses import dataclass
from typing import Mapping, Optional

DEFAULT_BUCKET_NAME = "llm-artifacts-demo-bucket"
DEFAULT_MODEL_ID = "anthropic.claude-3-haiku-20240307-v1:0"
DEFAULT_REGION = "us-east-1"
DEFAULT_DATABASE_URL = "sqlite:///./relay_artifacts.db"

ARTIFACT_BACKENDS = ("s3", "sql")


def _env(environ: Mapping[str, str], *names: str, default: str) -> str:
    for name in names:
        value = (environ.get(name) or "").strip()
        if value:
            return value
    return default


def _flag(environ: Mapping[str, str], name: str, default: str = "false") -> bool:
    return _env(environ, name, default=default).lower() in ("1", "true", "yes")


@dataclass(frozen=True)
class RelayConfig:
    bucket_name: str = DEFAULT_BUCKET_NAME
    model_id: str = DEFAULT_MODEL_ID
    region: str = DEFAULT_REGION
    mock_inference: bool = False
    artifact_backend: str = "s3"
    database_url: str = DEFAULT_DATABASE_URL

    def __post_init__(self):
        if self.artifact_backend not in ARTIFACT_BACKENDS:
            raise ValueError(
                f"Unsupported ARTIFACT_BACKEND {self.artifact_backend!r}; "
                f"expected one of {', '.join(ARTIFACT_BACKENDS)}"
            )

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "RelayConfig":
        env = os.environ if environ is None else environ
        return cls(
            bucket_name=_env(env, "BUCKET_NAME", default=DEFAULT_BUCKET_NAME),
            model_id=_env(env, "MODEL_ID", default=DEFAULT_MODEL_ID),
            region=_env(env, "AWS_REGION", "AWS_DEFAULT_REGION", default=DEFAULT_REGION),
            mock_inference=_flag(env, "MOCK_BEDROCK"),
            artifact_backend=_env(env, "ARTIFACT_BACKEND", default="s3").lower(),
            database_url=_env(env, "DATABASE_URL", default=DEFAULT_DATABASE_URL),
        )
