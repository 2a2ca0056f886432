# prompt_relay/storage.py
"""
Artifact store: write-only log of prompt/response records, one object per invocation.

Backends:
- S3ArtifactStore — production, one put_object per artifact
- SqlArtifactStore — local development, same key/payload in an `artifacts` table

A failed write is raised as ArtifactWriteError and is not retried.
"""

import datetime
from typing import Optional

import boto3
from sqlalchemy.exc import SQLAlchemyError

from prompt_relay import monitoring
from prompt_relay.config import RelayConfig
from prompt_relay.db import make_engine, make_session_factory, init_db
from prompt_relay.errors import ArtifactWriteError

ARTIFACT_KEY_PREFIX = "artifacts/http-run-"
ARTIFACT_KEY_TIME_FORMAT = "%Y%m%d-%H%M%S"
JSON_CONTENT_TYPE = "application/json"


def make_artifact_key(now: Optional[datetime.datetime] = None) -> str:
    """artifacts/http-run-YYYYMMDD-HHMMSS.json, second precision, UTC by default."""
    now = now or datetime.datetime.now(datetime.timezone.utc)
    return f"{ARTIFACT_KEY_PREFIX}{now.strftime(ARTIFACT_KEY_TIME_FORMAT)}.json"


class ArtifactStore:
    backend = "abstract"

    def put(self, key: str, body: bytes, content_type: str = JSON_CONTENT_TYPE) -> None:
        raise NotImplementedError


class S3ArtifactStore(ArtifactStore):
    backend = "s3"

    def __init__(self, client, bucket: str):
        self._client = client
        self.bucket = bucket

    def put(self, key: str, body: bytes, content_type: str = JSON_CONTENT_TYPE) -> None:
        try:
            self._client.put_object(
                Bucket=self.bucket,
                Key=key,
                Body=body,
                ContentType=content_type,
            )
        except Exception as e:
            monitoring.inc_artifact_write(self.backend, "fail")
            raise ArtifactWriteError(f"S3 put_object failed (s3://{self.bucket}/{key}): {e}") from e
        monitoring.inc_artifact_write(self.backend, "success")


class SqlArtifactStore(ArtifactStore):
    """
    Stores artifacts through SQLAlchemy. Keys are unique; writing the same key
    twice fails like any other write error.
    """

    backend = "sql"

    def __init__(self, database_url: str):
        self.engine = make_engine(database_url)
        self._session_factory = make_session_factory(self.engine)
        init_db(self.engine)

    def put(self, key: str, body: bytes, content_type: str = JSON_CONTENT_TYPE) -> None:
        from prompt_relay.models import ArtifactRow

        try:
            with self._session_factory() as db:
                db.add(ArtifactRow(key=key, content_type=content_type, body=body.decode("utf-8")))
                db.commit()
        except SQLAlchemyError as e:
            monitoring.inc_artifact_write(self.backend, "fail")
            raise ArtifactWriteError(f"SQL artifact write failed ({key}): {e}") from e
        monitoring.inc_artifact_write(self.backend, "success")

    def get(self, key: str) -> Optional[bytes]:
        from prompt_relay.models import ArtifactRow

        with self._session_factory() as db:
            row = db.query(ArtifactRow).filter(ArtifactRow.key == key).first()
            if not row:
                return None
            return row.body.encode("utf-8")


def make_artifact_store(config: RelayConfig) -> ArtifactStore:
    if config.artifact_backend == "sql":
        return SqlArtifactStore(config.database_url)
    return S3ArtifactStore(boto3.client("s3", region_name=config.region), config.bucket_name)
