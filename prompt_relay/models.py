# prompt_relay/models.py
from sqlalchemy import Column, Integer, String, DateTime, Text
import datetime

from prompt_relay.db import Base


def _utcnow() -> datetime.datetime:
    return datetime.datetime.now(datetime.timezone.utc)


class ArtifactRow(Base):
    __tablename__ = "artifacts"

    id = Column(Integer, primary_key=True, index=True)
    key = Column(String(255), unique=True, index=True, nullable=False)
    content_type = Column(String(128), nullable=False)
    body = Column(Text, nullable=False)
    created_at = Column(DateTime, default=_utcnow)
