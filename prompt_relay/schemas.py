# prompt_relay/schemas.py
from pydantic import BaseModel


class ArtifactRecord(BaseModel):
    """Document persisted per invocation."""
    model: str
    prompt: str
    response: str


class InvocationBody(BaseModel):
    """JSON body returned to the caller on success."""
    model: str
    s3_key: str
    output: str
