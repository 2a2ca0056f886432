# prompt_relay/errors.py


class RelayError(RuntimeError):
    """Base error for failures that abort an invocation."""


class InferenceError(RelayError):
    """Raised when the Bedrock call fails (throttling, bad model id, network)."""


class ArtifactWriteError(RelayError):
    """Raised when the artifact cannot be written to the store."""
