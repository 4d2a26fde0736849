"""
Error kinds raised by the embedding pipeline and its adapters.
None of them is retried internally; they always reach the caller.
"""

from typing import Optional


class EmbeddingError(Exception):
    """Base class for every pipeline failure."""


class TokenizationError(EmbeddingError):
    def __init__(self, message: str, sentence: Optional[object] = None):
        super().__init__(message)
        self.sentence = sentence


class EngineInitError(EmbeddingError):
    """Runtime environment, model or tokenizer payload failed to load."""


class InferenceError(EmbeddingError):
    """The engine rejected the inputs or failed while running them."""


class ShapeMismatchError(EmbeddingError):
    def __init__(self, observed: int, expected: int, unit: str = "elements"):
        self.observed = observed
        self.expected = expected
        super().__init__(
            f"unexpected output size: got {observed} {unit}, expected {expected} {unit}"
        )


class SessionClosedError(EmbeddingError):
    pass


class BatchInvariantError(EmbeddingError):
    """A batch broke the equal-length contract of the tokenization adapter."""
