"""
Core module: domain types, ports and the embedding pipeline.
"""

from .ports import InferenceEnginePort, TokenizerPort
from .services.pipeline import EmbeddingPipeline
from .services.session import EmbeddingSession, SessionState

__all__ = [
    "InferenceEnginePort",
    "TokenizerPort",
    "EmbeddingPipeline",
    "EmbeddingSession",
    "SessionState",
]
