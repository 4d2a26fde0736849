"""FastAPI dependencies for the application."""

from minilm_embed.app.factory import get_pipeline as _get_pipeline
from minilm_embed.core.services.pipeline import EmbeddingPipeline


def get_pipeline() -> EmbeddingPipeline:
    """Return the singleton :class:`EmbeddingPipeline` instance."""
    return _get_pipeline()


__all__ = ["get_pipeline"]
