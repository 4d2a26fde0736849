# src/minilm_embed/app/factory.py

"""
Session construction and singleton lifecycle for the EmbeddingPipeline:
- ``open_pipeline()`` builds a fresh pipeline (CLI, scripts, tests).
- ``get_pipeline()`` lazily builds the process singleton used by the API.
- ``close_pipeline()`` closes the singleton and resets it.

The engine runtime is process-wide, so only one live pipeline per process
should exist at a time.
"""

import logging
from typing import Optional

from minilm_embed.core.services.pipeline import EmbeddingPipeline
from minilm_embed.core.services.session import EmbeddingSession
from minilm_embed.infrastructure.engine.sentence_transformers import (
    SentenceTransformerEngine,
)
from minilm_embed.infrastructure.tokenization.huggingface import HuggingFaceTokenizer
from minilm_embed.settings import settings

logger = logging.getLogger(__name__)


def open_session(
    model_name: Optional[str] = None,
    *,
    tokenizer_source: Optional[str] = None,
    runtime_library_path: Optional[str] = None,
    device: Optional[str] = None,
) -> EmbeddingSession:
    model_name = model_name or settings.model_name
    tokenizer_source = tokenizer_source or settings.tokenizer_source or model_name

    tokenizer = HuggingFaceTokenizer.from_source(
        tokenizer_source,
        max_seq_length=settings.max_seq_length,
        padding=settings.padding_strategy,
    )
    engine = SentenceTransformerEngine.load(
        model_name,
        device=device or settings.device,
        expected_dim=settings.embedding_dim,
        runtime_library_path=runtime_library_path or settings.runtime_library_path,
        num_threads=settings.num_threads,
    )
    return EmbeddingSession(tokenizer, engine)


def open_pipeline(**kwargs) -> EmbeddingPipeline:
    return EmbeddingPipeline(open_session(**kwargs))


_pipeline: Optional[EmbeddingPipeline] = None


def get_pipeline(force_reload: bool = False) -> EmbeddingPipeline:
    global _pipeline
    if force_reload and _pipeline is not None:
        _pipeline.close()
        _pipeline = None
    if _pipeline is None:
        logger.info(f"Opening embedding pipeline (model: {settings.model_name})")
        _pipeline = open_pipeline()
    return _pipeline


def close_pipeline() -> None:
    """Close the singleton pipeline, if any, and reset it."""
    global _pipeline
    if _pipeline is not None:
        _pipeline.close()
    _pipeline = None
