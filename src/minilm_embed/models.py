# src/minilm_embed/models.py
from typing import List

from pydantic import BaseModel, Field

MAX_BATCH_SENTENCES = 1024


# API
class EmbedRequest(BaseModel):
    """Request schema for the `/embed` endpoint."""

    sentence: str = Field(..., description="Sentence to embed")


class EmbedResponse(BaseModel):
    sentence: str
    embedding: List[float]


class EmbedBatchRequest(BaseModel):
    """Request schema for the `/embed/batch` endpoint."""

    sentences: List[str] = Field(
        default_factory=list,
        max_length=MAX_BATCH_SENTENCES,
        description="Sentences to embed, in order",
    )


class EmbedBatchResponse(BaseModel):
    embeddings: List[List[float]]
    dim: int


class HealthResponse(BaseModel):
    status: str
    dim: int
    model: str
