# src/minilm_embed/app/api_router.py

"""
FastAPI router for the embedding endpoints.
"""

from fastapi import APIRouter, Depends

from minilm_embed.app.dependencies import get_pipeline
from minilm_embed.core.services.pipeline import EmbeddingPipeline
from minilm_embed.models import (
    EmbedBatchRequest,
    EmbedBatchResponse,
    EmbedRequest,
    EmbedResponse,
    HealthResponse,
)
from minilm_embed.settings import settings

router = APIRouter()


# ---------------------- API Endpoints ---------------------- #


@router.post("/embed", response_model=EmbedResponse)
def embed(
    request: EmbedRequest, pipeline: EmbeddingPipeline = Depends(get_pipeline)
) -> EmbedResponse:
    embedding = pipeline.compute_one(request.sentence)
    return EmbedResponse(sentence=request.sentence, embedding=embedding)


@router.post("/embed/batch", response_model=EmbedBatchResponse)
def embed_batch(
    request: EmbedBatchRequest, pipeline: EmbeddingPipeline = Depends(get_pipeline)
) -> EmbedBatchResponse:
    """
    Embeds all sentences in one engine call.

    Returns:
        EmbedBatchResponse: one embedding per sentence, in request order.
    """
    embeddings = pipeline.compute_batch(request.sentences)
    return EmbedBatchResponse(embeddings=embeddings, dim=pipeline.dim)


@router.get("/health", response_model=HealthResponse)
def health(pipeline: EmbeddingPipeline = Depends(get_pipeline)) -> HealthResponse:
    return HealthResponse(
        status=pipeline.session.state.value,
        dim=pipeline.dim,
        model=settings.model_name,
    )
