# src/minilm_embed/app/main.py
import logging
import sys
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from minilm_embed.app.api_router import router
from minilm_embed.app.factory import close_pipeline, get_pipeline
from minilm_embed.core.domain.errors import (
    EmbeddingError,
    SessionClosedError,
    TokenizationError,
)
from minilm_embed.settings import settings

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(pathname)s:%(lineno)d - %(message)s",
    stream=sys.stdout,
)
logger = logging.getLogger(__name__)  # after basicConfig


# --- Lifespan Context Manager ---
@asynccontextmanager
async def lifespan(app_instance: FastAPI):
    logger.info("Lifespan startup: Opening embedding pipeline...")
    get_pipeline()
    logger.info("Lifespan startup: Embedding pipeline ready.")
    yield
    logger.info("Lifespan shutdown: Closing embedding pipeline...")
    close_pipeline()


app = FastAPI(title="MiniLM Sentence Embeddings", lifespan=lifespan)


app.include_router(router, prefix="/api")


# --- Error mapping ---
@app.exception_handler(SessionClosedError)
async def session_closed_handler(request: Request, exc: SessionClosedError):
    return JSONResponse(status_code=503, content={"detail": str(exc)})


@app.exception_handler(TokenizationError)
async def tokenization_error_handler(request: Request, exc: TokenizationError):
    return JSONResponse(status_code=422, content={"detail": str(exc)})


@app.exception_handler(EmbeddingError)
async def embedding_error_handler(request: Request, exc: EmbeddingError):
    logger.error(f"Embedding failed on {request.url.path}: {exc}")
    return JSONResponse(status_code=500, content={"detail": str(exc)})


def run() -> None:
    uvicorn.run(app, host=settings.app_host, port=settings.app_port)


if __name__ == "__main__":
    # default: host="0.0.0.0", port=8000
    run()
