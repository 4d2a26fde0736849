"""
SentenceTransformer inference engine (CPU-friendly).

Takes the flat row-major buffers produced by the batch builder, views them
as (N, L) tensors and returns the pooled, normalized sentence embeddings as
one flat float32 buffer of N * dim values.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Dict, Iterator, Optional

import numpy as np
import torch
from sentence_transformers import SentenceTransformer

from minilm_embed.core.domain.entities import TensorShape
from minilm_embed.core.domain.errors import (
    EngineInitError,
    InferenceError,
    SessionClosedError,
)
from minilm_embed.core.ports import InferenceEnginePort
from minilm_embed.infrastructure.engine import runtime
from minilm_embed.settings import settings

logger = logging.getLogger(__name__)

INPUT_NAMES = ("input_ids", "attention_mask", "token_type_ids")
OUTPUT_NAME = "sentence_embedding"


@contextmanager
def engine_inputs(
    input_ids: np.ndarray,
    attention_mask: np.ndarray,
    token_type_ids: np.ndarray,
    shape: TensorShape,
    device: str = "cpu",
) -> Iterator[Dict[str, torch.Tensor]]:
    """Wrap the flat buffers as (N, L) engine tensors for the duration of one run."""
    dims = (shape.batch_size, shape.seq_length)
    features: Dict[str, torch.Tensor] = {}
    try:
        for name, buffer in zip(INPUT_NAMES, (input_ids, attention_mask, token_type_ids)):
            features[name] = torch.from_numpy(buffer).view(dims).to(device)
        yield features
    finally:
        features.clear()


class SentenceTransformerEngine(InferenceEnginePort):
    def __init__(self, model: SentenceTransformer, dim: int, device: str = "cpu"):
        self._model: Optional[SentenceTransformer] = model
        self.dim = dim
        self.device = device

    @classmethod
    def load(
        cls,
        model_name: Optional[str] = None,
        *,
        device: Optional[str] = None,
        expected_dim: Optional[int] = None,
        runtime_library_path: Optional[str] = None,
        num_threads: Optional[int] = None,
    ) -> "SentenceTransformerEngine":
        """
        Initialize the runtime environment and load the model once.

        Raises:
            EngineInitError: the environment or the model could not be loaded, or
                the model does not produce ``expected_dim`` values per sentence.
        """
        model_name = model_name or settings.model_name
        device = device or settings.device
        expected_dim = expected_dim or settings.embedding_dim

        created_environment = not runtime.is_initialized()
        runtime.initialize_environment(runtime_library_path, num_threads)
        try:
            try:
                model = SentenceTransformer(model_name, device=device)
                model.eval()
                dim = model.get_sentence_embedding_dimension()
            except Exception as e:
                raise EngineInitError(f"failed to load model {model_name!r}: {e}") from e
            if dim != expected_dim:
                raise EngineInitError(
                    f"model {model_name!r} produces {dim}-dimensional embeddings, "
                    f"expected {expected_dim}"
                )
        except BaseException:
            if created_environment:
                runtime.destroy_environment()
            raise

        logger.info(f"Loaded SentenceTransformer model {model_name} on {device}")
        return cls(model, dim=dim, device=device)

    @property
    def destroyed(self) -> bool:
        return self._model is None

    # ------------------------------------------------------------------
    # Port Implementation
    # ------------------------------------------------------------------
    def run(
        self,
        input_ids: np.ndarray,
        attention_mask: np.ndarray,
        token_type_ids: np.ndarray,
        shape: TensorShape,
    ) -> np.ndarray:
        if self._model is None:
            raise SessionClosedError("inference engine has been destroyed")

        for name, buffer in zip(INPUT_NAMES, (input_ids, attention_mask, token_type_ids)):
            if buffer is None or buffer.size != shape.numel:
                size = 0 if buffer is None else buffer.size
                raise InferenceError(
                    f"{name} holds {size} elements, shape {tuple(shape)} requires {shape.numel}"
                )

        try:
            with engine_inputs(
                input_ids, attention_mask, token_type_ids, shape, self.device
            ) as features, torch.inference_mode():
                output = self._model(features)[OUTPUT_NAME]
                flat = output.detach().to("cpu", torch.float32).reshape(-1).numpy()
        except Exception as e:
            raise InferenceError(f"failed to run session: {e}") from e
        return flat

    def destroy(self) -> None:
        if self._model is None:
            raise SessionClosedError("inference engine already destroyed")
        self._model = None
        runtime.destroy_environment()
        logger.info("Inference engine destroyed")
