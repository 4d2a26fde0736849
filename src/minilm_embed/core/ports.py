from __future__ import annotations

from typing import Protocol, Sequence, runtime_checkable

import numpy as np

from minilm_embed.core.domain.entities import Batch, Encoding, TensorShape


# -------- Ports --------
@runtime_checkable
class TokenizerPort(Protocol):
    def encode_batch(self, sentences: Sequence[str]) -> Batch: ...
    def encode_one(self, sentence: str) -> Encoding: ...


@runtime_checkable
class InferenceEnginePort(Protocol):
    dim: int

    def run(
        self,
        input_ids: np.ndarray,
        attention_mask: np.ndarray,
        token_type_ids: np.ndarray,
        shape: TensorShape,
    ) -> np.ndarray: ...

    def destroy(self) -> None: ...
