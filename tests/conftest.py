# tests/conftest.py
import logging
import zlib
from typing import Sequence

import numpy as np
import pytest

from minilm_embed.core.domain.entities import Batch, Encoding, TensorShape
from minilm_embed.core.domain.errors import SessionClosedError
from minilm_embed.core.services.pipeline import EmbeddingPipeline
from minilm_embed.core.services.session import EmbeddingSession
from minilm_embed.infrastructure.engine import runtime

logger = logging.getLogger(__name__)
logging.basicConfig(level=logging.INFO)  # Basic config for test logs

CLS_ID, SEP_ID, PAD_ID = 101, 102, 0


class DummyTokenizer:
    """Whitespace tokenizer with BERT-like specials, padded to the longest sentence."""

    def __init__(self):
        self.calls = 0

    @staticmethod
    def _word_id(word: str) -> int:
        return 1000 + zlib.crc32(word.lower().encode("utf-8")) % 29000

    def encode_batch(self, sentences: Sequence[str]) -> Batch:
        self.calls += 1
        rows = [[CLS_ID] + [self._word_id(w) for w in s.split()] + [SEP_ID] for s in sentences]
        length = max((len(r) for r in rows), default=0)
        encodings = []
        for row in rows:
            pad = length - len(row)
            encodings.append(
                Encoding(
                    ids=tuple(row + [PAD_ID] * pad),
                    attention_mask=tuple([1] * len(row) + [0] * pad),
                    type_ids=tuple([0] * length),
                )
            )
        return Batch(tuple(encodings))

    def encode_one(self, sentence: str) -> Encoding:
        return self.encode_batch([sentence]).encodings[0]


class DummyEngine:
    """
    Deterministic stand-in for the encoder: each row is a fixed projection of
    its unpadded token ids, L2-normalized. Padding never changes a row.
    """

    def __init__(self, dim: int = 384):
        self.dim = dim
        self.calls = []
        self.fail_with = None
        self.output_override = None
        self.destroy_calls = 0

    def run(self, input_ids, attention_mask, token_type_ids, shape: TensorShape):
        self.calls.append(
            (shape, input_ids.copy(), attention_mask.copy(), token_type_ids.copy())
        )
        if self.fail_with is not None:
            raise self.fail_with
        if self.output_override is not None:
            return self.output_override

        ids = input_ids.reshape(shape).astype(np.float64)
        mask = attention_mask.reshape(shape)
        positions = np.arange(1, shape.seq_length + 1)[:, None]
        features = np.arange(1, self.dim + 1)[None, :]
        weights = np.sin(positions * features * 0.01)
        out = (ids * mask) @ weights
        out /= np.linalg.norm(out, axis=1, keepdims=True)
        return out.astype(np.float32).reshape(-1)

    def destroy(self):
        if self.destroy_calls:
            raise SessionClosedError("dummy engine already destroyed")
        self.destroy_calls += 1


@pytest.fixture
def dummy_tokenizer():
    return DummyTokenizer()


@pytest.fixture
def dummy_engine():
    return DummyEngine()


@pytest.fixture
def session(dummy_tokenizer, dummy_engine):
    return EmbeddingSession(dummy_tokenizer, dummy_engine)


@pytest.fixture
def pipeline(session):
    p = EmbeddingPipeline(session)
    yield p
    p.close()


@pytest.fixture(autouse=True)
def reset_runtime_environment():
    """The engine runtime is process-wide: never leak it between tests."""
    yield
    if runtime.is_initialized():
        runtime.destroy_environment()
        logger.info("CONFTEST: runtime environment torn down after test.")


@pytest.fixture
def engine_factory():
    """Builds fresh DummyEngine instances, for code that loads its own engine."""
    return DummyEngine
