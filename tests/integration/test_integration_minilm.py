"""
Runs the real all-MiniLM-L6-v2 model. Skipped when the model or tokenizer
cannot be loaded (no cache and no network).
"""

import math

import numpy as np
import pytest

from minilm_embed.app.factory import open_pipeline
from minilm_embed.core.domain.errors import EngineInitError

pytestmark = pytest.mark.integration

TOL = 1e-6


@pytest.fixture(scope="module")
def real_pipeline():
    try:
        pipeline = open_pipeline()
    except EngineInitError as e:
        pytest.skip(f"all-MiniLM-L6-v2 unavailable: {e}")
    yield pipeline
    pipeline.close()


def test_single_sentence_embedding(real_pipeline):
    embedding = real_pipeline.compute_one("Hello, world! This is a test sentence.")

    assert len(embedding) == 384
    assert any(v != 0.0 for v in embedding)
    assert all(math.isfinite(v) for v in embedding)


def test_batch_embedding(real_pipeline):
    sentences = [
        "Hello, world! This is a test sentence.",
        "This is another different sentence.",
        "A third sentence with different content.",
    ]
    embeddings = real_pipeline.compute_batch(sentences)

    assert len(embeddings) == len(sentences)
    for embedding in embeddings:
        assert len(embedding) == 384
        assert all(math.isfinite(v) for v in embedding)


def test_single_and_batch_agree(real_pipeline):
    sentence = "The dog is running in the park"
    assert np.allclose(
        real_pipeline.compute_one(sentence),
        real_pipeline.compute_batch([sentence])[0],
        atol=TOL,
        rtol=0,
    )


def test_duplicates_match_and_differ_from_neighbour(real_pipeline):
    a1, b, a2 = real_pipeline.compute_batch(
        ["The cat is sleeping on the couch", "I love eating pizza for dinner", "The cat is sleeping on the couch"]
    )
    assert np.allclose(a1, a2, atol=TOL, rtol=0)
    assert not np.allclose(a1, b, atol=TOL, rtol=0)


def test_repeated_batch_is_deterministic(real_pipeline):
    sentences = ["A dog runs through the park", "Quarterly revenue grew by ten percent"]
    first = real_pipeline.compute_batch(sentences)
    second = real_pipeline.compute_batch(sentences)
    for x, y in zip(first, second):
        assert np.allclose(x, y, atol=TOL, rtol=0)


def test_embeddings_are_unit_length(real_pipeline):
    embedding = np.asarray(real_pipeline.compute_one("Normalized output"))
    assert np.linalg.norm(embedding) == pytest.approx(1.0, abs=1e-4)
