"""
EmbeddingPipeline: sentences in, one embedding per sentence out.

``compute_one`` goes through ``compute_batch`` so single-sentence and
batched results always come from the same code path.
"""

import logging
from typing import List, Sequence

from minilm_embed.core.domain.entities import Embedding
from minilm_embed.core.domain.errors import ShapeMismatchError, TokenizationError
from minilm_embed.core.services.batching import extract_embeddings, scoped_batch_tensors
from minilm_embed.core.services.session import EmbeddingSession

logger = logging.getLogger(__name__)


class EmbeddingPipeline:
    def __init__(self, session: EmbeddingSession):
        self.session = session

    @property
    def dim(self) -> int:
        return self.session.dim

    def compute_batch(self, sentences: Sequence[str]) -> List[Embedding]:
        self.session.ensure_open()
        sentences = list(sentences)
        if not sentences:
            return []

        with self.session.acquire() as (tokenizer, engine):
            batch = tokenizer.encode_batch(sentences)
            if batch.size != len(sentences):
                raise TokenizationError(
                    f"tokenizer returned {batch.size} encodings for {len(sentences)} sentences"
                )
            logger.debug(
                f"Running batch of {batch.size} sentences (seq_length: {batch.seq_length})"
            )
            with scoped_batch_tensors(batch) as tensors:
                output = engine.run(
                    tensors.input_ids,
                    tensors.attention_mask,
                    tensors.token_type_ids,
                    tensors.shape,
                )
            return extract_embeddings(output, batch.size, engine.dim)

    def compute_one(self, sentence: str) -> Embedding:
        embeddings = self.compute_batch([sentence])
        if len(embeddings) != 1:
            raise ShapeMismatchError(observed=len(embeddings), expected=1, unit="rows")
        return embeddings[0]

    def close(self) -> None:
        self.session.close()

    def __enter__(self) -> "EmbeddingPipeline":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
