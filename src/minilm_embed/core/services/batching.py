"""
Batch tensor building and output extraction.

Both sides of the engine call use the same row-major layout: a 2-D table
of shape (rows, width) is stored as one flat buffer, row ``n`` starting at
``n * width``.
"""

import logging
from contextlib import contextmanager
from typing import Iterator, List, Sequence, Union

import numpy as np

from minilm_embed.core.domain.entities import Batch, BatchTensors, Embedding, TensorShape
from minilm_embed.core.domain.errors import BatchInvariantError, ShapeMismatchError

logger = logging.getLogger(__name__)

INPUT_DTYPE = np.int64


def build_batch_tensors(batch: Batch) -> BatchTensors:
    """Pack every encoding of ``batch`` into three flat (N, L) buffers."""
    if batch.size == 0:
        raise BatchInvariantError("cannot build tensors for an empty batch")

    seq_length = batch.seq_length
    if seq_length == 0:
        raise BatchInvariantError("batch encodings have zero length")
    for index, encoding in enumerate(batch.encodings):
        if len(encoding) != seq_length:
            raise BatchInvariantError(
                f"encoding {index} has length {len(encoding)}, "
                f"batch length is {seq_length}"
            )

    shape = TensorShape(batch.size, seq_length)
    input_ids = np.empty(shape.numel, dtype=INPUT_DTYPE)
    attention_mask = np.empty(shape.numel, dtype=INPUT_DTYPE)
    token_type_ids = np.empty(shape.numel, dtype=INPUT_DTYPE)

    for n, encoding in enumerate(batch.encodings):
        row = slice(n * seq_length, (n + 1) * seq_length)
        input_ids[row] = encoding.ids
        attention_mask[row] = encoding.attention_mask
        token_type_ids[row] = encoding.type_ids

    return BatchTensors(
        input_ids=input_ids,
        attention_mask=attention_mask,
        token_type_ids=token_type_ids,
        shape=shape,
    )


@contextmanager
def scoped_batch_tensors(batch: Batch) -> Iterator[BatchTensors]:
    """Build the input buffers and release them when the block exits, errors included."""
    tensors = build_batch_tensors(batch)
    logger.debug(f"Built input tensors with shape {tuple(tensors.shape)}")
    try:
        yield tensors
    finally:
        tensors.release()


def extract_embeddings(
    output: Union[np.ndarray, Sequence[float]], batch_size: int, dim: int
) -> List[Embedding]:
    flat = np.asarray(output, dtype=np.float32).reshape(-1)
    expected = batch_size * dim
    if flat.size != expected:
        raise ShapeMismatchError(observed=int(flat.size), expected=expected)

    # tolist() copies, so no returned vector aliases the engine output
    return [flat[n * dim : (n + 1) * dim].tolist() for n in range(batch_size)]
