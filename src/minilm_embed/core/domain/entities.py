from dataclasses import dataclass, field
from typing import List, NamedTuple, Optional, Tuple

import numpy as np

Embedding = List[float]


@dataclass(frozen=True)
class Encoding:
    """Tokenized form of one sentence; all three fields share one length."""

    ids: Tuple[int, ...]
    attention_mask: Tuple[int, ...]
    type_ids: Tuple[int, ...]

    def __post_init__(self) -> None:
        if not len(self.ids) == len(self.attention_mask) == len(self.type_ids):
            raise ValueError(
                f"Encoding fields differ in length: ids={len(self.ids)}, "
                f"attention_mask={len(self.attention_mask)}, type_ids={len(self.type_ids)}"
            )

    def __len__(self) -> int:
        return len(self.ids)


@dataclass(frozen=True)
class Batch:
    encodings: Tuple[Encoding, ...] = ()

    @property
    def size(self) -> int:
        return len(self.encodings)

    @property
    def seq_length(self) -> int:
        return len(self.encodings[0]) if self.encodings else 0


class TensorShape(NamedTuple):
    batch_size: int
    seq_length: int

    @property
    def numel(self) -> int:
        return self.batch_size * self.seq_length


@dataclass
class BatchTensors:
    """
    Row-major flat input buffers for one batch.
    Element (n, l) of every buffer lives at flat index ``n * seq_length + l``.
    """

    input_ids: Optional[np.ndarray]
    attention_mask: Optional[np.ndarray]
    token_type_ids: Optional[np.ndarray]
    shape: TensorShape
    _released: bool = field(default=False, repr=False)

    @property
    def released(self) -> bool:
        return self._released

    def release(self) -> None:
        self.input_ids = None
        self.attention_mask = None
        self.token_type_ids = None
        self._released = True
