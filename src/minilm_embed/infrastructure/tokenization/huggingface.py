"""
Tokenization adapter over HuggingFace ``tokenizers``.

The payload is a ``tokenizer.json`` blob, a path to one (or to a model
directory holding one), or a hub identifier. Padding and truncation are
owned here: every encoding of a batch comes back with the same length.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Sequence, Union

from tokenizers import Tokenizer

from minilm_embed.core.domain.entities import Batch, Encoding
from minilm_embed.core.domain.errors import EngineInitError, TokenizationError
from minilm_embed.core.ports import TokenizerPort

logger = logging.getLogger(__name__)

TOKENIZER_FILE = "tokenizer.json"


def load_tokenizer(source: Union[str, bytes, Path]) -> Tokenizer:
    try:
        if isinstance(source, (bytes, bytearray)):
            return Tokenizer.from_buffer(bytes(source))
        path = Path(source)
        if path.is_dir():
            path = path / TOKENIZER_FILE
        if path.is_file():
            return Tokenizer.from_file(str(path))
        return Tokenizer.from_pretrained(str(source))
    except Exception as e:
        raise EngineInitError(f"failed to load tokenizer: {e}") from e


class HuggingFaceTokenizer(TokenizerPort):
    def __init__(
        self,
        tokenizer: Tokenizer,
        *,
        max_seq_length: int = 256,
        padding: str = "longest",
        pad_token: str = "[PAD]",
    ):
        if padding not in ("longest", "max_length"):
            raise ValueError(f"Unsupported padding strategy: {padding}")
        self.max_seq_length = max_seq_length
        self.padding = padding

        pad_id = tokenizer.token_to_id(pad_token)
        if pad_id is None:
            pad_id = 0
        tokenizer.enable_truncation(max_length=max_seq_length)
        tokenizer.enable_padding(
            pad_id=pad_id,
            pad_token=pad_token,
            length=max_seq_length if padding == "max_length" else None,
        )
        self._tokenizer = tokenizer

    @classmethod
    def from_source(
        cls, source: Union[str, bytes, Path], **kwargs
    ) -> "HuggingFaceTokenizer":
        tokenizer = cls(load_tokenizer(source), **kwargs)
        logger.info(
            f"Tokenizer loaded (padding: {tokenizer.padding}, max_seq_length: {tokenizer.max_seq_length})"
        )
        return tokenizer

    # ------------------------------------------------------------------
    # Port Implementation
    # ------------------------------------------------------------------
    def encode_batch(self, sentences: Sequence[str]) -> Batch:
        sentences = list(sentences)
        for index, sentence in enumerate(sentences):
            if not isinstance(sentence, str):
                raise TokenizationError(
                    f"sentence {index} is not text: {sentence!r}", sentence=sentence
                )
        if not sentences:
            return Batch()

        try:
            raw = self._tokenizer.encode_batch(sentences)
        except Exception as e:
            raise TokenizationError(f"failed to tokenize sentences: {e}") from e

        return Batch(
            tuple(
                Encoding(
                    ids=tuple(enc.ids),
                    attention_mask=tuple(enc.attention_mask),
                    type_ids=tuple(enc.type_ids),
                )
                for enc in raw
            )
        )

    def encode_one(self, sentence: str) -> Encoding:
        return self.encode_batch([sentence]).encodings[0]

    def decode(self, ids: Sequence[int], skip_special_tokens: bool = False) -> str:
        """Turn token ids back into text; special tokens are kept by default."""
        try:
            return self._tokenizer.decode(list(ids), skip_special_tokens=skip_special_tokens)
        except Exception as e:
            raise TokenizationError(f"failed to decode ids: {e}") from e
