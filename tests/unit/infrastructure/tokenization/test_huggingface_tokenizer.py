# tests/unit/infrastructure/tokenization/test_huggingface_tokenizer.py
import pytest
from tokenizers import Tokenizer
from tokenizers.models import WordLevel
from tokenizers.pre_tokenizers import Whitespace

from minilm_embed.core.domain.entities import Batch, Encoding
from minilm_embed.core.domain.errors import EngineInitError, TokenizationError
from minilm_embed.infrastructure.tokenization.huggingface import (
    HuggingFaceTokenizer,
    load_tokenizer,
)

VOCAB = {
    "[PAD]": 0,
    "[UNK]": 1,
    "hello": 2,
    "world": 3,
    "a": 4,
    "test": 5,
    "sentence": 6,
}


def make_raw_tokenizer() -> Tokenizer:
    tk = Tokenizer(WordLevel(VOCAB, unk_token="[UNK]"))
    tk.pre_tokenizer = Whitespace()
    return tk


@pytest.fixture
def tokenizer():
    return HuggingFaceTokenizer(make_raw_tokenizer(), max_seq_length=8)


def test_encode_batch_pads_to_longest(tokenizer):
    batch = tokenizer.encode_batch(["hello world test", "a"])

    assert isinstance(batch, Batch)
    assert batch.size == 2
    assert batch.seq_length == 3
    first, second = batch.encodings
    assert first.ids == (2, 3, 5)
    assert first.attention_mask == (1, 1, 1)
    assert second.ids == (4, 0, 0)
    assert second.attention_mask == (1, 0, 0)
    assert second.type_ids == (0, 0, 0)


def test_encode_batch_preserves_order(tokenizer):
    batch = tokenizer.encode_batch(["test", "hello", "world"])
    assert [enc.ids[0] for enc in batch.encodings] == [5, 2, 3]


def test_unknown_words_map_to_unk(tokenizer):
    assert tokenizer.encode_one("zebra").ids == (1,)


def test_encode_one_matches_single_item_batch(tokenizer):
    one = tokenizer.encode_one("hello test sentence")
    assert isinstance(one, Encoding)
    assert one == tokenizer.encode_batch(["hello test sentence"]).encodings[0]


def test_fixed_padding_and_truncation():
    tk = HuggingFaceTokenizer(make_raw_tokenizer(), max_seq_length=4, padding="max_length")

    batch = tk.encode_batch(["hello", "hello world a test sentence hello"])

    assert batch.seq_length == 4
    assert batch.encodings[0].ids == (2, 0, 0, 0)
    assert batch.encodings[1].ids == (2, 3, 4, 5)
    assert batch.encodings[1].attention_mask == (1, 1, 1, 1)


def test_truncation_applies_with_longest_padding():
    tk = HuggingFaceTokenizer(make_raw_tokenizer(), max_seq_length=2)
    assert tk.encode_one("hello world a test").ids == (2, 3)


def test_non_text_input_is_a_tokenization_error(tokenizer):
    with pytest.raises(TokenizationError, match="sentence 1 is not text") as exc_info:
        tokenizer.encode_batch(["hello", 42])
    assert exc_info.value.sentence == 42


def test_empty_input_returns_empty_batch(tokenizer):
    assert tokenizer.encode_batch([]).size == 0


def test_invalid_padding_strategy():
    with pytest.raises(ValueError, match="Unsupported padding"):
        HuggingFaceTokenizer(make_raw_tokenizer(), padding="bucketed")


# ---------- payload loading ---------------------------------------------------
def test_from_source_accepts_json_blob():
    blob = make_raw_tokenizer().to_str().encode("utf-8")
    tk = HuggingFaceTokenizer.from_source(blob, max_seq_length=8)
    assert tk.encode_one("hello world").ids == (2, 3)


def test_from_source_accepts_file_and_model_directory(tmp_path):
    make_raw_tokenizer().save(str(tmp_path / "tokenizer.json"))

    from_file = HuggingFaceTokenizer.from_source(str(tmp_path / "tokenizer.json"))
    from_dir = HuggingFaceTokenizer.from_source(tmp_path)

    assert from_file.encode_one("a test").ids == (4, 5)
    assert from_dir.encode_one("a test").ids == (4, 5)


def test_load_tokenizer_failure_is_engine_init_error():
    with pytest.raises(EngineInitError, match="failed to load tokenizer"):
        load_tokenizer(b"{not json")


# ---------- decode -------------------------------------------------------------
def test_decode_round_trips_encoded_ids(tokenizer):
    ids = tokenizer.encode_one("hello world test").ids
    assert tokenizer.decode(ids) == "hello world test"


def test_decode_keeps_special_tokens_unless_asked(tokenizer):
    raw = make_raw_tokenizer()
    raw.add_special_tokens(["[PAD]"])
    tk = HuggingFaceTokenizer(raw, max_seq_length=8)
    padded = tk.encode_batch(["hello world", "a"]).encodings[1].ids

    assert padded == (4, 0)
    assert tk.decode(padded) == "a [PAD]"
    assert tk.decode(padded, skip_special_tokens=True) == "a"


def test_decode_failure_is_tokenization_error(tokenizer):
    with pytest.raises(TokenizationError, match="failed to decode"):
        tokenizer.decode([-1])
