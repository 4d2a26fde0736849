"""
Download the model once and save it, tokenizer.json included, to a local
directory. Point ``MINILM_MODEL_NAME`` at that directory to run offline.

    minilm-embed-prefetch ./models/all-MiniLM-L6-v2
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence

from sentence_transformers import SentenceTransformer

from minilm_embed.infrastructure.tokenization.huggingface import TOKENIZER_FILE
from minilm_embed.settings import settings

logger = logging.getLogger(__name__)


def prefetch(model_name: str, target: Path) -> Path:
    target.mkdir(parents=True, exist_ok=True)
    model = SentenceTransformer(model_name, device="cpu")
    model.save(str(target))
    if not (target / TOKENIZER_FILE).is_file():
        raise FileNotFoundError(f"{model_name} did not ship a {TOKENIZER_FILE}")
    logger.info(f"Saved {model_name} to {target}")
    return target


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        prog="minilm-embed-prefetch",
        description="Save the embedding model to a local directory.",
    )
    parser.add_argument("target", type=Path)
    parser.add_argument("--model", default=settings.model_name)
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )
    try:
        prefetch(args.model, args.target)
    except (OSError, ValueError) as e:
        logger.error(f"Prefetch failed: {e}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
