"""
Command line entry point.

Reads newline-separated sentences from stdin and prints one embedding per
sentence to stdout. Diagnostics and logs go to stderr.

    echo "Hello, world!" | minilm-embed --output json
"""

import argparse
import json
import logging
import sys
from typing import IO, List, Optional, Sequence

import numpy as np

from minilm_embed.app.factory import open_pipeline
from minilm_embed.core.domain.entities import Embedding
from minilm_embed.core.domain.errors import EmbeddingError
from minilm_embed.settings import settings

logger = logging.getLogger(__name__)

OUTPUT_FORMATS = ("values", "json", "json-pretty")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="minilm-embed",
        description=(
            "Generate 384-dimensional sentence embeddings from stdin "
            "using the all-MiniLM-L6-v2 model."
        ),
    )
    parser.add_argument(
        "--runtime-path",
        default=None,
        help="Shared library to preload before the engine starts "
        "(default: MINILM_RUNTIME_LIBRARY_PATH env var)",
    )
    parser.add_argument(
        "-o",
        "--output",
        choices=OUTPUT_FORMATS,
        default="values",
        help="Output format: 'values' (space-separated), 'json', or 'json-pretty'",
    )
    parser.add_argument(
        "-b",
        "--batch",
        action="store_true",
        help="Process all lines as one batch (more efficient for multiple sentences)",
    )
    parser.add_argument("--model", default=None, help="Model name or local path")
    parser.add_argument("--log-level", default=settings.log_level)
    return parser


def read_sentences(stream: IO[str]) -> List[str]:
    """Strip every line and drop blank ones."""
    return [line.strip() for line in stream if line.strip()]


def compact_floats(embedding: Sequence[float]) -> List[float]:
    """Shortest decimal form that still reads back as the same float32."""
    return [
        float(np.format_float_positional(np.float32(value), unique=True))
        for value in embedding
    ]


def format_embedding(sentence: str, embedding: Sequence[float], output_format: str) -> str:
    if output_format in ("json", "json-pretty"):
        payload = {"sentence": sentence, "embedding": compact_floats(embedding)}
        return json.dumps(payload, indent=2 if output_format == "json-pretty" else None)
    values = " ".join(f"{value:.6f}" for value in embedding)
    return f"# {sentence}\n{values}"


def main(
    argv: Optional[Sequence[str]] = None,
    stdin: Optional[IO[str]] = None,
    stdout: Optional[IO[str]] = None,
) -> int:
    args = build_parser().parse_args(argv)
    stdin = stdin or sys.stdin
    stdout = stdout or sys.stdout

    logging.basicConfig(
        level=args.log_level.upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )

    try:
        sentences = read_sentences(stdin)
    except OSError as e:
        print(f"Error reading input: {e}", file=sys.stderr)
        return 1
    if not sentences:
        print("No input provided", file=sys.stderr)
        return 1

    try:
        pipeline = open_pipeline(
            model_name=args.model, runtime_library_path=args.runtime_path
        )
    except EmbeddingError as e:
        print(f"Failed to initialize model: {e}", file=sys.stderr)
        return 1

    logger.debug(f"Embedding {len(sentences)} sentences (batch mode: {args.batch})")
    with pipeline:
        results: List[Embedding] = []
        if args.batch and len(sentences) > 1:
            try:
                results = pipeline.compute_batch(sentences)
            except EmbeddingError as e:
                print(f"Failed to compute batch embeddings: {e}", file=sys.stderr)
                return 1
        else:
            for sentence in sentences:
                try:
                    results.append(pipeline.compute_one(sentence))
                except EmbeddingError as e:
                    print(
                        f"Failed to compute embedding for '{sentence}': {e}",
                        file=sys.stderr,
                    )
                    return 1

        for sentence, embedding in zip(sentences, results):
            print(format_embedding(sentence, embedding, args.output), file=stdout)
    return 0


def run() -> None:
    sys.exit(main())


if __name__ == "__main__":
    run()
