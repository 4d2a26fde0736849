"""
EmbeddingSession: the live handle pairing a loaded tokenizer and engine.

State machine: uninitialized -> ready -> closed. ``closed`` is terminal.
The engine is not assumed to be safe for concurrent runs, so the session
lets one call in flight at a time.
"""

import logging
import threading
from contextlib import contextmanager
from enum import Enum
from typing import Iterator, Tuple

from minilm_embed.core.domain.errors import SessionClosedError
from minilm_embed.core.ports import InferenceEnginePort, TokenizerPort

logger = logging.getLogger(__name__)


class SessionState(str, Enum):
    """
    ``UNINITIALIZED`` names the state before a session exists: constructing an
    EmbeddingSession from loaded collaborators is the transition into ``READY``.
    """

    UNINITIALIZED = "uninitialized"
    READY = "ready"
    CLOSED = "closed"


class EmbeddingSession:
    def __init__(self, tokenizer: TokenizerPort, engine: InferenceEnginePort):
        self._lock = threading.Lock()
        self.tokenizer = tokenizer
        self.engine = engine
        self._state = SessionState.READY
        logger.info(f"Embedding session ready (dim: {engine.dim})")

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def closed(self) -> bool:
        return self._state is SessionState.CLOSED

    @property
    def dim(self) -> int:
        return self.engine.dim

    def ensure_open(self) -> None:
        if self.closed:
            raise SessionClosedError("embedding session is closed")

    @contextmanager
    def acquire(self) -> Iterator[Tuple[TokenizerPort, InferenceEnginePort]]:
        """Hold the session for one call; raises SessionClosedError once closed."""
        with self._lock:
            self.ensure_open()
            yield self.tokenizer, self.engine

    def close(self) -> None:
        """Destroy the engine once; later calls are no-ops."""
        with self._lock:
            if self.closed:
                return
            self._state = SessionState.CLOSED
            self.engine.destroy()
        logger.info("Embedding session closed")

    def __enter__(self) -> "EmbeddingSession":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
