"""
Process-wide runtime environment backing the inference engine.

Only one environment exists per process:
- ``initialize_environment`` creates it, or returns the live one when called
  again with a compatible configuration.
- ``destroy_environment`` tears it down for the whole process. Destroying it
  while another session still runs is a caller error.
"""

import ctypes
import logging
import os
import threading
from dataclasses import dataclass
from typing import Optional

import torch

from minilm_embed.core.domain.errors import EngineInitError

logger = logging.getLogger(__name__)

RUNTIME_LIBRARY_ENV = "MINILM_RUNTIME_LIBRARY_PATH"


@dataclass
class RuntimeEnvironment:
    library_path: Optional[str]
    num_threads: int
    previous_num_threads: int
    library: Optional[ctypes.CDLL] = None


_environment: Optional[RuntimeEnvironment] = None
_lock = threading.Lock()


def resolve_library_path(explicit: Optional[str] = None) -> Optional[str]:
    """Explicit path first, then the environment variable, else default discovery."""
    if explicit:
        return explicit
    return os.environ.get(RUNTIME_LIBRARY_ENV) or None


def initialize_environment(
    library_path: Optional[str] = None, num_threads: Optional[int] = None
) -> RuntimeEnvironment:
    global _environment
    library_path = resolve_library_path(library_path)

    with _lock:
        if _environment is not None:
            if library_path and library_path != _environment.library_path:
                raise EngineInitError(
                    f"runtime environment already initialized with library "
                    f"{_environment.library_path!r}, refusing {library_path!r}"
                )
            logger.debug("Reusing live runtime environment")
            return _environment

        library = None
        if library_path:
            try:
                library = ctypes.CDLL(library_path, mode=ctypes.RTLD_GLOBAL)
            except OSError as e:
                raise EngineInitError(
                    f"failed to load runtime library {library_path!r}: {e}"
                ) from e
            logger.info(f"Loaded runtime library from {library_path}")

        previous = torch.get_num_threads()
        if num_threads:
            torch.set_num_threads(num_threads)

        _environment = RuntimeEnvironment(
            library_path=library_path,
            num_threads=torch.get_num_threads(),
            previous_num_threads=previous,
            library=library,
        )
        logger.info(
            f"Runtime environment initialized (threads: {_environment.num_threads})"
        )
        return _environment


def destroy_environment() -> None:
    global _environment
    with _lock:
        if _environment is None:
            return
        torch.set_num_threads(_environment.previous_num_threads)
        _environment = None
    logger.info("Runtime environment destroyed")


def is_initialized() -> bool:
    return _environment is not None


def current_environment() -> Optional[RuntimeEnvironment]:
    return _environment
