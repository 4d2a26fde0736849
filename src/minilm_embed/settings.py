"""
Global configuration loaded via environment variables (prefix ``MINILM_``)
or a local ``.env`` file.
"""

from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # RUNTIME
    app_host: str = "0.0.0.0"
    app_port: int = 8000
    log_level: str = "INFO"
    # MODEL
    model_name: str = "sentence-transformers/all-MiniLM-L6-v2"
    embedding_dim: int = 384
    device: str = "cpu"
    # TOKENIZER
    tokenizer_source: Optional[str] = None  # defaults to model_name
    max_seq_length: int = 256
    padding_strategy: str = Field("longest", pattern="^(longest|max_length)$")
    # ENGINE RUNTIME
    runtime_library_path: Optional[str] = None
    num_threads: Optional[int] = Field(None, ge=1)

    model_config = SettingsConfigDict(
        env_prefix="MINILM_",
        env_file=".env",
        env_file_encoding="utf-8",
        protected_namespaces=(),
    )


settings = Settings()
