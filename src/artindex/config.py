"""Runtime settings resolved from environment variables."""

import os
from dataclasses import dataclass, field, replace
from pathlib import Path

DEFAULT_DOCUMENTS_PATH = "./processed/rag-documents.json"
DEFAULT_INDEX_DIR = "./processed/embeddings"
DEFAULT_MODEL = "BAAI/bge-small-en-v1.5"
DEFAULT_CACHE_DIR = "./.cache/models"
DEFAULT_BATCH_SIZE = 50
DEFAULT_CHECKPOINT_INTERVAL = 1000
DEFAULT_MIN_SCORE = 0.3


def _env(name: str, default: str = "") -> str:
    """Read env var safely and strip whitespace."""
    return (os.getenv(name) or default).strip()


def _env_int(name: str, default: int) -> int:
    v = _env(name, "")
    if v == "":
        return default
    try:
        return int(v)
    except ValueError as e:
        raise RuntimeError(f"Env var {name} must be an int, got {v!r}") from e


def _env_float(name: str, default: float) -> float:
    v = _env(name, "")
    if v == "":
        return default
    try:
        return float(v)
    except ValueError as e:
        raise RuntimeError(f"Env var {name} must be a float, got {v!r}") from e


@dataclass(frozen=True)
class Settings:
    """Paths and tuning knobs shared by the CLI and the tool server."""

    documents_path: Path = field(default_factory=lambda: Path(DEFAULT_DOCUMENTS_PATH))
    index_dir: Path = field(default_factory=lambda: Path(DEFAULT_INDEX_DIR))
    model_name: str = DEFAULT_MODEL
    cache_dir: Path = field(default_factory=lambda: Path(DEFAULT_CACHE_DIR))
    batch_size: int = DEFAULT_BATCH_SIZE
    checkpoint_interval: int = DEFAULT_CHECKPOINT_INTERVAL
    min_score: float = DEFAULT_MIN_SCORE

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from ARTINDEX_* environment variables."""
        settings = cls(
            documents_path=Path(_env("ARTINDEX_DOCUMENTS_PATH", DEFAULT_DOCUMENTS_PATH)),
            index_dir=Path(_env("ARTINDEX_INDEX_DIR", DEFAULT_INDEX_DIR)),
            model_name=_env("ARTINDEX_MODEL", DEFAULT_MODEL),
            cache_dir=Path(_env("ARTINDEX_CACHE_DIR", DEFAULT_CACHE_DIR)),
            batch_size=_env_int("ARTINDEX_BATCH_SIZE", DEFAULT_BATCH_SIZE),
            checkpoint_interval=_env_int(
                "ARTINDEX_CHECKPOINT_INTERVAL", DEFAULT_CHECKPOINT_INTERVAL
            ),
            min_score=_env_float("ARTINDEX_MIN_SCORE", DEFAULT_MIN_SCORE),
        )
        settings.validate()
        return settings

    def validate(self) -> None:
        if self.batch_size <= 0:
            raise RuntimeError(f"batch_size must be positive, got {self.batch_size}")
        if self.checkpoint_interval <= 0:
            raise RuntimeError(
                f"checkpoint_interval must be positive, got {self.checkpoint_interval}"
            )
        if not self.model_name:
            raise RuntimeError("model_name resolved to empty value")

    def with_overrides(self, **changes) -> "Settings":
        """Return a copy with the given non-None fields replaced."""
        updates = {k: v for k, v in changes.items() if v is not None}
        if not updates:
            return self
        settings = replace(self, **updates)
        settings.validate()
        return settings
