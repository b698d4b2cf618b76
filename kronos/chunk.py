"""Immutable memory chunks: canonical JSON compressed with gzip."""

from __future__ import annotations

import gzip
import hashlib
import json
import zlib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

_CHUNK_SUFFIX = ".jsonl.gz"


@dataclass
class ChunkData:
    """Serializable content of a chunk."""

    sessions: list[dict[str, Any]] = field(default_factory=list)
    observations: list[dict[str, Any]] = field(default_factory=list)
    prompts: list[dict[str, Any]] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """Return the chunk as a plain JSON-ready mapping."""
        return {
            "sessions": list(self.sessions),
            "observations": list(self.observations),
            "prompts": list(self.prompts),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ChunkData:
        """Build a chunk from a decoded mapping; missing or null lists become empty."""
        if not isinstance(data, dict):
            raise ValueError("chunk content must be a JSON object")
        return cls(
            sessions=list(data.get("sessions") or []),
            observations=list(data.get("observations") or []),
            prompts=list(data.get("prompts") or []),
        )

    def is_empty(self) -> bool:
        """True when the chunk holds no sessions, observations or prompts."""
        return not (self.sessions or self.observations or self.prompts)


def _chunk_dir(sync_dir: str | Path) -> Path:
    return Path(sync_dir) / ".kronos" / "chunks"


def chunk_path(sync_dir: str | Path, chunk_id: str) -> Path:
    """Path of the file that holds the given chunk."""
    return _chunk_dir(sync_dir) / f"{chunk_id}{_CHUNK_SUFFIX}"


def marshal_chunk(data: ChunkData) -> tuple[bytes, str]:
    """Serialize and compress a chunk.

    Returns the compressed bytes and the chunk id: the first 16 hex
    characters of the SHA-256 of the compressed content.
    """
    try:
        encoded = json.dumps(
            data.to_dict(),
            sort_keys=True,
            separators=(",", ":"),
            ensure_ascii=False,
        ).encode("utf-8")
    except (TypeError, ValueError) as exc:
        raise ValueError(f"cannot serialize chunk: {exc}") from exc

    compressed = gzip.compress(encoded, mtime=0)
    chunk_id = hashlib.sha256(compressed).hexdigest()[:16]
    return compressed, chunk_id


def write_chunk(sync_dir: str | Path, chunk_id: str, payload: bytes) -> Path:
    """Write compressed chunk bytes into the chunk directory and return the path."""
    _chunk_dir(sync_dir).mkdir(parents=True, exist_ok=True)
    path = chunk_path(sync_dir, chunk_id)
    path.write_bytes(payload)
    return path


def read_chunk(sync_dir: str | Path, chunk_id: str) -> ChunkData:
    """Read and decompress a chunk from disk."""
    raw = chunk_path(sync_dir, chunk_id).read_bytes()
    try:
        text = gzip.decompress(raw)
    except (OSError, EOFError, zlib.error) as exc:
        raise ValueError(f"cannot open gzip chunk {chunk_id}: {exc}") from exc
    try:
        decoded = json.loads(text)
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise ValueError(f"cannot decode chunk {chunk_id}: {exc}") from exc
    try:
        return ChunkData.from_dict(decoded)
    except ValueError as exc:
        raise ValueError(f"cannot decode chunk {chunk_id}: {exc}") from exc