"""Append-only manifest that indexes every exported chunk."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any


@dataclass
class ChunkEntry:
    """Description of one exported chunk."""

    id: str
    created_by: str = ""
    created_at: str = ""
    sessions: int = 0
    memories: int = 0
    prompts: int = 0


@dataclass
class Manifest:
    """Index of exported chunks; entries are only ever appended."""

    version: int = 1
    chunks: list[ChunkEntry] = field(default_factory=list)

    def has_chunk(self, chunk_id: str) -> bool:
        """True if the chunk id is already registered."""
        return any(entry.id == chunk_id for entry in self.chunks)


def manifest_path(sync_dir: str | Path) -> Path:
    """Path of the manifest file inside the sync directory."""
    return Path(sync_dir) / ".kronos" / "manifest.json"


def _entry_from_dict(data: Any) -> ChunkEntry:
    if not isinstance(data, dict):
        raise ValueError("manifest entry must be a JSON object")
    return ChunkEntry(
        id=str(data.get("id") or ""),
        created_by=str(data.get("created_by") or ""),
        created_at=str(data.get("created_at") or ""),
        sessions=int(data.get("sessions") or 0),
        memories=int(data.get("memories") or 0),
        prompts=int(data.get("prompts") or 0),
    )


def _entry_to_dict(entry: ChunkEntry) -> dict[str, Any]:
    return {
        "id": entry.id,
        "created_by": entry.created_by,
        "created_at": entry.created_at,
        "sessions": entry.sessions,
        "memories": entry.memories,
        "prompts": entry.prompts,
    }


def load_manifest(sync_dir: str | Path) -> Manifest:
    """Read the manifest; an absent file yields an empty version-1 manifest."""
    path = manifest_path(sync_dir)
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return Manifest(version=1)

    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ValueError(f"cannot parse manifest: {exc}") from exc
    if not isinstance(data, dict):
        raise ValueError("cannot parse manifest: expected a JSON object")

    try:
        version = int(data.get("version") or 0)
        chunks = [_entry_from_dict(item) for item in data.get("chunks") or []]
    except (TypeError, ValueError) as exc:
        raise ValueError(f"cannot parse manifest: {exc}") from exc

    return Manifest(version=version or 1, chunks=chunks)


def save_manifest(sync_dir: str | Path, manifest: Manifest) -> Path:
    """Write the manifest as indented JSON, creating directories as needed."""
    path = manifest_path(sync_dir)
    path.parent.mkdir(parents=True, exist_ok=True)
    document = {
        "version": manifest.version,
        "chunks": [_entry_to_dict(entry) for entry in manifest.chunks],
    }
    path.write_text(
        json.dumps(document, indent=2, ensure_ascii=False) + "\n",
        encoding="utf-8",
    )
    return path