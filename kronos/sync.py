"""Export and import of memory through immutable chunks and an append-only manifest.

Each export writes ``.kronos/chunks/<id>.jsonl.gz`` and appends an entry to
``.kronos/manifest.json``. Import applies every chunk that has not been seen
before for the same sync directory, so running it again changes nothing.
"""

from __future__ import annotations

import hashlib
import re
import sqlite3
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from kronos.chunk import ChunkData, marshal_chunk, read_chunk, write_chunk
from kronos.manifest import ChunkEntry, load_manifest, save_manifest

MAX_MANIFEST_CHUNKS = 500
_EPOCH = "1970-01-01T00:00:00Z"

_SCHEMA = """
CREATE TABLE IF NOT EXISTS sessions (
    id          TEXT PRIMARY KEY,
    project     TEXT NOT NULL,
    directory   TEXT NOT NULL DEFAULT '',
    started_at  TEXT NOT NULL,
    ended_at    TEXT,
    summary     TEXT,
    deleted_at  TEXT
);
CREATE TABLE IF NOT EXISTS observations (
    id               INTEGER PRIMARY KEY AUTOINCREMENT,
    sync_id          TEXT UNIQUE,
    session_id       TEXT,
    type             TEXT NOT NULL,
    title            TEXT NOT NULL,
    content          TEXT NOT NULL DEFAULT '',
    project          TEXT NOT NULL,
    scope            TEXT NOT NULL DEFAULT 'project',
    topic_key        TEXT NOT NULL DEFAULT '',
    normalized_hash  TEXT NOT NULL DEFAULT '',
    revision_count   INTEGER NOT NULL DEFAULT 1,
    duplicate_count  INTEGER NOT NULL DEFAULT 1,
    last_seen_at     TEXT NOT NULL,
    created_at       TEXT NOT NULL,
    updated_at       TEXT NOT NULL,
    deleted_at       TEXT
);
CREATE TABLE IF NOT EXISTS user_prompts (
    id          INTEGER PRIMARY KEY AUTOINCREMENT,
    session_id  TEXT,
    content     TEXT NOT NULL,
    project     TEXT NOT NULL,
    created_at  TEXT NOT NULL,
    deleted_at  TEXT
);
CREATE TABLE IF NOT EXISTS sync_chunks (
    target_key  TEXT NOT NULL,
    chunk_id    TEXT NOT NULL,
    imported_at TEXT NOT NULL,
    PRIMARY KEY(target_key, chunk_id)
);
"""


class SyncError(Exception):
    """Raised when an export or import cannot be completed."""


def _now() -> str:
    return datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


def _normalized_hash(content: str) -> str:
    normalized = re.sub(r"\s+", " ", content.strip().lower())
    return hashlib.sha256(normalized.encode("utf-8")).hexdigest()


@dataclass
class Observation:
    """A stored observation as returned by a search."""

    id: int
    sync_id: str
    session_id: str
    type: str
    title: str
    content: str
    project: str
    scope: str
    topic_key: str
    revision_count: int
    created_at: str
    updated_at: str


class MemoryStore:
    """SQLite-backed store of sessions, observations and prompts."""

    def __init__(self, path: str | Path) -> None:
        self.path = str(path)
        self._db = sqlite3.connect(self.path)
        self._db.row_factory = sqlite3.Row
        self._db.executescript(_SCHEMA)
        self._db.commit()

    def close(self) -> None:
        """Close the underlying database connection."""
        self._db.close()

    def __enter__(self) -> MemoryStore:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    @property
    def _connection(self) -> sqlite3.Connection:
        return self._db

    def save_observation(
        self,
        obs_type: str,
        title: str,
        content: str,
        project: str,
        scope: str = "project",
        topic_key: str = "",
        session_id: str = "",
        sync_id: str = "",
    ) -> int:
        """Store an observation and return its id.

        An observation with the same project, scope and topic key is revised
        in place; one whose sync id is already known is left untouched.
        """
        if not obs_type or not title or not project:
            raise ValueError("type, title and project are required")
        scope = scope or "project"
        now = _now()
        digest = _normalized_hash(content)
        db = self._db

        if sync_id:
            row = db.execute(
                "SELECT id FROM observations WHERE sync_id = ?", (sync_id,)
            ).fetchone()
            if row is not None:
                return int(row["id"])

        if topic_key:
            row = db.execute(
                """SELECT id FROM observations
                   WHERE project = ? AND scope = ? AND topic_key = ? AND deleted_at IS NULL
                   ORDER BY updated_at DESC LIMIT 1""",
                (project, scope, topic_key),
            ).fetchone()
            if row is not None:
                db.execute(
                    """UPDATE observations
                       SET type = ?, title = ?, content = ?, normalized_hash = ?,
                           revision_count = revision_count + 1,
                           last_seen_at = ?, updated_at = ?
                       WHERE id = ?""",
                    (obs_type, title, content, digest, now, now, row["id"]),
                )
                db.commit()
                return int(row["id"])

        cursor = db.execute(
            """INSERT INTO observations(sync_id, session_id, type, title, content, project,
                                        scope, topic_key, normalized_hash, last_seen_at,
                                        created_at, updated_at)
               VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)""",
            (
                sync_id or uuid.uuid4().hex,
                session_id or None,
                obs_type,
                title,
                content,
                project,
                scope,
                topic_key,
                digest,
                now,
                now,
                now,
            ),
        )
        db.commit()
        return int(cursor.lastrowid)

    def count_observations(self, project: str = "") -> int:
        """Number of live observations, for one project or for all."""
        if project:
            row = self._db.execute(
                "SELECT COUNT(*) FROM observations WHERE deleted_at IS NULL AND project = ?",
                (project,),
            ).fetchone()
        else:
            row = self._db.execute(
                "SELECT COUNT(*) FROM observations WHERE deleted_at IS NULL"
            ).fetchone()
        return int(row[0])

    def search(self, query: str, limit: int = 10) -> list[Observation]:
        """Observations whose title or content holds every word of the query."""
        terms = query.split()
        if not terms:
            return []
        clauses = " AND ".join(
            "(LOWER(title) LIKE ? OR LOWER(content) LIKE ? OR LOWER(topic_key) LIKE ?)"
            for _ in terms
        )
        params: list[Any] = []
        for term in terms:
            pattern = f"%{term.lower()}%"
            params.extend([pattern, pattern, pattern])
        params.append(limit)
        rows = self._db.execute(
            f"""SELECT * FROM observations
                WHERE deleted_at IS NULL AND {clauses}
                ORDER BY updated_at DESC, id DESC LIMIT ?""",
            params,
        ).fetchall()
        return [
            Observation(
                id=int(row["id"]),
                sync_id=row["sync_id"] or "",
                session_id=row["session_id"] or "",
                type=row["type"],
                title=row["title"],
                content=row["content"],
                project=row["project"],
                scope=row["scope"],
                topic_key=row["topic_key"],
                revision_count=int(row["revision_count"]),
                created_at=row["created_at"],
                updated_at=row["updated_at"],
            )
            for row in rows
        ]


@dataclass
class SyncResult:
    """Outcome of an export."""

    chunk_id: str = ""
    sessions: int = 0
    memories: int = 0
    prompts: int = 0
    is_empty: bool = False


@dataclass
class ImportResult:
    """Outcome of an import."""

    chunks: int = 0
    sessions: int = 0
    memories: int = 0
    prompts: int = 0
    skipped: int = 0


def _nullable(value: str) -> str | None:
    return value or None


def _text(record: dict[str, Any], key: str) -> str:
    value = record.get(key)
    return value if isinstance(value, str) else ""


class Syncer:
    """Coordinates export and import of memory for one sync directory."""

    def __init__(self, store: MemoryStore, sync_dir: str | Path) -> None:
        self.store = store
        self.sync_dir = str(sync_dir)

    def export(self, created_by: str, project: str = "") -> SyncResult:
        """Export data created since the last chunk into a new chunk."""
        try:
            manifest = load_manifest(self.sync_dir)
        except (OSError, ValueError) as exc:
            raise SyncError(f"cannot load manifest: {exc}") from exc

        since = manifest.chunks[-1].created_at if manifest.chunks else _EPOCH

        try:
            data = self._collect(project, since)
        except sqlite3.Error as exc:
            raise SyncError(f"cannot collect data: {exc}") from exc

        if data.is_empty():
            return SyncResult(is_empty=True)

        try:
            compressed, chunk_id = marshal_chunk(data)
        except ValueError as exc:
            raise SyncError(str(exc)) from exc

        if manifest.has_chunk(chunk_id):
            return SyncResult(is_empty=True)

        now = _now()
        try:
            write_chunk(self.sync_dir, chunk_id, compressed)
            manifest.chunks.append(
                ChunkEntry(
                    id=chunk_id,
                    created_by=created_by,
                    created_at=now,
                    sessions=len(data.sessions),
                    memories=len(data.observations),
                    prompts=len(data.prompts),
                )
            )
            save_manifest(self.sync_dir, manifest)
        except OSError as exc:
            raise SyncError(f"cannot write chunk {chunk_id}: {exc}") from exc

        self._mark_chunk(chunk_id, now)

        return SyncResult(
            chunk_id=chunk_id,
            sessions=len(data.sessions),
            memories=len(data.observations),
            prompts=len(data.prompts),
        )

    def import_chunks(self) -> ImportResult:
        """Apply every chunk in the manifest that has not been imported yet."""
        try:
            manifest = load_manifest(self.sync_dir)
        except (OSError, ValueError) as exc:
            raise SyncError(f"cannot load manifest: {exc}") from exc

        result = ImportResult()
        if not manifest.chunks:
            return result

        if len(manifest.chunks) > MAX_MANIFEST_CHUNKS:
            manifest.chunks = manifest.chunks[-MAX_MANIFEST_CHUNKS:]
            try:
                save_manifest(self.sync_dir, manifest)
            except OSError:
                pass

        for entry in manifest.chunks:
            if self._chunk_imported(entry.id):
                result.skipped += 1
                continue

            try:
                data = read_chunk(self.sync_dir, entry.id)
            except (OSError, ValueError) as exc:
                raise SyncError(f"cannot read chunk {entry.id}: {exc}") from exc

            try:
                sessions, memories, prompts = self._apply(data)
            except (sqlite3.Error, ValueError) as exc:
                raise SyncError(f"cannot apply chunk {entry.id}: {exc}") from exc

            self._mark_chunk(entry.id, _now())
            result.chunks += 1
            result.sessions += sessions
            result.memories += memories
            result.prompts += prompts

        return result

    def _collect(self, project: str, since: str) -> ChunkData:
        db = self.store._connection
        project_clause = " AND project = ?" if project else ""
        params: tuple[str, ...] = (since, project) if project else (since,)
        data = ChunkData()

        for row in db.execute(
            f"""SELECT id, project, directory, started_at, ended_at, summary
                FROM sessions WHERE started_at > ?{project_clause} AND deleted_at IS NULL
                ORDER BY started_at ASC""",
            params,
        ):
            record: dict[str, Any] = {
                "id": row["id"],
                "project": row["project"],
                "directory": row["directory"],
                "started_at": row["started_at"],
            }
            if row["ended_at"] is not None:
                record["ended_at"] = row["ended_at"]
            if row["summary"] is not None:
                record["summary"] = row["summary"]
            data.sessions.append(record)

        for row in db.execute(
            f"""SELECT id, sync_id, session_id, type, title, content, project, scope,
                       topic_key, normalized_hash, revision_count, duplicate_count,
                       last_seen_at, created_at, updated_at
                FROM observations
                WHERE deleted_at IS NULL AND created_at > ?{project_clause}
                ORDER BY created_at ASC""",
            params,
        ):
            record = {
                "id": int(row["id"]),
                "sync_id": row["sync_id"] or "",
                "type": row["type"],
                "title": row["title"],
                "content": row["content"],
                "project": row["project"],
                "scope": row["scope"],
                "topic_key": row["topic_key"],
                "normalized_hash": row["normalized_hash"],
                "revision_count": int(row["revision_count"]),
                "duplicate_count": int(row["duplicate_count"]),
                "last_seen_at": row["last_seen_at"],
                "created_at": row["created_at"],
                "updated_at": row["updated_at"],
            }
            if row["session_id"] is not None:
                record["session_id"] = row["session_id"]
            data.observations.append(record)

        for row in db.execute(
            f"""SELECT id, session_id, content, project, created_at
                FROM user_prompts WHERE created_at > ?{project_clause} AND deleted_at IS NULL
                ORDER BY created_at ASC""",
            params,
        ):
            record = {
                "id": int(row["id"]),
                "content": row["content"],
                "project": row["project"],
                "created_at": row["created_at"],
            }
            if row["session_id"] is not None:
                record["session_id"] = row["session_id"]
            data.prompts.append(record)

        return data

    def _apply(self, data: ChunkData) -> tuple[int, int, int]:
        db = self.store._connection
        sessions = memories = prompts = 0

        for session in data.sessions:
            session_id = _text(session, "id")
            project = _text(session, "project")
            if not session_id or not project:
                continue
            cursor = db.execute(
                """INSERT OR IGNORE INTO sessions(id, project, directory, started_at, ended_at, summary)
                   VALUES (?, ?, ?, ?, ?, ?)""",
                (
                    session_id,
                    project,
                    _text(session, "directory"),
                    _text(session, "started_at"),
                    _nullable(_text(session, "ended_at")),
                    _text(session, "summary"),
                ),
            )
            sessions += max(cursor.rowcount, 0)
        db.commit()

        for obs in data.observations:
            obs_type = _text(obs, "type")
            title = _text(obs, "title")
            project = _text(obs, "project")
            if not obs_type or not title or not project:
                continue
            session_id = _text(obs, "session_id")
            if session_id:
                exists = db.execute(
                    "SELECT COUNT(*) FROM sessions WHERE id = ?", (session_id,)
                ).fetchone()[0]
                if not exists:
                    continue
            self.store.save_observation(
                obs_type=obs_type,
                title=title,
                content=_text(obs, "content"),
                project=project,
                scope=_text(obs, "scope"),
                topic_key=_text(obs, "topic_key"),
                session_id=session_id,
                sync_id=_text(obs, "sync_id"),
            )
            memories += 1

        for prompt in data.prompts:
            content = _text(prompt, "content")
            project = _text(prompt, "project")
            if not content or not project:
                continue
            cursor = db.execute(
                """INSERT OR IGNORE INTO user_prompts(session_id, content, project, created_at)
                   VALUES (?, ?, ?, ?)""",
                (
                    _nullable(_text(prompt, "session_id")),
                    content,
                    project,
                    _text(prompt, "created_at"),
                ),
            )
            prompts += max(cursor.rowcount, 0)
        db.commit()

        return sessions, memories, prompts

    def _mark_chunk(self, chunk_id: str, imported_at: str) -> None:
        db = self.store._connection
        try:
            db.execute(
                "INSERT OR IGNORE INTO sync_chunks(target_key, chunk_id, imported_at) VALUES (?, ?, ?)",
                (self.sync_dir, chunk_id, imported_at),
            )
            db.commit()
        except sqlite3.Error as exc:
            raise SyncError(f"cannot record chunk {chunk_id}: {exc}") from exc

    def _chunk_imported(self, chunk_id: str) -> bool:
        try:
            row = self.store._connection.execute(
                "SELECT COUNT(*) FROM sync_chunks WHERE target_key = ? AND chunk_id = ?",
                (self.sync_dir, chunk_id),
            ).fetchone()
        except sqlite3.Error as exc:
            raise SyncError(f"cannot check chunk {chunk_id}: {exc}") from exc
        return int(row[0]) > 0