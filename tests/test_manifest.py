import json

import pytest

from kronos.manifest import (
    ChunkEntry,
    Manifest,
    load_manifest,
    manifest_path,
    save_manifest,
)


def _entry(chunk_id: str) -> ChunkEntry:
    return ChunkEntry(
        id=chunk_id,
        created_by="test",
        created_at="2024-01-01T00:00:00Z",
        sessions=1,
        memories=2,
        prompts=3,
    )


def test_manifest_path_layout(tmp_path):
    assert manifest_path(tmp_path) == tmp_path / ".kronos" / "manifest.json"


def test_load_missing_returns_empty(tmp_path):
    manifest = load_manifest(tmp_path)
    assert manifest.version == 1
    assert manifest.chunks == []


def test_has_chunk():
    manifest = Manifest(chunks=[_entry("aaaa"), _entry("bbbb")])
    assert manifest.has_chunk("aaaa") is True
    assert manifest.has_chunk("bbbb") is True
    assert manifest.has_chunk("cccc") is False


def test_save_and_load_round_trip(tmp_path):
    manifest = Manifest(version=1, chunks=[_entry("aaaa"), _entry("bbbb")])
    save_manifest(tmp_path, manifest)
    assert load_manifest(tmp_path) == manifest


def test_saved_file_format(tmp_path):
    path = save_manifest(tmp_path, Manifest(chunks=[_entry("aaaa")]))
    text = path.read_text(encoding="utf-8")
    assert text.endswith("\n")
    document = json.loads(text)
    assert list(document) == ["version", "chunks"]
    assert list(document["chunks"][0]) == [
        "id",
        "created_by",
        "created_at",
        "sessions",
        "memories",
        "prompts",
    ]


def test_version_zero_becomes_one(tmp_path):
    path = manifest_path(tmp_path)
    path.parent.mkdir(parents=True)
    path.write_text('{"version": 0, "chunks": null}', encoding="utf-8")
    manifest = load_manifest(tmp_path)
    assert manifest.version == 1
    assert manifest.chunks == []


def test_missing_fields_default(tmp_path):
    path = manifest_path(tmp_path)
    path.parent.mkdir(parents=True)
    path.write_text('{"chunks": [{"id": "abcd"}]}', encoding="utf-8")
    manifest = load_manifest(tmp_path)
    assert manifest.chunks == [ChunkEntry(id="abcd")]


def test_invalid_json_raises(tmp_path):
    path = manifest_path(tmp_path)
    path.parent.mkdir(parents=True)
    path.write_text("{broken", encoding="utf-8")
    with pytest.raises(ValueError):
        load_manifest(tmp_path)


def test_append_preserves_order(tmp_path):
    save_manifest(tmp_path, Manifest(chunks=[_entry("first")]))
    manifest = load_manifest(tmp_path)
    manifest.chunks.append(_entry("second"))
    save_manifest(tmp_path, manifest)
    assert [e.id for e in load_manifest(tmp_path).chunks] == ["first", "second"]