# kronos

Persistent memory for AI agents. The memory is kept in a local SQLite
database. It is shared through a git repository as immutable, compressed
chunks.

## How sync works

- `Syncer.export(created_by, project)` collects sessions, observations and
  prompts created since the last exported chunk. An empty `project` selects
  all projects. It writes them as one gzip-compressed JSON chunk under
  `<sync_dir>/.kronos/chunks/<id>.jsonl.gz`. The chunk id is the first 16 hex
  characters of the SHA-256 of the compressed bytes. When there is nothing
  new, the result has `is_empty=True` and no file is written.
- Each export adds one entry to `<sync_dir>/.kronos/manifest.json`. Entries
  are only ever appended, so when several people export in parallel, git
  merges the file without conflicts.
- `Syncer.import_chunks()` applies every chunk in the manifest that this
  database has not yet recorded for the same sync directory. Sessions and
  prompts are inserted with "insert or ignore". Observations whose sync id is
  already known are left alone. Running an import a second time imports
  nothing and reports the chunks as `skipped`. When the manifest holds more
  than 500 chunks, only the newest 500 are kept and the manifest is rewritten.
- Failures while loading the manifest, reading a chunk or writing to the
  database raise `kronos.sync.SyncError`.

## Usage

```python
from kronos.sync import MemoryStore, Syncer

with MemoryStore("memory.db") as store:
    store.save_observation(
        obs_type="decision",
        title="use postgres",
        content="What: postgres\nWhy: scalability",
        project="my-project",
        scope="project",
        topic_key="db-backend-decision",
    )
    result = Syncer(store, "path/to/repo").export("alice", "")
    if not result.is_empty:
        print("exported chunk", result.chunk_id)

with MemoryStore("other.db") as other:
    imported = Syncer(other, "path/to/repo").import_chunks()
    print(imported.memories, "memories imported,", imported.skipped, "chunks skipped")
    for obs in other.search("postgres", limit=5):
        print(obs.id, obs.title, obs.topic_key)
```

`MemoryStore` creates its tables on open. It provides these methods:

- `save_observation` revises an existing observation in place when one with
  the same project, scope and topic key already exists.
- `count_observations(project)` counts live observations, for one project or
  for all of them when `project` is empty.
- `search(query, limit)` returns observations whose title, content or topic
  key contains every word of the query, newest first.

Chunks and the manifest can also be read and written directly:

- `kronos.chunk`: `ChunkData`, `marshal_chunk`, `write_chunk`, `read_chunk`, `chunk_path`
- `kronos.manifest`: `Manifest`, `ChunkEntry`, `load_manifest`, `save_manifest`, `manifest_path`

## Terminal helpers

`kronos.tui` holds building blocks for a terminal browser of the memory:

- `kronos.tui.styles` provides:
  - the Rosé Pine colour constants and the `STYLE_*` styles;
  - the immutable `Style`, whose `render` emits ANSI colours, padding, width
    alignment and box borders;
  - `obs_type_color`.
- `kronos.tui.format` provides:
  - `truncate`;
  - `format_age`, which returns `ahora`, `5m`, `3h` or `2d`;
  - `visible_lines` and `scroll_window`;
  - `mask_api_key`;
  - `status_icon` for a `CheckStatus`.
- `kronos.tui.navigation` provides:
  - the `Screen` enum;
  - the dashboard menu, through `dashboard_menu()` and `menu_item_for_key`;
  - `CursorList`, a cursor that stays within a list's bounds.

## What this package does not do

- It has no interactive terminal application and no command to start one.
- It does not lay out or draw the screens themselves.
- It has no health checks and no checks of LLM providers or of an Ollama
  server.
- It has no configuration file handling.
- It does not export notes to another tool.

Only the sync engine and the helpers listed above are provided.

## Tests

```
pip install -e ".[test]"
pytest
```