from __future__ import annotations

import json
from pathlib import Path
from typing import Iterable, List, Mapping, Protocol, Union

from models.records import FlatRow
from settings import get_settings

Rows = Union[Mapping[str, object], Iterable[Mapping[str, object]]]


class RowSink(Protocol):
    def write(self, rows: Rows) -> int: ...


def _as_rows(rows: Rows) -> List[Mapping[str, object]]:
    if isinstance(rows, Mapping):
        return [rows]
    return list(rows)


class JsonLineSink:
    """Append-only JSON-lines file, one flattened row per line."""

    def __init__(self, path: Path) -> None:
        self.path = path

    def reset(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text("", encoding="utf-8")

    def write(self, rows: Rows) -> int:
        batch = _as_rows(rows)
        if not batch:
            return 0
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with self.path.open("a", encoding="utf-8") as handle:
            for row in batch:
                handle.write(json.dumps(row, separators=(",", ":")) + "\n")
        return len(batch)

    def read(self) -> List[FlatRow]:
        if not self.path.exists():
            return []
        with self.path.open("r", encoding="utf-8") as handle:
            return [json.loads(line) for line in handle if line.strip()]


class MemoryRowSink:
    """Keeps written rows in a list; useful for analysis and tests."""

    def __init__(self) -> None:
        self.rows: List[FlatRow] = []

    def write(self, rows: Rows) -> int:
        batch = [dict(row) for row in _as_rows(rows)]
        self.rows.extend(batch)
        return len(batch)


def build_log_sink(file_name: str) -> JsonLineSink:
    """Sink for ``file_name`` under the configured log directory."""
    name = Path(file_name).name
    if not name:
        raise ValueError("A log file name is required.")
    return JsonLineSink(Path(get_settings().log_dir) / name)
