"""A JSON document on disk holding a list of records."""

from __future__ import annotations

import json
import os
from dataclasses import dataclass
from pathlib import Path


class JsonFile:

    def __init__(self, file_path: Path) -> None:
        self._file_path = file_path
        self._ensure_file()

    @property
    def path(self) -> Path:
        return self._file_path

    def load(self) -> list[dict]:
        return json.loads(self._file_path.read_text(encoding="utf-8"))

    def persist(self, records: list[dict]) -> None:
        self.publish(self.write_pending(records))

    def write_pending(self, records: list[dict]) -> Path:
        """Write ``records`` next to the file without replacing it yet."""
        tmp_path = self._file_path.with_suffix(self._file_path.suffix + ".tmp")
        tmp_path.write_text(json.dumps(records, indent=2) + "\n", encoding="utf-8")
        return tmp_path

    def publish(self, tmp_path: Path) -> None:
        # Readers never observe a half-written file.
        os.replace(tmp_path, self._file_path)

    def _ensure_file(self) -> None:
        if not self._file_path.exists():
            self._file_path.parent.mkdir(parents=True, exist_ok=True)
            self._file_path.write_text("[]", encoding="utf-8")


@dataclass
class StagedRecords:
    """A working copy of a JSON file, kept with the contents it was loaded from."""

    file: JsonFile
    original: list[dict]
    records: list[dict]

    @classmethod
    def load(cls, json_file: JsonFile) -> StagedRecords:
        return cls(file=json_file, original=json_file.load(), records=json_file.load())
