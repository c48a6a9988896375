"""Shared file helper for the JSON-backed repositories.

Each repository owns one ``JsonFile``. Its lock serializes every
read-modify-write cycle on that file within the process, which is what
makes the repositories' conditional updates atomic. Writes go to a
temporary file that is then renamed over the original, so a crash
mid-write never leaves a truncated file behind.
"""

from __future__ import annotations

import asyncio
import json
import os
from pathlib import Path
from typing import Any


class JsonFile:

    def __init__(self, file_path: Path) -> None:
        self._file_path = file_path
        self.lock = asyncio.Lock()
        self._ensure_file()

    async def load(self) -> list[dict[str, Any]]:
        return await asyncio.to_thread(self._read)

    async def persist(self, records: list[dict[str, Any]]) -> None:
        await asyncio.to_thread(self._write, records)

    # --- File helpers ---------------------------------------------------------

    def _read(self) -> list[dict[str, Any]]:
        return json.loads(self._file_path.read_text(encoding="utf-8"))

    def _write(self, records: list[dict[str, Any]]) -> None:
        tmp_path = self._file_path.with_suffix(self._file_path.suffix + ".tmp")
        tmp_path.write_text(json.dumps(records, indent=2) + "\n", encoding="utf-8")
        os.replace(tmp_path, self._file_path)

    def _ensure_file(self) -> None:
        if not self._file_path.exists():
            self._file_path.parent.mkdir(parents=True, exist_ok=True)
            self._file_path.write_text("[]", encoding="utf-8")
