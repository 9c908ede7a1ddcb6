"""JSON file persistence shared by the settings and history stores."""

from __future__ import annotations

import json
import os
import tempfile
from pathlib import Path
from typing import Any


def config_dir() -> Path:
    """Directory holding settings, query history and the log file.

    ``SQLSH_CONFIG_DIR`` overrides the default ``~/.sqlsh``.
    """
    override = os.environ.get("SQLSH_CONFIG_DIR", "").strip()
    if override:
        return Path(override).expanduser()
    return Path.home() / ".sqlsh"


class JSONFileStore:
    """A JSON document kept in a single file.

    A missing or unreadable file reads as None. Writes replace the file in one
    rename, so readers never observe a half-written document, and the result
    is readable by the owner only.
    """

    def __init__(self, file_path: Path):
        self._file_path = Path(file_path)

    @property
    def file_path(self) -> Path:
        return self._file_path

    def exists(self) -> bool:
        return self._file_path.exists()

    def _read_json(self) -> Any:
        try:
            text = self._file_path.read_text(encoding="utf-8")
        except (FileNotFoundError, UnicodeDecodeError):
            return None
        try:
            return json.loads(text)
        except json.JSONDecodeError:
            return None

    def _write_json(self, data: Any) -> None:
        directory = self._file_path.parent
        directory.mkdir(mode=0o700, parents=True, exist_ok=True)
        # NamedTemporaryFile creates the file 0600
        with tempfile.NamedTemporaryFile(
            "w",
            encoding="utf-8",
            dir=directory,
            prefix=f".{self._file_path.name}.",
            suffix=".tmp",
            delete=False,
        ) as tmp:
            json.dump(data, tmp, indent=2)
            tmp_path = Path(tmp.name)
        try:
            tmp_path.replace(self._file_path)
        except OSError:
            tmp_path.unlink(missing_ok=True)
            raise
