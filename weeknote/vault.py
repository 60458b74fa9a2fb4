"""Storage collaborator: a named-file store holding the weekly reports.

Paths are vault-relative and use ``/`` separators.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Protocol

from weeknote.fileio import read_text, write_text_atomic

logger = logging.getLogger(__name__)


class Vault(Protocol):
    def read(self, path: str) -> str: ...

    def write(self, path: str, text: str) -> None: ...

    def exists(self, path: str) -> bool: ...

    def ensure_folder(self, path: str) -> None: ...

    def create(self, path: str, text: str) -> None: ...


class FileVault:
    """Vault backed by a directory on the local filesystem."""

    def __init__(self, root: Path):
        self.root = Path(root)

    def _resolve(self, path: str) -> Path:
        parts = [p for p in path.split("/") if p]
        return self.root.joinpath(*parts)

    def read(self, path: str) -> str:
        return read_text(self._resolve(path))

    def write(self, path: str, text: str) -> None:
        write_text_atomic(self._resolve(path), text)

    def exists(self, path: str) -> bool:
        return self._resolve(path).is_file()

    def ensure_folder(self, path: str) -> None:
        if path:
            self._resolve(path).mkdir(parents=True, exist_ok=True)

    def create(self, path: str, text: str) -> None:
        target = self._resolve(path)
        if target.exists():
            raise FileExistsError(path)
        logger.debug("creating %s", path)
        write_text_atomic(target, text)
