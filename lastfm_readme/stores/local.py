"""README store backed by a file on the local filesystem."""

from __future__ import annotations

import hashlib
import subprocess
from pathlib import Path
from typing import Optional

from ..logging import get_logger
from .base import StoredDocument, StoreError, WriteConflictError
from .git import GitCommitter


class LocalDocumentStore:
    """Reads and writes a README file, optionally committing it with git."""

    def __init__(self, path: Path | str, *, committer: GitCommitter | None = None) -> None:
        self.path = Path(path).expanduser().resolve()
        self.committer = committer
        self.logger = get_logger("stores.local")

    def read(self) -> StoredDocument:
        content = self._read_text()
        return StoredDocument(content=content, version=_digest(content), locator=str(self.path))

    def write(self, content: str, *, version: Optional[str], message: str) -> None:
        if version is not None and self.path.exists():
            current = _digest(self._read_text())
            if current != version:
                raise WriteConflictError(f"{self.path} changed on disk since it was read")

        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            # newline="" keeps the document's own line endings untouched.
            with self.path.open("w", encoding="utf-8", newline="") as handle:
                handle.write(content)
        except OSError as exc:
            raise StoreError(f"Failed to write {self.path}: {exc}") from exc
        self.logger.info("README written to %s", self.path)

        if self.committer is None:
            return
        repo_root = _find_repo_root(self.path)
        if repo_root is None:
            self.logger.debug("No git repository found above %s; skipping commit", self.path)
            return
        try:
            committed = self.committer.commit(repo_root, [self.path], message=message)
        except (OSError, subprocess.CalledProcessError) as exc:
            raise StoreError(f"Failed to commit {self.path}: {exc}") from exc
        if committed:
            self.logger.info("Committed README update: %s", message)

    def _read_text(self) -> str:
        try:
            with self.path.open("r", encoding="utf-8", newline="") as handle:
                return handle.read()
        except FileNotFoundError as exc:
            raise StoreError(f"README file not found: {self.path}") from exc
        except OSError as exc:
            raise StoreError(f"Failed to read {self.path}: {exc}") from exc


def _digest(content: str) -> str:
    return hashlib.sha256(content.encode("utf-8")).hexdigest()


def _find_repo_root(path: Path) -> Optional[Path]:
    for candidate in path.parents:
        if (candidate / ".git").exists():
            return candidate
    return None


__all__ = ["LocalDocumentStore"]
