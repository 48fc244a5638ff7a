"""Document store contracts shared by the README backends."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Protocol


class StoreError(RuntimeError):
    """Raised when a README cannot be read from or written to its store."""


class WriteConflictError(StoreError):
    """Raised when the stored README changed after it was read."""


@dataclass(frozen=True)
class StoredDocument:
    """README content plus the version token needed to write it back."""

    content: str
    version: Optional[str]
    locator: str


class DocumentStore(Protocol):
    """Protocol implemented by README backends."""

    def read(self) -> StoredDocument:
        """Return the current README content and its version token."""

    def write(self, content: str, *, version: Optional[str], message: str) -> None:
        """Replace the README content if it is still at ``version``."""


__all__ = ["DocumentStore", "StoreError", "StoredDocument", "WriteConflictError"]
