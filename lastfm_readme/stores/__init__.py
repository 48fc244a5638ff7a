"""Backends that hold the README being updated."""

from .base import DocumentStore, StoredDocument, StoreError, WriteConflictError
from .git import GitCommitter
from .github import GitHubDocumentStore
from .local import LocalDocumentStore

__all__ = [
    "DocumentStore",
    "GitCommitter",
    "GitHubDocumentStore",
    "LocalDocumentStore",
    "StoreError",
    "StoredDocument",
    "WriteConflictError",
]
