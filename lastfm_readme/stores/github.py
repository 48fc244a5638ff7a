"""README store backed by the GitHub repository contents API."""

from __future__ import annotations

import base64
import binascii
import json
from typing import Any, Dict, Optional
from urllib.error import HTTPError, URLError
from urllib.parse import quote
from urllib.request import Request, urlopen

from ..logging import get_logger
from .base import StoredDocument, StoreError, WriteConflictError


class GitHubDocumentStore:
    """Reads a repository's README and commits updates through the REST API."""

    DEFAULT_API_URL = "https://api.github.com"
    COMMITTER = {"name": "lastfm-readme-bot", "email": "lastfm-readme@proton.me"}
    CONFLICT_STATUSES = (409, 422)

    def __init__(
        self,
        repository: str,
        token: str,
        *,
        api_url: str | None = None,
        request_timeout: Optional[float] = 30.0,
    ) -> None:
        owner, _, repo = repository.partition("/")
        if not owner or not repo or "/" in repo:
            raise StoreError(f"Repository must be given as 'owner/repo', got {repository!r}")
        if not token:
            raise StoreError("A GitHub token is required to update the README.")
        self.owner = owner
        self.repo = repo
        self.token = token
        self.api_url = (api_url or self.DEFAULT_API_URL).rstrip("/")
        self.request_timeout = request_timeout
        self.logger = get_logger("stores.github")
        self._path = "README.md"

    @property
    def repository(self) -> str:
        return f"{self.owner}/{self.repo}"

    def read(self) -> StoredDocument:
        self.logger.debug("Fetching README from %s", self.repository)
        payload = self._request("GET", f"/repos/{self.owner}/{self.repo}/readme")
        encoded = payload.get("content")
        if not isinstance(encoded, str):
            raise StoreError(f"README for {self.repository} has no content")
        try:
            content = base64.b64decode(encoded).decode("utf-8")
        except (binascii.Error, UnicodeDecodeError) as exc:
            raise StoreError(f"README for {self.repository} could not be decoded") from exc

        path = payload.get("path")
        if isinstance(path, str) and path:
            self._path = path
        sha = payload.get("sha")
        return StoredDocument(
            content=content,
            version=sha if isinstance(sha, str) else None,
            locator=f"{self.repository}:{self._path}",
        )

    def write(self, content: str, *, version: Optional[str], message: str) -> None:
        if not version:
            raise StoreError("The README blob sha is required to update it on GitHub.")
        body = {
            "message": message,
            "content": base64.b64encode(content.encode("utf-8")).decode("ascii"),
            "sha": version,
            "committer": dict(self.COMMITTER),
        }
        self._request(
            "PUT",
            f"/repos/{self.owner}/{self.repo}/contents/{quote(self._path)}",
            body=body,
        )
        self.logger.info("README updated in %s", self.repository)

    def _request(self, method: str, path: str, *, body: Dict[str, Any] | None = None) -> Dict[str, Any]:
        headers = {
            "Accept": "application/vnd.github+json",
            "Authorization": f"Bearer {self.token}",
            "User-Agent": "lastfm-readme",
            "X-GitHub-Api-Version": "2022-11-28",
        }
        data = None
        if body is not None:
            data = json.dumps(body).encode("utf-8")
            headers["Content-Type"] = "application/json"

        request = Request(f"{self.api_url}{path}", data=data, headers=headers, method=method)
        timeout = self.request_timeout or 30.0
        try:
            with urlopen(request, timeout=timeout) as response:  # type: ignore[arg-type]
                raw = response.read()
        except HTTPError as exc:
            detail = exc.read().decode("utf-8", errors="ignore") if hasattr(exc, "read") else ""
            message = detail.strip() or exc.reason
            if method != "GET" and exc.code in self.CONFLICT_STATUSES:
                raise WriteConflictError(
                    f"README in {self.repository} changed since it was read ({exc.code}): {message}"
                ) from exc
            raise StoreError(f"GitHub {method} {path} failed with status {exc.code}: {message}") from exc
        except URLError as exc:
            raise StoreError(f"GitHub {method} {path} failed: {exc.reason}") from exc

        if not raw:
            return {}
        try:
            payload = json.loads(raw.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as exc:
            raise StoreError(f"GitHub {method} {path} returned invalid JSON") from exc
        return payload if isinstance(payload, dict) else {}


__all__ = ["GitHubDocumentStore"]
