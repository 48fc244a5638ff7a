"""Commit README updates in a local git work tree."""

from __future__ import annotations

import os
import subprocess
from pathlib import Path
from typing import Callable, Iterable, Sequence


class GitCommitter:
    """Stages files and records a commit when they changed."""

    AUTHOR_NAME = "lastfm-readme-bot"
    AUTHOR_EMAIL = "lastfm-readme@proton.me"

    def __init__(self, runner: Callable[..., str] | None = None) -> None:
        self._runner = runner or self._default_runner

    def commit(
        self,
        repo_path: Path | str,
        files: Sequence[Path | str],
        *,
        message: str,
    ) -> bool:
        """Stage the provided files and create a commit if changes exist."""
        repo = Path(repo_path)
        if not (repo / ".git").exists():
            return False

        relative_files = [self._to_relative(repo, Path(file)) for file in files]
        for rel in relative_files:
            self._run(["git", "add", rel], cwd=repo)

        status = self._run(
            ["git", "status", "--porcelain", "--", *relative_files],
            cwd=repo,
            capture_output=True,
        )
        if not status.strip():
            return False

        env = os.environ.copy()
        env.setdefault("GIT_AUTHOR_NAME", self.AUTHOR_NAME)
        env.setdefault("GIT_AUTHOR_EMAIL", self.AUTHOR_EMAIL)
        env.setdefault("GIT_COMMITTER_NAME", env["GIT_AUTHOR_NAME"])
        env.setdefault("GIT_COMMITTER_EMAIL", env["GIT_AUTHOR_EMAIL"])

        self._run(["git", "commit", "-m", message, "--", *relative_files], cwd=repo, env=env)
        return True

    # ------------------------------------------------------------------
    # Helpers

    @staticmethod
    def _to_relative(repo: Path, file_path: Path) -> str:
        try:
            return file_path.relative_to(repo).as_posix()
        except ValueError:
            return file_path.as_posix()

    def _run(
        self,
        args: Iterable[str],
        *,
        cwd: Path,
        env: dict[str, str] | None = None,
        capture_output: bool = False,
    ) -> str:
        return self._runner(args, cwd=cwd, env=env, capture_output=capture_output)

    @staticmethod
    def _default_runner(
        args: Iterable[str],
        *,
        cwd: Path,
        env: dict[str, str] | None = None,
        capture_output: bool = False,
    ) -> str:
        completed = subprocess.run(
            list(args),
            cwd=str(cwd),
            env=env,
            check=True,
            text=True,
            capture_output=capture_output,
        )
        if capture_output:
            return completed.stdout
        return ""


__all__ = ["GitCommitter"]
