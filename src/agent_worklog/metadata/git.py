"""Best-effort git queries used to enrich work entries."""

from __future__ import annotations

import logging
import re
import shutil
import subprocess
from pathlib import Path
from typing import Protocol

from .utils import sanitize_environment

logger = logging.getLogger(__name__)

GIT_TIMEOUT_SECONDS = 5
_REPO_NAME_RE = re.compile(r"/([^/]+?)(\.git)?$")


class GitProtocol(Protocol):
    """Minimal git surface used by the metadata collector."""

    def remote_url(self, cwd: Path) -> str | None:
        ...

    def current_branch(self, cwd: Path) -> str | None:
        ...


def repo_name_from_url(url: str) -> str | None:
    """Extract ``repo`` from ``https://host/owner/repo.git`` or ``git@host:owner/repo.git``."""

    match = _REPO_NAME_RE.search(url.strip())
    return match.group(1) if match else None


class GitClient:
    """Run git subcommands, collapsing every failure to ``None``."""

    def __init__(self, executable: str | None = None) -> None:
        self._executable = executable or shutil.which("git")

    @property
    def available(self) -> bool:
        return self._executable is not None

    def _run(self, cwd: Path, *args: str) -> str | None:
        if self._executable is None:
            logger.debug("git executable not found on PATH")
            return None
        try:
            process = subprocess.run(
                [self._executable, *args],
                cwd=str(cwd),
                capture_output=True,
                text=True,
                timeout=GIT_TIMEOUT_SECONDS,
                check=True,
                env=sanitize_environment(),
            )
        except (OSError, subprocess.SubprocessError) as exc:
            logger.debug("git %s failed in %s: %s", " ".join(args), cwd, exc)
            return None
        output = process.stdout.strip()
        return output or None

    def remote_url(self, cwd: Path) -> str | None:
        return self._run(cwd, "config", "--get", "remote.origin.url")

    def current_branch(self, cwd: Path) -> str | None:
        return self._run(cwd, "rev-parse", "--abbrev-ref", "HEAD")


__all__ = ["GitClient", "GitProtocol", "repo_name_from_url"]
