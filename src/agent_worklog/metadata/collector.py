"""Collect contextual metadata for a work entry at logging time."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Mapping

from ..harnesses import get_session_id
from .git import GitClient, GitProtocol, repo_name_from_url


@dataclass(slots=True)
class TaskMetadata:
    working_directory: str
    project_name: str
    session_id: str | None = None
    git_branch: str | None = None
    category: str | None = None


def project_name_for(cwd: Path, git: GitProtocol) -> str:
    """Name of the origin repository, or the directory name when there is none."""

    remote = git.remote_url(cwd)
    if remote:
        name = repo_name_from_url(remote)
        if name:
            return name
    return cwd.name or str(cwd)


def collect_metadata(
    cwd: Path | str,
    *,
    environ: Mapping[str, str] | None = None,
    git: GitProtocol | None = None,
) -> TaskMetadata:
    """Derive session, project, branch and directory for ``cwd``.

    Never raises: git failures fall back to the directory name and a null branch.
    """

    cwd = Path(cwd)
    git = git or GitClient()
    return TaskMetadata(
        working_directory=str(cwd),
        project_name=project_name_for(cwd, git),
        session_id=get_session_id(environ),
        git_branch=git.current_branch(cwd),
    )


__all__ = ["TaskMetadata", "collect_metadata", "project_name_for"]
