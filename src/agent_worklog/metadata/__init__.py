"""Metadata collection for work entries."""

from .collector import TaskMetadata, collect_metadata
from .git import GitClient, repo_name_from_url

__all__ = ["GitClient", "TaskMetadata", "collect_metadata", "repo_name_from_url"]
