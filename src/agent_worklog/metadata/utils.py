"""Utility helpers for version-control shell-outs."""

from __future__ import annotations

import os
from typing import Mapping

_SANITIZED_VARS = {
    "GIT_DIR",
    "GIT_WORK_TREE",
    "GIT_INDEX_FILE",
    "PYTHONHOME",
    "PYTHONPATH",
    "VIRTUAL_ENV",
}


def sanitize_environment(additional: Mapping[str, str] | None = None) -> dict[str, str]:
    """Return a sanitized environment so git resolves the repository from ``cwd``."""

    env = dict(os.environ)
    for key in _SANITIZED_VARS:
        env.pop(key, None)
    env["GIT_TERMINAL_PROMPT"] = "0"
    if additional:
        env.update(additional)
    return env
