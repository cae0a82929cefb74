"""Marker-delimited block patching for Markdown instruction files.

The region from :data:`WORKLOG_START_MARKER` through :data:`WORKLOG_END_MARKER`
is owned by Agent Work Log. Everything outside it is preserved verbatim.

The string functions here are pure; :func:`install_block` and
:func:`uninstall_block` wrap them with file I/O and report
:class:`InstallResult` records instead of raising.
"""

from __future__ import annotations

import logging
from enum import Enum
from pathlib import Path

from .base import InstallResult
from .content import WORKLOG_END_MARKER, WORKLOG_INSTRUCTIONS, WORKLOG_START_MARKER

logger = logging.getLogger(__name__)


class BlockState(str, Enum):
    ABSENT = "absent"
    COMPLETE = "complete"
    MALFORMED = "malformed"


class MalformedBlockError(ValueError):
    """Raised when a start marker is present without a matching end marker."""


def _span(content: str) -> tuple[int, int] | None:
    start = content.find(WORKLOG_START_MARKER)
    if start == -1:
        return None
    end = content.find(WORKLOG_END_MARKER, start)
    if end == -1:
        raise MalformedBlockError("start marker without end marker")
    return start, end + len(WORKLOG_END_MARKER)


def block_state(content: str) -> BlockState:
    try:
        span = _span(content)
    except MalformedBlockError:
        return BlockState.MALFORMED
    return BlockState.COMPLETE if span else BlockState.ABSENT


def apply_block(content: str | None, block: str = WORKLOG_INSTRUCTIONS) -> str:
    """Return ``content`` with ``block`` inserted or refreshed in place."""

    block = block.strip()
    if content is None or not content.strip():
        return f"{block}\n"

    span = _span(content)
    if span is not None:
        start, end = span
        return f"{content[:start]}{block}{content[end:]}"
    return f"{content.rstrip()}\n\n{block}\n"


def strip_block(content: str) -> str | None:
    """Return ``content`` without the block, or ``None`` if nothing else remains."""

    span = _span(content)
    if span is None:
        return content
    start, end = span
    # Only whitespace touching the block is trimmed.
    before = content[:start].rstrip()
    after = content[end:].lstrip("\n")
    if not after.strip():
        after = ""
    if not before and not after:
        return None
    if not after:
        return f"{before}\n"
    if not before:
        return after
    return f"{before}\n{after}"


def install_block(path: Path, label: str | None = None) -> InstallResult:
    """Create, refresh or append the instruction block in ``path``."""

    label = label or path.name
    existing: str | None = None
    if path.exists():
        existing = path.read_text(encoding="utf-8")
        state = block_state(existing)
        if state is BlockState.MALFORMED:
            logger.warning("Refusing to patch %s: missing end marker", path)
            return InstallResult(
                success=False,
                message=(
                    f"{label} contains an Agent Work Log section without end marker. "
                    f"Please add {WORKLOG_END_MARKER} marker."
                ),
            )
        path.write_text(apply_block(existing), encoding="utf-8")
        if state is BlockState.COMPLETE:
            return InstallResult(success=True, message=f"Updated Agent Work Log section in {path}")
        return InstallResult(success=True, message=f"Updated {path}")

    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(apply_block(None), encoding="utf-8")
    return InstallResult(success=True, message=f"Created {path}")


def uninstall_block(path: Path, label: str | None = None) -> InstallResult:
    """Remove the instruction block from ``path``, deleting the file if it empties."""

    label = label or path.name
    if not path.exists():
        return InstallResult(success=True, message=f"{label} not found (already removed)")

    content = path.read_text(encoding="utf-8")
    state = block_state(content)
    if state is BlockState.MALFORMED:
        logger.warning("Refusing to strip %s: missing end marker", path)
        return InstallResult(
            success=False,
            message=(
                f"{label} contains an Agent Work Log section without end marker. "
                "Cannot safely remove."
            ),
        )
    if state is BlockState.ABSENT:
        return InstallResult(
            success=True,
            message=f"Agent Work Log section not found in {label} (already removed)",
        )

    remainder = strip_block(content)
    if remainder is None:
        path.unlink()
        return InstallResult(success=True, message=f"Removed empty {path}")
    path.write_text(remainder, encoding="utf-8")
    return InstallResult(success=True, message=f"Removed Agent Work Log section from {path}")


__all__ = [
    "BlockState",
    "MalformedBlockError",
    "apply_block",
    "block_state",
    "install_block",
    "strip_block",
    "uninstall_block",
]
