"""Harness registry: detect coding tools and install or remove worklog instructions."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Callable, Iterable, Mapping

from ..config import SESSION_FALLBACK_ENV_VAR
from .agents_md import AgentsMdHarness
from .base import Harness, InstallResult
from .claude import ClaudeHarness
from .codex import CodexHarness
from .content import WORKLOG_END_MARKER, WORKLOG_INSTRUCTIONS, WORKLOG_START_MARKER
from .cursor import CursorHarness

logger = logging.getLogger(__name__)

HARNESS_TYPES: tuple[type[Harness], ...] = (
    ClaudeHarness,
    CursorHarness,
    CodexHarness,
    AgentsMdHarness,
)
FALLBACK_HARNESS = AgentsMdHarness.name

InstallReport = dict[str, list[InstallResult]]


class HarnessRegistry:
    """The fixed set of supported harnesses, in detection order."""

    def __init__(self, harnesses: Iterable[Harness]) -> None:
        self._harnesses = list(harnesses)

    @classmethod
    def default(
        cls,
        *,
        home: Path | None = None,
        cwd: Path | None = None,
        which: Callable[[str], str | None] | None = None,
    ) -> "HarnessRegistry":
        return cls(harness_type(home=home, cwd=cwd, which=which) for harness_type in HARNESS_TYPES)

    def all(self) -> list[Harness]:
        return list(self._harnesses)

    def names(self) -> list[str]:
        return [harness.name for harness in self._harnesses]

    def get(self, name: str) -> Harness | None:
        for harness in self._harnesses:
            if harness.name == name:
                return harness
        return None

    @property
    def fallback(self) -> Harness:
        harness = self.get(FALLBACK_HARNESS)
        if harness is None:  # pragma: no cover - registry always carries it
            raise LookupError("fallback harness is not registered")
        return harness

    def detect_all(self) -> list[Harness]:
        """Harnesses that appear to be in use. The fallback is never detected."""

        detected = [
            harness
            for harness in self._harnesses
            if harness.name != FALLBACK_HARNESS and harness.detect()
        ]
        logger.debug("Detected harnesses: %s", [harness.name for harness in detected])
        return detected

    def _run(self, action: str, global_: bool, name: str | None) -> InstallReport:
        results: InstallReport = {}
        scope = "global" if global_ else "local"

        if name:
            harness = self.get(name)
            if harness is None:
                results[name] = [InstallResult(success=False, message=f"Unknown harness: {name}")]
                return results
            if global_ and not harness.supports_global:
                results[harness.name] = [
                    InstallResult(
                        success=False,
                        message=f"{harness.display_name} does not support global installation",
                    )
                ]
                return results
            results[harness.name] = getattr(harness, action)(global_)
            return results

        detected = self.detect_all()
        if not detected:
            fallback = self.fallback
            logger.info("No harness detected; using %s (%s)", fallback.name, scope)
            results[fallback.name] = getattr(fallback, action)(global_)
            return results

        for harness in detected:
            if global_ and not harness.supports_global:
                if action == "install":
                    results[harness.name] = [
                        InstallResult(
                            success=True,
                            skipped=True,
                            message=(
                                f"Skipped {harness.display_name} "
                                "(does not support global installation)"
                            ),
                        )
                    ]
                continue
            logger.info("Running %s for %s (%s)", action, harness.name, scope)
            results[harness.name] = getattr(harness, action)(global_)
        return results

    def install_auto(self, global_: bool, name: str | None = None) -> InstallReport:
        return self._run("install", global_, name)

    def uninstall_auto(self, global_: bool, name: str | None = None) -> InstallReport:
        return self._run("uninstall", global_, name)


def has_failures(report: InstallReport) -> bool:
    return any(not result.success for results in report.values() for result in results)


def session_env_vars() -> list[str]:
    """Session variables in priority order: tool-specific first, generic fallback last."""

    names = [
        harness_type.session_env_var
        for harness_type in HARNESS_TYPES
        if harness_type.session_env_var
    ]
    return [*names, SESSION_FALLBACK_ENV_VAR]


def get_session_id(environ: Mapping[str, str] | None = None) -> str | None:
    environ = os.environ if environ is None else environ
    for variable in session_env_vars():
        value = environ.get(variable)
        if value:
            return value
    return None


__all__ = [
    "AgentsMdHarness",
    "ClaudeHarness",
    "CodexHarness",
    "CursorHarness",
    "FALLBACK_HARNESS",
    "HARNESS_TYPES",
    "Harness",
    "HarnessRegistry",
    "InstallReport",
    "InstallResult",
    "WORKLOG_END_MARKER",
    "WORKLOG_INSTRUCTIONS",
    "WORKLOG_START_MARKER",
    "get_session_id",
    "has_failures",
    "session_env_vars",
]
