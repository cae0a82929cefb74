"""Harness contract shared by every supported coding tool."""

from __future__ import annotations

import logging
import shutil
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import Callable

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class InstallResult:
    """Outcome of one install or uninstall sub-action."""

    success: bool
    message: str
    skipped: bool = False


Step = Callable[[], "InstallResult | list[InstallResult]"]


class Harness(ABC):
    """A coding tool whose configuration can carry Agent Work Log instructions.

    ``install`` and ``uninstall`` never raise: each sub-action is run through
    :meth:`_run_steps`, which converts failures into ``InstallResult`` records
    and carries on with the remaining steps.
    """

    name: str = ""
    display_name: str = ""
    supports_hooks: bool = False
    supports_skills: bool = False
    supports_global: bool = False
    session_env_var: str | None = None

    def __init__(
        self,
        *,
        home: Path | None = None,
        cwd: Path | None = None,
        which: Callable[[str], str | None] | None = None,
    ) -> None:
        self._home = Path(home) if home is not None else None
        self._cwd = Path(cwd) if cwd is not None else None
        self._which = which or shutil.which

    @property
    def home(self) -> Path:
        return self._home or Path.home()

    @property
    def cwd(self) -> Path:
        return self._cwd or Path.cwd()

    def get_session_env_var(self) -> str | None:
        return self.session_env_var

    @abstractmethod
    def detect(self) -> bool:
        ...

    @abstractmethod
    def get_config_dir(self, global_: bool) -> Path:
        ...

    @abstractmethod
    def _install_steps(self, global_: bool) -> list[Step]:
        ...

    @abstractmethod
    def _uninstall_steps(self, global_: bool) -> list[Step]:
        ...

    def install(self, global_: bool) -> list[InstallResult]:
        return self._run_steps("install", self._install_steps(global_))

    def uninstall(self, global_: bool) -> list[InstallResult]:
        return self._run_steps("uninstall", self._uninstall_steps(global_))

    def _run_steps(self, action: str, steps: list[Step]) -> list[InstallResult]:
        results: list[InstallResult] = []
        for step in steps:
            try:
                outcome = step()
            except Exception as exc:
                logger.debug("%s %s step failed", self.name, action, exc_info=True)
                results.append(InstallResult(success=False, message=f"{self.display_name}: {exc}"))
                continue
            if isinstance(outcome, InstallResult):
                results.append(outcome)
            else:
                results.extend(outcome)
        return results

    def _path_exists(self, path: Path) -> bool:
        try:
            return path.exists()
        except OSError:
            return False

    def _on_path(self, executable: str) -> bool:
        try:
            return self._which(executable) is not None
        except OSError:
            return False

    def __repr__(self) -> str:  # pragma: no cover - debugging aid
        return f"{type(self).__name__}(name={self.name!r})"


__all__ = ["Harness", "InstallResult", "Step"]
