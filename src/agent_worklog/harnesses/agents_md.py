"""Universal fallback: instruction block in the project's AGENTS.md."""

from __future__ import annotations

from pathlib import Path

from .base import Harness, Step
from .markers import install_block, uninstall_block


class AgentsMdHarness(Harness):
    name = "agents-md"
    display_name = "AGENTS.md (Universal)"

    def detect(self) -> bool:
        # Always usable; the registry never auto-detects it.
        return True

    def get_config_dir(self, global_: bool) -> Path:
        return self.cwd

    def _install_steps(self, global_: bool) -> list[Step]:
        return [lambda: install_block(self.cwd / "AGENTS.md", "AGENTS.md")]

    def _uninstall_steps(self, global_: bool) -> list[Step]:
        return [lambda: uninstall_block(self.cwd / "AGENTS.md", "AGENTS.md")]


__all__ = ["AgentsMdHarness"]
