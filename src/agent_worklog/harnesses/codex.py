"""OpenAI Codex harness: instruction block in AGENTS.md."""

from __future__ import annotations

from pathlib import Path

from .base import Harness, Step
from .markers import install_block, uninstall_block


class CodexHarness(Harness):
    name = "codex"
    display_name = "OpenAI Codex"
    supports_global = True

    def detect(self) -> bool:
        return self._path_exists(self.home / ".codex") or self._on_path("codex")

    def get_config_dir(self, global_: bool) -> Path:
        if global_:
            return self.home / ".codex"
        return self.cwd

    def _agents_md(self, global_: bool) -> Path:
        return self.get_config_dir(global_) / "AGENTS.md"

    def _install_steps(self, global_: bool) -> list[Step]:
        return [lambda: install_block(self._agents_md(global_), "AGENTS.md")]

    def _uninstall_steps(self, global_: bool) -> list[Step]:
        return [lambda: uninstall_block(self._agents_md(global_), "AGENTS.md")]


__all__ = ["CodexHarness"]
