"""Cursor harness: a single always-applied project rule file."""

from __future__ import annotations

from pathlib import Path

import yaml

from .base import Harness, InstallResult, Step
from .content import WORKLOG_INSTRUCTIONS

RULE_FILENAME = "worklog.mdc"
RULE_FRONT_MATTER = {
    "description": "Log completed work to agent-worklog database",
    "alwaysApply": True,
}


def render_rule() -> str:
    """Cursor rule text: YAML front-matter followed by the instruction block."""

    front_matter = yaml.safe_dump(RULE_FRONT_MATTER, sort_keys=False, default_flow_style=False)
    return f"---\n{front_matter}---\n\n{WORKLOG_INSTRUCTIONS}\n"


class CursorHarness(Harness):
    name = "cursor"
    display_name = "Cursor"

    def detect(self) -> bool:
        return self._path_exists(self.cwd / ".cursor")

    def get_config_dir(self, global_: bool) -> Path:
        return self.cwd / ".cursor" / "rules"

    def _rule_path(self) -> Path:
        return self.get_config_dir(False) / RULE_FILENAME

    def _install_steps(self, global_: bool) -> list[Step]:
        return [self._write_rule]

    def _uninstall_steps(self, global_: bool) -> list[Step]:
        return [self._remove_rule]

    def _write_rule(self) -> InstallResult:
        rule_path = self._rule_path()
        existed = rule_path.exists()
        rule_path.parent.mkdir(parents=True, exist_ok=True)
        rule_path.write_text(render_rule(), encoding="utf-8")
        return InstallResult(success=True, message=f"{'Updated' if existed else 'Created'} {rule_path}")

    def _remove_rule(self) -> InstallResult:
        rule_path = self._rule_path()
        if not rule_path.exists():
            return InstallResult(success=True, message="Cursor rule not found (already removed)")
        rule_path.unlink()
        return InstallResult(success=True, message=f"Removed {rule_path}")


__all__ = ["CursorHarness", "render_rule"]
