"""Claude Code harness: skill file, settings.json permission and hook, CLAUDE.md block."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from .base import Harness, InstallResult, Step
from .content import PERMISSION_RULE, PROMPT_HOOK_EVENT, REMIND_COMMAND, SKILL_CONTENT
from .markers import install_block, uninstall_block

logger = logging.getLogger(__name__)


def _is_remind_entry(entry: Any) -> bool:
    if not isinstance(entry, dict):
        return False
    hooks = entry.get("hooks")
    if not isinstance(hooks, list):
        return False
    return any(
        isinstance(hook, dict) and REMIND_COMMAND in str(hook.get("command", ""))
        for hook in hooks
    )


def add_worklog_settings(settings: dict[str, Any]) -> tuple[list[InstallResult], bool]:
    """Add the aw permission and prompt hook to ``settings`` in place."""

    results: list[InstallResult] = []
    modified = False

    allow = settings.setdefault("permissions", {}).setdefault("allow", [])
    if PERMISSION_RULE not in allow:
        allow.append(PERMISSION_RULE)
        modified = True
        results.append(InstallResult(success=True, message="Added aw command permission"))
    else:
        results.append(InstallResult(success=True, message="aw command permission already exists"))

    prompt_hooks = settings.setdefault("hooks", {}).setdefault(PROMPT_HOOK_EVENT, [])
    if not any(_is_remind_entry(entry) for entry in prompt_hooks):
        prompt_hooks.append({"hooks": [{"type": "command", "command": REMIND_COMMAND}]})
        modified = True
        results.append(InstallResult(success=True, message=f"Added {PROMPT_HOOK_EVENT} hook"))
    else:
        results.append(
            InstallResult(success=True, message=f"{PROMPT_HOOK_EVENT} hook already exists")
        )

    return results, modified


def remove_worklog_settings(settings: dict[str, Any]) -> tuple[list[InstallResult], bool]:
    """Remove only what :func:`add_worklog_settings` added, pruning emptied containers."""

    results: list[InstallResult] = []
    modified = False

    permissions = settings.get("permissions")
    allow = permissions.get("allow") if isinstance(permissions, dict) else None
    if isinstance(allow, list) and PERMISSION_RULE in allow:
        permissions["allow"] = [rule for rule in allow if rule != PERMISSION_RULE]
        modified = True
        results.append(InstallResult(success=True, message="Removed aw command permission"))
    else:
        results.append(
            InstallResult(success=True, message="aw command permission not found (already removed)")
        )

    hooks = settings.get("hooks")
    prompt_hooks = hooks.get(PROMPT_HOOK_EVENT) if isinstance(hooks, dict) else None
    if isinstance(prompt_hooks, list):
        remaining = [entry for entry in prompt_hooks if not _is_remind_entry(entry)]
        if len(remaining) < len(prompt_hooks):
            modified = True
            results.append(InstallResult(success=True, message=f"Removed {PROMPT_HOOK_EVENT} hook"))
        else:
            results.append(
                InstallResult(
                    success=True,
                    message=f"{PROMPT_HOOK_EVENT} hook not found (already removed)",
                )
            )
        if remaining:
            hooks[PROMPT_HOOK_EVENT] = remaining
        else:
            hooks.pop(PROMPT_HOOK_EVENT)
        if not hooks:
            settings.pop("hooks")
    else:
        results.append(
            InstallResult(
                success=True, message=f"{PROMPT_HOOK_EVENT} hook not found (already removed)"
            )
        )

    if isinstance(permissions, dict):
        if permissions.get("allow") == []:
            permissions.pop("allow")
        if not permissions:
            settings.pop("permissions")

    return results, modified


class ClaudeHarness(Harness):
    name = "claude"
    display_name = "Claude Code"
    supports_hooks = True
    supports_skills = True
    supports_global = True
    session_env_var = "CLAUDE_SESSION_ID"

    def detect(self) -> bool:
        return self._path_exists(self.home / ".claude") or self._on_path("claude")

    def get_config_dir(self, global_: bool) -> Path:
        if global_:
            return self.home / ".claude"
        return self.cwd / ".claude"

    def _skill_dir(self, config_dir: Path) -> Path:
        return config_dir / "skills" / "worklog"

    def _load_settings(self, path: Path) -> dict[str, Any]:
        if not path.exists():
            return {}
        raw = path.read_text(encoding="utf-8")
        if not raw.strip():
            return {}
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as exc:
            logger.warning("Cannot parse %s: %s", path, exc)
            raise ValueError(f"Cannot parse {path}: {exc}") from exc
        if not isinstance(data, dict):
            raise ValueError(f"Expected a JSON object in {path}")
        return data

    def _write_settings(self, path: Path, settings: dict[str, Any]) -> None:
        path.write_text(json.dumps(settings, indent=2) + "\n", encoding="utf-8")

    # install

    def _install_steps(self, global_: bool) -> list[Step]:
        config_dir = self.get_config_dir(global_)
        return [
            lambda: self._install_skill(config_dir),
            lambda: self._install_settings(config_dir),
            lambda: install_block(config_dir / "CLAUDE.md", "CLAUDE.md"),
        ]

    def _install_skill(self, config_dir: Path) -> InstallResult:
        skill_dir = self._skill_dir(config_dir)
        skill_dir.mkdir(parents=True, exist_ok=True)
        skill_path = skill_dir / "SKILL.md"
        skill_path.write_text(SKILL_CONTENT, encoding="utf-8")
        return InstallResult(success=True, message=f"Installed skill to {skill_path}")

    def _install_settings(self, config_dir: Path) -> list[InstallResult]:
        settings_path = config_dir / "settings.json"
        settings = self._load_settings(settings_path)
        results, modified = add_worklog_settings(settings)
        if modified:
            config_dir.mkdir(parents=True, exist_ok=True)
            self._write_settings(settings_path, settings)
            results.append(InstallResult(success=True, message=f"Updated {settings_path}"))
        return results

    # uninstall

    def _uninstall_steps(self, global_: bool) -> list[Step]:
        config_dir = self.get_config_dir(global_)
        if not config_dir.exists():
            return [
                lambda: InstallResult(
                    success=True,
                    message=f"Claude directory not found at {config_dir}. Nothing to uninstall.",
                )
            ]
        return [
            lambda: self._remove_skill(config_dir),
            lambda: self._remove_settings(config_dir),
            lambda: uninstall_block(config_dir / "CLAUDE.md", "CLAUDE.md"),
        ]

    def _remove_skill(self, config_dir: Path) -> list[InstallResult]:
        skill_dir = self._skill_dir(config_dir)
        skill_path = skill_dir / "SKILL.md"
        if not skill_path.exists():
            return [InstallResult(success=True, message="Skill file not found (already removed)")]

        results = [InstallResult(success=True, message=f"Removed skill file {skill_path}")]
        skill_path.unlink()
        for directory in (skill_dir, skill_dir.parent):
            if directory.exists() and not any(directory.iterdir()):
                directory.rmdir()
                results.append(
                    InstallResult(success=True, message=f"Removed empty directory {directory}")
                )
        return results

    def _remove_settings(self, config_dir: Path) -> list[InstallResult]:
        settings_path = config_dir / "settings.json"
        if not settings_path.exists():
            return [
                InstallResult(success=True, message="Settings file not found (already removed)")
            ]
        settings = self._load_settings(settings_path)
        results, modified = remove_worklog_settings(settings)
        if modified:
            self._write_settings(settings_path, settings)
            results.append(InstallResult(success=True, message=f"Updated {settings_path}"))
        return results


__all__ = ["ClaudeHarness", "add_worklog_settings", "remove_worklog_settings"]
