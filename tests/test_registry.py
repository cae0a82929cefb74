from __future__ import annotations

from pathlib import Path

import pytest

from agent_worklog.harnesses import (
    FALLBACK_HARNESS,
    HarnessRegistry,
    InstallResult,
    WORKLOG_START_MARKER,
    get_session_id,
    has_failures,
    session_env_vars,
)


@pytest.fixture
def paths(tmp_path: Path) -> tuple[Path, Path]:
    home = tmp_path / "home"
    project = tmp_path / "project"
    home.mkdir()
    project.mkdir()
    return home, project


def _registry(home: Path, project: Path, on_path: tuple[str, ...] = ()) -> HarnessRegistry:
    return HarnessRegistry.default(
        home=home,
        cwd=project,
        which=lambda name: f"/usr/bin/{name}" if name in on_path else None,
    )


def test_registry_order_and_lookup(paths) -> None:
    registry = _registry(*paths)

    assert registry.names() == ["claude", "cursor", "codex", "agents-md"]
    assert registry.get("cursor").display_name == "Cursor"
    assert registry.get("vscode") is None
    assert registry.fallback.name == FALLBACK_HARNESS


def test_detect_all_never_includes_fallback(paths) -> None:
    home, project = paths
    assert _registry(home, project).detect_all() == []

    (project / ".cursor").mkdir()
    detected = _registry(home, project, on_path=("codex",)).detect_all()

    assert [harness.name for harness in detected] == ["cursor", "codex"]


def test_install_falls_back_to_agents_md_when_nothing_detected(paths) -> None:
    home, project = paths

    report = _registry(home, project).install_auto(False)

    assert list(report) == ["agents-md"]
    assert not has_failures(report)
    assert WORKLOG_START_MARKER in (project / "AGENTS.md").read_text(encoding="utf-8")


def test_install_runs_every_detected_harness(paths) -> None:
    home, project = paths
    (home / ".claude").mkdir()
    (project / ".cursor").mkdir()

    report = _registry(home, project).install_auto(False)

    assert list(report) == ["claude", "cursor"]
    assert (project / ".claude" / "CLAUDE.md").exists()
    assert (project / ".cursor" / "rules" / "worklog.mdc").exists()
    assert not (project / "AGENTS.md").exists()


def test_global_install_skips_local_only_harnesses(paths) -> None:
    home, project = paths
    (home / ".claude").mkdir()
    (project / ".cursor").mkdir()

    report = _registry(home, project).install_auto(True)

    cursor_results = report["cursor"]
    assert len(cursor_results) == 1
    assert cursor_results[0].success and cursor_results[0].skipped
    assert "does not support global installation" in cursor_results[0].message
    assert not (project / ".cursor" / "rules").exists()
    assert (home / ".claude" / "CLAUDE.md").exists()
    assert not has_failures(report)


def test_global_uninstall_leaves_local_only_harnesses_out(paths) -> None:
    home, project = paths
    (home / ".claude").mkdir()
    (project / ".cursor").mkdir()

    report = _registry(home, project).uninstall_auto(True)

    assert list(report) == ["claude"]


def test_explicit_harness_bypasses_detection(paths) -> None:
    home, project = paths

    report = _registry(home, project).install_auto(False, "codex")

    assert list(report) == ["codex"]
    assert (project / "AGENTS.md").exists()


def test_unknown_harness_is_a_failure(paths) -> None:
    report = _registry(*paths).install_auto(False, "vscode")

    assert report == {"vscode": [InstallResult(success=False, message="Unknown harness: vscode")]}
    assert has_failures(report)


def test_explicit_global_on_local_only_harness_is_a_failure(paths) -> None:
    report = _registry(*paths).uninstall_auto(True, "cursor")

    assert has_failures(report)
    assert report["cursor"][0].message == "Cursor does not support global installation"


def test_install_then_uninstall_round_trip(paths) -> None:
    home, project = paths
    (project / ".cursor").mkdir()
    registry = _registry(home, project, on_path=("claude",))

    registry.install_auto(False)
    report = registry.uninstall_auto(False)

    assert not has_failures(report)
    assert not (project / ".cursor" / "rules" / "worklog.mdc").exists()
    assert not (project / ".claude" / "CLAUDE.md").exists()


def test_session_env_vars_end_with_generic_fallback() -> None:
    assert session_env_vars() == ["CLAUDE_SESSION_ID", "AW_SESSION_ID"]
    assert get_session_id({"AW_SESSION_ID": "generic"}) == "generic"
    assert get_session_id({}) is None
