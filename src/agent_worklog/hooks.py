"""Payloads printed for host-tool hook mechanisms."""

from __future__ import annotations

from typing import Any

from .harnesses.content import PROMPT_HOOK_EVENT, REMINDER_TEXT


def remind_payload() -> dict[str, Any]:
    """Context injected on every prompt submission reminding the agent to log work."""

    return {
        "hookSpecificOutput": {
            "hookEventName": PROMPT_HOOK_EVENT,
            "additionalContext": REMINDER_TEXT,
        }
    }


__all__ = ["remind_payload"]
