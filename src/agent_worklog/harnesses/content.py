"""Instruction text installed into coding-tool configuration files."""

from __future__ import annotations

WORKLOG_START_MARKER = "# Agent Work Log"
WORKLOG_END_MARKER = "<!-- End Agent Work Log -->"

PERMISSION_RULE = "Bash(aw:*)"
REMIND_COMMAND = "aw hooks remind"
PROMPT_HOOK_EVENT = "UserPromptSubmit"

WORKLOG_INSTRUCTIONS = """# Agent Work Log

Log completed work with `aw task "description" --category <category>`

## What to Log

Log meaningful completions: features, bug fixes, refactors, config changes, tests, docs, research findings.

**Don't log**: file reading, trivial edits, planning, incomplete work.

## Categories

feature | bugfix | refactor | docs | config | test | perf | infra | security | research

## Examples

```bash
aw task "Implemented JWT authentication with refresh tokens" --category feature
aw task "Fixed race condition in database connection pooling" --category bugfix
aw task "Refactored API routes to use middleware pattern" --category refactor
```

<!-- End Agent Work Log -->"""

SKILL_CONTENT = """---
name: worklog
description: Log completed work (features, fixes, refactors, research) to the local agent work log with the aw CLI.
---

# Agent Work Log

Log completed work activities to a local database for tracking and summaries.

## When to Use

Run `aw task` when you complete:

- **Feature implementations**: new functionality, components, or capabilities
- **Bug fixes**: resolved issues or defects
- **Refactoring**: significant code reorganization or architectural changes
- **Configuration changes**: infrastructure, deployment, or build setup
- **Performance improvements**: optimizations that change system behavior
- **Documentation**: meaningful additions to docs, READMEs, or guides
- **Research findings**: conclusions from investigating code, APIs, or approaches

## When NOT to Log

- Reading files or exploring code without conclusions
- Failed attempts or incomplete work
- Trivial changes (typos, formatting, single-line edits)
- Planning without an actionable outcome

## Usage

```bash
aw task "description of completed work" --category <category>
```

Set `CLAUDE_SESSION_ID` (or `AW_SESSION_ID`) to correlate entries from one session.

## Categories

- **feature** - new functionality or capabilities
- **bugfix** - fixed defects or issues
- **refactor** - code restructuring without behavior change
- **docs** - documentation updates
- **config** - build, deployment, or infrastructure setup
- **test** - test additions or improvements
- **perf** - performance optimizations
- **infra** - infrastructure or tooling changes
- **security** - security improvements or fixes
- **research** - investigation findings or technical analysis

Other labels are accepted and stored as given.

## Examples

```bash
aw task "Implemented JWT authentication with refresh tokens" --category feature
aw task "Fixed memory leak in WebSocket connection handler" --category bugfix
aw task "Optimized search query performance with an index on timestamp" --category perf
aw task "Investigated WebSocket reconnection patterns for real-time sync" --category research
```

Avoid vague ("Made some changes"), unfinished ("Started working on auth") or
trivial ("Fixed typo") entries. One completed task per entry.

## Storage

Entries live in `~/.aw/worklog.db` (override with `AW_CONFIG_DIR`). Project name,
git branch and working directory are detected automatically.
"""

REMINDER_TEXT = (
    "Agent Work Log: when you finish a meaningful unit of work in this turn, record it with "
    '`aw task "<what was completed>" --category <category>`.'
)


__all__ = [
    "PERMISSION_RULE",
    "PROMPT_HOOK_EVENT",
    "REMINDER_TEXT",
    "REMIND_COMMAND",
    "SKILL_CONTENT",
    "WORKLOG_END_MARKER",
    "WORKLOG_INSTRUCTIONS",
    "WORKLOG_START_MARKER",
]
