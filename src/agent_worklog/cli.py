"""Command line interface: ``aw task|install|uninstall|summary|web|hooks``."""

from __future__ import annotations

import argparse
import json
import logging
import sys
import webbrowser
from pathlib import Path
from urllib.parse import urlencode

from pydantic import ValidationError

from . import __version__
from .config import WorklogSettings, get_settings
from .errors import InvalidInput, WorklogError
from .harnesses import HarnessRegistry, InstallReport, has_failures
from .hooks import remind_payload
from .metadata import collect_metadata
from .server import DEFAULT_HOST, WorklogServer
from .storage import EntryStore, NewWorkEntry, WorklogQueries, utc_timestamp
from .summary import AnthropicTextGenerator, SummaryOrchestrator, SummaryRequest, TextGenerator

logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    """Configure root logging. Logs go to stderr; stdout carries command output."""

    logging.basicConfig(
        level=getattr(logging, level, logging.WARNING),
        format="[%(asctime)s] [%(levelname)s] %(name)s: %(message)s",
        stream=sys.stderr,
    )


def build_store(settings: WorklogSettings) -> EntryStore:
    return EntryStore(settings.db_path)


def build_generator(settings: WorklogSettings) -> TextGenerator:
    return AnthropicTextGenerator(
        model=settings.summary_model, max_tokens=settings.summary_max_tokens
    )


def build_orchestrator(settings: WorklogSettings) -> SummaryOrchestrator:
    queries = WorklogQueries(build_store(settings))
    return SummaryOrchestrator(queries, build_generator(settings))


def build_registry() -> HarnessRegistry:
    return HarnessRegistry.default()


def error(message: str) -> None:
    print(f"Error: {message}", file=sys.stderr)


def cmd_task(args: argparse.Namespace, settings: WorklogSettings) -> int:
    description = args.description.strip()
    if not description:
        raise InvalidInput("Task description must not be empty")

    metadata = collect_metadata(Path.cwd())
    category = args.category.strip() if args.category else None
    build_store(settings).append(
        NewWorkEntry(
            timestamp=utc_timestamp(),
            description=description,
            working_directory=metadata.working_directory,
            session_id=metadata.session_id,
            category=category or None,
            project_name=metadata.project_name,
            git_branch=metadata.git_branch,
        )
    )
    category_info = f" [{category}]" if category else ""
    print(f"✓ Logged: {description}{category_info}")
    return 0


def print_report(report: InstallReport, registry: HarnessRegistry) -> None:
    for name, results in report.items():
        harness = registry.get(name)
        print(f"{harness.display_name if harness else name}:")
        for result in results:
            if result.skipped:
                marker = "-"
            else:
                marker = "✓" if result.success else "✗"
            print(f"  {marker} {result.message}")


def _run_harnesses(args: argparse.Namespace, action: str) -> int:
    registry = build_registry()
    scope = "globally" if args.global_ else "locally"
    verb = "Installing" if action == "install" else "Uninstalling"
    print(f"{verb} Agent Work Log {scope}...\n")

    if action == "install":
        report = registry.install_auto(args.global_, args.harness)
    else:
        report = registry.uninstall_auto(args.global_, args.harness)

    if not report:
        print("Nothing to do.")
        return 0
    print_report(report, registry)
    if has_failures(report):
        print("\nCompleted with errors.")
        return 1
    print("\n✓ Done.")
    return 0


def cmd_install(args: argparse.Namespace, settings: WorklogSettings) -> int:
    return _run_harnesses(args, "install")


def cmd_uninstall(args: argparse.Namespace, settings: WorklogSettings) -> int:
    return _run_harnesses(args, "uninstall")


def cmd_summary(args: argparse.Namespace, settings: WorklogSettings) -> int:
    try:
        if args.days <= 0:
            raise InvalidInput("--days must be a positive integer")
        request = SummaryRequest(
            days_back=args.days, category=args.category, project_name=args.project
        )
        result = build_orchestrator(settings).summarize(request)
    except WorklogError as exc:
        if not args.json:
            raise
        print(json.dumps({"error": str(exc)}))
        return 1

    if args.json:
        print(json.dumps(result.to_dict(), indent=2))
        return 0

    print(result.summary)
    print()
    noun = "entry" if result.entry_count == 1 else "entries"
    print(f"({result.entry_count} {noun} from the last {result.days_back} days)")
    return 0


def viewer_url(base_url: str, port: int, token: str) -> str:
    separator = "&" if "?" in base_url else "?"
    return f"{base_url}{separator}{urlencode({'port': port, 'token': token})}"


def cmd_web(args: argparse.Namespace, settings: WorklogSettings) -> int:
    port = args.port if args.port is not None else settings.web_port
    if not 0 <= port <= 65535:
        raise InvalidInput("--port must be between 0 and 65535")

    server = WorklogServer(
        queries=WorklogQueries(build_store(settings)),
        orchestrator=build_orchestrator(settings),
        host=DEFAULT_HOST,
        port=port,
    )
    try:
        server.start()
    except (OSError, TimeoutError) as exc:
        raise WorklogError(f"Could not start local API: {exc}") from exc

    url = viewer_url(args.host or settings.webapp_url, server.port, server.token)
    print(f"Local API: http://{DEFAULT_HOST}:{server.port}")
    print(f"Open: {url}")
    print("Press Ctrl+C to stop.")
    if not args.no_browser:
        webbrowser.open(url)

    server.wait()
    return 0


def cmd_hooks_remind(args: argparse.Namespace, settings: WorklogSettings) -> int:
    print(json.dumps(remind_payload()))
    return 0


class WorklogArgumentParser(argparse.ArgumentParser):
    """Report usage errors as a single ``Error:`` line with exit status 1."""

    def error(self, message: str) -> None:  # type: ignore[override]
        self.print_usage(sys.stderr)
        self.exit(1, f"Error: {message}\n")


def build_parser() -> argparse.ArgumentParser:
    parser = WorklogArgumentParser(prog="aw", description="Agent Work Log - Track your work activities")
    parser.add_argument("--version", action="version", version=__version__)
    sub = parser.add_subparsers(dest="cmd")

    p_task = sub.add_parser("task", help="Log a completed task")
    p_task.add_argument("description", help="Description of the task")
    p_task.add_argument(
        "-c",
        "--category",
        help="Category, e.g. feature, bugfix, refactor, docs, config, test, perf, infra, security, research",
    )
    p_task.set_defaults(func=cmd_task)

    for name, func, help_text in (
        ("install", cmd_install, "Install worklog instructions into detected coding tools"),
        ("uninstall", cmd_uninstall, "Remove worklog instructions from detected coding tools"),
    ):
        p_harness = sub.add_parser(name, help=help_text)
        p_harness.add_argument(
            "-g",
            "--global",
            dest="global_",
            action="store_true",
            help="Use the tool's user-wide configuration instead of the current project",
        )
        p_harness.add_argument("--harness", help="Target one harness by name")
        p_harness.set_defaults(func=func)

    p_summary = sub.add_parser("summary", help="Summarize recent work")
    p_summary.add_argument("-d", "--days", type=int, default=7, help="Days to look back (default: 7)")
    p_summary.add_argument("-c", "--category", help="Only include this category")
    p_summary.add_argument("-p", "--project", help="Only include this project")
    p_summary.add_argument("--json", action="store_true", help="Output JSON")
    p_summary.set_defaults(func=cmd_summary)

    p_web = sub.add_parser("web", help="Serve the work log to the web viewer")
    p_web.add_argument("--port", type=int, default=None, help="Local API port (default: 24377)")
    p_web.add_argument("--host", default=None, help="Web viewer base URL")
    p_web.add_argument("--no-browser", action="store_true", help="Do not open a browser")
    p_web.set_defaults(func=cmd_web)

    p_hooks = sub.add_parser("hooks", help="Hook handlers for coding tools")
    hooks_sub = p_hooks.add_subparsers(dest="hook", metavar="HOOK", required=True)
    p_remind = hooks_sub.add_parser("remind", help="Print the prompt-submit reminder payload")
    p_remind.set_defaults(func=cmd_hooks_remind)

    return parser


def main(argv: list[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    if not hasattr(args, "func"):
        parser.print_help()
        return

    try:
        settings = get_settings()
    except ValidationError as exc:
        error(f"Invalid configuration: {exc.errors()[0].get('msg', exc)}")
        raise SystemExit(1)
    configure_logging(settings.log_level)

    try:
        exit_code = args.func(args, settings)
    except WorklogError as exc:
        error(str(exc))
        raise SystemExit(1)
    if exit_code:
        raise SystemExit(exit_code)


if __name__ == "__main__":
    main()
