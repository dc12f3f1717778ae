"""Command-line interface for loago."""

from __future__ import annotations

import argparse
import logging
import sys

from pydantic import ValidationError

from . import __version__
from .config import LoagoSettings, get_settings
from .storage import DataDirNotFoundError, JsonRepo, default_path, ensure_exists
from .tasks import ParseError, TaskStore, now, render_days, render_full

logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    """Configure root logging for the CLI."""

    logging.basicConfig(
        level=getattr(logging, level, logging.WARNING),
        format="[%(asctime)s] [%(levelname)s] %(name)s: %(message)s",
        stream=sys.stderr,
    )


def task_name(value: str) -> str:
    if not value:
        raise argparse.ArgumentTypeError("task names must not be empty")
    return value


def open_repo(settings: LoagoSettings) -> JsonRepo:
    """Resolve the data file, creating it on first run."""

    path = default_path(settings)
    if ensure_exists(path):
        logger.info("Created new data file at %s", path)
    return JsonRepo(path)


def load_store(repo: JsonRepo) -> TaskStore:
    return TaskStore.from_persistable(repo.load())


def cmd_do(args: argparse.Namespace, settings: LoagoSettings) -> int:
    repo = open_repo(settings)
    store = load_store(repo)
    store.touch_many(args.tasks)
    repo.save(store.to_persistable())
    return 0


def cmd_remove(args: argparse.Namespace, settings: LoagoSettings) -> int:
    repo = open_repo(settings)
    store = load_store(repo)
    missing = [name for name in args.tasks if name not in store]
    if missing:
        logger.warning("Not tracked, nothing to remove: %s", ", ".join(missing))
    store.remove_many(args.tasks)
    repo.save(store.to_persistable())
    return 0


def cmd_view(args: argparse.Namespace, settings: LoagoSettings) -> int:
    store = load_store(open_repo(settings))
    if args.tasks:
        missing = [name for name in args.tasks if name not in store]
        if missing:
            logger.warning("Not tracked: %s", ", ".join(missing))
        store.retain_only(args.tasks)

    moment = now()
    report_format = args.format or settings.report_format
    if report_format == "full":
        report = render_full(store, moment)
    else:
        report = render_days(store, moment, suffix=settings.days_suffix)
    sys.stdout.write(report.to_text())
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="loago", description="Track how long ago you last did things."
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    sub = parser.add_subparsers(dest="cmd")

    p_do = sub.add_parser("do", aliases=["add", "new"], help="Mark tasks as done right now")
    p_do.add_argument("tasks", nargs="+", type=task_name, metavar="TASK")
    p_do.set_defaults(func=cmd_do)

    p_view = sub.add_parser(
        "view", aliases=["list", "look"], help="Show how long ago tasks were done"
    )
    p_view.add_argument(
        "tasks", nargs="*", type=task_name, metavar="TASK", help="Only show these tasks"
    )
    p_view.add_argument(
        "--format",
        choices=("days", "full"),
        default=None,
        help="Elapsed time as whole days or days/hours/minutes (default: days)",
    )
    p_view.set_defaults(func=cmd_view)

    p_remove = sub.add_parser("remove", aliases=["delete"], help="Stop tracking tasks")
    p_remove.add_argument("tasks", nargs="+", type=task_name, metavar="TASK")
    p_remove.set_defaults(func=cmd_remove)

    return parser


def run(args: argparse.Namespace, settings: LoagoSettings) -> int:
    """Run the selected command, mapping failures to a message and exit code."""

    try:
        return args.func(args, settings)
    except (DataDirNotFoundError, ParseError) as exc:
        print(f"loago: {exc}", file=sys.stderr)
    except OSError as exc:
        target = f": {exc.filename}" if exc.filename else ""
        print(f"loago: {exc.strerror or exc}{target}", file=sys.stderr)
    return 1


def main(argv: list[str] | None = None, settings: LoagoSettings | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    if not hasattr(args, "func"):
        parser.print_help()
        return

    if settings is None:
        try:
            settings = get_settings()
        except ValidationError as exc:
            problems = "; ".join(error["msg"] for error in exc.errors())
            print(f"loago: invalid configuration: {problems}", file=sys.stderr)
            raise SystemExit(1)
    configure_logging(settings.log_level)

    exit_code = run(args, settings)
    if exit_code:
        raise SystemExit(exit_code)


if __name__ == "__main__":
    main()
