import argparse
import asyncio
import json
import logging
import sys
from datetime import datetime

from ai_scheduler.config import settings
from ai_scheduler.sentry import flush as sentry_flush
from ai_scheduler.sentry import capture_exception, init_sentry, set_tag


def setup_logging() -> None:
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def _reference_now(value: str | None) -> datetime:
    if value:
        return datetime.fromisoformat(value)
    return datetime.now().replace(second=0, microsecond=0)


def parse_command(text: str, now_value: str | None = None) -> None:
    """Print the schedule extracted from TEXT as JSON."""
    from ai_scheduler.services.extractor import ScheduleExtractor

    now = _reference_now(now_value)
    result = ScheduleExtractor().extract(text, now)

    if result.schedule is None:
        message = result.failure.message if result.failure else "Could not parse"
        print(f"Error: {message}")
        sys.exit(1)

    print(json.dumps(result.schedule.to_dict(), indent=2))


def list_command(show_all: bool = False) -> None:
    from ai_scheduler.services.chat import format_task_line
    from ai_scheduler.services.store import get_task_store

    store = get_task_store()
    tasks = store.all() if show_all else store.upcoming(_reference_now(None))

    if not tasks:
        print("No tasks scheduled")
        return

    for task in tasks:
        status = "x" if task.done else " "
        who = f" (with {task.who.strip()})" if task.who.strip() else ""
        print(f"[{status}] {format_task_line(task)}{who}")


async def run_chat() -> None:
    """Interactive chat session with live reminders."""
    from ai_scheduler.services.chat import GREETING, ChatHandler
    from ai_scheduler.services.reminders import Reminder, ReminderScheduler
    from ai_scheduler.services.store import get_task_store

    def notify(reminder: Reminder) -> None:
        print(f"\n{reminder.title}\n  {reminder.body}")

    loop = asyncio.get_running_loop()
    store = get_task_store()
    reminders = ReminderScheduler(notify, loop=loop)
    reminders.schedule_all(store.all(), _reference_now(None))
    store.on_change(
        lambda event, task: reminders.handle_store_event(event, task, _reference_now(None))
    )
    handler = ChatHandler(store)

    print(GREETING)
    try:
        while True:
            try:
                line = await loop.run_in_executor(None, input, "> ")
            except EOFError:
                break
            text = line.strip()
            if not text:
                continue
            if text.lower() in ("quit", "exit"):
                break
            print(handler.handle(text, _reference_now(None)))
    finally:
        reminders.cancel_all()


def check_config() -> None:
    print("AI Scheduler Configuration Check\n")

    checks = [
        ("Task store", str(settings.store_path)),
        ("Default reminder (minutes)", settings.default_remind),
        ("Upcoming window (days)", str(settings.upcoming_window_days)),
        ("Log level", settings.log_level),
        ("Sentry DSN", "OK" if settings.has_sentry else "MISSING (error tracking disabled)"),
    ]

    for name, value in checks:
        print(f"  {name}: {value}")


def main() -> None:
    parser = argparse.ArgumentParser(description="Natural-language task scheduler")
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    parse_parser = subparsers.add_parser("parse", help="Extract a schedule from text")
    parse_parser.add_argument("text", help='e.g. "schedule standup tomorrow at 9am for 15m"')
    parse_parser.add_argument("--now", help="Reference instant (ISO 8601), defaults to now")

    subparsers.add_parser("chat", help="Start an interactive scheduling chat")

    list_parser = subparsers.add_parser("list", help="List scheduled tasks")
    list_parser.add_argument("--all", action="store_true", help="Include tasks beyond the window")

    subparsers.add_parser("check", help="Check configuration")

    args = parser.parse_args()

    setup_logging()

    # Disabled if no DSN configured
    init_sentry()
    if args.command:
        set_tag("command", args.command)

    try:
        if args.command == "parse":
            parse_command(args.text, args.now)
        elif args.command == "chat":
            asyncio.run(run_chat())
        elif args.command == "list":
            list_command(show_all=args.all)
        elif args.command == "check":
            check_config()
        else:
            parser.print_help()
    except Exception as e:
        capture_exception(e)
        raise
    finally:
        sentry_flush(timeout=2.0)


if __name__ == "__main__":
    main()
