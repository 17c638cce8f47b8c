#!/usr/bin/env python3
"""
Log store housekeeping script.

Inspects and maintains the captured log database configured through
RAGESHAKE_DATABASE_URL, and can submit its contents as a bug report.

Usage:
    python scripts/manage_logs.py list
    python scripts/manage_logs.py show instance-1484827160051-9f86d081
    python scripts/manage_logs.py prune [budget_bytes]
    python scripts/manage_logs.py send "What went wrong"
"""

import asyncio
import sys
from pathlib import Path

from sqlalchemy.engine import make_url

from rageshake import Rageshake, StoreUnavailableError, SubmissionError
from rageshake.core import get_global_settings
from rageshake.features.retention import RetentionManager
from rageshake.features.store import SQLAlchemyLogStore, new_session_id


async def open_store() -> SQLAlchemyLogStore:
    """
    Open the configured log store under a throwaway session id.

    A missing SQLite file is reported instead of created, so inspecting an
    empty setup leaves nothing behind.

    :returns: Opened store
    :raises SystemExit: If the database is missing or cannot be opened
    """
    database_url = get_global_settings().database_url
    database = make_url(database_url).database
    if database and database != ":memory:" and not Path(database).exists():
        print(f"Error: No log database at {database}")
        sys.exit(1)

    store = SQLAlchemyLogStore(new_session_id(), database_url)
    try:
        await store.open()
    except StoreUnavailableError as e:
        print(f"Error: {e}")
        sys.exit(1)
    return store


async def list_sessions() -> None:
    """Print every session, newest first, with its size."""
    store = await open_store()
    try:
        session_ids = await store.list_session_ids()
        if not session_ids:
            print("No stored sessions")
            return

        total = 0
        for session_id in session_ids:
            size = len(await store.read_session(session_id))
            total += size
            print(f"{session_id}  {size:>12,} bytes")
        print(f"\n{len(session_ids)} sessions, {total:,} bytes")
    finally:
        await store.close()


async def show_session(session_id: str) -> None:
    """
    Print the full log text of one session.

    :param session_id: Session to print
    """
    store = await open_store()
    try:
        lines = await store.read_session(session_id)
        if not lines:
            print(f"Error: No logs stored for '{session_id}'")
            sys.exit(1)
        sys.stdout.write(lines)
    finally:
        await store.close()


async def prune_sessions(budget_bytes: int) -> None:
    """
    Delete the oldest sessions beyond the budget.

    :param budget_bytes: Total size of log text to keep
    """
    store = await open_store()
    try:
        removed = await RetentionManager(store).prune(budget_bytes)
        if removed:
            print(f"Removed {len(removed)} sessions:")
            for session_id in removed:
                print(f"  {session_id}")
        else:
            print("Nothing to remove")
    finally:
        await store.close()


async def send_report(user_text: str) -> None:
    """
    Send every stored session as a bug report, then clear them.

    :param user_text: Description of the problem
    """
    settings = get_global_settings()
    if not settings.bug_report_endpoint:
        print("Error: RAGESHAKE_BUG_REPORT_ENDPOINT is not set")
        sys.exit(1)

    rageshake = Rageshake(settings=settings)
    await rageshake.init()
    try:
        report = await rageshake.send_report(user_text)
        print(f"✅ Bug report sent with {len(report.logs)} sessions")
    except SubmissionError as e:
        print(f"Error: Failed to send bug report: {e}")
        sys.exit(1)
    finally:
        await rageshake.shutdown()


def print_usage() -> None:
    """Print usage information."""
    print("Usage:")
    print("  python scripts/manage_logs.py list               - List stored sessions")
    print("  python scripts/manage_logs.py show <session_id>  - Print a session's logs")
    print("  python scripts/manage_logs.py prune [budget]     - Delete logs over budget")
    print("  python scripts/manage_logs.py send <text>        - Send a bug report")


async def main() -> None:
    """
    Main entry point.

    :raises SystemExit: If invalid command provided
    """
    if len(sys.argv) < 2:
        print("Error: Missing command\n")
        print_usage()
        sys.exit(1)

    command = sys.argv[1].lower()
    args = sys.argv[2:]

    try:
        if command == "list":
            await list_sessions()
        elif command == "show" and args:
            await show_session(args[0])
        elif command == "prune":
            budget = get_global_settings().max_log_size_bytes
            if args:
                if not args[0].isdigit():
                    print(f"Error: Invalid budget '{args[0]}'")
                    sys.exit(1)
                budget = int(args[0])
            await prune_sessions(budget)
        elif command == "send":
            await send_report(" ".join(args))
        else:
            print(f"Error: Unknown command '{command}'\n")
            print_usage()
            sys.exit(1)
    except KeyboardInterrupt:
        print("\n\nOperation cancelled by user")
        sys.exit(1)


if __name__ == "__main__":
    asyncio.run(main())
