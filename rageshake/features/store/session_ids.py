"""Session identifiers that sort by creation time."""

import secrets
import time
from typing import Optional, Tuple

SESSION_PREFIX = "instance-"


def new_session_id(now_ms: Optional[int] = None) -> str:
    """Generate an id for a new running instance.

    Keys look like ``instance-1484827160051-9f86d081``: zero-padded epoch
    milliseconds followed by a random suffix, so two instances started in
    the same millisecond still get their own namespace.
    """
    if now_ms is None:
        now_ms = int(time.time() * 1000)
    return f"{SESSION_PREFIX}{now_ms:013d}-{secrets.token_hex(4)}"


def session_sort_key(session_id: str) -> Tuple[int, str]:
    """Sort key ordering session ids by creation time.

    Ids without a parseable timestamp sort before every timestamped id.
    """
    timestamp = -1
    if session_id.startswith(SESSION_PREFIX):
        head = session_id[len(SESSION_PREFIX):].split("-", 1)[0]
        if head.isdigit():
            timestamp = int(head)
    return (timestamp, session_id)
