"""
Internal notes are an append-only log stored in a single text column
"""
from datetime import datetime, timezone
from typing import Optional


def append_note(existing: Optional[str], note: str, now: Optional[datetime] = None) -> str:
    """Append `[<ISO timestamp>] <note>` on a new line"""
    timestamp = (now or datetime.now(timezone.utc)).isoformat()
    entry = f"[{timestamp}] {note}"
    return f"{existing}\n{entry}" if existing else entry
