"""
Read-only display refresh loop.

Frames are cosmetic: each one re-reads the session and never writes to it,
so a slow or skipped frame cannot affect the measured time.
"""

import asyncio
from typing import Any, AsyncGenerator, Dict, Optional

from .session_state import SessionState


async def refresh_snapshots(
    state: SessionState,
    interval: float,
    until_stopped: bool = False,
    limit: Optional[int] = None,
) -> AsyncGenerator[Dict[str, Any], None]:
    """
    Yield session snapshots every `interval` seconds.

    Args:
        state: Session to read from
        interval: Seconds between frames
        until_stopped: Finish after the first frame taken with the timer stopped
        limit: Maximum number of frames (None for unbounded)
    """
    frames = 0
    while limit is None or frames < limit:
        snapshot = state.snapshot()
        yield snapshot
        frames += 1
        if until_stopped and not snapshot["is_running"]:
            return
        await asyncio.sleep(interval)
