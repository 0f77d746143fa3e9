"""Batch incoming points into plain text chunks."""

from __future__ import annotations

import queue
import threading
import time
from collections.abc import Callable

from carbonstore.points import Points, _format_line

_POLL_INTERVAL = 0.05


def glue(
    exit_event: threading.Event,
    incoming: "queue.Queue[Points | None]",
    chunk_size: int,
    chunk_timeout: float,
    callback: Callable[[bytes], None],
) -> None:
    """Collect points from a queue into text chunks of at most chunk_size bytes.

    A chunk is handed to callback when the next line would not fit, every
    chunk_timeout seconds, and when None arrives on the queue, which ends the
    loop. Setting exit_event ends the loop without flushing.
    """
    if chunk_timeout <= 0:
        raise ValueError("non-positive chunk timeout")

    buffer = bytearray()

    def flush() -> None:
        nonlocal buffer
        if buffer:
            callback(bytes(buffer))
            buffer = bytearray()

    next_tick = time.monotonic() + chunk_timeout
    while not exit_event.is_set():
        now = time.monotonic()
        if now >= next_tick:
            flush()
            while next_tick <= now:
                next_tick += chunk_timeout
            continue

        try:
            item = incoming.get(timeout=min(next_tick - now, _POLL_INTERVAL))
        except queue.Empty:
            continue

        if item is None:
            flush()
            return

        for point in item.data:
            line = _format_line(item.metric, point).encode("utf-8")
            if len(buffer) + len(line) > chunk_size:
                flush()
            buffer += line