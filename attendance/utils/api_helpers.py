"""API helper functions for routes."""

import json
import logging
from typing import Any, AsyncIterator, Awaitable, Callable, Optional

from fastapi import Request
from fastapi.responses import StreamingResponse
from redis.exceptions import RedisError

from attendance.core.summary import SubjectRecord
from attendance.services.subject_store import SnapshotStream

logger = logging.getLogger(__name__)

# Headers keeping proxies from buffering or caching the event stream
SSE_HEADERS = {"Cache-Control": "no-cache", "X-Accel-Buffering": "no"}


def format_sse(data: Any, event: Optional[str] = None) -> str:
    """Format one Server-Sent Events message.

    Args:
        data: Payload; non-string values are JSON encoded.
        event: Optional event name.

    Returns:
        Message terminated by a blank line.
    """
    if not isinstance(data, str):
        data = json.dumps(data)
    lines = [f"event: {event}"] if event else []
    lines.extend(f"data: {line}" for line in data.splitlines() or [""])
    return "\n".join(lines) + "\n\n"


def snapshot_event_stream(
    request: Request,
    stream: SnapshotStream,
    render: Callable[[list[SubjectRecord]], Any],
    event: str = "snapshot",
    on_error: Optional[Callable[[Exception], Awaitable[None]]] = None,
) -> StreamingResponse:
    """Relay a snapshot stream to the client as Server-Sent Events.

    Stops, and unsubscribes, once the client disconnects. A failed read
    ends the stream with a single ``failure`` event.

    Args:
        request: Request whose connection is watched.
        stream: Open snapshot stream.
        render: Turns a snapshot into the event payload.
        event: Event name sent with every message.
        on_error: Awaited with the exception when reading fails.
    """

    async def events() -> AsyncIterator[str]:
        try:
            async for snapshot in stream:
                if await request.is_disconnected():
                    break
                yield format_sse(render(snapshot), event=event)
        except RedisError as e:
            logger.error(
                "Subject stream failed",
                extra={"path": request.url.path, "error": str(e)},
                exc_info=True,
            )
            if on_error is not None:
                await on_error(e)
            yield format_sse({"error": "stream interrupted"}, event="failure")
        finally:
            await stream.close()
            logger.debug("Event stream closed", extra={"path": request.url.path})

    return StreamingResponse(events(), media_type="text/event-stream", headers=SSE_HEADERS)
