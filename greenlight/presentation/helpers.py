import asyncio
from typing import Awaitable, TypeVar

from fastapi import Request

INT64_MAX = 2**63 - 1
DISCONNECT_POLL_INTERVAL = 0.1

T = TypeVar("T")


class ClientDisconnectedError(Exception):
    pass


def read_id_param(raw: str) -> int:
    """Parse a path id: a base-10 integer in [1, 2**63-1]."""
    if not raw.isascii() or not raw.isdigit():
        raise ValueError("invalid id parameter")

    movie_id = int(raw)
    if movie_id < 1 or movie_id > INT64_MAX:
        raise ValueError("invalid id parameter")
    return movie_id


async def cancel_on_disconnect(
    request: Request, awaitable: Awaitable[T], poll_interval: float = DISCONNECT_POLL_INTERVAL
) -> T:
    """Await ``awaitable`` while watching the client connection.

    If the client goes away first the work is cancelled, allowed to unwind, and
    ``ClientDisconnectedError`` is raised.
    """
    task = asyncio.ensure_future(awaitable)
    try:
        while True:
            done, _ = await asyncio.wait({task}, timeout=poll_interval)
            if done:
                return task.result()
            if await request.is_disconnected():
                raise ClientDisconnectedError()
    finally:
        if not task.done():
            task.cancel()
            await asyncio.wait({task})
