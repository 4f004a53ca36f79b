import asyncio
import logging
from typing import Awaitable, Callable, Dict, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class RequestCoalescer:
    """
    Merges concurrent identical lookups into a single in-flight call.

    The first caller for a key starts the producer; later callers for the
    same key await that same outcome. The pending entry is dropped as soon
    as the producer finishes, successfully or not, so the next call after
    completion fetches afresh.
    """

    def __init__(self):
        self._pending: Dict[str, asyncio.Future] = {}

    async def coalesce(
        self,
        key: str,
        producer: Callable[[], Awaitable[T]],
    ) -> T:
        task = self._pending.get(key)

        if task is None:
            task = asyncio.ensure_future(producer())
            self._pending[key] = task
            task.add_done_callback(lambda done: self._release(key, done))
        else:
            logger.debug(f"Joining in-flight request for '{key}'")

        # A cancelled waiter must not cancel the shared call for the others.
        return await asyncio.shield(task)

    def in_flight(self, key: str) -> bool:
        return key in self._pending

    def __len__(self) -> int:
        return len(self._pending)

    # ─────────────────────────────────────────────
    # Internal helpers
    # ─────────────────────────────────────────────

    def _release(self, key: str, done: asyncio.Future) -> None:
        if self._pending.get(key) is done:
            del self._pending[key]
        if not done.cancelled():
            # Mark the outcome as observed even if every waiter went away.
            done.exception()
