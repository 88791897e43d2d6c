"""Periodic check for pending workflows."""
import asyncio
import logging
from typing import Any, Awaitable, Callable, Optional

logger = logging.getLogger(__name__)


class WorkflowPoller:
    """
    Calls ``fetch`` every ``interval`` seconds and hands the result to ``on_result``.

    A failing fetch is logged and polling continues.
    """

    def __init__(
        self,
        fetch: Callable[[], Awaitable[Any]],
        on_result: Callable[[Any], None],
        interval: float = 60.0,
    ):
        self.fetch = fetch
        self.on_result = on_result
        self.interval = interval
        self._task: Optional[asyncio.Task] = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def poll_once(self) -> None:
        try:
            result = await self.fetch()
        except Exception:
            logger.exception("Workflow poll failed")
            return
        self.on_result(result)

    async def _loop(self) -> None:
        while True:
            await self.poll_once()
            await asyncio.sleep(self.interval)

    def start(self) -> None:
        """Start polling in the running event loop; a second call is a no-op."""
        if self.running:
            return
        self._task = asyncio.create_task(self._loop())

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None
