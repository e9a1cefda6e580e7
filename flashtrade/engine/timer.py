import asyncio
import logging
from typing import Callable, Optional

logger = logging.getLogger(__name__)

class PeriodicTimer:
    """
    Fires `callback` every `interval` seconds on the running event loop
    until cancelled. Restarting replaces the previous task; a superseded
    task never fires again.
    """
    def __init__(self, interval: float, callback: Callable[[], None]):
        self.interval = interval
        self.callback = callback
        self._task: Optional[asyncio.Task] = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        self.cancel()
        loop = asyncio.get_running_loop()
        self._task = loop.create_task(self._run())

    def cancel(self) -> None:
        task, self._task = self._task, None
        if task is not None and not task.done():
            task.cancel()

    async def _run(self) -> None:
        me = asyncio.current_task()
        try:
            while True:
                await asyncio.sleep(self.interval)
                if self._task is not me:
                    return
                self.callback()
        except asyncio.CancelledError:
            logger.debug("Timer cancelled")
            raise
        finally:
            if self._task is me:
                self._task = None
