"""asyncio host loop: one inbox, one consumer, plus a periodic tick."""

from __future__ import annotations

import asyncio
import logging

from lockin.agent.commands import Command, FocusLost, Tick
from lockin.agent.core import BackgroundAgent, Outcome

logger = logging.getLogger(__name__)

_STOP = object()


class AgentRunner:
    """Feeds commands to a BackgroundAgent strictly one at a time.

    Host events and the tick task only enqueue; the consumer in ``run`` is the
    single writer of agent state.
    """

    def __init__(self, agent: BackgroundAgent, tick_seconds: float | None = None):
        self.agent = agent
        self.tick_seconds = tick_seconds if tick_seconds is not None else agent.settings.tick_seconds
        self.inbox: asyncio.Queue = asyncio.Queue()

    def post(self, command: Command) -> None:
        """Enqueue without waiting for the result."""
        self.inbox.put_nowait((command, None))

    async def submit(self, command: Command) -> Outcome:
        """Enqueue and wait for the outcome."""
        future = asyncio.get_running_loop().create_future()
        await self.inbox.put((command, future))
        return await future

    async def stop(self) -> None:
        await self.inbox.put((_STOP, None))

    async def _tick_loop(self) -> None:
        while True:
            await asyncio.sleep(self.tick_seconds)
            self.post(Tick())

    async def run(self) -> None:
        self.agent.startup()
        ticker = asyncio.create_task(self._tick_loop())
        try:
            while True:
                command, future = await self.inbox.get()
                if command is _STOP:
                    break
                try:
                    outcome = self.agent.handle(command)
                except Exception as e:
                    # The consumer must outlive a bad command.
                    logger.exception("Unhandled error in %s", type(command).__name__)
                    outcome = Outcome(command=type(command).__name__, ok=False, error=f"internal error: {e}")
                if future is not None and not future.done():
                    future.set_result(outcome)
        finally:
            ticker.cancel()
            try:
                await ticker
            except asyncio.CancelledError:
                pass
            self.agent.handle(FocusLost())
            logger.info("Agent stopped")
