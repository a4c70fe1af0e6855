"""
Cooperative scheduling for the dashboard's single logical flow.

Everything runs on one asyncio event loop. Initial population is an ordered
list of stages; each stage yields to the loop before it runs so a status
indicator can repaint, and no stage blocks another. Resize bursts are
collapsed by a debouncer, and renders requested while another render is in
progress are queued behind it rather than interleaved.
"""

from __future__ import annotations

import asyncio
import logging
from collections import deque
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from enum import Enum
from typing import Protocol

logger = logging.getLogger(__name__)


class StatusIndicator(Protocol):
    """Host capability showing progress between load stages."""

    def set_status(self, message: str | None, spinner: bool = False) -> None: ...

    def clear_status(self) -> None: ...


class StageState(str, Enum):
    PENDING = "pending"
    RUNNING = "running"
    DONE = "done"


@dataclass
class Stage:
    """
    One step of the load sequence.

    Attributes:
        name: Identifier used in logs and completion lookups
        action: Synchronous work performed by the stage
        status: Message shown while waiting to run (None leaves the indicator as is)
        delay_ms: Time yielded to the event loop before the action runs
    """

    name: str
    action: Callable[[], None]
    status: str | None = None
    delay_ms: int = 100
    state: StageState = StageState.PENDING
    done: asyncio.Event = field(default_factory=asyncio.Event, repr=False)


class LoadSequence:
    """Drive stages in order, one deferred continuation after another."""

    def __init__(self, stages: Sequence[Stage], status: StatusIndicator | None = None) -> None:
        names = [stage.name for stage in stages]
        if len(set(names)) != len(names):
            msg = f"Stage names must be unique, got {names}"
            raise ValueError(msg)
        self.stages = list(stages)
        self.status = status
        self._started = False

    @property
    def state(self) -> StageState:
        if all(stage.state is StageState.DONE for stage in self.stages):
            return StageState.DONE
        if self._started:
            return StageState.RUNNING
        return StageState.PENDING

    @property
    def current(self) -> Stage | None:
        """The first stage that has not finished."""
        for stage in self.stages:
            if stage.state is not StageState.DONE:
                return stage
        return None

    def stage(self, name: str) -> Stage:
        for stage in self.stages:
            if stage.name == name:
                return stage
        raise KeyError(name)

    async def wait_for(self, name: str) -> None:
        """Suspend until the named stage has completed."""
        await self.stage(name).done.wait()

    async def run(self) -> None:
        if self._started:
            msg = "Load sequence already started"
            raise RuntimeError(msg)
        self._started = True

        for stage in self.stages:
            if stage.status is not None and self.status is not None:
                self.status.set_status(stage.status, spinner=True)
            await asyncio.sleep(stage.delay_ms / 1000)

            stage.state = StageState.RUNNING
            logger.debug("Running load stage %s", stage.name)
            stage.action()
            stage.state = StageState.DONE
            stage.done.set()


class RenderQueue:
    """
    Serialize render requests.

    A request made while a render is in progress (for instance from an event
    handler the render triggered) runs after the current one finishes.
    """

    def __init__(self) -> None:
        self._pending: deque[tuple[str, Callable[[], None]]] = deque()
        self._running = False
        self.completed: list[str] = []

    @property
    def busy(self) -> bool:
        return self._running

    def request(self, name: str, action: Callable[[], None]) -> None:
        self._pending.append((name, action))
        if self._running:
            logger.debug("Render %s queued behind the current render", name)
            return

        self._running = True
        try:
            while self._pending:
                current, work = self._pending.popleft()
                work()
                self.completed.append(current)
        except Exception:
            self._pending.clear()
            raise
        finally:
            self._running = False


class Debouncer:
    """
    Collapse bursts of calls into one callback after a quiet period.

    The callback is scheduled with ``call_soon`` once ``wait_ms`` has passed
    without another call, i.e. on the next turn of the loop after the burst.
    Without a running loop the callback runs immediately.
    """

    def __init__(self, callback: Callable[[], None], wait_ms: int = 500) -> None:
        self.callback = callback
        self.wait_ms = wait_ms
        self._handle: asyncio.TimerHandle | None = None
        self.fired = 0

    @property
    def pending(self) -> bool:
        return self._handle is not None

    def __call__(self) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.debug("No running event loop; invoking debounced callback directly")
            self._run()
            return

        self.cancel()
        self._handle = loop.call_later(self.wait_ms / 1000, self._quiet, loop)

    def _quiet(self, loop: asyncio.AbstractEventLoop) -> None:
        self._handle = None
        loop.call_soon(self._run)

    def _run(self) -> None:
        self.fired += 1
        self.callback()

    def cancel(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None
