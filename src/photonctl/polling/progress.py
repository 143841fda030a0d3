"""Step inspection helpers and the live progress renderer used while waiting on tasks.

A rendered line looks like::

     0h 0m 0s [    ] CREATE_VM : QUEUED
     0h 0m 1s [=   ] CREATE_VM : RESERVE_RESOURCE | Step 1/3
     0h 0m 4s [====] CREATE_VM : COMPLETED
"""

from __future__ import annotations

import asyncio
import logging
import sys
import time
from collections.abc import Callable, Iterable
from operator import attrgetter
from typing import Generic, TextIO, TypeVar

from photonctl.constants import DEFAULT_RENDER_INTERVAL_SECONDS
from photonctl.models.tasks import Step, Task, TaskState

logger = logging.getLogger(__name__)

T = TypeVar("T")

CLEAR_WIDTH = 100
CLEAR_LINE = "\r" + " " * CLEAR_WIDTH + "\r"


def find_started_step(task: Task | None) -> Step | None:
    """Return the first step in stored (not sequence) order whose state is STARTED."""

    if task is None:
        return None
    for step in task.steps:
        if step.state == TaskState.STARTED:
            return step
    return None


def sort_steps_by_sequence(steps: Iterable[Step]) -> list[Step]:
    return sorted(steps, key=attrgetter("sequence"))


def progress_bar(cursor: int, step_count: int) -> str:
    """Render `step_count + 1` slots with the first `cursor` filled."""

    slots = max(step_count, 0) + 1
    filled = min(max(cursor, 0), slots)
    return "=" * filled + " " * (slots - filled)


def format_elapsed(seconds: float) -> str:
    elapsed = int(seconds)
    return f"{elapsed // 3600:2d}h{(elapsed // 60) % 60:2d}m{elapsed % 60:2d}s"


def task_progress_line(task: Task, elapsed: float) -> str:
    step_count = len(task.steps)
    started = find_started_step(task)
    if started is not None:
        cursor = started.sequence + 1
        status = f"{started.operation} | Step {started.sequence + 1}/{step_count}"
    else:
        cursor = step_count + 1 if task.state == TaskState.COMPLETED else 0
        status = task.state
    return f"{format_elapsed(elapsed)} [{progress_bar(cursor, step_count)}] {task.operation} : {status}"


class ProgressRenderer(Generic[T]):
    """Redraws the latest published snapshot in place until stopped.

    One renderer belongs to one wait. The polling coroutine publishes
    snapshots with `update` and must `await stop()` before it returns; `stop`
    only completes after the line has been cleared.
    """

    def __init__(
        self,
        render_line: Callable[[T, float], str],
        *,
        stream: TextIO | None = None,
        interval: float = DEFAULT_RENDER_INTERVAL_SECONDS,
        started_at: float | None = None,
    ) -> None:
        self._render_line = render_line
        self._stream = stream if stream is not None else sys.stdout
        self._interval = interval
        self._started_at = time.monotonic() if started_at is None else started_at
        self._snapshot: T | None = None
        self._stop = asyncio.Event()
        self._task: asyncio.Task[None] | None = None
        self.frames = 0

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def update(self, snapshot: T) -> None:
        self._snapshot = snapshot

    def start(self) -> None:
        if self._task is not None:
            raise RuntimeError("progress renderer already started")
        self._task = asyncio.create_task(self._run())

    async def stop(self) -> None:
        self._stop.set()
        if self._task is not None:
            await self._task

    async def _run(self) -> None:
        # A failing stream (closed pipe, bad render) only ends the display; the wait carries on.
        try:
            try:
                while not self._stop.is_set():
                    self._draw()
                    try:
                        await asyncio.wait_for(self._stop.wait(), timeout=self._interval)
                    except TimeoutError:
                        continue
            finally:
                self._write(CLEAR_LINE)
        except Exception as exc:  # noqa: BLE001
            logger.debug(f"progress rendering stopped: {exc}")

    def _draw(self) -> None:
        snapshot = self._snapshot
        if snapshot is None:
            return
        line = self._render_line(snapshot, time.monotonic() - self._started_at)
        self._write(CLEAR_LINE + line)
        self.frames += 1

    def _write(self, text: str) -> None:
        self._stream.write(text)
        self._stream.flush()
