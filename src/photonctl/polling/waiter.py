"""One wait loop for every "poll until terminal" operation.

Task waits and cluster/service readiness waits differ only in what they fetch,
how they classify a snapshot, and their timeout/interval. Both go through
`wait_until`.
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any, Generic, Protocol, TextIO, TypeVar

from pydantic import ValidationError

from photonctl.config.models import PollingConfig
from photonctl.errors import (
    FetchRetriesExhaustedError,
    InvalidArgumentError,
    PhotonError,
    TaskFailedError,
    WaitTimeoutError,
)
from photonctl.models.clusters import ClusterState
from photonctl.models.common import ApiError
from photonctl.models.tasks import Task, TaskState
from photonctl.polling.progress import ProgressRenderer, format_elapsed, task_progress_line

logger = logging.getLogger(__name__)

T = TypeVar("T")


class WaitOutcome(StrEnum):
    PENDING = "pending"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


@dataclass(slots=True, frozen=True)
class WaitPolicy:
    timeout: float
    poll_interval: float
    max_consecutive_errors: int = 3
    render_interval: float = 0.5

    @classmethod
    def for_tasks(cls, config: PollingConfig | None = None, *, timeout: float | None = None) -> WaitPolicy:
        cfg = config or PollingConfig()
        return cls(
            timeout=timeout if timeout is not None else cfg.task_timeout,
            poll_interval=cfg.task_poll_interval,
            max_consecutive_errors=cfg.max_consecutive_errors,
            render_interval=cfg.render_interval,
        )

    @classmethod
    def for_readiness(cls, config: PollingConfig | None = None, *, timeout: float | None = None) -> WaitPolicy:
        cfg = config or PollingConfig()
        return cls(
            timeout=timeout if timeout is not None else cfg.ready_timeout,
            poll_interval=cfg.ready_poll_interval,
            max_consecutive_errors=cfg.max_consecutive_errors,
            render_interval=cfg.render_interval,
        )


def _no_diagnostics(_snapshot: Any) -> Sequence[ApiError]:
    return ()


def _no_recovery(_exc: Exception) -> None:
    return None


@dataclass
class WaitTarget(Generic[T]):
    """What to poll and how to interpret it."""

    description: str
    fetch: Callable[[], Awaitable[T]]
    classify: Callable[[T], WaitOutcome]
    failure_message: Callable[[T], str]
    timeout_message: str
    diagnostics: Callable[[T], Sequence[ApiError]] = field(default=_no_diagnostics)
    # Builds a partial snapshot from a failed fetch, when the error carries one.
    recover: Callable[[Exception], T | None] = field(default=_no_recovery)
    render_line: Callable[[T, float], str] | None = None


async def wait_until(target: WaitTarget[T], policy: WaitPolicy, *, progress: TextIO | None = None) -> T:
    """Poll `target` until it succeeds, fails, runs out of retries, or times out.

    Progress is rendered to `progress` when given. The renderer is always
    stopped and joined before this coroutine returns or raises.
    """

    start = time.monotonic()
    consecutive_errors = 0
    observed: dict[tuple[str, str], ApiError] = {}

    def remember(snapshot: T) -> None:
        for error in target.diagnostics(snapshot):
            observed.setdefault((error.code, error.message), error)

    renderer: ProgressRenderer[T] | None = None
    if progress is not None and target.render_line is not None:
        renderer = ProgressRenderer(
            target.render_line,
            stream=progress,
            interval=policy.render_interval,
            started_at=start,
        )
        renderer.start()

    try:
        while time.monotonic() - start < policy.timeout:
            try:
                snapshot = await target.fetch()
            except (PhotonError, ValidationError) as exc:
                consecutive_errors += 1
                partial = target.recover(exc)
                if partial is not None:
                    remember(partial)
                    if target.classify(partial) is WaitOutcome.FAILED:
                        logger.debug(f"{target.description} failed (reported with fetch error)")
                        raise TaskFailedError(
                            target.failure_message(partial),
                            api_errors=list(observed.values()),
                        ) from exc

                logger.debug(
                    f"fetching {target.description} failed "
                    f"({consecutive_errors}/{policy.max_consecutive_errors + 1}): {exc}"
                )
                if consecutive_errors > policy.max_consecutive_errors:
                    raise FetchRetriesExhaustedError(
                        f"failed to fetch {target.description} after {consecutive_errors} attempts: {exc}",
                        api_errors=list(observed.values()),
                    ) from exc
            else:
                consecutive_errors = 0
                remember(snapshot)
                if renderer is not None:
                    renderer.update(snapshot)

                outcome = target.classify(snapshot)
                if outcome is WaitOutcome.SUCCEEDED:
                    logger.debug(f"{target.description} finished after {format_elapsed(time.monotonic() - start)}")
                    return snapshot
                if outcome is WaitOutcome.FAILED:
                    logger.debug(f"{target.description} failed")
                    raise TaskFailedError(target.failure_message(snapshot), api_errors=list(observed.values()))

            await asyncio.sleep(policy.poll_interval)

        logger.debug(f"timed out waiting for {target.description} after {policy.timeout}s")
        raise WaitTimeoutError(target.timeout_message, api_errors=list(observed.values()))
    finally:
        if renderer is not None:
            await renderer.stop()


# Tasks -----------------------------------------------------------------------


def classify_task(task: Task) -> WaitOutcome:
    if task.state == TaskState.COMPLETED:
        return WaitOutcome.SUCCEEDED
    if task.state == TaskState.ERROR:
        return WaitOutcome.FAILED
    return WaitOutcome.PENDING


def partial_task(exc: Exception) -> Task | None:
    payload = getattr(exc, "payload", None)
    if not isinstance(payload, dict) or "steps" not in payload:
        return None
    try:
        return Task.model_validate(payload)
    except ValidationError:
        return None


def task_target(task_id: str, fetch_task: Callable[[str], Awaitable[Task]]) -> WaitTarget[Task]:
    if not task_id:
        raise InvalidArgumentError("task id is required")

    async def fetch() -> Task:
        return await fetch_task(task_id)

    return WaitTarget(
        description=f"task {task_id}",
        fetch=fetch,
        classify=classify_task,
        failure_message=lambda task: f"Task '{task.id}' ({task.operation}) entered ERROR state",
        timeout_message=f"timed out while waiting for task {task_id} to complete",
        diagnostics=Task.api_errors,
        recover=partial_task,
        render_line=task_progress_line,
    )


async def wait_for_task(
    fetch_task: Callable[[str], Awaitable[Task]],
    task_id: str,
    *,
    policy: WaitPolicy | None = None,
    progress: TextIO | None = None,
) -> Task:
    return await wait_until(task_target(task_id, fetch_task), policy or WaitPolicy.for_tasks(), progress=progress)


async def await_task(
    fetch_task: Callable[[str], Awaitable[Task]],
    task_id: str,
    *,
    policy: WaitPolicy | None = None,
    progress: TextIO | None = None,
) -> str:
    """Wait for a task to complete and return the id of the entity it acted on."""

    task = await wait_for_task(fetch_task, task_id, policy=policy, progress=progress)
    return task.entity.id


# Readiness -------------------------------------------------------------------


class StatefulResource(Protocol):
    id: str
    state: str | None


R = TypeVar("R", bound=StatefulResource)


def classify_readiness(resource: StatefulResource) -> WaitOutcome:
    state = (resource.state or "").upper()
    if state == ClusterState.READY:
        return WaitOutcome.SUCCEEDED
    if state == ClusterState.ERROR:
        return WaitOutcome.FAILED
    return WaitOutcome.PENDING


def readiness_target(kind: str, resource_id: str, fetch_resource: Callable[[str], Awaitable[R]]) -> WaitTarget[R]:
    if not resource_id:
        raise InvalidArgumentError(f"{kind} id is required")

    async def fetch() -> R:
        return await fetch_resource(resource_id)

    def render(resource: R, elapsed: float) -> str:
        return f"{format_elapsed(elapsed)} {kind} {resource_id} : {resource.state or '-'}"

    return WaitTarget(
        description=f"{kind} {resource_id}",
        fetch=fetch,
        classify=classify_readiness,
        failure_message=lambda _resource: f"{kind.capitalize()} {resource_id} entered ERROR state",
        timeout_message=f"timed out while waiting for {kind} {resource_id} to enter READY state",
        render_line=render,
    )


async def await_ready(
    fetch_resource: Callable[[str], Awaitable[R]],
    kind: str,
    resource_id: str,
    *,
    policy: WaitPolicy | None = None,
    progress: TextIO | None = None,
) -> R:
    """Wait for a cluster/service to reach READY and return its final snapshot."""

    target = readiness_target(kind, resource_id, fetch_resource)
    return await wait_until(target, policy or WaitPolicy.for_readiness(), progress=progress)
