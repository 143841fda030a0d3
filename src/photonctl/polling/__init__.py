from photonctl.polling.progress import (
    ProgressRenderer,
    find_started_step,
    format_elapsed,
    progress_bar,
    sort_steps_by_sequence,
    task_progress_line,
)
from photonctl.polling.waiter import (
    WaitOutcome,
    WaitPolicy,
    WaitTarget,
    await_ready,
    await_task,
    wait_for_task,
    wait_until,
)

__all__ = [
    "ProgressRenderer",
    "WaitOutcome",
    "WaitPolicy",
    "WaitTarget",
    "await_ready",
    "await_task",
    "find_started_step",
    "format_elapsed",
    "progress_bar",
    "sort_steps_by_sequence",
    "task_progress_line",
    "wait_for_task",
    "wait_until",
]
