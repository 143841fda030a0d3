from __future__ import annotations

from enum import StrEnum
from typing import Any

from pydantic import Field

from photonctl.models.common import ApiError, EntityRef, PhotonModel


class TaskState(StrEnum):
    QUEUED = "QUEUED"
    STARTED = "STARTED"
    COMPLETED = "COMPLETED"
    ERROR = "ERROR"


TERMINAL_TASK_STATES = frozenset({TaskState.COMPLETED, TaskState.ERROR})


class Step(PhotonModel):
    sequence: int = 0
    operation: str = ""
    state: str = ""
    started_time: int = 0
    end_time: int = 0
    errors: list[ApiError] = Field(default_factory=list)
    warnings: list[ApiError] = Field(default_factory=list)
    options: dict[str, Any] = Field(default_factory=dict)


class Task(PhotonModel):
    """Server-side record of an asynchronous operation."""

    id: str
    state: str = ""
    operation: str = ""
    entity: EntityRef = Field(default_factory=EntityRef)
    steps: list[Step] = Field(default_factory=list)
    started_time: int = 0
    end_time: int = 0
    queued_time: int = 0
    resource_properties: Any = None
    self_link: str | None = None

    def api_errors(self) -> list[ApiError]:
        """Step-level errors in stored step order."""

        collected: list[ApiError] = []
        for step in self.steps:
            collected.extend(step.errors)
        return collected

    @property
    def is_terminal(self) -> bool:
        return self.state in TERMINAL_TASK_STATES
