from __future__ import annotations

from photonctl.models.tasks import Task
from photonctl.polling.waiter import WaitPolicy, wait_for_task
from photonctl.services.base import ServiceBase


class TasksService(ServiceBase):
    """Task API operations."""

    async def get(self, task_id: str) -> Task:
        return await self._get(f"/tasks/{task_id}", Task)

    async def list(
        self,
        *,
        entity_id: str | None = None,
        entity_kind: str | None = None,
        state: str | None = None,
    ) -> list[Task]:
        params = {
            "entityId": entity_id or "",
            "entityKind": entity_kind or "",
            "state": state.upper() if state else "",
        }
        return await self._get_all("/tasks", Task, params)

    async def wait(self, task_id: str, *, timeout: float | None = None) -> Task:
        """Block until the task reaches a terminal state, without rendering progress."""

        policy = WaitPolicy.for_tasks(self._client.polling, timeout=timeout)
        return await wait_for_task(self.get, task_id, policy=policy)
