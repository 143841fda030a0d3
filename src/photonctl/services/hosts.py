from __future__ import annotations

from typing import Literal

from photonctl.models.hosts import Host, HostCreateSpec
from photonctl.models.tasks import Task
from photonctl.services.base import ServiceBase

HostOperation = Literal["suspend", "resume", "enter_maintenance", "exit_maintenance"]


class HostsService(ServiceBase):
    """Host API operations."""

    async def list(self) -> list[Host]:
        return await self._get_all("/hosts", Host)

    async def get(self, host_id: str) -> Host:
        return await self._get(f"/hosts/{host_id}", Host)

    async def create(self, spec: HostCreateSpec) -> Task:
        return await self._task("POST", "/hosts", spec)

    async def delete(self, host_id: str) -> Task:
        return await self._task("DELETE", f"/hosts/{host_id}")

    async def change_mode(self, host_id: str, operation: HostOperation) -> Task:
        return await self._task("POST", f"/hosts/{host_id}/{operation}")
