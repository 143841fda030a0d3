from __future__ import annotations

from typing import Literal

from photonctl.models.tasks import Task
from photonctl.models.vms import VM, VMCreateSpec, VMDiskOperation
from photonctl.services.base import ServiceBase

PowerOperation = Literal["start", "stop", "restart", "suspend", "resume"]


class VMsService(ServiceBase):
    """VM API operations."""

    async def list(self, project_id: str, *, name: str | None = None) -> list[VM]:
        return await self._get_all(f"/projects/{project_id}/vms", VM, {"name": name or ""})

    async def get(self, vm_id: str) -> VM:
        return await self._get(f"/vms/{vm_id}", VM)

    async def create(self, project_id: str, spec: VMCreateSpec) -> Task:
        return await self._task("POST", f"/projects/{project_id}/vms", spec)

    async def delete(self, vm_id: str) -> Task:
        return await self._task("DELETE", f"/vms/{vm_id}")

    async def power(self, vm_id: str, operation: PowerOperation) -> Task:
        return await self._task("POST", f"/vms/{vm_id}/{operation}")

    async def get_networks(self, vm_id: str) -> Task:
        """Start a task whose `resourceProperties` lists the VM's network connections."""

        return await self._task("GET", f"/vms/{vm_id}/subnets")

    async def attach_disk(self, vm_id: str, disk_id: str) -> Task:
        return await self._task("POST", f"/vms/{vm_id}/attach_disk", VMDiskOperation(disk_id=disk_id))

    async def detach_disk(self, vm_id: str, disk_id: str) -> Task:
        return await self._task("POST", f"/vms/{vm_id}/detach_disk", VMDiskOperation(disk_id=disk_id))

    async def tasks(self, vm_id: str, *, state: str | None = None) -> list[Task]:
        return await self._get_all(f"/vms/{vm_id}/tasks", Task, {"state": (state or "").upper()})
