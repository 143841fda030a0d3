from __future__ import annotations

from photonctl.models.disks import DiskCreateSpec, PersistentDisk
from photonctl.models.tasks import Task
from photonctl.services.base import ServiceBase


class DisksService(ServiceBase):
    """Persistent disk API operations."""

    async def list(self, project_id: str, *, name: str | None = None) -> list[PersistentDisk]:
        return await self._get_all(f"/projects/{project_id}/disks", PersistentDisk, {"name": name or ""})

    async def get(self, disk_id: str) -> PersistentDisk:
        return await self._get(f"/disks/{disk_id}", PersistentDisk)

    async def create(self, project_id: str, spec: DiskCreateSpec) -> Task:
        return await self._task("POST", f"/projects/{project_id}/disks", spec)

    async def delete(self, disk_id: str) -> Task:
        return await self._task("DELETE", f"/disks/{disk_id}")
