from __future__ import annotations

from photonctl.models.flavors import Flavor, FlavorCreateSpec
from photonctl.models.tasks import Task
from photonctl.services.base import ServiceBase


class FlavorsService(ServiceBase):
    """Flavor API operations. Flavors are global, not scoped to a project."""

    async def list(self, *, name: str | None = None, kind: str | None = None) -> list[Flavor]:
        return await self._get_all("/flavors", Flavor, {"name": name or "", "kind": kind or ""})

    async def get(self, flavor_id: str) -> Flavor:
        return await self._get(f"/flavors/{flavor_id}", Flavor)

    async def create(self, spec: FlavorCreateSpec) -> Task:
        return await self._task("POST", "/flavors", spec)

    async def delete(self, flavor_id: str) -> Task:
        return await self._task("DELETE", f"/flavors/{flavor_id}")

    async def tasks(self, flavor_id: str, *, state: str | None = None) -> list[Task]:
        return await self._get_all(f"/flavors/{flavor_id}/tasks", Task, {"state": (state or "").upper()})
