from __future__ import annotations

from photonctl.models.networks import (
    Network,
    NetworkCreateSpec,
    Router,
    RouterCreateSpec,
    Subnet,
    SubnetCreateSpec,
)
from photonctl.models.tasks import Task
from photonctl.services.base import ServiceBase


class NetworksService(ServiceBase):
    """Physical network API operations."""

    async def list(self, *, name: str | None = None) -> list[Network]:
        return await self._get_all("/networks", Network, {"name": name or ""})

    async def get(self, network_id: str) -> Network:
        return await self._get(f"/networks/{network_id}", Network)

    async def create(self, spec: NetworkCreateSpec) -> Task:
        return await self._task("POST", "/networks", spec)

    async def delete(self, network_id: str) -> Task:
        return await self._task("DELETE", f"/networks/{network_id}")

    async def set_default(self, network_id: str) -> Task:
        return await self._task("POST", f"/networks/{network_id}/set_default")


class SubnetsService(ServiceBase):
    """Project subnet API operations."""

    async def list(self, project_id: str, *, name: str | None = None) -> list[Subnet]:
        return await self._get_all(f"/projects/{project_id}/subnets", Subnet, {"name": name or ""})

    async def get(self, subnet_id: str) -> Subnet:
        return await self._get(f"/subnets/{subnet_id}", Subnet)

    async def create(self, project_id: str, spec: SubnetCreateSpec) -> Task:
        return await self._task("POST", f"/projects/{project_id}/subnets", spec)

    async def delete(self, subnet_id: str) -> Task:
        return await self._task("DELETE", f"/subnets/{subnet_id}")

    async def set_default(self, subnet_id: str) -> Task:
        return await self._task("POST", f"/subnets/{subnet_id}/set_default")


class RoutersService(ServiceBase):
    """Project router API operations."""

    async def list(self, project_id: str, *, name: str | None = None) -> list[Router]:
        return await self._get_all(f"/projects/{project_id}/routers", Router, {"name": name or ""})

    async def get(self, router_id: str) -> Router:
        return await self._get(f"/routers/{router_id}", Router)

    async def create(self, project_id: str, spec: RouterCreateSpec) -> Task:
        return await self._task("POST", f"/projects/{project_id}/routers", spec)

    async def delete(self, router_id: str) -> Task:
        return await self._task("DELETE", f"/routers/{router_id}")
