from __future__ import annotations

from photonctl.errors import NotFoundError
from photonctl.models.tasks import Task
from photonctl.models.tenants import Project, ProjectCreateSpec, Tenant, TenantCreateSpec
from photonctl.services.base import ServiceBase


class TenantsService(ServiceBase):
    """Tenant API operations."""

    async def list(self, *, name: str | None = None) -> list[Tenant]:
        return await self._get_all("/tenants", Tenant, {"name": name or ""})

    async def get(self, tenant_id: str) -> Tenant:
        return await self._get(f"/tenants/{tenant_id}", Tenant)

    async def create(self, spec: TenantCreateSpec) -> Task:
        return await self._task("POST", "/tenants", spec)

    async def delete(self, tenant_id: str) -> Task:
        return await self._task("DELETE", f"/tenants/{tenant_id}")

    async def tasks(self, tenant_id: str, *, state: str | None = None) -> list[Task]:
        return await self._get_all(f"/tenants/{tenant_id}/tasks", Task, {"state": (state or "").upper()})

    async def set_security_groups(self, tenant_id: str, groups: list[str]) -> Task:
        return await self._task("POST", f"/tenants/{tenant_id}/set_security_groups", {"items": groups})

    async def find_by_name(self, name: str) -> Tenant:
        matches = [tenant for tenant in await self.list(name=name) if tenant.name == name]
        if not matches:
            raise NotFoundError(f"Tenant name '{name}' not found")
        return matches[0]


class ProjectsService(ServiceBase):
    """Project API operations."""

    async def list(self, tenant_id: str, *, name: str | None = None) -> list[Project]:
        return await self._get_all(f"/tenants/{tenant_id}/projects", Project, {"name": name or ""})

    async def get(self, project_id: str) -> Project:
        return await self._get(f"/projects/{project_id}", Project)

    async def create(self, tenant_id: str, spec: ProjectCreateSpec) -> Task:
        return await self._task("POST", f"/tenants/{tenant_id}/projects", spec)

    async def delete(self, project_id: str) -> Task:
        return await self._task("DELETE", f"/projects/{project_id}")

    async def tasks(self, project_id: str, *, state: str | None = None) -> list[Task]:
        return await self._get_all(f"/projects/{project_id}/tasks", Task, {"state": (state or "").upper()})

    async def find_by_name(self, tenant_id: str, name: str) -> Project:
        matches = [project for project in await self.list(tenant_id, name=name) if project.name == name]
        if not matches:
            raise NotFoundError(f"Cannot find project named '{name}'")
        if len(matches) > 1:
            raise NotFoundError(f"Found more than 1 projects named '{name}'")
        return matches[0]
