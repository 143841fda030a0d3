from __future__ import annotations

from typing import TextIO

from photonctl.models.clusters import Cluster, ClusterCreateSpec, ClusterResizeSpec
from photonctl.models.tasks import Task
from photonctl.models.vms import VM
from photonctl.polling.waiter import WaitPolicy, await_ready
from photonctl.services.base import ServiceBase


class ClustersService(ServiceBase):
    """Cluster API operations.

    `ServicesService` reuses everything with a different collection name;
    the payloads are identical.
    """

    kind = "cluster"
    collection = "clusters"

    async def list(self, project_id: str) -> list[Cluster]:
        return await self._get_all(f"/projects/{project_id}/{self.collection}", Cluster)

    async def get(self, cluster_id: str) -> Cluster:
        return await self._get(f"/{self.collection}/{cluster_id}", Cluster)

    async def create(self, project_id: str, spec: ClusterCreateSpec) -> Task:
        return await self._task("POST", f"/projects/{project_id}/{self.collection}", spec)

    async def delete(self, cluster_id: str) -> Task:
        return await self._task("DELETE", f"/{self.collection}/{cluster_id}")

    async def resize(self, cluster_id: str, worker_count: int) -> Task:
        spec = ClusterResizeSpec(new_worker_count=worker_count)
        return await self._task("POST", f"/{self.collection}/{cluster_id}/resize", spec)

    async def list_vms(self, cluster_id: str) -> list[VM]:
        return await self._get_all(f"/{self.collection}/{cluster_id}/vms", VM)

    async def trigger_maintenance(self, cluster_id: str) -> Task:
        return await self._task("POST", f"/{self.collection}/{cluster_id}/trigger_maintenance")

    async def wait_ready(
        self,
        cluster_id: str,
        *,
        timeout: float | None = None,
        progress: TextIO | None = None,
    ) -> Cluster:
        policy = WaitPolicy.for_readiness(self._client.polling, timeout=timeout)
        return await await_ready(self.get, self.kind, cluster_id, policy=policy, progress=progress)


class ServicesService(ClustersService):
    """Service (Kubernetes/Harbor) API operations."""

    kind = "service"
    collection = "services"
