from __future__ import annotations

from pathlib import Path

from photonctl.models.images import Image
from photonctl.models.tasks import Task
from photonctl.services.base import ServiceBase


class ImagesService(ServiceBase):
    """Image API operations."""

    async def list(self, *, name: str | None = None) -> list[Image]:
        return await self._get_all("/images", Image, {"name": name or ""})

    async def get(self, image_id: str) -> Image:
        return await self._get(f"/images/{image_id}", Image)

    async def upload(self, path: str | Path, *, name: str | None = None, replication: str = "EAGER") -> Task:
        source = Path(path).expanduser()
        with source.open("rb") as handle:
            data = await self._client._request_json(
                "POST",
                "/images",
                files={"file": (name or source.name, handle, "application/octet-stream")},
                form_data={"imagereplication": replication},
            )
        return Task.model_validate(data)

    async def delete(self, image_id: str) -> Task:
        return await self._task("DELETE", f"/images/{image_id}")
