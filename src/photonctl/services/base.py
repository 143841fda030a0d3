from __future__ import annotations

from typing import Any, TypeVar

from pydantic import BaseModel

from photonctl.models.common import PhotonModel
from photonctl.models.tasks import Task

M = TypeVar("M", bound=BaseModel)


class ServiceBase:
    """Base type for service classes bound to a PhotonClient instance."""

    def __init__(self, client: Any) -> None:
        self._client = client

    async def _get(self, path: str, model: type[M]) -> M:
        data = await self._client._request_json("GET", path)
        return model.model_validate(data)

    async def _get_all(self, path: str, model: type[M], params: dict[str, str] | None = None) -> list[M]:
        """Fetch a list endpoint, following `nextPageLink` until exhausted."""

        items: list[M] = []
        next_path: str | None = path
        next_params = {key: value for key, value in (params or {}).items() if value}
        while next_path:
            data = await self._client._request_json("GET", next_path, params=next_params or None)
            items.extend(model.model_validate(item) for item in data.get("items", []))
            next_path = data.get("nextPageLink") or None
            next_params = {}
        return items

    async def _task(self, method: str, path: str, payload: PhotonModel | dict[str, Any] | None = None) -> Task:
        json_data = payload.to_payload() if isinstance(payload, PhotonModel) else payload
        data = await self._client._request_json(method, path, json_data=json_data)
        return Task.model_validate(data)
