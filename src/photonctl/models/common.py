from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class PhotonModel(BaseModel):
    """Base model with camelCase wire names and permissive extra handling."""

    model_config = ConfigDict(extra="allow", populate_by_name=True, alias_generator=to_camel)

    def to_payload(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class EntityRef(PhotonModel):
    id: str = ""
    kind: str = ""


class ApiError(PhotonModel):
    code: str = ""
    message: str = ""
    data: dict[str, Any] = Field(default_factory=dict)

    def __str__(self) -> str:
        if self.message:
            return f"{self.code}: {self.message}"
        return self.code


class QuotaLineItem(PhotonModel):
    key: str
    value: float
    unit: str = "COUNT"

    def __str__(self) -> str:
        return f"{self.key}:{self.value:g}:{self.unit}"


class Resource(PhotonModel):
    """Fields shared by every named Photon resource."""

    id: str
    name: str = ""
    kind: str | None = None
    state: str | None = None
    self_link: str | None = None
    tags: list[str] = Field(default_factory=list)
