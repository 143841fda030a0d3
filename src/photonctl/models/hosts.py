from __future__ import annotations

from pydantic import Field

from photonctl.models.common import PhotonModel, Resource


class Host(Resource):
    address: str | None = None
    username: str | None = None
    usage_tags: list[str] = Field(default_factory=list)
    availability_zone: str | None = None
    esx_version: str | None = None
    metadata: dict[str, str] = Field(default_factory=dict)


class HostCreateSpec(PhotonModel):
    address: str
    username: str
    password: str
    usage_tags: list[str]
    availability_zone: str | None = None
    metadata: dict[str, str] | None = None
