from __future__ import annotations

from typing import Any

from pydantic import Field

from photonctl.models.common import PhotonModel, Resource


class PersistentDisk(Resource):
    flavor: str | None = None
    capacity_gb: int | None = None
    datastore: str | None = None
    vms: list[str] = Field(default_factory=list)


class DiskCreateSpec(PhotonModel):
    name: str
    flavor: str
    capacity_gb: int
    kind: str = "persistent-disk"
    affinities: list[dict[str, Any]] | None = None
