from __future__ import annotations

from typing import Any

from pydantic import Field

from photonctl.models.common import PhotonModel, Resource


class AttachedDisk(PhotonModel):
    name: str
    flavor: str
    kind: str = "ephemeral-disk"
    boot_disk: bool = False
    capacity_gb: int | None = None
    id: str | None = None
    state: str | None = None


class VM(Resource):
    flavor: str | None = None
    source_image_id: str | None = None
    host: str | None = None
    datastore: str | None = None
    attached_disks: list[AttachedDisk] = Field(default_factory=list)
    metadata: dict[str, str] = Field(default_factory=dict)


class VMCreateSpec(PhotonModel):
    name: str
    flavor: str
    source_image_id: str
    attached_disks: list[AttachedDisk]
    environment: dict[str, str] | None = None
    subnets: list[str] | None = None
    affinities: list[dict[str, Any]] | None = None


class VMDiskOperation(PhotonModel):
    disk_id: str
    arguments: dict[str, str] | None = None


class VMNetwork(PhotonModel):
    network: str | None = None
    mac_address: str | None = None
    ip_address: str | None = None
    netmask: str | None = None
    is_connected: str | bool | None = None
