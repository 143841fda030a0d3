from __future__ import annotations

from enum import StrEnum

from pydantic import Field

from photonctl.models.common import PhotonModel, Resource


class ClusterState(StrEnum):
    READY = "READY"
    ERROR = "ERROR"


class ExtendedProperty(StrEnum):
    """Keys understood in `ClusterCreateSpec.extended_properties`."""

    DNS = "dns"
    GATEWAY = "gateway"
    NETMASK = "netmask"
    MASTER_IP = "master_ip"
    CONTAINER_NETWORK = "container_network"
    ETCD_IP1 = "etcd_ip1"
    ETCD_IP2 = "etcd_ip2"
    ETCD_IP3 = "etcd_ip3"
    SSH_KEY = "ssh_key"
    REGISTRY_CA_CERT = "registry_ca_cert"
    ADMIN_PASSWORD = "admin_password"


class Cluster(Resource):
    """A provisioned cluster or service (Kubernetes, Harbor, ...)."""

    type: str | None = None
    worker_count: int = 0
    project_id: str | None = None
    extended_properties: dict[str, str] = Field(default_factory=dict)
    error_reason: str | None = None


class ClusterCreateSpec(PhotonModel):
    name: str
    type: str
    worker_count: int
    vm_flavor: str | None = None
    master_vm_flavor: str | None = None
    worker_vm_flavor: str | None = None
    disk_flavor: str | None = None
    vm_network_id: str | None = None
    image_id: str | None = None
    batch_size_worker: int | None = None
    extended_properties: dict[str, str] = Field(default_factory=dict)


class ClusterResizeSpec(PhotonModel):
    new_worker_count: int
