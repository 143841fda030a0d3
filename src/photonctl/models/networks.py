from __future__ import annotations

from pydantic import Field

from photonctl.models.common import PhotonModel, Resource


class Network(Resource):
    description: str | None = None
    port_groups: list[str] = Field(default_factory=list)
    is_default: bool = False


class NetworkCreateSpec(PhotonModel):
    name: str
    port_groups: list[str]
    description: str | None = None


class Subnet(Resource):
    description: str | None = None
    cidr: str | None = None
    private_ip_cidr: str | None = None
    is_default: bool = False
    reserved_ips: dict[str, str] = Field(default_factory=dict)


class SubnetCreateSpec(PhotonModel):
    name: str
    private_ip_cidr: str
    description: str | None = None
    router_id: str | None = None
    dns_server_addresses: list[str] | None = None


class Router(Resource):
    private_ip_cidr: str | None = None


class RouterCreateSpec(PhotonModel):
    name: str
    private_ip_cidr: str
