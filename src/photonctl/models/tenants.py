from __future__ import annotations

from pydantic import Field

from photonctl.models.common import PhotonModel, QuotaLineItem, Resource


class SecurityGroup(PhotonModel):
    name: str
    inherited: bool = False


class Tenant(Resource):
    security_groups: list[SecurityGroup] = Field(default_factory=list)


class TenantCreateSpec(PhotonModel):
    name: str
    security_groups: list[str] | None = None


class Project(Resource):
    tenant_id: str | None = None
    security_groups: list[SecurityGroup] = Field(default_factory=list)
    quota: dict[str, QuotaLineItem] | list[QuotaLineItem] | None = None


class ProjectCreateSpec(PhotonModel):
    name: str
    security_groups: list[str] | None = None
    limits: list[QuotaLineItem] | None = None
