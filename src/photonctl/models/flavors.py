from __future__ import annotations

from pydantic import Field

from photonctl.models.common import PhotonModel, QuotaLineItem, Resource

FLAVOR_KINDS = ("persistent-disk", "ephemeral-disk", "vm")


class Flavor(Resource):
    """A named cost sheet that VMs and disks are created against."""

    cost: list[QuotaLineItem] = Field(default_factory=list)


class FlavorCreateSpec(PhotonModel):
    name: str
    kind: str
    cost: list[QuotaLineItem] = Field(default_factory=list)
