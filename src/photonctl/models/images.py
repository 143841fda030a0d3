from __future__ import annotations

from photonctl.models.common import Resource


class Image(Resource):
    size: int | None = None
    replication_type: str | None = None
    replication_progress: str | None = None
    seeding_progress: str | None = None
    scope: dict[str, str] | None = None
