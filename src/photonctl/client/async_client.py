from __future__ import annotations

from collections.abc import Mapping
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any

import httpx

from photonctl.config import CLIConfig, ConfigInput, PollingConfig, RetryConfig, load_config
from photonctl.errors import ConfigError
from photonctl.http import PhotonTransport
from photonctl.services import (
    ClustersService,
    DisksService,
    FlavorsService,
    HostsService,
    ImagesService,
    NetworksService,
    ProjectsService,
    RoutersService,
    ServicesService,
    SubnetsService,
    TasksService,
    TenantsService,
    VMsService,
)
from photonctl.settings import RuntimeSettings

JsonObject = dict[str, Any]
RequestParams = Mapping[str, str | int | float | bool]

NO_TARGET_MESSAGE = "Specify a Photon Controller endpoint by running 'target set' command"


def _secret_to_str(value: object) -> str | None:
    if value is None:
        return None
    getter = getattr(value, "get_secret_value", None)
    if callable(getter):
        secret = getter()
        return str(secret) if secret else None
    raw = str(value)
    return raw if raw else None


class AsyncPhotonClient:
    """Async Photon Controller API client."""

    def __init__(
        self,
        config: ConfigInput | None = None,
        *,
        config_path: str | Path | None = None,
        target: str | None = None,
        token: str | None = None,
        ignore_certificate: bool | None = None,
        request_timeout_seconds: float | None = None,
        retries: RetryConfig | None = None,
        polling: PollingConfig | None = None,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self._runtime = RuntimeSettings()
        resolved = load_config(config, config_path=config_path)
        self._resolved_config = resolved
        self.config: CLIConfig = resolved.data

        self.target = target or self._runtime.target or self.config.target
        if not self.target:
            raise ConfigError(NO_TARGET_MESSAGE)
        self.target = self.target.rstrip("/")

        self._token = token or _secret_to_str(self._runtime.token) or _secret_to_str(self.config.token)

        self.ignore_certificate = (
            ignore_certificate
            if ignore_certificate is not None
            else (
                self._runtime.ignore_certificate
                if self._runtime.ignore_certificate is not None
                else self.config.ignore_certificate
            )
        )
        self.request_timeout_seconds = (
            request_timeout_seconds
            if request_timeout_seconds is not None
            else (
                self._runtime.request_timeout_seconds
                if self._runtime.request_timeout_seconds is not None
                else self.config.request_timeout_seconds
            )
        )
        self.polling: PollingConfig = polling or self.config.polling

        self._transport = PhotonTransport(
            base_url=self.target,
            timeout=self.request_timeout_seconds,
            verify_tls=not self.ignore_certificate,
            retry_config=retries or self.config.retry,
            token_provider=lambda: self._token,
            http_client=http_client,
        )

        self._tasks: TasksService | None = None
        self._tenants: TenantsService | None = None
        self._projects: ProjectsService | None = None
        self._vms: VMsService | None = None
        self._disks: DisksService | None = None
        self._flavors: FlavorsService | None = None
        self._images: ImagesService | None = None
        self._hosts: HostsService | None = None
        self._networks: NetworksService | None = None
        self._subnets: SubnetsService | None = None
        self._routers: RoutersService | None = None
        self._clusters: ClustersService | None = None
        self._services: ServicesService | None = None

    @property
    def config_path(self) -> Path | None:
        return self._resolved_config.path

    @property
    def access_token(self) -> str | None:
        return self._token

    @property
    def tasks(self) -> TasksService:
        if self._tasks is None:
            self._tasks = TasksService(self)
        return self._tasks

    @property
    def tenants(self) -> TenantsService:
        if self._tenants is None:
            self._tenants = TenantsService(self)
        return self._tenants

    @property
    def projects(self) -> ProjectsService:
        if self._projects is None:
            self._projects = ProjectsService(self)
        return self._projects

    @property
    def vms(self) -> VMsService:
        if self._vms is None:
            self._vms = VMsService(self)
        return self._vms

    @property
    def disks(self) -> DisksService:
        if self._disks is None:
            self._disks = DisksService(self)
        return self._disks

    @property
    def flavors(self) -> FlavorsService:
        if self._flavors is None:
            self._flavors = FlavorsService(self)
        return self._flavors

    @property
    def images(self) -> ImagesService:
        if self._images is None:
            self._images = ImagesService(self)
        return self._images

    @property
    def hosts(self) -> HostsService:
        if self._hosts is None:
            self._hosts = HostsService(self)
        return self._hosts

    @property
    def networks(self) -> NetworksService:
        if self._networks is None:
            self._networks = NetworksService(self)
        return self._networks

    @property
    def subnets(self) -> SubnetsService:
        if self._subnets is None:
            self._subnets = SubnetsService(self)
        return self._subnets

    @property
    def routers(self) -> RoutersService:
        if self._routers is None:
            self._routers = RoutersService(self)
        return self._routers

    @property
    def clusters(self) -> ClustersService:
        if self._clusters is None:
            self._clusters = ClustersService(self)
        return self._clusters

    @property
    def services(self) -> ServicesService:
        if self._services is None:
            self._services = ServicesService(self)
        return self._services

    async def __aenter__(self) -> AsyncPhotonClient:
        return self

    async def __aexit__(self, exc_type: object, exc: object, tb: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._transport.aclose()

    async def _request_json(
        self,
        method: str,
        path: str,
        *,
        params: RequestParams | None = None,
        json_data: Mapping[str, Any] | None = None,
        files: Mapping[str, tuple[str, Any, str]] | None = None,
        form_data: Mapping[str, str] | None = None,
    ) -> JsonObject:
        return await self._transport.request_json(
            method,
            path,
            params=params,
            json_data=json_data,
            files=files,
            form_data=form_data,
        )


@asynccontextmanager
async def connect(*args: Any, **kwargs: Any):
    client = AsyncPhotonClient(*args, **kwargs)
    try:
        yield client
    finally:
        await client.aclose()
