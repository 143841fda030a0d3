from __future__ import annotations

import json
from pathlib import Path

import httpx
import pytest
from conftest import FAST_POLLING, TARGET, task_payload

from photonctl.client import AsyncPhotonClient
from photonctl.config import RetryConfig
from photonctl.errors import APIError, ConfigError, NotFoundError
from photonctl.http import RetryPolicy
from photonctl.models import ClusterCreateSpec, FlavorCreateSpec, QuotaLineItem, TenantCreateSpec

NO_RETRY_DELAY = RetryConfig(max_attempts=2, base_delay=0.0, max_delay=0.0, jitter=0.0)


def _client(handler, **kwargs) -> tuple[AsyncPhotonClient, httpx.AsyncClient]:
    http_client = httpx.AsyncClient(base_url=TARGET, transport=httpx.MockTransport(handler))
    config = {"target": TARGET, "token": "token-123", "polling": FAST_POLLING}
    return AsyncPhotonClient(config=config, http_client=http_client, **kwargs), http_client


def test_missing_target_is_a_config_error() -> None:
    with pytest.raises(ConfigError, match="target set"):
        AsyncPhotonClient(config={})


def test_target_resolution_order(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("PHOTON_TARGET", "https://env.example/")

    from_env = AsyncPhotonClient(config={"target": "https://file.example"})
    explicit = AsyncPhotonClient(config={"target": "https://file.example"}, target="https://arg.example")

    assert from_env.target == "https://env.example"
    assert explicit.target == "https://arg.example"


def test_ignore_certificate_and_token_from_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("PHOTON_TOKEN", "env-token")
    monkeypatch.setenv("PHOTON_IGNORE_CERTIFICATE", "true")

    client = AsyncPhotonClient(config={"target": TARGET, "token": "file-token"})

    assert client.access_token == "env-token"
    assert client.ignore_certificate is True


@pytest.mark.asyncio
async def test_list_follows_next_page_link_and_sends_token() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        if request.url.params.get("pageLink") == "page-2":
            return httpx.Response(200, json={"items": [{"id": "t-2", "name": "beta"}]})
        return httpx.Response(
            200,
            json={"items": [{"id": "t-1", "name": "alpha"}], "nextPageLink": "/tenants?pageLink=page-2"},
        )

    client, http_client = _client(handler)
    async with http_client:
        tenants = await client.tenants.list(name="alpha")
        await client.aclose()

    assert [tenant.id for tenant in tenants] == ["t-1", "t-2"]
    assert seen[0].url.params.get("name") == "alpha"
    assert seen[0].headers["Authorization"] == "Bearer token-123"
    assert seen[0].headers["Accept"] == "application/json"
    assert "name" not in seen[1].url.params


@pytest.mark.asyncio
async def test_api_error_is_parsed() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(404, json={"code": "TenantNotFound", "message": "Tenant t-9 not found"})

    client, http_client = _client(handler)
    async with http_client:
        with pytest.raises(APIError) as excinfo:
            await client.tenants.get("t-9")

    error = excinfo.value
    assert error.status_code == 404
    assert error.code == "TenantNotFound"
    assert str(error) == "HTTP 404 TenantNotFound: Tenant t-9 not found"
    assert error.payload == {"code": "TenantNotFound", "message": "Tenant t-9 not found"}


@pytest.mark.asyncio
async def test_transient_status_is_retried() -> None:
    calls = {"count": 0}

    def handler(request: httpx.Request) -> httpx.Response:
        calls["count"] += 1
        if calls["count"] == 1:
            return httpx.Response(503, json={"message": "busy"})
        return httpx.Response(200, json={"id": "host-1", "state": "READY", "usageTags": ["CLOUD"]})

    client, http_client = _client(handler, retries=NO_RETRY_DELAY)
    async with http_client:
        host = await client.hosts.get("host-1")

    assert calls["count"] == 2
    assert host.usage_tags == ["CLOUD"]


@pytest.mark.asyncio
async def test_create_sends_camel_case_payload_and_returns_task() -> None:
    bodies: list[dict[str, object]] = []

    def handler(request: httpx.Request) -> httpx.Response:
        bodies.append(json.loads(request.content))
        return httpx.Response(200, json=task_payload("task-1", "QUEUED", operation="CREATE_CLUSTER"))

    spec = ClusterCreateSpec(name="k8s", type="KUBERNETES", worker_count=2, vm_network_id="net-1")
    client, http_client = _client(handler)
    async with http_client:
        task = await client.clusters.create("project-1", spec)
        await client.tenants.create(TenantCreateSpec(name="demo"))

    assert task.operation == "CREATE_CLUSTER"
    assert bodies[0]["workerCount"] == 2
    assert bodies[0]["vmNetworkId"] == "net-1"
    assert "diskFlavor" not in bodies[0]
    assert bodies[1] == {"name": "demo"}


@pytest.mark.asyncio
async def test_find_by_name_requires_exactly_one_match() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path == "/tenants":
            return httpx.Response(200, json={"items": []})
        return httpx.Response(200, json={"items": [{"id": "p-1", "name": "web"}, {"id": "p-2", "name": "web"}]})

    client, http_client = _client(handler)
    async with http_client:
        with pytest.raises(NotFoundError, match="Tenant name 'demo' not found"):
            await client.tenants.find_by_name("demo")
        with pytest.raises(NotFoundError, match="more than 1"):
            await client.projects.find_by_name("tenant-1", "web")


@pytest.mark.asyncio
async def test_tasks_wait_uses_client_polling() -> None:
    states = iter(["QUEUED", "STARTED", "COMPLETED"])

    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path == "/tasks/task-1"
        return httpx.Response(200, json=task_payload("task-1", next(states), entity_id="vm-1", entity_kind="vm"))

    client, http_client = _client(handler)
    async with http_client:
        task = await client.tasks.wait("task-1")

    assert task.entity.id == "vm-1"
    assert client.polling.task_poll_interval == FAST_POLLING["task_poll_interval"]


@pytest.mark.asyncio
async def test_service_wait_ready_polls_service_endpoint() -> None:
    states = iter(["CREATING", "READY"])
    paths: list[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        paths.append(request.url.path)
        return httpx.Response(200, json={"id": "svc-1", "name": "harbor", "state": next(states), "type": "HARBOR"})

    client, http_client = _client(handler)
    async with http_client:
        service = await client.services.wait_ready("svc-1")

    assert service.type == "HARBOR"
    assert paths == ["/services/svc-1", "/services/svc-1"]


@pytest.mark.asyncio
async def test_image_upload_is_multipart(tmp_path: Path) -> None:
    image = tmp_path / "photon.ova"
    image.write_bytes(b"\x00image-bytes")
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json=task_payload("task-1", "QUEUED", operation="CREATE_IMAGE"))

    client, http_client = _client(handler)
    async with http_client:
        task = await client.images.upload(image, replication="ON_DEMAND")

    assert task.operation == "CREATE_IMAGE"
    assert seen[0].headers["Content-Type"].startswith("multipart/form-data")
    body = seen[0].content
    assert b'name="imagereplication"' in body
    assert b"ON_DEMAND" in body
    assert b'filename="photon.ova"' in body


@pytest.mark.asyncio
async def test_vm_networks_task_and_disk_operations() -> None:
    seen: list[tuple[str, str, bytes]] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append((request.method, request.url.path, request.content))
        return httpx.Response(200, json=task_payload("task-1", "QUEUED", operation="ATTACH_DISK"))

    client, http_client = _client(handler)
    async with http_client:
        await client.vms.get_networks("vm-1")
        await client.vms.attach_disk("vm-1", "disk-1")
        await client.vms.power("vm-1", "restart")

    assert seen[0][:2] == ("GET", "/vms/vm-1/subnets")
    assert seen[1][:2] == ("POST", "/vms/vm-1/attach_disk")
    assert json.loads(seen[1][2]) == {"diskId": "disk-1"}
    assert seen[2][:2] == ("POST", "/vms/vm-1/restart")


def test_retry_backoff_is_capped_and_honours_retry_after() -> None:
    policy = RetryPolicy(RetryConfig(max_attempts=0, base_delay=0.5, max_delay=1.0, jitter=0.0))

    assert policy.attempts == 1
    assert policy.backoff(1) == 0.5
    assert policy.backoff(3) == 1.0
    assert policy.retry_after(httpx.Response(503, headers={"Retry-After": "30"})) == 1.0
    assert policy.retry_after(httpx.Response(503, headers={"Retry-After": "Wed, 21 Oct 2026 07:28:00 GMT"})) is None
    assert policy.retryable_error(httpx.ReadError("reset"))
    assert not policy.retryable_error(ValueError("boom"))


@pytest.mark.asyncio
async def test_flavors_service_routes() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        if request.method == "GET" and request.url.path == "/flavors":
            return httpx.Response(200, json={"items": [{"id": "flavor-1", "name": "small", "kind": "vm"}]})
        if request.method == "GET":
            cost = [{"key": "vm.cpu", "value": 1, "unit": "COUNT"}]
            return httpx.Response(200, json={"id": "flavor-1", "name": "small", "kind": "vm", "cost": cost})
        return httpx.Response(200, json=task_payload("task-1", "QUEUED", operation="CREATE_FLAVOR"))

    spec = FlavorCreateSpec(name="small", kind="vm", cost=[QuotaLineItem(key="vm.cpu", value=1)])
    client, http_client = _client(handler)
    async with http_client:
        flavors = await client.flavors.list(kind="vm")
        flavor = await client.flavors.get("flavor-1")
        task = await client.flavors.create(spec)
        await client.flavors.delete("flavor-1")

    assert [item.id for item in flavors] == ["flavor-1"]
    assert dict(seen[0].url.params) == {"kind": "vm"}
    assert str(flavor.cost[0]) == "vm.cpu:1:COUNT"
    assert task.operation == "CREATE_FLAVOR"
    assert json.loads(seen[2].content) == {
        "name": "small",
        "kind": "vm",
        "cost": [{"key": "vm.cpu", "value": 1.0, "unit": "COUNT"}],
    }
    assert (seen[3].method, seen[3].url.path) == ("DELETE", "/flavors/flavor-1")
