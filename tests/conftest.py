from __future__ import annotations

from collections import defaultdict, deque
from collections.abc import Iterator
from pathlib import Path
from typing import Any

import httpx
import pytest

from photonctl.cli import _common
from photonctl.client import AsyncPhotonClient

TARGET = "http://photon.test:9000"

FAST_POLLING = {
    "task_timeout": 2.0,
    "task_poll_interval": 0.001,
    "ready_timeout": 2.0,
    "ready_poll_interval": 0.001,
    "max_consecutive_errors": 3,
    "render_interval": 0.005,
}


def task_payload(
    task_id: str,
    state: str,
    *,
    operation: str = "CREATE_TENANT",
    entity_id: str = "tenant-1",
    entity_kind: str = "tenant",
    steps: list[dict[str, Any]] | None = None,
    **extra: Any,
) -> dict[str, Any]:
    return {
        "id": task_id,
        "state": state,
        "operation": operation,
        "entity": {"id": entity_id, "kind": entity_kind},
        "steps": steps or [],
        **extra,
    }


def step_payload(
    sequence: int,
    state: str,
    *,
    operation: str = "RESERVE_RESOURCE",
    errors: list[dict[str, Any]] | None = None,
) -> dict[str, Any]:
    return {"sequence": sequence, "operation": operation, "state": state, "errors": errors or []}


class FakePhotonAPI:
    """Scripted in-memory Photon Controller endpoint for `httpx.MockTransport`.

    Each route returns its queued responses in order and keeps repeating the
    last one.
    """

    def __init__(self) -> None:
        self.routes: dict[tuple[str, str], deque[Any]] = {}
        self.requests: list[httpx.Request] = []
        self.hits: defaultdict[tuple[str, str], int] = defaultdict(int)
        self.config: dict[str, Any] = {"target": TARGET, "polling": dict(FAST_POLLING)}

    def add(self, method: str, path: str, *responses: Any) -> None:
        self.routes[(method.upper(), path)] = deque(responses)

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        key = (request.method, request.url.path)
        self.hits[key] += 1
        queue = self.routes.get(key)
        if not queue:
            return httpx.Response(404, json={"code": "NotFound", "message": f"no route for {key}"})
        response = queue.popleft() if len(queue) > 1 else queue[0]
        if isinstance(response, httpx.Response):
            return response
        return httpx.Response(200, json=response)


class _MockedClient(AsyncPhotonClient):
    def __init__(self, api: FakePhotonAPI) -> None:
        self._http = httpx.AsyncClient(base_url=TARGET, transport=httpx.MockTransport(api.handle))
        super().__init__(config=api.config, http_client=self._http)

    async def aclose(self) -> None:
        await super().aclose()
        await self._http.aclose()


@pytest.fixture(autouse=True)
def isolated_home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Iterator[Path]:
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    for name in (
        "PHOTON_CONFIG",
        "PHOTON_CONFIG_FILE",
        "PHOTON_TARGET",
        "PHOTON_ENDPOINT",
        "PHOTON_TOKEN",
        "PHOTON_ACCESS_TOKEN",
        "PHOTON_IGNORE_CERTIFICATE",
        "PHOTON_NOCERTCHECK",
        "PHOTON_REQUEST_TIMEOUT_SECONDS",
    ):
        monkeypatch.delenv(name, raising=False)
    yield home


@pytest.fixture()
def photon_api(monkeypatch: pytest.MonkeyPatch) -> FakePhotonAPI:
    """Route every client the CLI builds to a fresh `FakePhotonAPI`."""

    api = FakePhotonAPI()
    monkeypatch.setattr(_common, "AsyncPhotonClient", lambda **_kwargs: _MockedClient(api))
    return api
