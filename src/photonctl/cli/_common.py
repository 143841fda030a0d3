from __future__ import annotations

import asyncio
import sys
from collections.abc import Coroutine, Iterable, Sequence
from enum import StrEnum
from pathlib import Path
from typing import Annotated, Any, TypeVar

import typer

from photonctl.client import AsyncPhotonClient
from photonctl.config import ConfigManager
from photonctl.errors import ConfigError
from photonctl.models import QuotaLineItem, Task
from photonctl.polling import WaitPolicy, wait_for_task
from photonctl.utils.output import emit, emit_rows

T = TypeVar("T")

TenantOption = Annotated[str | None, typer.Option("--tenant", "-t", help="Tenant name (defaults to the selected one)")]
ProjectOption = Annotated[
    str | None,
    typer.Option("--project", "-p", help="Project name (defaults to the selected one)"),
]


class OutputChoice(StrEnum):
    JSON = "json"
    YAML = "yaml"


class CLIState:
    def __init__(
        self,
        *,
        config_file: Path | None = None,
        output: OutputChoice | None = None,
        non_interactive: bool = False,
        detail: bool = False,
    ) -> None:
        self.config_file = config_file
        self.output = output
        self.non_interactive = non_interactive
        self.detail = detail

    @property
    def machine(self) -> bool:
        """True when no progress or prose should be printed."""

        return self.non_interactive or self.output is not None

    def config_manager(self) -> ConfigManager:
        return ConfigManager(self.config_file)


def _run(awaitable: Coroutine[Any, Any, T]) -> T:
    return asyncio.run(awaitable)


def _state(ctx: typer.Context) -> CLIState:
    obj = ctx.obj
    if not isinstance(obj, CLIState):
        raise typer.BadParameter("CLI context was not initialized")
    return obj


def _make_client(state: CLIState) -> AsyncPhotonClient:
    return AsyncPhotonClient(config_path=state.config_file)


def _emit(
    state: CLIState,
    value: Any,
    *,
    columns: Sequence[str] | None = None,
    table: Any = None,
    rows: Iterable[Sequence[Any]] | None = None,
) -> None:
    """Print a fetched resource or list in the active output mode.

    `table` replaces `value` for the human-readable view and `rows` is the
    tab-separated rendering used with `--non-interactive`.
    """

    if state.output is not None:
        emit(value, output=state.output.value)
        return
    if state.non_interactive and rows is not None:
        emit_rows(rows)
        return
    emit(value if table is None else table, output="table", columns=columns)


async def _wait_on_task(
    client: AsyncPhotonClient,
    state: CLIState,
    task: Task,
    *,
    timeout: float | None = None,
    report: bool = True,
) -> Task:
    """Wait for `task` and report its entity the way the active output mode expects.

    With `report=False` nothing is printed besides the progress line.
    """

    if state.machine:
        done = await client.tasks.wait(task.id, timeout=timeout)
        if report and state.output is None:
            typer.echo(done.entity.id)
        return done

    policy = WaitPolicy.for_tasks(client.polling, timeout=timeout)
    done = await wait_for_task(client.tasks.get, task.id, policy=policy, progress=sys.stdout)
    if report:
        typer.echo(f"{done.operation} completed for '{done.entity.kind}' entity {done.entity.id}")
    return done


async def _resolve_tenant_id(client: AsyncPhotonClient, tenant: str | None) -> str:
    if tenant:
        return (await client.tenants.find_by_name(tenant)).id
    if client.config.tenant is None:
        raise ConfigError("Set tenant first using 'tenant set <name>' or '-t <name>' option")
    return client.config.tenant.id


async def _resolve_project_id(client: AsyncPhotonClient, tenant: str | None, project: str | None) -> str:
    if project:
        tenant_id = await _resolve_tenant_id(client, tenant)
        return (await client.projects.find_by_name(tenant_id, project)).id
    if client.config.project is None:
        raise ConfigError("Set project first using 'project set <name>' or '-p <name>' option")
    return client.config.project.id


def _split_csv(value: str | None) -> list[str]:
    if not value:
        return []
    return [item.strip() for item in value.split(",") if item.strip()]


def _parse_limits(value: str | None, *, param_hint: str = "--limits") -> list[QuotaLineItem]:
    """Parse `key value unit` triples separated by commas, e.g. `vm.cpu 10 COUNT, vm.memory 20 GB`."""

    limits: list[QuotaLineItem] = []
    for entry in _split_csv(value):
        parts = entry.split()
        if len(parts) != 3:
            raise typer.BadParameter(f"expected 'key value unit', got: {entry}", param_hint=param_hint)
        key, amount, unit = parts
        try:
            limits.append(QuotaLineItem(key=key, value=float(amount), unit=unit))
        except ValueError as exc:
            raise typer.BadParameter(f"invalid limit value: {amount}", param_hint=param_hint) from exc
    return limits


def _parse_key_values(entries: Iterable[str]) -> dict[str, str]:
    parsed: dict[str, str] = {}
    for entry in entries:
        if "=" not in entry:
            raise typer.BadParameter(f"expected key=value format, got: {entry}")
        key, value = entry.split("=", 1)
        parsed[key.strip()] = value.strip()
    return parsed


def _api_error_codes(errors: Iterable[Any], delimiter: str = ", ") -> str:
    return delimiter.join(error.code for error in errors)
