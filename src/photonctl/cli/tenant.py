from __future__ import annotations

from typing import Annotated

import typer

from photonctl.cli._common import _emit, _make_client, _run, _split_csv, _state, _wait_on_task
from photonctl.cli.task import print_task_list
from photonctl.models import Task, Tenant, TenantCreateSpec
from photonctl.utils.prompts import ask_for_input, confirmed

tenant_app = typer.Typer(no_args_is_help=True, help="Manage tenants")


@tenant_app.command("create")
def tenant_create(
    ctx: typer.Context,
    name: Annotated[str | None, typer.Argument(help="Tenant name")] = None,
    security_groups: Annotated[
        str | None,
        typer.Option("--security-groups", "-s", help="Comma-separated security groups"),
    ] = None,
) -> None:
    state = _state(ctx)
    name = ask_for_input("Tenant name: ", name, non_interactive=state.non_interactive)
    spec = TenantCreateSpec(name=name, security_groups=_split_csv(security_groups) or None)

    async def run() -> Tenant | None:
        async with _make_client(state) as client:
            task = await client.tenants.create(spec)
            done = await _wait_on_task(client, state, task)
            if state.output is not None:
                return await client.tenants.get(done.entity.id)
            return None

    created = _run(run())
    if created is not None:
        _emit(state, created)


@tenant_app.command("delete")
def tenant_delete(ctx: typer.Context, tenant_id: Annotated[str, typer.Argument(help="Tenant id")]) -> None:
    state = _state(ctx)
    if not confirmed(f"Delete tenant {tenant_id}?", non_interactive=state.non_interactive):
        typer.echo("OK. Canceled")
        return

    async def run() -> Task:
        async with _make_client(state) as client:
            task = await client.tenants.delete(tenant_id)
            return await _wait_on_task(client, state, task)

    _run(run())
    state.config_manager().clear_tenant(tenant_id)


@tenant_app.command("list")
def tenant_list(ctx: typer.Context) -> None:
    state = _state(ctx)

    async def run() -> list[Tenant]:
        async with _make_client(state) as client:
            return await client.tenants.list()

    tenants = _run(run())
    _emit(
        state,
        tenants,
        table=[{"ID": tenant.id, "Name": tenant.name} for tenant in tenants],
        rows=[(tenant.id, tenant.name) for tenant in tenants],
    )


@tenant_app.command("show")
def tenant_show(ctx: typer.Context, tenant_id: Annotated[str, typer.Argument(help="Tenant id")]) -> None:
    state = _state(ctx)

    async def run() -> Tenant:
        async with _make_client(state) as client:
            return await client.tenants.get(tenant_id)

    tenant = _run(run())
    groups = ",".join(f"{group.name}:{group.inherited}" for group in tenant.security_groups)
    _emit(
        state,
        tenant,
        table={"ID": tenant.id, "Name": tenant.name, "Security Groups": groups},
        rows=[(tenant.id, tenant.name, groups)],
    )


@tenant_app.command("set")
def tenant_set(ctx: typer.Context, name: Annotated[str, typer.Argument(help="Tenant name")]) -> None:
    """Select the tenant used by commands that take `--tenant`."""

    state = _state(ctx)

    async def run() -> Tenant:
        async with _make_client(state) as client:
            return await client.tenants.find_by_name(name)

    tenant = _run(run())
    state.config_manager().set_tenant(tenant.name, tenant.id)
    if not state.machine:
        typer.echo(f"Tenant set to '{tenant.name}'")


@tenant_app.command("get")
def tenant_get(ctx: typer.Context) -> None:
    state = _state(ctx)
    selected = state.config_manager().load().tenant
    if selected is None:
        if not state.machine:
            typer.echo("No tenant selected")
        return
    if state.output is not None:
        _emit(state, selected)
    elif state.non_interactive:
        typer.echo(f"{selected.id}\t{selected.name}")
    else:
        typer.echo(f"Current tenant is '{selected.name}' with ID {selected.id}")


@tenant_app.command("tasks")
def tenant_tasks(
    ctx: typer.Context,
    tenant_id: Annotated[str, typer.Argument(help="Tenant id")],
    task_state: Annotated[str | None, typer.Option("--state", "-s", help="Filter by task state")] = None,
) -> None:
    state = _state(ctx)

    async def run() -> list[Task]:
        async with _make_client(state) as client:
            return await client.tenants.tasks(tenant_id, state=task_state)

    print_task_list(state, _run(run()))


@tenant_app.command("set-security-groups")
def tenant_set_security_groups(
    ctx: typer.Context,
    tenant_id: Annotated[str, typer.Argument(help="Tenant id")],
    security_groups: Annotated[str, typer.Argument(help="Comma-separated security groups")],
) -> None:
    state = _state(ctx)

    async def run() -> Task:
        async with _make_client(state) as client:
            task = await client.tenants.set_security_groups(tenant_id, _split_csv(security_groups))
            return await _wait_on_task(client, state, task)

    _run(run())
