from __future__ import annotations

from typing import Annotated

import typer

from photonctl.cli._common import (
    ProjectOption,
    TenantOption,
    _emit,
    _make_client,
    _resolve_project_id,
    _run,
    _state,
    _wait_on_task,
)
from photonctl.models import Router, RouterCreateSpec, Task
from photonctl.utils.prompts import ask_for_input, confirmed

router_app = typer.Typer(no_args_is_help=True, help="Manage project routers")

RouterArgument = Annotated[str, typer.Argument(help="Router id")]


@router_app.command("create")
def router_create(
    ctx: typer.Context,
    name: Annotated[str | None, typer.Option("--name", "-n", help="Router name")] = None,
    private_ip_cidr: Annotated[str | None, typer.Option("--privateIpCidr", "-i", help="Private IP range")] = None,
    tenant: TenantOption = None,
    project: ProjectOption = None,
) -> None:
    state = _state(ctx)
    spec = RouterCreateSpec(
        name=ask_for_input("Router name: ", name, non_interactive=state.non_interactive),
        private_ip_cidr=ask_for_input(
            "Private IP range (CIDR): ",
            private_ip_cidr,
            non_interactive=state.non_interactive,
        ),
    )

    async def run() -> Router | None:
        async with _make_client(state) as client:
            project_id = await _resolve_project_id(client, tenant, project)
            done = await _wait_on_task(client, state, await client.routers.create(project_id, spec))
            if state.output is not None:
                return await client.routers.get(done.entity.id)
            return None

    created = _run(run())
    if created is not None:
        _emit(state, created)


@router_app.command("delete")
def router_delete(ctx: typer.Context, router_id: RouterArgument) -> None:
    state = _state(ctx)
    if not confirmed(f"Delete router {router_id}?", non_interactive=state.non_interactive):
        typer.echo("OK. Canceled")
        return

    async def run() -> Task:
        async with _make_client(state) as client:
            return await _wait_on_task(client, state, await client.routers.delete(router_id))

    _run(run())


@router_app.command("list")
def router_list(
    ctx: typer.Context,
    name: Annotated[str | None, typer.Option("--name", "-n", help="Filter by router name")] = None,
    tenant: TenantOption = None,
    project: ProjectOption = None,
) -> None:
    state = _state(ctx)

    async def run() -> list[Router]:
        async with _make_client(state) as client:
            project_id = await _resolve_project_id(client, tenant, project)
            return await client.routers.list(project_id, name=name)

    routers = _run(run())
    _emit(
        state,
        routers,
        table=[
            {"ID": router.id, "Name": router.name, "PrivateIpCidr": router.private_ip_cidr or ""}
            for router in routers
        ],
        rows=[(router.id, router.name, router.private_ip_cidr or "") for router in routers],
    )


@router_app.command("show")
def router_show(ctx: typer.Context, router_id: RouterArgument) -> None:
    state = _state(ctx)

    async def run() -> Router:
        async with _make_client(state) as client:
            return await client.routers.get(router_id)

    router = _run(run())
    _emit(
        state,
        router,
        table={
            "ID": router.id,
            "Name": router.name,
            "State": router.state or "",
            "PrivateIpCidr": router.private_ip_cidr or "",
        },
        rows=[(router.id, router.name, router.state or "", router.private_ip_cidr or "")],
    )
