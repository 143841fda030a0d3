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
    _split_csv,
    _state,
    _wait_on_task,
)
from photonctl.models import Subnet, SubnetCreateSpec, Task
from photonctl.utils.prompts import ask_for_input, confirmed

subnet_app = typer.Typer(no_args_is_help=True, help="Manage project subnets")

SubnetArgument = Annotated[str, typer.Argument(help="Subnet id")]


@subnet_app.command("create")
def subnet_create(
    ctx: typer.Context,
    name: Annotated[str | None, typer.Option("--name", "-n", help="Subnet name")] = None,
    description: Annotated[str | None, typer.Option("--description", "-d", help="Description")] = None,
    private_ip_cidr: Annotated[str | None, typer.Option("--privateIpCidr", "-i", help="Private IP range")] = None,
    router: Annotated[str | None, typer.Option("--router", "-r", help="Router id")] = None,
    dns_servers: Annotated[
        str | None,
        typer.Option("--dns", help="Comma-separated DNS server addresses"),
    ] = None,
    tenant: TenantOption = None,
    project: ProjectOption = None,
) -> None:
    state = _state(ctx)
    spec = SubnetCreateSpec(
        name=ask_for_input("Subnet name: ", name, non_interactive=state.non_interactive),
        private_ip_cidr=ask_for_input(
            "Private IP range (CIDR): ",
            private_ip_cidr,
            non_interactive=state.non_interactive,
        ),
        description=description,
        router_id=router,
        dns_server_addresses=_split_csv(dns_servers) or None,
    )

    async def run() -> Subnet | None:
        async with _make_client(state) as client:
            project_id = await _resolve_project_id(client, tenant, project)
            done = await _wait_on_task(client, state, await client.subnets.create(project_id, spec))
            if state.output is not None:
                return await client.subnets.get(done.entity.id)
            return None

    created = _run(run())
    if created is not None:
        _emit(state, created)


@subnet_app.command("delete")
def subnet_delete(ctx: typer.Context, subnet_id: SubnetArgument) -> None:
    state = _state(ctx)
    if not confirmed(f"Delete subnet {subnet_id}?", non_interactive=state.non_interactive):
        typer.echo("OK. Canceled")
        return

    async def run() -> Task:
        async with _make_client(state) as client:
            return await _wait_on_task(client, state, await client.subnets.delete(subnet_id))

    _run(run())


@subnet_app.command("list")
def subnet_list(
    ctx: typer.Context,
    name: Annotated[str | None, typer.Option("--name", "-n", help="Filter by subnet name")] = None,
    tenant: TenantOption = None,
    project: ProjectOption = None,
) -> None:
    state = _state(ctx)

    async def run() -> list[Subnet]:
        async with _make_client(state) as client:
            project_id = await _resolve_project_id(client, tenant, project)
            return await client.subnets.list(project_id, name=name)

    subnets = _run(run())
    _emit(
        state,
        subnets,
        table=[
            {
                "ID": subnet.id,
                "Name": subnet.name,
                "State": subnet.state or "",
                "Description": subnet.description or "",
                "PrivateIpCidr": subnet.private_ip_cidr or subnet.cidr or "",
                "IsDefault": subnet.is_default,
            }
            for subnet in subnets
        ],
        rows=[
            (subnet.id, subnet.name, subnet.state or "", subnet.private_ip_cidr or subnet.cidr or "", subnet.is_default)
            for subnet in subnets
        ],
    )


@subnet_app.command("show")
def subnet_show(ctx: typer.Context, subnet_id: SubnetArgument) -> None:
    state = _state(ctx)

    async def run() -> Subnet:
        async with _make_client(state) as client:
            return await client.subnets.get(subnet_id)

    subnet = _run(run())
    reserved = ",".join(f"{key}:{value}" for key, value in subnet.reserved_ips.items())
    _emit(
        state,
        subnet,
        table={
            "ID": subnet.id,
            "Name": subnet.name,
            "State": subnet.state or "",
            "Description": subnet.description or "",
            "PrivateIpCidr": subnet.private_ip_cidr or subnet.cidr or "",
            "ReservedIps": reserved,
            "IsDefault": subnet.is_default,
        },
        rows=[(subnet.id, subnet.name, subnet.state or "", subnet.private_ip_cidr or subnet.cidr or "", reserved)],
    )


@subnet_app.command("set-default")
def subnet_set_default(ctx: typer.Context, subnet_id: SubnetArgument) -> None:
    state = _state(ctx)
    if not confirmed(f"Make subnet {subnet_id} the default?", non_interactive=state.non_interactive):
        typer.echo("OK. Canceled")
        return

    async def run() -> Task:
        async with _make_client(state) as client:
            return await _wait_on_task(client, state, await client.subnets.set_default(subnet_id))

    _run(run())
