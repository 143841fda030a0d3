from __future__ import annotations

from typing import Annotated

import typer

from photonctl.cli._common import _emit, _make_client, _run, _split_csv, _state, _wait_on_task
from photonctl.models import Network, NetworkCreateSpec, Task
from photonctl.utils.prompts import ask_for_input, confirmed

network_app = typer.Typer(no_args_is_help=True, help="Manage physical networks")

NetworkArgument = Annotated[str, typer.Argument(help="Network id")]


@network_app.command("create")
def network_create(
    ctx: typer.Context,
    name: Annotated[str | None, typer.Option("--name", "-n", help="Network name")] = None,
    description: Annotated[str | None, typer.Option("--description", "-d", help="Description")] = None,
    port_groups: Annotated[
        str | None,
        typer.Option("--portgroups", "-p", help="Comma-separated port groups"),
    ] = None,
) -> None:
    state = _state(ctx)
    name = ask_for_input("Network name: ", name, non_interactive=state.non_interactive)
    groups = _split_csv(ask_for_input("Port groups: ", port_groups, non_interactive=state.non_interactive))
    spec = NetworkCreateSpec(name=name, port_groups=groups, description=description)

    async def run() -> Network | None:
        async with _make_client(state) as client:
            done = await _wait_on_task(client, state, await client.networks.create(spec))
            if state.output is not None:
                return await client.networks.get(done.entity.id)
            return None

    created = _run(run())
    if created is not None:
        _emit(state, created)


@network_app.command("delete")
def network_delete(ctx: typer.Context, network_id: NetworkArgument) -> None:
    state = _state(ctx)
    if not confirmed(f"Delete network {network_id}?", non_interactive=state.non_interactive):
        typer.echo("OK. Canceled")
        return

    async def run() -> Task:
        async with _make_client(state) as client:
            return await _wait_on_task(client, state, await client.networks.delete(network_id))

    _run(run())


@network_app.command("list")
def network_list(
    ctx: typer.Context,
    name: Annotated[str | None, typer.Option("--name", "-n", help="Filter by network name")] = None,
) -> None:
    state = _state(ctx)

    async def run() -> list[Network]:
        async with _make_client(state) as client:
            return await client.networks.list(name=name)

    networks = _run(run())
    _emit(
        state,
        networks,
        table=[
            {
                "ID": network.id,
                "Name": network.name,
                "State": network.state or "",
                "PortGroups": ",".join(network.port_groups),
                "Description": network.description or "",
                "IsDefault": network.is_default,
            }
            for network in networks
        ],
        rows=[
            (
                network.id,
                network.name,
                network.state or "",
                ",".join(network.port_groups),
                network.description or "",
                network.is_default,
            )
            for network in networks
        ],
    )


@network_app.command("show")
def network_show(ctx: typer.Context, network_id: NetworkArgument) -> None:
    state = _state(ctx)

    async def run() -> Network:
        async with _make_client(state) as client:
            return await client.networks.get(network_id)

    network = _run(run())
    _emit(
        state,
        network,
        table={
            "ID": network.id,
            "Name": network.name,
            "State": network.state or "",
            "Description": network.description or "",
            "Port Groups": ",".join(network.port_groups),
            "Is Default": network.is_default,
        },
        rows=[(network.id, network.name, network.state or "", ",".join(network.port_groups), network.is_default)],
    )


@network_app.command("set-default")
def network_set_default(ctx: typer.Context, network_id: NetworkArgument) -> None:
    state = _state(ctx)
    if not confirmed(f"Make network {network_id} the default?", non_interactive=state.non_interactive):
        typer.echo("OK. Canceled")
        return

    async def run() -> Task:
        async with _make_client(state) as client:
            return await _wait_on_task(client, state, await client.networks.set_default(network_id))

    _run(run())
