from __future__ import annotations

from typing import Annotated

import typer

from photonctl.cli._common import _emit, _make_client, _parse_key_values, _run, _split_csv, _state, _wait_on_task
from photonctl.models import Host, HostCreateSpec, Task
from photonctl.services.hosts import HostOperation
from photonctl.utils.prompts import ask_for_input, confirmed

host_app = typer.Typer(no_args_is_help=True, help="Manage hosts")

HostArgument = Annotated[str, typer.Argument(help="Host id")]
USAGE_TAGS = ("CLOUD", "MGMT", "IMAGE")


@host_app.command("create")
def host_create(
    ctx: typer.Context,
    address: Annotated[str | None, typer.Option("--address", "-i", help="Host address")] = None,
    username: Annotated[str | None, typer.Option("--username", "-u", help="Host username")] = None,
    password: Annotated[str | None, typer.Option("--password", "-p", help="Host password")] = None,
    tags: Annotated[str | None, typer.Option("--tag", "-t", help="Usage tags: CLOUD, MGMT, IMAGE")] = None,
    availability_zone: Annotated[str | None, typer.Option("--availability_zone", "-z")] = None,
    metadata: Annotated[list[str] | None, typer.Option("--metadata", "-m", help="key=value")] = None,
) -> None:
    state = _state(ctx)
    non_interactive = state.non_interactive
    address = ask_for_input("Host address: ", address, non_interactive=non_interactive)
    username = ask_for_input("Host username: ", username, non_interactive=non_interactive)
    if not password and not non_interactive:
        password = typer.prompt("Host password", hide_input=True)
    password = ask_for_input("Host password: ", password, non_interactive=non_interactive)
    tags = ask_for_input("Usage tags: ", tags, non_interactive=non_interactive)
    usage_tags = [tag.upper() for tag in _split_csv(tags)]
    unknown = [tag for tag in usage_tags if tag not in USAGE_TAGS]
    if unknown:
        raise typer.BadParameter(f"unknown usage tags: {', '.join(unknown)}", param_hint="--tag")
    spec = HostCreateSpec(
        address=address,
        username=username,
        password=password,
        usage_tags=usage_tags,
        availability_zone=availability_zone,
        metadata=_parse_key_values(metadata or []) or None,
    )

    async def run() -> Host | None:
        async with _make_client(state) as client:
            done = await _wait_on_task(client, state, await client.hosts.create(spec))
            if state.output is not None:
                return await client.hosts.get(done.entity.id)
            return None

    created = _run(run())
    if created is not None:
        _emit(state, created)


@host_app.command("delete")
def host_delete(ctx: typer.Context, host_id: HostArgument) -> None:
    state = _state(ctx)
    if not confirmed(f"Delete host {host_id}?", non_interactive=state.non_interactive):
        typer.echo("OK. Canceled")
        return

    async def run() -> Task:
        async with _make_client(state) as client:
            return await _wait_on_task(client, state, await client.hosts.delete(host_id))

    _run(run())


@host_app.command("list")
def host_list(ctx: typer.Context) -> None:
    state = _state(ctx)

    async def run() -> list[Host]:
        async with _make_client(state) as client:
            return await client.hosts.list()

    hosts = _run(run())
    _emit(
        state,
        hosts,
        table=[
            {"ID": host.id, "State": host.state or "", "IP": host.address or "", "Tags": ",".join(host.usage_tags)}
            for host in hosts
        ],
        rows=[(host.id, host.state or "", host.address or "", ",".join(host.usage_tags)) for host in hosts],
    )


@host_app.command("show")
def host_show(ctx: typer.Context, host_id: HostArgument) -> None:
    state = _state(ctx)

    async def run() -> Host:
        async with _make_client(state) as client:
            return await client.hosts.get(host_id)

    host = _run(run())
    metadata = ",".join(f"{key}:{value}" for key, value in host.metadata.items())
    _emit(
        state,
        host,
        table={
            "ID": host.id,
            "State": host.state or "",
            "IP": host.address or "",
            "Tags": ",".join(host.usage_tags),
            "Availability Zone": host.availability_zone or "",
            "Version": host.esx_version or "",
            "Metadata": metadata,
        },
        rows=[(host.id, host.state or "", host.address or "", ",".join(host.usage_tags), metadata)],
    )


def _change_mode(ctx: typer.Context, host_id: str, operation: HostOperation) -> None:
    state = _state(ctx)

    async def run() -> Task:
        async with _make_client(state) as client:
            return await _wait_on_task(client, state, await client.hosts.change_mode(host_id, operation))

    _run(run())


@host_app.command("suspend")
def host_suspend(ctx: typer.Context, host_id: HostArgument) -> None:
    _change_mode(ctx, host_id, "suspend")


@host_app.command("resume")
def host_resume(ctx: typer.Context, host_id: HostArgument) -> None:
    _change_mode(ctx, host_id, "resume")


@host_app.command("enter-maintenance")
def host_enter_maintenance(ctx: typer.Context, host_id: HostArgument) -> None:
    _change_mode(ctx, host_id, "enter_maintenance")


@host_app.command("exit-maintenance")
def host_exit_maintenance(ctx: typer.Context, host_id: HostArgument) -> None:
    _change_mode(ctx, host_id, "exit_maintenance")
