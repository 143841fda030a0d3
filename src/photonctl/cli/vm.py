from __future__ import annotations

from collections import Counter
from typing import Annotated

import typer

from photonctl.cli._common import (
    CLIState,
    ProjectOption,
    TenantOption,
    _emit,
    _make_client,
    _parse_key_values,
    _resolve_project_id,
    _run,
    _split_csv,
    _state,
    _wait_on_task,
)
from photonctl.cli.task import print_task_list
from photonctl.client import AsyncPhotonClient
from photonctl.models import VM, AttachedDisk, Task, VMCreateSpec, VMNetwork
from photonctl.services.vms import PowerOperation
from photonctl.utils.prompts import ask_for_input, confirmed

vm_app = typer.Typer(no_args_is_help=True, help="Manage virtual machines")

VMArgument = Annotated[str, typer.Argument(help="VM id")]


def parse_disks(value: str) -> list[AttachedDisk]:
    """Parse `name flavor boot=true, name flavor capacity_gb` into attached disks."""

    disks: list[AttachedDisk] = []
    for entry in _split_csv(value):
        parts = entry.split()
        if len(parts) != 3:
            raise typer.BadParameter(f"expected 'name flavor boot=true|capacity', got: {entry}", param_hint="--disks")
        name, flavor, extra = parts
        if extra.lower() == "boot=true":
            disks.append(AttachedDisk(name=name, flavor=flavor, boot_disk=True))
            continue
        try:
            capacity = int(extra)
        except ValueError as exc:
            raise typer.BadParameter(f"invalid disk capacity: {extra}", param_hint="--disks") from exc
        disks.append(AttachedDisk(name=name, flavor=flavor, capacity_gb=capacity))
    if disks and not any(disk.boot_disk for disk in disks):
        raise typer.BadParameter("one disk must be marked boot=true", param_hint="--disks")
    return disks


async def fetch_vm_networks(client: AsyncPhotonClient, state: CLIState, vm_id: str) -> list[VMNetwork]:
    task = await client.vms.get_networks(vm_id)
    done = await _wait_on_task(client, state, task, report=False)
    properties = done.resource_properties if isinstance(done.resource_properties, dict) else {}
    return [VMNetwork.model_validate(item) for item in properties.get("networkConnections") or []]


def print_vm_list(state: CLIState, vms: list[VM], *, summary: bool = False) -> None:
    if state.output is None and summary:
        if not state.non_interactive:
            typer.echo(f"Total: {len(vms)}")
            for vm_state, count in Counter(vm.state or "-" for vm in vms).items():
                typer.echo(f"{vm_state}: {count}")
        return
    _emit(
        state,
        vms,
        table=[{"ID": vm.id, "Name": vm.name, "State": vm.state or ""} for vm in vms],
        rows=[(vm.id, vm.name, vm.state or "") for vm in vms],
    )


@vm_app.command("create")
def vm_create(
    ctx: typer.Context,
    name: Annotated[str | None, typer.Option("--name", "-n", help="VM name")] = None,
    flavor: Annotated[str | None, typer.Option("--flavor", "-f", help="VM flavor")] = None,
    image: Annotated[str | None, typer.Option("--image", "-i", help="Source image id")] = None,
    disks: Annotated[
        str | None,
        typer.Option("--disks", "-d", help="Disks: 'name flavor boot=true, name flavor capacity_gb'"),
    ] = None,
    environment: Annotated[list[str] | None, typer.Option("--environment", "-e", help="key=value")] = None,
    subnets: Annotated[str | None, typer.Option("--subnets", "-s", help="Comma-separated subnet ids")] = None,
    tenant: TenantOption = None,
    project: ProjectOption = None,
) -> None:
    state = _state(ctx)
    non_interactive = state.non_interactive
    spec = VMCreateSpec(
        name=ask_for_input("VM name: ", name, non_interactive=non_interactive),
        flavor=ask_for_input("VM flavor: ", flavor, non_interactive=non_interactive),
        source_image_id=ask_for_input("Image id: ", image, non_interactive=non_interactive),
        attached_disks=parse_disks(ask_for_input("Disks: ", disks, non_interactive=non_interactive)),
        environment=_parse_key_values(environment or []) or None,
        subnets=_split_csv(subnets) or None,
    )

    async def run() -> VM | None:
        async with _make_client(state) as client:
            project_id = await _resolve_project_id(client, tenant, project)
            task = await client.vms.create(project_id, spec)
            done = await _wait_on_task(client, state, task)
            if state.output is not None:
                return await client.vms.get(done.entity.id)
            return None

    created = _run(run())
    if created is not None:
        _emit(state, created)


@vm_app.command("delete")
def vm_delete(ctx: typer.Context, vm_id: VMArgument) -> None:
    state = _state(ctx)
    if not confirmed(f"Delete VM {vm_id}?", non_interactive=state.non_interactive):
        typer.echo("OK. Canceled")
        return

    async def run() -> Task:
        async with _make_client(state) as client:
            return await _wait_on_task(client, state, await client.vms.delete(vm_id))

    _run(run())


@vm_app.command("list")
def vm_list(
    ctx: typer.Context,
    name: Annotated[str | None, typer.Option("--name", "-n", help="Filter by VM name")] = None,
    summary: Annotated[bool, typer.Option("--summary", help="Only print counts per state")] = False,
    tenant: TenantOption = None,
    project: ProjectOption = None,
) -> None:
    state = _state(ctx)

    async def run() -> list[VM]:
        async with _make_client(state) as client:
            project_id = await _resolve_project_id(client, tenant, project)
            return await client.vms.list(project_id, name=name)

    print_vm_list(state, _run(run()), summary=summary)


@vm_app.command("show")
def vm_show(ctx: typer.Context, vm_id: VMArgument) -> None:
    state = _state(ctx)

    async def run() -> VM:
        async with _make_client(state) as client:
            return await client.vms.get(vm_id)

    vm = _run(run())
    disks = ",".join(f"{disk.name}:{disk.flavor}:{disk.kind}" for disk in vm.attached_disks)
    _emit(
        state,
        vm,
        table={
            "ID": vm.id,
            "Name": vm.name,
            "State": vm.state or "",
            "Flavor": vm.flavor or "",
            "Source Image": vm.source_image_id or "",
            "Host": vm.host or "",
            "Datastore": vm.datastore or "",
            "Disks": disks,
        },
        rows=[(vm.id, vm.name, vm.state or "", vm.flavor or "", vm.source_image_id or "", vm.host or "", disks)],
    )


def _power(ctx: typer.Context, vm_id: str, operation: PowerOperation) -> None:
    state = _state(ctx)

    async def run() -> Task:
        async with _make_client(state) as client:
            return await _wait_on_task(client, state, await client.vms.power(vm_id, operation))

    _run(run())


@vm_app.command("start")
def vm_start(ctx: typer.Context, vm_id: VMArgument) -> None:
    _power(ctx, vm_id, "start")


@vm_app.command("stop")
def vm_stop(ctx: typer.Context, vm_id: VMArgument) -> None:
    _power(ctx, vm_id, "stop")


@vm_app.command("restart")
def vm_restart(ctx: typer.Context, vm_id: VMArgument) -> None:
    _power(ctx, vm_id, "restart")


@vm_app.command("suspend")
def vm_suspend(ctx: typer.Context, vm_id: VMArgument) -> None:
    _power(ctx, vm_id, "suspend")


@vm_app.command("resume")
def vm_resume(ctx: typer.Context, vm_id: VMArgument) -> None:
    _power(ctx, vm_id, "resume")


@vm_app.command("networks")
def vm_networks(ctx: typer.Context, vm_id: VMArgument) -> None:
    state = _state(ctx)

    async def run() -> list[VMNetwork]:
        async with _make_client(state) as client:
            return await fetch_vm_networks(client, state, vm_id)

    networks = _run(run())
    columns = [
        (
            network.network or "-",
            network.mac_address or "-",
            network.ip_address or "-",
            network.netmask or "-",
            "-" if network.is_connected is None else str(network.is_connected),
        )
        for network in networks
    ]
    _emit(
        state,
        networks,
        table=[
            dict(zip(("Network", "MAC Address", "IP Address", "Netmask", "IsConnected"), row, strict=True))
            for row in columns
        ],
        rows=columns,
    )


@vm_app.command("attach-disk")
def vm_attach_disk(
    ctx: typer.Context,
    vm_id: VMArgument,
    disk: Annotated[str, typer.Option("--disk", "-d", help="Persistent disk id")],
) -> None:
    state = _state(ctx)

    async def run() -> Task:
        async with _make_client(state) as client:
            return await _wait_on_task(client, state, await client.vms.attach_disk(vm_id, disk))

    _run(run())


@vm_app.command("detach-disk")
def vm_detach_disk(
    ctx: typer.Context,
    vm_id: VMArgument,
    disk: Annotated[str, typer.Option("--disk", "-d", help="Persistent disk id")],
) -> None:
    state = _state(ctx)

    async def run() -> Task:
        async with _make_client(state) as client:
            return await _wait_on_task(client, state, await client.vms.detach_disk(vm_id, disk))

    _run(run())


@vm_app.command("tasks")
def vm_tasks(
    ctx: typer.Context,
    vm_id: VMArgument,
    task_state: Annotated[str | None, typer.Option("--state", "-s", help="Filter by task state")] = None,
) -> None:
    state = _state(ctx)

    async def run() -> list[Task]:
        async with _make_client(state) as client:
            return await client.vms.tasks(vm_id, state=task_state)

    print_task_list(state, _run(run()))
