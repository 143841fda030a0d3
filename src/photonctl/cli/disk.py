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
from photonctl.models import DiskCreateSpec, PersistentDisk, Task
from photonctl.utils.prompts import ask_for_input, confirmed

disk_app = typer.Typer(no_args_is_help=True, help="Manage persistent disks")


@disk_app.command("create")
def disk_create(
    ctx: typer.Context,
    name: Annotated[str | None, typer.Option("--name", "-n", help="Disk name")] = None,
    flavor: Annotated[str | None, typer.Option("--flavor", "-f", help="Disk flavor")] = None,
    capacity_gb: Annotated[int | None, typer.Option("--capacityGB", "-c", help="Capacity in GB")] = None,
    tenant: TenantOption = None,
    project: ProjectOption = None,
) -> None:
    state = _state(ctx)
    name = ask_for_input("Disk name: ", name, non_interactive=state.non_interactive)
    flavor = ask_for_input("Disk flavor: ", flavor, non_interactive=state.non_interactive)
    capacity = ask_for_input(
        "Disk capacity in GB: ",
        str(capacity_gb) if capacity_gb is not None else None,
        non_interactive=state.non_interactive,
    )
    try:
        spec = DiskCreateSpec(name=name, flavor=flavor, capacity_gb=int(capacity))
    except ValueError as exc:
        raise typer.BadParameter(f"invalid capacity: {capacity}", param_hint="--capacityGB") from exc

    async def run() -> PersistentDisk | None:
        async with _make_client(state) as client:
            project_id = await _resolve_project_id(client, tenant, project)
            done = await _wait_on_task(client, state, await client.disks.create(project_id, spec))
            if state.output is not None:
                return await client.disks.get(done.entity.id)
            return None

    created = _run(run())
    if created is not None:
        _emit(state, created)


@disk_app.command("delete")
def disk_delete(ctx: typer.Context, disk_id: Annotated[str, typer.Argument(help="Disk id")]) -> None:
    state = _state(ctx)
    if not confirmed(f"Delete disk {disk_id}?", non_interactive=state.non_interactive):
        typer.echo("OK. Canceled")
        return

    async def run() -> Task:
        async with _make_client(state) as client:
            return await _wait_on_task(client, state, await client.disks.delete(disk_id))

    _run(run())


@disk_app.command("list")
def disk_list(
    ctx: typer.Context,
    name: Annotated[str | None, typer.Option("--name", "-n", help="Filter by disk name")] = None,
    tenant: TenantOption = None,
    project: ProjectOption = None,
) -> None:
    state = _state(ctx)

    async def run() -> list[PersistentDisk]:
        async with _make_client(state) as client:
            project_id = await _resolve_project_id(client, tenant, project)
            return await client.disks.list(project_id, name=name)

    disks = _run(run())
    _emit(
        state,
        disks,
        table=[{"ID": disk.id, "Name": disk.name, "State": disk.state or ""} for disk in disks],
        rows=[(disk.id, disk.name, disk.state or "") for disk in disks],
    )


@disk_app.command("show")
def disk_show(ctx: typer.Context, disk_id: Annotated[str, typer.Argument(help="Disk id")]) -> None:
    state = _state(ctx)

    async def run() -> PersistentDisk:
        async with _make_client(state) as client:
            return await client.disks.get(disk_id)

    disk = _run(run())
    vms = ",".join(disk.vms)
    _emit(
        state,
        disk,
        table={
            "ID": disk.id,
            "Name": disk.name,
            "Kind": disk.kind or "",
            "Flavor": disk.flavor or "",
            "CapacityGB": disk.capacity_gb if disk.capacity_gb is not None else "",
            "State": disk.state or "",
            "Datastore": disk.datastore or "",
            "VMs": vms,
        },
        rows=[(disk.id, disk.name, disk.state or "", disk.kind or "", disk.flavor or "", disk.capacity_gb, vms)],
    )
