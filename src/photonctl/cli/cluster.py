"""`cluster` and `service` command groups.

Both groups talk to collections with identical payloads, so one factory builds
the two Typer apps.
"""

from __future__ import annotations

import logging
import sys
from collections import Counter
from pathlib import Path
from typing import Annotated

import typer

from photonctl.cli._common import (
    CLIState,
    ProjectOption,
    TenantOption,
    _emit,
    _make_client,
    _resolve_project_id,
    _run,
    _state,
    _wait_on_task,
)
from photonctl.cli.vm import fetch_vm_networks
from photonctl.client import AsyncPhotonClient
from photonctl.errors import PhotonError
from photonctl.models import VM, Cluster, ClusterCreateSpec, ExtendedProperty, Task
from photonctl.services import ClustersService
from photonctl.utils.prompts import ask_for_input, confirmed

logger = logging.getLogger(__name__)

CLUSTER_TYPES = ("KUBERNETES", "HARBOR")
DEFAULT_WORKER_COUNT = 1

IdArgument = Annotated[str, typer.Argument(help="Cluster or service id")]
WaitForReady = Annotated[
    bool,
    typer.Option("--wait-for-ready", help="Wait until the resource is READY and fully expanded"),
]


def _read_file(path: str, option: str) -> str:
    try:
        return Path(path).expanduser().read_text(encoding="utf-8").strip()
    except OSError as exc:
        raise typer.BadParameter(f"cannot read {path}: {exc}", param_hint=option) from exc


def build_extended_properties(
    cluster_type: str,
    *,
    dns: str,
    gateway: str,
    netmask: str,
    master_ip: str | None = None,
    container_network: str | None = None,
    etcd: tuple[str | None, str | None, str | None] = (None, None, None),
    ssh_key: str | None = None,
    registry_ca_cert: str | None = None,
    admin_password: str | None = None,
) -> dict[str, str]:
    if not (dns and gateway and netmask):
        raise typer.BadParameter("Provide a valid DNS, gateway, and netmask")

    properties = {
        ExtendedProperty.DNS.value: dns,
        ExtendedProperty.GATEWAY.value: gateway,
        ExtendedProperty.NETMASK.value: netmask,
    }
    if ssh_key:
        properties[ExtendedProperty.SSH_KEY.value] = _read_file(ssh_key, "--ssh-key")
    if registry_ca_cert:
        properties[ExtendedProperty.REGISTRY_CA_CERT.value] = _read_file(registry_ca_cert, "--registry-ca-cert")

    if cluster_type == "KUBERNETES":
        properties[ExtendedProperty.MASTER_IP.value] = master_ip or ""
        properties[ExtendedProperty.CONTAINER_NETWORK.value] = container_network or ""
        etcd1, etcd2, etcd3 = etcd
        properties[ExtendedProperty.ETCD_IP1.value] = etcd1 or ""
        # etcd3 only counts when etcd2 is set.
        if etcd2:
            properties[ExtendedProperty.ETCD_IP2.value] = etcd2
            if etcd3:
                properties[ExtendedProperty.ETCD_IP3.value] = etcd3
    elif cluster_type == "HARBOR":
        properties[ExtendedProperty.MASTER_IP.value] = master_ip or ""
        properties[ExtendedProperty.ADMIN_PASSWORD.value] = admin_password or ""
    else:
        raise typer.BadParameter(f"Unsupported cluster type: {cluster_type}", param_hint="--type")
    return properties


def _master_vms(vms: list[VM]) -> list[VM]:
    masters = []
    for vm in vms:
        if any(tag.count(":") == 2 and "worker" not in tag.lower() for tag in vm.tags):
            masters.append(vm)
    return masters


async def _vm_address(client: AsyncPhotonClient, state: CLIState, vm: VM) -> str:
    try:
        networks = await fetch_vm_networks(client, state, vm.id)
    except PhotonError as exc:
        logger.debug(f"could not read networks of VM {vm.id}: {exc}")
        return "-"
    for network in networks:
        if network.network and network.ip_address:
            return network.ip_address
    return "-"


def build_cluster_app(kind: str) -> typer.Typer:
    """Build the command group for `kind` ("cluster" or "service")."""

    label = kind.capitalize()
    app = typer.Typer(no_args_is_help=True, help=f"Manage {kind}s")

    def service_for(client: AsyncPhotonClient) -> ClustersService:
        return client.clusters if kind == "cluster" else client.services

    async def wait_ready(client: AsyncPhotonClient, state: CLIState, resource_id: str) -> Cluster:
        if state.output is None:
            typer.echo(f"Waiting for {kind} {resource_id} to become ready")
        progress = None if state.machine else sys.stdout
        return await service_for(client).wait_ready(resource_id, progress=progress)

    def report_ready(state: CLIState, resource: Cluster) -> None:
        if state.output is not None:
            _emit(state, resource)
        else:
            typer.echo(f"{label} {resource.id} is ready")

    @app.command("create")
    def create(
        ctx: typer.Context,
        name: Annotated[str | None, typer.Option("--name", "-n", help="Name")] = None,
        cluster_type: Annotated[str | None, typer.Option("--type", "-k", help="KUBERNETES or HARBOR")] = None,
        vm_flavor: Annotated[str | None, typer.Option("--vm_flavor", "-v", help="VM flavor name")] = None,
        disk_flavor: Annotated[str | None, typer.Option("--disk_flavor", "-d", help="Disk flavor name")] = None,
        network_id: Annotated[str | None, typer.Option("--network_id", "-w", help="VM network id")] = None,
        worker_count: Annotated[int, typer.Option("--worker_count", "-c", help="Worker count")] = 0,
        dns: Annotated[str | None, typer.Option("--dns", help="VM network DNS server")] = None,
        gateway: Annotated[str | None, typer.Option("--gateway", help="VM network gateway")] = None,
        netmask: Annotated[str | None, typer.Option("--netmask", help="VM network netmask")] = None,
        master_ip: Annotated[str | None, typer.Option("--master-ip", help="Master static IP")] = None,
        container_network: Annotated[
            str | None,
            typer.Option("--container-network", help="Container network CIDR (Kubernetes)"),
        ] = None,
        etcd1: Annotated[str | None, typer.Option("--etcd1", help="etcd node 1 static IP")] = None,
        etcd2: Annotated[str | None, typer.Option("--etcd2", help="etcd node 2 static IP")] = None,
        etcd3: Annotated[str | None, typer.Option("--etcd3", help="etcd node 3 static IP")] = None,
        ssh_key: Annotated[str | None, typer.Option("--ssh-key", help="SSH public key file")] = None,
        registry_ca_cert: Annotated[
            str | None,
            typer.Option("--registry-ca-cert", help="Docker registry CA certificate file"),
        ] = None,
        admin_password: Annotated[str | None, typer.Option("--admin-password", help="Harbor admin password")] = None,
        batch_size: Annotated[int | None, typer.Option("--batchSize", help="Batch size for adding workers")] = None,
        wait_for_ready: WaitForReady = False,
        tenant: TenantOption = None,
        project: ProjectOption = None,
    ) -> None:
        state = _state(ctx)
        interactive = not state.non_interactive

        if interactive:
            name = ask_for_input(f"{label} name: ", name, non_interactive=False)
            cluster_type = ask_for_input(f"{label} type: ", cluster_type, non_interactive=False)
        if not name or not cluster_type:
            raise typer.BadParameter(f"Provide a valid {kind} name and type")
        cluster_type = cluster_type.upper()
        if cluster_type not in CLUSTER_TYPES:
            raise typer.BadParameter(f"Unsupported cluster type: {cluster_type}", param_hint="--type")

        if worker_count == 0 and cluster_type != "HARBOR":
            if interactive:
                raw = typer.prompt("Worker count", default=str(DEFAULT_WORKER_COUNT))
                try:
                    worker_count = int(raw)
                except ValueError as exc:
                    raise typer.BadParameter("Please supply a valid worker count") from exc
            else:
                worker_count = DEFAULT_WORKER_COUNT

        if interactive:
            dns = ask_for_input(f"{label} DNS server: ", dns, non_interactive=False)
            gateway = ask_for_input(f"{label} network gateway: ", gateway, non_interactive=False)
            netmask = ask_for_input(f"{label} network netmask: ", netmask, non_interactive=False)
            if cluster_type == "KUBERNETES":
                master_ip = ask_for_input("Kubernetes master static IP address: ", master_ip, non_interactive=False)
                container_network = ask_for_input(
                    "Kubernetes container network: ",
                    container_network,
                    non_interactive=False,
                )
                etcd1 = ask_for_input("etcd server 1 static IP address: ", etcd1, non_interactive=False)
            else:
                master_ip = ask_for_input("Harbor master static IP address: ", master_ip, non_interactive=False)
                if not admin_password:
                    admin_password = typer.prompt("Harbor registry admin password", hide_input=True)

        spec = ClusterCreateSpec(
            name=name,
            type=cluster_type,
            worker_count=worker_count,
            vm_flavor=vm_flavor,
            disk_flavor=disk_flavor,
            vm_network_id=network_id,
            batch_size_worker=batch_size,
            extended_properties=build_extended_properties(
                cluster_type,
                dns=dns or "",
                gateway=gateway or "",
                netmask=netmask or "",
                master_ip=master_ip,
                container_network=container_network,
                etcd=(etcd1, etcd2, etcd3),
                ssh_key=ssh_key,
                registry_ca_cert=registry_ca_cert,
                admin_password=admin_password,
            ),
        )

        if not state.machine:
            typer.echo(f"Creating {kind}: {spec.name} ({spec.type})")
            if spec.vm_flavor:
                typer.echo(f"  VM flavor: {spec.vm_flavor}")
            if spec.disk_flavor:
                typer.echo(f"  Disk flavor: {spec.disk_flavor}")
            if spec.type != "HARBOR":
                typer.echo(f"  Worker count: {spec.worker_count}")
            if spec.batch_size_worker:
                typer.echo(f"  Batch size: {spec.batch_size_worker}")
        if not confirmed("Are you sure?", non_interactive=state.non_interactive):
            typer.echo("Cancelled")
            return

        async def run() -> Cluster | None:
            async with _make_client(state) as client:
                project_id = await _resolve_project_id(client, tenant, project)
                done = await _wait_on_task(client, state, await service_for(client).create(project_id, spec))
                if wait_for_ready:
                    return await wait_ready(client, state, done.entity.id)
                if state.output is None:
                    typer.echo(f"Note: the {kind} has been created with minimal resources. You can use it now.")
                    typer.echo("A background task is running to gradually expand it to its target capacity.")
                    typer.echo(f"You can run '{kind} show {done.entity.id}' to see its state.")
                return None

        ready = _run(run())
        if ready is not None:
            report_ready(state, ready)

    @app.command("delete")
    def delete(ctx: typer.Context, resource_id: IdArgument) -> None:
        state = _state(ctx)
        if not confirmed(f"Delete {kind} {resource_id}?", non_interactive=state.non_interactive):
            typer.echo("OK. Canceled")
            return

        async def run() -> Task:
            async with _make_client(state) as client:
                return await _wait_on_task(client, state, await service_for(client).delete(resource_id))

        _run(run())

    @app.command("list")
    def list_(
        ctx: typer.Context,
        summary: Annotated[bool, typer.Option("--summary", "-s", help="Only print counts per state")] = False,
        tenant: TenantOption = None,
        project: ProjectOption = None,
    ) -> None:
        state = _state(ctx)

        async def run() -> list[Cluster]:
            async with _make_client(state) as client:
                project_id = await _resolve_project_id(client, tenant, project)
                return await service_for(client).list(project_id)

        resources = _run(run())
        if summary and state.output is None:
            if not state.non_interactive:
                typer.echo(f"Total: {len(resources)}")
                for resource_state, count in Counter(item.state or "-" for item in resources).items():
                    typer.echo(f"{resource_state}: {count}")
            return
        _emit(
            state,
            resources,
            table=[
                {
                    "ID": item.id,
                    "Name": item.name,
                    "Type": item.type or "",
                    "State": item.state or "",
                    "Worker Count": item.worker_count,
                }
                for item in resources
            ],
            rows=[(item.id, item.name, item.type or "", item.state or "", item.worker_count) for item in resources],
        )

    @app.command("show")
    def show(ctx: typer.Context, resource_id: IdArgument) -> None:
        state = _state(ctx)

        async def run() -> tuple[Cluster, list[VM]]:
            async with _make_client(state) as client:
                service = service_for(client)
                return await service.get(resource_id), await service.list_vms(resource_id)

        resource, vms = _run(run())
        masters = ",".join(vm.id for vm in _master_vms(vms))
        properties = ",".join(f"{key}:{value}" for key, value in sorted(resource.extended_properties.items()))
        _emit(
            state,
            resource,
            table={
                f"{label} ID": resource.id,
                "Name": resource.name,
                "State": resource.state or "",
                "Type": resource.type or "",
                "Worker count": resource.worker_count,
                "Error reason": resource.error_reason or "",
                "Extended properties": properties,
                "Master VMs": masters,
            },
            rows=[
                (
                    resource.id,
                    resource.name,
                    resource.state or "",
                    resource.type or "",
                    resource.worker_count,
                    properties,
                    resource.error_reason or "",
                )
            ],
        )

    @app.command("resize")
    def resize(
        ctx: typer.Context,
        resource_id: IdArgument,
        worker_count: Annotated[int, typer.Argument(help="New worker count")],
        wait_for_ready: WaitForReady = False,
    ) -> None:
        state = _state(ctx)
        if worker_count <= 0:
            raise typer.BadParameter(f"Provide a valid {kind} ID and worker count")
        if not state.machine:
            typer.echo(f"Resizing {kind} {resource_id} to worker count {worker_count}")
        if not confirmed("Are you sure?", non_interactive=state.non_interactive):
            typer.echo("Cancelled")
            return

        async def run() -> Cluster | None:
            async with _make_client(state) as client:
                await _wait_on_task(client, state, await service_for(client).resize(resource_id, worker_count))
                if wait_for_ready:
                    return await wait_ready(client, state, resource_id)
                if state.output is None:
                    typer.echo(f"Note: A background task is running to resize the {kind} to its target capacity.")
                    typer.echo(f"You can run '{kind} show {resource_id}' to see its state.")
                return None

        ready = _run(run())
        if ready is not None:
            report_ready(state, ready)

    @app.command("list-vms")
    def list_vms(ctx: typer.Context, resource_id: IdArgument) -> None:
        state = _state(ctx)

        async def run() -> list[tuple[VM, str]]:
            async with _make_client(state) as client:
                vms = await service_for(client).list_vms(resource_id)
                return [(vm, await _vm_address(client, state, vm)) for vm in vms]

        entries = _run(run())
        if state.non_interactive and state.output is None:
            typer.echo(str(len(entries)))
        _emit(
            state,
            [{"vm": vm, "ipAddress": address} for vm, address in entries],
            table=[{"VM ID": vm.id, "VM Name": vm.name, "VM IP": address} for vm, address in entries],
            rows=[(vm.id, vm.name, address) for vm, address in entries],
        )

    @app.command("trigger-maintenance")
    def trigger_maintenance(ctx: typer.Context, resource_id: IdArgument) -> None:
        state = _state(ctx)
        if not confirmed(f"Trigger maintenance for {kind} {resource_id}?", non_interactive=state.non_interactive):
            typer.echo("OK. Canceled")
            return

        async def run() -> Task:
            async with _make_client(state) as client:
                return await _wait_on_task(client, state, await service_for(client).trigger_maintenance(resource_id))

        _run(run())

    return app


cluster_app = build_cluster_app("cluster")
service_app = build_cluster_app("service")
