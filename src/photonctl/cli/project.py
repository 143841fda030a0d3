from __future__ import annotations

from typing import Annotated

import typer

from photonctl.cli._common import (
    TenantOption,
    _emit,
    _make_client,
    _parse_limits,
    _resolve_tenant_id,
    _run,
    _split_csv,
    _state,
    _wait_on_task,
)
from photonctl.cli.task import print_task_list
from photonctl.models import Project, ProjectCreateSpec, Task
from photonctl.utils.prompts import ask_for_input, confirmed

project_app = typer.Typer(no_args_is_help=True, help="Manage projects")


@project_app.command("create")
def project_create(
    ctx: typer.Context,
    name: Annotated[str | None, typer.Argument(help="Project name")] = None,
    tenant: TenantOption = None,
    limits: Annotated[str | None, typer.Option("--limits", "-l", help="Quota limits")] = None,
    security_groups: Annotated[
        str | None,
        typer.Option("--security-groups", "-g", help="Comma-separated security groups"),
    ] = None,
) -> None:
    state = _state(ctx)
    name = ask_for_input("Project name: ", name, non_interactive=state.non_interactive)
    spec = ProjectCreateSpec(
        name=name,
        security_groups=_split_csv(security_groups) or None,
        limits=_parse_limits(limits) or None,
    )

    async def run() -> Project | None:
        async with _make_client(state) as client:
            tenant_id = await _resolve_tenant_id(client, tenant)
            task = await client.projects.create(tenant_id, spec)
            done = await _wait_on_task(client, state, task)
            if state.output is not None:
                return await client.projects.get(done.entity.id)
            return None

    created = _run(run())
    if created is not None:
        _emit(state, created)


@project_app.command("delete")
def project_delete(ctx: typer.Context, project_id: Annotated[str, typer.Argument(help="Project id")]) -> None:
    state = _state(ctx)
    if not confirmed(f"Delete project {project_id}?", non_interactive=state.non_interactive):
        typer.echo("OK. Canceled")
        return

    async def run() -> Task:
        async with _make_client(state) as client:
            task = await client.projects.delete(project_id)
            return await _wait_on_task(client, state, task)

    _run(run())
    state.config_manager().clear_project(project_id)


@project_app.command("list")
def project_list(ctx: typer.Context, tenant: TenantOption = None) -> None:
    state = _state(ctx)

    async def run() -> list[Project]:
        async with _make_client(state) as client:
            return await client.projects.list(await _resolve_tenant_id(client, tenant))

    projects = _run(run())
    _emit(
        state,
        projects,
        table=[{"ID": project.id, "Name": project.name} for project in projects],
        rows=[(project.id, project.name) for project in projects],
    )


@project_app.command("show")
def project_show(ctx: typer.Context, project_id: Annotated[str, typer.Argument(help="Project id")]) -> None:
    state = _state(ctx)

    async def run() -> Project:
        async with _make_client(state) as client:
            return await client.projects.get(project_id)

    project = _run(run())
    groups = ",".join(f"{group.name}:{group.inherited}" for group in project.security_groups)
    _emit(
        state,
        project,
        table={"ID": project.id, "Name": project.name, "Tenant": project.tenant_id or "", "Security Groups": groups},
        rows=[(project.id, project.name, project.tenant_id or "", groups)],
    )


@project_app.command("set")
def project_set(
    ctx: typer.Context,
    name: Annotated[str, typer.Argument(help="Project name")],
    tenant: TenantOption = None,
) -> None:
    """Select the project used by commands that take `--project`."""

    state = _state(ctx)

    async def run() -> Project:
        async with _make_client(state) as client:
            tenant_id = await _resolve_tenant_id(client, tenant)
            return await client.projects.find_by_name(tenant_id, name)

    project = _run(run())
    state.config_manager().set_project(project.name, project.id)
    if not state.machine:
        typer.echo(f"Project set to '{project.name}'")


@project_app.command("get")
def project_get(ctx: typer.Context) -> None:
    state = _state(ctx)
    selected = state.config_manager().load().project
    if selected is None:
        if not state.machine:
            typer.echo("No project selected")
        return
    if state.output is not None:
        _emit(state, selected)
    elif state.non_interactive:
        typer.echo(f"{selected.id}\t{selected.name}")
    else:
        typer.echo(f"Current project is '{selected.name}' with ID {selected.id}")


@project_app.command("tasks")
def project_tasks(
    ctx: typer.Context,
    project_id: Annotated[str, typer.Argument(help="Project id")],
    task_state: Annotated[str | None, typer.Option("--state", "-s", help="Filter by task state")] = None,
) -> None:
    state = _state(ctx)

    async def run() -> list[Task]:
        async with _make_client(state) as client:
            return await client.projects.tasks(project_id, state=task_state)

    print_task_list(state, _run(run()))
