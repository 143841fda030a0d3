from __future__ import annotations

from typing import Annotated

import typer

from photonctl.cli._common import _emit, _make_client, _parse_limits, _run, _state, _wait_on_task
from photonctl.cli.task import print_task_list
from photonctl.models import FLAVOR_KINDS, Flavor, FlavorCreateSpec, QuotaLineItem, Task
from photonctl.utils.prompts import ask_for_input, confirmed

flavor_app = typer.Typer(no_args_is_help=True, help="Manage VM and disk flavors")

KIND_CHOICES = ", ".join(FLAVOR_KINDS[:-1]) + f", or {FLAVOR_KINDS[-1]}"


def _script_costs(cost: list[QuotaLineItem]) -> str:
    return ",".join(str(item) for item in cost)


def _human_costs(cost: list[QuotaLineItem]) -> str:
    return ", ".join(f"{item.key} {item.value:g} {item.unit}" for item in cost)


@flavor_app.command("create")
def flavor_create(
    ctx: typer.Context,
    name: Annotated[str | None, typer.Option("--name", "-n", help="Flavor name")] = None,
    kind: Annotated[str | None, typer.Option("--kind", "-k", help=f"Flavor kind: {KIND_CHOICES}")] = None,
    cost: Annotated[
        str | None,
        typer.Option("--cost", "-c", help="Comma-separated costs, e.g. 'vm.cpu 1 COUNT, vm.memory 2 GB'"),
    ] = None,
) -> None:
    state = _state(ctx)
    name = ask_for_input("Flavor name: ", name, non_interactive=state.non_interactive)
    kind = ask_for_input(f"Flavor kind ({KIND_CHOICES}): ", kind, non_interactive=state.non_interactive)
    if kind not in FLAVOR_KINDS:
        raise typer.BadParameter(f"Please provide flavor kind: {KIND_CHOICES}", param_hint="--kind")
    cost = ask_for_input("Flavor costs: ", cost, non_interactive=state.non_interactive, default="")
    spec = FlavorCreateSpec(name=name, kind=kind, cost=_parse_limits(cost, param_hint="--cost"))

    if not state.non_interactive:
        typer.echo(f"Creating flavor: '{spec.name}', Kind: '{spec.kind}'\n")
        typer.echo("Please make sure the costs below are correct:")
        for index, item in enumerate(spec.cost, start=1):
            typer.echo(f"{index}: {item.key}, {item.value:g}, {item.unit}")
    if not confirmed("Create this flavor?", non_interactive=state.non_interactive):
        typer.echo("OK. Canceled")
        return

    async def run() -> Flavor | None:
        async with _make_client(state) as client:
            done = await _wait_on_task(client, state, await client.flavors.create(spec))
            if state.output is not None:
                return await client.flavors.get(done.entity.id)
            return None

    created = _run(run())
    if created is not None:
        _emit(state, created)


@flavor_app.command("delete")
def flavor_delete(ctx: typer.Context, flavor_id: Annotated[str, typer.Argument(help="Flavor id")]) -> None:
    state = _state(ctx)
    if not confirmed(f"Delete flavor {flavor_id}?", non_interactive=state.non_interactive):
        typer.echo("OK. Canceled")
        return

    async def run() -> Task:
        async with _make_client(state) as client:
            return await _wait_on_task(client, state, await client.flavors.delete(flavor_id))

    _run(run())


@flavor_app.command("list")
def flavor_list(
    ctx: typer.Context,
    name: Annotated[str | None, typer.Option("--name", "-n", help="Filter by flavor name")] = None,
    kind: Annotated[str | None, typer.Option("--kind", "-k", help="Filter by flavor kind")] = None,
) -> None:
    state = _state(ctx)

    async def run() -> list[Flavor]:
        async with _make_client(state) as client:
            return await client.flavors.list(name=name, kind=kind)

    flavors = _run(run())
    _emit(
        state,
        flavors,
        table=[
            {"ID": flavor.id, "Name": flavor.name, "Kind": flavor.kind or "", "Cost": _human_costs(flavor.cost)}
            for flavor in flavors
        ],
        rows=[(flavor.id, flavor.name, flavor.kind or "", _script_costs(flavor.cost)) for flavor in flavors],
    )


@flavor_app.command("show")
def flavor_show(ctx: typer.Context, flavor_id: Annotated[str, typer.Argument(help="Flavor id")]) -> None:
    state = _state(ctx)

    async def run() -> Flavor:
        async with _make_client(state) as client:
            return await client.flavors.get(flavor_id)

    flavor = _run(run())
    _emit(
        state,
        flavor,
        table={
            "Flavor ID": flavor.id,
            "Name": flavor.name,
            "Kind": flavor.kind or "",
            "Cost": _human_costs(flavor.cost),
            "State": flavor.state or "",
        },
        rows=[(flavor.id, flavor.name, flavor.kind or "", _script_costs(flavor.cost), flavor.state or "")],
    )


@flavor_app.command("tasks")
def flavor_tasks(
    ctx: typer.Context,
    flavor_id: Annotated[str, typer.Argument(help="Flavor id")],
    task_state: Annotated[str | None, typer.Option("--state", "-s", help="Filter by task state")] = None,
) -> None:
    state = _state(ctx)

    async def run() -> list[Task]:
        async with _make_client(state) as client:
            return await client.flavors.tasks(flavor_id, state=task_state)

    print_task_list(state, _run(run()))
