from __future__ import annotations

import json
import sys
from typing import Annotated

import typer

from photonctl.cli._common import CLIState, _api_error_codes, _emit, _make_client, _run, _state
from photonctl.models import Task
from photonctl.polling import WaitPolicy, sort_steps_by_sequence, wait_for_task
from photonctl.utils.output import emit, timestamp_to_string

task_app = typer.Typer(no_args_is_help=True, help="Show and monitor tasks")


def _duration(task: Task) -> str:
    seconds = (task.end_time - task.started_time) // 1000 if task.end_time > task.started_time else 0
    return f"{seconds // 3600:02d}:{(seconds // 60) % 60:02d}:{seconds % 60:02d}"


def _resource_properties(task: Task) -> str:
    if task.resource_properties is None:
        return ""
    return json.dumps(task.resource_properties, separators=(",", ":"))


def print_task_list(state: CLIState, tasks: list[Task]) -> None:
    _emit(
        state,
        tasks,
        table=[
            {
                "Task": task.id,
                "Operation": task.operation,
                "State": task.state,
                "Start Time": timestamp_to_string(task.started_time),
                "Duration": _duration(task),
            }
            for task in tasks
        ],
        rows=[
            (task.id, task.state, task.operation, task.started_time, task.end_time - task.started_time)
            for task in tasks
        ],
    )


def print_task_steps(task: Task, *, scripting: bool) -> None:
    steps = sort_steps_by_sequence(task.steps)
    if scripting:
        for step in steps:
            typer.echo(
                "\t".join(
                    [
                        str(step.sequence),
                        step.operation,
                        step.state,
                        str(step.started_time),
                        str(step.end_time),
                        _api_error_codes(step.errors, ","),
                        _api_error_codes(step.warnings, ","),
                    ]
                )
            )
        return

    typer.echo("Steps:")
    emit(
        [
            {
                "Operation": step.operation,
                "State": step.state,
                "StartedTime": timestamp_to_string(step.started_time),
                "EndTime": timestamp_to_string(step.end_time),
                "ErrorCode": _api_error_codes(step.errors),
                "WarningCode": _api_error_codes(step.warnings),
            }
            for step in steps
        ],
        output="table",
    )


@task_app.command("list")
def task_list(
    ctx: typer.Context,
    entity_id: Annotated[str | None, typer.Option("--entity-id", "-e", help="Entity id")] = None,
    entity_kind: Annotated[str | None, typer.Option("--entity-kind", "-k", help="Entity kind")] = None,
    state_filter: Annotated[str | None, typer.Option("--state", "-s", help="Task state")] = None,
) -> None:
    state = _state(ctx)

    async def run() -> list[Task]:
        async with _make_client(state) as client:
            return await client.tasks.list(entity_id=entity_id, entity_kind=entity_kind, state=state_filter)

    print_task_list(state, _run(run()))


@task_app.command("show")
def task_show(ctx: typer.Context, task_id: Annotated[str, typer.Argument(help="Task id")]) -> None:
    state = _state(ctx)

    async def run() -> Task:
        async with _make_client(state) as client:
            return await client.tasks.get(task_id)

    task = _run(run())
    if state.output is not None:
        _emit(state, task)
        return

    if state.non_interactive:
        typer.echo(
            "\t".join(
                [
                    task.id,
                    task.state,
                    task.entity.id,
                    task.entity.kind,
                    task.operation,
                    str(task.started_time),
                    str(task.end_time),
                    _resource_properties(task),
                ]
            )
        )
    else:
        typer.echo(f"Task:        {task.id}")
        typer.echo(f"Entity:      {task.entity.kind} {task.entity.id}")
        typer.echo(f"State:       {task.state}")
        typer.echo(f"Operation:   {task.operation}")
        typer.echo(f"StartedTime: {timestamp_to_string(task.started_time)}")
        typer.echo(f"EndTime:     {timestamp_to_string(task.end_time)}")
        if task.resource_properties is not None:
            typer.echo(f"ResourceProperties: {_resource_properties(task)}")
    print_task_steps(task, scripting=state.non_interactive)


@task_app.command("monitor")
def task_monitor(
    ctx: typer.Context,
    task_id: Annotated[str, typer.Argument(help="Task id")],
    timeout: Annotated[float | None, typer.Option(help="Seconds to wait before giving up")] = None,
) -> None:
    state = _state(ctx)

    async def run() -> Task:
        async with _make_client(state) as client:
            if state.machine:
                return await client.tasks.wait(task_id, timeout=timeout)
            policy = WaitPolicy.for_tasks(client.polling, timeout=timeout)
            return await wait_for_task(client.tasks.get, task_id, policy=policy, progress=sys.stdout)

    task = _run(run())
    if state.output is not None:
        _emit(state, task)
    elif state.non_interactive:
        typer.echo("\t".join([task.id, task.state, task.entity.id, task.entity.kind]))
    else:
        typer.echo(f"Task:   {task.id}")
        typer.echo(f"Entity: {task.entity.kind} {task.entity.id}")
        typer.echo(f"State:  {task.state}")
