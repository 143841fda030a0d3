from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer

from photonctl.cli._common import _emit, _make_client, _run, _state, _wait_on_task
from photonctl.models import Image, Task
from photonctl.utils.prompts import ask_for_input, confirmed

image_app = typer.Typer(no_args_is_help=True, help="Manage images")

REPLICATION_TYPES = ("EAGER", "ON_DEMAND")


@image_app.command("create")
def image_create(
    ctx: typer.Context,
    path: Annotated[Path, typer.Argument(help="Image file to upload", exists=True, dir_okay=False, readable=True)],
    name: Annotated[str | None, typer.Option("--name", "-n", help="Image name")] = None,
    replication: Annotated[
        str | None,
        typer.Option("--image_replication", "-i", help="EAGER or ON_DEMAND"),
    ] = None,
) -> None:
    state = _state(ctx)
    name = ask_for_input("Image name: ", name, non_interactive=state.non_interactive, default=path.name)
    replication = ask_for_input(
        "Image replication type: ",
        replication,
        non_interactive=state.non_interactive,
        default="EAGER",
    ).upper()
    if replication not in REPLICATION_TYPES:
        raise typer.BadParameter(f"must be one of {', '.join(REPLICATION_TYPES)}", param_hint="--image_replication")

    async def run() -> Image | None:
        async with _make_client(state) as client:
            task = await client.images.upload(path, name=name, replication=replication)
            done = await _wait_on_task(client, state, task)
            if state.output is not None:
                return await client.images.get(done.entity.id)
            return None

    created = _run(run())
    if created is not None:
        _emit(state, created)


@image_app.command("delete")
def image_delete(ctx: typer.Context, image_id: Annotated[str, typer.Argument(help="Image id")]) -> None:
    state = _state(ctx)
    if not confirmed(f"Delete image {image_id}?", non_interactive=state.non_interactive):
        typer.echo("OK. Canceled")
        return

    async def run() -> Task:
        async with _make_client(state) as client:
            return await _wait_on_task(client, state, await client.images.delete(image_id))

    _run(run())


@image_app.command("list")
def image_list(
    ctx: typer.Context,
    name: Annotated[str | None, typer.Option("--name", "-n", help="Filter by image name")] = None,
) -> None:
    state = _state(ctx)

    async def run() -> list[Image]:
        async with _make_client(state) as client:
            return await client.images.list(name=name)

    images = _run(run())
    _emit(
        state,
        images,
        table=[
            {
                "ID": image.id,
                "Name": image.name,
                "State": image.state or "",
                "Size": image.size if image.size is not None else "",
                "Replication": image.replication_type or "",
            }
            for image in images
        ],
        rows=[(image.id, image.name, image.state or "", image.size, image.replication_type or "") for image in images],
    )


@image_app.command("show")
def image_show(ctx: typer.Context, image_id: Annotated[str, typer.Argument(help="Image id")]) -> None:
    state = _state(ctx)

    async def run() -> Image:
        async with _make_client(state) as client:
            return await client.images.get(image_id)

    image = _run(run())
    _emit(
        state,
        image,
        table={
            "ID": image.id,
            "Name": image.name,
            "State": image.state or "",
            "Size": image.size if image.size is not None else "",
            "Replication": image.replication_type or "",
            "Replication Progress": image.replication_progress or "",
            "Seeding Progress": image.seeding_progress or "",
        },
        rows=[(image.id, image.name, image.state or "", image.size, image.replication_type or "")],
    )
