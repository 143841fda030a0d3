from __future__ import annotations

from functools import partial
from pathlib import Path
from typing import Annotated

import typer

from photonctl import __version__
from photonctl.cli._common import CLIState, OutputChoice
from photonctl.cli.cluster import cluster_app, service_app
from photonctl.cli.disk import disk_app
from photonctl.cli.flavor import flavor_app
from photonctl.cli.host import host_app
from photonctl.cli.image import image_app
from photonctl.cli.network import network_app
from photonctl.cli.project import project_app
from photonctl.cli.router import router_app
from photonctl.cli.subnet import subnet_app
from photonctl.cli.target import target_app
from photonctl.cli.task import task_app
from photonctl.cli.tenant import tenant_app
from photonctl.cli.vm import vm_app
from photonctl.config import ConfigManager
from photonctl.errors import PhotonError
from photonctl.log import cleanup_logging, configure_logging

app = typer.Typer(no_args_is_help=True, add_completion=False, help="Command line client for Photon Controller")

app.add_typer(target_app, name="target")
app.add_typer(tenant_app, name="tenant")
app.add_typer(project_app, name="project")
app.add_typer(vm_app, name="vm")
app.add_typer(disk_app, name="disk")
app.add_typer(flavor_app, name="flavor")
app.add_typer(image_app, name="image")
app.add_typer(host_app, name="host")
app.add_typer(network_app, name="network")
app.add_typer(subnet_app, name="subnet")
app.add_typer(router_app, name="router")
app.add_typer(cluster_app, name="cluster")
app.add_typer(service_app, name="service")
app.add_typer(task_app, name="task")

__all__ = ["app", "main", "run"]


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"photon {__version__}")
        raise typer.Exit()


def _print_detail(config_file: Path | None) -> None:
    cfg = ConfigManager(config_file).load()
    typer.echo(f"Target:  {cfg.target or '-'}")
    typer.echo(f"Tenant:  {f'{cfg.tenant.name} ({cfg.tenant.id})' if cfg.tenant else '-'}")
    typer.echo(f"Project: {f'{cfg.project.name} ({cfg.project.id})' if cfg.project else '-'}")
    typer.echo("")


@app.callback()
def main(
    ctx: typer.Context,
    non_interactive: Annotated[
        bool,
        typer.Option("--non-interactive", "-n", help="Never prompt; print script-friendly output"),
    ] = False,
    output: Annotated[
        OutputChoice | None,
        typer.Option("--output", "-o", help="Print results as json or yaml", case_sensitive=False),
    ] = None,
    detail: Annotated[
        bool,
        typer.Option("--detail", "-d", help="Print the current target, tenant and project first"),
    ] = False,
    log_file: Annotated[Path | None, typer.Option("--log-file", "-l", help="Write debug logs to this file")] = None,
    config_file: Annotated[Path | None, typer.Option("--config-file", "-c", help="Path to the config file")] = None,
    version: Annotated[
        bool | None,
        typer.Option("--version", callback=_version_callback, is_eager=True, help="Show version"),
    ] = None,
) -> None:
    _ = version
    if output is not None and non_interactive:
        raise typer.BadParameter("--output cannot be combined with --non-interactive")
    if detail and (output is not None or non_interactive):
        raise typer.BadParameter("--detail cannot be combined with --output or --non-interactive")

    handler = configure_logging(log_file)
    ctx.call_on_close(partial(cleanup_logging, handler))
    ctx.obj = CLIState(config_file=config_file, output=output, non_interactive=non_interactive, detail=detail)
    if detail:
        _print_detail(config_file)


def run() -> None:
    try:
        app()
    except PhotonError as exc:
        typer.echo(f"error: {exc}", err=True)
        raise SystemExit(1) from None


if __name__ == "__main__":
    run()
