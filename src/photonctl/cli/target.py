from __future__ import annotations

from typing import Annotated

import typer

from photonctl.cli._common import _emit, _state
from photonctl.errors import ConfigError

target_app = typer.Typer(no_args_is_help=True, help="Set or show the API endpoint")


@target_app.command("set")
def target_set(
    ctx: typer.Context,
    address: Annotated[str, typer.Argument(help="API endpoint, e.g. https://10.0.0.1:9000")],
    nocertcheck: Annotated[bool, typer.Option("--nocertcheck", "-c", help="Skip TLS verification")] = False,
    token: Annotated[str | None, typer.Option(help="Bearer token sent with every request")] = None,
) -> None:
    state = _state(ctx)
    if not address.startswith(("http://", "https://")):
        raise typer.BadParameter("target must start with http:// or https://", param_hint="address")
    cfg = state.config_manager().set_target(address, ignore_certificate=nocertcheck, token=token)
    if not state.machine:
        typer.echo(f"API target set to '{cfg.target}'")


@target_app.command("show")
def target_show(ctx: typer.Context) -> None:
    state = _state(ctx)
    cfg = state.config_manager().load()
    if not cfg.target:
        raise ConfigError("No API target set. Run 'target set <address>' first")

    summary = {"target": cfg.target, "ignoreCertificate": cfg.ignore_certificate}
    if state.output is not None:
        _emit(state, summary)
    elif state.non_interactive:
        typer.echo(cfg.target)
    else:
        typer.echo(f"Current target is '{cfg.target}'")
