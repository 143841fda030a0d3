from __future__ import annotations

import typer


def ask_for_input(prompt: str, value: str | None, *, non_interactive: bool, default: str | None = None) -> str:
    """Return `value` if set, otherwise prompt for it.

    In non-interactive mode a missing value is a usage error.
    """

    if value:
        return value
    if non_interactive:
        if default is not None:
            return default
        label = prompt.rstrip(": ").strip()
        raise typer.BadParameter(f"{label} is required in non-interactive mode")
    return typer.prompt(prompt.rstrip(": "), default=default)


def confirmed(message: str, *, non_interactive: bool) -> bool:
    if non_interactive:
        return True
    return typer.confirm(message, default=False)
