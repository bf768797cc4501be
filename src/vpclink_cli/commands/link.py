"""VPC link commands — create, inspect, plan, update, wait for, and delete a link.

Every command that changes the link waits for the control plane to report
it ``AVAILABLE`` again before returning. A link that no longer exists is
reported, not treated as an error, so commands can safely be re-run.
"""

from __future__ import annotations

from typing import Annotated

import typer
from rich.console import Console
from rich.prompt import Confirm

from vpclink_cli.client.errors import WaitError, err_console, error_handler
from vpclink_cli.commands._common import (
    AddTargetsOpt,
    DescriptionOpt,
    FormatOpt,
    NameOpt,
    ProfileOpt,
    RemoveTargetsOpt,
    TargetsOpt,
    TimeoutOpt,
    TokenOpt,
    UrlOpt,
    make_client,
    make_controller,
)
from vpclink_cli.models.vpc_link import RemoteResourceState, ResourceSpec
from vpclink_cli.output.formatter import output
from vpclink_cli.output.tables import patch_rows, patch_table
from vpclink_cli.reconcile.diff import compute_patches

app = typer.Typer(name="link", help="Manage a VPC link on the control plane.")
console = Console()

LinkIdArg = Annotated[str, typer.Argument(help="VPC link id")]


def _print_state(state: RemoteResourceState, fmt: str) -> None:
    summary = state.summary()
    output(
        state if fmt in ("json", "yaml") else summary,
        fmt,
        columns=list(summary),
        rows=[list(summary.values())],
        title=f"VPC link: {state.id}",
        kv=True,
    )


def _report_missing(link_id: str) -> None:
    console.print(f"[yellow]VPC link '{link_id}' no longer exists.[/]")


def _desired(
    current: RemoteResourceState,
    name: str | None,
    description: str | None,
    targets: list[str] | None,
    add_targets: list[str] | None,
    remove_targets: list[str] | None,
) -> tuple[ResourceSpec, ResourceSpec]:
    previous = ResourceSpec.from_state(current)
    desired = previous.with_changes(
        name=name,
        description=description,
        targets=targets or None,
        add_targets=add_targets or (),
        remove_targets=remove_targets or (),
    )
    return previous, desired


@app.command()
@error_handler
def create(
    name: Annotated[str, typer.Option("--name", help="Link name")],
    targets: Annotated[
        list[str],
        typer.Option("--target", "-t", help="Target ARN (repeatable)"),
    ],
    description: Annotated[
        str | None, typer.Option("--description", help="Link description"),
    ] = None,
    timeout: TimeoutOpt = None,
    profile: ProfileOpt = None,
    url: UrlOpt = None,
    token: TokenOpt = None,
    fmt: FormatOpt = "table",
) -> None:
    """Create a VPC link and wait until it is available."""
    spec = ResourceSpec(name=name, description=description, targets=frozenset(targets))
    with make_client(profile, url, token) as client:
        controller = make_controller(client, timeout=timeout)
        try:
            state = controller.create(spec)
        except WaitError:
            if controller.resource_id:
                err_console.print(
                    f"[yellow]VPC link {controller.resource_id} was created but is not "
                    "available. Inspect it with 'link show' or remove it with 'link delete'.[/]"
                )
            raise
    _print_state(state, fmt)
    if fmt == "table":
        console.print(f"[green]VPC link '{name}' created with id {state.id}.[/]")


@app.command()
@error_handler
def show(
    link_id: LinkIdArg,
    profile: ProfileOpt = None,
    url: UrlOpt = None,
    token: TokenOpt = None,
    fmt: FormatOpt = "table",
) -> None:
    """Show the current state of a VPC link."""
    with make_client(profile, url, token) as client:
        state = make_controller(client, link_id).read()
    if state is None:
        _report_missing(link_id)
        return
    _print_state(state, fmt)


@app.command()
@error_handler
def plan(
    link_id: LinkIdArg,
    name: NameOpt = None,
    description: DescriptionOpt = None,
    targets: TargetsOpt = None,
    add_targets: AddTargetsOpt = None,
    remove_targets: RemoveTargetsOpt = None,
    profile: ProfileOpt = None,
    url: UrlOpt = None,
    token: TokenOpt = None,
    fmt: FormatOpt = "table",
) -> None:
    """Show the patch operations an update would send, without applying them."""
    with make_client(profile, url, token) as client:
        current = make_controller(client, link_id).read()
    if current is None:
        _report_missing(link_id)
        return
    previous, desired = _desired(current, name, description, targets, add_targets, remove_targets)
    patches = compute_patches(previous, desired)
    if not patches:
        console.print("[green]No changes.[/]")
        return
    if fmt == "table":
        console.print(patch_table(patches, title=f"Plan: {link_id}"))
    else:
        output(patches, fmt, columns=["Op", "Path", "Value"], rows=patch_rows(patches))


@app.command()
@error_handler
def update(
    link_id: LinkIdArg,
    name: NameOpt = None,
    description: DescriptionOpt = None,
    targets: TargetsOpt = None,
    add_targets: AddTargetsOpt = None,
    remove_targets: RemoveTargetsOpt = None,
    timeout: TimeoutOpt = None,
    profile: ProfileOpt = None,
    url: UrlOpt = None,
    token: TokenOpt = None,
    fmt: FormatOpt = "table",
) -> None:
    """Update a VPC link in place and wait until it is available again."""
    with make_client(profile, url, token) as client:
        controller = make_controller(client, link_id, timeout=timeout)
        current = controller.read()
        if current is None:
            _report_missing(link_id)
            return
        previous, desired = _desired(
            current, name, description, targets, add_targets, remove_targets,
        )
        if previous == desired:
            console.print("[green]No changes.[/]")
            return
        state = controller.update(previous, desired)
    if state is None:
        _report_missing(link_id)
        return
    _print_state(state, fmt)
    if fmt == "table":
        console.print(f"[green]VPC link '{link_id}' updated.[/]")


@app.command()
@error_handler
def wait(
    link_id: LinkIdArg,
    timeout: TimeoutOpt = None,
    profile: ProfileOpt = None,
    url: UrlOpt = None,
    token: TokenOpt = None,
    fmt: FormatOpt = "table",
) -> None:
    """Wait until a VPC link reports available."""
    with make_client(profile, url, token) as client:
        state = make_controller(client, link_id, timeout=timeout).wait()
    _print_state(state, fmt)


@app.command()
@error_handler
def delete(
    link_id: LinkIdArg,
    force: Annotated[bool, typer.Option("--force", help="Skip confirmation")] = False,
    profile: ProfileOpt = None,
    url: UrlOpt = None,
    token: TokenOpt = None,
) -> None:
    """Delete a VPC link. Deleting a link that no longer exists succeeds."""
    if not force:
        if not Confirm.ask(f"Delete VPC link '{link_id}'?"):
            console.print("Cancelled.")
            return

    with make_client(profile, url, token) as client:
        make_controller(client, link_id).delete()
    console.print(f"[green]VPC link '{link_id}' deleted.[/]")
