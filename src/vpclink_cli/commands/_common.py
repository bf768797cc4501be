"""Shared helpers for CLI commands — client and controller factories, shared options."""

from __future__ import annotations

from typing import Annotated

import typer

from vpclink_cli.client.control_plane import ControlPlaneClient
from vpclink_cli.config.manager import ConfigManager
from vpclink_cli.reconcile.controller import VpcLinkController

# Shared Typer option type aliases
ProfileOpt = Annotated[
    str | None,
    typer.Option("--profile", "-p", help="Control-plane profile"),
]
UrlOpt = Annotated[
    str | None,
    typer.Option("--url", help="Control-plane URL override"),
]
TokenOpt = Annotated[
    str | None,
    typer.Option("--token", help="API key override"),
]
FormatOpt = Annotated[
    str,
    typer.Option("--format", "-f", help="Output format (table, json, yaml, csv)"),
]
TimeoutOpt = Annotated[
    float | None,
    typer.Option("--timeout", min=1, help="Seconds to wait for the link to become available"),
]
NameOpt = Annotated[
    str | None,
    typer.Option("--name", help="New link name"),
]
DescriptionOpt = Annotated[
    str | None,
    typer.Option("--description", help="New description (pass '' to clear)"),
]
TargetsOpt = Annotated[
    list[str] | None,
    typer.Option("--target", "-t", help="Replace the target ARN set (repeatable)"),
]
AddTargetsOpt = Annotated[
    list[str] | None,
    typer.Option("--add-target", help="Add a target ARN (repeatable)"),
]
RemoveTargetsOpt = Annotated[
    list[str] | None,
    typer.Option("--remove-target", help="Remove a target ARN (repeatable)"),
]


def _get_manager() -> ConfigManager:
    return ConfigManager()


def make_client(
    profile: str | None,
    url: str | None,
    token: str | None,
) -> ControlPlaneClient:
    """Create a ControlPlaneClient from CLI options, env vars, or config profile."""
    mgr = _get_manager()
    resolved = mgr.resolve_profile(profile_name=profile, url=url, token=token)
    return ControlPlaneClient(resolved)


def make_controller(
    client: ControlPlaneClient,
    resource_id: str | None = None,
    *,
    timeout: float | None = None,
) -> VpcLinkController:
    """Create a controller using the configured wait bounds."""
    wait = _get_manager().wait_settings(timeout)
    return VpcLinkController(client, resource_id, wait=wait)
