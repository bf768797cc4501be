"""Config commands — manage control-plane profiles and wait settings."""

from __future__ import annotations

from typing import Annotated, Optional

import typer
from rich.console import Console
from rich.prompt import Confirm, Prompt

from vpclink_cli.client.errors import error_handler
from vpclink_cli.config.manager import ConfigManager
from vpclink_cli.config.models import ControlPlaneProfile, WaitSettings
from vpclink_cli.output.formatter import output

app = typer.Typer(name="config", help="Manage control-plane profiles and CLI configuration.")
console = Console()


def _get_manager() -> ConfigManager:
    return ConfigManager()


@app.command()
@error_handler
def init() -> None:
    """Interactive setup wizard — create your first control-plane profile."""
    mgr = _get_manager()
    console.print("[bold]vpclink-cli Setup Wizard[/]\n")

    name = Prompt.ask("Profile name", default="default")
    url = Prompt.ask("Control-plane URL (e.g. https://apigateway.example.com)")
    token = Prompt.ask("API key", default=None)
    verify_ssl = Confirm.ask("Verify SSL certificates?", default=True)

    profile = ControlPlaneProfile(
        name=name,
        url=url.rstrip("/"),
        token=token if token else None,
        verify_ssl=verify_ssl,
    )
    mgr.add_profile(profile)
    console.print(f"\n[green]Profile '{name}' saved and set as default.[/]")
    console.print(f"Config file: {mgr.config_path}")


@app.command()
@error_handler
def add(
    name: Annotated[str, typer.Argument(help="Profile name")],
    url: Annotated[str, typer.Option("--url", "-u", help="Control-plane URL")],
    token: Annotated[Optional[str], typer.Option("--token", "-t", help="API key")] = None,
    no_verify_ssl: Annotated[bool, typer.Option("--no-verify-ssl", help="Disable SSL verification")] = False,
    set_default: Annotated[bool, typer.Option("--default", help="Set as default profile")] = False,
) -> None:
    """Add a control-plane profile."""
    mgr = _get_manager()
    profile = ControlPlaneProfile(
        name=name,
        url=url.rstrip("/"),
        token=token,
        verify_ssl=not no_verify_ssl,
    )
    mgr.add_profile(profile)
    if set_default:
        mgr.set_default(name)
    console.print(f"[green]Profile '{name}' added.[/]")


@app.command("list")
@error_handler
def list_profiles(
    fmt: Annotated[str, typer.Option("--format", "-f", help="Output format")] = "table",
) -> None:
    """List all configured profiles."""
    mgr = _get_manager()
    profiles = mgr.config.profiles
    if not profiles:
        console.print("[yellow]No profiles configured. Run 'vpclink-cli config init' to get started.[/]")
        return

    default = mgr.config.default_profile
    columns = ["Name", "URL", "Auth", "Default"]
    rows = []
    for name, p in profiles.items():
        auth = "api-key" if p.auth_configured else "none"
        is_default = "*" if name == default else ""
        rows.append([name, p.url, auth, is_default])

    output(
        {"profiles": [p.model_dump(exclude={"token"}, exclude_none=True) for p in profiles.values()]},
        fmt,
        columns=columns,
        rows=rows,
        title="Control-Plane Profiles",
    )


@app.command()
@error_handler
def show(
    name: Annotated[str, typer.Argument(help="Profile name")],
    fmt: Annotated[str, typer.Option("--format", "-f", help="Output format")] = "table",
) -> None:
    """Show profile details."""
    mgr = _get_manager()
    profile = mgr.get_profile(name)
    if not profile:
        console.print(f"[red]Profile '{name}' not found.[/]")
        raise typer.Exit(1)

    data = profile.model_dump(exclude_none=True)
    # Mask API key for display
    if "token" in data:
        data["token"] = data["token"][:4] + "..." if len(data["token"]) > 8 else "***"

    output(data, fmt, kv=True, title=f"Profile: {name}")


@app.command("set-default")
@error_handler
def set_default(
    name: Annotated[str, typer.Argument(help="Profile name to set as default")],
) -> None:
    """Set the default control-plane profile."""
    mgr = _get_manager()
    if mgr.set_default(name):
        console.print(f"[green]Default profile set to '{name}'.[/]")
    else:
        console.print(f"[red]Profile '{name}' not found.[/]")
        raise typer.Exit(1)


@app.command("set-wait")
@error_handler
def set_wait(
    timeout: Annotated[Optional[float], typer.Option("--timeout", help="Give up after this many seconds")] = None,
    delay: Annotated[Optional[float], typer.Option("--delay", help="Seconds before the first status check")] = None,
    interval: Annotated[Optional[float], typer.Option("--interval", help="Seconds between status checks")] = None,
) -> None:
    """Change how long link commands wait for provisioning."""
    mgr = _get_manager()
    current = mgr.config.wait.model_dump()
    if timeout is not None:
        current["timeout"] = timeout
    if delay is not None:
        current["delay"] = delay
    if interval is not None:
        current["min_interval"] = interval
    mgr.config.wait = WaitSettings(**current)
    mgr.save()
    w = mgr.config.wait
    console.print(
        f"[green]Wait settings saved:[/] timeout={w.timeout:g}s delay={w.delay:g}s interval={w.min_interval:g}s"
    )


@app.command()
@error_handler
def test(
    name: Annotated[Optional[str], typer.Argument(help="Profile name (uses default if omitted)")] = None,
) -> None:
    """Test connectivity to the control plane."""
    from vpclink_cli.client.control_plane import ControlPlaneClient
    from vpclink_cli.config.constants import VPC_LINKS_PATH

    mgr = _get_manager()
    profile = mgr.resolve_profile(profile_name=name)
    console.print(f"Testing connection to [bold]{profile.url}[/]...")

    with ControlPlaneClient(profile) as client:
        client.get(VPC_LINKS_PATH, params={"limit": 1})
        console.print("[green]Connected![/]")


@app.command()
@error_handler
def remove(
    name: Annotated[str, typer.Argument(help="Profile name to remove")],
    force: Annotated[bool, typer.Option("--force", "-f", help="Skip confirmation")] = False,
) -> None:
    """Remove a control-plane profile."""
    mgr = _get_manager()
    if not mgr.get_profile(name):
        console.print(f"[red]Profile '{name}' not found.[/]")
        raise typer.Exit(1)

    if not force:
        if not Confirm.ask(f"Remove profile '{name}'?"):
            console.print("Cancelled.")
            return

    mgr.remove_profile(name)
    console.print(f"[green]Profile '{name}' removed.[/]")
