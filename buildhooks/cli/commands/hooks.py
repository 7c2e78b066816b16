"""Hook management CLI commands.

Provides commands for firing events, listing an event's hook scripts and
creating new hook scripts from a template.
"""

from __future__ import annotations

import asyncio
from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from buildhooks.core.events import LifecycleEvent
from buildhooks.core.hooks import ProjectHooker, ScriptMetadata, fire_async, listeners_for
from buildhooks.exceptions import BuildHooksError, HookScriptError, NotAProjectError

app = typer.Typer(help="Fire and manage lifecycle hooks", no_args_is_help=True)
console = Console()


def _project_hooker(directory: Path) -> ProjectHooker:
    try:
        return ProjectHooker(directory)
    except NotAProjectError as e:
        console.print(f"[red]{e.message}[/red]")
        console.print(f"[dim]No project found at or above: {directory.resolve()}[/dim]")
        raise typer.Exit(1)


def _complete_event(incomplete: str) -> list[str]:
    """Shell completion for event names: the well-known lifecycle events."""
    return [event.value for event in LifecycleEvent if event.value.startswith(incomplete)]


@app.command("fire")
def fire_event(
    event: str = typer.Argument(
        ..., help="Event name (e.g., before_build)", autocompletion=_complete_event
    ),
    directory: Path = typer.Option(Path("."), "--dir", "-d", help="Directory inside the project"),
    global_only: bool = typer.Option(
        False, "--global", help="Fire registered listeners only, without project scripts"
    ),
) -> None:
    """Fire an event.

    Examples:
        buildhooks hooks fire before_build
        buildhooks hooks fire after_build --dir ./app
        buildhooks hooks fire before_build --global
    """
    try:
        if global_only:
            asyncio.run(fire_async(event))
        else:
            hooker = _project_hooker(directory)
            asyncio.run(hooker.fire_async(event))
    except HookScriptError as e:
        console.print(f"[bold red]✗ Hook script failed (exit code {e.exit_code})[/bold red]")
        console.print(f"[cyan]Script:[/cyan] {e.script_path}")
        if e.output:
            console.print("\n[bold]OUTPUT:[/bold]")
            console.print(e.output.rstrip(), markup=False)
        raise typer.Exit(1)
    except BuildHooksError as e:
        console.print(f"[bold red]✗ Event '{event}' failed: {e}[/bold red]")
        raise typer.Exit(1)

    console.print(f"[green]✓ Event '{event}' fired[/green]")


@app.command("list")
def list_hooks(
    event: str = typer.Argument(..., help="Event name", autocompletion=_complete_event),
    directory: Path = typer.Option(Path("."), "--dir", "-d", help="Directory inside the project"),
) -> None:
    """List the hook scripts of an event, in execution order.

    Examples:
        buildhooks hooks list before_build
    """
    hooker = _project_hooker(directory)
    hook_dir = hooker.locator.resolve(hooker.root, event)
    scripts = hooker.locator.list_scripts(hook_dir)
    listener_count = len(listeners_for(event))

    if not scripts:
        console.print(f"[yellow]No hook scripts for '{event}'[/yellow]")
        console.print(f"\n[dim]Create hooks in: {hook_dir}[/dim]")
        console.print("[dim]See: buildhooks hooks create --help[/dim]\n")
    else:
        table = Table(title=f"Hooks for {event} ({len(scripts)})", show_lines=False)
        table.add_column("#", style="dim", width=3, justify="right")
        table.add_column("Script", style="cyan", no_wrap=True)
        table.add_column("Executable", style="white", width=10, justify="center")
        table.add_column("Description", style="white")

        for position, script in enumerate(scripts, start=1):
            metadata = ScriptMetadata.from_script(script.path)
            executable_icon = "[green]✓[/green]" if script.executable else "[red]✗[/red]"

            table.add_row(
                str(position),
                script.name,
                executable_icon,
                metadata.description or "[dim]No description[/dim]",
            )

        console.print()
        console.print(table)
        console.print(f"\n[dim]Hooks directory: {hook_dir}[/dim]")

    console.print(f"[dim]Registered listeners: {listener_count}[/dim]\n")


@app.command("create")
def create_hook(
    event: str = typer.Argument(
        ..., help="Event name (e.g., before_build)", autocompletion=_complete_event
    ),
    name: str = typer.Argument(..., help="Script filename (e.g., 10-version.sh)"),
    directory: Path = typer.Option(Path("."), "--dir", "-d", help="Directory inside the project"),
) -> None:
    """Create a new hook script from the bash template.

    Scripts run in filename order, so prefix them with a number.

    Examples:
        buildhooks hooks create before_build 10-version.sh
    """
    hooker = _project_hooker(directory)
    hook_dir = hooker.locator.resolve(hooker.root, event)
    script_path = hook_dir / name

    if script_path.exists():
        console.print(f"[yellow]Hook '{name}' already exists at:[/yellow]")
        console.print(f"  {script_path}")
        console.print("\n[dim]Edit the file or choose a different name.[/dim]")
        return

    hook_dir.mkdir(parents=True, exist_ok=True)
    script_path.write_text(_bash_template(event, name), encoding="utf-8")
    script_path.chmod(0o755)

    console.print(f"[green]✓ Hook created: {name}[/green]\n")
    console.print(f"[cyan]Path:[/cyan] {script_path}")
    console.print(f"[dim]Fire it with: buildhooks hooks fire {event}[/dim]\n")


def _bash_template(event: str, name: str) -> str:
    """Generate bash hook template."""
    return f"""#!/bin/bash
# DESCRIPTION: {name} ({event} hook)
# AUTHOR: Your Name

# Runs on every '{event}' firing, after the scripts sorted before it.
# The project root is passed as the first argument.
# A non-zero exit status aborts the remaining hooks and the build step.

PROJECT_ROOT="$1"
echo "{event}: running {name} in $PROJECT_ROOT"

exit 0
"""
