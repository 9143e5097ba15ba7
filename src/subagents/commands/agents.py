"""subagents agents — list the personas available for delegation."""

from __future__ import annotations

from pathlib import Path

import click

from subagents.personas.discovery import discover_personas, render_agent_list


@click.command()
@click.option(
    "--cwd",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    default=None,
    help="Repository root to scan (default: current directory).",
)
@click.option(
    "--brief",
    is_flag=True,
    help="One line per persona, as advertised to a calling agent.",
)
def agents(cwd: Path | None, brief: bool) -> None:
    """List built-in and discovered agent personas."""
    root = cwd if cwd is not None else Path.cwd()
    personas = discover_personas(root)
    if brief:
        click.echo(render_agent_list(personas))
        return
    for persona in personas:
        source = persona.path or "built-in"
        tier = f" [{persona.model}]" if persona.model else ""
        click.echo(f"{persona.name}{tier}  ({source})")
        click.echo(f"  {persona.when_to_use}")
