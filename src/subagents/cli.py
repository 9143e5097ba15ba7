"""Root CLI group and version flag."""

import logging
import signal
import sys

import click

# Ensure SIGPIPE doesn't kill the process when stdout is piped into
# something like `head` that exits early.
if hasattr(signal, "SIGPIPE"):
    signal.signal(signal.SIGPIPE, signal.SIG_IGN)

from subagents import __version__
from subagents.commands.agents import agents
from subagents.commands.run import run


@click.group()
@click.version_option(version=__version__, prog_name="subagents")
@click.option("--verbose", "-v", is_flag=True, help="Log debug output to stderr.")
def cli(verbose: bool) -> None:
    """Subagents — delegate tasks to autonomous agent CLIs."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        stream=sys.stderr,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


cli.add_command(agents)
cli.add_command(run)
