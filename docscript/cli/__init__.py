"""docscript CLI Package - classify, inspect and run document scripts"""

import click

from docscript.cli.classify import classify_command
from docscript.cli.scripts import scripts_command
from docscript.cli.run import run_command


@click.group()
def main():
    """docscript v1.1 CLI - Scripting activation for SVG-like documents."""
    pass


main.add_command(classify_command, "classify")
main.add_command(scripts_command, "scripts")
main.add_command(run_command, "run")

__all__ = [
    "main",
    "classify_command",
    "scripts_command",
    "run_command",
]
