"""Scripts command for docscript CLI."""

import json

import click

from docscript.cli.common import configure_logging, read_config, read_document
from docscript.governance.reporting import LoggingErrorReporter
from docscript.runtime.environment import ScriptingEnvironment


@click.command()
@click.argument('document', type=click.Path(exists=True, dir_okay=False))
@click.option('--config', '-c', 'config_path', type=click.Path(exists=True), help='Path to JSON config')
@click.option('--json-output', '-j', 'json_output', is_flag=True, help='Output as JSON')
def scripts_command(document, config_path, json_output):
    """List the script elements of DOCUMENT and whether policy allows them."""
    config = read_config(config_path)
    configure_logging(config.log_level)
    doc = read_document(document)

    with ScriptingEnvironment(doc, config=config, reporter=LoggingErrorReporter()) as env:
        descriptors = env.discover_scripts()

    if json_output:
        click.echo(json.dumps([d.to_dict() for d in descriptors], indent=2))
        return

    if not descriptors:
        click.echo("No script elements")
        return
    for d in descriptors:
        status = "ok" if d.valid else f"refused ({d.error})"
        source = d.href or "inline"
        click.echo(f"  line {d.line_number}: {d.script_type} {source} - {status}")
