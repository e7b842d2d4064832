"""Run command for docscript CLI."""

import json

import click

from docscript.cli.common import configure_logging, read_config, read_document
from docscript.config import ScriptOrigin
from docscript.governance.reporting import LoggingErrorReporter
from docscript.runtime.classifier import is_dynamic_document, load_extensions
from docscript.runtime.environment import ScriptingEnvironment
from docscript.runtime.loader import OutcomeStatus


@click.command()
@click.argument('document', type=click.Path(exists=True, dir_okay=False))
@click.option('--config', '-c', 'config_path', type=click.Path(exists=True), help='Path to JSON config')
@click.option('--origin', type=click.Choice([o.value for o in ScriptOrigin]),
              help='Override the allowed script origin')
@click.option('--no-load-event', 'no_load_event', is_flag=True, help='Skip the load event dispatch')
@click.option('--json-output', '-j', 'json_output', is_flag=True, help='Output as JSON')
def run_command(document, config_path, origin, no_load_event, json_output):
    """Load the scripts of DOCUMENT and dispatch its load event."""
    config = read_config(config_path, origin)
    configure_logging(config.log_level)
    doc = read_document(document)

    extensions = load_extensions()
    if not is_dynamic_document(doc, extensions):
        if json_output:
            click.echo(json.dumps({"document": doc.url, "dynamic": False}, indent=2))
        else:
            click.echo("Document is static; nothing to run")
        return

    reporter = LoggingErrorReporter()
    with ScriptingEnvironment(doc, config=config, reporter=reporter,
                              extensions=extensions) as env:
        report = env.load_scripts()
        if not no_load_event:
            env.dispatch_svg_load_event()

    output = {
        "document": doc.url,
        "dynamic": True,
        "report": report.to_dict(),
        "errors": [r.to_dict() for r in reporter.records],
    }

    if json_output:
        click.echo(json.dumps(output, indent=2))
    else:
        click.echo(f"Scripts: {report.discovered}")
        for status in OutcomeStatus:
            click.echo(f"  {status.value}: {report.count(status)}")
        if report.aborted:
            click.echo(f"  not run: {report.not_run}")
        for record in reporter.records:
            click.echo(f"  {record.kind.value}: {record.message}", err=True)
