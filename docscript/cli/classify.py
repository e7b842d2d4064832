"""Classify command for docscript CLI."""

import json

import click

from docscript.cli.common import read_document
from docscript.runtime.classifier import is_dynamic_document, load_extensions


@click.command()
@click.argument('document', type=click.Path(exists=True, dir_okay=False))
@click.option('--json-output', '-j', 'json_output', is_flag=True, help='Output as JSON')
def classify_command(document, json_output):
    """Tell whether DOCUMENT needs a scripting environment."""
    doc = read_document(document)
    dynamic = is_dynamic_document(doc, load_extensions())

    if json_output:
        click.echo(json.dumps({"document": doc.url, "dynamic": dynamic}, indent=2))
    else:
        click.echo("dynamic" if dynamic else "static")
