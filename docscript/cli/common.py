"""Shared helpers for docscript CLI commands."""

import logging
import sys
from typing import Optional

import click

from docscript.config import ScriptingConfig, ScriptOrigin, load_config
from docscript.dom import Document, parse_file
from docscript.errors import ConfigError, DocumentParseError


def fail(message: str) -> None:
    """Print message to stderr and exit with status 1."""
    click.echo(f"Error: {message}", err=True)
    sys.exit(1)


def read_document(path: str) -> Document:
    try:
        return parse_file(path)
    except (OSError, DocumentParseError) as e:
        fail(str(e))


def read_config(path: Optional[str], origin: Optional[str] = None) -> ScriptingConfig:
    try:
        config = load_config(path)
    except ConfigError as e:
        fail(str(e))
    if origin:
        config = config.model_copy(update={"script_origin": ScriptOrigin(origin)})
    return config


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.WARNING),
        format="%(levelname)s %(name)s: %(message)s",
    )
