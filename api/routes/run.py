"""Run endpoint: load a document's scripts and dispatch its load event."""

import logging

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel
from typing import Any, Dict, List, Literal, Optional

from docscript.config import ScriptingConfig, ScriptOrigin
from docscript.dom import parse_document
from docscript.errors import DocumentParseError
from docscript.governance.reporting import LoggingErrorReporter
from docscript.runtime.classifier import is_dynamic_document
from docscript.runtime.environment import ScriptingEnvironment

logger = logging.getLogger(__name__)

router = APIRouter()

# Base URL for posted documents that do not name their own
DEFAULT_DOCUMENT_URL = "http://localhost/document.svg"


class RunRequest(BaseModel):
    """Request body for a scripting run."""
    document: str
    url: Optional[str] = None
    # Remote origins would let clients make the server fetch arbitrary URLs
    origin: Literal["embedded", "none"] = "embedded"
    dispatch_load: bool = True


class RunResponse(BaseModel):
    """Response body for a scripting run."""
    dynamic: bool
    report: Optional[Dict[str, Any]] = None
    errors: List[Dict[str, Any]] = []


def api_config(origin: str) -> ScriptingConfig:
    """Scripting settings for posted documents: sandboxed languages only."""
    config = ScriptingConfig(script_origin=ScriptOrigin(origin))
    config.allowed_script_types = [
        t for t in config.allowed_script_types if t != config.native_script_type
    ]
    return config


@router.post("/run", response_model=RunResponse)
def run_document(request: RunRequest):
    """
    Run the scripts of the posted document.

    Scripts run in the sandboxed Python interpreter. External references and
    native bundles are refused.
    """
    try:
        document = parse_document(request.document, request.url or DEFAULT_DOCUMENT_URL)
    except DocumentParseError as e:
        raise HTTPException(status_code=422, detail=str(e))

    if not is_dynamic_document(document):
        return RunResponse(dynamic=False)

    reporter = LoggingErrorReporter(logger)
    with ScriptingEnvironment(document, config=api_config(request.origin),
                              reporter=reporter) as env:
        report = env.load_scripts()
        if request.dispatch_load:
            env.dispatch_svg_load_event()

    return RunResponse(
        dynamic=True,
        report=report.to_dict(),
        errors=[r.to_dict() for r in reporter.records],
    )
