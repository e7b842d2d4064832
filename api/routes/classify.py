"""Classify endpoint: does a document need scripting."""

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel
from typing import Optional

from docscript.dom import parse_document
from docscript.errors import DocumentParseError
from docscript.runtime.classifier import is_dynamic_document

router = APIRouter()


class ClassifyRequest(BaseModel):
    """Request body for document classification."""
    document: str
    url: Optional[str] = None


class ClassifyResponse(BaseModel):
    """Response body for document classification."""
    dynamic: bool
    url: Optional[str] = None


@router.post("/classify", response_model=ClassifyResponse)
async def classify_document(request: ClassifyRequest):
    """Tell whether the posted document is dynamic."""
    try:
        document = parse_document(request.document, request.url or "")
    except DocumentParseError as e:
        raise HTTPException(status_code=422, detail=str(e))

    return ClassifyResponse(dynamic=is_dynamic_document(document), url=request.url)
