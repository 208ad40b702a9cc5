from __future__ import annotations
from typing import Any, Dict, Union
from pydantic import BaseModel, ConfigDict
from ..errors import InputValidationError
from ..state import ResumeDocument, ResumeInput

TEXT_ENDPOINT = "/analyze"
DOCUMENT_ENDPOINT = "/analyze-pdf"
DOCUMENT_FIELD = "resume"


class TextRequest(BaseModel):
    model_config = ConfigDict(frozen=True)

    text: str

    @property
    def endpoint(self) -> str:
        return TEXT_ENDPOINT

    def http_kwargs(self) -> Dict[str, Any]:
        return {"json": {"resumeText": self.text}}


class DocumentRequest(BaseModel):
    model_config = ConfigDict(frozen=True)

    document: ResumeDocument

    @property
    def endpoint(self) -> str:
        return DOCUMENT_ENDPOINT

    def http_kwargs(self) -> Dict[str, Any]:
        doc = self.document
        return {"files": {DOCUMENT_FIELD: (doc.filename, doc.content, doc.content_type)}}


AnalysisRequest = Union[TextRequest, DocumentRequest]


def build_request(resume: ResumeInput) -> AnalysisRequest:
    """Pick the single wire encoding for this submission. An attached document wins over text."""
    if resume.document is not None:
        return DocumentRequest(document=resume.document)
    if resume.has_text:
        return TextRequest(text=resume.text)
    raise InputValidationError("Please paste resume text OR upload a PDF")
