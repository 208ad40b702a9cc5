from __future__ import annotations
import math
from enum import Enum
from typing import Literal, Optional, Tuple
from pydantic import BaseModel, ConfigDict, Field, field_validator


class ResumeDocument(BaseModel):
    model_config = ConfigDict(frozen=True)

    filename: str
    content: bytes
    content_type: str = "application/pdf"


class ResumeInput(BaseModel):
    """What the user handed over: pasted text or an uploaded document, never both."""
    model_config = ConfigDict(frozen=True)

    text: str = ""
    document: Optional[ResumeDocument] = None

    @property
    def has_text(self) -> bool:
        return bool(self.text.strip())

    @property
    def is_empty(self) -> bool:
        return not self.has_text and self.document is None


class AnalysisResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    ats_score: int
    strengths: Tuple[str, ...]
    weaknesses: Tuple[str, ...]
    missing_skills: Tuple[str, ...]
    improvement_suggestions: Tuple[str, ...]

    @field_validator("ats_score", mode="before")
    @classmethod
    def _round_fractional_score(cls, v):
        if isinstance(v, float):
            if not math.isfinite(v):
                raise ValueError("ats_score must be a finite number")
            return round(v)
        return v


class ReportDocument(BaseModel):
    model_config = ConfigDict(frozen=True)

    filename: str
    content: bytes
    media_type: str = "application/pdf"


class RequestState(str, Enum):
    IDLE = "idle"
    PENDING = "pending"


class Notice(BaseModel):
    model_config = ConfigDict(frozen=True)

    level: Literal["info", "warning", "error"]
    message: str


class OrchestratorState(BaseModel):
    # Input
    input: ResumeInput = Field(default_factory=ResumeInput)

    # Analysis request
    request_state: RequestState = RequestState.IDLE
    result: Optional[AnalysisResult] = None
    notice: Optional[Notice] = None

    # Report export
    exporting: bool = False
    report: Optional[ReportDocument] = None

    @property
    def pending(self) -> bool:
        return self.request_state is RequestState.PENDING

    # -------- Input transitions --------
    def set_text(self, text: str) -> None:
        text = text or ""
        self.notice = None
        # Last writer wins, but an empty text box does not detach a document.
        document = None if text.strip() else self.input.document
        self.input = ResumeInput(text=text, document=document)

    def set_document(self, document: Optional[ResumeDocument]) -> None:
        self.notice = None
        if document is None:
            self.input = ResumeInput(text=self.input.text)
        else:
            self.input = ResumeInput(document=document)

    # -------- Analysis transitions --------
    def begin_submit(self) -> None:
        self.result = None
        self.report = None
        self.notice = None
        self.request_state = RequestState.PENDING

    def resolve_success(self, result: AnalysisResult) -> None:
        self.result = result
        self.request_state = RequestState.IDLE

    def resolve_failure(self, message: str) -> None:
        self.result = None
        self.notice = Notice(level="error", message=message)
        self.request_state = RequestState.IDLE

    def warn(self, message: str) -> None:
        self.notice = Notice(level="warning", message=message)

    # -------- Export transitions --------
    def begin_export(self) -> None:
        self.exporting = True

    def resolve_export(self, report: ReportDocument) -> None:
        self.report = report
        self.exporting = False

    def fail_export(self, message: str) -> None:
        self.exporting = False
        self.warn(message)

    def abandon_export(self) -> None:
        self.exporting = False
