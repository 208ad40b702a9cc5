from __future__ import annotations
from typing import Optional


class ResumeAnalyzerError(Exception):
    """Base class for every error raised by the resume analyzer client."""


class InputValidationError(ResumeAnalyzerError):
    """Neither resume text nor a document was provided."""


class AnalysisServiceError(ResumeAnalyzerError):
    """Transport failure, non-2xx status or a body that is not an analysis result."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class ReportExportError(AnalysisServiceError):
    pass
