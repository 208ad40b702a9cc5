from __future__ import annotations
import logging
import mimetypes
from typing import Optional
import httpx
from ..errors import AnalysisServiceError, ReportExportError
from ..state import AnalysisResult, ReportDocument
from .dispatch import AnalysisRequest

logger = logging.getLogger(__name__)

REPORT_ENDPOINT = "/download-report"
REPORT_BASENAME = "resume-analysis-report"
DEFAULT_REPORT_MEDIA_TYPE = "application/pdf"


def report_filename(media_type: Optional[str]) -> str:
    """resume-analysis-report.<ext>, falling back to .pdf when the type says nothing useful."""
    mt = (media_type or "").split(";")[0].strip().lower()
    ext = None
    if mt and mt != "application/octet-stream":
        ext = mimetypes.guess_extension(mt)
    return REPORT_BASENAME + (ext or ".pdf")


class AnalysisClient:
    """Async client for the remote analysis service.

    Every failure mode (transport error, non-2xx status, body that is not an
    analysis result) surfaces as AnalysisServiceError.
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self._http = httpx.AsyncClient(base_url=self.base_url, timeout=timeout, transport=transport)

    async def __aenter__(self) -> "AnalysisClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    async def analyze(self, request: AnalysisRequest) -> AnalysisResult:
        logger.info(f"Submitting {type(request).__name__} to {self.base_url}{request.endpoint}")
        try:
            response = await self._http.post(request.endpoint, **request.http_kwargs())
        except httpx.HTTPError as e:
            raise AnalysisServiceError(f"Request to {request.endpoint} failed: {e}") from e
        if not response.is_success:
            raise AnalysisServiceError(
                f"{request.endpoint} returned HTTP {response.status_code}",
                status_code=response.status_code,
            )
        try:
            return AnalysisResult.model_validate(response.json())
        except ValueError as e:
            # Covers both invalid JSON and a JSON body of the wrong shape.
            raise AnalysisServiceError(
                f"Malformed analysis body from {request.endpoint}: {e}",
                status_code=response.status_code,
            ) from e

    async def download_report(self, result: AnalysisResult) -> ReportDocument:
        try:
            response = await self._http.post(REPORT_ENDPOINT, json=result.model_dump(mode="json"))
        except httpx.HTTPError as e:
            raise ReportExportError(f"Report request failed: {e}") from e
        if not response.is_success:
            raise ReportExportError(
                f"{REPORT_ENDPOINT} returned HTTP {response.status_code}",
                status_code=response.status_code,
            )
        media_type = response.headers.get("content-type") or DEFAULT_REPORT_MEDIA_TYPE
        return ReportDocument(
            filename=report_filename(media_type),
            content=response.content,
            media_type=media_type.split(";")[0].strip(),
        )
