from __future__ import annotations
import logging
from typing import Callable, List, Optional
from .components.feedback_panel import FeedbackPanel, panels_for
from .config import Settings
from .errors import AnalysisServiceError, InputValidationError
from .services.analysis_client import AnalysisClient
from .services.dispatch import AnalysisRequest, build_request
from .state import AnalysisResult, OrchestratorState, ReportDocument, ResumeDocument

logger = logging.getLogger(__name__)

GENERIC_FAILURE = "Something went wrong. Please try again."
NO_RESULT_FOR_EXPORT = "Analyze a resume before downloading the report."
EXPORT_FAILURE = "Could not download the report. Please try again."


class AnalysisOrchestrator:
    """Owns the UI state: current input, the analysis request and the last result.

    All state changes go through the named transitions on OrchestratorState.
    Network errors stop here; presentation components only ever see a
    well-formed AnalysisResult.

    Submission and export each come in two halves. The synchronous prepare_*
    half validates, applies the guard and flips the flag, so a UI callback can
    disable its button before the request goes out. The async complete_* half
    talks to the service. An HTTP client is opened per request, which keeps the
    orchestrator usable across separate event loops (one per Streamlit run).
    """

    def __init__(self, client_factory: Callable[[], AnalysisClient], state: Optional[OrchestratorState] = None):
        self._client_factory = client_factory
        self.state = state if state is not None else OrchestratorState()

    @classmethod
    def from_settings(
        cls, settings: Settings, state: Optional[OrchestratorState] = None, **client_kwargs
    ) -> "AnalysisOrchestrator":
        def factory() -> AnalysisClient:
            return AnalysisClient(settings.api_url, timeout=settings.timeout, **client_kwargs)
        return cls(factory, state)

    # -------- Input --------
    def set_text(self, text: str) -> None:
        self.state.set_text(text)

    def set_document(self, document: Optional[ResumeDocument]) -> None:
        self.state.set_document(document)

    @property
    def can_submit(self) -> bool:
        return not self.state.pending

    @property
    def can_export(self) -> bool:
        return self.state.result is not None and not self.state.exporting

    # -------- Analysis --------
    def prepare_submit(self) -> Optional[AnalysisRequest]:
        """Validate and mark the request pending. None means nothing should be sent."""
        state = self.state
        if state.pending:
            logger.debug("Submission ignored: an analysis request is already pending")
            return None
        try:
            request = build_request(state.input)
        except InputValidationError as e:
            state.warn(str(e))
            return None
        state.begin_submit()
        return request

    async def complete_submit(self, request: AnalysisRequest) -> Optional[AnalysisResult]:
        state = self.state
        try:
            async with self._client_factory() as client:
                result = await client.analyze(request)
        except AnalysisServiceError as e:
            logger.error(f"Analysis failed: {e}")
            state.resolve_failure(GENERIC_FAILURE)
            return None
        except BaseException:
            # Cancelled mid-flight: never leave the submit button disabled.
            state.resolve_failure(GENERIC_FAILURE)
            raise
        state.resolve_success(result)
        logger.info(f"Analysis complete: ats_score={result.ats_score}")
        return result

    async def submit(self) -> Optional[AnalysisResult]:
        request = self.prepare_submit()
        if request is None:
            return None
        return await self.complete_submit(request)

    def panels(self) -> List[FeedbackPanel]:
        if self.state.result is None:
            return []
        return panels_for(self.state.result)

    # -------- Report export --------
    def prepare_export(self) -> Optional[AnalysisResult]:
        """Apply the export guards and mark an export in flight. Returns the result to export."""
        state = self.state
        result = state.result
        if result is None:
            state.warn(NO_RESULT_FOR_EXPORT)
            return None
        if state.exporting:
            logger.debug("Report export ignored: an export is already in flight")
            return None
        state.begin_export()
        return result

    async def complete_export(self, result: AnalysisResult) -> Optional[ReportDocument]:
        state = self.state
        try:
            async with self._client_factory() as client:
                report = await client.download_report(result)
        except AnalysisServiceError as e:
            logger.warning(f"Report export failed: {e}")
            state.fail_export(EXPORT_FAILURE)
            return None
        except BaseException:
            state.fail_export(EXPORT_FAILURE)
            raise
        # A newer analysis may have replaced the result while the export ran.
        if state.result is not result:
            logger.info("Discarding report for a result that is no longer shown")
            state.abandon_export()
            return None
        state.resolve_export(report)
        return report

    async def export_report(self) -> Optional[ReportDocument]:
        result = self.prepare_export()
        if result is None:
            return None
        return await self.complete_export(result)
