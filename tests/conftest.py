import httpx
import pytest

from resume_analyzer.config import Settings
from resume_analyzer.orchestrator import AnalysisOrchestrator

BASE_URL = "http://analyzer.test"

SAMPLE_PAYLOAD = {
    "ats_score": 82,
    "strengths": ["Clear experience"],
    "weaknesses": [],
    "missing_skills": ["Kubernetes"],
    "improvement_suggestions": ["Add metrics"],
}


@pytest.fixture
def anyio_backend():
    # The gauge and orchestrator are built on asyncio tasks.
    return "asyncio"


@pytest.fixture
def sample_payload():
    return dict(SAMPLE_PAYLOAD)


@pytest.fixture
def make_orchestrator():
    """Build an orchestrator whose HTTP traffic goes to `handler` instead of the network."""
    def _make(handler):
        settings = Settings(api_url=BASE_URL, timeout=5.0)
        return AnalysisOrchestrator.from_settings(settings, transport=httpx.MockTransport(handler))

    return _make
