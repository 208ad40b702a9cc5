import json

import httpx
import pytest

from resume_analyzer.errors import AnalysisServiceError, ReportExportError
from resume_analyzer.services.analysis_client import AnalysisClient, report_filename
from resume_analyzer.services.dispatch import DocumentRequest, TextRequest
from resume_analyzer.state import AnalysisResult, ResumeDocument

BASE_URL = "http://analyzer.test"


def _client(handler) -> AnalysisClient:
    return AnalysisClient(BASE_URL, transport=httpx.MockTransport(handler))


@pytest.mark.anyio
async def test_text_request_is_json(sample_payload):
    seen = []

    def handler(request: httpx.Request):
        seen.append(request)
        return httpx.Response(200, json=sample_payload)

    async with _client(handler) as client:
        result = await client.analyze(TextRequest(text="Python dev"))

    assert result.ats_score == 82
    req = seen[0]
    assert req.method == "POST"
    assert req.url.path == "/analyze"
    assert req.headers["content-type"] == "application/json"
    assert json.loads(req.content) == {"resumeText": "Python dev"}


@pytest.mark.anyio
async def test_document_request_is_multipart(sample_payload):
    seen = []

    def handler(request: httpx.Request):
        seen.append(request)
        return httpx.Response(200, json=sample_payload)

    doc = ResumeDocument(filename="cv.pdf", content=b"%PDF-1.4 fake")
    async with _client(handler) as client:
        await client.analyze(DocumentRequest(document=doc))

    req = seen[0]
    assert req.url.path == "/analyze-pdf"
    assert req.headers["content-type"].startswith("multipart/form-data")
    assert b'name="resume"' in req.content
    assert b'filename="cv.pdf"' in req.content
    assert b"%PDF-1.4 fake" in req.content


@pytest.mark.anyio
@pytest.mark.parametrize("status", [400, 404, 500, 503])
async def test_non_2xx_is_failure_even_with_valid_body(sample_payload, status):
    def handler(request):
        return httpx.Response(status, json=sample_payload)

    async with _client(handler) as client:
        with pytest.raises(AnalysisServiceError) as exc:
            await client.analyze(TextRequest(text="x"))
    assert exc.value.status_code == status


@pytest.mark.anyio
@pytest.mark.parametrize("body", [b"not json", b"[]", b'{"ats_score": 50}', b""])
async def test_malformed_body_is_failure(body):
    def handler(request):
        return httpx.Response(200, content=body, headers={"content-type": "application/json"})

    async with _client(handler) as client:
        with pytest.raises(AnalysisServiceError):
            await client.analyze(TextRequest(text="x"))


@pytest.mark.anyio
async def test_transport_error_is_failure():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    async with _client(handler) as client:
        with pytest.raises(AnalysisServiceError) as exc:
            await client.analyze(TextRequest(text="x"))
    assert exc.value.status_code is None


@pytest.mark.anyio
async def test_download_report_posts_result(sample_payload):
    seen = []

    def handler(request):
        seen.append(request)
        return httpx.Response(200, content=b"%PDF-report", headers={"content-type": "application/pdf"})

    result = AnalysisResult.model_validate(sample_payload)
    async with _client(handler) as client:
        report = await client.download_report(result)

    assert seen[0].url.path == "/download-report"
    assert json.loads(seen[0].content) == sample_payload
    assert report.content == b"%PDF-report"
    assert report.filename == "resume-analysis-report.pdf"
    assert report.media_type == "application/pdf"


@pytest.mark.anyio
async def test_download_report_failure(sample_payload):
    def handler(request):
        return httpx.Response(502)

    result = AnalysisResult.model_validate(sample_payload)
    async with _client(handler) as client:
        with pytest.raises(ReportExportError):
            await client.download_report(result)


@pytest.mark.parametrize(
    "media_type, expected",
    [
        ("application/pdf", "resume-analysis-report.pdf"),
        ("application/pdf; charset=binary", "resume-analysis-report.pdf"),
        (None, "resume-analysis-report.pdf"),
        ("", "resume-analysis-report.pdf"),
        ("application/octet-stream", "resume-analysis-report.pdf"),
        ("application/x-unknown-thing", "resume-analysis-report.pdf"),
    ],
)
def test_report_filename(media_type, expected):
    assert report_filename(media_type) == expected


def test_base_url_trailing_slash_is_stripped():
    client = AnalysisClient(BASE_URL + "/")
    assert client.base_url == BASE_URL
