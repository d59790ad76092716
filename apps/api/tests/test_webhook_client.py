import asyncio
import json
from datetime import UTC, datetime

import httpx
import pytest

from agenticv.errors import (
    ForwardError,
    RemoteError,
    UnknownEndpointError,
    WebhookNotConfiguredError,
    WebhookTimeoutError,
)
from agenticv.schemas.webhooks import AnalysisPayload
from agenticv.services.webhook_client import (
    clean_webhook_url,
    extract_analysis_result,
    forward,
    resolve_endpoint_url,
)
from tests.helpers import make_settings


def _payload(**overrides) -> AnalysisPayload:
    values = {
        "public_url": "https://project.storage.example.com/storage/v1/object/public/cv-uploads/cv.pdf",
        "file_name": "cv.pdf",
        "mime_type": "application/pdf",
        "size_bytes": 2048,
        "uploaded_at": datetime(2024, 3, 5, 12, 0, tzinfo=UTC),
    }
    values.update(overrides)
    return AnalysisPayload(**values)


def _run_forward(kind, payload, settings, handler):
    return asyncio.run(forward(kind, payload, settings=settings, transport=httpx.MockTransport(handler)))


def test_forward_returns_webhook_json_unchanged(settings):
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"parsedData": {"name": "Jane"}})

    result = _run_forward("cv-parser", _payload(), settings, handler)

    assert result == {"parsedData": {"name": "Jane"}}
    assert str(seen[0].url) == "https://hooks.example.com/webhook/cv-parser"
    body = json.loads(seen[0].content)
    assert body == {
        "publicUrl": "https://project.storage.example.com/storage/v1/object/public/cv-uploads/cv.pdf",
        "filename": "cv.pdf",
        "fileType": "application/pdf",
        "fileSize": 2048,
        "uploadedAt": "2024-03-05T12:00:00Z",
    }


def test_forward_includes_question_and_bearer_token_when_set():
    settings = make_settings(webhook_api_key="secret-token")
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"ok": True})

    _run_forward("cv-parser", _payload(question="Extract the skills"), settings, handler)

    assert json.loads(seen[0].content)["question"] == "Extract the skills"
    assert seen[0].headers["authorization"] == "Bearer secret-token"


def test_forward_times_out_and_cancels_request():
    settings = make_settings(webhook_timeout_seconds=0.05)
    cancelled: list[bool] = []

    async def handler(request: httpx.Request) -> httpx.Response:
        try:
            await asyncio.sleep(5)
        except asyncio.CancelledError:
            cancelled.append(True)
            raise
        return httpx.Response(200, json={"late": True})

    with pytest.raises(WebhookTimeoutError):
        _run_forward("cv-parser", _payload(), settings, handler)

    assert cancelled == [True]


def test_html_response_is_remote_error_even_with_200(settings):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, html="<!DOCTYPE html><html><body>Agentflow</body></html>")

    with pytest.raises(RemoteError, match="HTML") as exc_info:
        _run_forward("cv-parser", _payload(), settings, handler)

    assert exc_info.value.status_code == 200
    assert exc_info.value.body.startswith("<!DOCTYPE html>")


def test_non_2xx_response_carries_status_and_snippet(settings):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(502, text="x" * 2000)

    with pytest.raises(RemoteError) as exc_info:
        _run_forward("jd-parser", _payload(), settings, handler)

    assert exc_info.value.status_code == 502
    assert len(exc_info.value.body) == 500


def test_non_json_body_is_remote_error(settings):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, text="Workflow was started")

    with pytest.raises(RemoteError, match="non-JSON"):
        _run_forward("cv-parser", _payload(), settings, handler)


def test_inactive_workflow_error_body_is_remote_error(settings):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(
            200,
            json={"code": 404, "message": 'The requested webhook "get_cvjd" is not registered.'},
        )

    with pytest.raises(RemoteError, match="Workflow is not active") as exc_info:
        _run_forward("complete-analysis", _payload(), settings, handler)

    assert exc_info.value.status_code == 404


def test_connection_failure_is_forward_error(settings):
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(ForwardError, match="connection refused"):
        _run_forward("cv-parser", _payload(), settings, handler)


def test_unknown_kind_is_rejected_before_any_request(settings):
    def handler(request: httpx.Request) -> httpx.Response:
        raise AssertionError("no request expected")

    with pytest.raises(UnknownEndpointError):
        _run_forward("resume-scorer", _payload(), settings, handler)


def test_kind_url_falls_back_to_shared_default():
    settings = make_settings(webhook_default_url="https://hooks.example.com/webhook/default")

    assert resolve_endpoint_url("gap-analyzer", settings) == "https://hooks.example.com/webhook/default"
    assert resolve_endpoint_url("cv-parser", settings) == "https://hooks.example.com/webhook/cv-parser"


def test_missing_url_is_not_configured_error(settings):
    with pytest.raises(WebhookNotConfiguredError):
        resolve_endpoint_url("gap-analyzer", settings)


def test_proxy_toggle_routes_through_relay():
    settings = make_settings(use_proxy=True, proxy_server_url="http://localhost:3002")

    assert resolve_endpoint_url("analyze-complete", settings) == "http://localhost:3002/api/relay/complete-analysis"


def test_clean_webhook_url_strips_copy_paste_debris(caplog):
    raw = '--body "https://hooks.example.com/webhook/get_cvjd"\n'

    assert clean_webhook_url(raw) == "https://hooks.example.com/webhook/get_cvjd"
    assert "Malformed webhook URL" in caplog.text


def test_clean_webhook_url_without_url_raises():
    with pytest.raises(WebhookNotConfiguredError):
        clean_webhook_url("not-a-url")


_ANALYSIS = {"cv_highlighting": [{"text": "Python"}], "jd_highlighting": [], "match_score": {"score": 72}}


def test_extract_analysis_result_unwraps_list_and_output_string():
    data = [{"output": json.dumps(_ANALYSIS)}]

    assert extract_analysis_result(data) == _ANALYSIS


def test_extract_analysis_result_keeps_direct_shape():
    data = {"analysis": dict(_ANALYSIS), "cvData": "Jane Doe"}

    assert extract_analysis_result(data) is data


def test_extract_analysis_result_rejects_broken_output():
    with pytest.raises(RemoteError):
        extract_analysis_result({"output": "{not json"})


@pytest.mark.parametrize(
    "data",
    [
        [{"output": "{}"}],
        {"output": {"cv_highlighting": [], "match_score": {"score": 10}}},
        {"analysis": {"cv_highlighting": [], "jd_highlighting": []}},
        {"parsedData": {"name": "Jane"}},
    ],
)
def test_extract_analysis_result_requires_analysis_fields(data):
    with pytest.raises(RemoteError, match="missing cv_highlighting, jd_highlighting or match_score"):
        extract_analysis_result(data)


def test_extract_analysis_result_rejects_empty_results():
    empty = {"cv_highlighting": [], "jd_highlighting": [], "match_score": {}}

    with pytest.raises(RemoteError, match="empty results"):
        extract_analysis_result([{"output": json.dumps(empty)}])


def test_extract_analysis_result_accepts_zero_score():
    zero = {"cv_highlighting": [], "jd_highlighting": [], "match_score": {"score": 0}}

    assert extract_analysis_result({"output": zero}) == zero


def test_forward_logs_target(settings, caplog):
    caplog.set_level("INFO", logger="agenticv")

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={})

    _run_forward("cv-parser", _payload(), settings, handler)

    assert "Forwarding cv.pdf to cv-parser" in caplog.text
