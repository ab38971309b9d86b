"""Tests for SummaryService provider selection and fallback behaviour."""

from __future__ import annotations

import logging
from typing import List, Optional, Tuple

import httpx
import pytest

from blog_summary_writer.summaries.client import SummaryEndpointClient, TransientError
from blog_summary_writer.summaries.frontmatter import read_summary, read_title, upsert_summary
from blog_summary_writer.summaries.service import PLACEHOLDER_SUMMARY, SummaryService
from blog_summary_writer.summaries.types import RunConfig, SummaryRequest


class FakeClient:
    """Stands in for SummaryEndpointClient; records each call."""

    def __init__(self, reply: str = "", error: Optional[Exception] = None) -> None:
        self.reply = reply
        self.error = error
        self.calls: List[Tuple[str, str, int]] = []

    def request_summary(self, title: str, content: str, word_limit: int) -> str:
        self.calls.append((title, content, word_limit))
        if self.error is not None:
            raise self.error
        return self.reply


def make_request(body: str, title: str = "Post title") -> SummaryRequest:
    return SummaryRequest(title=title, body=body, display_path="post/index.md")


def test_local_summary_from_markdown_body() -> None:
    service = SummaryService(RunConfig())
    result = service.summarize(make_request("# T\n\nHello **world**, visit [here](http://x).\n"))
    assert result.text == "Hello world，visit here。"
    assert result.source == "local"
    assert not result.body_truncated


def test_local_summary_falls_back_to_title_then_placeholder() -> None:
    service = SummaryService(RunConfig())
    assert service.summarize(make_request("```\ncode only\n```\n", title="Fallback title")).text == (
        "Fallback title。"
    )
    assert service.summarize(make_request("", title="")).text == PLACEHOLDER_SUMMARY


def test_api_prose_is_normalized() -> None:
    client = FakeClient(reply="This post explains **caching**. It is short!")
    service = SummaryService(RunConfig(api_url="https://x.test"), client=client)  # type: ignore[arg-type]

    result = service.summarize(make_request("Body text"))

    assert result.source == "api"
    assert result.text == "This post explains caching，It is short。"
    assert client.calls == [("Post title", "Body text", 8000)]


def test_code_like_api_reply_falls_back_to_local() -> None:
    client = FakeClient(reply="```js\nfunction summary() { return x }\n```")
    service = SummaryService(RunConfig(api_url="https://x.test"), client=client)  # type: ignore[arg-type]

    result = service.summarize(make_request("Plain article body"))

    assert result.source == "local"
    assert result.text == "Plain article body。"


def test_empty_api_reply_falls_back_to_local() -> None:
    client = FakeClient(reply="   ")
    service = SummaryService(RunConfig(api_url="https://x.test"), client=client)  # type: ignore[arg-type]
    assert service.summarize(make_request("Plain article body")).source == "local"


def test_api_error_is_logged_and_falls_back(caplog: pytest.LogCaptureFixture) -> None:
    client = FakeClient(error=TransientError("Summary endpoint server error (502)"))
    service = SummaryService(RunConfig(api_url="https://x.test"), client=client)  # type: ignore[arg-type]

    with caplog.at_level(logging.ERROR):
        result = service.summarize(make_request("Plain article body"))

    assert result.source == "local"
    assert "Summary API call failed for post/index.md" in caplog.text


def test_clean_before_api_sends_stripped_text() -> None:
    client = FakeClient(reply="Summary")
    config = RunConfig(api_url="https://x.test", clean_before_api=True)
    service = SummaryService(config, client=client)  # type: ignore[arg-type]

    service.summarize(make_request("# Heading\n\nSome **bold** text\n"))

    assert client.calls[0][1] == "Some bold text"


def test_body_is_truncated_to_word_limit(caplog: pytest.LogCaptureFixture) -> None:
    client = FakeClient(reply="Summary")
    config = RunConfig(api_url="https://x.test", word_limit=10)
    service = SummaryService(config, client=client)  # type: ignore[arg-type]

    with caplog.at_level(logging.INFO):
        result = service.summarize(make_request("x" * 25))

    assert result.body_truncated
    assert client.calls[0][1] == "x" * 10
    assert "truncated: post/index.md" in caplog.text


def test_result_respects_max_len() -> None:
    service = SummaryService(RunConfig(), max_len=12)
    result = service.summarize(make_request("A fairly long sentence that keeps going on and on"))
    assert len(result.text) <= 12
    assert result.text.endswith("。")


def test_multiline_title_fallback_is_single_line() -> None:
    block = "---\ntitle: |\n  Line one\n  Line two\n---\n"
    service = SummaryService(RunConfig())

    result = service.summarize(make_request("", title=read_title(block)))

    assert result.text == "Line one Line two。"
    assert read_summary(upsert_summary(block, result.text)) == result.text


class TestWithEndpointClient:
    """Drive the service through a real client on httpx.MockTransport."""

    def make_service(self, handler) -> SummaryService:
        client = SummaryEndpointClient(
            "https://summary.test/api", max_retries=0, transport=httpx.MockTransport(handler)
        )
        return SummaryService(RunConfig(api_url="https://summary.test/api"), client=client)

    def test_prose_reply_is_used(self) -> None:
        service = self.make_service(
            lambda request: httpx.Response(200, json={"summary": "Explains **caching** well."})
        )
        result = service.summarize(make_request("Plain article body"))
        assert (result.text, result.source) == ("Explains caching well。", "api")

    def test_code_like_reply_falls_back_to_local(self) -> None:
        service = self.make_service(
            lambda request: httpx.Response(200, json={"summary": "const x = foo.bar();"})
        )
        result = service.summarize(make_request("Plain article body"))
        assert (result.text, result.source) == ("Plain article body。", "local")

    def test_server_error_falls_back_to_local(self, caplog: pytest.LogCaptureFixture) -> None:
        service = self.make_service(lambda request: httpx.Response(500))

        with caplog.at_level(logging.ERROR):
            result = service.summarize(make_request("Plain article body"))

        assert (result.text, result.source) == ("Plain article body。", "local")
        assert "server error (500)" in caplog.text
