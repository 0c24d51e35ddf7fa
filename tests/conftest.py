"""Shared test fixtures for webpage-loader tests."""

from typing import Callable, List, Sequence, Union

import httpx
import pytest

from webpage_loader.config import Settings

COMMITMENT = "Committed to significantly improving the lives of as many people as possible."


class RecordingHandler:
    """MockTransport handler that replays responses and records requests.

    The last response (or exception) is repeated once the list runs out.
    """

    def __init__(self, responses: Sequence[Union[httpx.Response, Exception]]) -> None:
        self.responses = list(responses)
        self.requests: List[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        idx = min(len(self.requests), len(self.responses)) - 1
        resp = self.responses[idx]
        if isinstance(resp, Exception):
            raise resp
        return resp

    @property
    def calls(self) -> int:
        return len(self.requests)


@pytest.fixture
def commitments_html() -> str:
    """Minimal page with a single <h1> padded by whitespace."""
    return f"""
    <html>
    <head><title>Our commitments</title></head>
    <body>
        <header>
            <h1>
                {COMMITMENT}
            </h1>
        </header>
        <main>
            <p>We build products that help people in their daily lives.</p>
            <ul><li>One</li><li>Two</li></ul>
        </main>
    </body>
    </html>
    """


@pytest.fixture
def fast_settings() -> Settings:
    """Settings with no politeness delay and no backoff wait."""
    return Settings(
        min_delay_seconds=0.0,
        max_attempts=3,
        backoff_multiplier=0.0,
        backoff_min=0.0,
        backoff_max=0.0,
    )


@pytest.fixture
def make_handler() -> Callable[..., RecordingHandler]:
    """Build a RecordingHandler from responses or exceptions."""

    def _make(*responses: Union[httpx.Response, Exception]) -> RecordingHandler:
        return RecordingHandler(responses)

    return _make


@pytest.fixture
def html_handler(commitments_html: str) -> RecordingHandler:
    """Handler that always serves the commitments page."""
    return RecordingHandler([httpx.Response(200, html=commitments_html)])
