"""Pytest configuration and shared fixtures.

Provides fixtures for:
- Sample HTML pages (Korean FAQ-style page)
- Fake question source providers (recording / failing)
- FastAPI test client with the store / provider dependencies overridden
"""

import logging
from typing import List

import pytest
from fastapi.testclient import TestClient

from app.api.routes import get_provider, get_store
from app.main import app
from models.question_models import SearchQuestion
from services.analysis_store import InMemoryAnalysisStore
from services.errors import QuestionSourceError
from services.question_sources import QuestionSourceProvider, TemplateQuestionProvider

logger = logging.getLogger(__name__)


SAMPLE_HTML = """
<html>
  <head>
    <title>커피 원두 가이드</title>
    <meta name="description" content="커피 원두 보관과 추천 정보">
    <meta name="keywords" content="커피, 원두">
    <meta property="og:title" content="커피 원두 가이드 | Coffee">
    <meta property="og:description" content="원두 보관 방법 총정리">
    <link rel="canonical" href="https://example.com/coffee">
    <style>.hidden { display: none; }</style>
  </head>
  <body>
    <h1>커피 원두</h1>
    <h2>보관 방법</h2>
    <h4>ignored heading</h4>
    <script>var tracking = "어떻게 추적하나요?";</script>
    <p>커피 원두는 어떻게 보관하나요? 커피 그라인더 추천 부탁드립니다.
       커피 가격 비용은 얼마인가요? 좋은 하루.</p>
  </body>
</html>
"""


class RecordingProvider(QuestionSourceProvider):
    """Returns template questions and records every keyword it was asked for."""

    name = "recording"

    def __init__(self, fail_on: tuple = ()) -> None:
        self.calls: List[str] = []
        self.fail_on = set(fail_on)
        self._template = TemplateQuestionProvider()

    async def fetch_candidate_questions(self, keyword, source="google"):
        self.calls.append(keyword)
        if keyword in self.fail_on:
            raise QuestionSourceError(keyword, "simulated failure")
        return await self._template.fetch_candidate_questions(keyword, source)


class FailingProvider(QuestionSourceProvider):
    name = "failing"

    async def fetch_candidate_questions(self, keyword, source="google"):
        raise QuestionSourceError(keyword, "always fails")


class StaticProvider(QuestionSourceProvider):
    """Returns the same fixed texts for every keyword."""

    name = "static"

    def __init__(self, texts: List[str]) -> None:
        self.texts = texts

    async def fetch_candidate_questions(self, keyword, source="google"):
        return [SearchQuestion(source=source, text=t) for t in self.texts]


@pytest.fixture
def sample_html() -> str:
    return SAMPLE_HTML


@pytest.fixture
def recording_provider() -> RecordingProvider:
    return RecordingProvider()


@pytest.fixture
def make_recording_provider():
    return RecordingProvider


@pytest.fixture
def failing_provider() -> FailingProvider:
    return FailingProvider()


@pytest.fixture
def make_static_provider():
    return StaticProvider


@pytest.fixture
def fake_fetch(monkeypatch, sample_html):
    """Replace the crawler used by the workflow with an in-memory page."""
    fetched: List[str] = []

    def _fetch(url, timeout=None):
        logger.debug("fake fetch %s", url)
        fetched.append(url)
        return sample_html

    monkeypatch.setattr("app.graph.nodes.fetch_html", _fetch)
    return fetched


@pytest.fixture
def memory_store() -> InMemoryAnalysisStore:
    return InMemoryAnalysisStore()


@pytest.fixture
def client(memory_store, recording_provider):
    app.dependency_overrides[get_store] = lambda: memory_store
    app.dependency_overrides[get_provider] = lambda: recording_provider
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
