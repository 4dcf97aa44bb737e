"""Unit tests for the question source providers."""

from unittest.mock import MagicMock

import pytest
import requests

from app.config import Settings
from services.errors import QuestionSourceError
from services.question_sources import (
    TavilyQuestionProvider,
    TemplateQuestionProvider,
    get_question_provider,
)


def _response(status_code=200, payload=None, json_error=False):
    resp = MagicMock()
    resp.status_code = status_code
    resp.ok = 200 <= status_code < 300
    resp.text = "body"
    if json_error:
        resp.json.side_effect = ValueError("no json")
    else:
        resp.json.return_value = payload or {}
    return resp


def _tavily(**overrides) -> TavilyQuestionProvider:
    params = dict(api_key="tvly-test", search_url="https://api.tavily.test/search", max_per_keyword=5)
    params.update(overrides)
    return TavilyQuestionProvider(**params)


class TestTemplateQuestionProvider:
    async def test_three_templated_questions(self) -> None:
        questions = await TemplateQuestionProvider().fetch_candidate_questions("커피")

        assert [q.text for q in questions] == [
            "커피는 얼마나 자주 교체해야 하나요?",
            "커피 비용은 어느 정도인가요?",
            "커피를 선택할 때 고려해야 할 점은 무엇인가요?",
        ]
        assert {q.source for q in questions} == {"google"}
        assert {q.url for q in questions} == {"https://example.com/search?q=%EC%BB%A4%ED%94%BC"}

    async def test_source_is_respected(self) -> None:
        questions = await TemplateQuestionProvider().fetch_candidate_questions("tea", source="naver")
        assert {q.source for q in questions} == {"naver"}


class TestTavilyQuestionProvider:
    async def test_extracts_questions_from_results(self, monkeypatch) -> None:
        payload = {
            "results": [
                {
                    "title": "Coffee guide",
                    "url": "https://a.example/coffee",
                    "content": "커피는 어떻게 보관하나요? 밀폐 용기를 쓰세요. Is decaf worth it?",
                },
                {"title": "No questions", "url": "https://b.example", "content": "Just facts here."},
            ]
        }
        post = MagicMock(return_value=_response(payload=payload))
        monkeypatch.setattr("services.question_sources.requests.post", post)

        questions = await _tavily().fetch_candidate_questions("coffee")

        assert [q.text for q in questions] == [
            "Coffee guide 커피는 어떻게 보관하나요",
            "Is decaf worth it?",
        ]
        assert {q.url for q in questions} == {"https://a.example/coffee"}
        _, kwargs = post.call_args
        assert kwargs["json"]["query"] == "coffee"
        assert kwargs["headers"]["Authorization"] == "Bearer tvly-test"

    async def test_caps_questions_per_keyword(self, monkeypatch) -> None:
        content = " ".join(f"질문 번호 {i} 방법은 무엇인가요." for i in range(10))
        payload = {"results": [{"title": "", "url": "https://a.example", "content": content}]}
        monkeypatch.setattr(
            "services.question_sources.requests.post", MagicMock(return_value=_response(payload=payload))
        )

        questions = await _tavily(max_per_keyword=3).fetch_candidate_questions("coffee")
        assert len(questions) == 3

    async def test_empty_results(self, monkeypatch) -> None:
        monkeypatch.setattr(
            "services.question_sources.requests.post", MagicMock(return_value=_response(payload={"results": []}))
        )
        assert await _tavily().fetch_candidate_questions("coffee") == []

    async def test_missing_api_key(self) -> None:
        with pytest.raises(QuestionSourceError):
            await _tavily(api_key=None).fetch_candidate_questions("coffee")

    @pytest.mark.parametrize(
        "post",
        [
            MagicMock(side_effect=requests.ConnectionError("down")),
            MagicMock(return_value=_response(status_code=429)),
            MagicMock(return_value=_response(json_error=True)),
        ],
    )
    async def test_failures_raise_question_source_error(self, monkeypatch, post) -> None:
        monkeypatch.setattr("services.question_sources.requests.post", post)
        with pytest.raises(QuestionSourceError) as exc_info:
            await _tavily().fetch_candidate_questions("coffee")
        assert exc_info.value.keyword == "coffee"


class TestGetQuestionProvider:
    def test_default_is_template(self) -> None:
        assert isinstance(get_question_provider(Settings(_env_file=None)), TemplateQuestionProvider)

    def test_tavily(self) -> None:
        settings = Settings(_env_file=None, question_provider="tavily", tavily_api_key="k", max_questions_per_keyword=7)
        provider = get_question_provider(settings)
        assert isinstance(provider, TavilyQuestionProvider)
        assert provider.api_key == "k"
        assert provider.max_per_keyword == 7

    def test_unknown_falls_back_to_template(self) -> None:
        provider = get_question_provider(Settings(_env_file=None, question_provider="bing"))
        assert isinstance(provider, TemplateQuestionProvider)
