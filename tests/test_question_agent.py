"""Unit tests for search question collection and de-duplication."""

import pytest

from agents.question_agent import (
    MAX_QUERY_KEYWORDS,
    collect_search_questions,
    dedupe_questions,
    filter_short_questions,
    pick_query_keywords,
)
from models.keyword_models import SeedKeyword
from models.question_models import SearchQuestion


def _q(text: str, source: str = "google") -> SearchQuestion:
    return SearchQuestion(source=source, text=text)


def _seeds(*pairs):
    return [SeedKeyword(value=v, score=s) for v, s in pairs]


class TestDedupeQuestions:
    def test_keeps_first_occurrence(self) -> None:
        first = _q("What is X?")
        second = _q("what   is x ?", source="naver")
        assert dedupe_questions([first, second]) == [first]

    def test_case_and_whitespace_insensitive(self) -> None:
        questions = [_q("커피  추천  해주세요"), _q("Coffee tips"), _q(" 커피 추천 해주세요 "), _q("COFFEE TIPS")]
        assert [q.text for q in dedupe_questions(questions)] == ["커피  추천  해주세요", "Coffee tips"]

    def test_preserves_order_of_distinct_questions(self) -> None:
        questions = [_q("c question"), _q("a question"), _q("b question")]
        assert dedupe_questions(questions) == questions


class TestFilterShortQuestions:
    def test_drops_five_chars_or_less(self) -> None:
        questions = [_q("short"), _q("longer!"), _q("왜요?")]
        assert [q.text for q in filter_short_questions(questions)] == ["longer!"]


class TestPickQueryKeywords:
    def test_sorted_by_score_stable_and_limited(self) -> None:
        seeds = _seeds(("a", 0.5), ("b", 1.0), ("c", 0.5), ("d", 0.2), ("e", 0.9), ("f", 0.5))
        picked = pick_query_keywords(seeds)
        assert [k.value for k in picked] == ["b", "e", "a", "c", "f"]
        assert len(picked) == MAX_QUERY_KEYWORDS


class TestCollectSearchQuestions:
    async def test_empty_seeds(self, recording_provider) -> None:
        assert await collect_search_questions([], recording_provider) == []
        assert recording_provider.calls == []

    async def test_queries_top_five_in_rank_order(self, recording_provider) -> None:
        seeds = _seeds(("kw1", 1.0), ("kw2", 0.9), ("kw3", 0.8), ("kw4", 0.7), ("kw5", 0.6), ("kw6", 0.5))
        questions = await collect_search_questions(seeds, recording_provider)

        assert recording_provider.calls == ["kw1", "kw2", "kw3", "kw4", "kw5"]
        assert len(questions) == 15
        assert questions[0].text.startswith("kw1")
        assert questions[-1].text.startswith("kw5")
        assert all(q.source == "google" for q in questions)

    async def test_failure_is_isolated_per_keyword(self, make_recording_provider) -> None:
        provider = make_recording_provider(fail_on=("kw2",))
        seeds = _seeds(("kw1", 1.0), ("kw2", 0.9), ("kw3", 0.8))

        questions = await collect_search_questions(seeds, provider)

        assert provider.calls == ["kw1", "kw2", "kw3"]
        assert [q.text.split()[0][:3] for q in questions] == ["kw1"] * 3 + ["kw3"] * 3

    async def test_all_failures_yield_empty(self, failing_provider) -> None:
        seeds = _seeds(("kw1", 1.0), ("kw2", 0.5))
        assert await collect_search_questions(seeds, failing_provider) == []

    async def test_dedupes_across_keywords_then_filters(self, make_static_provider) -> None:
        provider = make_static_provider(["How to brew?", "how  to BREW?", "short"])
        seeds = _seeds(("kw1", 1.0), ("kw2", 0.5))

        questions = await collect_search_questions(seeds, provider)

        assert [q.text for q in questions] == ["How to brew?"]

    async def test_source_is_passed_through(self, recording_provider) -> None:
        questions = await collect_search_questions(_seeds(("kw", 1.0)), recording_provider, source="community")
        assert {q.source for q in questions} == {"community"}


@pytest.mark.parametrize("count", [0, 1, 3])
async def test_result_has_no_duplicate_keys(make_static_provider, count) -> None:
    provider = make_static_provider(["Same question here?"] * count)
    questions = await collect_search_questions(_seeds(("a1", 1.0), ("b1", 1.0)), provider)
    assert len(questions) == min(count, 1)
