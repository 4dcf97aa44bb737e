# agents/question_agent.py

from __future__ import annotations

import logging
import re
from typing import Iterable, List, Sequence

from models.keyword_models import SeedKeyword
from models.question_models import QuestionSource, SearchQuestion
from services.question_sources import QuestionSourceProvider

logger = logging.getLogger(__name__)

# ============================================================
# パラメータ
# ============================================================

# 外部ソースに問い合わせるキーワード数
MAX_QUERY_KEYWORDS = 5

# この長さ以下の質問文は捨てる
MIN_QUESTION_LENGTH = 5

_WHITESPACE_RE = re.compile(r"\s+")
_SPACE_BEFORE_PUNCT_RE = re.compile(r" (?=[?!.,])")


def _dedupe_key(text: str) -> str:
    """小文字化 + 空白の連続を 1 つに + trim。記号直前の空白も落とす（"x ?" == "x?"）。"""
    key = _WHITESPACE_RE.sub(" ", text.lower()).strip()
    return _SPACE_BEFORE_PUNCT_RE.sub("", key)


def dedupe_questions(questions: Iterable[SearchQuestion]) -> List[SearchQuestion]:
    """大文字小文字・空白の違いを無視して重複を除く（最初の 1 件を残す）。"""
    seen = set()
    deduped: List[SearchQuestion] = []
    for question in questions:
        key = _dedupe_key(question.text)
        if key in seen:
            continue
        seen.add(key)
        deduped.append(question)
    return deduped


def filter_short_questions(
    questions: Iterable[SearchQuestion],
    min_length: int = MIN_QUESTION_LENGTH,
) -> List[SearchQuestion]:
    return [q for q in questions if len(q.text) > min_length]


def pick_query_keywords(
    seed_keywords: Sequence[SeedKeyword],
    limit: int = MAX_QUERY_KEYWORDS,
) -> List[SeedKeyword]:
    """score の高い順（同点は元の順）に上位 limit 件。"""
    return sorted(seed_keywords, key=lambda k: k.score, reverse=True)[:limit]


async def collect_search_questions(
    seed_keywords: Sequence[SeedKeyword],
    provider: QuestionSourceProvider,
    source: QuestionSource = "google",
    limit: int = MAX_QUERY_KEYWORDS,
) -> List[SearchQuestion]:
    """
    上位キーワードごとに外部ソースから質問文を集める。

    - キーワードは 1 件ずつ順番に問い合わせる
    - 1 キーワードの失敗はログだけ出して空扱い（残りは続行）
    - 集めた順（キーワード順）のまま重複除去 → 短文除去
    """
    if not seed_keywords:
        return []

    target_keywords = pick_query_keywords(seed_keywords, limit=limit)
    logger.info(
        "[question_agent] provider=%s target_keywords=%s",
        provider.name,
        [k.value for k in target_keywords],
    )

    all_questions: List[SearchQuestion] = []
    for keyword in target_keywords:
        try:
            questions = await provider.fetch_candidate_questions(keyword.value, source)
        except Exception as e:
            logger.warning(
                "[question_agent] keyword=%s skipped: %s",
                keyword.value,
                e,
                exc_info=True,
            )
            continue

        logger.info("[question_agent] keyword=%s questions=%s", keyword.value, len(questions))
        all_questions.extend(questions)

    deduped = dedupe_questions(all_questions)
    filtered = filter_short_questions(deduped)

    logger.info(
        "[question_agent] collected=%s deduped=%s kept=%s",
        len(all_questions),
        len(deduped),
        len(filtered),
    )
    return filtered
