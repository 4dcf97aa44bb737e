# agents/scoring_agent.py

from __future__ import annotations

import math
from typing import Sequence, Union

from models.analysis_models import GeoScores
from models.question_models import SearchQuestion
from models.site_models import PageMeta
from services.text_normalizer import simple_tokenize

# ============================================================
# 構造スコアの配点
# ============================================================

BASE_STRUCTURE_SCORE = 40
TITLE_POINTS = 10
DESCRIPTION_POINTS = 10
HEADINGS_POINTS = 10
PAGE_QUESTIONS_POINTS = 10

MIN_HEADINGS = 2
MIN_PAGE_QUESTIONS = 3

# 最終スコアの重み
STRUCTURE_WEIGHT = 0.4
COVERAGE_WEIGHT = 0.6


def _has_text(value) -> bool:
    return bool(value and value.strip())


def _clamp(value: int, lo: int = 0, hi: int = 100) -> int:
    return max(lo, min(hi, value))


def _round_half_up(value: float) -> int:
    # 非負の値しか来ないので floor(x + 0.5) で四捨五入
    return int(math.floor(value + 0.5))


# ============================================================
# 構造スコア
# ============================================================

def score_structure(
    meta: PageMeta,
    headings: Sequence[str],
    page_questions: Sequence[str],
) -> int:
    """
    ページ構造の充実度を 0〜100 で返す。

    - 基本点 40
    - title あり +10 / description あり +10
    - 見出し 2 つ以上 +10 / ページ内の質問 3 つ以上 +10
    """
    score = BASE_STRUCTURE_SCORE

    if _has_text(meta.title):
        score += TITLE_POINTS
    if _has_text(meta.description):
        score += DESCRIPTION_POINTS
    if len(headings) >= MIN_HEADINGS:
        score += HEADINGS_POINTS
    if len(page_questions) >= MIN_PAGE_QUESTIONS:
        score += PAGE_QUESTIONS_POINTS

    return _clamp(score)


# ============================================================
# 質問カバレッジ
# ============================================================

def _question_text(question: Union[SearchQuestion, str]) -> str:
    return question if isinstance(question, str) else question.text


def score_coverage(
    page_questions: Sequence[str],
    search_questions: Sequence[Union[SearchQuestion, str]],
) -> float:
    """
    外部の質問のうち、ページ内の質問とトークンが 1 つでも重なるものの割合（0〜1）。
    """
    if not search_questions:
        return 0.0

    page_token_sets = [set(simple_tokenize(q)) for q in page_questions]

    covered = 0
    for question in search_questions:
        search_tokens = set(simple_tokenize(_question_text(question)))
        if any(search_tokens & page_tokens for page_tokens in page_token_sets):
            covered += 1

    return covered / len(search_questions)


# ============================================================
# 最終スコア
# ============================================================

def compose_scores(structure_score: int, coverage_ratio: float) -> GeoScores:
    """構造スコア 40% + カバレッジ(%) 60% で最終スコアを出す。"""
    question_coverage_score = coverage_ratio * 100
    final_score = _round_half_up(
        structure_score * STRUCTURE_WEIGHT + question_coverage_score * COVERAGE_WEIGHT
    )
    return GeoScores(
        structure_score=structure_score,
        coverage_ratio=coverage_ratio,
        question_coverage_score=question_coverage_score,
        final_score=_clamp(final_score),
    )
