# app/graph/lg_workflow.py
from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from app.graph.lg_state import GraphState, create_initial_state
from app.graph import nodes
from models.analysis_models import AnalysisResult
from services.question_sources import QuestionSourceProvider, get_question_provider

logger = logging.getLogger(__name__)

# debug 用レスポンスに載せる本文プレビューの長さ
CONTENT_PREVIEW_CHARS = 300


async def _run_until_questions(url: str, provider: QuestionSourceProvider) -> GraphState:
    """fetch → parser → keyword → question までを直列に実行する。"""
    state = create_initial_state(url)

    # 1) HTML 取得（失敗は FetchError でそのまま上に投げる）
    state = await nodes.fetch_node(state)

    # 2) メタ / 見出し / 本文 / ページ内の質問
    state = nodes.parse_node(state)

    # 3) seed キーワード
    state = nodes.keyword_node(state)

    # 4) 外部の質問文（キーワードごとに直列）
    state = await nodes.question_node(state, provider)
    return state


async def run_analysis(
    url: str,
    provider: Optional[QuestionSourceProvider] = None,
) -> AnalysisResult:
    """
    /api/analyze 用のシンプルな直列ワークフロー。

    fetch → parser → keyword → question → score → assemble
    """
    provider = provider or get_question_provider()
    logger.info("[lg_workflow] run_analysis start url=%s provider=%s", url, provider.name)

    state = await _run_until_questions(url, provider)

    # 5) 構造スコア / カバレッジ / 最終スコア
    state = nodes.score_node(state)

    # 6) AnalysisResult を組み立て
    state = nodes.assemble_node(state)

    result: AnalysisResult = state["result"]
    logger.info(
        "[lg_workflow] run_analysis done url=%s final_score=%s",
        url,
        result.scores.final_score,
    )
    return result


async def run_debug_analysis(
    url: str,
    provider: Optional[QuestionSourceProvider] = None,
) -> Dict[str, Any]:
    """
    スコア計算の手前までを実行し、中間データをそのまま返す（/api/debug-analyze 用）。
    """
    provider = provider or get_question_provider()
    logger.info("[lg_workflow] run_debug_analysis start url=%s", url)

    state = await _run_until_questions(url, provider)
    page = state["page"]

    return {
        "url": url,
        "meta": page.meta,
        "headings": page.headings,
        "contentPreview": page.content_text[:CONTENT_PREVIEW_CHARS],
        "pageQuestions": page.page_questions,
        "seedKeywords": state["seed_keywords"],
        "searchQuestions": state["search_questions"],
        "progressMessages": state["progress_messages"],
    }
