# app/graph/nodes.py
from __future__ import annotations

import asyncio
import logging
from typing import List

from app.graph.lg_state import GraphState
from agents.keyword_agent import extract_seed_keywords
from agents.question_agent import collect_search_questions
from agents.scoring_agent import compose_scores, score_coverage, score_structure
from models.analysis_models import AnalysisResult
from models.site_models import PageContent
from services.crawler import fetch_html
from services.html_parser import parse_html
from services.question_sources import QuestionSourceProvider
from services.url_normalizer import normalize_url

logger = logging.getLogger(__name__)


def _log_progress(state: GraphState, node: str, message: str) -> GraphState:
    """
    進捗ログを state に積むユーティリティ。
    state は dict (GraphState) として扱う。
    """
    line = f"[{node}] {message}"

    messages: List[str] = list(state.get("progress_messages", []))
    messages.append(line)

    state["progress_messages"] = messages
    state["current_node"] = node

    logger.info(line)
    return state


# ---------- Fetch ノード ----------


async def fetch_node(state: GraphState) -> GraphState:
    """
    対象 URL の HTML を取得する。
    FetchError はここで止めずにそのまま呼び出し元へ伝播させる。
    """
    state = _log_progress(state, "fetch", "start: fetching page")

    state["html"] = await asyncio.to_thread(fetch_html, state["url"])

    state = _log_progress(state, "fetch", f"done: {len(state['html'])} chars")
    return state


# ---------- Parser ノード ----------


def parse_node(state: GraphState) -> GraphState:
    """HTML → PageContent（メタ / 見出し / 本文 / ページ内の質問）。"""
    state = _log_progress(state, "parser", "start: extracting structure")

    page: PageContent = parse_html(state.get("html", ""))
    state["page"] = page

    state = _log_progress(
        state,
        "parser",
        f"done: headings={len(page.headings)} page_questions={len(page.page_questions)}",
    )
    return state


# ---------- Keyword ノード ----------


def keyword_node(state: GraphState) -> GraphState:
    state = _log_progress(state, "keyword", "start: extracting seed keywords")

    page: PageContent = state["page"]
    state["seed_keywords"] = extract_seed_keywords(page.meta, page.headings, page.content_text)

    state = _log_progress(state, "keyword", f"done: {len(state['seed_keywords'])} seed keywords")
    return state


# ---------- Question ノード ----------


async def question_node(state: GraphState, provider: QuestionSourceProvider) -> GraphState:
    """上位 seed キーワードごとに外部ソースから質問文を集める。"""
    state = _log_progress(state, "question", "start: collecting search questions")

    state["search_questions"] = await collect_search_questions(
        state.get("seed_keywords", []),
        provider,
        source="google",
    )

    state = _log_progress(
        state, "question", f"done: {len(state['search_questions'])} search questions"
    )
    return state


# ---------- Score ノード ----------


def score_node(state: GraphState) -> GraphState:
    state = _log_progress(state, "score", "start: scoring")

    page: PageContent = state["page"]
    structure_score = score_structure(page.meta, page.headings, page.page_questions)
    coverage_ratio = score_coverage(page.page_questions, state.get("search_questions", []))
    state["scores"] = compose_scores(structure_score, coverage_ratio)

    state = _log_progress(
        state,
        "score",
        f"done: structure={structure_score} coverage={coverage_ratio:.3f} "
        f"final={state['scores'].final_score}",
    )
    return state


# ---------- 結果の組み立て ----------


def assemble_node(state: GraphState) -> GraphState:
    state = _log_progress(state, "assemble", "start: building result")

    page: PageContent = state["page"]
    state["result"] = AnalysisResult(
        url=state["url"],
        normalized_url=normalize_url(state["url"]),
        meta=page.meta,
        seed_keywords=state.get("seed_keywords", []),
        page_questions=page.page_questions,
        search_questions=state.get("search_questions", []),
        question_clusters=[],
        scores=state["scores"],
    )

    state = _log_progress(state, "assemble", "done: result ready")
    return state
