# app/api/routes.py
from __future__ import annotations

import asyncio
import logging
from functools import lru_cache
from typing import Any, Dict

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, ConfigDict, Field

from app.graph.lg_workflow import run_analysis, run_debug_analysis
from models.analysis_models import AnalysisResult
from services.analysis_store import AnalysisStore, get_analysis_store
from services.errors import AnalysisError, AnalysisStoreError, FetchError
from services.question_sources import QuestionSourceProvider, get_question_provider
from services.url_normalizer import normalize_url

logger = logging.getLogger(__name__)

router = APIRouter()


# --------- 依存オブジェクト ---------


@lru_cache
def get_store() -> AnalysisStore:
    """プロセス内で 1 つのストアを共有する。テストでは dependency_overrides で差し替える。"""
    return get_analysis_store()


def get_provider() -> QuestionSourceProvider:
    return get_question_provider()


# --------- Request / Response モデル ---------


class AnalyzeRequest(BaseModel):
    url: str = Field(..., min_length=1)


class AnalyzeResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    from_cache: bool = Field(..., alias="fromCache")
    result: AnalysisResult


# --------- 例外 → HTTP ---------


def _fetch_error_to_http(e: FetchError) -> HTTPException:
    return HTTPException(
        status_code=502,
        detail={
            "error": "Failed to fetch the target page.",
            "url": e.url,
            "status_code": e.status_code,
        },
    )


def _analysis_error_to_http(e: Exception) -> HTTPException:
    return HTTPException(
        status_code=500,
        detail={"error": "Analysis failed.", "detail": str(e)},
    )


# --------- キャッシュ ---------


def _get_cached(store: AnalysisStore, normalized_url: str):
    try:
        return store.get_fresh(normalized_url)
    except AnalysisStoreError as e:
        # キャッシュが読めなくても分析はやり直せるので miss 扱い
        logger.error("[api.analyze] cache lookup failed url=%s: %s", normalized_url, e)
        return None


def _save_result(store: AnalysisStore, result: AnalysisResult) -> None:
    try:
        store.save(result)
    except AnalysisStoreError as e:
        logger.error("[api.analyze] save failed url=%s: %s", result.normalized_url, e)


# --------- エンドポイント ---------


@router.get("/health")
def api_health() -> Dict[str, str]:
    return {"status": "ok"}


@router.post("/analyze", response_model=AnalyzeResponse)
async def api_analyze(
    payload: AnalyzeRequest,
    store: AnalysisStore = Depends(get_store),
    provider: QuestionSourceProvider = Depends(get_provider),
) -> AnalyzeResponse:
    """
    URL を受け取り GEO スコアを返すメイン API。

    1) URL 正規化 → 24 時間以内のキャッシュがあればそれを返す
    2) 無ければ分析を実行
    3) 結果を保存（保存に失敗しても結果は返す）
    """
    normalized_url = normalize_url(payload.url)
    logger.info("[api.analyze] start url=%s normalized=%s", payload.url, normalized_url)

    cached = await asyncio.to_thread(_get_cached, store, normalized_url)
    if cached is not None:
        logger.info("[api.analyze] cache hit url=%s", normalized_url)
        return AnalyzeResponse(from_cache=True, result=cached)

    try:
        result = await run_analysis(payload.url, provider=provider)
    except FetchError as e:
        logger.warning("[api.analyze] fetch failed url=%s: %s", payload.url, e)
        raise _fetch_error_to_http(e) from e
    except AnalysisError as e:
        logger.exception("[api.analyze] analysis failed url=%s", payload.url)
        raise _analysis_error_to_http(e) from e

    await asyncio.to_thread(_save_result, store, result)

    logger.info(
        "[api.analyze] done url=%s final_score=%s",
        normalized_url,
        result.scores.final_score,
    )
    return AnalyzeResponse(from_cache=False, result=result)


@router.post("/debug-analyze")
async def api_debug_analyze(
    payload: AnalyzeRequest,
    provider: QuestionSourceProvider = Depends(get_provider),
) -> Dict[str, Any]:
    """
    スコア計算前の中間データ（メタ / 見出し / 本文プレビュー / 質問 / キーワード）を返す。
    抽出ロジックの確認用。キャッシュは使わない。
    """
    logger.info("[api.debug-analyze] url=%s", payload.url)
    try:
        return await run_debug_analysis(payload.url, provider=provider)
    except FetchError as e:
        logger.warning("[api.debug-analyze] fetch failed url=%s: %s", payload.url, e)
        raise _fetch_error_to_http(e) from e
    except AnalysisError as e:
        logger.exception("[api.debug-analyze] failed url=%s", payload.url)
        raise _analysis_error_to_http(e) from e
