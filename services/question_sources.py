# services/question_sources.py
from __future__ import annotations

import asyncio
import logging
from abc import ABC, abstractmethod
from typing import List, Optional
from urllib.parse import quote

import requests

from app.config import Settings, settings as default_settings
from models.question_models import QuestionSource, SearchQuestion
from services.errors import QuestionSourceError
from services.question_detector import SOURCE_QUESTION_MIN_LENGTH, detect_questions

logger = logging.getLogger(__name__)


class QuestionSourceProvider(ABC):
    """
    キーワード → 外部の質問文 を返すプロバイダの共通インターフェイス。
    失敗時は QuestionSourceError を投げる（握りつぶすのは呼び出し側の責務）。
    """

    name: str = "base"

    @abstractmethod
    async def fetch_candidate_questions(
        self,
        keyword: str,
        source: QuestionSource = "google",
    ) -> List[SearchQuestion]:
        raise NotImplementedError


# ------------------------------------------------------------------
# ① テンプレート版（ダミー）
# ------------------------------------------------------------------
QUESTION_TEMPLATES = (
    "{keyword}는 얼마나 자주 교체해야 하나요?",
    "{keyword} 비용은 어느 정도인가요?",
    "{keyword}를 선택할 때 고려해야 할 점은 무엇인가요?",
)

TEMPLATE_SEARCH_URL = "https://example.com/search?q={query}"


class TemplateQuestionProvider(QuestionSourceProvider):
    """
    API キー無しでも必ず動く、固定テンプレートの質問生成。
    実際の検索 / コミュニティ API が繋がるまでのプレースホルダ。
    """

    name = "template"

    async def fetch_candidate_questions(
        self,
        keyword: str,
        source: QuestionSource = "google",
    ) -> List[SearchQuestion]:
        url = TEMPLATE_SEARCH_URL.format(query=quote(keyword, safe=""))
        return [
            SearchQuestion(source=source, text=template.format(keyword=keyword), url=url)
            for template in QUESTION_TEMPLATES
        ]


# ------------------------------------------------------------------
# ② Tavily Search API 版
# ------------------------------------------------------------------
class TavilyQuestionProvider(QuestionSourceProvider):
    """
    Tavily Search API で検索し、結果のタイトル・本文から質問文を拾う。

    - settings.tavily_api_key が必須
    - 通信エラー / 2xx 以外 / 不正な JSON は QuestionSourceError
    """

    name = "tavily"

    def __init__(
        self,
        api_key: Optional[str],
        search_url: str,
        max_results: int = 5,
        max_per_keyword: int = 5,
        timeout: float = 10.0,
    ) -> None:
        self.api_key = api_key
        self.search_url = search_url
        self.max_results = max_results
        self.max_per_keyword = max_per_keyword
        self.timeout = timeout

    def _search(self, keyword: str) -> dict:
        if not self.api_key:
            raise QuestionSourceError(keyword, "tavily_api_key is not set")

        payload = {
            "query": keyword,
            "max_results": self.max_results,
            "search_depth": "basic",
        }
        headers = {"Authorization": f"Bearer {self.api_key}"}

        logger.info("[tavily] Request start: keyword=%s max_results=%s", keyword, self.max_results)

        try:
            resp = requests.post(
                self.search_url, json=payload, headers=headers, timeout=self.timeout
            )
        except requests.RequestException as e:
            raise QuestionSourceError(keyword, f"request failed: {e}") from e

        if not resp.ok:
            logger.error(
                "[tavily] Non-200 status: %s body=%s",
                resp.status_code,
                resp.text[:2000],
            )
            raise QuestionSourceError(keyword, f"status {resp.status_code}")

        try:
            return resp.json()
        except ValueError as e:
            raise QuestionSourceError(keyword, f"invalid JSON: {e}") from e

    async def fetch_candidate_questions(
        self,
        keyword: str,
        source: QuestionSource = "google",
    ) -> List[SearchQuestion]:
        data = await asyncio.to_thread(self._search, keyword)

        items = data.get("results") or []
        if not items:
            logger.warning("[tavily] results is empty. keyword=%s keys=%s", keyword, list(data.keys()))
            return []

        questions: List[SearchQuestion] = []
        for item in items:
            text = " ".join(
                part for part in (item.get("title") or "", item.get("content") or "") if part
            )
            for sentence in detect_questions(text, min_length=SOURCE_QUESTION_MIN_LENGTH):
                questions.append(
                    SearchQuestion(source=source, text=sentence, url=item.get("url") or None)
                )
                if len(questions) >= self.max_per_keyword:
                    break
            if len(questions) >= self.max_per_keyword:
                break

        logger.info("[tavily] keyword=%s parsed questions=%s", keyword, len(questions))
        return questions


# ------------------------------------------------------------------
# ③ 設定からプロバイダを選ぶ
# ------------------------------------------------------------------
def get_question_provider(settings: Optional[Settings] = None) -> QuestionSourceProvider:
    settings = settings or default_settings
    name = (settings.question_provider or "template").lower()

    if name == "tavily":
        return TavilyQuestionProvider(
            api_key=settings.tavily_api_key,
            search_url=settings.tavily_search_url,
            max_results=settings.tavily_max_results,
            max_per_keyword=settings.max_questions_per_keyword,
            timeout=settings.tavily_timeout,
        )
    if name != "template":
        logger.warning("[question_sources] unknown provider=%s, fallback to template", name)
    return TemplateQuestionProvider()
