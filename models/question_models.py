# models/question_models.py

from __future__ import annotations

from typing import List, Literal, Optional

from pydantic import Field

from models.base_models import ResultModel

# -----------------------------------------
# 質問の取得元
# -----------------------------------------
QuestionSource = Literal[
    "google",
    "naver",
    "community",
]


class SearchQuestion(ResultModel):
    """外部（検索・コミュニティ）から集めた質問文。"""

    source: QuestionSource
    text: str = Field(..., min_length=1)
    url: Optional[str] = None


class QuestionCluster(ResultModel):
    """
    意味的に近い質問のまとまり。
    クラスタリングは外部プロバイダの担当で、現状の分析結果では常に空。
    """

    topic: str
    representative_question: str
    variants: List[str] = Field(default_factory=list)
    covered_by_page: bool = False
    evidence: List[SearchQuestion] = Field(default_factory=list)
