# models/analysis_models.py

from typing import List

from pydantic import Field

from models.base_models import ResultModel
from models.keyword_models import SeedKeyword
from models.question_models import QuestionCluster, SearchQuestion
from models.site_models import PageMeta


class GeoScores(ResultModel):
    # カバレッジは「比率」と「%」を別フィールドで持つ
    structure_score: int = Field(..., ge=0, le=100)
    coverage_ratio: float = Field(..., ge=0.0, le=1.0)
    question_coverage_score: float = Field(..., ge=0.0, le=100.0)
    final_score: int = Field(..., ge=0, le=100)


class AnalysisResult(ResultModel):
    url: str
    normalized_url: str
    meta: PageMeta
    seed_keywords: List[SeedKeyword] = Field(default_factory=list)
    page_questions: List[str] = Field(default_factory=list)
    search_questions: List[SearchQuestion] = Field(default_factory=list)
    question_clusters: List[QuestionCluster] = Field(default_factory=list)
    scores: GeoScores
