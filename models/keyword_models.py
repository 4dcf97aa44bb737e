# models/keyword_models.py

from __future__ import annotations

from pydantic import Field

from models.base_models import ResultModel


class SeedKeyword(ResultModel):
    """ページから抽出した代表キーワード。

    Attributes:
        value (str): 正規化済みトークン（小文字・英数字/ハングルのみ）。
        score (float): 同じ分析内で最頻出トークンを 1.0 とした相対スコア。
            別の分析結果とは比較できない。
    """

    value: str = Field(..., min_length=1)
    score: float = Field(..., ge=0.0, le=1.0)
