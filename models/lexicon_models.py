# models/lexicon_models.py

from __future__ import annotations

from typing import FrozenSet, Tuple

from pydantic import BaseModel, ConfigDict, Field


class Lexicon(BaseModel):
    """
    トークナイザ・質問検出で使う語彙データ。
    - stop_words: キーワード頻度集計から外す語（小文字化後に完全一致で判定）
    - interrogative_cues: '?' が無くても質問文とみなす部分文字列
    差し替え・ローカライズできるよう version 付きで管理する。
    """

    model_config = ConfigDict(frozen=True)

    version: str
    stop_words: FrozenSet[str] = Field(default_factory=frozenset)
    interrogative_cues: Tuple[str, ...] = ()
