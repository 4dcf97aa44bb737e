# services/lexicon.py

from __future__ import annotations

import logging
from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import ValidationError

from app.config import settings
from models.lexicon_models import Lexicon
from services.errors import LexiconError

logger = logging.getLogger(__name__)

# ============================================================
# デフォルト語彙
# ============================================================

DEFAULT_LEXICON = Lexicon(
    version="2024.1",
    stop_words=frozenset(
        [
            # 韓国語の機能語
            "그리고", "하지만", "그러나", "그러면서", "또는", "또한",
            "이것", "저것", "그것", "있는", "하는", "되는",
            "통해", "대한", "위한", "같은", "많은",
            # 英語の機能語
            "the", "is", "are", "and", "or", "for", "with", "this", "that",
            "from", "into", "about", "your", "our", "has", "have", "can",
            "will", "been", "more", "when", "they", "them", "their",
            "what", "which",
        ]
    ),
    interrogative_cues=(
        "어떻게", "언제", "왜", "무엇", "가능", "방법",
        "비용", "기간", "차이", "추천", "어디", "누가",
    ),
)


def load_lexicon(path: str | Path) -> Lexicon:
    """
    JSON ファイルから語彙を読み込む。
    形式: {"version": "...", "stop_words": [...], "interrogative_cues": [...]}
    """
    path = Path(path)
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise LexiconError(f"Cannot read lexicon file {path}: {e}") from e

    try:
        lexicon = Lexicon.model_validate_json(raw)
    except ValidationError as e:
        raise LexiconError(f"Invalid lexicon file {path}: {e}") from e

    logger.info(
        "[lexicon] loaded version=%s stop_words=%s cues=%s path=%s",
        lexicon.version,
        len(lexicon.stop_words),
        len(lexicon.interrogative_cues),
        path,
    )
    return lexicon


@lru_cache
def _load_cached(path: str) -> Lexicon:
    return load_lexicon(path)


def get_lexicon(path: Optional[str] = None) -> Lexicon:
    """settings.lexicon_path があればそれを、無ければデフォルト語彙を返す。"""
    path = path or settings.lexicon_path
    if not path:
        return DEFAULT_LEXICON
    return _load_cached(path)
