# services/text_normalizer.py

from __future__ import annotations

import re
from typing import List, Optional

from models.lexicon_models import Lexicon
from services.lexicon import get_lexicon

# ASCII 英数字とハングル音節以外の連続は 1 つの空白に潰す
_NON_WORD_RE = re.compile(r"[^0-9a-zA-Z가-힣]+")
_DIGITS_RE = re.compile(r"^[0-9]+$")

MIN_TOKEN_LENGTH = 2
MAX_TOKEN_LENGTH = 30  # これ以上（>=）は捨てる


def _is_valid_token(token: str, stop_words) -> bool:
    if len(token) < MIN_TOKEN_LENGTH:
        return False
    if _DIGITS_RE.match(token):
        return False
    if len(token) >= MAX_TOKEN_LENGTH:
        return False
    return token not in stop_words


def normalize_and_tokenize(text: str, lexicon: Optional[Lexicon] = None) -> List[str]:
    """
    キーワード集計用のトークン化。
    - 小文字化
    - 英数字 / ハングル以外を空白に置換して split
    - 1 文字・数字だけ・30 文字以上・ストップワードを除外
    自分の出力を空白で join して再度通しても結果は変わらない。
    """
    if not text:
        return []

    lexicon = lexicon or get_lexicon()
    cleaned = _NON_WORD_RE.sub(" ", text.lower())
    return [t for t in cleaned.split() if _is_valid_token(t, lexicon.stop_words)]


def simple_tokenize(text: str) -> List[str]:
    """
    カバレッジ判定用の緩いトークン化。
    小文字化して空白で split し、2 文字以上だけ残す（ストップワード除去なし）。
    """
    return [t for t in text.lower().split() if len(t) >= 2]
