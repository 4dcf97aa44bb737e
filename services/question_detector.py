# services/question_detector.py

from __future__ import annotations

import re
from typing import List, Optional

from models.lexicon_models import Lexicon
from services.lexicon import get_lexicon

# 呼び出し元ごとの「短すぎる文」のしきい値（この長さ以下は捨てる）
PAGE_QUESTION_MIN_LENGTH = 10    # ページ本文から抽出するとき
SOURCE_QUESTION_MIN_LENGTH = 5   # 外部ソースのテキストから抽出するとき

_SENTENCE_SPLIT_RE = re.compile(r"[.!?]+\s+")


def split_sentences(text: str) -> List[str]:
    """'.', '!', '?' の連続 + 空白 で区切って文候補に分割する。"""
    if not text:
        return []
    return [s.strip() for s in _SENTENCE_SPLIT_RE.split(text)]


def is_question(sentence: str, lexicon: Optional[Lexicon] = None) -> bool:
    """'?' を含むか、疑問の手がかり語を含めば質問文とみなす。"""
    if "?" in sentence:
        return True
    lexicon = lexicon or get_lexicon()
    return any(cue in sentence for cue in lexicon.interrogative_cues)


def detect_questions(
    text: str,
    min_length: int = PAGE_QUESTION_MIN_LENGTH,
    lexicon: Optional[Lexicon] = None,
) -> List[str]:
    """
    テキストから質問っぽい文を出現順に返す（重複除去はしない）。
    min_length 以下の文は候補から外す。
    """
    lexicon = lexicon or get_lexicon()

    questions: List[str] = []
    for sentence in split_sentences(text):
        if len(sentence) <= min_length:
            continue
        if is_question(sentence, lexicon):
            questions.append(sentence)
    return questions
