# services/errors.py

from typing import Optional


class AnalysisError(Exception):
    """分析パイプライン共通の基底例外。"""


class FetchError(AnalysisError):
    """
    対象ページの取得失敗（ネットワークエラー / 2xx 以外）。
    1 回の分析の中で唯一、呼び出し元まで伝播させる例外。
    """

    def __init__(self, url: str, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(f"Failed to fetch {url}: {message}")
        self.url = url
        self.status_code = status_code


class QuestionSourceError(AnalysisError):
    """外部質問ソースの失敗。キーワード単位で握りつぶして空扱いにする。"""

    def __init__(self, keyword: str, message: str) -> None:
        super().__init__(f"Question source failed for keyword={keyword!r}: {message}")
        self.keyword = keyword


class AnalysisStoreError(AnalysisError):
    """分析結果の保存・読み出しの失敗。ログだけ出して結果は返す。"""


class LexiconError(AnalysisError):
    """語彙ファイルが読めない / 形式が不正。"""
