# app/config.py

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    アプリ全体で使う設定クラス。
    .env から環境変数を読み込み、属性として参照できるようにする。
    """

    # ---------- ログ ----------
    log_level: str = "INFO"

    # ---------- ページ取得 ----------
    fetch_timeout: float = 10.0
    user_agent: str = (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
        "AppleWebKit/537.36 (KHTML, like Gecko) "
        "Chrome/120.0.0.0 Safari/537.36"
    )

    # ---------- 外部質問ソース ----------
    # "template"（ダミー生成） or "tavily"
    question_provider: str = "template"
    max_questions_per_keyword: int = 5

    # TAVILY_API_KEY=tvly-... を .env に書く想定
    tavily_api_key: str | None = None
    tavily_search_url: str = "https://api.tavily.com/search"
    tavily_max_results: int = 5
    tavily_timeout: float = 10.0

    # ---------- 分析結果の保存 / キャッシュ ----------
    # "memory" or "json"
    store_backend: str = "memory"
    store_path: str = "analysis_history.json"
    cache_ttl_hours: int = 24

    # ---------- 語彙データ ----------
    # 未設定ならコード内のデフォルト語彙を使う
    lexicon_path: str | None = None

    # ---------- Pydantic Settings 設定 ----------
    model_config = SettingsConfigDict(
        env_file=".env",            # .env を読む
        env_file_encoding="utf-8",
        extra="ignore",             # 定義外の環境変数があっても無視（エラーにしない）
    )


@lru_cache
def get_settings() -> Settings:
    """Settings をシングルトン的に使うためのヘルパ。"""
    return Settings()


# 他のモジュールからは `from app.config import settings` で利用
settings = get_settings()
