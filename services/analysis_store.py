# services/analysis_store.py
from __future__ import annotations

import json
import logging
import threading
from abc import ABC, abstractmethod
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Dict, Optional, Tuple

from pydantic import ValidationError

from app.config import Settings, settings as default_settings
from models.analysis_models import AnalysisResult
from services.errors import AnalysisStoreError

logger = logging.getLogger(__name__)

DEFAULT_TTL_HOURS = 24


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class AnalysisStore(ABC):
    """
    normalized_url をキーに分析結果を保存・取得するストア。
    保存から ttl 以内のものだけを「新しい」キャッシュとして返す。
    """

    def __init__(self, ttl_hours: int = DEFAULT_TTL_HOURS) -> None:
        self.ttl = timedelta(hours=ttl_hours)

    def is_fresh(self, saved_at: datetime, now: Optional[datetime] = None) -> bool:
        now = now or _utcnow()
        return saved_at >= now - self.ttl

    @abstractmethod
    def get_fresh(
        self, normalized_url: str, now: Optional[datetime] = None
    ) -> Optional[AnalysisResult]:
        ...

    @abstractmethod
    def save(self, result: AnalysisResult, now: Optional[datetime] = None) -> None:
        ...


class InMemoryAnalysisStore(AnalysisStore):
    """プロセス内 dict に持つだけのストア（開発・テスト用のデフォルト）。"""

    def __init__(self, ttl_hours: int = DEFAULT_TTL_HOURS) -> None:
        super().__init__(ttl_hours)
        self._items: Dict[str, Tuple[datetime, AnalysisResult]] = {}
        self._lock = threading.Lock()

    def get_fresh(
        self, normalized_url: str, now: Optional[datetime] = None
    ) -> Optional[AnalysisResult]:
        with self._lock:
            entry = self._items.get(normalized_url)
            if entry is None:
                return None
            saved_at, result = entry
            if self.is_fresh(saved_at, now):
                return result
            # 期限切れはここで捨てる
            del self._items[normalized_url]
        return None

    def save(self, result: AnalysisResult, now: Optional[datetime] = None) -> None:
        with self._lock:
            self._items[result.normalized_url] = (now or _utcnow(), result)


class JsonFileAnalysisStore(AnalysisStore):
    """
    1 つの JSON ファイルに normalized_url 単位で upsert するストア。
    形式: {normalized_url: {"url", "geo_score", "question_coverage", "updated_at", "result_json"}}
    """

    def __init__(self, path: str | Path, ttl_hours: int = DEFAULT_TTL_HOURS) -> None:
        super().__init__(ttl_hours)
        self.path = Path(path)
        self._lock = threading.Lock()

    def _read_all(self) -> Dict[str, dict]:
        if not self.path.exists():
            return {}
        try:
            rows = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            raise AnalysisStoreError(f"Cannot read store file {self.path}: {e}") from e
        if not isinstance(rows, dict):
            raise AnalysisStoreError(
                f"Store file {self.path} must hold a JSON object, got {type(rows).__name__}"
            )
        return rows

    def get_fresh(
        self, normalized_url: str, now: Optional[datetime] = None
    ) -> Optional[AnalysisResult]:
        with self._lock:
            rows = self._read_all()

        row = rows.get(normalized_url)
        if not row:
            return None
        if not isinstance(row, dict):
            raise AnalysisStoreError(f"Broken row for {normalized_url}: not an object")
        if not row.get("result_json"):
            return None

        try:
            saved_at = datetime.fromisoformat(row["updated_at"])
            result = AnalysisResult.model_validate(row["result_json"])
        except (KeyError, TypeError, ValueError, ValidationError) as e:
            raise AnalysisStoreError(f"Broken row for {normalized_url}: {e}") from e
        if saved_at.tzinfo is None:
            # タイムゾーン無しの updated_at は UTC とみなす
            saved_at = saved_at.replace(tzinfo=timezone.utc)

        return result if self.is_fresh(saved_at, now) else None

    def save(self, result: AnalysisResult, now: Optional[datetime] = None) -> None:
        row = {
            "url": result.url,
            "geo_score": result.scores.final_score,
            "question_coverage": result.scores.question_coverage_score,
            "updated_at": (now or _utcnow()).isoformat(),
            "result_json": result.model_dump(mode="json", by_alias=True),
        }
        with self._lock:
            rows = self._read_all()
            rows[result.normalized_url] = row
            try:
                self.path.write_text(
                    json.dumps(rows, ensure_ascii=False, indent=2), encoding="utf-8"
                )
            except OSError as e:
                raise AnalysisStoreError(f"Cannot write store file {self.path}: {e}") from e

        logger.info("[analysis_store] saved %s to %s", result.normalized_url, self.path)


def get_analysis_store(settings: Optional[Settings] = None) -> AnalysisStore:
    settings = settings or default_settings
    backend = (settings.store_backend or "memory").lower()

    if backend == "json":
        return JsonFileAnalysisStore(settings.store_path, ttl_hours=settings.cache_ttl_hours)
    if backend != "memory":
        logger.warning("[analysis_store] unknown backend=%s, fallback to memory", backend)
    return InMemoryAnalysisStore(ttl_hours=settings.cache_ttl_hours)
