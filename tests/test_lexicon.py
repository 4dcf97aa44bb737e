"""Unit tests for the stop word / interrogative cue lexicon."""

import json

import pytest

from services.errors import LexiconError
from services.lexicon import DEFAULT_LEXICON, get_lexicon, load_lexicon


class TestDefaultLexicon:
    def test_stop_words(self) -> None:
        assert len(DEFAULT_LEXICON.stop_words) == 17 + 26
        assert {"그리고", "많은", "the", "which"} <= DEFAULT_LEXICON.stop_words
        assert "coffee" not in DEFAULT_LEXICON.stop_words

    def test_interrogative_cues(self) -> None:
        assert DEFAULT_LEXICON.interrogative_cues == (
            "어떻게", "언제", "왜", "무엇", "가능", "방법",
            "비용", "기간", "차이", "추천", "어디", "누가",
        )

    def test_get_lexicon_without_override(self) -> None:
        assert get_lexicon() is DEFAULT_LEXICON


class TestLoadLexicon:
    def test_loads_json_file(self, tmp_path) -> None:
        path = tmp_path / "lexicon.json"
        path.write_text(
            json.dumps({"version": "ja-1", "stop_words": ["です", "ます"], "interrogative_cues": ["なぜ"]}),
            encoding="utf-8",
        )

        lexicon = load_lexicon(path)

        assert lexicon.version == "ja-1"
        assert lexicon.stop_words == frozenset({"です", "ます"})
        assert lexicon.interrogative_cues == ("なぜ",)
        assert get_lexicon(str(path)) == lexicon

    def test_missing_file(self, tmp_path) -> None:
        with pytest.raises(LexiconError):
            load_lexicon(tmp_path / "missing.json")

    def test_invalid_file(self, tmp_path) -> None:
        path = tmp_path / "broken.json"
        path.write_text('{"stop_words": 3}', encoding="utf-8")
        with pytest.raises(LexiconError):
            load_lexicon(path)
