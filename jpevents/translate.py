"""
Japanese -> English translation for event titles.

Provider order: cache, DeepL, Google Cloud Translation, then a glossary
substitution of common event terms. Each API is used only when its key is
configured; an API failure is logged and the next provider is tried.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, Iterable, Optional

import requests

from .config import DEEPL_API_KEY, GOOGLE_TRANSLATE_API_KEY
from .models import NormalizedEvent

logger = logging.getLogger(__name__)

DEEPL_URL = "https://api-free.deepl.com/v2/translate"
GOOGLE_URL = "https://translation.googleapis.com/language/translate/v2"
API_TIMEOUT_S = 15

GLOSSARY: Dict[str, str] = {
    "公演": "Performance",
    "演奏会": "Concert",
    "交響楽団": "Symphony Orchestra",
    "定期演奏会": "Regular Concert",
    "歌舞伎": "Kabuki",
    "落語": "Rakugo",
    "新春": "New Year",
    "初春": "Early Spring",
    "大歌舞伎": "Grand Kabuki",
    "座": "Theater",
    "劇場": "Theater",
    "ホール": "Hall",
    "美術館": "Museum",
    "展覧会": "Exhibition",
    "展示": "Exhibition",
    "コンサート": "Concert",
    "ライブ": "Live",
    "フェスティバル": "Festival",
    "祭り": "Festival",
    "まつり": "Festival",
}

# Longest terms first so compounds win over their parts (大歌舞伎 before 歌舞伎)
_GLOSSARY_ORDER = sorted(GLOSSARY, key=len, reverse=True)


@dataclass(frozen=True)
class TranslationResult:
    original: str
    translated: str
    provider: str  # "cache" | "deepl" | "google" | "fallback"


class TranslationCache:
    """Process-local text -> translation map, owned by whoever builds the Translator."""

    def __init__(self) -> None:
        self._data: Dict[str, str] = {}

    def get(self, text: str) -> Optional[str]:
        return self._data.get(text)

    def set(self, text: str, translated: str) -> None:
        self._data[text] = translated

    def clear(self) -> None:
        self._data.clear()

    def __len__(self) -> int:
        return len(self._data)


def basic_translate(text: str) -> str:
    result = text
    for term in _GLOSSARY_ORDER:
        result = result.replace(term, GLOSSARY[term])
    return result


class Translator:
    def __init__(
        self,
        cache: Optional[TranslationCache] = None,
        *,
        deepl_api_key: Optional[str] = None,
        google_api_key: Optional[str] = None,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.cache = cache if cache is not None else TranslationCache()
        self.deepl_api_key = deepl_api_key
        self.google_api_key = google_api_key
        self.session = session or requests.Session()

    @classmethod
    def from_env(cls, cache: Optional[TranslationCache] = None) -> "Translator":
        return cls(cache, deepl_api_key=DEEPL_API_KEY, google_api_key=GOOGLE_TRANSLATE_API_KEY)

    # ------------------------------------------------------------
    # Providers
    # ------------------------------------------------------------

    def _deepl(self, text: str) -> str:
        r = self.session.post(
            DEEPL_URL,
            headers={"Authorization": f"DeepL-Auth-Key {self.deepl_api_key}"},
            json={"text": [text], "source_lang": "JA", "target_lang": "EN"},
            timeout=API_TIMEOUT_S,
        )
        if not r.ok:
            raise RuntimeError(f"DeepL API error: {r.status_code}")
        return r.json()["translations"][0]["text"]

    def _google(self, text: str) -> str:
        r = self.session.post(
            GOOGLE_URL,
            params={"key": self.google_api_key},
            json={"q": text, "source": "ja", "target": "en", "format": "text"},
            timeout=API_TIMEOUT_S,
        )
        if not r.ok:
            raise RuntimeError(f"Google Translate API error: {r.status_code}")
        return r.json()["data"]["translations"][0]["translatedText"]

    # ------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------

    def translate_detailed(self, text: str) -> TranslationResult:
        if not text or not text.strip():
            return TranslationResult(text, text, "fallback")

        cached = self.cache.get(text)
        if cached:
            return TranslationResult(text, cached, "cache")

        providers = []
        if self.deepl_api_key:
            providers.append(("deepl", self._deepl))
        if self.google_api_key:
            providers.append(("google", self._google))

        for provider, call in providers:
            try:
                translated = call(text)
            except (requests.RequestException, RuntimeError, KeyError, IndexError, ValueError) as e:
                logger.warning("[translate] %s failed: %s", provider, e)
                continue
            self.cache.set(text, translated)
            return TranslationResult(text, translated, provider)

        return TranslationResult(text, basic_translate(text), "fallback")

    def translate(self, text: str) -> str:
        return self.translate_detailed(text).translated


def fill_missing_titles(events: Iterable[NormalizedEvent], translator: Translator) -> int:
    """Set title_en from title_ja wherever it is missing. Returns how many were filled."""
    filled = 0
    for ev in events:
        if ev.title_en or not ev.title_ja:
            continue
        try:
            ev.title_en = translator.translate(ev.title_ja)
        except Exception as e:
            logger.warning("[translate] failed to translate event %s: %s", ev.id, e)
            continue
        filled += 1
    return filled
