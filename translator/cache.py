import hashlib
import logging
from typing import Optional

from django.conf import settings
from django.core.cache import caches

from utils.text_handler import normalize_text


class TranslationCache:
    """
    Translations keyed by language pair and normalized source text.

    The cache is an optimization only: a backend that cannot be reached
    reads as a miss and a failed write is logged and dropped.
    """

    def __init__(self, backend=None, timeout: int = None):
        self.backend = backend if backend is not None else caches[settings.TRANSLATION_CACHE_ALIAS]
        self.timeout = settings.TRANSLATION_CACHE_TIMEOUT if timeout is None else timeout

    @staticmethod
    def make_key(text: str, source_language: str, target_language: str) -> str:
        digest = hashlib.sha256(normalize_text(text).encode("utf-8")).hexdigest()
        return f"translation:{source_language}:{target_language}:{digest}"

    def get(self, key: str) -> Optional[str]:
        try:
            return self.backend.get(key)
        except Exception as e:
            logging.warning("Translation cache read failed, treating as miss: %s", str(e))
            return None

    def get_many(self, keys: list[str]) -> list[Optional[str]]:
        if not keys:
            return []
        try:
            found = self.backend.get_many(keys)
        except Exception as e:
            logging.warning("Translation cache batch read failed, treating as miss: %s", str(e))
            found = {}
        return [found.get(key) for key in keys]

    def set(self, key: str, value: str, timeout: int = None):
        try:
            self.backend.set(key, value, self.timeout if timeout is None else timeout)
        except Exception as e:
            logging.warning("Translation cache write failed: %s", str(e))
