import logging

import httpx
from django.conf import settings
from django.core.exceptions import ImproperlyConfigured

from .base import TranslationProvider, TranslationError


class GoogleTranslationProvider(TranslationProvider):
    # https://cloud.google.com/translate/docs/reference/rest/v2/translate
    name = "google"

    def __init__(self, api_key: str = None, endpoint: str = None, timeout: float = 30.0,
                 transport: httpx.BaseTransport = None):
        self.api_key = api_key or settings.GOOGLE_TRANSLATE_API_KEY
        if not self.api_key:
            raise ImproperlyConfigured("Missing GOOGLE_TRANSLATE_API_KEY")
        self.endpoint = endpoint or settings.GOOGLE_TRANSLATE_ENDPOINT
        self.client = httpx.Client(timeout=timeout, transport=transport)

    def translate_text(self, text: str, source_language: str, target_language: str) -> str:
        logging.info(">>> Google Translate [%s->%s]: %s chars", source_language, target_language, len(text))
        data = {
            "q": text,
            "source": source_language,
            "target": target_language,
            "format": "text",
        }
        try:
            resp = self.client.post(self.endpoint, params={"key": self.api_key}, data=data)
        except httpx.HTTPError as e:
            raise TranslationError(f"Google Translate request failed: {e}") from e

        if not resp.is_success:
            raise TranslationError(
                f"Google Translate API error {resp.status_code}: {resp.text}",
                status_code=resp.status_code,
            )

        try:
            translated = resp.json()["data"]["translations"][0]["translatedText"]
        except (ValueError, KeyError, IndexError, TypeError) as e:
            raise TranslationError("Google Translate API response missing translatedText") from e
        if not translated:
            raise TranslationError("Google Translate API response missing translatedText")
        return translated

    def close(self):
        self.client.close()
