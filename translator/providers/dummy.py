import logging

from .base import TranslationProvider


class DummyTranslationProvider(TranslationProvider):
    """Echoes its input. Used where no translation service is configured."""

    name = "dummy"

    def translate_text(self, text: str, source_language: str, target_language: str) -> str:
        logging.debug(">>> Dummy Translate [%s->%s]: %s", source_language, target_language, text)
        return text
