from django.conf import settings
from django.core.exceptions import ImproperlyConfigured

from .base import TranslationProvider, TranslationError
from .dummy import DummyTranslationProvider
from .google import GoogleTranslationProvider

PROVIDERS = {
    DummyTranslationProvider.name: DummyTranslationProvider,
    GoogleTranslationProvider.name: GoogleTranslationProvider,
}


def get_translation_provider(name: str = None) -> TranslationProvider:
    name = name or settings.TRANSLATION_PROVIDER
    try:
        provider_class = PROVIDERS[name]
    except KeyError:
        raise ImproperlyConfigured(
            f"Unknown TRANSLATION_PROVIDER {name!r}, expected one of {', '.join(PROVIDERS)}"
        )
    return provider_class()
