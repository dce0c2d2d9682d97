import logging

from utils.text_handler import normalize_text

from .cache import TranslationCache
from .providers import TranslationProvider, get_translation_provider


def _unique(values):
    seen = set()
    result = []
    for value in values:
        if value and value not in seen:
            seen.add(value)
            result.append(value)
    return result


def translate_categories(
    categories: list,
    from_lang: str = "he",
    to_lang: str = "en",
    provider: TranslationProvider = None,
    cache: TranslationCache = None,
) -> list:
    """
    Translate a list of category labels, consulting the cache first.

    Each distinct normalized label reaches the provider at most once per
    call and only when the cache has no entry for it. Any provider failure
    returns an empty list, leaving the caller to persist the item untagged.
    """
    if not categories:
        return []

    provider = provider or get_translation_provider()
    cache = cache or TranslationCache()

    normalized = _unique(normalize_text(c) for c in categories if c)
    if not normalized:
        return []

    keys = [cache.make_key(text, from_lang, to_lang) for text in normalized]
    cached = cache.get_many(keys)

    translations = {}
    try:
        for text, key, hit in zip(normalized, keys, cached):
            if hit:
                translations[text] = hit
                continue
            result = (provider.translate_text(text, from_lang, to_lang) or "").strip()
            if result:
                translations[text] = result
                cache.set(key, result)
    except Exception as e:
        logging.error("translate_categories [%s->%s] failed: %s", from_lang, to_lang, str(e))
        return []

    logging.debug(
        "Translated %s categories (%s from cache)",
        len(normalized),
        sum(1 for hit in cached if hit),
    )
    return _unique(translations.get(normalize_text(c)) for c in categories if c)


def translate_category(
    category: str,
    from_lang: str = "he",
    to_lang: str = "en",
    provider: TranslationProvider = None,
    cache: TranslationCache = None,
) -> str:
    text = normalize_text(category or "")
    if not text:
        return ""

    provider = provider or get_translation_provider()
    cache = cache or TranslationCache()

    key = cache.make_key(text, from_lang, to_lang)
    hit = cache.get(key)
    if hit:
        return hit

    try:
        result = (provider.translate_text(text, from_lang, to_lang) or "").strip()
    except Exception as e:
        logging.error("translate_category [%s->%s] failed: %s", from_lang, to_lang, str(e))
        return ""

    if result:
        cache.set(key, result)
    return result
