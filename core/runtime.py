import logging
from dataclasses import dataclass
from typing import Optional

from celery.signals import worker_process_init, worker_process_shutdown

from translator.cache import TranslationCache
from translator.providers import TranslationProvider, get_translation_provider
from utils.feed_action import FeedFetcher


@dataclass
class Runtime:
    """Long-lived handles shared by every job a worker process runs."""

    fetcher: FeedFetcher
    provider: TranslationProvider
    cache: TranslationCache

    def close(self):
        self.fetcher.close()
        self.provider.close()


_runtime: Optional[Runtime] = None


def open_runtime(fetcher: FeedFetcher = None, provider: TranslationProvider = None,
                 cache: TranslationCache = None) -> Runtime:
    global _runtime
    close_runtime()
    _runtime = Runtime(
        fetcher=fetcher or FeedFetcher(),
        provider=provider or get_translation_provider(),
        cache=cache or TranslationCache(),
    )
    logging.info("Runtime opened with translation provider %s", _runtime.provider)
    return _runtime


def get_runtime() -> Runtime:
    return _runtime or open_runtime()


def close_runtime():
    global _runtime
    if _runtime is not None:
        _runtime.close()
        _runtime = None


@worker_process_init.connect
def _open_worker_runtime(**kwargs):
    open_runtime()


@worker_process_shutdown.connect
def _close_worker_runtime(**kwargs):
    close_runtime()
