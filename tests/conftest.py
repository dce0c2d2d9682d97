import httpx
import pytest
from django.core.cache import caches

from core.models import Source
from core.runtime import close_runtime, open_runtime
from translator.cache import TranslationCache
from translator.providers import TranslationError, TranslationProvider
from utils.feed_action import FeedFetcher

FEED_URL = "https://news.example.co.il/feed"

RSS_FEED = """<?xml version="1.0" encoding="UTF-8"?>
<rss version="2.0">
  <channel>
    <title>חדשות</title>
    <link>https://news.example.co.il/</link>
    <description>Example feed</description>
    <item>
      <title>כותרת ראשונה</title>
      <link>https://news.example.co.il/a/1</link>
      <description><![CDATA[<p>תוכן <b>ראשון</b></p>]]></description>
      <pubDate>Tue, 02 Jan 2024 03:04:05 GMT</pubDate>
      <category>חינוך</category>
      <category>ביטחון</category>
    </item>
    <item>
      <title>כותרת שנייה</title>
      <description>תוכן שני & עוד</description>
      <pubDate>Wed, 03 Jan 2024 10:00:00 GMT</pubDate>
      <category>חינוך </category>
    </item>
  </channel>
</rss>
"""


class EchoProvider(TranslationProvider):
    """Returns "EN:<text>" and records every call."""

    name = "echo"

    def __init__(self, fail=False):
        self.calls = []
        self.fail = fail

    def translate_text(self, text, source_language, target_language):
        self.calls.append((text, source_language, target_language))
        if self.fail:
            raise TranslationError("provider unavailable", status_code=503)
        return f"EN:{text}"


def feed_handler(body=RSS_FEED, status_code=200):
    def handler(request):
        if request.url.path == "/":
            return httpx.Response(200, text="<html></html>")
        return httpx.Response(status_code, text=body, headers={"content-type": "application/rss+xml"})

    return handler


@pytest.fixture(autouse=True)
def fast_settings(settings):
    settings.FEED_POLITE_DELAY = 0
    settings.FEED_RETRY_DELAY = 0
    settings.TARGET_LANGUAGE = "en"


@pytest.fixture(autouse=True)
def translation_cache():
    backend = caches["translations"]
    backend.clear()
    yield TranslationCache(backend)
    backend.clear()


@pytest.fixture
def provider():
    return EchoProvider()


@pytest.fixture
def make_fetcher():
    fetchers = []

    def make(handler=None, **kwargs):
        fetcher = FeedFetcher(
            transport=httpx.MockTransport(handler or feed_handler()),
            retry_delay=0,
            http2=False,
            **kwargs,
        )
        fetchers.append(fetcher)
        return fetcher

    yield make
    for fetcher in fetchers:
        fetcher.close()


@pytest.fixture
def runtime(make_fetcher, provider, translation_cache):
    runtime = open_runtime(fetcher=make_fetcher(), provider=provider, cache=translation_cache)
    yield runtime
    close_runtime()


@pytest.fixture
def source(db):
    return Source.objects.create(
        type=Source.Type.RSS,
        name="חדשות",
        display_name="News",
        url=FEED_URL,
        language="he",
        active=True,
    )
