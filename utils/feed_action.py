import calendar
import codecs
import io
import json
import logging
import re
import time
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime, timezone
from http.cookiejar import CookieJar
from typing import Optional
from urllib.parse import urlsplit

import feedparser
import httpx
from dateutil import parser as date_parser
from django.conf import settings

from utils.text_handler import html_to_text

FEED_ACCEPT = "application/rss+xml, application/xml;q=0.9, text/xml;q=0.8, */*;q=0.7"
RETRY_STATUS_CODES = frozenset({408, 413, 429, 500, 502, 503, 504})
# timeouts, refused/reset connections and DNS failures
RETRY_EXCEPTIONS = (httpx.TimeoutException, httpx.NetworkError, httpx.RemoteProtocolError)

_STRAY_AMPERSAND = re.compile(r"&(?!amp;|lt;|gt;|quot;|apos;|#[0-9]+;|#x[0-9A-Fa-f]+;)")
_INVALID_XML_CHARS = re.compile(r"[\x00-\x08\x0B\x0C\x0E-\x1F]")
_XML_ENCODING = re.compile(rb"^\s*<\?xml[^>]*encoding=[\"']([A-Za-z0-9._-]+)[\"']")


class FetchError(Exception):
    def __init__(self, message: str, url: str = None, status_code: int = None):
        super().__init__(message)
        self.url = url
        self.status_code = status_code


class ParseError(Exception):
    pass


@dataclass
class FeedEntry:
    link: str
    title: Optional[str]
    text: str
    published_at: Optional[datetime] = None
    tags: list = field(default_factory=list)
    raw: dict = field(default_factory=dict)


def origin_of(url: str) -> str:
    parts = urlsplit(url)
    if not parts.scheme or not parts.netloc:
        raise FetchError(f"Invalid feed URL: {url}", url=url)
    return f"{parts.scheme}://{parts.netloc}"


def _sniff_encoding(content: bytes) -> str:
    # used only when the response carries no charset
    match = _XML_ENCODING.match(content[:256])
    if match:
        encoding = match.group(1).decode("ascii")
        try:
            codecs.lookup(encoding)
            return encoding
        except LookupError:
            logging.warning("Unknown feed encoding %s, falling back to utf-8", encoding)
    return "utf-8"


class FeedFetcher:
    """
    HTTP client for feed documents.

    One cookie jar is shared by every request the fetcher makes, so anti-bot
    cookies handed out on first contact are replayed for the rest of the
    process. Call close() on shutdown.
    """

    def __init__(
        self,
        user_agent: str = None,
        accept_language: str = None,
        timeout: float = None,
        max_retries: int = None,
        retry_delay: float = None,
        http2: bool = None,
        transport: httpx.BaseTransport = None,
    ):
        self.user_agent = user_agent or settings.FEED_USER_AGENT
        self.accept_language = accept_language or settings.FEED_ACCEPT_LANGUAGE
        self.timeout = settings.FEED_REQUEST_TIMEOUT if timeout is None else timeout
        self.max_retries = settings.FEED_MAX_RETRIES if max_retries is None else max_retries
        self.retry_delay = settings.FEED_RETRY_DELAY if retry_delay is None else retry_delay
        self.http2 = settings.FEED_HTTP2 if http2 is None else http2
        self.cookies = CookieJar()
        self._transport = transport
        self._clients = {}

    def _client(self, http2: bool) -> httpx.Client:
        if http2 not in self._clients:
            self._clients[http2] = httpx.Client(
                http2=http2,
                cookies=self.cookies,
                follow_redirects=True,
                max_redirects=5,
                timeout=self.timeout,
                default_encoding=_sniff_encoding,
                transport=self._transport,
            )
        return self._clients[http2]

    def headers(self, url: str, user_agent: str = None, referer: str = None) -> dict:
        return {
            "User-Agent": user_agent or self.user_agent,
            "Accept": FEED_ACCEPT,
            "Accept-Language": self.accept_language,
            "Referer": referer or origin_of(url) + "/",
            "DNT": "1",
            "Cache-Control": "no-cache",
        }

    def fetch(self, url: str, user_agent: str = None, referer: str = None, http2: bool = None) -> str:
        headers = self.headers(url, user_agent, referer)
        client = self._client(self.http2 if http2 is None else http2)

        for attempt in range(self.max_retries + 1):
            last_attempt = attempt == self.max_retries
            try:
                response = client.get(url, headers=headers)
            except RETRY_EXCEPTIONS as e:
                if last_attempt:
                    raise FetchError(f"{type(e).__name__} fetching {url}: {e}", url=url) from e
                logging.warning("Fetch %s failed (%s), retrying", url, type(e).__name__)
            except httpx.HTTPError as e:
                raise FetchError(f"Error fetching {url}: {e}", url=url) from e
            else:
                if response.is_success:
                    return response.text
                if response.status_code not in RETRY_STATUS_CODES or last_attempt:
                    raise FetchError(
                        f"HTTP {response.status_code} fetching {url}",
                        url=url,
                        status_code=response.status_code,
                    )
                logging.warning("Fetch %s returned %s, retrying", url, response.status_code)
            time.sleep(self.retry_delay * (2 ** attempt))

    def warm_up(self, url: str):
        """Visit the origin root first; some sites only serve feeds to clients holding their cookies."""
        try:
            self.fetch(origin_of(url) + "/")
        except FetchError as e:
            logging.debug("Warm-up for %s skipped: %s", url, e)

    def close(self):
        for client in self._clients.values():
            client.close()
        self._clients = {}


def sanitize_xml(xml: str) -> str:
    """Escape stray ampersands and drop control characters that XML forbids."""
    xml = _STRAY_AMPERSAND.sub("&amp;", xml)
    return _INVALID_XML_CHARS.sub("", xml)


def polite_delay(seconds: float = None):
    time.sleep(settings.FEED_POLITE_DELAY if seconds is None else seconds)


def parse_feed(document: str) -> list[FeedEntry]:
    # A stream keeps feedparser from treating the document as a URL or a path.
    parsed = feedparser.parse(
        io.BytesIO(document.encode("utf-8")),
        response_headers={"content-type": "application/xml; charset=utf-8"},
    )
    if parsed.bozo and not parsed.entries:
        raise ParseError(f"Malformed feed: {parsed.get('bozo_exception')}")
    if not parsed.get("version") and not parsed.entries:
        raise ParseError("Unsupported feed format")

    entries = []
    for entry_data in parsed.entries:
        entry = build_entry(entry_data)
        if not entry.text:
            logging.debug("Skipping entry without text: %s", entry.link)
            continue
        entries.append(entry)
    return entries


def build_entry(entry_data: Mapping) -> FeedEntry:
    link = (entry_data.get("link") or "").strip()
    title = entry_data.get("title")
    if title is not None:
        title = title.strip()

    snippet = html_to_text(entry_data.get("summary") or "")
    content = ""
    if entry_data.get("content"):
        content = (entry_data["content"][0].get("value") or "").strip()
    text = snippet or content or (title or "")

    return FeedEntry(
        link=link,
        title=title,
        text=text.strip(),
        published_at=parse_published(entry_data),
        tags=extract_tags(entry_data),
        raw=json.loads(json.dumps(entry_data, default=str)),
    )


def parse_published(entry_data: Mapping) -> Optional[datetime]:
    for key in ("published_parsed", "updated_parsed"):
        struct = entry_data.get(key)
        if struct:
            try:
                return datetime.fromtimestamp(calendar.timegm(struct), tz=timezone.utc)
            except (OverflowError, ValueError, TypeError):
                continue

    for key in ("published", "updated"):
        value = entry_data.get(key)
        if not value:
            continue
        try:
            published = date_parser.parse(value)
        except (ValueError, OverflowError):
            logging.debug("Unparseable date %r", value)
            continue
        if published.tzinfo is None:
            published = published.replace(tzinfo=timezone.utc)
        return published
    return None


def extract_tags(entry_data: Mapping) -> list[str]:
    candidates = []
    for tag in entry_data.get("tags") or []:
        if isinstance(tag, str):
            candidates.append(tag)
        elif isinstance(tag, Mapping):
            candidates.append(tag.get("term") or tag.get("label") or tag.get("name"))

    category = entry_data.get("category")
    if isinstance(category, str):
        candidates.append(category)

    tags = []
    for candidate in candidates:
        if not candidate or not isinstance(candidate, str):
            continue
        candidate = candidate.strip()
        if candidate and candidate not in tags:
            tags.append(candidate)
    return tags
