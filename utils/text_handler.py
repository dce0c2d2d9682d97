import logging
import re

from bs4 import BeautifulSoup

_WHITESPACE = re.compile(r"\s+")


def normalize_text(text: str) -> str:
    """Trim and collapse internal whitespace. Used for translation cache keys."""
    if not text:
        return ""
    return _WHITESPACE.sub(" ", text).strip()


def html_to_text(content: str) -> str:
    """Strip markup from a feed description, keeping readable text only."""
    if not content:
        return ""
    if "<" not in content and "&" not in content:
        return content.strip()
    try:
        soup = BeautifulSoup(content, "lxml")
        for element in soup(["script", "style"]):
            element.decompose()
        text = soup.get_text(" ")
    except Exception as e:
        logging.warning("html_to_text: %s", str(e))
        text = content
    return normalize_text(text)
