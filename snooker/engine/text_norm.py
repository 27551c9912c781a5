from __future__ import annotations

import html
import logging
import re
import unicodedata
import warnings

from bs4 import BeautifulSoup, MarkupResemblesLocatorWarning, ParserRejectedMarkup

logger = logging.getLogger(__name__)

_WHITESPACE_RE = re.compile(r"\s+")
_EDGE_PUNCT = "\"'`.,;:!?()[]{}<>*_~-"

__all__ = [
    "normalize_term",
    "normalize_tld",
    "normalize_body",
    "parse_markup",
    "visible_text",
    "first_word",
]


def normalize_term(value: str) -> str:
    """Normalize a list term or free text for case-insensitive matching.

    Steps:
        1. Unicode NFKC normalisation
        2. Trim leading/trailing whitespace
        3. Casefold
        4. Collapse internal whitespace to a single space
    """

    text = unicodedata.normalize("NFKC", str(value))
    text = text.strip().casefold()
    if not text:
        return ""
    return _WHITESPACE_RE.sub(" ", text)


def normalize_tld(value: str) -> str:
    """Return ``value`` as a lower-case top-level domain with a leading dot."""

    text = normalize_term(value).replace(" ", "")
    text = text.strip(".")
    if not text:
        return ""
    return f".{text}"


def normalize_body(value: str) -> str:
    """Canonical form of a comment body used for duplicate detection."""

    return normalize_term(value)


def parse_markup(markup: str) -> BeautifulSoup:
    """Parse a comment body as lenient HTML.

    Unclosed and stray tags never raise; ``html.parser`` repairs what it can
    and treats the rest as text. Markup the parser rejects outright is read
    as plain text.
    """

    with warnings.catch_warnings():
        # Bodies are often nothing but a URL.
        warnings.simplefilter("ignore", MarkupResemblesLocatorWarning)
        try:
            return BeautifulSoup(markup, "html.parser")
        except ParserRejectedMarkup as exc:
            logger.debug("markup rejected by parser, reading it as plain text: %s", exc)
            return BeautifulSoup(html.escape(markup, quote=False), "html.parser")


def visible_text(markup: str | BeautifulSoup) -> str:
    """Strip tags, unescape entities and collapse whitespace."""

    soup = parse_markup(markup) if isinstance(markup, str) else markup
    text = soup.get_text(separator=" ")
    return _WHITESPACE_RE.sub(" ", text).strip()


def first_word(text: str) -> str:
    """Return the first whitespace-delimited word of ``text``, normalised."""

    for token in text.split():
        word = normalize_term(token).strip(_EDGE_PUNCT)
        if word:
            return word
    return ""
