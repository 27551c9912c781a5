from __future__ import annotations

import re
from typing import Iterable
from urllib.parse import urlparse

from bs4 import BeautifulSoup, CData, NavigableString, Tag

from .text_norm import parse_markup
from .types import Link

__all__ = ["extract_links", "strip_urls", "url_host", "url_candidates"]

# A URL must start a token: "Awww..." is not a link to "www".
_BARE_URL_RE = re.compile(
    r"""(?<![\w.-])(?:https?://[^\s<>"']+|www\.[^\s<>"'.][^\s<>"']*)""",
    re.IGNORECASE,
)
_TRAILING_PUNCT = ".,;:!?)]}'\""
_BRACKETS = {")": "(", "]": "[", "}": "{"}
_TEXT_TYPES = (NavigableString, CData)


def _trim_url(url: str) -> str:
    """Drop sentence punctuation after a URL, keeping closers that balance an opener."""

    unmatched = {closer: url.count(closer) - url.count(opener) for closer, opener in _BRACKETS.items()}
    end = len(url)
    while end and url[end - 1] in _TRAILING_PUNCT:
        char = url[end - 1]
        if char in unmatched:
            if unmatched[char] <= 0:
                break
            unmatched[char] -= 1
        end -= 1
    return url[:end]


def _bare_urls(text: str) -> list[Link]:
    found = []
    for match in _BARE_URL_RE.finditer(text):
        url = _trim_url(match.group(0))
        if url:
            found.append(Link(href=url, text=url))
    return found


def extract_links(body: str | BeautifulSoup) -> tuple[Link, ...]:
    """Return every hyperlink in ``body`` in document order.

    Anchors with an ``href`` attribute count once each, including any URL
    printed as their text. Bare ``http(s)://`` and ``www.`` URLs in text
    outside anchors count as links too. URLs inside other tags' attributes
    (image sources and the like) are not hyperlinks and are ignored.

    An anchor the markup never closes owns the text up to the next anchor
    or the end of the body.
    """

    if not body:
        return ()
    soup = parse_markup(body) if isinstance(body, str) else body

    # Each node is visited once, parents before children, so the anchor that
    # owns a node is known from its parent.
    owner: dict[int, Tag] = {}
    anchor_text: dict[int, list[str]] = {}
    entries: list[Link | Tag] = []
    for node in soup.descendants:
        parent_owner = owner.get(id(node.parent))
        if isinstance(node, Tag):
            if node.name == "a" and node.get("href") is not None:
                owner[id(node)] = node
                anchor_text[id(node)] = []
                entries.append(node)
            elif parent_owner is not None:
                owner[id(node)] = parent_owner
        elif type(node) in _TEXT_TYPES:
            if parent_owner is not None:
                anchor_text[id(parent_owner)].append(str(node))
            else:
                entries.extend(_bare_urls(str(node)))

    links = []
    for entry in entries:
        if isinstance(entry, Link):
            links.append(entry)
            continue
        href = entry.get("href", "")
        text = " ".join(" ".join(anchor_text[id(entry)]).split())
        links.append(Link(href=str(href).strip(), text=text))
    return tuple(links)


def strip_urls(text: str) -> str:
    """Remove bare URLs from already-visible text."""

    return _BARE_URL_RE.sub(" ", text)


def url_host(url: str) -> str:
    """Best-effort hostname of ``url``; scheme-less values are read as http."""

    candidate = url.strip()
    if not candidate:
        return ""
    if "://" not in candidate and not candidate.startswith("//"):
        candidate = f"http://{candidate}"
    try:
        host = urlparse(candidate).hostname
    except ValueError:
        return ""
    return (host or "").rstrip(".")


def url_candidates(submitted: str | None, links: Iterable[Link]) -> tuple[str, ...]:
    """URLs inspected by the TLD and length rules: the submitted one, then body links."""

    urls: list[str] = []
    if submitted and submitted.strip():
        urls.append(submitted.strip())
    urls.extend(link.href for link in links if link.href)
    return tuple(urls)
