"""Slugs, Markdown rendering and plain-text excerpts."""

from __future__ import annotations

import re
import unicodedata
from html import unescape

import markdown as md

_NON_ALNUM_RE = re.compile(r"[^a-z0-9]+")
_TAG_RE = re.compile(r"<[^>]+>")
_WS_RE = re.compile(r"\s+")


def derive_slug(title: str) -> str:
    """Lowercase, strip diacritics, hyphenate: "ANS Define Novas Regras!!" -> "ans-define-novas-regras"."""
    text = unicodedata.normalize("NFD", title.lower())
    text = "".join(c for c in text if not unicodedata.combining(c))
    return _NON_ALNUM_RE.sub("-", text).strip("-")


def ensure_unique_slug(slug: str, existing_slugs: list[str] | set[str]) -> str:
    """Append -1, -2, ... until the slug is not taken."""
    if slug not in existing_slugs:
        return slug
    counter = 1
    while f"{slug}-{counter}" in existing_slugs:
        counter += 1
    return f"{slug}-{counter}"


def markdown_to_html(md_text: str) -> str:
    """Render post Markdown to HTML for previews."""
    html = md.markdown(md_text, extensions=["extra", "sane_lists"])
    return html.strip()


def extract_excerpt(content: str, max_length: int = 150) -> str:
    """Plain-text excerpt of Markdown content, cut on a word boundary."""
    text = unescape(_TAG_RE.sub(" ", markdown_to_html(content)))
    text = _WS_RE.sub(" ", text).strip()
    if len(text) <= max_length:
        return text

    truncated = text[:max_length]
    last_space = truncated.rfind(" ")
    if last_space > 0:
        return truncated[:last_space] + "..."
    return truncated + "..."
