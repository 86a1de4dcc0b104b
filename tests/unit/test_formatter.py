import pytest

from edashow.formatter import derive_slug, ensure_unique_slug, extract_excerpt, markdown_to_html


@pytest.mark.parametrize(
    "title, expected",
    [
        ("ANS Define Novas Regras!!", "ans-define-novas-regras"),
        ("Saúde Digital: o que muda em 2025?", "saude-digital-o-que-muda-em-2025"),
        ("  --Ação & Reação--  ", "acao-reacao"),
        ("!!!", ""),
    ],
)
def test_derive_slug(title, expected):
    assert derive_slug(title) == expected


@pytest.mark.parametrize("title", ["Coração Ágil", "já é tarde", "C++ / Rust"])
def test_derive_slug_is_idempotent_and_url_safe(title):
    slug = derive_slug(title)
    assert derive_slug(slug) == slug
    assert all(c.isascii() and (c.isdigit() or c.islower() or c == "-") for c in slug)
    assert not slug.startswith("-") and not slug.endswith("-")


def test_ensure_unique_slug():
    assert ensure_unique_slug("post", []) == "post"
    assert ensure_unique_slug("post", {"post"}) == "post-1"
    assert ensure_unique_slug("post", ["post", "post-1", "post-2"]) == "post-3"


def test_markdown_to_html():
    html = markdown_to_html("## Título\n\n- um\n- dois\n\n| a | b |\n|---|---|\n| 1 | 2 |")
    assert "<h2>Título</h2>" in html
    assert "<li>um</li>" in html
    assert "<table>" in html


def test_extract_excerpt_strips_markdown():
    assert extract_excerpt("## Intro\n\nTexto com **negrito** &amp; mais.") == "Intro Texto com negrito & mais."


def test_extract_excerpt_cuts_on_word_boundary():
    excerpt = extract_excerpt("palavra " * 50, max_length=30)
    assert excerpt == "palavra palavra palavra..."
    assert extract_excerpt("x" * 40, max_length=10) == "x" * 10 + "..."
