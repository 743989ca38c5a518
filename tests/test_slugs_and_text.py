import pytest

from core.slugs import derive_slug, slug_candidates, unique_slug
from core.text import clean_markdown, contains_profanity, sanitize_html, strip_tags


@pytest.mark.parametrize('title,slug', [
    ("Hello, World!!!", "hello-world"),
    ("  A -- B  ", "a-b"),
    ("", ""),
    ("Python 3.12: What's New?", "python-312-whats-new"),
    ("Ünïcödé only", "ncd-only"),
    ("---", ""),
])
def test_derive_slug(title, slug):
    assert derive_slug(title) == slug


@pytest.mark.parametrize('title', ["Hello, World!!!", "  A -- B  ", "Tabs\tand\nnewlines", "x"])
def test_derive_slug_is_idempotent(title):
    once = derive_slug(title)
    assert derive_slug(once) == once


def test_unique_slug_keeps_free_base():
    assert unique_slug('hello-world', 'abc123def456', set()) == 'hello-world'


def test_unique_slug_appends_stable_suffix_on_collision():
    record_id = '1f0e2d3c-4b5a-6978-8695-a4b3c2d1e0f9'
    slug = unique_slug('hello-world', record_id, {'hello-world'})
    assert slug == 'hello-world-1f0e2d'
    assert unique_slug('hello-world', record_id, {'hello-world'}) == slug


def test_unique_slug_grows_suffix_when_short_one_is_taken():
    record_id = '1f0e2d3c-4b5a-6978-8695-a4b3c2d1e0f9'
    slug = unique_slug('hello', record_id, {'hello', 'hello-1f0e2d'})
    assert slug == 'hello-1f0e2d3c4b'


def test_empty_base_falls_back_to_id_suffix():
    assert unique_slug('', 'ABCDEF-123456', set()) == 'abcdef'
    assert slug_candidates('', 'ABCDEF-123456')[0] == 'abcdef'


def test_sanitize_html_keeps_formatting_and_drops_scripts():
    html = ('<p onclick="steal()">Hi <b>there</b></p><script>alert(1)</script>'
            '<a href="javascript:evil()">x</a><iframe src="x"></iframe>')
    cleaned = sanitize_html(html)
    assert '<b>there</b>' in cleaned
    assert 'script' not in cleaned
    assert 'onclick' not in cleaned
    assert 'javascript:' not in cleaned
    assert 'iframe' not in cleaned


@pytest.mark.parametrize('html,expected', [
    ('<img src=x onerror=alert(1)>', '<img src=x>'),
    ('<p>x</p><script>alert(1)', '<p>x</p>alert(1)'),
    ('<a href=javascript:evil()>x</a>', '<a href="#">x</a>'),
])
def test_sanitize_html_handles_unquoted_and_unclosed_payloads(html, expected):
    assert sanitize_html(html) == expected


def test_strip_tags():
    assert strip_tags('<p>Hello\n <b>world</b></p>') == 'Hello world'


def test_clean_markdown():
    assert clean_markdown('## **Bold** claim #tech #python') == 'Bold claim'


def test_contains_profanity_matches_whole_words():
    assert contains_profanity('well damn that', ['damn'])
    assert contains_profanity('<b>DAMN</b>', ['damn'])
    assert not contains_profanity('the Amsterdam office', ['damn'])
    assert not contains_profanity('', ['damn'])
    assert not contains_profanity('damn', [])
