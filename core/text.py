"""
Text hygiene shared by blogs, comments and the AI assistant:
rich-text sanitising, markdown stripping and the blocked-word screen.
"""
import re

_SCRIPT_BLOCK = re.compile(r'<script.*?>.*?</script>', re.DOTALL | re.IGNORECASE)
_STYLE_BLOCK = re.compile(r'<style.*?>.*?</style>', re.DOTALL | re.IGNORECASE)
_STRAY_TAGS = re.compile(r'</?(script|style)[^>]*>', re.IGNORECASE)
_EMBED_TAGS = re.compile(r'</?(iframe|object|embed)[^>]*>', re.IGNORECASE)
_EVENT_HANDLERS = re.compile(r'\s+on\w+\s*=\s*("[^"]*"|\'[^\']*\'|[^\s>]+)', re.IGNORECASE)
_JS_URLS = re.compile(r'(href|src)\s*=\s*(["\'])\s*javascript:[^"\']*\2', re.IGNORECASE)
_BARE_JS_URLS = re.compile(r'(href|src)\s*=\s*javascript:[^\s>]*', re.IGNORECASE)
_ANY_TAG = re.compile(r'<[^>]+>')


def sanitize_html(text):
    """
    Keeps the editor's formatting tags (bold, italics, lists, links) but
    strips scripts, styles, embeds, inline event handlers and javascript: urls.
    """
    if not text:
        return ""
    text = _SCRIPT_BLOCK.sub('', text)
    text = _STYLE_BLOCK.sub('', text)
    text = _STRAY_TAGS.sub('', text)
    text = _EMBED_TAGS.sub('', text)
    text = _EVENT_HANDLERS.sub('', text)
    text = _JS_URLS.sub(r'\1=\2#\2', text)
    text = _BARE_JS_URLS.sub(r'\1="#"', text)
    return text.strip()


def strip_tags(text):
    """Plain text of an HTML fragment, whitespace collapsed."""
    if not text:
        return ""
    return " ".join(_ANY_TAG.sub(' ', text).split())


def clean_markdown(text):
    """Removes markdown emphasis, headers and trailing hashtags from model output."""
    if not text:
        return ""
    text = re.sub(r'\*\*|__|\*|_|`', '', text)
    text = re.sub(r'^\s*#+\s+', '', text, flags=re.MULTILINE)
    text = re.sub(r'(\s*#\w+)+\s*$', '', text)
    return text.strip()


def contains_profanity(text, blocked_words):
    """
    Whole-word match against the configured blocked list.
    """
    if not text or not blocked_words:
        return False
    words = set(re.findall(r"[a-z']+", strip_tags(text).lower()))
    return any(word.lower() in words for word in blocked_words)
