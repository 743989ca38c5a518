import re

_DISALLOWED = re.compile(r'[^a-z0-9 -]')
_WHITESPACE = re.compile(r'\s+')
_HYPHENS = re.compile(r'-+')

SUFFIX_LENGTH = 6


def derive_slug(title):
    """
    URL-safe identifier for a title.
    'Hello, World!!!' -> 'hello-world', '  A -- B  ' -> 'a-b'.
    Re-deriving from a slug returns the same slug.
    """
    if not title:
        return ""
    slug = _DISALLOWED.sub('', title.lower())
    slug = _WHITESPACE.sub('-', slug)
    slug = _HYPHENS.sub('-', slug)
    return slug.strip('-')


def slug_candidates(base, record_id):
    """
    Slugs to try for a record, in order: the base itself, then the base with
    ever longer suffixes taken from record_id. The suffixes are stable for a
    given record, so re-saving the same blog keeps the same slug.
    """
    full = derive_slug(str(record_id).replace('-', ''))
    lengths = list(range(SUFFIX_LENGTH, len(full), 4)) + [len(full)]
    suffixes = [full[:n] for n in lengths]
    if not base:
        return suffixes
    return [base] + [f"{base}-{suffix}" for suffix in suffixes]


def unique_slug(base, record_id, taken):
    """First candidate not already owned by another record."""
    candidates = slug_candidates(base, record_id)
    for candidate in candidates:
        if candidate not in taken:
            return candidate
    return candidates[-1]
