"""Stable URL-safe keys for location display names."""

from __future__ import annotations

import re

_NON_WORD_RE = re.compile(r"[^\w]+", re.ASCII)
_WHITESPACE_RE = re.compile(r"\s+", re.ASCII)


def normalize_key(display_name: str) -> str:
    """Turn a display name into a lower-case, hyphenated key.

    ``"  Some, Place!! "`` becomes ``"some-place"``. Input made only of
    punctuation yields an empty key; callers keep it as-is.
    """
    cleaned = display_name.strip()
    cleaned = _NON_WORD_RE.sub(" ", cleaned).strip()
    cleaned = _WHITESPACE_RE.sub("-", cleaned)
    return cleaned.lower()
