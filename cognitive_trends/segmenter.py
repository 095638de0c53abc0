"""Word and sentence segmentation for elder-authored text."""

from __future__ import annotations

import re
from typing import List


WORD_RE = re.compile(r"[a-z']+")
SENTENCE_SPLIT_RE = re.compile(r"[.!?]+")


def extract_words(text: str) -> List[str]:
    """Lower-case the text and return runs of letters and apostrophes."""
    if not text:
        return []
    return WORD_RE.findall(text.lower())


def split_sentences(text: str) -> List[str]:
    if not text:
        return []
    parts = SENTENCE_SPLIT_RE.split(text)
    return [p.strip() for p in parts if p.strip()]
