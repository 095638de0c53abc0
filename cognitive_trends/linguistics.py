"""Lexical feature extraction for a single text sample."""

from __future__ import annotations

from typing import List, Set

from .schemas import LinguisticAnalysis
from .segmenter import extract_words, split_sentences


POSITIVE_EMOTIONS = frozenset(
    {
        "happy",
        "joy",
        "love",
        "excited",
        "grateful",
        "wonderful",
        "blessed",
        "peaceful",
        "proud",
        "hopeful",
    }
)

NEGATIVE_EMOTIONS = frozenset(
    {
        "sad",
        "angry",
        "worried",
        "anxious",
        "lonely",
        "scared",
        "frustrated",
        "confused",
        "tired",
        "hurt",
    }
)

EMOTION_WORDS = POSITIVE_EMOTIONS | NEGATIVE_EMOTIONS

COMPLEX_CONNECTORS = frozenset(
    {
        "however",
        "although",
        "therefore",
        "furthermore",
        "consequently",
        "nevertheless",
        "meanwhile",
        "moreover",
    }
)

MIN_COMPLEX_COMMAS = 3
MIN_CONTENT_WORD_LENGTH = 4
DEFAULT_COHERENCE = 0.5


def _is_complex(sentence: str) -> bool:
    if sentence.count(",") >= MIN_COMPLEX_COMMAS:
        return True
    return any(word in COMPLEX_CONNECTORS for word in extract_words(sentence))


def _content_words(sentence: str) -> Set[str]:
    return {w for w in extract_words(sentence) if len(w) >= MIN_CONTENT_WORD_LENGTH}


def coherence_score(sentences: List[str]) -> float:
    """Mean lexical overlap between adjacent sentences, in [0, 1]."""
    if len(sentences) < 2:
        return DEFAULT_COHERENCE

    word_sets = [_content_words(s) for s in sentences]
    overlap_sum = 0.0
    for prev, curr in zip(word_sets, word_sets[1:]):
        overlap_sum += len(prev & curr) / max(min(len(prev), len(curr)), 1)
    return min(overlap_sum / (len(word_sets) - 1), 1.0)


def analyze_text(text: str) -> LinguisticAnalysis:
    words = extract_words(text)
    sentences = split_sentences(text)
    unique_words = set(words)

    return LinguisticAnalysis(
        word_count=len(words),
        unique_word_count=len(unique_words),
        avg_sentence_length=len(words) / max(len(sentences), 1),
        complex_sentence_count=sum(1 for s in sentences if _is_complex(s)),
        emotion_word_count=sum(1 for w in words if w in EMOTION_WORDS),
        coherence_score=coherence_score(sentences),
        type_token_ratio=len(unique_words) / max(len(words), 1),
    )
