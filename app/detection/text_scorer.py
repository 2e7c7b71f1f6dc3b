"""
AI-authorship fingerprinting for free text.

Three generator-family detectors run independently over the same token
statistics; each accumulates its own weight table. Universal signals
(repeated openings, impersonal tone, too-clean spelling) are reported as
issues and linguistic patterns but do not feed any family score.
"""

import logging
import re
from collections import Counter
from typing import List

from app.detection.constants import (
    EXPLANATORY_MIN,
    EXPLANATORY_PHRASES,
    EXPLANATORY_WEIGHT,
    FAMILY_FORMAL,
    FAMILY_HEDGING,
    FAMILY_PROBABILITY_CAP,
    FAMILY_TERSE,
    FORMAL_SENTENCE_BAND,
    FORMAL_SENTENCE_WEIGHT,
    FORMAL_TRANSITION_MIN,
    FORMAL_TRANSITION_WEIGHT,
    FORMAL_TRANSITIONS,
    HEDGING_MIN,
    HEDGING_PHRASES,
    HEDGING_WEIGHT,
    IMPERSONAL_MIN_CHARS,
    PERSONAL_MARKERS,
    REPEATED_OPENING_MIN,
    TERSE_MAX_SENTENCE_WORDS,
    TERSE_MAX_WORD_LENGTH,
    TERSE_WEIGHT,
    TOO_CLEAN_MIN_CHARS,
    TYPO_PATTERNS,
    TextFamily,
)
from app.schemas.analysis import AIFingerprint, GeneratorFingerprint, LinguisticPattern

logger = logging.getLogger(__name__)

_SENTENCE_SPLIT = re.compile(r"[.!?]+")


def split_sentences(text: str) -> List[str]:
    return [s for s in _SENTENCE_SPLIT.split(text) if s.strip()]


def get_text_statistics(text: str) -> dict:
    """Word/sentence counts and the two averages the families key on."""
    words = text.lower().split()
    sentences = split_sentences(text)
    word_count = len(words)
    sentence_count = len(sentences)
    return {
        "words": words,
        "sentences": sentences,
        "avg_words_per_sentence": word_count / sentence_count if sentence_count else float(word_count),
        "avg_word_length": sum(len(w) for w in words) / word_count if word_count else 0.0,
    }


def _present(phrases: List[str], text_lower: str) -> List[str]:
    return [p for p in phrases if p in text_lower]


def find_repeated_openings(text: str) -> List[str]:
    """Sentence openings (first three words) used REPEATED_OPENING_MIN times or more."""
    openings: Counter = Counter()
    for sentence in split_sentences(text):
        opening = " ".join(sentence.strip().split(" ")[:3]).lower()
        if len(opening) > 5:
            openings[opening] += 1

    return [
        f'Repeated sentence start: "{opening}"'
        for opening, count in openings.items()
        if count >= REPEATED_OPENING_MIN
    ]


def has_typos(text: str) -> bool:
    return any(p.search(text) for p in TYPO_PATTERNS)


def score_formal_family(text_lower: str, stats: dict, patterns: List[LinguisticPattern]) -> tuple:
    score = 0.0
    characteristics: List[str] = []

    low, high = FORMAL_SENTENCE_BAND
    if low < stats["avg_words_per_sentence"] < high:
        score += FORMAL_SENTENCE_WEIGHT
        characteristics.append("Consistent sentence length typical of GPT")

    transitions = _present(FORMAL_TRANSITIONS, text_lower)
    if len(transitions) >= FORMAL_TRANSITION_MIN:
        score += FORMAL_TRANSITION_WEIGHT
        characteristics.append("Excessive use of formal transitions")
        patterns.append(LinguisticPattern(
            pattern_type="formal_transitions",
            description="Overuse of formal transitional phrases",
            confidence=0.8,
            examples=transitions,
        ))

    if len(_present(EXPLANATORY_PHRASES, text_lower)) >= EXPLANATORY_MIN:
        score += EXPLANATORY_WEIGHT
        characteristics.append("Overly explanatory language patterns")

    return score, characteristics


def score_hedging_family(text_lower: str, patterns: List[LinguisticPattern]) -> tuple:
    score = 0.0
    characteristics: List[str] = []

    hedges = _present(HEDGING_PHRASES, text_lower)
    if len(hedges) >= HEDGING_MIN:
        score += HEDGING_WEIGHT
        characteristics.append("Anthropic Claude conversational patterns")
        patterns.append(LinguisticPattern(
            pattern_type="conversational_markers",
            description="Claude-style conversational markers",
            confidence=0.75,
            examples=hedges,
        ))

    return score, characteristics


def score_terse_family(stats: dict) -> tuple:
    score = 0.0
    characteristics: List[str] = []

    if (stats["avg_word_length"] < TERSE_MAX_WORD_LENGTH
            and stats["avg_words_per_sentence"] < TERSE_MAX_SENTENCE_WORDS):
        score += TERSE_WEIGHT
        characteristics.append("Direct communication style typical of LLaMA")

    return score, characteristics


def _fingerprint(family: TextFamily, score: float, characteristics: List[str]) -> GeneratorFingerprint:
    return GeneratorFingerprint(
        model_name=family.model_name,
        probability=min(score / 100, FAMILY_PROBABILITY_CAP),
        confidence=family.confidence,
        characteristics=characteristics,
    )


def get_ai_fingerprint(text: str) -> tuple:
    """
    Returns (fingerprint, issues).

    `issues` holds the universal signals only; the caller decides whether to
    report them based on the final verdict.
    """
    text_lower = text.lower()
    stats = get_text_statistics(text)
    patterns: List[LinguisticPattern] = []
    issues: List[str] = []

    formal_score, formal_chars = score_formal_family(text_lower, stats, patterns)
    hedging_score, hedging_chars = score_hedging_family(text_lower, patterns)
    terse_score, terse_chars = score_terse_family(stats)

    repeated = find_repeated_openings(text)
    if repeated:
        issues.append("Repetitive sentence structures detected")
        patterns.append(LinguisticPattern(
            pattern_type="repetitive_structures",
            description="Repetitive sentence patterns",
            confidence=0.7,
            examples=repeated,
        ))

    if not _present(PERSONAL_MARKERS, text_lower) and len(text) > IMPERSONAL_MIN_CHARS:
        issues.append("Lack of personal anecdotes or specific experiences")
        patterns.append(LinguisticPattern(
            pattern_type="impersonal_tone",
            description="Absence of personal experiences or anecdotes",
            confidence=0.6,
            examples=["No personal markers found in text"],
        ))

    if not has_typos(text) and len(text) > TOO_CLEAN_MIN_CHARS:
        issues.append("Suspiciously perfect grammar and spelling")
        patterns.append(LinguisticPattern(
            pattern_type="perfect_grammar",
            description="Unnaturally perfect grammar and spelling",
            confidence=0.5,
            examples=["No typos or grammatical errors found"],
        ))

    detected = [
        _fingerprint(family, score, chars)
        for family, score, chars in (
            (FAMILY_FORMAL, formal_score, formal_chars),
            (FAMILY_HEDGING, hedging_score, hedging_chars),
            (FAMILY_TERSE, terse_score, terse_chars),
        )
        if score > 0
    ]
    detected.sort(key=lambda m: m.probability, reverse=True)

    generation_confidence = min(
        max(formal_score, hedging_score, terse_score) / 100, FAMILY_PROBABILITY_CAP
    )

    logger.debug(
        f"[TEXT] families formal={formal_score} hedging={hedging_score} terse={terse_score} "
        f"avg_wps={stats['avg_words_per_sentence']:.1f} avg_wlen={stats['avg_word_length']:.2f}"
    )

    fingerprint = AIFingerprint(
        detected_models=detected,
        linguistic_patterns=patterns,
        generation_confidence=generation_confidence,
        human_likelihood=1 - generation_confidence,
    )
    return fingerprint, issues
