"""Lightweight source-language and subject-matter detection.

Both detectors look at a bounded text sample and are deterministic: the same
sample always yields the same label.
"""

import re
from dataclasses import dataclass

UNKNOWN_LANGUAGE = "Unknown"
GENERAL_SUBJECT = "General Content"
MIN_LANGUAGE_SAMPLE_CHARS = 50
MIN_SUBJECT_SCORE = 3


@dataclass(frozen=True)
class _LanguageProfile:
    language: str
    stop_words: re.Pattern[str]
    threshold: float


_LANGUAGE_PROFILES: tuple[_LanguageProfile, ...] = (
    _LanguageProfile(
        "English",
        re.compile(r"\b(the|and|or|if|in|on|at|to|for|with|by|about|is|are)\b", re.IGNORECASE),
        0.04,
    ),
    _LanguageProfile(
        "Spanish",
        re.compile(r"\b(el|la|los|las|y|o|si|en|con|por|para|es|son|está)\b", re.IGNORECASE),
        0.03,
    ),
    _LanguageProfile(
        "French",
        re.compile(r"\b(le|la|les|et|ou|si|dans|sur|avec|par|pour|est|sont)\b", re.IGNORECASE),
        0.03,
    ),
    _LanguageProfile(
        "German",
        re.compile(r"\b(der|die|das|und|oder|wenn|in|auf|mit|durch|für|ist|sind)\b", re.IGNORECASE),
        0.03,
    ),
    _LanguageProfile(
        "Italian",
        re.compile(r"\b(il|la|i|gli|le|e|o|se|in|su|con|per|è|sono)\b", re.IGNORECASE),
        0.03,
    ),
)

_SUBJECT_KEYWORDS: dict[str, tuple[str, ...]] = {
    "Technical/IT": (
        "software", "hardware", "code", "programming", "algorithm", "database", "server",
        "computer", "network", "interface", "cloud", "api", "application", "digital",
        "developer", "system", "technology", "platform", "framework", "function", "module",
    ),
    "Medical/Healthcare": (
        "health", "patient", "doctor", "hospital", "clinical", "medical", "treatment",
        "disease", "diagnosis", "therapy", "pharmaceutical", "medicine", "symptom",
        "healthcare", "clinic", "physician", "nurse", "drug", "prescription", "vaccine",
    ),
    "Legal": (
        "law", "legal", "contract", "agreement", "court", "attorney", "plaintiff",
        "defendant", "clause", "provision", "jurisdiction", "statute", "regulation",
        "compliance", "litigant", "paragraph", "judicial", "lawyer", "dispute", "settlement",
    ),
    "Financial/Business": (
        "finance", "business", "market", "investment", "profit", "revenue", "strategy",
        "commercial", "economic", "fiscal", "budget", "corporate", "asset", "stock",
        "management", "accounting", "capital", "financial", "transaction", "enterprise",
    ),
    "Marketing/Advertising": (
        "marketing", "brand", "advertising", "campaign", "consumer", "customer", "product",
        "service", "market", "sales", "promotion", "audience", "demographic", "media",
        "content", "creative", "advertisement", "commercial", "communication", "engagement",
    ),
    "Academic/Educational": (
        "research", "study", "education", "academic", "student", "university", "school",
        "learning", "teaching", "theory", "concept", "analysis", "methodology", "science",
        "literature", "experiment", "hypothesis", "thesis", "dissertation", "curriculum",
    ),
}

_WORD = re.compile(r"\w+", re.UNICODE)


def detect_language(sample: str) -> str:
    """Return the language whose stop words are densest above its threshold."""
    if len(sample.strip()) < MIN_LANGUAGE_SAMPLE_CHARS:
        return UNKNOWN_LANGUAGE

    word_total = len(sample.split())
    best_language = UNKNOWN_LANGUAGE
    best_ratio = 0.0
    for profile in _LANGUAGE_PROFILES:
        ratio = len(profile.stop_words.findall(sample)) / word_total
        if ratio > profile.threshold and ratio > best_ratio:
            best_language, best_ratio = profile.language, ratio
    return best_language


def detect_subject(sample: str) -> str:
    """Return the keyword category with the most hits, or the general label."""
    words = [word.lower() for word in _WORD.findall(sample)]
    best_subject = GENERAL_SUBJECT
    best_score = 0
    for subject, keywords in _SUBJECT_KEYWORDS.items():
        vocabulary = set(keywords)
        score = sum(1 for word in words if word in vocabulary)
        if score > best_score:
            best_subject, best_score = subject, score
    if best_score < MIN_SUBJECT_SCORE:
        return GENERAL_SUBJECT
    return best_subject
