import re
from typing import Iterable, List, Optional, Tuple

from resume_match.helpers.text import first_position, normalize
from resume_match.helpers.vocabulary import DEFAULT_VOCABULARY, Vocabulary
from resume_match.models.models import ExperienceLevel, ExtractedProfile

# numbers only match from the start of a digit run and with a bounded length,
# so pasted digit strings neither overflow nor backtrack quadratically
YEARS_PATTERNS = [
    re.compile(r"(?<!\d)(\d{1,3})\+?\s*years?\s*(?:of\s*)?experience", re.I),
    re.compile(r"(?<!\d)(\d{1,3})\+?\s*years?\s*in", re.I),
    re.compile(r"experience\s*:\s*(\d{1,3})(?!\d)\+?\s*years?", re.I),
]

PERCENT_RE = re.compile(r"(?<![\d.])\d{1,4}(?:\.\d{1,4})?\s?%")
CURRENCY_RE = re.compile(
    r"[$€£]\s?\d{1,3}(?:,?\d{3}){0,4}(?:\.\d{1,2})?"
    r"|(?<![a-z0-9,.])\d{1,3}(?:,?\d{3}){0,4}(?:\.\d{1,2})?\s?(?:usd|eur|gbp|dollars)(?![a-z0-9])",
    re.I,
)

# checked in this order; the first level with a keyword present wins
LEVEL_PRECEDENCE = [ExperienceLevel.LEAD, ExperienceLevel.SENIOR, ExperienceLevel.MID, ExperienceLevel.ENTRY]


def _ordered_matches(candidates: Iterable[Tuple[str, List[str]]], text: str, plural: bool = False) -> Tuple[str, ...]:
    """Names whose terms occur in ``text``, ordered by first occurrence."""
    found = []
    for idx, (name, terms) in enumerate(candidates):
        pos = first_position(terms, text, plural=plural)
        if pos is not None:
            found.append((pos, idx, name))
    found.sort()
    out, seen = [], set()
    for _, _, name in found:
        if name not in seen:
            seen.add(name)
            out.append(name)
    return tuple(out)


def extract_years(text: str) -> Optional[int]:
    for pattern in YEARS_PATTERNS:
        m = pattern.search(text)
        if m:
            return int(m.group(1))
    return None


def extract_level(text: str, years: Optional[int], vocabulary: Vocabulary) -> ExperienceLevel:
    for level in LEVEL_PRECEDENCE:
        keywords = vocabulary.seniority_keywords.get(level.value, [])
        if keywords and first_position(keywords, text) is not None:
            return level
    return ExperienceLevel.MID if years is not None else ExperienceLevel.UNKNOWN


def extract_achievements(text: str, vocabulary: Vocabulary) -> Tuple[str, ...]:
    found = []
    for idx, (tag, verbs) in enumerate(vocabulary.achievement_verbs.items()):
        pos = first_position(verbs, text)
        if pos is not None:
            found.append((pos, idx, tag))
    base = len(vocabulary.achievement_verbs)
    for offset, (tag, pattern) in enumerate((("quantified impact", PERCENT_RE), ("financial impact", CURRENCY_RE))):
        m = pattern.search(text)
        if m:
            found.append((m.start(), base + offset, tag))
    found.sort()
    out = []
    for _, _, tag in found:
        if tag not in out:
            out.append(tag)
    return tuple(out)


def extract_profile(text: str, vocabulary: Vocabulary = DEFAULT_VOCABULARY) -> ExtractedProfile:
    """
    Derive skills, experience and education signals from one free-text input.

    Absence of matches yields empty tuples and a null year count; only a
    non-string input is rejected (by the normalizer).
    """
    norm = normalize(text)
    if not norm:
        return ExtractedProfile()

    skills = _ordered_matches(((s, vocabulary.skill_terms(s)) for s in vocabulary.skills), norm)
    technologies = _ordered_matches(((t, [t]) for t in vocabulary.technologies), norm)
    education = _ordered_matches(((e, [e]) for e in vocabulary.education_keywords), norm, plural=True)
    years = extract_years(norm)

    return ExtractedProfile(
        skills=skills,
        technologies=technologies,
        experience_level=extract_level(norm, years, vocabulary),
        experience_years=years,
        education_signals=education,
        achievements=extract_achievements(norm, vocabulary),
    )
