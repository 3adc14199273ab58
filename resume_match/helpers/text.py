import html
import re
from functools import lru_cache
from typing import Any, Iterable, List, Optional

from resume_match.utils.exceptions import ValidationError

TAG_RE = re.compile(r"</?[a-zA-Z][^<>]*>")
WS_RE = re.compile(r"\s+")
TOKEN_RE = re.compile(r"[a-z0-9]+")
QUOTES = {"’": "'", "‘": "'", "“": '"', "”": '"'}


def ensure_text(value: Any, field: str = "text") -> str:
    """Reject anything that is not a string; scoring needs real text."""
    if not isinstance(value, str):
        raise ValidationError(
            f"{field} must be a string, got {type(value).__name__}",
            field=field,
            value=value,
        )
    return value


def normalize(text: str) -> str:
    """
    Lowercase free text and collapse whitespace.

    Pasted page content is tolerated: HTML entities are unescaped and tags
    become spaces, so word boundaries survive for the regex matchers.
    """
    ensure_text(text)
    x = html.unescape(text)
    x = TAG_RE.sub(" ", x)
    for src, dst in QUOTES.items():
        x = x.replace(src, dst)
    return WS_RE.sub(" ", x.lower()).strip()


def tokenize(text: str) -> List[str]:
    return TOKEN_RE.findall(normalize(text))


def content_words(text: str, stop_words: Iterable[str]) -> List[str]:
    """Tokens longer than three characters that carry meaning, in text order."""
    stops = stop_words if isinstance(stop_words, (set, frozenset)) else set(stop_words)
    return [
        t for t in tokenize(text)
        if len(t) > 3 and not t.isdigit() and t not in stops
    ]


@lru_cache(maxsize=None)
def term_pattern(term: str, plural: bool = False) -> "re.Pattern":
    # alphanumeric look-arounds instead of \b so terms like c++ and node.js still anchor
    parts = [re.escape(p) for p in term.lower().split()]
    body = r"[\s\-]+".join(parts)
    if plural:
        body += r"(?:'?s)?"
    return re.compile(r"(?<![a-z0-9])" + body + r"(?![a-z0-9])", re.IGNORECASE)


def first_position(terms: Iterable[str], text: str, plural: bool = False) -> Optional[int]:
    """Earliest offset at which any of ``terms`` occurs in ``text``, or None."""
    best = None
    for term in terms:
        m = term_pattern(term, plural).search(text)
        if m and (best is None or m.start() < best):
            best = m.start()
    return best
