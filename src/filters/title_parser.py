# src/filters/title_parser.py

"""Total parsers for the measurements buried in marketplace titles.

Every helper here is a pure function that returns ``None`` (or the
cleaned text) instead of raising: a title without a volume, strength or
age statement is ordinary data, not an error.
"""

import re
import unicodedata
from collections.abc import Iterable

VOLUME_MIN_ML = 50
VOLUME_MAX_ML = 5000

# (pattern, multiplier) pairs tried in order; the first unit that matches wins
_VOLUME_PATTERNS: list[tuple[re.Pattern[str], int]] = [
    (re.compile(r"(?<!\d)(\d{2,4})\s?ml(?![a-z])", re.IGNORECASE), 1),
    (re.compile(r"(?<!\d)(\d{2,4})\s?ミリリットル"), 1),
    (re.compile(r"(?<!\d)(\d{2,4})\s?cc(?![a-z])", re.IGNORECASE), 1),
    (re.compile(r"(?<!\d)(\d{2,4})\s?cl(?![a-z])", re.IGNORECASE), 10),
]

# 40%, 43.5%, 40度
_ABV_RE = re.compile(r"(?<![\d.])(\d{2})(?:\.\d)?\s?(?:%|度)")

# 12年, 12yo, 12 YO
_AGE_RE = re.compile(
    r"(?<!\d)(\d{1,2})\s?年|\b(\d{1,2})\s?yo\b", re.IGNORECASE
)


def build_noise_pattern(terms: Iterable[str]) -> re.Pattern[str]:
    """Compile a denylist of noise terms into one alternation.

    ASCII words (``set``, ``limited``) only match as whole words so that
    brand names such as "sunset" survive; everything else (brackets,
    Japanese promo words) matches as a plain substring.
    """
    parts: list[str] = []
    for term in sorted(set(terms), key=len, reverse=True):
        if not term:
            continue
        escaped = re.escape(term.lower())
        if term.isascii() and term.isalpha():
            parts.append(rf"\b{escaped}\b")
        else:
            parts.append(escaped)
    if not parts:
        # Matches nothing
        return re.compile(r"(?!x)x")
    return re.compile("|".join(parts), re.IGNORECASE)


def normalise_title(title: str, noise: re.Pattern[str]) -> str:
    """Fold width variants, lowercase, drop noise terms and collapse spaces."""
    folded = unicodedata.normalize("NFKC", title or "").lower()
    stripped = noise.sub(" ", folded)
    return " ".join(stripped.split())


def parse_volume(text: str) -> int | None:
    """Return the bottle volume in millilitres, clamped to a sane range."""
    folded = unicodedata.normalize("NFKC", text or "")
    for pattern, multiplier in _VOLUME_PATTERNS:
        match = pattern.search(folded)
        if match:
            volume = int(match.group(1)) * multiplier
            return max(VOLUME_MIN_ML, min(VOLUME_MAX_ML, volume))
    return None


def parse_abv(text: str) -> int | None:
    """Return the whole-number strength from ``40%`` / ``43.5%`` / ``40度``."""
    folded = unicodedata.normalize("NFKC", text or "")
    match = _ABV_RE.search(folded)
    return int(match.group(1)) if match else None


def parse_age(text: str) -> str | None:
    """Return the age statement digits from ``12年`` or ``12yo``."""
    folded = unicodedata.normalize("NFKC", text or "")
    match = _AGE_RE.search(folded)
    if not match:
        return None
    return match.group(1) or match.group(2)


def strip_measurements(text: str) -> str:
    """Remove every volume, strength and age expression from *text*."""
    cleaned = text
    for pattern, _multiplier in _VOLUME_PATTERNS:
        cleaned = pattern.sub(" ", cleaned)
    cleaned = _ABV_RE.sub(" ", cleaned)
    cleaned = _AGE_RE.sub(" ", cleaned)
    return " ".join(cleaned.split())
