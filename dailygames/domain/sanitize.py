"""Sanitizers for untrusted generated text and numbers.

These rules are player-visible contracts: pitches are always at most two
sentences without labels, titles never repeat the day's descriptors, and
narratives never carry numbers of their own (numbers come from the economics
rules only).
"""

import math
import re
from typing import List, Sequence

from dailygames.domain.seeded_picker import fallback_title

HEADER_LINE = re.compile(r"^[a-z][a-z0-9 _-]{0,18}\s*:\s*\S+", re.IGNORECASE)
BULLET_PREFIX = re.compile(r"^[-*•]+\s+")
WHITESPACE = re.compile(r"\s+")
SENTENCE = re.compile(r"[^.!?]+[.!?]+|[^.!?]+$")
NON_ALNUM = re.compile(r"[^a-z0-9]")

MONEY_PATTERNS = [
    re.compile(r"\$[\d,]+(?:\.\d+)?"),
    re.compile(r"\bUSD\s*[\d,]+(?:\.\d+)?\b", re.IGNORECASE),
    re.compile(r"\b[\d,]+(?:\.\d+)?\s*(?:dollars|bucks)\b", re.IGNORECASE),
    re.compile(r"\b[\d,]+(?:\.\d+)?\s*%"),
    re.compile(r"\b[\d,]{4,}\b"),
]

QUOTED_NICKNAME = re.compile(r"[\"“”'‘’][^\"“”'‘’]{1,60}[\"“”'‘’]")
PARENTHESIZED = re.compile(r"\(([^)]{1,60})\)")

MIN_FILTERED_TOKEN_LENGTH = 3
MIN_TITLE_LENGTH = 3
MAX_ANSWER_CHARS = 240

# "-es" is only a plural suffix after these endings (taxes, boxes, glasses, lunches)
SIBILANT_ENDINGS = ("ss", "x", "z", "ch", "sh")


def collapse_whitespace(text: str) -> str:
    return WHITESPACE.sub(" ", text).strip()


def strip_header_lines(text: str, strip_bullets: bool = True) -> str:
    """Drop "Label: ..." lines and leading bullet markers, then join lines."""
    lines = []
    for line in re.split(r"\r?\n", text):
        line = line.strip()
        if HEADER_LINE.match(line):
            continue
        if strip_bullets:
            line = BULLET_PREFIX.sub("", line)
        lines.append(line)
    return " ".join(lines)


def split_sentences(text: str) -> List[str]:
    """Split on [.!?] boundaries; a trailing fragment counts as a sentence."""
    return [s.strip() for s in SENTENCE.findall(text) if s.strip()]


def first_sentences(text: str, count: int = 2) -> str:
    return " ".join(split_sentences(text)[:count]).strip()


def sanitize_pitch(text: str) -> str:
    """Two sentences at most, no labels, no bullets, single spaces."""
    text = (text or "").strip()
    if not text:
        return ""
    text = collapse_whitespace(strip_header_lines(text))
    return first_sentences(text, 2)


def sanitize_blurb(text: str) -> str:
    """Like ``sanitize_pitch`` but also strips money, percentages and big numbers."""
    text = (text or "").strip()
    if not text:
        return ""
    text = collapse_whitespace(strip_header_lines(text))
    for pattern in MONEY_PATTERNS:
        text = pattern.sub("", text)
    text = collapse_whitespace(text)
    return first_sentences(text, 2)


def normalize_token(token: str) -> str:
    return NON_ALNUM.sub("", token.lower())




def _strip_plural_s(token: str) -> str:
    if len(token) > 3 and token.endswith("s") and not token.endswith("ss"):
        return token[:-1]
    return token


def _singular_forms(token: str) -> set:
    forms = {token, _strip_plural_s(token)}
    if len(token) > 4 and token.endswith("ies"):
        forms.add(token[:-3] + "y")
    elif len(token) > 4 and token.endswith("es") and token[:-2].endswith(SIBILANT_ENDINGS):
        forms.add(token[:-2])
    return forms


def _descriptor_forms(descriptors: Sequence[str]) -> set:
    forms = set()
    for descriptor in descriptors:
        for token in (descriptor or "").split():
            normalized = normalize_token(token)
            if normalized:
                forms.update(_singular_forms(normalized))
    return forms


def sanitize_title(title: str, descriptors: Sequence[str], seed: str) -> str:
    """Remove descriptor words from a generated title.

    Tokens shorter than three characters (after normalizing) are kept. If the
    remainder is too short, the deterministic fallback name for ``seed`` is
    returned instead.

    Args:
        title (str): Title as generated
        descriptors (Sequence[str]): The mandatory descriptor strings of the item
        seed (str): Seed for the fallback name

    Returns:
        str: Sanitized, non-empty title
    """
    forms = _descriptor_forms(descriptors)
    kept = []
    for token in collapse_whitespace(title or "").split(" "):
        normalized = normalize_token(token)
        if len(normalized) >= MIN_FILTERED_TOKEN_LENGTH and (
            normalized in forms or _strip_plural_s(normalized) in forms
        ):
            continue
        if token:
            kept.append(token)
    cleaned = " ".join(kept).strip()
    if not kept or len(cleaned) < MIN_TITLE_LENGTH:
        return fallback_title(seed)
    return cleaned


def round_half_away_from_zero(value: float) -> int:
    return int(math.copysign(math.floor(abs(value) + 0.5), value))


def clamp_int(value, lo: int, hi: int) -> int:
    """Coerce an untrusted value into [lo, hi]; non-numeric or non-finite gives ``lo``.

    Integers are compared exactly, so values too large for a float still clamp to ``hi``.
    """
    if isinstance(value, int):
        return max(lo, min(hi, value))
    try:
        number = float(value)
    except (TypeError, ValueError, OverflowError):
        return lo
    if not math.isfinite(number):
        return lo
    return max(lo, min(hi, round_half_away_from_zero(number)))


def sanitize_name(name: str) -> str:
    """Drop quoted nicknames and parenthesized epithets from a person's name."""
    text = (name or "").strip()
    if not text:
        return "Unknown"
    text = QUOTED_NICKNAME.sub(" ", text).strip()
    text = PARENTHESIZED.sub(" ", text).strip()
    return collapse_whitespace(text) or "Unknown"


def clamp_answer(text: str) -> str:
    text = collapse_whitespace(text or "")
    if len(text) <= MAX_ANSWER_CHARS:
        return text
    return f"{text[:MAX_ANSWER_CHARS - 4].strip()}…"


def format_usd(amount: int) -> str:
    return f"${amount:,.0f}"


def format_market_summary(
    blurb: str,
    units_sold: int,
    unit_price_usd: int,
    gross_revenue_usd: int,
    payout_usd: int,
) -> str:
    """Narrative plus the numeric lines the UI shows under it."""
    cleaned = sanitize_blurb(blurb) or "The market reacted. The details are… vivid."
    return "\n".join(
        [
            cleaned,
            "",
            f"Units sold: {units_sold:,} @ {format_usd(unit_price_usd)}",
            f"Product gross revenue: {format_usd(gross_revenue_usd)}",
            f"Your payout: {format_usd(payout_usd)}",
        ]
    )
