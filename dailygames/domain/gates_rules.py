"""Pearly Gates rules: question limits, the obvious-question guard and verdicts."""

import re
from enum import Enum

from dailygames.domain.seeded_picker import pick_in_range

MAX_QUESTIONS = 5
MAX_QUESTION_CHARS = 200

MIN_AGE = 1
MAX_AGE = 120
FALLBACK_AGE = 42


class Alignment(str, Enum):
    good = "GOOD"
    evil = "EVIL"


class Judgment(str, Enum):
    heaven = "HEAVEN"
    hell = "HELL"


def pick_alignment(seed: str) -> Alignment:
    return Alignment.good if pick_in_range(seed, 0, 1) == 0 else Alignment.evil


def is_correct_judgment(judgment: Judgment, alignment: Alignment) -> bool:
    return (judgment == Judgment.heaven) == (alignment == Alignment.good)


def _normalize_question(question: str) -> str:
    q = question.lower()
    q = re.sub(r"[‘’]", "'", q)
    q = re.sub(r"[^a-z0-9\s']", " ", q)
    return re.sub(r"\s+", " ", q).strip()


# Direct asks only; deductive questions must still pass.
OBVIOUS_PATTERNS = [
    re.compile(r"\b(are|r|were|am|is|would you say you are|tell me if you are)\b.*\b(you|u)\b.*\b(good|evil)\b"),
    re.compile(r"\b(are|r)\b.*\b(you|u)\b.*\b(a )?(good|evil)\b(\s+(person|soul|guy|man|woman))?\b"),
    re.compile(r"\b(do|did|would|should|are|r|will)\b.*\b(you|u)\b.*\b(belong|go|going|headed|destined)\b.*\b(heaven|hell)\b"),
    re.compile(r"\b(heaven|hell)\b.*\b(for you|for u|your place)\b"),
    re.compile(r"\bshould\b.*\b(i)\b.*\b(send|stamp|put|throw|cast|banish)\b.*\b(you|u)\b.*\b(to )?\b(heaven|hell)\b"),
    re.compile(r"\bwhich\b.*\b(heaven|hell)\b.*\b(you|u)\b"),
    re.compile(r"\b(are you)\b.*\b(saint|monster|villain|angel|devil|demon)\b"),
    re.compile(r"\b(are you)\b.*\b(saved|damned)\b"),
]


def is_obvious_alignment_question(question: str) -> bool:
    """True for questions that simply ask the soul for the verdict."""
    q = _normalize_question(question or "")
    if not q:
        return False
    return any(pattern.search(q) for pattern in OBVIOUS_PATTERNS)


def god_obvious_question_warning() -> str:
    return "\n".join(
        [
            "NO, MORTAL.",
            "PASSING JUDGMENT CANNOT BE THAT SIMPLE.",
            "ASK BETTER QUESTIONS. LISTEN CLOSELY.",
        ]
    )


def fallback_verdict_message(correct: bool) -> str:
    if correct:
        return "WELL JUDGED, MORTAL. THE GATES AGREE WITH YOU."
    return "THE GATES DISAGREE, MORTAL. LISTEN MORE CLOSELY TOMORROW."
