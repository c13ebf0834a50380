"""Deterministic choices driven by a seed string.

Every function here depends only on its arguments, so the same seed produces
the same output in every process, forever. Seeds are built as
``"<base>:<slot>"`` (for example ``"2025-01-01-v3:A"``) so that independent
draws from one base seed do not correlate.
"""

import logging
from typing import Iterable, List, Sequence

FNV_OFFSET_BASIS = 0x811C9DC5
FNV_PRIME = 0x01000193
GOLDEN_GAMMA = 0x9E3779B9
UINT32_MASK = 0xFFFFFFFF

DESCRIPTOR_POOL = [
    "neon armadillo",
    "quarterly taxes",
    "consumer annoyance",
    "bureaucratic form",
    "haunted lighthouse",
    "competitive knitting",
    "lactose intolerance",
    "suburban hoa",
    "emotional support cactus",
    "mild existential dread",
    "airport layovers",
    "sourdough starter",
    "medieval plumbing",
    "pigeon diplomacy",
    "lost socks",
    "jazz hands",
    "office printer rage",
    "fermented snacks",
    "retired astronauts",
    "passive aggressive notes",
    "crypto grandparents",
    "artisanal ice",
    "overdue library books",
    "smart fridge gossip",
    "rainy mondays",
    "desk plants",
    "time zones",
    "karaoke night",
    "group chat drama",
    "parking tickets",
    "garden gnomes",
    "weighted blankets",
    "tiny horses",
    "unsolicited advice",
    "pickleball",
    "elevator music",
]

FALLBACK_TITLE_ADJECTIVES = [
    "Brave",
    "Quiet",
    "Lucky",
    "Turbo",
    "Velvet",
    "Cosmic",
    "Humble",
    "Rapid",
    "Golden",
    "Sneaky",
    "Plucky",
    "Modular",
]

FALLBACK_TITLE_NOUNS = [
    "Gadget",
    "Widget",
    "Contraption",
    "Helper",
    "Machine",
    "Gizmo",
    "Device",
    "Companion",
    "Apparatus",
    "Doohickey",
    "Thingamajig",
    "Kit",
]

FACE_EMOJIS = ["😐", "🙂", "😏", "😬", "🤨", "😇", "😈", "🥸", "🤠", "😶", "🧐", "😅"]


def hash32(seed: str) -> int:
    """Hash a seed string to an unsigned 32-bit integer.

    FNV-1a over the UTF-8 bytes, followed by an avalanching finalizer so that
    seeds differing in a single trailing character get unrelated low bits.
    """
    h = FNV_OFFSET_BASIS
    for byte in seed.encode("utf-8"):
        h ^= byte
        h = (h * FNV_PRIME) & UINT32_MASK
    return _finalize(h)


def _finalize(h: int) -> int:
    h ^= h >> 16
    h = (h * 0x85EBCA6B) & UINT32_MASK
    h ^= h >> 13
    h = (h * 0xC2B2AE35) & UINT32_MASK
    h ^= h >> 16
    return h


def mix(h: int, index: int) -> int:
    """Derive the ``index``-th independent value from one hash."""
    return _finalize((h + index * GOLDEN_GAMMA) & UINT32_MASK)


def pick_in_range(seed: str, lo: int, hi: int, index: int = 0) -> int:
    """Pick an integer in [lo, hi] (inclusive) from the seed.

    Args:
        seed (str): Seed string
        lo (int): Lower bound. Swapped with ``hi`` if larger.
        hi (int): Upper bound
        index (int, optional): Purpose index, to decorrelate several picks from one seed. Defaults to 0.

    Returns:
        int: The picked value
    """
    lo, hi = int(lo), int(hi)
    if hi < lo:
        lo, hi = hi, lo
    span = hi - lo + 1
    if span <= 1:
        return lo
    return lo + mix(hash32(seed), index) % span


def pick_one(seed: str, pool: Sequence[str], index: int = 0) -> str:
    if not pool:
        raise ValueError("pool must not be empty")
    return pool[mix(hash32(seed), index) % len(pool)]


def normalize_choice(value: str) -> str:
    return value.strip().lower()


def pick_distinct_from_pool(
    seed: str,
    count: int,
    avoid: Iterable[str] = (),
    pool: Sequence[str] = DESCRIPTOR_POOL,
) -> List[str]:
    """Pick ``count`` values from the pool, skipping anything in ``avoid``.

    Values are compared trimmed and lowercased. Draws are bounded; when the
    seeded draws cannot fill the request, the pool is scanned in order for any
    unused value, and when the pool is exhausted values repeat with a warning.
    """
    if count <= 0 or not pool:
        return []
    used = {normalize_choice(v) for v in avoid}
    picked: List[str] = []
    h = hash32(seed)

    max_attempts = count * 8 + len(pool)
    for attempt in range(max_attempts):
        if len(picked) == count:
            return picked
        candidate = pool[mix(h, attempt) % len(pool)]
        if normalize_choice(candidate) in used:
            continue
        picked.append(candidate)
        used.add(normalize_choice(candidate))

    start = h % len(pool)
    for offset in range(len(pool)):
        if len(picked) == count:
            return picked
        candidate = pool[(start + offset) % len(pool)]
        if normalize_choice(candidate) in used:
            continue
        picked.append(candidate)
        used.add(normalize_choice(candidate))

    if len(picked) < count:
        logging.warning(
            f"Pool exhausted for seed {seed}: repeating values to fill {count} picks"
        )
        attempt = 0
        while len(picked) < count:
            picked.append(pool[mix(h, max_attempts + attempt) % len(pool)])
            attempt += 1
    return picked


def fallback_title(seed: str) -> str:
    """Deterministic placeholder name built from two word lists."""
    h = hash32(seed)
    adjective = FALLBACK_TITLE_ADJECTIVES[mix(h, 1) % len(FALLBACK_TITLE_ADJECTIVES)]
    noun = FALLBACK_TITLE_NOUNS[mix(h, 2) % len(FALLBACK_TITLE_NOUNS)]
    return f"The {adjective} {noun}"


def case_number_from_seed(seed: str) -> int:
    """Deterministic 4-digit case number (1000-9999)."""
    return 1000 + hash32(seed) % 9000


def pick_face_emoji(seed: str) -> str:
    return pick_one(seed, FACE_EMOJIS)
