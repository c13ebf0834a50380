"""Content generation with a never-fail contract.

Every public coroutine makes exactly one backend call and returns a
``GenerationResult``. Replies go through three parse stages:

1. strict: the reply (or the first ``{...}`` block in it) is JSON of the expected shape
2. extract: named fields are pulled out with regular expressions
3. fallback: a deterministic value, tagged with the reason

Backend errors are absorbed into the fallback stage and never raised.
"""

import json
import logging
import math
import re
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Generic, List, Optional, Sequence, Tuple, TypeVar, Union

from dailygames.domain import invest_rules
from dailygames.domain.gates_rules import (
    FALLBACK_AGE,
    MAX_AGE,
    MIN_AGE,
    Alignment,
    Judgment,
    fallback_verdict_message,
)
from dailygames.domain.sanitize import (
    clamp_answer,
    clamp_int,
    collapse_whitespace,
    sanitize_blurb,
    sanitize_name,
    sanitize_pitch,
    sanitize_title,
)
from dailygames.domain.seeded_picker import fallback_title
from dailygames.llm_client import TextGenerator
from dailygames.models.schema_models import (
    CharacterProfileSchema,
    DemandProfile,
    HiddenInventionTruthSchema,
    HiddenProfileSchema,
    InventionSchema,
    RegulatoryRisk,
    VisibleProfileSchema,
)
from dailygames.services import prompts

T = TypeVar("T")

INVENTION_MAX_TOKENS = 900
REVISE_MAX_TOKENS = 420
MARKET_MAX_TOKENS = 900
PROFILE_MAX_TOKENS = 900
ANSWER_MAX_TOKENS = 140
VERDICT_MAX_TOKENS = 200

FALLBACK_PITCH = "A pitch so secret it forgot to show up."
FALLBACK_CATEGORY = "consumer"
FALLBACK_REVISED_PITCH = "We refined the pitch, but the words slipped through our fingers. Try again with a shorter suggestion."
FALLBACK_NARRATIVE = "The market made a sound. It was… complicated."
FALLBACK_ANSWER = "I… I don't know how to answer that."
PLACEHOLDER_ACT = "…"


class GenerationSource(str, Enum):
    generated = "generated"
    fallback = "fallback"


@dataclass
class GenerationResult(Generic[T]):
    value: T
    source: GenerationSource
    reason: Optional[str] = None  # why the fallback was used; None when generated

    @property
    def is_fallback(self) -> bool:
        return self.source == GenerationSource.fallback


@dataclass
class GeneratedInvention:
    invention: InventionSchema
    hidden: HiddenInventionTruthSchema


@dataclass
class MarketOutcome:
    raw_units_sold: Union[int, float]  # untrusted, possibly huge; clamp before use
    narrative: str


@dataclass
class GeneratedProfile:
    visible: VisibleProfileSchema
    hidden: HiddenProfileSchema


def extract_json_object(raw: str) -> Optional[dict]:
    """Parse the reply as a JSON object, or the outermost ``{...}`` block in it."""
    candidates = [raw]
    start, end = raw.find("{"), raw.rfind("}")
    if 0 <= start < end:
        candidates.append(raw[start:end + 1])
    for candidate in candidates:
        try:
            data = json.loads(candidate)
        except ValueError:
            continue
        if isinstance(data, dict):
            return data
    return None


def extract_string_field(raw: str, name: str) -> Optional[str]:
    match = re.search(rf'"{re.escape(name)}"\s*:\s*"((?:[^"\\]|\\.)*)"', raw, re.IGNORECASE)
    if not match:
        return None
    value = match.group(1)
    try:
        value = json.loads(f'"{value}"')
    except ValueError:
        pass
    value = value.strip()
    return value or None


def extract_number_field(raw: str, name: str) -> Optional[float]:
    match = re.search(
        rf'"{re.escape(name)}"\s*:\s*(-?\d+(?:\.\d+)?(?:[eE][+-]?\d+)?)', raw, re.IGNORECASE
    )
    return float(match.group(1)) if match else None


def parse_layered(
    raw: str,
    strict: Callable[[dict], Optional[T]],
    extract: Callable[[str], Optional[T]],
) -> Tuple[Optional[T], str]:
    """Run the strict and extract stages; returns (value or None, stage name)."""
    data = extract_json_object(raw)
    if data is not None:
        try:
            value = strict(data)
        except (TypeError, ValueError, ArithmeticError) as e:
            logging.info(f"Strict parse rejected the reply: {e}")
            value = None
        if value is not None:
            return value, "strict"
    try:
        value = extract(raw)
    except (TypeError, ValueError, ArithmeticError) as e:
        logging.info(f"Field extraction rejected the reply: {e}")
        value = None
    if value is not None:
        return value, "extract"
    return None, "unparseable"


def _as_text(value) -> str:
    return value.strip() if isinstance(value, str) else ""


def _to_three(values) -> Tuple[str, str, str]:
    items = [str(v).strip() for v in values if str(v or "").strip()] if isinstance(values, list) else []
    padded = (items + [PLACEHOLDER_ACT] * 3)[:3]
    return padded[0], padded[1], padded[2]


def build_invention(
    seed: str,
    invention_id: str,
    descriptors: Sequence[str],
    economics: dict,
    title: str = "",
    pitch: str = "",
    category: str = "",
) -> InventionSchema:
    """Assemble an invention, enforcing every bound regardless of the inputs."""
    unit_price_usd = clamp_int(
        economics.get("unit_price_usd"),
        invest_rules.UNIT_PRICE_MIN_USD,
        invest_rules.UNIT_PRICE_MAX_USD,
    )
    return InventionSchema(
        id=invention_id,
        title=sanitize_title(title, descriptors, seed),
        pitch=sanitize_pitch(pitch) or FALLBACK_PITCH,
        category=collapse_whitespace(category) or FALLBACK_CATEGORY,
        descriptors=(descriptors[0], descriptors[1]),
        valuation_usd=clamp_int(
            economics.get("valuation_usd"),
            invest_rules.VALUATION_MIN_USD,
            invest_rules.VALUATION_MAX_USD,
        ),
        unit_price_usd=unit_price_usd,
        unit_cogs_usd=clamp_int(economics.get("unit_cogs_usd"), 0, unit_price_usd),
    )


def build_hidden_truth(data: dict) -> HiddenInventionTruthSchema:
    risk = data.get("regulatoryRisk")
    demand = data.get("demandProfile")
    return HiddenInventionTruthSchema(
        notes=_as_text(data.get("notes")),
        regulatory_risk=risk if risk in {r.value for r in RegulatoryRisk} else RegulatoryRisk.low,
        demand_profile=demand if demand in {d.value for d in DemandProfile} else DemandProfile.niche,
    )


class ContentGenerator:
    def __init__(self, text_generator: TextGenerator):
        self.text_generator = text_generator

    async def _generate(
        self,
        label: str,
        prompt: str,
        max_tokens: int,
        strict: Callable[[dict], Optional[T]],
        extract: Callable[[str], Optional[T]],
        fallback: Callable[[], T],
    ) -> GenerationResult[T]:
        try:
            raw = await self.text_generator.complete(prompt, max_tokens)
        except Exception as e:
            logging.warning(f"{label}: backend call failed, using fallback: {e!r}")
            return GenerationResult(fallback(), GenerationSource.fallback, f"backend error: {type(e).__name__}")

        raw = (raw or "").strip()
        if not raw:
            logging.warning(f"{label}: empty response, using fallback")
            return GenerationResult(fallback(), GenerationSource.fallback, "empty response")

        value, stage = parse_layered(raw, strict, extract)
        if value is None:
            logging.warning(f"{label}: unparseable response, using fallback")
            return GenerationResult(fallback(), GenerationSource.fallback, "unparseable response")
        if stage != "strict":
            logging.info(f"{label}: parsed with field extraction")
        return GenerationResult(value, GenerationSource.generated)

    async def generate_invention(
        self,
        seed: str,
        invention_id: str,
        descriptors: Sequence[str],
        economics: dict,
    ) -> GenerationResult[GeneratedInvention]:
        """Generate one invention for a slate slot.

        Args:
            seed (str): Per-slot seed, e.g. "2025-01-01-v3:A"
            invention_id (str): Slot id
            descriptors (Sequence[str]): Exactly two mandatory descriptors
            economics (dict): Pre-selected numeric fields (see ``invest_rules.pick_economics``)

        Returns:
            GenerationResult[GeneratedInvention]: Invention and its hidden truth
        """

        def strict(data: dict) -> Optional[GeneratedInvention]:
            inv = data.get("invention")
            if not isinstance(inv, dict):
                return None
            hid = data.get("hidden") if isinstance(data.get("hidden"), dict) else {}
            return GeneratedInvention(
                build_invention(
                    seed,
                    invention_id,
                    descriptors,
                    economics,
                    title=_as_text(inv.get("title")),
                    pitch=_as_text(inv.get("pitch")),
                    category=_as_text(inv.get("category")),
                ),
                build_hidden_truth(hid),
            )

        def extract(raw: str) -> Optional[GeneratedInvention]:
            title = extract_string_field(raw, "title")
            pitch = extract_string_field(raw, "pitch")
            if title is None and pitch is None:
                return None
            hidden = {
                "notes": extract_string_field(raw, "notes"),
                "regulatoryRisk": extract_string_field(raw, "regulatoryRisk"),
                "demandProfile": extract_string_field(raw, "demandProfile"),
            }
            return GeneratedInvention(
                build_invention(
                    seed,
                    invention_id,
                    descriptors,
                    economics,
                    title=title or "",
                    pitch=pitch or "",
                    category=extract_string_field(raw, "category") or "",
                ),
                build_hidden_truth(hidden),
            )

        def fallback() -> GeneratedInvention:
            return GeneratedInvention(
                build_invention(seed, invention_id, descriptors, economics, title=fallback_title(seed)),
                HiddenInventionTruthSchema(),
            )

        return await self._generate(
            f"invention {seed}",
            prompts.build_invention_prompt(seed, invention_id, descriptors, economics),
            INVENTION_MAX_TOKENS,
            strict,
            extract,
            fallback,
        )

    async def revise_pitch(self, original_pitch: str, suggestion: str) -> GenerationResult[str]:
        def strict(data: dict) -> Optional[str]:
            return sanitize_pitch(_as_text(data.get("revisedPitch"))) or None

        def extract(raw: str) -> Optional[str]:
            return sanitize_pitch(extract_string_field(raw, "revisedPitch") or "") or None

        return await self._generate(
            "revise",
            prompts.build_revise_prompt(original_pitch, suggestion),
            REVISE_MAX_TOKENS,
            strict,
            extract,
            lambda: FALLBACK_REVISED_PITCH,
        )

    async def simulate_market(
        self,
        invention: InventionSchema,
        hidden: HiddenInventionTruthSchema,
        revised_pitch: str,
    ) -> GenerationResult[MarketOutcome]:
        """Ask the backend how the product sold. ``raw_units_sold`` is NOT clamped here."""

        def strict(data: dict) -> Optional[MarketOutcome]:
            units = data.get("unitsSold")
            narrative = sanitize_blurb(_as_text(data.get("narrative")))
            if isinstance(units, bool) or not isinstance(units, (int, float)):
                return None
            if isinstance(units, float) and not math.isfinite(units):
                return None
            if not narrative:
                return None
            return MarketOutcome(units, narrative)

        def extract(raw: str) -> Optional[MarketOutcome]:
            units = extract_number_field(raw, "unitsSold")
            narrative = sanitize_blurb(extract_string_field(raw, "narrative") or "")
            if units is None and not narrative:
                return None
            return MarketOutcome(
                units if units is not None else float(invest_rules.MIN_UNITS_SOLD),
                narrative or FALLBACK_NARRATIVE,
            )

        return await self._generate(
            f"market {invention.id}",
            prompts.build_market_prompt(invention, hidden, revised_pitch),
            MARKET_MAX_TOKENS,
            strict,
            extract,
            lambda: MarketOutcome(float(invest_rules.MIN_UNITS_SOLD), FALLBACK_NARRATIVE),
        )

    async def generate_profile(
        self,
        seed: str,
        alignment: Alignment,
        face_emoji: str,
        case_number: int,
    ) -> GenerationResult[GeneratedProfile]:
        def visible_from(name, age, occupation, cause_of_death, quote) -> VisibleProfileSchema:
            return VisibleProfileSchema(
                case_number=case_number,
                name=sanitize_name(name or ""),
                age=clamp_int(age, MIN_AGE, MAX_AGE) if age is not None else FALLBACK_AGE,
                occupation=collapse_whitespace(occupation or "") or "Unemployed",
                cause_of_death=collapse_whitespace(cause_of_death or "") or "Unknown",
                quote=collapse_whitespace(quote or ""),
            )

        def strict(data: dict) -> Optional[GeneratedProfile]:
            visible, hidden = data.get("visible"), data.get("hidden")
            if not isinstance(visible, dict) or not isinstance(hidden, dict):
                return None
            age = visible.get("age")
            if isinstance(age, bool) or not isinstance(age, (int, float)):
                age = None
            return GeneratedProfile(
                visible_from(
                    _as_text(visible.get("name")),
                    age,
                    _as_text(visible.get("occupation")),
                    _as_text(visible.get("causeOfDeath")),
                    _as_text(visible.get("quote")),
                ),
                HiddenProfileSchema(
                    bio=_as_text(hidden.get("bio")),
                    best_acts=_to_three(hidden.get("bestActs")),
                    worst_acts=_to_three(hidden.get("worstActs")),
                ),
            )

        def extract(raw: str) -> Optional[GeneratedProfile]:
            name = extract_string_field(raw, "name")
            if name is None:
                return None
            return GeneratedProfile(
                visible_from(
                    name,
                    extract_number_field(raw, "age"),
                    extract_string_field(raw, "occupation"),
                    extract_string_field(raw, "causeOfDeath"),
                    extract_string_field(raw, "quote"),
                ),
                HiddenProfileSchema(
                    bio=extract_string_field(raw, "bio") or "",
                    best_acts=_to_three([]),
                    worst_acts=_to_three([]),
                ),
            )

        def fallback() -> GeneratedProfile:
            return GeneratedProfile(
                VisibleProfileSchema(
                    case_number=case_number,
                    name="Mystery Soul",
                    age=FALLBACK_AGE,
                    occupation="Unknown",
                    cause_of_death="Unknown",
                ),
                HiddenProfileSchema(
                    bio="A soul with an unclear past.",
                    best_acts=_to_three([]),
                    worst_acts=_to_three([]),
                ),
            )

        return await self._generate(
            f"profile {seed}",
            prompts.build_profile_prompt(seed, alignment.value, face_emoji),
            PROFILE_MAX_TOKENS,
            strict,
            extract,
            fallback,
        )

    async def answer_question(
        self,
        profile: CharacterProfileSchema,
        qa_so_far: List[dict],
        question: str,
    ) -> GenerationResult[str]:
        def strict(data: dict) -> Optional[str]:
            return clamp_answer(_as_text(data.get("answer"))) or None

        def extract(raw: str) -> Optional[str]:
            return clamp_answer(extract_string_field(raw, "answer") or "") or None

        return await self._generate(
            f"answer {profile.game_id}",
            prompts.build_ask_prompt(profile, qa_so_far, question),
            ANSWER_MAX_TOKENS,
            strict,
            extract,
            lambda: FALLBACK_ANSWER,
        )

    async def render_verdict(
        self,
        profile: CharacterProfileSchema,
        judgment: Judgment,
        correct: bool,
    ) -> GenerationResult[str]:
        def strict(data: dict) -> Optional[str]:
            return clamp_answer(_as_text(data.get("godMessage"))) or None

        def extract(raw: str) -> Optional[str]:
            return clamp_answer(extract_string_field(raw, "godMessage") or "") or None

        return await self._generate(
            f"verdict {profile.game_id}",
            prompts.build_verdict_prompt(profile, judgment.value, correct),
            VERDICT_MAX_TOKENS,
            strict,
            extract,
            lambda: fallback_verdict_message(correct),
        )
