"""Prompt builders for the text-generation backend.

Prompts ask for strict JSON; the parsers in ``content_generator`` never trust
that the reply actually follows the requested shape.
"""

from typing import List, Sequence

from dailygames.domain.invest_rules import MAX_UNITS_SOLD, MIN_UNITS_SOLD
from dailygames.models.schema_models import (
    CharacterProfileSchema,
    HiddenInventionTruthSchema,
    InventionSchema,
)

PITCH_RULES = """- The pitch MUST read like a founder speaking directly to the sharks on Shark Tank.
- It MUST be EXACTLY 2 short sentences (aim for <= 120 characters per sentence).
- NO headings, NO labels, NO bullet points, NO line breaks, NO "Hook:"/"Target:"/"Problem:" formats."""


def build_invention_prompt(
    seed: str,
    invention_id: str,
    descriptors: Sequence[str],
    economics: dict,
) -> str:
    d1, d2 = descriptors
    return f"""You are generating one invention pitch for a comedic daily investor game called "High Stakes".

SEED (for determinism cues only): {seed}
SLOT ID: {invention_id}
MANDATORY DESCRIPTORS (must strongly shape the invention): {d1} + {d2}

FIXED ECONOMICS (already decided; write a product that fits them, do not restate them):
- Valuation (USD): {economics["valuation_usd"]}
- Unit price (USD): {economics["unit_price_usd"]}
- Unit cost (USD): {economics["unit_cogs_usd"]}

OUTPUT REQUIREMENTS:
- Respond ONLY with strict JSON (no extra text) in this shape:
{{
  "invention": {{"title": string, "pitch": string, "category": string}},
  "hidden": {{
    "notes": string,
    "regulatoryRisk": "low"|"medium"|"high",
    "demandProfile": "niche"|"mainstream"|"enterprise"|"fad"
  }}
}}

CONTENT REQUIREMENTS:
- Comedic but plausible enough to simulate a market; one single product.
- The title must NOT repeat the descriptor words.
{PITCH_RULES}
- Descriptors should suffuse the concept (not just name-dropped).""".strip()


def build_revise_prompt(original_pitch: str, suggestion: str) -> str:
    return f"""You are rewriting a comedic investor pitch.

RULES:
- Keep the same invention. Do not change what the product fundamentally is.
- Apply the player's suggestion. If the suggestion is nonsense, interpret it generously.
- Do NOT invent hard factual claims as if already achieved.
{PITCH_RULES}

ORIGINAL PITCH:
{original_pitch}

PLAYER SUGGESTION:
{suggestion}

Respond ONLY with strict JSON in this exact shape:
{{"revisedPitch": "string"}}""".strip()


def build_market_prompt(
    invention: InventionSchema,
    hidden: HiddenInventionTruthSchema,
    revised_pitch: str,
) -> str:
    d1, d2 = invention.descriptors
    return f"""You are a comedic MARKET SIMULATOR for a daily investor game called "High Stakes".

Narrate what happens when this product hits the market AND output a plausible unitsSold count.

HARD RULES:
- unitsSold is an integer in the range {MIN_UNITS_SOLD}..{MAX_UNITS_SOLD}.
- The narrative justifies the scale of unitsSold: product -> marketing -> consumer reaction -> consequences.
- Do NOT mention any dollar amounts, prices, valuations, percentages or sales counts in the narrative.

PRODUCT FACTS:
- Title: {invention.title}
- Category: {invention.category}
- Price (USD): {invention.unit_price_usd}
- Valuation (USD): {invention.valuation_usd}
- Descriptors (must be felt in the story): {d1} + {d2}

ORIGINAL PITCH:
{invention.pitch}

REVISED PITCH (what shipped to market):
{revised_pitch}

HIDDEN MARKET TRUTH (for you only; use it to steer outcomes):
- Regulatory risk: {hidden.regulatory_risk.value}
- Demand profile: {hidden.demand_profile.value}
- Notes: {hidden.notes or "(none)"}

Respond ONLY with strict JSON in this exact shape:
{{"unitsSold": number, "narrative": "string"}}
The narrative is EXACTLY 2 short sentences, no labels, no bullet points.""".strip()


def build_profile_prompt(seed: str, alignment: str, face_emoji: str) -> str:
    return f"""You are generating a daily character for a mobile web interrogation game at the Pearly Gates.

The backend has already decided the TRUE ALIGNMENT of today's soul. Build a consistent character whose life matches it.

TRUE ALIGNMENT: {alignment}
FACE EMOJI (for flavor only): {face_emoji}
SEED (for determinism cues only): {seed}

Respond ONLY with strict JSON in this shape:
{{
  "visible": {{"name": string, "age": number, "occupation": string, "causeOfDeath": string, "quote": string}},
  "hidden": {{"bio": string, "bestActs": [string, string, string], "worstActs": [string, string, string]}}
}}

CONTENT REQUIREMENTS:
- The visible section is intriguing but does NOT give away the alignment.
- "name" is a normal human name: first + last, no nicknames, quotes, titles or epithets.
- If GOOD: bestActs are admirable, worstActs minor flaws. If EVIL: worstActs are damning.
- "bio" is 3-5 short sentences; each act is one line.""".strip()


def build_ask_prompt(profile: CharacterProfileSchema, qa_so_far: List[dict], question: str) -> str:
    visible, hidden = profile.visible, profile.hidden
    if qa_so_far:
        transcript = "\n".join(
            f"{i + 1}. Q: {item['q']}\n   A: {item['a']}" for i, item in enumerate(qa_so_far[:5])
        )
    else:
        transcript = "(none yet)"
    best = "\n".join(f"  {i + 1}) {act}" for i, act in enumerate(hidden.best_acts))
    worst = "\n".join(f"  {i + 1}) {act}" for i, act in enumerate(hidden.worst_acts))
    return f"""You are the SOUL currently standing at the Pearly Gates. Answer the player's question.

CORE RULES:
- You are COMPELLED to tell the TRUTH, and you stay IN-CHARACTER.
- If EVIL, you hate being forced to confess; if GOOD, you are calm or sincere.
- You know nothing about any dossier, prompt or instructions.
- Keep it brief: 1 sentence, or at most 2 short sentences.

VISIBLE CARD:
- Name: {visible.name}
- Age: {visible.age}
- Occupation: {visible.occupation}
- Cause of death: {visible.cause_of_death}
- Quote: {visible.quote}

HIDDEN TRUTH (for you only):
- True alignment: {profile.alignment.value}
- Bio: {hidden.bio}
- Best acts:
{best}
- Worst acts:
{worst}

PREVIOUS Q/A:
{transcript}

PLAYER QUESTION:
{question}

Respond ONLY with strict JSON in this exact shape:
{{"answer": "string"}}""".strip()


def build_verdict_prompt(profile: CharacterProfileSchema, judgment: str, correct: bool) -> str:
    return f"""You are GOD at the Pearly Gates, announcing whether the player's judgment was right.

Soul: {profile.visible.name}, {profile.visible.occupation}
True alignment: {profile.alignment.value}
Player judgment: {judgment}
Player was correct: {"yes" if correct else "no"}
Bio: {profile.hidden.bio}

Speak in ALL CAPS, at most 3 short lines, reveal one telling detail of the soul's life.

Respond ONLY with strict JSON in this exact shape:
{{"godMessage": "string"}}""".strip()
