"""Pearly Gates use cases: start, ask and judge."""

import logging
from typing import List, Optional, Tuple

from pydantic import ValidationError
from uuid6 import uuid7

from dailygames.cache_store import CacheStore
from dailygames.domain.gates_rules import (
    MAX_QUESTION_CHARS,
    MAX_QUESTIONS,
    Judgment,
    god_obvious_question_warning,
    is_correct_judgment,
    is_obvious_alignment_question,
    pick_alignment,
)
from dailygames.domain.keys import (
    GameKind,
    GameMode,
    derive_key,
    resolve_action_key,
    ttl_for,
)
from dailygames.domain.sanitize import sanitize_name
from dailygames.domain.seeded_picker import case_number_from_seed, pick_face_emoji
from dailygames.errors import InvalidArgument, NotFound
from dailygames.models.dc_models import AskResponseModel, JudgeResponseModel, QAItemModel
from dailygames.models.schema_models import CharacterProfileSchema
from dailygames.services.content_generator import ContentGenerator
from dailygames.single_flight import SingleFlight


class GatesService:
    def __init__(
        self,
        cache_store: CacheStore,
        generator: ContentGenerator,
        single_flight: Optional[SingleFlight] = None,
    ):
        self.cache_store = cache_store
        self.generator = generator
        self.single_flight = single_flight or SingleFlight()

    def new_game_id(self) -> str:
        return str(uuid7())

    async def start(self, mode: GameMode, date_key: Optional[str]) -> Tuple[CharacterProfileSchema, str]:
        if mode == GameMode.daily and not (date_key or "").strip():
            raise InvalidArgument("Missing dateKey for daily mode")
        date_key = (date_key or "debug").strip()
        game_id = date_key if mode == GameMode.daily else self.new_game_id()
        key = derive_key(GameKind.gates, mode, game_id, date_key)

        profile = await self.single_flight.run(
            key, lambda: self._read_or_generate(key, mode, date_key, game_id)
        )
        return profile, date_key

    async def ask(
        self,
        mode: GameMode,
        game_id: Optional[str],
        date_key: Optional[str],
        question: Optional[str],
        qa_so_far: List[QAItemModel],
    ) -> AskResponseModel:
        """Answer one interrogation question in character.

        Direct "are you good or evil" questions are refused by god without
        reaching the backend. Only the soul's previous answers count toward
        the question limit.
        """
        question = (question or "").strip()
        if not question:
            raise InvalidArgument("Missing question")
        if len(question) > MAX_QUESTION_CHARS:
            raise InvalidArgument("Question too long")
        soul_answers = [item for item in qa_so_far if item.from_ == "SOUL"]
        if len(soul_answers) >= MAX_QUESTIONS:
            raise InvalidArgument("No questions remaining")
        key = resolve_action_key(GameKind.gates, mode, game_id, date_key)

        if is_obvious_alignment_question(question):
            logging.info(f"Blocked obvious alignment question for {key}")
            return AskResponseModel(blocked=True, god_message=god_obvious_question_warning())

        profile = await self._require_profile(key)
        result = await self.generator.answer_question(
            profile, [{"q": item.q, "a": item.a} for item in soul_answers], question
        )
        return AskResponseModel(answer=result.value)

    async def judge(
        self,
        mode: GameMode,
        game_id: Optional[str],
        date_key: Optional[str],
        judgment: Optional[str],
    ) -> JudgeResponseModel:
        if judgment not in (Judgment.heaven.value, Judgment.hell.value):
            raise InvalidArgument("Missing judgment")
        key = resolve_action_key(GameKind.gates, mode, game_id, date_key)

        profile = await self._require_profile(key)
        verdict = Judgment(judgment)
        correct = is_correct_judgment(verdict, profile.alignment)
        result = await self.generator.render_verdict(profile, verdict, correct)
        return JudgeResponseModel(correct=correct, god_message=result.value)

    async def _read_or_generate(
        self, key: str, mode: GameMode, date_key: str, game_id: str
    ) -> CharacterProfileSchema:
        seed = date_key if mode == GameMode.daily else game_id
        existing = await self._read_profile(key)
        if existing is not None:
            return await self._repair_cached(key, mode, seed, existing)

        logging.info(f"No cached profile for {key}: generating")
        alignment = pick_alignment(f"{seed}:alignment")
        face_emoji = pick_face_emoji(f"{seed}:face")
        result = await self.generator.generate_profile(
            seed, alignment, face_emoji, case_number_from_seed(seed)
        )
        if result.is_fallback:
            logging.warning(f"Profile {seed} uses fallback content ({result.reason})")

        profile = CharacterProfileSchema(
            mode=mode,
            date_key=date_key if mode == GameMode.daily else None,
            game_id=game_id,
            alignment=alignment,
            face_emoji=face_emoji,
            visible=result.value.visible,
            hidden=result.value.hidden,
        )
        await self.cache_store.set_json(key, profile.model_dump(mode="json"), ttl_for(mode))
        return profile

    async def _repair_cached(
        self, key: str, mode: GameMode, seed: str, profile: CharacterProfileSchema
    ) -> CharacterProfileSchema:
        """Bring older cached profiles up to date (case number, nickname-free name)."""
        updates = {}
        if not 1000 <= profile.visible.case_number <= 9999:
            updates["case_number"] = case_number_from_seed(seed)
        name = sanitize_name(profile.visible.name)
        if name != profile.visible.name:
            updates["name"] = name
        if not updates:
            return profile

        repaired = profile.model_copy(update={"visible": profile.visible.model_copy(update=updates)})
        await self.cache_store.set_json(key, repaired.model_dump(mode="json"), ttl_for(mode))
        return repaired

    async def _read_profile(self, key: str) -> Optional[CharacterProfileSchema]:
        data = await self.cache_store.get_json(key)
        if data is None:
            return None
        try:
            return CharacterProfileSchema.model_validate(data)
        except ValidationError as e:
            logging.warning(f"Cached profile {key} is malformed: {e}")
            return None

    async def _require_profile(self, key: str) -> CharacterProfileSchema:
        profile = await self._read_profile(key)
        if profile is None:
            raise NotFound("Game not found")
        return profile
