"""High Stakes use cases: start, revise and simulate.

- Routers should not touch the cache store directly; they call this module.
- This layer owns the read-through / write-once boundary of a slate.
- Validation runs before any store read or backend call.
"""

import logging
from typing import Awaitable, Callable, Optional, Tuple

from pydantic import ValidationError
from uuid6 import uuid7

from dailygames.cache_store import CacheStore
from dailygames.domain import invest_rules
from dailygames.domain.keys import (
    GameKind,
    GameMode,
    derive_key,
    resolve_action_key,
    ttl_for,
)
from dailygames.domain.sanitize import format_market_summary
from dailygames.domain.seeded_picker import normalize_choice, pick_distinct_from_pool
from dailygames.errors import InvalidArgument, NotFound, StoreFailure
from dailygames.models.dc_models import SimulateResponseModel
from dailygames.models.schema_models import InventionSchema, InvestSlateSchema
from dailygames.services.content_generator import ContentGenerator
from dailygames.single_flight import SingleFlight

# (seed, game_id, invention) -> public image URL, or None
ImageBackfill = Callable[[str, str, InventionSchema], Awaitable[Optional[str]]]

DEFAULT_DESCRIPTORS = ("consumer annoyance", "bureaucratic form")


class InvestService:
    def __init__(
        self,
        cache_store: CacheStore,
        generator: ContentGenerator,
        single_flight: Optional[SingleFlight] = None,
        image_backfill: Optional[ImageBackfill] = None,
    ):
        self.cache_store = cache_store
        self.generator = generator
        self.single_flight = single_flight or SingleFlight()
        self.image_backfill = image_backfill

    def new_game_id(self) -> str:
        return str(uuid7())

    async def start(self, mode: GameMode, date_key: Optional[str]) -> Tuple[InvestSlateSchema, str]:
        """Return the slate for today (daily) or a fresh random slate.

        Args:
            mode (GameMode): Daily or debug-random
            date_key (Optional[str]): Calendar key, required in daily mode

        Raises:
            InvalidArgument: Daily mode without a date key
            StoreFailure: The cache backend could not be read or written

        Returns:
            Tuple[InvestSlateSchema, str]: The slate and the date key echoed to the client
        """
        if mode == GameMode.daily and not (date_key or "").strip():
            raise InvalidArgument("Missing dateKey for daily mode")
        date_key = (date_key or "debug").strip()
        game_id = date_key if mode == GameMode.daily else self.new_game_id()
        key = derive_key(GameKind.invest, mode, game_id, date_key)

        slate = await self.single_flight.run(
            key, lambda: self._read_or_generate(key, mode, date_key, game_id)
        )
        return slate, date_key

    async def revise(
        self,
        mode: GameMode,
        game_id: Optional[str],
        date_key: Optional[str],
        invention_id: Optional[str],
        suggestion: Optional[str],
    ) -> str:
        key = resolve_action_key(GameKind.invest, mode, game_id, date_key)
        self._check_invention_id(invention_id)
        suggestion = (suggestion or "").strip()
        if not suggestion:
            raise InvalidArgument("Missing suggestion")
        if len(suggestion) > invest_rules.MAX_SUGGESTION_CHARS:
            raise InvalidArgument("Suggestion too long")

        slate = await self._require_slate(key)
        invention = self._require_invention(slate, invention_id)
        result = await self.generator.revise_pitch(invention.pitch, suggestion)
        return result.value

    async def simulate(
        self,
        mode: GameMode,
        game_id: Optional[str],
        date_key: Optional[str],
        invention_id: Optional[str],
        revised_pitch: Optional[str],
        invested_usd,
        available_funds: Optional[float] = None,
    ) -> SimulateResponseModel:
        """Simulate the market for the player's pick and settle the payout.

        Units sold come from the backend and are clamped before any math; the
        narrative never carries numbers of its own.
        """
        key = resolve_action_key(GameKind.invest, mode, game_id, date_key)
        self._check_invention_id(invention_id)
        revised_pitch = (revised_pitch or "").strip()
        if not revised_pitch:
            raise InvalidArgument("Missing revisedPitch")
        # rejects non-numeric and non-positive requests before the store read
        invest_rules.resolve_investment(invested_usd, invest_rules.VALUATION_MAX_USD)

        slate = await self._require_slate(key)
        invention = self._require_invention(slate, invention_id)
        invested = invest_rules.resolve_investment(
            invested_usd,
            invention.valuation_usd,
            invest_rules.MAX_INVEST_FRACTION_OF_VALUATION,
            available_funds,
        )
        share = invest_rules.ownership_share(invested, invention.valuation_usd)

        result = await self.generator.simulate_market(
            invention, slate.hidden[invention.id], revised_pitch
        )
        units_sold = invest_rules.clamp_units_sold(result.value.raw_units_sold)
        gross_revenue_usd = invest_rules.gross_revenue(units_sold, invention.unit_price_usd)
        payout_usd = invest_rules.payout(gross_revenue_usd, share)
        logging.info(
            f"Simulated {key}/{invention.id}: invested={invested} units={units_sold} payout={payout_usd}"
        )
        return SimulateResponseModel(
            units_sold=units_sold,
            gross_revenue_usd=gross_revenue_usd,
            ownership_share=share,
            payout_usd=payout_usd,
            narrative=format_market_summary(
                result.value.narrative,
                units_sold,
                invention.unit_price_usd,
                gross_revenue_usd,
                payout_usd,
            ),
        )

    async def _read_or_generate(
        self, key: str, mode: GameMode, date_key: str, game_id: str
    ) -> InvestSlateSchema:
        existing = await self._read_slate(key)
        if existing is not None:
            return await self._backfill_cached_images(key, mode, existing)

        logging.info(f"No cached slate for {key}: generating")
        slate = await self._generate_slate(mode, date_key, game_id)
        await self.cache_store.set_json(key, slate.model_dump(mode="json"), ttl_for(mode))
        return slate

    async def _generate_slate(self, mode: GameMode, date_key: str, game_id: str) -> InvestSlateSchema:
        seed = date_key if mode == GameMode.daily else game_id
        avoid = set()
        inventions = []
        hidden = {}
        for invention_id in invest_rules.INVENTION_IDS:
            item_seed = f"{seed}:{invention_id}"
            descriptors = pick_distinct_from_pool(item_seed, 2, avoid)
            avoid.update(normalize_choice(d) for d in descriptors)
            descriptors = (
                descriptors[0] if len(descriptors) > 0 else DEFAULT_DESCRIPTORS[0],
                descriptors[1] if len(descriptors) > 1 else DEFAULT_DESCRIPTORS[1],
            )

            result = await self.generator.generate_invention(
                item_seed, invention_id, descriptors, invest_rules.pick_economics(item_seed)
            )
            if result.is_fallback:
                logging.warning(f"Invention {item_seed} uses fallback content ({result.reason})")
            invention = result.value.invention
            invention.image_url = await self._try_image(item_seed, game_id, invention)
            inventions.append(invention)
            hidden[invention_id] = result.value.hidden

        return InvestSlateSchema(
            mode=mode,
            date_key=date_key if mode == GameMode.daily else None,
            game_id=game_id,
            inventions=inventions,
            hidden=hidden,
        )

    async def _backfill_cached_images(
        self, key: str, mode: GameMode, slate: InvestSlateSchema
    ) -> InvestSlateSchema:
        """Attach missing images to a cached slate; text and numbers are never touched."""
        if self.image_backfill is None:
            return slate
        seed = slate.date_key if mode == GameMode.daily and slate.date_key else slate.game_id
        changed = False
        for invention in slate.inventions:
            if invention.image_url:
                continue
            image_url = await self._try_image(f"{seed}:{invention.id}", slate.game_id, invention)
            if image_url:
                invention.image_url = image_url
                changed = True
        if changed:
            try:
                await self.cache_store.set_json(key, slate.model_dump(mode="json"), ttl_for(mode))
            except StoreFailure as e:
                logging.warning(f"Image backfill for {key} not persisted: {e.message}")
        return slate

    async def _try_image(self, seed: str, game_id: str, invention: InventionSchema) -> Optional[str]:
        if self.image_backfill is None:
            return None
        try:
            return await self.image_backfill(seed, game_id, invention)
        except Exception as e:
            logging.warning(f"Invention image generation failed for {seed}: {e!r}")
            return None

    async def _read_slate(self, key: str) -> Optional[InvestSlateSchema]:
        data = await self.cache_store.get_json(key)
        if data is None:
            return None
        try:
            slate = InvestSlateSchema.model_validate(data)
        except ValidationError as e:
            logging.warning(f"Cached slate {key} is malformed: {e}")
            return None
        if len(slate.inventions) != invest_rules.INVENTIONS_PER_DAY:
            logging.warning(f"Cached slate {key} has {len(slate.inventions)} inventions")
            return None
        return slate

    async def _require_slate(self, key: str) -> InvestSlateSchema:
        slate = await self._read_slate(key)
        if slate is None:
            raise NotFound("Game not found")
        return slate

    @staticmethod
    def _check_invention_id(invention_id: Optional[str]) -> None:
        if invention_id not in invest_rules.INVENTION_IDS:
            raise InvalidArgument("Missing inventionId")

    @staticmethod
    def _require_invention(slate: InvestSlateSchema, invention_id: str) -> InventionSchema:
        invention = slate.find_invention(invention_id)
        if invention is None or invention.id not in slate.hidden:
            raise NotFound("Invention not found")
        return invention
