"""Records written to the cache store."""

from enum import Enum
from typing import Dict, List, Optional, Tuple

from pydantic import BaseModel

from dailygames.domain.gates_rules import Alignment
from dailygames.domain.keys import GameMode


class RegulatoryRisk(str, Enum):
    low = "low"
    medium = "medium"
    high = "high"


class DemandProfile(str, Enum):
    niche = "niche"
    mainstream = "mainstream"
    enterprise = "enterprise"
    fad = "fad"


class InventionSchema(BaseModel):
    id: str
    title: str
    pitch: str
    category: str
    descriptors: Tuple[str, str]
    valuation_usd: int
    unit_price_usd: int
    unit_cogs_usd: int  # narrative grounding only, not used for payout
    image_url: Optional[str] = None


class HiddenInventionTruthSchema(BaseModel):
    notes: str = ""
    regulatory_risk: RegulatoryRisk = RegulatoryRisk.low
    demand_profile: DemandProfile = DemandProfile.niche


class InvestSlateSchema(BaseModel):
    version: int = 1
    mode: GameMode
    date_key: Optional[str] = None  # daily only
    game_id: str  # daily: equals date_key; random: uuid
    inventions: List[InventionSchema]
    hidden: Dict[str, HiddenInventionTruthSchema]

    def find_invention(self, invention_id: str) -> InventionSchema | None:
        for invention in self.inventions:
            if invention.id == invention_id:
                return invention
        return None


class VisibleProfileSchema(BaseModel):
    case_number: int
    name: str
    age: int
    occupation: str
    cause_of_death: str
    quote: str = ""


class HiddenProfileSchema(BaseModel):
    bio: str
    best_acts: Tuple[str, str, str]
    worst_acts: Tuple[str, str, str]


class CharacterProfileSchema(BaseModel):
    version: int = 1
    mode: GameMode
    date_key: Optional[str] = None
    game_id: str
    alignment: Alignment
    face_emoji: str
    visible: VisibleProfileSchema
    hidden: HiddenProfileSchema


class BankrollState(BaseModel):
    """Client-held bankroll; the server only provides the rules that update it."""

    version: int = 1
    bankroll_usd: float
    last_seen_date_key: Optional[str] = None
