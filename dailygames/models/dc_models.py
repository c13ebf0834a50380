"""Request and response bodies exchanged with the client (camelCase on the wire)."""

from typing import List, Optional, Tuple

from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    class Config:
        alias_generator = to_camel
        populate_by_name = True
        from_attributes = True


class QAItemModel(CamelModel):
    q: str
    a: str
    from_: str = Field("SOUL", alias="from")


class StartRequestModel(CamelModel):
    mode: Optional[str] = None
    date_key: Optional[str] = None  # required for daily


class ReviseRequestModel(CamelModel):
    mode: Optional[str] = None
    game_id: Optional[str] = None
    date_key: Optional[str] = None
    invention_id: Optional[str] = None
    suggestion: Optional[str] = None


class SimulateRequestModel(CamelModel):
    mode: Optional[str] = None
    game_id: Optional[str] = None
    date_key: Optional[str] = None
    invention_id: Optional[str] = None
    revised_pitch: Optional[str] = None
    invested_usd: Optional[float] = None
    bankroll_usd: Optional[float] = None  # caps the investment when the client sends it


class AskRequestModel(CamelModel):
    mode: Optional[str] = None
    game_id: Optional[str] = None
    date_key: Optional[str] = None
    question: Optional[str] = None
    qa_so_far: List[QAItemModel] = []


class JudgeRequestModel(CamelModel):
    mode: Optional[str] = None
    game_id: Optional[str] = None
    date_key: Optional[str] = None
    judgment: Optional[str] = None


class InventionModel(CamelModel):
    id: str
    title: str
    pitch: str
    category: str
    descriptors: Tuple[str, str]
    valuation_usd: int
    unit_price_usd: int
    unit_cogs_usd: int
    image_url: Optional[str] = None


class InvestStartResponseModel(CamelModel):
    mode: str
    date_key: str
    game_id: str
    inventions: List[InventionModel]


class ReviseResponseModel(CamelModel):
    revised_pitch: str


class SimulateResponseModel(CamelModel):
    units_sold: int
    gross_revenue_usd: int
    ownership_share: float
    payout_usd: int
    narrative: str


class VisibleProfileModel(CamelModel):
    case_number: int
    name: str
    age: int
    occupation: str
    cause_of_death: str
    quote: str = ""


class GatesStartResponseModel(CamelModel):
    mode: str
    date_key: str
    game_id: str
    visible: VisibleProfileModel
    face_emoji: str


class AskResponseModel(CamelModel):
    answer: str = ""
    blocked: bool = False
    god_message: Optional[str] = None


class JudgeResponseModel(CamelModel):
    correct: bool
    god_message: str


class ErrorModel(BaseModel):
    error: str
