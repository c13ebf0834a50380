import logging

from fastapi import APIRouter, Depends, Request

from dailygames.converter import DataConverter
from dailygames.domain.keys import coerce_mode
from dailygames.models.dc_models import (
    InvestStartResponseModel,
    ReviseRequestModel,
    ReviseResponseModel,
    SimulateRequestModel,
    SimulateResponseModel,
    StartRequestModel,
)
from dailygames.services.invest_service import InvestService

invest_router = APIRouter(prefix="/api/invest")
data_converter = DataConverter()


def get_invest_service(request: Request) -> InvestService:
    return request.app.state.invest_service


class InvestAPI:
    @staticmethod
    @invest_router.post("/start", response_model=InvestStartResponseModel)
    async def start(body: StartRequestModel, service: InvestService = Depends(get_invest_service)):
        mode = coerce_mode(body.mode)
        slate, date_key = await service.start(mode, body.date_key)
        logging.info(f"Invest slate served: mode={mode.value} game_id={slate.game_id}")
        return data_converter.convert_slate_to_start_response(slate, date_key)

    @staticmethod
    @invest_router.post("/revise", response_model=ReviseResponseModel)
    async def revise(body: ReviseRequestModel, service: InvestService = Depends(get_invest_service)):
        revised_pitch = await service.revise(
            coerce_mode(body.mode),
            body.game_id,
            body.date_key,
            body.invention_id,
            body.suggestion,
        )
        return ReviseResponseModel(revised_pitch=revised_pitch)

    @staticmethod
    @invest_router.post("/simulate", response_model=SimulateResponseModel)
    async def simulate(body: SimulateRequestModel, service: InvestService = Depends(get_invest_service)):
        return await service.simulate(
            coerce_mode(body.mode),
            body.game_id,
            body.date_key,
            body.invention_id,
            body.revised_pitch,
            body.invested_usd,
            body.bankroll_usd,
        )
