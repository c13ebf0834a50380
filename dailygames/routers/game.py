import logging

from fastapi import APIRouter, Depends, Request

from dailygames.converter import DataConverter
from dailygames.domain.keys import coerce_mode
from dailygames.models.dc_models import (
    AskRequestModel,
    AskResponseModel,
    GatesStartResponseModel,
    JudgeRequestModel,
    JudgeResponseModel,
    StartRequestModel,
)
from dailygames.services.gates_service import GatesService

game_router = APIRouter(prefix="/api/game")
data_converter = DataConverter()


def get_gates_service(request: Request) -> GatesService:
    return request.app.state.gates_service


class GameAPI:
    @staticmethod
    @game_router.post("/start", response_model=GatesStartResponseModel)
    async def start(body: StartRequestModel, service: GatesService = Depends(get_gates_service)):
        mode = coerce_mode(body.mode)
        profile, date_key = await service.start(mode, body.date_key)
        logging.info(f"Soul served: mode={mode.value} game_id={profile.game_id}")
        return data_converter.convert_profile_to_start_response(profile, date_key)

    @staticmethod
    @game_router.post("/ask", response_model=AskResponseModel)
    async def ask(body: AskRequestModel, service: GatesService = Depends(get_gates_service)):
        return await service.ask(
            coerce_mode(body.mode),
            body.game_id,
            body.date_key,
            body.question,
            body.qa_so_far,
        )

    @staticmethod
    @game_router.post("/judge", response_model=JudgeResponseModel)
    async def judge(body: JudgeRequestModel, service: GatesService = Depends(get_gates_service)):
        return await service.judge(
            coerce_mode(body.mode),
            body.game_id,
            body.date_key,
            body.judgment,
        )
