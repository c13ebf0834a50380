import logging
from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from dailygames.cache_store import CacheStore, RedisCacheStore, build_cache_store
from dailygames.errors import GameError
from dailygames.llm_client import OpenAITextGenerator, TextGenerator
from dailygames.load_secrets import (
    kv_token,
    kv_url,
    log_level,
    openai_api_key,
    openai_base_url,
    openai_model_id,
)
from dailygames.models.dc_models import ErrorModel
from dailygames.routers import game, invest
from dailygames.services.content_generator import ContentGenerator
from dailygames.services.gates_service import GatesService
from dailygames.services.invest_service import InvestService
from dailygames.single_flight import SingleFlight

logging.basicConfig(level=log_level)


def create_app(
    cache_store: Optional[CacheStore] = None,
    text_generator: Optional[TextGenerator] = None,
) -> FastAPI:
    """Build the application; collaborators default to the configured backends."""

    @asynccontextmanager
    async def lifespan(app):
        """Wire the cache store, the generator and both game services.
        This function is called to start the server.
        """
        store = cache_store or build_cache_store(kv_url, kv_token)
        generator = ContentGenerator(
            text_generator or OpenAITextGenerator(openai_api_key, openai_model_id, openai_base_url)
        )
        single_flight = SingleFlight()
        app.state.cache_store = store
        app.state.invest_service = InvestService(store, generator, single_flight)
        app.state.gates_service = GatesService(store, generator, single_flight)
        try:
            yield
        finally:
            if cache_store is None and isinstance(store, RedisCacheStore):
                await store.close()
            logging.info("Stop Server")

    app = FastAPI(lifespan=lifespan)
    app.include_router(invest.invest_router)
    app.include_router(game.game_router)

    @app.exception_handler(GameError)
    async def handle_game_error(request: Request, exc: GameError):
        logging.info(f"{request.url.path} -> {exc.status_code}: {exc.message}")
        return JSONResponse(status_code=exc.status_code, content=ErrorModel(error=exc.message).model_dump())

    @app.exception_handler(RequestValidationError)
    async def handle_validation_error(request: Request, exc: RequestValidationError):
        logging.info(f"{request.url.path} -> 400: {exc.errors()}")
        return JSONResponse(status_code=400, content=ErrorModel(error="Invalid request").model_dump())

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        logging.exception(f"Unhandled error in {request.url.path}: {exc}")
        return JSONResponse(status_code=500, content=ErrorModel(error="Something went wrong. Try again.").model_dump())

    @app.get("/health")
    async def health():
        return {"status": "ok"}

    return app


app = create_app()


if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=8080)
