"""FastAPI application for the chat API."""

import asyncio
import contextlib
import logging
import time
from collections.abc import Callable
from contextlib import asynccontextmanager
from pathlib import Path

from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    datefmt="%H:%M:%S",
)

load_dotenv()

from chat.completions import CompletionClient, GenerationConfig
from chat.config import Settings, get_settings
from chat.errors import ChatError
from chat.session_store import SessionStore, SessionSweeper
from chat.token_tracker import TokenTracker, tracker as default_tracker
from chat.turns import TurnProcessor

from .routes import RateLimiter, router

logger = logging.getLogger(__name__)

# Serve the static frontend when one is present
_frontend_dir = Path(__file__).resolve().parent.parent / "public"


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = app.state.settings
    logger.info("Model: %s", app.state.processor.config.model)
    if settings.api_key_configured:
        logger.info("API key configured")
    else:
        logger.warning("OpenAI API key not configured! Add OPENAI_API_KEY to your .env file")

    sweep_task = asyncio.create_task(app.state.sweeper.run())
    logger.info(
        "Ready — sessions expire after %.0fs, swept every %.0fs.",
        app.state.sweeper.max_age, app.state.sweeper.interval,
    )
    yield
    sweep_task.cancel()
    with contextlib.suppress(asyncio.CancelledError):
        await sweep_task


async def chat_error_handler(request: Request, exc: ChatError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


def create_app(
    settings: Settings | None = None,
    completion_client: CompletionClient | None = None,
    clock: Callable[[], float] = time.time,
    token_tracker: TokenTracker | None = None,
) -> FastAPI:
    settings = settings or get_settings()
    token_tracker = token_tracker or default_tracker
    completion_client = completion_client or CompletionClient.from_settings(
        settings, token_tracker=token_tracker
    )

    store = SessionStore(clock=clock)

    app = FastAPI(title="Chat API", lifespan=lifespan)
    app.state.settings = settings
    app.state.store = store
    app.state.tracker = token_tracker
    app.state.processor = TurnProcessor(
        store, completion_client, GenerationConfig(model=settings.openai_model)
    )
    app.state.sweeper = SessionSweeper(
        store,
        max_age=settings.session_max_age_seconds,
        interval=settings.session_sweep_interval_seconds,
    )
    app.state.rate_limiter = RateLimiter(settings.rate_limit_per_minute)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(ChatError, chat_error_handler)
    app.include_router(router)

    if _frontend_dir.is_dir():
        app.mount("/", StaticFiles(directory=_frontend_dir, html=True), name="frontend")

    return app


app = create_app()
