import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from importlib.metadata import version as pkg_version

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from hocgdeck.api import cards_router, decks_router, health_router
from hocgdeck.api.errors import register_error_handlers
from hocgdeck.config import settings
from hocgdeck.services.card_database import load_card_catalog
from hocgdeck.services.card_search import CardSearchEngine
from hocgdeck.services.deck_log_client import DeckLogClient, DeckLogPublisher
from hocgdeck.services.price_check import PriceChecker

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Load the card catalog and create the shared services."""
    try:
        catalog = load_card_catalog()
    except FileNotFoundError as e:
        # Serve /health and report not ready until a catalog is downloaded
        logger.warning("%s", e)
        app.state.catalog = None
        app.state.search_engine = None
    else:
        app.state.catalog = catalog
        app.state.search_engine = CardSearchEngine(catalog)

    app.state.deck_log_client = DeckLogClient()
    app.state.publisher = DeckLogPublisher(app.state.deck_log_client)
    app.state.price_checker = PriceChecker()
    yield


app = FastAPI(
    title=settings.app_name,
    version=pkg_version("hocg-deck-convert"),
    debug=settings.debug,
    lifespan=lifespan,
)

app.include_router(cards_router)
app.include_router(decks_router)
app.include_router(health_router)

register_error_handlers(app)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)
