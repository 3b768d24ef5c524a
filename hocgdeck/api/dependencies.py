"""
Shared FastAPI dependencies.

The catalog and the stateful services live on app.state; they are created
once by the application lifespan. Tests override these dependencies.
"""

from fastapi import Request, status

from hocgdeck.models.card import CardCatalog
from hocgdeck.models.failure import FailureKind, KnownError
from hocgdeck.services.card_search import CardSearchEngine
from hocgdeck.services.deck_log_client import DeckLogClient, DeckLogPublisher
from hocgdeck.services.price_check import PriceChecker


def get_catalog(request: Request) -> CardCatalog:
    """
    Loaded card catalog.

    Raises:
        KnownError: If no catalog was loaded at startup
    """
    catalog: CardCatalog | None = getattr(request.app.state, "catalog", None)
    if catalog is None:
        raise KnownError(
            kind=FailureKind.NOT_FOUND,
            message="Card catalog not available.",
            suggestion="Run `python -m hocgdeck.jobs.download_cards` and restart the service.",
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        )
    return catalog


def get_search_engine(request: Request) -> CardSearchEngine:
    engine: CardSearchEngine | None = getattr(request.app.state, "search_engine", None)
    if engine is None:
        engine = CardSearchEngine(get_catalog(request))
        request.app.state.search_engine = engine
    return engine


def get_deck_log_client(request: Request) -> DeckLogClient:
    client: DeckLogClient | None = getattr(request.app.state, "deck_log_client", None)
    if client is None:
        client = DeckLogClient()
        request.app.state.deck_log_client = client
    return client


def get_publisher(request: Request) -> DeckLogPublisher:
    publisher: DeckLogPublisher | None = getattr(request.app.state, "publisher", None)
    if publisher is None:
        publisher = DeckLogPublisher(get_deck_log_client(request))
        request.app.state.publisher = publisher
    return publisher


def get_price_checker(request: Request) -> PriceChecker:
    checker: PriceChecker | None = getattr(request.app.state, "price_checker", None)
    if checker is None:
        checker = PriceChecker()
        request.app.state.price_checker = checker
    return checker
