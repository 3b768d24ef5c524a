"""
Deck Log network client.

Deck Log has no public API. Requests go through a small proxy service that
exposes two JSON endpoints:

- POST /view-deck     {"game_title_id": 9, "code": "6adjr"} -> Deck Log deck
- POST /publish-deck  Deck Log deck -> {"deck_id": "6ADJR"}

When the proxy cannot satisfy a request it answers with an error text
instead of JSON; that text is surfaced to the user unchanged.

Publishing is tracked by DeckLogPublisher:

    DRAFT --publish ok--> SUBMITTED --view URL--> PUBLISHED
      ^                                              |
      +------------- failure (error kept) -----------+

There is no retry. Publishing the same deck content again for the same game
title returns the cached URL without a network call.
"""

import logging
from enum import Enum

import httpx
from pydantic import BaseModel, ValidationError

from hocgdeck.config import settings
from hocgdeck.formats.base import DeckFormatError, DeckParseError
from hocgdeck.formats.deck_log import (
    DEFAULT_GAME_TITLE_ID,
    GAME_TITLE_VIEW_URLS,
    DeckLogDeck,
    DeckLogError,
    parse_deck_log_url,
)
from hocgdeck.models.card import CardCatalog
from hocgdeck.models.deck import CanonicalDeck

logger = logging.getLogger(__name__)

USER_AGENT = "hocg-deck-convert/1.0"


class DeckLogRequestError(DeckLogError):
    """Raised when the proxy is unreachable or answers with something other than a deck."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        self.message = message
        self.status_code = status_code
        super().__init__(message)


class ViewDeckRequest(BaseModel):
    game_title_id: int | None = None
    code: str


class PublishDeckResponse(BaseModel):
    deck_id: str


class DeckLogClient:
    """
    Async client for the Deck Log proxy.

    Pass an httpx.AsyncClient to reuse connections; otherwise a client is
    opened per request.
    """

    def __init__(
        self,
        base_url: str | None = None,
        client: httpx.AsyncClient | None = None,
        timeout: float | None = None,
    ) -> None:
        self._base_url = (base_url or settings.deck_log_api_url).rstrip("/")
        self._client = client
        self._timeout = settings.http_timeout if timeout is None else timeout

    async def _post(self, path: str, content: bytes) -> bytes:
        url = f"{self._base_url}{path}"
        logger.info("Deck Log request: POST %s", url)
        if self._client is not None:
            return await self._send(self._client, url, content)
        async with httpx.AsyncClient(timeout=self._timeout) as client:
            return await self._send(client, url, content)

    @staticmethod
    async def _send(client: httpx.AsyncClient, url: str, content: bytes) -> bytes:
        try:
            response = await client.post(
                url,
                content=content,
                headers={"Content-Type": "application/json", "User-Agent": USER_AGENT},
            )
        except httpx.HTTPError as e:
            raise DeckLogRequestError(f"Deck Log request failed: {e}") from e

        if response.is_error:
            message = response.text.strip() or f"Deck Log returned HTTP {response.status_code}"
            raise DeckLogRequestError(message, status_code=response.status_code)
        return response.content

    async def view_deck(self, game_title_id: int | None, code: str) -> DeckLogDeck:
        """
        Fetch a published deck.

        Raises:
            DeckLogRequestError: If the request fails or the answer is not a deck
        """
        request = ViewDeckRequest(game_title_id=game_title_id, code=code)
        content = await self._post("/view-deck", request.model_dump_json().encode("utf-8"))
        try:
            return DeckLogDeck.parse(content)
        except DeckParseError as e:
            # The proxy reports failures as plain text
            raise DeckLogRequestError(content.decode("utf-8", errors="replace")) from e

    async def fetch_deck(self, url_or_code: str) -> DeckLogDeck:
        """
        Fetch a deck from a Deck Log URL or bare code.

        Raises:
            InvalidDeckCodeError: If the URL or code is malformed (no request is made)
            DeckLogRequestError: If the request fails
        """
        game_title_id, code = parse_deck_log_url(url_or_code)
        return await self.view_deck(game_title_id, code)

    async def publish_deck(self, deck: DeckLogDeck) -> str:
        """
        Publish a deck and return its Deck Log code.

        Raises:
            DeckLogRequestError: If the request fails or no deck_id comes back
        """
        content = await self._post("/publish-deck", deck.serialize())
        try:
            return PublishDeckResponse.model_validate_json(content).deck_id
        except ValidationError as e:
            raise DeckLogRequestError(content.decode("utf-8", errors="replace")) from e


class PublishState(str, Enum):
    """Where a deck is in the publish flow."""

    DRAFT = "draft"
    SUBMITTED = "submitted"
    PUBLISHED = "published"


class DeckLogPublisher:
    """
    Publishes canonical decks to Deck Log and remembers the resulting URLs.

    The URL cache is keyed on (game_title_id, deck content hash). The hash is
    taken before merging, so reordering lines publishes again.
    """

    def __init__(self, client: DeckLogClient | None = None) -> None:
        self._client = client or DeckLogClient()
        self._cache: dict[tuple[int, str], str] = {}
        self.state = PublishState.DRAFT
        self.url: str | None = None
        self.error: str | None = None

    def cached_url(
        self, deck: CanonicalDeck, game_title_id: int = DEFAULT_GAME_TITLE_ID
    ) -> str | None:
        """View URL from an earlier publish of the same deck content, if any."""
        return self._cache.get((game_title_id, deck.content_hash()))

    def reset(self) -> None:
        """Back to DRAFT, e.g. after the deck was edited."""
        self.state = PublishState.DRAFT
        self.url = None
        self.error = None

    async def publish(
        self,
        deck: CanonicalDeck,
        catalog: CardCatalog,
        game_title_id: int = DEFAULT_GAME_TITLE_ID,
    ) -> str:
        """
        Publish a deck and return its Deck Log view URL.

        Raises:
            DeckLogError: If the game title id has no Deck Log site
            ExportError: If the deck cannot be represented on Deck Log
            DeckLogRequestError: If the request fails
        """
        if game_title_id not in GAME_TITLE_VIEW_URLS:
            raise DeckLogError(f"Unknown Deck Log game title id: {game_title_id}")

        cached = self.cached_url(deck, game_title_id)
        if cached is not None:
            logger.debug("Deck already published: %s", cached)
            self.state = PublishState.PUBLISHED
            self.url = cached
            self.error = None
            return cached

        self.reset()
        try:
            payload = DeckLogDeck.from_canonical(deck, catalog, game_title_id=game_title_id)
            deck_id = await self._client.publish_deck(payload)
        except DeckFormatError as e:
            self.state = PublishState.DRAFT
            self.error = str(e)
            raise
        self.state = PublishState.SUBMITTED

        url = payload.model_copy(update={"deck_id": deck_id}).view_url()
        if url is None:
            self.state = PublishState.DRAFT
            self.error = "Deck Log did not return a deck code"
            raise DeckLogRequestError(self.error)

        self._cache[(game_title_id, deck.content_hash())] = url
        self.state = PublishState.PUBLISHED
        self.url = url
        logger.info("Published deck to %s", url)
        return url
