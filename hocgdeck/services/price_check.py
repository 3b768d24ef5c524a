"""
Shop price checks.

Prices are read through a proxy that scrapes the shop pages listed in the
catalog (one sell URL per printing):

- POST /price-check  {"urls": [...]} -> [{"url", "card_number", "price_yen"}, ...]

Like the Deck Log proxy, it answers with an error text instead of JSON when
it cannot read the prices; that text is surfaced to the user unchanged.

Every printing of every card number in the deck is checked, so the deck can
then be switched to the most or least expensive printings. Prices are cached
per printing and checked again once older than PRICE_CACHE_SECONDS. URLs the
proxy does not answer for keep their previous price.
"""

import logging
import time
from collections.abc import Callable, Mapping
from dataclasses import dataclass, replace
from enum import Enum

import httpx
from pydantic import BaseModel, NonNegativeInt, TypeAdapter, ValidationError

from hocgdeck.config import PRICE_CACHE_SECONDS, settings
from hocgdeck.models.card import CardCatalog, CatalogEntry
from hocgdeck.models.deck import CanonicalDeck, LineItem, merge_line_items
from hocgdeck.services.card_resolver import CardResolver
from hocgdeck.services.deck_log_client import USER_AGENT

logger = logging.getLogger(__name__)


class PriceCheckService(str, Enum):
    """Shops prices can be read from."""

    YUYUTEI = "yuyutei"

    def sell_url(self, entry: CatalogEntry) -> str | None:
        match self:
            case PriceCheckService.YUYUTEI:
                return entry.yuyutei_sell_url


class PriceCheckError(Exception):
    """Raised when the price proxy is unreachable or answers with something other than prices."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        self.message = message
        self.status_code = status_code
        super().__init__(message)


class PriceCheckRequest(BaseModel):
    urls: list[str]


class PriceCheckResult(BaseModel):
    url: str
    card_number: str
    price_yen: NonNegativeInt


_RESULTS_ADAPTER = TypeAdapter(list[PriceCheckResult])


class PriceCheckClient:
    """Async client for the price proxy."""

    def __init__(
        self,
        base_url: str | None = None,
        client: httpx.AsyncClient | None = None,
        timeout: float | None = None,
    ) -> None:
        self._base_url = (base_url or settings.price_check_api_url).rstrip("/")
        self._client = client
        self._timeout = settings.http_timeout if timeout is None else timeout

    async def _post(self, path: str, content: bytes) -> bytes:
        url = f"{self._base_url}{path}"
        logger.info("Price check request: POST %s", url)
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
            raise PriceCheckError(f"Price check request failed: {e}") from e

        if response.is_error:
            message = response.text.strip() or f"Price check returned HTTP {response.status_code}"
            raise PriceCheckError(message, status_code=response.status_code)
        return response.content

    async def check_prices(self, urls: list[str]) -> list[PriceCheckResult]:
        """
        Read the current price behind each shop URL.

        Raises:
            PriceCheckError: If the request fails or the answer is not a price list
        """
        request = PriceCheckRequest(urls=urls)
        content = await self._post("/price-check", request.model_dump_json().encode("utf-8"))
        try:
            return _RESULTS_ADAPTER.validate_json(content)
        except ValidationError as e:
            raise PriceCheckError(content.decode("utf-8", errors="replace")) from e


@dataclass(frozen=True, slots=True)
class CardPrice:
    price_yen: int
    checked_at: float


class PriceChecker:
    """
    Checks deck prices and remembers them per printing.

    One instance per app; the clock is injectable for tests.
    """

    def __init__(
        self,
        client: PriceCheckClient | None = None,
        clock: Callable[[], float] = time.monotonic,
        max_age: float = PRICE_CACHE_SECONDS,
    ) -> None:
        self._client = client or PriceCheckClient()
        self._clock = clock
        self._max_age = max_age
        self._prices: dict[int, CardPrice] = {}

    def price_of(self, manage_id: int) -> int | None:
        """Last known price of a printing, however old."""
        price = self._prices.get(manage_id)
        return price.price_yen if price else None

    def _is_stale(self, manage_id: int, now: float) -> bool:
        price = self._prices.get(manage_id)
        return price is None or now - price.checked_at > self._max_age

    async def check(
        self,
        deck: CanonicalDeck,
        catalog: CardCatalog,
        service: PriceCheckService = PriceCheckService.YUYUTEI,
    ) -> dict[int, int]:
        """
        Refresh stale prices for every printing of the deck's cards.

        Returns:
            Known prices by manage_id for those printings

        Raises:
            PriceCheckError: If the proxy request fails
        """
        resolver = CardResolver(catalog)
        printings: dict[int, CatalogEntry] = {}
        for item in deck.all_cards():
            for entry in resolver.printings(item.card_number):
                printings.setdefault(entry.manage_id, entry)

        now = self._clock()
        urls: list[str] = []
        for entry in printings.values():
            url = service.sell_url(entry)
            if url and url not in urls and self._is_stale(entry.manage_id, now):
                urls.append(url)

        if urls:
            results = await self._client.check_prices(urls)
            by_url = {result.url: result.price_yen for result in results}
            logger.debug("Price check: %d urls, %d prices", len(urls), len(by_url))

            checked_at = self._clock()
            for entry in printings.values():
                url = service.sell_url(entry)
                if url in by_url:
                    self._prices[entry.manage_id] = CardPrice(by_url[url], checked_at)

        return {
            manage_id: self._prices[manage_id].price_yen
            for manage_id in printings
            if manage_id in self._prices
        }


# =============================================================================
# PRICE CONVERSION
# =============================================================================


def convert_to_price(
    deck: CanonicalDeck,
    catalog: CardCatalog,
    prices: Mapping[int, int],
    highest: bool = True,
) -> CanonicalDeck:
    """
    Switch every resolved line to its most (or least) expensive printing.

    Only printings with a known price are candidates; ties keep catalog order.
    Lines without a priced printing and unresolved lines are left as they are.
    The sections are merged afterwards since lines may now share a printing.
    """
    resolver = CardResolver(catalog)
    pick = max if highest else min

    def convert(item: LineItem) -> LineItem:
        if not item.is_resolved:
            return item
        priced = [
            entry for entry in resolver.printings(item.card_number) if entry.manage_id in prices
        ]
        if not priced:
            return item
        best = pick(priced, key=lambda entry: prices[entry.manage_id])
        return replace(item, manage_id=best.manage_id)

    return CanonicalDeck(
        name=deck.name,
        oshi=convert(deck.oshi) if deck.oshi else None,
        main_deck=merge_line_items(convert(item) for item in deck.main_deck),
        cheer_deck=merge_line_items(convert(item) for item in deck.cheer_deck),
    )


def deck_price(deck: CanonicalDeck, prices: Mapping[int, int]) -> int:
    """Total price of the priced lines."""
    return sum(
        prices[item.manage_id] * item.amount
        for item in deck.all_cards()
        if item.manage_id is not None and item.manage_id in prices
    )
