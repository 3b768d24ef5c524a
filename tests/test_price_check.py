"""Tests for shop price checks and price conversion."""

import json

import httpx
import pytest
import respx

from hocgdeck.models.card import CardCatalog
from hocgdeck.models.deck import CanonicalDeck, LineItem
from hocgdeck.services.price_check import (
    PriceChecker,
    PriceCheckClient,
    PriceCheckError,
    convert_to_price,
    deck_price,
)

PROXY_URL = "https://prices.test"
YUYUTEI_URL = "https://yuyu-tei.jp/sell/hocg/card"

SORA_C = f"{YUYUTEI_URL}/hsd01/10003"
SORA_SR = f"{YUYUTEI_URL}/hbp01/10103"
WHITE_CHEER = f"{YUYUTEI_URL}/hy01/10168"
WHITE_CHEER_PROMO = f"{YUYUTEI_URL}/hpr/11168"

PRICES = [
    {"url": SORA_C, "card_number": "hSD01-003", "price_yen": 30},
    {"url": SORA_SR, "card_number": "hSD01-003", "price_yen": 1980},
    {"url": WHITE_CHEER, "card_number": "hY01-001", "price_yen": 10},
    {"url": WHITE_CHEER_PROMO, "card_number": "hY01-001", "price_yen": 500},
]


class FakeClock:
    def __init__(self) -> None:
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now


@pytest.fixture
def client() -> PriceCheckClient:
    return PriceCheckClient(base_url=f"{PROXY_URL}/")


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def checker(client: PriceCheckClient, clock: FakeClock) -> PriceChecker:
    return PriceChecker(client, clock=clock)


@pytest.fixture
def deck() -> CanonicalDeck:
    return CanonicalDeck(
        oshi=LineItem("hSD01-001", 1, 1),
        main_deck=[LineItem("hSD01-003", 4, 3)],
        cheer_deck=[LineItem("hY01-001", 20, 168)],
    )


class TestPriceCheckClient:
    @respx.mock
    async def test_posts_urls(self, client: PriceCheckClient) -> None:
        route = respx.post(f"{PROXY_URL}/price-check").mock(
            return_value=httpx.Response(200, json=PRICES[:1])
        )

        results = await client.check_prices([SORA_C])

        assert results[0].card_number == "hSD01-003"
        assert results[0].price_yen == 30
        assert json.loads(route.calls.last.request.content) == {"urls": [SORA_C]}

    @respx.mock
    async def test_error_text_is_surfaced(self, client: PriceCheckClient) -> None:
        respx.post(f"{PROXY_URL}/price-check").mock(
            return_value=httpx.Response(200, text="shop unavailable")
        )

        with pytest.raises(PriceCheckError) as exc_info:
            await client.check_prices([SORA_C])

        assert exc_info.value.message == "shop unavailable"

    @respx.mock
    async def test_http_error_status(self, client: PriceCheckClient) -> None:
        respx.post(f"{PROXY_URL}/price-check").mock(return_value=httpx.Response(503))

        with pytest.raises(PriceCheckError) as exc_info:
            await client.check_prices([SORA_C])

        assert exc_info.value.status_code == 503
        assert "HTTP 503" in exc_info.value.message

    @respx.mock
    async def test_network_error(self, client: PriceCheckClient) -> None:
        respx.post(f"{PROXY_URL}/price-check").mock(side_effect=httpx.ConnectError("refused"))

        with pytest.raises(PriceCheckError, match="Price check request failed"):
            await client.check_prices([SORA_C])


class TestPriceChecker:
    @respx.mock
    async def test_checks_every_printing(
        self, checker: PriceChecker, catalog: CardCatalog, deck: CanonicalDeck
    ) -> None:
        route = respx.post(f"{PROXY_URL}/price-check").mock(
            return_value=httpx.Response(200, json=PRICES)
        )

        prices = await checker.check(deck, catalog)

        sent = json.loads(route.calls.last.request.content)
        assert sent == {"urls": [SORA_C, SORA_SR, WHITE_CHEER, WHITE_CHEER_PROMO]}
        assert prices == {3: 30, 103: 1980, 168: 10, 1168: 500}
        assert checker.price_of(103) == 1980

    @respx.mock
    async def test_fresh_prices_are_not_checked_again(
        self, checker: PriceChecker, clock: FakeClock, catalog: CardCatalog, deck: CanonicalDeck
    ) -> None:
        route = respx.post(f"{PROXY_URL}/price-check").mock(
            return_value=httpx.Response(200, json=PRICES)
        )

        await checker.check(deck, catalog)
        clock.now += 60
        prices = await checker.check(deck, catalog)

        assert route.call_count == 1
        assert prices[103] == 1980

    @respx.mock
    async def test_stale_prices_are_checked_again(
        self, checker: PriceChecker, clock: FakeClock, catalog: CardCatalog, deck: CanonicalDeck
    ) -> None:
        route = respx.post(f"{PROXY_URL}/price-check").mock(
            side_effect=[
                httpx.Response(200, json=PRICES),
                httpx.Response(200, json=[{**PRICES[1], "price_yen": 2500}]),
            ]
        )

        await checker.check(deck, catalog)
        clock.now += 60 * 60 + 1
        prices = await checker.check(deck, catalog)

        assert route.call_count == 2
        # Unanswered URLs keep their previous price
        assert prices == {3: 30, 103: 2500, 168: 10, 1168: 500}

    @respx.mock
    async def test_no_sell_urls_makes_no_request(
        self, checker: PriceChecker, catalog: CardCatalog
    ) -> None:
        route = respx.post(f"{PROXY_URL}/price-check")
        deck = CanonicalDeck(main_deck=[LineItem("hSD01-016", 4, 16), LineItem("hXX99-999", 1)])

        assert await checker.check(deck, catalog) == {}
        assert not route.called

    @respx.mock
    async def test_failure_keeps_cache(
        self, checker: PriceChecker, clock: FakeClock, catalog: CardCatalog, deck: CanonicalDeck
    ) -> None:
        respx.post(f"{PROXY_URL}/price-check").mock(
            side_effect=[httpx.Response(200, json=PRICES), httpx.Response(200, text="down")]
        )

        await checker.check(deck, catalog)
        clock.now += 60 * 60 + 1
        with pytest.raises(PriceCheckError):
            await checker.check(deck, catalog)

        assert checker.price_of(3) == 30


class TestConvertToPrice:
    PRICES = {3: 30, 103: 1980, 168: 10, 1168: 500}

    def test_highest(self, catalog: CardCatalog, deck: CanonicalDeck) -> None:
        converted = convert_to_price(deck, catalog, self.PRICES, highest=True)

        assert converted.main_deck == [LineItem("hSD01-003", 4, 103)]
        assert converted.cheer_deck == [LineItem("hY01-001", 20, 1168)]
        # No priced printing
        assert converted.oshi == LineItem("hSD01-001", 1, 1)

    def test_lowest(self, catalog: CardCatalog) -> None:
        deck = CanonicalDeck(
            main_deck=[LineItem("hSD01-003", 2, 103), LineItem("hSD01-003", 2, 3)]
        )

        converted = convert_to_price(deck, catalog, self.PRICES, highest=False)

        assert converted.main_deck == [LineItem("hSD01-003", 4, 3)]

    def test_ties_keep_catalog_order(self, catalog: CardCatalog) -> None:
        deck = CanonicalDeck(main_deck=[LineItem("hSD01-003", 1, 103)])

        converted = convert_to_price(deck, catalog, {3: 100, 103: 100}, highest=True)

        assert converted.main_deck == [LineItem("hSD01-003", 1, 3)]

    def test_unresolved_lines_are_kept(self, catalog: CardCatalog) -> None:
        deck = CanonicalDeck(main_deck=[LineItem("hSD01-003", 1, None)])

        converted = convert_to_price(deck, catalog, self.PRICES, highest=True)

        assert converted.main_deck == [LineItem("hSD01-003", 1, None)]

    def test_deck_price(self, deck: CanonicalDeck) -> None:
        assert deck_price(deck, self.PRICES) == 4 * 30 + 20 * 10
