"""
Deck API endpoints.

Conversion between deck formats, validation, format detection, Deck Log
import/publish, starter decks and shop price checks. Every endpoint answers
with an ApiResponse; deck and price check errors are turned into known
failures by the registered handlers.
"""

import logging
from enum import Enum
from typing import Annotated

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, Field

from hocgdeck.api.dependencies import (
    get_catalog,
    get_deck_log_client,
    get_price_checker,
    get_publisher,
)
from hocgdeck.formats.convert import (
    DeckFormat,
    detect_and_import,
    export_deck,
    import_deck,
)
from hocgdeck.formats.deck_log import DEFAULT_GAME_TITLE_ID
from hocgdeck.models.card import CardCatalog
from hocgdeck.models.deck import CanonicalDeck, LineItem
from hocgdeck.models.failure import ApiResponse, FailureKind, KnownError
from hocgdeck.services.deck_log_client import DeckLogClient, DeckLogPublisher, PublishState
from hocgdeck.services.deck_validation import validate_deck
from hocgdeck.services.price_check import (
    PriceChecker,
    PriceCheckService,
    convert_to_price,
    deck_price,
)
from hocgdeck.services.starter_decks import StarterDeck, get_starter_deck, starter_decks

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/decks", tags=["decks"])


# =============================================================================
# MODELS
# =============================================================================


class LineItemModel(BaseModel):
    """One deck line."""

    card_number: str
    amount: int = Field(default=1, ge=0)
    manage_id: int | None = None

    @classmethod
    def from_line(cls, item: LineItem) -> "LineItemModel":
        return cls(card_number=item.card_number, amount=item.amount, manage_id=item.manage_id)

    def to_line(self) -> LineItem:
        return LineItem(card_number=self.card_number, amount=self.amount, manage_id=self.manage_id)


class DeckModel(BaseModel):
    """Canonical deck as exchanged with the frontend."""

    name: str | None = None
    oshi: LineItemModel | None = None
    main_deck: list[LineItemModel] = Field(default_factory=list)
    cheer_deck: list[LineItemModel] = Field(default_factory=list)

    @classmethod
    def from_deck(cls, deck: CanonicalDeck) -> "DeckModel":
        return cls(
            name=deck.name,
            oshi=LineItemModel.from_line(deck.oshi) if deck.oshi else None,
            main_deck=[LineItemModel.from_line(item) for item in deck.main_deck],
            cheer_deck=[LineItemModel.from_line(item) for item in deck.cheer_deck],
        )

    def to_deck(self) -> CanonicalDeck:
        return CanonicalDeck(
            name=self.name,
            oshi=self.oshi.to_line() if self.oshi else None,
            main_deck=[item.to_line() for item in self.main_deck],
            cheer_deck=[item.to_line() for item in self.cheer_deck],
        )


class ConvertRequest(BaseModel):
    """Convert a deck file between formats."""

    source_format: DeckFormat | None = Field(
        default=None,
        description="Format of the payload; detected when omitted",
    )
    target_format: DeckFormat
    payload: str
    fallback_format: DeckFormat | None = Field(
        default=None,
        description="Format tried when the payload does not parse as source_format",
    )


class ConvertResponse(BaseModel):
    source_format: DeckFormat
    target_format: DeckFormat
    payload: str
    file_name: str
    deck: DeckModel
    warnings: list[str]


class ExportResponse(BaseModel):
    format: DeckFormat
    payload: str
    file_name: str
    warnings: list[str]


class ValidateRequest(BaseModel):
    format: DeckFormat
    payload: str
    allow_unreleased: bool = True


class ValidateResponse(BaseModel):
    deck: DeckModel
    warnings: list[str]


class DetectRequest(BaseModel):
    payload: str


class DetectResponse(BaseModel):
    format: DeckFormat
    deck: DeckModel


class DeckLogImportRequest(BaseModel):
    url_or_code: str = Field(..., min_length=1)


class DeckLogImportResponse(BaseModel):
    deck: DeckModel
    view_url: str | None
    warnings: list[str]


class PublishRequest(BaseModel):
    format: DeckFormat
    payload: str
    game_title_id: int = DEFAULT_GAME_TITLE_ID


class PublishResponse(BaseModel):
    url: str
    state: PublishState
    cached: bool = Field(description="The same deck content was already published")


class StarterDeckResponse(BaseModel):
    deck_id: str
    display: str
    deck: DeckModel
    oshi_options: list[LineItemModel]

    @classmethod
    def from_starter(cls, starter: StarterDeck) -> "StarterDeckResponse":
        return cls(
            deck_id=starter.deck_id,
            display=starter.display,
            deck=DeckModel.from_deck(starter.deck),
            oshi_options=[LineItemModel.from_line(item) for item in starter.oshi_options],
        )


class PriceConversion(str, Enum):
    HIGHEST = "highest"
    LOWEST = "lowest"


class PriceCheckDeckRequest(BaseModel):
    deck: DeckModel
    service: PriceCheckService = PriceCheckService.YUYUTEI
    convert: PriceConversion | None = Field(
        default=None,
        description="Switch every card to its most or least expensive printing",
    )


class CardPriceModel(BaseModel):
    manage_id: int
    card_number: str
    price_yen: int


class PriceCheckDeckResponse(BaseModel):
    deck: DeckModel
    prices: list[CardPriceModel]
    total_yen: int


# =============================================================================
# ENDPOINTS
# =============================================================================


@router.post("/convert", response_model=ApiResponse[ConvertResponse])
async def convert_deck(
    request: ConvertRequest,
    catalog: Annotated[CardCatalog, Depends(get_catalog)],
) -> ApiResponse[ConvertResponse]:
    """
    Convert a deck file to another format.

    Warnings describe the deck, they do not prevent conversion. Exporting to
    Deck Log fails when the deck contains unknown cards or has no oshi.
    """
    if request.source_format is None:
        detected = detect_and_import(request.payload, catalog)
        source_format, deck = detected.deck_format, detected.deck
    else:
        source_format = request.source_format
        deck = import_deck(
            source_format, request.payload, catalog, fallback_format=request.fallback_format
        )

    payload = export_deck(request.target_format, deck, catalog)
    logger.debug("Converted %s deck to %s", source_format.value, request.target_format.value)

    return ApiResponse.success(
        ConvertResponse(
            source_format=source_format,
            target_format=request.target_format,
            payload=payload.decode("utf-8"),
            file_name=f"{deck.file_name()}.{request.target_format.file_suffix}",
            deck=DeckModel.from_deck(deck),
            warnings=validate_deck(deck, catalog),
        )
    )


@router.post("/validate", response_model=ApiResponse[ValidateResponse])
async def validate(
    request: ValidateRequest,
    catalog: Annotated[CardCatalog, Depends(get_catalog)],
) -> ApiResponse[ValidateResponse]:
    """Import a deck and list its warnings."""
    deck = import_deck(request.format, request.payload, catalog)
    warnings = validate_deck(deck, catalog, allow_unreleased=request.allow_unreleased)
    return ApiResponse.success(ValidateResponse(deck=DeckModel.from_deck(deck), warnings=warnings))


@router.post("/detect", response_model=ApiResponse[DetectResponse])
async def detect(
    request: DetectRequest,
    catalog: Annotated[CardCatalog, Depends(get_catalog)],
) -> ApiResponse[DetectResponse]:
    """Import a deck file of unknown format."""
    detected = detect_and_import(request.payload, catalog)
    return ApiResponse.success(
        DetectResponse(format=detected.deck_format, deck=DeckModel.from_deck(detected.deck))
    )


@router.post("/deck-log/import", response_model=ApiResponse[DeckLogImportResponse])
async def import_from_deck_log(
    request: DeckLogImportRequest,
    catalog: Annotated[CardCatalog, Depends(get_catalog)],
    client: Annotated[DeckLogClient, Depends(get_deck_log_client)],
) -> ApiResponse[DeckLogImportResponse]:
    """Import a published deck from a Deck Log URL or code."""
    deck_log_deck = await client.fetch_deck(request.url_or_code)
    deck = deck_log_deck.to_canonical(catalog)
    return ApiResponse.success(
        DeckLogImportResponse(
            deck=DeckModel.from_deck(deck),
            view_url=deck_log_deck.view_url(),
            warnings=validate_deck(deck, catalog),
        )
    )


@router.post("/deck-log/publish", response_model=ApiResponse[PublishResponse])
async def publish_to_deck_log(
    request: PublishRequest,
    catalog: Annotated[CardCatalog, Depends(get_catalog)],
    publisher: Annotated[DeckLogPublisher, Depends(get_publisher)],
) -> ApiResponse[PublishResponse]:
    """Publish a deck to Deck Log and return its view URL."""
    deck = import_deck(request.format, request.payload, catalog)
    cached = publisher.cached_url(deck, request.game_title_id) is not None
    url = await publisher.publish(deck, catalog, game_title_id=request.game_title_id)
    return ApiResponse.success(PublishResponse(url=url, state=publisher.state, cached=cached))


@router.get("/starter", response_model=ApiResponse[list[StarterDeckResponse]])
async def list_starter_decks(
    catalog: Annotated[CardCatalog, Depends(get_catalog)],
) -> ApiResponse[list[StarterDeckResponse]]:
    """Official start decks."""
    return ApiResponse.success(
        [StarterDeckResponse.from_starter(starter) for starter in starter_decks(catalog)]
    )


@router.get("/starter/{deck_id}", response_model=ApiResponse[StarterDeckResponse])
async def get_starter(
    deck_id: str,
    catalog: Annotated[CardCatalog, Depends(get_catalog)],
) -> ApiResponse[StarterDeckResponse]:
    """One official start deck by id, e.g. "hSD02-001"."""
    starter = get_starter_deck(deck_id, catalog)
    if starter is None:
        raise KnownError(
            kind=FailureKind.NOT_FOUND,
            message=f"No start deck {deck_id}.",
            suggestion="List the start decks with GET /decks/starter.",
            status_code=status.HTTP_404_NOT_FOUND,
        )
    return ApiResponse.success(StarterDeckResponse.from_starter(starter))


@router.post("/price-check", response_model=ApiResponse[PriceCheckDeckResponse])
async def price_check(
    request: PriceCheckDeckRequest,
    catalog: Annotated[CardCatalog, Depends(get_catalog)],
    checker: Annotated[PriceChecker, Depends(get_price_checker)],
) -> ApiResponse[PriceCheckDeckResponse]:
    """
    Check shop prices for a deck.

    Prices cover every printing of the deck's cards. With `convert`, the deck
    comes back switched to the most or least expensive printings.
    """
    deck = request.deck.to_deck()
    prices = await checker.check(deck, catalog, service=request.service)
    if request.convert is not None:
        deck = convert_to_price(
            deck, catalog, prices, highest=request.convert is PriceConversion.HIGHEST
        )

    priced = []
    for manage_id, price_yen in prices.items():
        entry = catalog.get(manage_id)
        if entry is not None:
            priced.append(
                CardPriceModel(
                    manage_id=manage_id, card_number=entry.card_number, price_yen=price_yen
                )
            )
    return ApiResponse.success(
        PriceCheckDeckResponse(
            deck=DeckModel.from_deck(deck),
            prices=priced,
            total_yen=deck_price(deck, prices),
        )
    )


@router.post("/export/{target_format}", response_model=ApiResponse[ExportResponse])
async def export_canonical(
    target_format: DeckFormat,
    deck_model: DeckModel,
    catalog: Annotated[CardCatalog, Depends(get_catalog)],
) -> ApiResponse[ExportResponse]:
    """Export a deck edited in the frontend."""
    deck = deck_model.to_deck()
    payload = export_deck(target_format, deck, catalog)
    return ApiResponse.success(
        ExportResponse(
            format=target_format,
            payload=payload.decode("utf-8"),
            file_name=f"{deck.file_name()}.{target_format.file_suffix}",
            warnings=validate_deck(deck, catalog),
        )
    )
