"""
Card API endpoints.

Card search for the deck editor, and single printing lookup.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, Field

from hocgdeck.api.dependencies import get_catalog, get_search_engine
from hocgdeck.models.card import CardCatalog, CardInfo, CardType, CatalogEntry, DeckSection
from hocgdeck.models.failure import ApiResponse, FailureKind, KnownError
from hocgdeck.services.card_search import (
    ALL_RARITIES,
    BloomLevelFilter,
    CardFilters,
    CardSearchEngine,
    CardTypeFilter,
    ReleaseFilter,
)

router = APIRouter(prefix="/cards", tags=["cards"])


class CardSearchRequest(BaseModel):
    """Search filters; see hocgdeck.services.card_search for the query syntax."""

    name: str = ""
    oshi_skill: str = ""
    tag: str = ""
    text: str = ""
    full_match: bool = False
    case_sensitive: bool = False
    card_type: CardTypeFilter = CardTypeFilter.ALL
    color: str | None = None
    bloom_level: BloomLevelFilter = BloomLevelFilter.ALL
    rarity: str = Field(
        default=ALL_RARITIES,
        description='"all", "no_alt_art" or a rarity label such as "OSR"',
    )
    release: ReleaseFilter = ReleaseFilter.ALL
    max_results: int | None = Field(default=None, ge=1)

    def to_filters(self) -> CardFilters:
        return CardFilters(
            name=self.name,
            oshi_skill=self.oshi_skill,
            tag=self.tag,
            text=self.text,
            full_match=self.full_match,
            case_sensitive=self.case_sensitive,
            card_type=self.card_type,
            color=self.color,
            bloom_level=self.bloom_level,
            rarity=self.rarity,
            release=self.release,
        )


class CardResponse(BaseModel):
    """One printing with the card data the editor shows."""

    manage_id: int
    card_number: str
    position: int | None = None
    name: str
    card_type: CardType
    deck_section: DeckSection
    rarity: str
    image_ref: str
    illustrator: str | None
    release_ja: str | None
    release_en: str | None
    max_copies: int

    @classmethod
    def from_entry(
        cls, entry: CatalogEntry, card: CardInfo, position: int | None = None
    ) -> "CardResponse":
        return cls(
            manage_id=entry.manage_id,
            card_number=entry.card_number,
            position=position,
            name=card.name.display(),
            card_type=card.card_type,
            deck_section=entry.deck_section,
            rarity=entry.rarity,
            image_ref=entry.image_ref,
            illustrator=entry.illustrator,
            release_ja=entry.release_ja,
            release_en=entry.release_en,
            max_copies=entry.max_copies,
        )


class CardSearchResponse(BaseModel):
    results: list[CardResponse]
    count: int


@router.post("/search", response_model=ApiResponse[CardSearchResponse])
async def search_cards(
    request: CardSearchRequest,
    engine: Annotated[CardSearchEngine, Depends(get_search_engine)],
) -> ApiResponse[CardSearchResponse]:
    """Filter the catalog; results keep catalog order."""
    results = engine.search(request.to_filters(), max_results=request.max_results)
    cards = [
        CardResponse.from_entry(result.entry, result.card, position=result.position)
        for result in results
    ]
    return ApiResponse.success(CardSearchResponse(results=cards, count=len(cards)))


@router.get("/{manage_id}", response_model=ApiResponse[CardResponse])
async def get_card(
    manage_id: int,
    catalog: Annotated[CardCatalog, Depends(get_catalog)],
) -> ApiResponse[CardResponse]:
    """Look up one printing by manage_id."""
    entry = catalog.get(manage_id)
    card = catalog.card_for_entry(entry) if entry is not None else None
    if entry is None or card is None:
        raise KnownError(
            kind=FailureKind.NOT_FOUND,
            message=f"No card with manage_id {manage_id}.",
            status_code=status.HTTP_404_NOT_FOUND,
        )
    return ApiResponse.success(CardResponse.from_entry(entry, card))
