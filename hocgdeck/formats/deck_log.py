"""
Deck Log (Bushiroad) deck format.

    {
        "game_title_id": 9,
        "deck_id": "6ADJR",
        "title": "My deck",
        "p_list": [{"card_number": "hSD01-001", "num": 1, "manage_id": "1"}],
        "list": [{"card_number": "hSD01-003", "num": 4, "manage_id": "3"}, ...],
        "sub_list": [{"card_number": "hY01-001", "num": 10, "manage_id": "170"}, ...]
    }

The manage_id is authoritative: Deck Log cannot accept a card it does not
know, so exporting a deck with an unknown card is refused.

Deck Log URLs look like https://decklog.bushiroad.com/view/<code>. The code
is validated before any network call is made.
"""

import re
from typing import ClassVar

from pydantic import BaseModel, ConfigDict, Field, NonNegativeInt

from hocgdeck.formats.base import (
    DeckFormatError,
    ExportError,
    JsonDeck,
    MissingIdentifierError,
    clean_deck_name,
)
from hocgdeck.models.card import CardCatalog
from hocgdeck.models.deck import CanonicalDeck, LineItem, merge_line_items
from hocgdeck.services.card_resolver import CardResolver

# Deck Log site per game title id
GAME_TITLE_VIEW_URLS: dict[int, str] = {
    8: "https://decklog-en.bushiroad.com/view",
    108: "https://decklog-en.bushiroad.com/ja/view",
    9: "https://decklog.bushiroad.com/view",
}

# Japanese Deck Log, used when exporting
DEFAULT_GAME_TITLE_ID = 9

# Pattern for valid deck codes (after case-folding)
VALID_DECK_CODE_PATTERN = re.compile(r"^[a-z0-9]+$")


class DeckLogError(DeckFormatError):
    """Base exception for Deck Log failures."""


class InvalidDeckCodeError(DeckLogError):
    """Raised when a Deck Log URL or code is malformed."""

    def __init__(self, value: str, reason: str) -> None:
        self.value = value
        self.reason = reason
        super().__init__(reason)


class DeckLogCard(BaseModel):
    """One Deck Log line."""

    model_config = ConfigDict(coerce_numbers_to_str=True)

    card_number: str
    num: NonNegativeInt
    manage_id: str


class DeckLogDeck(JsonDeck):
    """Deck Log deck as returned by the view endpoint."""

    FORMAT_NAME: ClassVar[str] = "Deck Log"

    game_title_id: int | None = None
    deck_id: str | None = None
    title: str = ""
    p_list: list[DeckLogCard]
    main_list: list[DeckLogCard] = Field(alias="list")
    sub_list: list[DeckLogCard]

    def view_url(self) -> str | None:
        """Public URL of this deck, None when it has not been published."""
        base_url = GAME_TITLE_VIEW_URLS.get(self.game_title_id or DEFAULT_GAME_TITLE_ID)
        if base_url is None or not self.deck_id:
            return None
        return f"{base_url}/{self.deck_id}"

    def to_canonical(self, catalog: CardCatalog) -> CanonicalDeck:
        """Trust each manage_id that the catalog knows for that card number."""
        resolver = CardResolver(catalog)

        def line(card: DeckLogCard, amount: int | None = None) -> LineItem:
            manage_id = int(card.manage_id) if card.manage_id.isdigit() else None
            return resolver.line_from_manage_id(
                card.card_number, manage_id, card.num if amount is None else amount
            )

        return CanonicalDeck(
            name=clean_deck_name(self.title),
            oshi=line(self.p_list[0], 1) if self.p_list else None,
            main_deck=[line(card) for card in self.main_list],
            cheer_deck=[line(card) for card in self.sub_list],
        )

    @classmethod
    def from_canonical(
        cls,
        deck: CanonicalDeck,
        catalog: CardCatalog,
        game_title_id: int = DEFAULT_GAME_TITLE_ID,
    ) -> "DeckLogDeck":
        """
        Build a Deck Log payload.

        Raises:
            ExportError: If the deck has no oshi
            MissingIdentifierError: If any card has no manage_id
        """
        if deck.oshi is None:
            raise ExportError(cls.FORMAT_NAME, "the deck has no oshi")

        main_deck = merge_line_items(deck.main_deck)
        cheer_deck = merge_line_items(deck.cheer_deck)

        unknown = [
            item.card_number
            for item in (deck.oshi, *main_deck, *cheer_deck)
            if item.manage_id is None
        ]
        if unknown:
            raise MissingIdentifierError(cls.FORMAT_NAME, unknown)

        def card(item: LineItem) -> DeckLogCard:
            return DeckLogCard(
                card_number=item.card_number,
                num=item.amount,
                manage_id=str(item.manage_id),
            )

        return cls(
            game_title_id=game_title_id,
            title=deck.required_deck_name(),
            p_list=[card(deck.oshi)],
            main_list=[card(item) for item in main_deck],
            sub_list=[card(item) for item in cheer_deck],
        )


def parse_deck_log_url(url_or_code: str) -> tuple[int | None, str]:
    """
    Extract the game title id and deck code from a Deck Log URL or bare code.

    Args:
        url_or_code: A Deck Log view URL, or just the deck code

    Returns:
        (game_title_id, code); game_title_id is None for a bare code

    Raises:
        InvalidDeckCodeError: If the code contains anything but [a-z0-9]
    """
    value = url_or_code.strip().lower()
    game_title_id: int | None = None
    code = value

    # Longest prefix first: the ja/ English site shares the host
    for title_id, base_url in sorted(
        GAME_TITLE_VIEW_URLS.items(), key=lambda item: -len(item[1])
    ):
        prefix = f"{base_url}/"
        if value.startswith(prefix):
            game_title_id = title_id
            code = value[len(prefix) :]
            break

    if not VALID_DECK_CODE_PATTERN.match(code):
        raise InvalidDeckCodeError(url_or_code, "Invalid code")

    return game_title_id, code
