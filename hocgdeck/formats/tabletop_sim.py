"""
Tabletop Simulator deck format (hololive OCG mod by Noodlebrain).

    {
        "deckName": "My deck",
        "oshi": ["hSD01-001"],
        "deck": [["hSD01-003", 4], ...],
        "cheerDeck": [["hY01-001", 10], ...]
    }

Like HoloDuel, only card numbers are stored; duplicate card numbers are
summed on export, keeping the position of the first occurrence.
"""

from typing import ClassVar

from pydantic import ConfigDict, NonNegativeInt
from pydantic.alias_generators import to_camel

from hocgdeck.formats.base import JsonDeck, clean_deck_name
from hocgdeck.models.card import CardCatalog
from hocgdeck.models.deck import CanonicalDeck, LineItem, merge_ignoring_printing
from hocgdeck.services.card_resolver import CardResolver

DeckCard = tuple[str, NonNegativeInt]


class TabletopSimDeck(JsonDeck):
    """Tabletop Simulator deck file."""

    FORMAT_NAME: ClassVar[str] = "Tabletop Sim"

    model_config = ConfigDict(populate_by_name=True, alias_generator=to_camel)

    deck_name: str | None = None
    oshi: tuple[str]
    deck: list[DeckCard]
    cheer_deck: list[DeckCard]

    def to_canonical(self, catalog: CardCatalog) -> CanonicalDeck:
        resolver = CardResolver(catalog)
        (oshi_number,) = self.oshi
        return CanonicalDeck(
            name=clean_deck_name(self.deck_name),
            oshi=resolver.line_from_number(oshi_number, 1) if oshi_number else None,
            main_deck=[resolver.line_from_number(number, amount) for number, amount in self.deck],
            cheer_deck=[
                resolver.line_from_number(number, amount) for number, amount in self.cheer_deck
            ],
        )

    @classmethod
    def from_canonical(cls, deck: CanonicalDeck, catalog: CardCatalog) -> "TabletopSimDeck":
        def section(items: list[LineItem]) -> list[DeckCard]:
            return [(item.card_number, item.amount) for item in merge_ignoring_printing(items)]

        return cls(
            deck_name=deck.name,
            oshi=(deck.oshi.card_number if deck.oshi else "",),
            deck=section(deck.main_deck),
            cheer_deck=section(deck.cheer_deck),
        )
