"""
holoDelta deck format.

    {
        "deckName": "My deck",
        "oshi": ["hSD01-001", 0],
        "deck": [["hSD01-003", 4, 0], ...],
        "cheerDeck": [["hY01-001", 10, 0], ...]
    }

The last number of every entry is the rarity order: the 0-based position of
the printing among all printings of that card number, in catalog order.
"""

from typing import ClassVar

from pydantic import ConfigDict, NonNegativeInt
from pydantic.alias_generators import to_camel

from hocgdeck.formats.base import JsonDeck, clean_deck_name
from hocgdeck.models.card import CardCatalog
from hocgdeck.models.deck import CanonicalDeck, LineItem, merge_line_items
from hocgdeck.services.card_resolver import CardResolver

OshiCard = tuple[str, NonNegativeInt]
DeckCard = tuple[str, NonNegativeInt, NonNegativeInt]


class HoloDeltaDeck(JsonDeck):
    """holoDelta deck file."""

    FORMAT_NAME: ClassVar[str] = "holoDelta"

    model_config = ConfigDict(populate_by_name=True, alias_generator=to_camel)

    deck_name: str | None = None
    oshi: OshiCard
    deck: list[DeckCard]
    cheer_deck: list[DeckCard]

    def to_canonical(self, catalog: CardCatalog) -> CanonicalDeck:
        """Resolve every entry through its rarity order."""
        resolver = CardResolver(catalog)
        card_number, oshi_order = self.oshi
        return CanonicalDeck(
            name=clean_deck_name(self.deck_name),
            oshi=resolver.line_from_ordinal(card_number, oshi_order, 1) if card_number else None,
            main_deck=[
                resolver.line_from_ordinal(number, order, amount)
                for number, amount, order in self.deck
            ],
            cheer_deck=[
                resolver.line_from_ordinal(number, order, amount)
                for number, amount, order in self.cheer_deck
            ],
        )

    @classmethod
    def from_canonical(cls, deck: CanonicalDeck, catalog: CardCatalog) -> "HoloDeltaDeck":
        """Write rarity orders; unresolved lines get an order past the last printing."""
        resolver = CardResolver(catalog)

        def entry(item: LineItem) -> DeckCard:
            return (item.card_number, item.amount, resolver.ordinal_for_line(item))

        oshi = deck.oshi or LineItem(card_number="")
        return cls(
            deck_name=deck.name,
            oshi=(oshi.card_number, resolver.ordinal_for_line(oshi)),
            deck=[entry(item) for item in merge_line_items(deck.main_deck)],
            cheer_deck=[entry(item) for item in merge_line_items(deck.cheer_deck)],
        )
