"""
HoloDuel deck format.

    {
        "deck_name": "My deck",
        "oshi": ["hSD01-001"],
        "deck": {"hSD01-003": 4, ...},
        "cheer_deck": {"hY01-001": 10, ...}
    }

Only card numbers are stored, so printings are collapsed on export and every
card resolves to its first printing on import. Object key order is kept.
"""

from typing import ClassVar

from pydantic import NonNegativeInt

from hocgdeck.formats.base import JsonDeck, clean_deck_name
from hocgdeck.models.card import CardCatalog
from hocgdeck.models.deck import CanonicalDeck, LineItem, merge_ignoring_printing
from hocgdeck.services.card_resolver import CardResolver


class HoloDuelDeck(JsonDeck):
    """HoloDuel deck file."""

    FORMAT_NAME: ClassVar[str] = "HoloDuel"

    deck_name: str | None = None
    oshi: tuple[str]
    deck: dict[str, NonNegativeInt]
    cheer_deck: dict[str, NonNegativeInt]

    def to_canonical(self, catalog: CardCatalog) -> CanonicalDeck:
        resolver = CardResolver(catalog)
        (oshi_number,) = self.oshi
        return CanonicalDeck(
            name=clean_deck_name(self.deck_name),
            oshi=resolver.line_from_number(oshi_number, 1) if oshi_number else None,
            main_deck=[
                resolver.line_from_number(number, amount) for number, amount in self.deck.items()
            ],
            cheer_deck=[
                resolver.line_from_number(number, amount)
                for number, amount in self.cheer_deck.items()
            ],
        )

    @classmethod
    def from_canonical(cls, deck: CanonicalDeck, catalog: CardCatalog) -> "HoloDuelDeck":
        """Collapse printings; amounts of the same card number are summed."""

        def section(items: list[LineItem]) -> dict[str, int]:
            return {item.card_number: item.amount for item in merge_ignoring_printing(items)}

        return cls(
            deck_name=deck.name,
            oshi=(deck.oshi.card_number if deck.oshi else "",),
            deck=section(deck.main_deck),
            cheer_deck=section(deck.cheer_deck),
        )
