"""
Canonical deck model and merge engine.

Every format adapter converts through CanonicalDeck. Line items carry a
card number, an optional printing identifier (manage_id) and an amount.

INVARIANTS:
- manage_id=None is a valid "unknown card" state, preserved through conversion
- Merging keeps the position of the first occurrence of each key
- Merging is idempotent
"""

import hashlib
import json
import re
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field, replace

from hocgdeck.models.card import DeckSection

# Characters that are not safe in downloaded file names
_UNSAFE_FILE_CHARS = re.compile(r'[\\/:*?"<>|\x00-\x1f]+')


@dataclass(frozen=True, slots=True)
class LineItem:
    """
    One deck line: a card number, its printing, and how many copies.

    Attributes:
        card_number: Card number as written by the source (e.g. "hSD01-003")
        amount: Number of copies
        manage_id: Catalog printing identifier, None when the card is unknown
    """

    card_number: str
    amount: int = 1
    manage_id: int | None = None

    @property
    def is_resolved(self) -> bool:
        return self.manage_id is not None

    def merge_key(self) -> tuple[str, int | None]:
        return (self.card_number.lower(), self.manage_id)


def merge_line_items(items: Iterable[LineItem]) -> list[LineItem]:
    """
    Combine line items sharing (card_number, manage_id) by summing amounts.

    The merged item sits at the position of the first occurrence and keeps
    its other fields. Card numbers compare case-insensitively.
    """
    merged: dict[tuple[str, int | None], LineItem] = {}
    for item in items:
        key = item.merge_key()
        existing = merged.get(key)
        if existing is None:
            merged[key] = item
        else:
            merged[key] = replace(existing, amount=existing.amount + item.amount)
    return list(merged.values())


def merge_ignoring_printing(items: Iterable[LineItem]) -> list[LineItem]:
    """
    Combine line items by card number only, for formats without printings.

    Amounts sum across all printings; the first-seen manage_id is kept.
    """
    merged: dict[str, LineItem] = {}
    for item in items:
        key = item.card_number.lower()
        existing = merged.get(key)
        if existing is None:
            merged[key] = item
        else:
            merged[key] = replace(existing, amount=existing.amount + item.amount)
    return list(merged.values())


@dataclass(eq=False)
class CanonicalDeck:
    """
    Format-agnostic deck.

    Attributes:
        name: Deck name, None when unnamed
        oshi: The single leader card, None when missing
        main_deck: Main deck lines (target 50 cards)
        cheer_deck: Cheer deck lines (target 20 cards)
    """

    name: str | None = None
    oshi: LineItem | None = None
    main_deck: list[LineItem] = field(default_factory=list)
    cheer_deck: list[LineItem] = field(default_factory=list)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, CanonicalDeck):
            return NotImplemented
        left, right = self.merged(), other.merged()
        return (
            left.name == right.name
            and left.oshi == right.oshi
            and left.main_deck == right.main_deck
            and left.cheer_deck == right.cheer_deck
        )

    __hash__ = None  # type: ignore[assignment]

    def is_empty(self) -> bool:
        return self.oshi is None and not self.main_deck and not self.cheer_deck

    def merged(self) -> "CanonicalDeck":
        """Copy of this deck with both sections merged."""
        return CanonicalDeck(
            name=self.name,
            oshi=self.oshi,
            main_deck=merge_line_items(self.main_deck),
            cheer_deck=merge_line_items(self.cheer_deck),
        )

    def all_cards(self) -> Iterator[LineItem]:
        """Oshi, then main deck, then cheer deck."""
        if self.oshi is not None:
            yield self.oshi
        yield from self.main_deck
        yield from self.cheer_deck

    def find_card(self, manage_id: int) -> LineItem | None:
        """Merged line for a printing across all sections."""
        amount = 0
        found: LineItem | None = None
        for item in self.all_cards():
            if item.manage_id == manage_id:
                found = found or item
                amount += item.amount
        return replace(found, amount=amount) if found else None

    def main_deck_total(self) -> int:
        return sum(item.amount for item in self.main_deck)

    def cheer_deck_total(self) -> int:
        return sum(item.amount for item in self.cheer_deck)

    def add_card(self, card: LineItem, section: DeckSection) -> None:
        """
        Add copies of a card to a section, re-merging that section.

        Adding to the oshi section replaces the current oshi.
        """
        if section is DeckSection.OSHI:
            self.oshi = replace(card, amount=1)
        elif section is DeckSection.CHEER:
            self.cheer_deck = merge_line_items([*self.cheer_deck, card])
        else:
            self.main_deck = merge_line_items([*self.main_deck, card])

    def remove_card(self, card: LineItem, section: DeckSection) -> None:
        """
        Remove copies of a card from a section.

        Lines that reach zero copies are dropped.
        """
        if section is DeckSection.OSHI:
            if self.oshi is not None and self.oshi.merge_key() == card.merge_key():
                self.oshi = None
            return

        lines = self.cheer_deck if section is DeckSection.CHEER else self.main_deck
        remaining: list[LineItem] = []
        for item in merge_line_items(lines):
            if item.merge_key() == card.merge_key():
                item = replace(item, amount=item.amount - card.amount)
            if item.amount > 0:
                remaining.append(item)

        if section is DeckSection.CHEER:
            self.cheer_deck = remaining
        else:
            self.main_deck = remaining

    def content_hash(self) -> str:
        """
        Stable hash of the deck content, used as a cache key.

        Hashes the deck as stored (before merging), so two decks with the
        same cards listed in a different order hash differently.
        """

        def lines(items: Iterable[LineItem]) -> list[list[object]]:
            return [[i.card_number, i.manage_id, i.amount] for i in items]

        payload = {
            "name": self.name,
            "oshi": lines([self.oshi] if self.oshi else []),
            "main_deck": lines(self.main_deck),
            "cheer_deck": lines(self.cheer_deck),
        }
        encoded = json.dumps(payload, ensure_ascii=False, separators=(",", ":"))
        return hashlib.sha256(encoded.encode("utf-8")).hexdigest()

    def required_deck_name(self) -> str:
        """Deck name for formats where a title is mandatory."""
        if self.name and self.name.strip():
            return self.name.strip()
        if self.oshi is not None:
            return f"{self.oshi.card_number} deck"
        return "Untitled deck"

    def file_name(self) -> str:
        """Base file name (without extension) for downloads."""
        base = self.name.strip() if self.name and self.name.strip() else None
        if base is None:
            base = self.oshi.card_number if self.oshi is not None else "deck"
        cleaned = _UNSAFE_FILE_CHARS.sub("_", base).strip(" .")
        return cleaned or "deck"
