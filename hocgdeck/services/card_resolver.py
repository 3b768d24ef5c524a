"""
Card Identity Resolution Service.

Maps a bare card number (plus an optional ordinal or explicit manage_id) to
one specific printing in the card catalog.

INVARIANTS:
1. Resolution uses the in-memory catalog ONLY (no network)
2. Resolution misses are NEVER errors - they degrade to an unresolved
   LineItem (manage_id=None) so viewing and editing can continue
3. Ordinals are positions among printings sharing a card number, in catalog
   iteration order
"""

import logging

from hocgdeck.models.card import CardCatalog, CatalogEntry
from hocgdeck.models.deck import LineItem

logger = logging.getLogger(__name__)


class CardResolver:
    """
    Resolves card numbers to catalog printings.

    The card-number index is built once from the catalog; the catalog itself
    is never mutated.
    """

    def __init__(self, catalog: CardCatalog) -> None:
        """
        Initialize resolver with a card catalog.

        Args:
            catalog: Ordered card catalog
        """
        self._catalog = catalog
        self._by_number = self._build_number_index()

    def _build_number_index(self) -> dict[str, list[CatalogEntry]]:
        """Group printings by lowercased card number, keeping catalog order."""
        index: dict[str, list[CatalogEntry]] = {}
        for entry in self._catalog:
            index.setdefault(entry.card_number.lower(), []).append(entry)
        return index

    @property
    def catalog(self) -> CardCatalog:
        return self._catalog

    def printings(self, card_number: str) -> list[CatalogEntry]:
        """All printings sharing a card number, in catalog order."""
        return list(self._by_number.get(card_number.lower(), ()))

    def resolve_by_number(self, card_number: str) -> CatalogEntry | None:
        """First printing of a card number, case-insensitive."""
        group = self._by_number.get(card_number.lower())
        return group[0] if group else None

    def resolve_by_number_and_ordinal(self, card_number: str, ordinal: int) -> CatalogEntry | None:
        """
        The ordinal-th (0-based) printing of a card number.

        Returns None when the ordinal is out of range.
        """
        group = self._by_number.get(card_number.lower(), [])
        if 0 <= ordinal < len(group):
            return group[ordinal]
        return None

    def ordinal_of(self, manage_id: int, card_number: str) -> int | None:
        """Position of a printing within its card-number group."""
        for position, entry in enumerate(self._by_number.get(card_number.lower(), ())):
            if entry.manage_id == manage_id:
                return position
        return None

    def resolve_manage_id(self, manage_id: int, card_number: str) -> CatalogEntry | None:
        """A printing by explicit id, only if it belongs to the card number."""
        entry = self._catalog.get(manage_id)
        if entry is None or entry.card_number.lower() != card_number.lower():
            return None
        return entry

    # =========================================================================
    # LINE ITEM BUILDERS
    # =========================================================================

    def line_from_number(self, card_number: str, amount: int) -> LineItem:
        """Line item for the first printing of a card number."""
        entry = self.resolve_by_number(card_number)
        if entry is None:
            logger.debug("Unknown card number %s", card_number)
        return LineItem(
            card_number=card_number,
            amount=amount,
            manage_id=entry.manage_id if entry else None,
        )

    def line_from_ordinal(self, card_number: str, ordinal: int, amount: int) -> LineItem:
        """Line item for the ordinal-th printing of a card number."""
        entry = self.resolve_by_number_and_ordinal(card_number, ordinal)
        if entry is None:
            logger.debug("No printing %d for card number %s", ordinal, card_number)
        return LineItem(
            card_number=card_number,
            amount=amount,
            manage_id=entry.manage_id if entry else None,
        )

    def line_from_manage_id(self, card_number: str, manage_id: int | None, amount: int) -> LineItem:
        """Line item for an explicit printing id, unresolved when unknown."""
        entry = self.resolve_manage_id(manage_id, card_number) if manage_id is not None else None
        if entry is None:
            logger.debug("Unknown printing %s for card number %s", manage_id, card_number)
        return LineItem(
            card_number=card_number,
            amount=amount,
            manage_id=entry.manage_id if entry else None,
        )

    def ordinal_for_line(self, item: LineItem) -> int:
        """
        Ordinal to write for a line item.

        Unresolved lines get the first out-of-range ordinal, so reading the
        ordinal back leaves the line unresolved instead of picking a printing.
        """
        ordinal = None
        if item.manage_id is not None:
            ordinal = self.ordinal_of(item.manage_id, item.card_number)
        if ordinal is None:
            return len(self._by_number.get(item.card_number.lower(), ()))
        return ordinal
