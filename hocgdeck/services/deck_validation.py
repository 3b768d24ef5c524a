"""
Deck validation.

Produces human-readable warnings for a deck. Warnings never block editing or
conversion; a deck with warnings can still be exported (except to Deck Log,
which refuses unknown cards on its own).

All checks run independently and every applicable warning is returned, in a
fixed order:
1. unknown cards
2. missing oshi
3. main deck size
4. cheer deck size
5. copies per card number (main deck, any printing)
6. unreleased cards (only when unreleased cards are not allowed)
"""

import logging

from hocgdeck.config import CHEER_DECK_SIZE, DEFAULT_MAX_COPIES, MAIN_DECK_SIZE
from hocgdeck.models.card import CardCatalog
from hocgdeck.models.deck import CanonicalDeck, LineItem

logger = logging.getLogger(__name__)


def _size_warning(section: str, total: int, expected: int) -> str | None:
    if total < expected:
        return f"{section} has not enough cards ({total} / {expected})."
    if total > expected:
        return f"{section} has too many cards ({total} / {expected})."
    return None


def _max_copies(items: list[LineItem], catalog: CardCatalog) -> int:
    """Copy limit of a card number, from the first printing the catalog knows."""
    for item in items:
        if item.manage_id is None:
            continue
        entry = catalog.get(item.manage_id)
        if entry is not None:
            return entry.max_copies
    return DEFAULT_MAX_COPIES


def validate_deck(
    deck: CanonicalDeck,
    catalog: CardCatalog,
    allow_unreleased: bool = True,
) -> list[str]:
    """
    Compute deck warnings.

    Args:
        deck: Deck to check
        catalog: Card catalog for copy limits and release data
        allow_unreleased: When False, warn about printings not yet released

    Returns:
        Warning messages in check order, empty for a legal deck
    """
    warnings: list[str] = []

    if any(item.manage_id is None for item in deck.all_cards()):
        warnings.append("Contains unknown cards.")

    if deck.oshi is None or deck.oshi.manage_id is None:
        warnings.append("Missing oshi.")

    main_warning = _size_warning("Main deck", deck.main_deck_total(), MAIN_DECK_SIZE)
    if main_warning:
        warnings.append(main_warning)

    cheer_warning = _size_warning("Cheer deck", deck.cheer_deck_total(), CHEER_DECK_SIZE)
    if cheer_warning:
        warnings.append(cheer_warning)

    # Copy limits apply per card number, whatever the printing
    groups: dict[str, list[LineItem]] = {}
    for item in deck.main_deck:
        groups.setdefault(item.card_number.lower(), []).append(item)
    for items in groups.values():
        total = sum(item.amount for item in items)
        max_copies = _max_copies(items, catalog)
        if total > max_copies:
            warnings.append(
                f"Too many copies of {items[0].card_number} ({total} / {max_copies})."
            )

    if not allow_unreleased:
        for item in deck.all_cards():
            entry = catalog.get(item.manage_id) if item.manage_id is not None else None
            if entry is not None and not entry.is_released:
                warnings.append("Contains unreleased cards.")
                break

    logger.debug("Deck validation: %d warning(s)", len(warnings))
    return warnings
