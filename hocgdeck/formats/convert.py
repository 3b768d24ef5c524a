"""
Format dispatch.

The set of formats is closed: DeckFormat names them and ExternalDeck is the
union of their payload models. Every entry point pattern-matches on the
format so adding one is a visible, exhaustive change.
"""

import logging
from dataclasses import dataclass
from enum import Enum

from hocgdeck.formats.base import DeckParseError
from hocgdeck.formats.deck_log import DEFAULT_GAME_TITLE_ID, DeckLogDeck
from hocgdeck.formats.holodelta import HoloDeltaDeck
from hocgdeck.formats.holoduel import HoloDuelDeck
from hocgdeck.formats.tabletop_sim import TabletopSimDeck
from hocgdeck.models.card import CardCatalog
from hocgdeck.models.deck import CanonicalDeck

logger = logging.getLogger(__name__)

ExternalDeck = DeckLogDeck | HoloDeltaDeck | HoloDuelDeck | TabletopSimDeck


class DeckFormat(str, Enum):
    """Supported external deck formats."""

    DECK_LOG = "deck_log"
    HOLODELTA = "holo_delta"
    HOLODUEL = "holo_duel"
    TABLETOP_SIM = "hocg_tts"

    @property
    def display_name(self) -> str:
        return deck_model(self).FORMAT_NAME

    @property
    def file_suffix(self) -> str:
        """Suffix used for downloaded deck files."""
        match self:
            case DeckFormat.DECK_LOG:
                return "decklog.json"
            case DeckFormat.HOLODELTA:
                return "json"
            case DeckFormat.HOLODUEL:
                return "holoduel.json"
            case DeckFormat.TABLETOP_SIM:
                return "hocg_tts.json"


# Order tried when the user does not know the format of a file
DETECTION_ORDER: tuple[DeckFormat, ...] = (
    DeckFormat.HOLODELTA,
    DeckFormat.HOLODUEL,
    DeckFormat.TABLETOP_SIM,
)


def deck_model(
    deck_format: DeckFormat,
) -> type[DeckLogDeck] | type[HoloDeltaDeck] | type[HoloDuelDeck] | type[TabletopSimDeck]:
    """Payload model for a format."""
    match deck_format:
        case DeckFormat.DECK_LOG:
            return DeckLogDeck
        case DeckFormat.HOLODELTA:
            return HoloDeltaDeck
        case DeckFormat.HOLODUEL:
            return HoloDuelDeck
        case DeckFormat.TABLETOP_SIM:
            return TabletopSimDeck


def format_of(deck: ExternalDeck) -> DeckFormat:
    """Format tag of a parsed payload."""
    match deck:
        case DeckLogDeck():
            return DeckFormat.DECK_LOG
        case HoloDeltaDeck():
            return DeckFormat.HOLODELTA
        case HoloDuelDeck():
            return DeckFormat.HOLODUEL
        case TabletopSimDeck():
            return DeckFormat.TABLETOP_SIM
    raise TypeError(f"Not a deck payload: {type(deck).__name__}")


def parse_deck(
    deck_format: DeckFormat,
    data: bytes | str,
    fallback_format: DeckFormat | None = None,
) -> ExternalDeck:
    """
    Parse a payload in the given format.

    When fallback_format is set and the primary parse fails, the payload is
    tried once more as the fallback format. The primary error is raised if
    both fail.

    Raises:
        DeckParseError: If the payload is not valid for the format(s)
    """
    try:
        return deck_model(deck_format).parse(data)
    except DeckParseError:
        if fallback_format is None or fallback_format == deck_format:
            raise
        try:
            deck = deck_model(fallback_format).parse(data)
        except DeckParseError:
            pass
        else:
            logger.info("Fallback to %s", fallback_format.display_name)
            return deck
        raise


def serialize_deck(deck: ExternalDeck) -> bytes:
    """Compact UTF-8 JSON for a payload."""
    return deck.serialize()


def to_canonical(deck: ExternalDeck, catalog: CardCatalog) -> CanonicalDeck:
    """Convert any payload to the canonical deck."""
    return deck.to_canonical(catalog)


def from_canonical(
    deck_format: DeckFormat,
    deck: CanonicalDeck,
    catalog: CardCatalog,
    game_title_id: int = DEFAULT_GAME_TITLE_ID,
) -> ExternalDeck:
    """
    Convert the canonical deck to a payload.

    Raises:
        ExportError: If the format cannot represent the deck (Deck Log only)
    """
    match deck_format:
        case DeckFormat.DECK_LOG:
            return DeckLogDeck.from_canonical(deck, catalog, game_title_id=game_title_id)
        case DeckFormat.HOLODELTA:
            return HoloDeltaDeck.from_canonical(deck, catalog)
        case DeckFormat.HOLODUEL:
            return HoloDuelDeck.from_canonical(deck, catalog)
        case DeckFormat.TABLETOP_SIM:
            return TabletopSimDeck.from_canonical(deck, catalog)


def import_deck(
    deck_format: DeckFormat,
    data: bytes | str,
    catalog: CardCatalog,
    fallback_format: DeckFormat | None = None,
) -> CanonicalDeck:
    """Parse a payload and convert it to the canonical deck."""
    deck = parse_deck(deck_format, data, fallback_format=fallback_format)
    logger.debug("Imported %s deck", format_of(deck).display_name)
    return to_canonical(deck, catalog)


def export_deck(deck_format: DeckFormat, deck: CanonicalDeck, catalog: CardCatalog) -> bytes:
    """Convert the canonical deck to payload bytes."""
    return serialize_deck(from_canonical(deck_format, deck, catalog))


@dataclass
class DetectedDeck:
    """Result of importing a file of unknown format."""

    deck_format: DeckFormat
    deck: CanonicalDeck


def detect_and_import(data: bytes | str, catalog: CardCatalog) -> DetectedDeck:
    """
    Import a deck file whose format is unknown.

    Tries each JSON format in DETECTION_ORDER and keeps the first that parses.

    Raises:
        DeckParseError: If no format accepts the payload
    """
    for deck_format in DETECTION_ORDER:
        try:
            deck = deck_model(deck_format).parse(data)
        except DeckParseError:
            continue
        logger.debug("Detected deck file format: %s", deck_format.display_name)
        return DetectedDeck(deck_format=deck_format, deck=to_canonical(deck, catalog))

    raise DeckParseError("unknown", "Cannot parse deck file")
