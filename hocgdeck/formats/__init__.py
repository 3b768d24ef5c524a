"""
Deck format adapters.

Each module converts one external deck format to and from CanonicalDeck.
"""

from hocgdeck.formats.base import (
    DeckFormatError,
    DeckParseError,
    ExportError,
    MissingIdentifierError,
)
from hocgdeck.formats.convert import (
    DETECTION_ORDER,
    DeckFormat,
    DetectedDeck,
    ExternalDeck,
    deck_model,
    detect_and_import,
    export_deck,
    format_of,
    from_canonical,
    import_deck,
    parse_deck,
    serialize_deck,
    to_canonical,
)
from hocgdeck.formats.deck_log import (
    GAME_TITLE_VIEW_URLS,
    DeckLogCard,
    DeckLogDeck,
    DeckLogError,
    InvalidDeckCodeError,
    parse_deck_log_url,
)
from hocgdeck.formats.holodelta import HoloDeltaDeck
from hocgdeck.formats.holoduel import HoloDuelDeck
from hocgdeck.formats.tabletop_sim import TabletopSimDeck

__all__ = [
    "DETECTION_ORDER",
    "GAME_TITLE_VIEW_URLS",
    "DeckFormat",
    "DeckFormatError",
    "DeckLogCard",
    "DeckLogDeck",
    "DeckLogError",
    "DeckParseError",
    "DetectedDeck",
    "ExportError",
    "ExternalDeck",
    "HoloDeltaDeck",
    "HoloDuelDeck",
    "InvalidDeckCodeError",
    "MissingIdentifierError",
    "TabletopSimDeck",
    "deck_model",
    "detect_and_import",
    "export_deck",
    "format_of",
    "from_canonical",
    "import_deck",
    "parse_deck",
    "parse_deck_log_url",
    "serialize_deck",
    "to_canonical",
]
