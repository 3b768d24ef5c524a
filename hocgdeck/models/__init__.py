from hocgdeck.models.card import (
    BloomLevel,
    CardCatalog,
    CardInfo,
    CardType,
    CatalogEntry,
    DeckSection,
    LocalizedText,
    OshiSkill,
)
from hocgdeck.models.deck import (
    CanonicalDeck,
    LineItem,
    merge_ignoring_printing,
    merge_line_items,
)
from hocgdeck.models.failure import (
    UNKNOWN_FAILURE_MESSAGE,
    UNKNOWN_FAILURE_SUGGESTION,
    ApiResponse,
    FailureDetail,
    FailureKind,
    KnownError,
    OutcomeType,
)

__all__ = [
    "ApiResponse",
    "BloomLevel",
    "CanonicalDeck",
    "CardCatalog",
    "CardInfo",
    "CardType",
    "CatalogEntry",
    "DeckSection",
    "FailureDetail",
    "FailureKind",
    "KnownError",
    "LineItem",
    "LocalizedText",
    "OshiSkill",
    "OutcomeType",
    "UNKNOWN_FAILURE_MESSAGE",
    "UNKNOWN_FAILURE_SUGGESTION",
    "merge_ignoring_printing",
    "merge_line_items",
]
