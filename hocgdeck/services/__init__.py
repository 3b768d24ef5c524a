"""
Deck and card services.

The Deck Log client and the price checker are not re-exported here: they
depend on the format adapters, which themselves depend on the card resolver
in this package. Import them from hocgdeck.services.deck_log_client and
hocgdeck.services.price_check.
"""

from hocgdeck.services.card_database import (
    CardCatalogError,
    download_card_catalog,
    load_card_catalog,
    parse_card_catalog,
)
from hocgdeck.services.card_resolver import CardResolver
from hocgdeck.services.card_search import (
    BloomLevelFilter,
    CardFilters,
    CardSearchEngine,
    CardSearchResult,
    CardTypeFilter,
    ReleaseFilter,
    TextField,
    TextFilter,
    has_unlimited_copies_text,
    multi_check,
    multi_check_localized,
    tokenize_query,
)
from hocgdeck.services.deck_validation import validate_deck
from hocgdeck.services.text_normalizer import TextNormalizer, katakana_to_hiragana, normalize_text

__all__ = [
    "BloomLevelFilter",
    "CardCatalogError",
    "CardFilters",
    "CardResolver",
    "CardSearchEngine",
    "CardSearchResult",
    "CardTypeFilter",
    "ReleaseFilter",
    "TextField",
    "TextFilter",
    "TextNormalizer",
    "download_card_catalog",
    "has_unlimited_copies_text",
    "katakana_to_hiragana",
    "load_card_catalog",
    "multi_check",
    "multi_check_localized",
    "normalize_text",
    "parse_card_catalog",
    "tokenize_query",
    "validate_deck",
]
