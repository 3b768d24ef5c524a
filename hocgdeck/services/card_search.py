"""
Card search service.

Filters the card catalog down to a list of illustrations while a deck is
being built. The host re-runs the whole pipeline on every keystroke; the
catalog is small enough that full recomputation is fine, and normalized text
is cached by the engine's TextNormalizer.

Query syntax:
- words are matched independently (every word must be found)
- "double quoted phrases" are matched as one token, spaces included, without
  katakana/hiragana folding
- an unterminated quote is treated as plain words

Pipeline (each stage narrows the previous one):
 1. name            6. tag
 2. oshi skill      7. free text (card text, or illustrator per illustration)
 3. card type       8. rarity
 4. color           9. release
 5. bloom level    10. illustration deduplication

Results keep catalog order. There is no relevance ranking.
"""

import logging
import sys
from collections.abc import Iterable
from dataclasses import dataclass, field, replace
from enum import Enum
from functools import cached_property

from hocgdeck.models.card import (
    BloomLevel,
    CardCatalog,
    CardInfo,
    CardType,
    CatalogEntry,
    LocalizedText,
)
from hocgdeck.services.text_normalizer import TextNormalizer, normalize_text

logger = logging.getLogger(__name__)

QUOTE = '"'

# Dedup fallback when the catalog has no alternate-art index: earlier
# positions get larger keys, so each position stays its own group
DEDUP_KEY_MAX = sys.maxsize

# Extra text printed on debut holomems that may be included in any number.
# There is no catalog flag for this, so the two printed sentences are matched.
UNLIMITED_COPIES_TEXTS: frozenset[str] = frozenset(
    {
        "このホロメンはデッキに何枚でも入れられる",
        "You may include any number of this holomem in the deck",
    }
)


class TextField(str, Enum):
    """Which part of a card a text filter looks at."""

    ALL = "all"
    CARD_NAME = "card_name"
    OSHI_SKILL_NAME = "oshi_skill_name"
    TAG = "tag"


class CardTypeFilter(str, Enum):
    ALL = "all"
    OSHI = "oshi"
    HOLOMEM = "holomem"
    SUPPORT = "support"
    SUPPORT_STAFF = "support_staff"
    SUPPORT_ITEM = "support_item"
    SUPPORT_EVENT = "support_event"
    SUPPORT_TOOL = "support_tool"
    SUPPORT_MASCOT = "support_mascot"
    SUPPORT_FAN = "support_fan"
    SUPPORT_LIMITED = "support_limited"
    CHEER = "cheer"

    def matches(self, card: CardInfo) -> bool:
        match self:
            case CardTypeFilter.ALL:
                return True
            case CardTypeFilter.SUPPORT:
                return card.card_type.is_support
            case CardTypeFilter.SUPPORT_LIMITED:
                return card.card_type.is_support and card.limited
            case _:
                return card.card_type.value == self.value


class BloomLevelFilter(str, Enum):
    ALL = "all"
    DEBUT = "debut"
    DEBUT_UNLIMITED = "debut_unlimited"
    FIRST = "first"
    FIRST_BUZZ = "first_buzz"
    SECOND = "second"
    SPOT = "spot"

    def matches(self, card: CardInfo) -> bool:
        match self:
            case BloomLevelFilter.ALL:
                return True
            case BloomLevelFilter.DEBUT_UNLIMITED:
                return card.bloom_level is BloomLevel.DEBUT and has_unlimited_copies_text(card)
            case BloomLevelFilter.FIRST_BUZZ:
                return card.bloom_level is BloomLevel.FIRST and card.buzz
            case _:
                return card.bloom_level is not None and card.bloom_level.value == self.value


class ReleaseFilter(str, Enum):
    ALL = "all"
    JAPANESE = "japanese"
    ENGLISH = "english"
    UNRELEASED = "unreleased"

    def matches(self, entry: CatalogEntry) -> bool:
        match self:
            case ReleaseFilter.ALL:
                return True
            case ReleaseFilter.JAPANESE:
                return entry.release_ja is not None
            case ReleaseFilter.ENGLISH:
                return entry.release_en is not None
            case ReleaseFilter.UNRELEASED:
                return not entry.is_released


# Rarity filter values besides an exact rarity label
ALL_RARITIES = "all"
NO_ALT_ART = "no_alt_art"


def has_unlimited_copies_text(card: CardInfo) -> bool:
    """True when the card's extra text says any number of copies is allowed."""
    return any(text.strip() in UNLIMITED_COPIES_TEXTS for text in card.extra.values())


# =============================================================================
# QUERY TOKENS AND TEXT FILTERS
# =============================================================================


@dataclass(frozen=True, slots=True)
class QueryToken:
    """A search token; exact tokens come from double-quoted phrases."""

    text: str
    exact: bool = False


def tokenize_query(query: str) -> list[QueryToken]:
    """
    Split a query into loose words and exact quoted phrases.

    Segments between a pair of double quotes become one exact token with its
    spaces preserved. Everything else is split on whitespace. A trailing
    quote without its closing pair does not swallow input: its segment is
    split into loose words. Empty tokens are dropped.
    """
    segments = query.split(QUOTE)
    # An even number of segments means an odd number of quotes
    unterminated = len(segments) % 2 == 0

    tokens: list[QueryToken] = []
    for index, segment in enumerate(segments):
        quoted = index % 2 == 1
        if quoted and not (unterminated and index == len(segments) - 1):
            if segment.strip():
                tokens.append(QueryToken(text=segment, exact=True))
            continue
        tokens.extend(QueryToken(text=word) for word in segment.split())
    return tokens


@dataclass(frozen=True)
class TextFilter:
    """
    One search token applied to one field.

    Attributes:
        token: Raw token text
        field: Card field searched
        full_match: Token must equal the whole field instead of a substring
        exact_match: Compare without katakana/hiragana folding
        case_sensitive: Keep letter case
    """

    token: str
    field: TextField = TextField.ALL
    full_match: bool = False
    exact_match: bool = False
    case_sensitive: bool = False

    def loosened(self) -> "TextFilter":
        """Same token in plain substring mode."""
        return replace(self, full_match=False, exact_match=False)

    @cached_property
    def needle(self) -> str:
        # Query tokens stay out of the engine's normalizer cache
        return normalize_text(
            self.token, case_sensitive=self.case_sensitive, exact=self.exact_match
        )

    def matches(self, normalized_text: str) -> bool:
        """Check against text already normalized for this filter's group."""
        if self.full_match:
            return self.needle == normalized_text
        return self.needle in normalized_text


def build_text_filters(
    query: str,
    field: TextField,
    full_match: bool = False,
    case_sensitive: bool = False,
) -> list[TextFilter]:
    """Tokenize a query into text filters for one field."""
    return [
        TextFilter(
            token=token.text,
            field=field,
            full_match=full_match,
            exact_match=token.exact,
            case_sensitive=case_sensitive,
        )
        for token in tokenize_query(query)
    ]


def multi_check(filters: Iterable[TextFilter], text: str, normalizer: TextNormalizer) -> bool:
    """
    True when every filter matches the text.

    Filters are grouped by (case_sensitive, exact_match) so the text is
    normalized once per group.
    """
    groups: dict[tuple[bool, bool], list[TextFilter]] = {}
    for text_filter in filters:
        key = (text_filter.case_sensitive, text_filter.exact_match)
        groups.setdefault(key, []).append(text_filter)

    for (case_sensitive, exact), group in groups.items():
        normalized = normalizer.normalize(text, case_sensitive=case_sensitive, exact=exact)
        if not all(text_filter.matches(normalized) for text_filter in group):
            return False
    return True


def multi_check_localized(
    filters: list[TextFilter], text: LocalizedText, normalizer: TextNormalizer
) -> bool:
    """True when either language satisfies every filter."""
    if not filters:
        return True
    return any(multi_check(filters, value, normalizer) for value in text.values())


# =============================================================================
# SEARCH
# =============================================================================


@dataclass
class CardFilters:
    """
    Everything the user can filter on.

    Text queries use the syntax described in the module docstring. Empty
    queries and "all" values disable their stage.
    """

    name: str = ""
    oshi_skill: str = ""
    tag: str = ""
    text: str = ""
    full_match: bool = False
    case_sensitive: bool = False
    card_type: CardTypeFilter = CardTypeFilter.ALL
    color: str | None = None
    bloom_level: BloomLevelFilter = BloomLevelFilter.ALL
    rarity: str = ALL_RARITIES
    release: ReleaseFilter = ReleaseFilter.ALL

    def text_filters(self, text_field: TextField) -> list[TextFilter]:
        query = {
            TextField.ALL: self.text,
            TextField.CARD_NAME: self.name,
            TextField.OSHI_SKILL_NAME: self.oshi_skill,
            TextField.TAG: self.tag,
        }[text_field]
        return build_text_filters(
            query,
            text_field,
            full_match=self.full_match,
            case_sensitive=self.case_sensitive,
        )


@dataclass(frozen=True)
class CardSearchResult:
    """An illustration matching the filters, with its position in its card."""

    entry: CatalogEntry
    position: int
    card: CardInfo = field(repr=False)


def card_search_text(card: CardInfo) -> str:
    """Everything searchable on a card, one field per line."""
    parts: list[str] = [card.card_number]
    parts.extend(card.name.values())
    for tag in card.tags:
        parts.extend(tag.values())
    for skill in card.oshi_skills:
        parts.extend(skill.name.values())
    parts.extend(card.extra.values())
    parts.extend(card.text.values())
    return "\n".join(parts)


class CardSearchEngine:
    """
    Filter pipeline over one catalog.

    Owns the normalizer cache and the per-card search text cache; create one
    engine per catalog.
    """

    def __init__(self, catalog: CardCatalog, normalizer: TextNormalizer | None = None) -> None:
        self._catalog = catalog
        self._normalizer = normalizer or TextNormalizer()
        self._card_text: dict[str, str] = {}

    @property
    def normalizer(self) -> TextNormalizer:
        return self._normalizer

    def card_text(self, card: CardInfo) -> str:
        """Cached whole-card search text."""
        key = card.card_number.lower()
        text = self._card_text.get(key)
        if text is None:
            text = card_search_text(card)
            self._card_text[key] = text
        return text

    def search(
        self, filters: CardFilters, max_results: int | None = None
    ) -> list[CardSearchResult]:
        """
        Run the filter pipeline.

        Args:
            filters: User filters
            max_results: Truncate the result list (None keeps everything)

        Returns:
            Matching illustrations in catalog order, deduplicated
        """
        name_filters = filters.text_filters(TextField.CARD_NAME)
        skill_filters = filters.text_filters(TextField.OSHI_SKILL_NAME)
        tag_filters = filters.text_filters(TextField.TAG)
        text_filters = filters.text_filters(TextField.ALL)

        matches: list[CardSearchResult] = []
        for card in self._catalog.cards():
            if name_filters and not self._match_name(card, name_filters):
                continue
            if skill_filters and not any(
                multi_check_localized(skill_filters, skill.name, self._normalizer)
                for skill in card.oshi_skills
            ):
                continue
            if not filters.card_type.matches(card):
                continue
            if filters.color and filters.color.lower() not in {c.lower() for c in card.colors}:
                continue
            if not filters.bloom_level.matches(card):
                continue
            if tag_filters and not any(
                multi_check_localized(tag_filters, tag, self._normalizer) for tag in card.tags
            ):
                continue

            # Cheap card-level check first; illustrator names are per illustration
            card_text_match = not text_filters or multi_check(
                text_filters, self.card_text(card), self._normalizer
            )

            for position, entry in enumerate(card.illustrations):
                if not card_text_match and not multi_check(
                    text_filters, entry.illustrator or "", self._normalizer
                ):
                    continue
                if not self._match_rarity(card, entry, position, filters):
                    continue
                if not filters.release.matches(entry):
                    continue
                matches.append(CardSearchResult(entry=entry, position=position, card=card))

        results = deduplicate_illustrations(matches, no_alt_art=filters.rarity == NO_ALT_ART)
        logger.debug("Card search: %d matches, %d after dedup", len(matches), len(results))

        if max_results is not None:
            results = results[:max_results]
        return results

    def _match_name(self, card: CardInfo, filters: list[TextFilter]) -> bool:
        if multi_check_localized(filters, card.name, self._normalizer):
            return True
        # The extra text mentions names inside a sentence, so only substrings can match
        loose = [text_filter.loosened() for text_filter in filters]
        return multi_check_localized(loose, card.extra, self._normalizer)

    @staticmethod
    def _match_rarity(
        card: CardInfo, entry: CatalogEntry, position: int, filters: CardFilters
    ) -> bool:
        if filters.rarity == ALL_RARITIES:
            return True
        if filters.rarity != NO_ALT_ART:
            return entry.rarity == filters.rarity

        if card.card_type is CardType.CHEER:
            return entry.card_number.endswith("001")
        # The first printing is usually the released one; it must not hide
        # unreleased printings when those are asked for
        if filters.release is ReleaseFilter.UNRELEASED:
            return True
        return position == 0


def dedup_key(result: CardSearchResult, no_alt_art: bool) -> int:
    """Grouping key of an illustration within its card number."""
    if no_alt_art:
        return 0
    if result.entry.alt_art_index is not None:
        return result.entry.alt_art_index
    return DEDUP_KEY_MAX - result.position


def deduplicate_illustrations(
    results: Iterable[CardSearchResult], no_alt_art: bool = False
) -> list[CardSearchResult]:
    """Keep the first illustration of each (card_number, dedup_key) group."""
    seen: set[tuple[str, int]] = set()
    kept: list[CardSearchResult] = []
    for result in results:
        key = (result.entry.card_number.lower(), dedup_key(result, no_alt_art))
        if key in seen:
            continue
        seen.add(key)
        kept.append(result)
    return kept
