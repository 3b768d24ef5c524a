"""
Card catalog models.

The catalog is produced by a separate data pipeline and is read-only at
runtime. Two levels are modeled:

- CardInfo: data shared by every printing of a card (name, type, colors...)
- CatalogEntry: one printing / illustration, keyed by manage_id

INVARIANTS:
- Catalog iteration order is the insertion order of manage_ids and is never
  re-sorted. Ordinals ("rarity order") are positions in that order.
- All models are frozen (immutable after construction)
"""

from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from enum import Enum


class DeckSection(str, Enum):
    """Deck section a card belongs to."""

    OSHI = "oshi"
    MAIN = "main"
    CHEER = "cheer"


class CardType(str, Enum):
    """Card type as printed, with support sub-types flattened."""

    OSHI = "oshi"
    HOLOMEM = "holomem"
    SUPPORT_STAFF = "support_staff"
    SUPPORT_ITEM = "support_item"
    SUPPORT_EVENT = "support_event"
    SUPPORT_TOOL = "support_tool"
    SUPPORT_MASCOT = "support_mascot"
    SUPPORT_FAN = "support_fan"
    CHEER = "cheer"

    @property
    def is_support(self) -> bool:
        return self.value.startswith("support_")

    @property
    def deck_section(self) -> DeckSection:
        if self is CardType.OSHI:
            return DeckSection.OSHI
        if self is CardType.CHEER:
            return DeckSection.CHEER
        return DeckSection.MAIN


class BloomLevel(str, Enum):
    """Bloom level of a holomem card."""

    DEBUT = "debut"
    FIRST = "first"
    SECOND = "second"
    SPOT = "spot"


@dataclass(frozen=True, slots=True)
class LocalizedText:
    """A string available in Japanese and/or English."""

    japanese: str | None = None
    english: str | None = None

    def values(self) -> list[str]:
        """All non-empty translations, Japanese first."""
        return [text for text in (self.japanese, self.english) if text]

    def display(self) -> str:
        return self.english or self.japanese or ""


@dataclass(frozen=True, slots=True)
class OshiSkill:
    """An oshi or SP oshi skill."""

    name: LocalizedText
    special: bool = False


@dataclass(frozen=True, slots=True)
class CatalogEntry:
    """
    One printing (illustration) of a card.

    Attributes:
        manage_id: Catalog primary key for this printing
        card_number: Card number printed on this illustration (e.g. "hSD01-001")
        image_ref: Image path or URL for the illustration
        max_copies: Copies allowed in a deck for this card number
        deck_section: Section the card goes in
        rarity: Rarity label (e.g. "RR", "OSR", "SEC")
        illustrator: Illustrator credit, if known
        release_ja: Japanese release identifier, None when unreleased in Japanese
        release_en: English release identifier, None when unreleased in English
        alt_art_index: Explicit alternate-art index when the catalog provides one
        yuyutei_sell_url: Yuyutei shop page for this printing, used for price checks
    """

    manage_id: int
    card_number: str
    image_ref: str = ""
    max_copies: int = 4
    deck_section: DeckSection = DeckSection.MAIN
    rarity: str = ""
    illustrator: str | None = None
    release_ja: str | None = None
    release_en: str | None = None
    alt_art_index: int | None = None
    yuyutei_sell_url: str | None = None

    @property
    def is_released(self) -> bool:
        return self.release_ja is not None or self.release_en is not None


@dataclass(frozen=True)
class CardInfo:
    """
    Card-level data shared by all printings of one card.

    Illustrations are kept in catalog order; the index of an illustration in
    this tuple is its position used by search and rarity ordering.
    """

    card_number: str
    card_type: CardType
    name: LocalizedText = field(default_factory=LocalizedText)
    colors: frozenset[str] = frozenset()
    bloom_level: BloomLevel | None = None
    buzz: bool = False
    limited: bool = False
    tags: tuple[LocalizedText, ...] = ()
    oshi_skills: tuple[OshiSkill, ...] = ()
    extra: LocalizedText = field(default_factory=LocalizedText)
    text: LocalizedText = field(default_factory=LocalizedText)
    max_copies: int = 4
    illustrations: tuple[CatalogEntry, ...] = ()


class CardCatalog:
    """
    Ordered, read-only card catalog.

    Maps manage_id -> CatalogEntry in insertion order, and card_number ->
    CardInfo for card-level data.
    """

    def __init__(self, cards: Iterable[CardInfo] = ()) -> None:
        self._cards: dict[str, CardInfo] = {}
        self._entries: dict[int, CatalogEntry] = {}
        self._card_by_manage_id: dict[int, CardInfo] = {}

        for card in cards:
            self._cards.setdefault(card.card_number.lower(), card)
            for entry in card.illustrations:
                if entry.manage_id in self._entries:
                    continue
                self._entries[entry.manage_id] = entry
                self._card_by_manage_id[entry.manage_id] = card

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[CatalogEntry]:
        return iter(self._entries.values())

    def __contains__(self, manage_id: object) -> bool:
        return manage_id in self._entries

    def get(self, manage_id: int) -> CatalogEntry | None:
        return self._entries.get(manage_id)

    def cards(self) -> Iterator[CardInfo]:
        """Iterate card-level data in catalog order."""
        return iter(self._cards.values())

    def card_info(self, card_number: str) -> CardInfo | None:
        """Card-level data for a card number (case-insensitive)."""
        return self._cards.get(card_number.lower())

    def card_for_entry(self, entry: CatalogEntry) -> CardInfo | None:
        """Card-level data owning a printing."""
        return self._card_by_manage_id.get(entry.manage_id)
