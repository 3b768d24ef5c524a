"""
Card catalog service.

Loads the card catalog JSON published by the hocg-fan-sim-assets pipeline.
The file is a list of cards, each with its printings in catalog order:

    [
        {
            "card_number": "hSD01-001",
            "card_type": "oshi",
            "name": {"japanese": "ときのそら", "english": "Tokino Sora"},
            "colors": ["white"],
            "max_copies": 1,
            "illustrations": [
                {"manage_id": 1, "rarity": "OSR", "release_ja": "hSD01", ...}
            ]
        },
        ...
    ]

The order of cards and illustrations in the file is the catalog order and is
never re-sorted.
"""

import logging
from pathlib import Path

import httpx
from pydantic import BaseModel, Field, TypeAdapter, ValidationError

from hocgdeck.config import settings
from hocgdeck.models.card import (
    BloomLevel,
    CardCatalog,
    CardInfo,
    CardType,
    CatalogEntry,
    LocalizedText,
    OshiSkill,
)

logger = logging.getLogger(__name__)

DATA_DIR = Path(__file__).parent.parent / "data"
CATALOG_FILE_NAME = "hocg_cards.json"


class CardCatalogError(Exception):
    """Raised when the catalog file is not a valid card list."""

    def __init__(self, source: str, message: str) -> None:
        self.source = source
        self.message = message
        super().__init__(f"Invalid card catalog {source}: {message}")


# =============================================================================
# CATALOG FILE SCHEMA
# =============================================================================


class CatalogText(BaseModel):
    japanese: str | None = None
    english: str | None = None

    def to_localized(self) -> LocalizedText:
        return LocalizedText(japanese=self.japanese, english=self.english)


class CatalogOshiSkill(BaseModel):
    name: CatalogText = Field(default_factory=CatalogText)
    special: bool = False


class CatalogIllustration(BaseModel):
    manage_id: int
    card_number: str | None = None
    image: str = ""
    rarity: str = ""
    illustrator: str | None = None
    release_ja: str | None = None
    release_en: str | None = None
    alt_art_index: int | None = None
    yuyutei_sell_url: str | None = None


class CatalogCard(BaseModel):
    card_number: str
    card_type: CardType
    name: CatalogText = Field(default_factory=CatalogText)
    colors: list[str] = Field(default_factory=list)
    bloom_level: BloomLevel | None = None
    buzz: bool = False
    limited: bool = False
    tags: list[CatalogText] = Field(default_factory=list)
    oshi_skills: list[CatalogOshiSkill] = Field(default_factory=list)
    extra: CatalogText = Field(default_factory=CatalogText)
    text: CatalogText = Field(default_factory=CatalogText)
    max_copies: int = 4
    illustrations: list[CatalogIllustration] = Field(default_factory=list)

    def to_card_info(self) -> CardInfo:
        section = self.card_type.deck_section
        return CardInfo(
            card_number=self.card_number,
            card_type=self.card_type,
            name=self.name.to_localized(),
            colors=frozenset(color.lower() for color in self.colors),
            bloom_level=self.bloom_level,
            buzz=self.buzz,
            limited=self.limited,
            tags=tuple(tag.to_localized() for tag in self.tags),
            oshi_skills=tuple(
                OshiSkill(name=skill.name.to_localized(), special=skill.special)
                for skill in self.oshi_skills
            ),
            extra=self.extra.to_localized(),
            text=self.text.to_localized(),
            max_copies=self.max_copies,
            illustrations=tuple(
                CatalogEntry(
                    manage_id=illustration.manage_id,
                    card_number=illustration.card_number or self.card_number,
                    image_ref=illustration.image,
                    max_copies=self.max_copies,
                    deck_section=section,
                    rarity=illustration.rarity,
                    illustrator=illustration.illustrator,
                    release_ja=illustration.release_ja,
                    release_en=illustration.release_en,
                    alt_art_index=illustration.alt_art_index,
                    yuyutei_sell_url=illustration.yuyutei_sell_url,
                )
                for illustration in self.illustrations
            ),
        )


_CATALOG_ADAPTER = TypeAdapter(list[CatalogCard])


# =============================================================================
# LOADING
# =============================================================================


def default_catalog_path() -> Path:
    """Configured catalog file, or data/hocg_cards.json."""
    if settings.catalog_path:
        return Path(settings.catalog_path)
    return DATA_DIR / CATALOG_FILE_NAME


def parse_card_catalog(data: bytes | str, source: str = "<memory>") -> CardCatalog:
    """
    Build a catalog from catalog JSON.

    Raises:
        CardCatalogError: If the JSON does not match the catalog schema
    """
    try:
        cards = _CATALOG_ADAPTER.validate_json(data)
    except ValidationError as e:
        raise CardCatalogError(source, str(e)) from e

    catalog = CardCatalog(card.to_card_info() for card in cards)
    if len(catalog) < sum(len(card.illustrations) for card in cards):
        logger.warning("Card catalog %s has duplicate manage_ids; first ones kept", source)
    logger.info("Loaded %d printings from %s", len(catalog), source)
    return catalog


def load_card_catalog(path: Path | None = None) -> CardCatalog:
    """
    Load the card catalog from a file.

    Args:
        path: Path to the catalog JSON. Defaults to default_catalog_path()

    Raises:
        FileNotFoundError: If the catalog file doesn't exist
        CardCatalogError: If the file is not a valid catalog
    """
    if path is None:
        path = default_catalog_path()

    if not path.exists():
        raise FileNotFoundError(
            f"Card catalog not found at {path}. "
            "Run `python -m hocgdeck.jobs.download_cards` first."
        )

    return parse_card_catalog(path.read_bytes(), source=str(path))


async def download_card_catalog(
    output_path: Path | None = None,
    url: str | None = None,
) -> Path:
    """
    Download the latest card catalog.

    Args:
        output_path: Where to save the file. Defaults to default_catalog_path()
        url: Catalog URL. Defaults to settings.catalog_url

    Returns:
        Path to the downloaded file

    Raises:
        CardCatalogError: If the downloaded file is not a valid catalog
        httpx.HTTPError: If the download fails
    """
    if output_path is None:
        output_path = default_catalog_path()
    if url is None:
        url = settings.catalog_url

    output_path.parent.mkdir(parents=True, exist_ok=True)

    logger.info("Downloading card catalog from %s", url)
    async with httpx.AsyncClient(timeout=settings.http_timeout) as client:
        response = await client.get(url, follow_redirects=True)
        response.raise_for_status()

    # Refuse to overwrite a good catalog with a broken one
    parse_card_catalog(response.content, source=url)
    output_path.write_bytes(response.content)

    return output_path
