import json
from pathlib import Path

import httpx
import pytest
import respx

from hocgdeck.models.card import BloomLevel, CardType, DeckSection
from hocgdeck.services.card_database import (
    CardCatalogError,
    download_card_catalog,
    load_card_catalog,
    parse_card_catalog,
)

CATALOG_URL = "https://assets.test/hocg_cards.json"


@pytest.fixture
def sample_cards() -> list[dict]:
    """Sample catalog data in the published file layout."""
    return [
        {
            "card_number": "hSD01-001",
            "card_type": "oshi",
            "name": {"japanese": "ときのそら", "english": "Tokino Sora"},
            "colors": ["White"],
            "max_copies": 1,
            "oshi_skills": [{"name": {"english": "Replacement"}}],
            "illustrations": [
                {"manage_id": 1, "rarity": "OSR", "release_ja": "hSD01", "release_en": "hSD01"},
                {"manage_id": 101, "rarity": "SEC", "release_ja": "hBP01"},
            ],
        },
        {
            "card_number": "hSD01-003",
            "card_type": "holomem",
            "name": {"japanese": "ときのそら", "english": "Tokino Sora"},
            "bloom_level": "debut",
            "illustrations": [
                {
                    "manage_id": 3,
                    "image": "hSD01-003_C.webp",
                    "illustrator": "しぐれうい",
                    "yuyutei_sell_url": "https://yuyu-tei.jp/sell/hocg/card/hsd01/10003",
                },
            ],
        },
        {
            "card_number": "hY01-001",
            "card_type": "cheer",
            "max_copies": 20,
            "illustrations": [{"manage_id": 168, "card_number": "hY01-001"}],
        },
    ]


@pytest.fixture
def catalog_file(sample_cards: list[dict], tmp_path: Path) -> Path:
    """Write the sample catalog to a temporary file."""
    path = tmp_path / "hocg_cards.json"
    path.write_text(json.dumps(sample_cards, ensure_ascii=False), encoding="utf-8")
    return path


class TestParseCardCatalog:
    def test_keeps_catalog_order(self, sample_cards: list[dict]) -> None:
        catalog = parse_card_catalog(json.dumps(sample_cards))

        assert [entry.manage_id for entry in catalog] == [1, 101, 3, 168]

    def test_card_fields(self, sample_cards: list[dict]) -> None:
        catalog = parse_card_catalog(json.dumps(sample_cards))

        oshi = catalog.card_info("hsd01-001")
        assert oshi is not None
        assert oshi.card_type is CardType.OSHI
        assert oshi.colors == frozenset({"white"})
        assert oshi.oshi_skills[0].name.english == "Replacement"

        holomem = catalog.card_info("hSD01-003")
        assert holomem is not None
        assert holomem.bloom_level is BloomLevel.DEBUT

    def test_entries_inherit_card_data(self, sample_cards: list[dict]) -> None:
        catalog = parse_card_catalog(json.dumps(sample_cards))

        entry = catalog.get(101)
        assert entry is not None
        assert entry.card_number == "hSD01-001"
        assert entry.max_copies == 1
        assert entry.deck_section is DeckSection.OSHI
        assert entry.release_en is None

        cheer = catalog.get(168)
        assert cheer is not None
        assert cheer.deck_section is DeckSection.CHEER

    def test_image_and_illustrator(self, sample_cards: list[dict]) -> None:
        catalog = parse_card_catalog(json.dumps(sample_cards))

        entry = catalog.get(3)
        assert entry is not None
        assert entry.image_ref == "hSD01-003_C.webp"
        assert entry.illustrator == "しぐれうい"
        assert entry.yuyutei_sell_url == "https://yuyu-tei.jp/sell/hocg/card/hsd01/10003"

        oshi = catalog.get(1)
        assert oshi is not None
        assert oshi.yuyutei_sell_url is None

    def test_invalid_schema(self) -> None:
        with pytest.raises(CardCatalogError) as exc_info:
            parse_card_catalog('[{"card_number": "hSD01-001", "card_type": "dragon"}]')

        assert exc_info.value.source == "<memory>"

    def test_not_json(self) -> None:
        with pytest.raises(CardCatalogError):
            parse_card_catalog("not json", source="broken.json")

    def test_duplicate_manage_ids_keep_first(self, sample_cards: list[dict]) -> None:
        sample_cards[1]["illustrations"].append({"manage_id": 1})

        catalog = parse_card_catalog(json.dumps(sample_cards))

        entry = catalog.get(1)
        assert entry is not None
        assert entry.card_number == "hSD01-001"


class TestLoadCardCatalog:
    def test_load_from_file(self, catalog_file: Path) -> None:
        catalog = load_card_catalog(catalog_file)
        assert len(catalog) == 4

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError, match="download_cards"):
            load_card_catalog(tmp_path / "missing.json")


class TestDownloadCardCatalog:
    @respx.mock
    async def test_download_writes_file(self, sample_cards: list[dict], tmp_path: Path) -> None:
        respx.get(CATALOG_URL).mock(return_value=httpx.Response(200, json=sample_cards))
        output_path = tmp_path / "data" / "hocg_cards.json"

        path = await download_card_catalog(output_path=output_path, url=CATALOG_URL)

        assert path == output_path
        assert len(load_card_catalog(path)) == 4

    @respx.mock
    async def test_invalid_download_does_not_overwrite(self, catalog_file: Path) -> None:
        respx.get(CATALOG_URL).mock(return_value=httpx.Response(200, json={"cards": []}))
        before = catalog_file.read_bytes()

        with pytest.raises(CardCatalogError):
            await download_card_catalog(output_path=catalog_file, url=CATALOG_URL)

        assert catalog_file.read_bytes() == before

    @respx.mock
    async def test_http_error(self, tmp_path: Path) -> None:
        respx.get(CATALOG_URL).mock(return_value=httpx.Response(404))

        with pytest.raises(httpx.HTTPStatusError):
            await download_card_catalog(output_path=tmp_path / "cards.json", url=CATALOG_URL)
