import pytest

from hocgdeck.models.card import (
    BloomLevel,
    CardCatalog,
    CardInfo,
    CardType,
    CatalogEntry,
    LocalizedText,
    OshiSkill,
)
from hocgdeck.models.deck import CanonicalDeck, LineItem

UNLIMITED_JA = "このホロメンはデッキに何枚でも入れられる"
UNLIMITED_EN = "You may include any number of this holomem in the deck"
YUYUTEI_URL = "https://yuyu-tei.jp/sell/hocg/card"


def make_card(
    card_number: str,
    card_type: CardType,
    printings: list[dict],
    max_copies: int = 4,
    **fields,
) -> CardInfo:
    """CardInfo with one CatalogEntry per printing dict."""
    return CardInfo(
        card_number=card_number,
        card_type=card_type,
        max_copies=max_copies,
        illustrations=tuple(
            CatalogEntry(
                card_number=card_number,
                max_copies=max_copies,
                deck_section=card_type.deck_section,
                **printing,
            )
            for printing in printings
        ),
        **fields,
    )


def build_sample_catalog() -> CardCatalog:
    """
    A small catalog covering every card type.

    manage_ids: hSD01-001 -> 1, 101 | hSD01-002 -> 2 | hSD01-003 -> 3, 103, 203
    (203 unreleased) | hSD01-006 -> 6 | hBP01-009 -> 40 | hSD01-016 -> 16 |
    hSD01-018 -> 18 | hY01-001 -> 168, 1168 | hY02-001 -> 169

    Yuyutei sell URLs exist for 3, 103, 168 and 1168 only.
    """
    white_cheer = (LocalizedText("白", "White"),)
    return CardCatalog(
        [
            make_card(
                "hSD01-001",
                CardType.OSHI,
                [
                    {"manage_id": 1, "rarity": "OSR", "release_ja": "hSD01", "release_en": "hSD01"},
                    {"manage_id": 101, "rarity": "SEC", "release_ja": "hBP01"},
                ],
                max_copies=1,
                name=LocalizedText("ときのそら", "Tokino Sora"),
                colors=frozenset({"white"}),
                tags=(LocalizedText("#JP", "#JP"), LocalizedText("#0期生", "#Gen 0")),
                oshi_skills=(
                    OshiSkill(LocalizedText("リプレイスメント", "Replacement")),
                    OshiSkill(LocalizedText("ソラとAZKi", "SorAZ Sympathy"), special=True),
                ),
            ),
            make_card(
                "hSD01-002",
                CardType.OSHI,
                [{"manage_id": 2, "rarity": "OSR", "release_ja": "hSD01", "release_en": "hSD01"}],
                max_copies=1,
                name=LocalizedText("AZKi", "AZKi"),
                colors=frozenset({"green"}),
            ),
            make_card(
                "hSD01-003",
                CardType.HOLOMEM,
                [
                    {
                        "manage_id": 3,
                        "rarity": "C",
                        "release_ja": "hSD01",
                        "release_en": "hSD01",
                        "illustrator": "しぐれうい",
                        "yuyutei_sell_url": f"{YUYUTEI_URL}/hsd01/10003",
                    },
                    {
                        "manage_id": 103,
                        "rarity": "SR",
                        "release_ja": "hBP01",
                        "yuyutei_sell_url": f"{YUYUTEI_URL}/hbp01/10103",
                    },
                    {"manage_id": 203, "rarity": "S"},
                ],
                name=LocalizedText("ときのそら", "Tokino Sora"),
                colors=frozenset({"white"}),
                bloom_level=BloomLevel.DEBUT,
                tags=(LocalizedText("#JP", "#JP"), LocalizedText("#歌", "#Song")),
                text=LocalizedText("アーツ「(*>▽<*)」", "Arts (*>▽<*)"),
            ),
            make_card(
                "hSD01-006",
                CardType.HOLOMEM,
                [{"manage_id": 6, "rarity": "RR", "release_ja": "hSD01", "release_en": "hSD01"}],
                name=LocalizedText("ときのそら", "Tokino Sora"),
                colors=frozenset({"white"}),
                bloom_level=BloomLevel.FIRST,
                buzz=True,
            ),
            make_card(
                "hBP01-009",
                CardType.HOLOMEM,
                [{"manage_id": 40, "rarity": "C", "release_ja": "hBP01", "release_en": "hBP01"}],
                max_copies=50,
                name=LocalizedText("天音かなた", "Amane Kanata"),
                colors=frozenset({"white"}),
                bloom_level=BloomLevel.DEBUT,
                extra=LocalizedText(UNLIMITED_JA, UNLIMITED_EN),
            ),
            make_card(
                "hSD01-016",
                CardType.SUPPORT_STAFF,
                [{"manage_id": 16, "rarity": "C", "release_ja": "hSD01", "release_en": "hSD01"}],
                name=LocalizedText("春先のどか", "Harusaki Nodoka"),
                text=LocalizedText("自分のデッキを1枚引く。", "Draw a card."),
            ),
            make_card(
                "hSD01-018",
                CardType.SUPPORT_EVENT,
                [{"manage_id": 18, "rarity": "U", "release_ja": "hSD01", "release_en": "hSD01"}],
                name=LocalizedText("マネちゃん", "Mane-chan"),
                limited=True,
            ),
            make_card(
                "hY01-001",
                CardType.CHEER,
                [
                    {
                        "manage_id": 168,
                        "rarity": "C",
                        "release_ja": "hSD01",
                        "release_en": "hSD01",
                        "yuyutei_sell_url": f"{YUYUTEI_URL}/hy01/10168",
                    },
                    {
                        "manage_id": 1168,
                        "rarity": "P",
                        "release_ja": "hPR",
                        "yuyutei_sell_url": f"{YUYUTEI_URL}/hpr/11168",
                    },
                ],
                max_copies=20,
                name=LocalizedText("白エール", "White Cheer"),
                colors=frozenset({"white"}),
                tags=white_cheer,
            ),
            make_card(
                "hY02-001",
                CardType.CHEER,
                [{"manage_id": 169, "rarity": "C", "release_ja": "hSD01", "release_en": "hSD01"}],
                max_copies=20,
                name=LocalizedText("緑エール", "Green Cheer"),
                colors=frozenset({"green"}),
            ),
        ]
    )


@pytest.fixture
def catalog() -> CardCatalog:
    return build_sample_catalog()


@pytest.fixture
def legal_deck() -> CanonicalDeck:
    """50 main deck cards, 20 cheer, no warnings."""
    return CanonicalDeck(
        name="Sora",
        oshi=LineItem("hSD01-001", 1, 1),
        main_deck=[
            LineItem("hSD01-003", 4, 3),
            LineItem("hSD01-006", 4, 6),
            LineItem("hBP01-009", 34, 40),
            LineItem("hSD01-016", 4, 16),
            LineItem("hSD01-018", 4, 18),
        ],
        cheer_deck=[LineItem("hY01-001", 10, 168), LineItem("hY02-001", 10, 169)],
    )
