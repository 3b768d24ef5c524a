"""
Starter deck presets.

Official start decks, listed as printed in the box, so a user can begin from
one instead of an empty deck. Each card is identified by card number and
manage_id; a printing missing from the loaded catalog is kept as an unknown
card rather than dropped.

The catalog numbers printings in one Japanese id space, so English decks list
card numbers only and take the first printing released in English.
"""

from dataclasses import dataclass

from hocgdeck.models.card import CardCatalog
from hocgdeck.models.deck import CanonicalDeck, LineItem
from hocgdeck.services.card_resolver import CardResolver

# (card_number, manage_id, amount); manage_id is None in English presets
PresetCard = tuple[str, int | None, int]


@dataclass(frozen=True, slots=True)
class StarterDeckPreset:
    """A start deck as printed."""

    deck_id: str
    display: str
    name: str
    oshi: PresetCard
    main_deck: tuple[PresetCard, ...]
    cheer_deck: tuple[PresetCard, ...]
    # Alternative oshi shipped in the same box
    oshi_options: tuple[PresetCard, ...] = ()
    english: bool = False


@dataclass
class StarterDeck:
    """A preset resolved against the loaded catalog."""

    deck_id: str
    display: str
    deck: CanonicalDeck
    oshi_options: list[LineItem]


STARTER_DECK_PRESETS: tuple[StarterDeckPreset, ...] = (
    StarterDeckPreset(
        deck_id="hSD01-001",
        display="hSD01 - Start Deck「Tokino Sora & AZKi」",
        name="Start Deck「Tokino Sora & AZKi」",
        oshi=("hSD01-001", 1, 1),
        oshi_options=(("hSD01-001", 1, 1), ("hSD01-002", 2, 1)),
        main_deck=(
            ("hSD01-003", 3, 4),
            ("hSD01-004", 4, 3),
            ("hSD01-005", 5, 3),
            ("hSD01-006", 6, 2),
            ("hSD01-007", 7, 2),
            ("hSD01-008", 8, 4),
            ("hSD01-009", 9, 3),
            ("hSD01-010", 10, 3),
            ("hSD01-011", 11, 2),
            ("hSD01-012", 12, 2),
            ("hSD01-013", 13, 2),
            ("hSD01-014", 14, 2),
            ("hSD01-015", 15, 2),
            ("hSD01-016", 16, 3),
            ("hSD01-017", 17, 3),
            ("hSD01-018", 18, 3),
            ("hSD01-019", 19, 3),
            ("hSD01-020", 20, 2),
            ("hSD01-021", 21, 2),
        ),
        cheer_deck=(("hY01-001", 168, 10), ("hY02-001", 169, 10)),
    ),
    StarterDeckPreset(
        deck_id="hSD01-001-EN",
        display="hSD01 - Start Deck「Tokino Sora & AZKi」(EN)",
        name="Start Deck「Tokino Sora & AZKi」",
        english=True,
        oshi=("hSD01-001", None, 1),
        oshi_options=(("hSD01-001", None, 1), ("hSD01-002", None, 1)),
        main_deck=(
            ("hBP01-021", None, 4),
            ("hSD01-004", None, 3),
            ("hSD01-005", None, 3),
            ("hSD01-006", None, 2),
            ("hSD01-007", None, 2),
            ("hBP01-044", None, 4),
            ("hSD01-009", None, 3),
            ("hSD01-010", None, 3),
            ("hSD01-011", None, 2),
            ("hSD01-012", None, 2),
            ("hSD01-013", None, 2),
            ("hSD01-014", None, 2),
            ("hSD01-015", None, 2),
            ("hSD01-016", None, 3),
            ("hSD01-017", None, 3),
            ("hBP01-104", None, 2),
            ("hSD01-018", None, 2),
            ("hSD01-019", None, 2),
            ("hSD01-020", None, 2),
            ("hSD01-021", None, 2),
        ),
        cheer_deck=(("hY01-001", None, 10), ("hY02-001", None, 10)),
    ),
    StarterDeckPreset(
        deck_id="hSD02-001",
        display="hSD02 - Start Deck (Red) Nakiri Ayame",
        name="Start Deck (Red) Nakiri Ayame",
        oshi=("hSD02-001", 225, 1),
        main_deck=(
            ("hSD02-002", 226, 6),
            ("hSD02-003", 227, 4),
            ("hSD02-004", 228, 2),
            ("hSD02-005", 229, 4),
            ("hSD02-006", 230, 4),
            ("hSD02-007", 231, 2),
            ("hSD02-008", 232, 2),
            ("hSD02-009", 233, 2),
            ("hSD02-010", 234, 2),
            ("hSD02-011", 235, 2),
            ("hSD02-012", 236, 4),
            ("hSD02-013", 237, 2),
            ("hSD02-014", 238, 2),
            ("hBP01-104", 145, 1),
            ("hBP01-108", 149, 1),
            ("hSD01-016", 16, 4),
            ("hSD01-017", 17, 2),
            ("hSD01-018", 18, 4),
        ),
        cheer_deck=(("hY03-001", 170, 20),),
    ),
    StarterDeckPreset(
        deck_id="hSD03-001",
        display="hSD03 - Start Deck (Blue) Nekomata Okayu",
        name="Start Deck (Blue) Nekomata Okayu",
        oshi=("hSD03-001", 239, 1),
        main_deck=(
            ("hSD03-002", 240, 6),
            ("hSD03-003", 241, 4),
            ("hSD03-004", 242, 2),
            ("hSD03-005", 243, 4),
            ("hSD03-006", 244, 4),
            ("hSD03-007", 245, 2),
            ("hSD03-008", 246, 2),
            ("hSD03-009", 247, 2),
            ("hSD03-010", 248, 2),
            ("hSD03-011", 249, 2),
            ("hSD03-012", 250, 4),
            ("hSD03-013", 251, 2),
            ("hSD03-014", 252, 2),
            ("hBP01-105", 146, 2),
            ("hBP01-108", 149, 2),
            ("hSD01-016", 16, 4),
            ("hSD01-017", 17, 2),
            ("hSD01-019", 19, 2),
        ),
        cheer_deck=(("hY04-001", 171, 20),),
    ),
    StarterDeckPreset(
        deck_id="hSD04-001",
        display="hSD04 - Start Deck (Purple) Yuzuki Choco",
        name="Start Deck (Purple) Yuzuki Choco",
        oshi=("hSD04-001", 253, 1),
        main_deck=(
            ("hSD04-002", 254, 6),
            ("hSD04-003", 255, 4),
            ("hSD04-004", 256, 2),
            ("hSD04-005", 257, 4),
            ("hSD04-006", 258, 4),
            ("hSD04-007", 259, 2),
            ("hSD04-008", 260, 2),
            ("hSD04-009", 261, 2),
            ("hSD04-010", 262, 2),
            ("hSD04-011", 263, 2),
            ("hSD04-012", 264, 4),
            ("hSD04-013", 265, 2),
            ("hSD04-014", 266, 2),
            ("hBP01-104", 145, 2),
            ("hBP01-106", 147, 2),
            ("hSD01-016", 16, 4),
            ("hSD01-017", 17, 2),
            ("hSD01-019", 19, 2),
        ),
        cheer_deck=(("hY05-001", 267, 20),),
    ),
    StarterDeckPreset(
        deck_id="hSD05-001",
        display="hSD05 - Start Deck (White) Todoroki Hajime",
        name="Start Deck (White) Todoroki Hajime",
        oshi=("hSD05-001", 517, 1),
        main_deck=(
            ("hSD05-002", 518, 6),
            ("hSD05-003", 519, 4),
            ("hSD05-004", 520, 2),
            ("hSD05-005", 521, 4),
            ("hSD05-006", 522, 4),
            ("hSD05-007", 523, 2),
            ("hSD05-008", 524, 2),
            ("hSD05-009", 525, 2),
            ("hSD05-010", 526, 2),
            ("hSD05-011", 527, 2),
            ("hSD05-012", 528, 2),
            ("hSD05-013", 529, 2),
            ("hSD05-014", 531, 2),
            ("hSD01-016", 16, 4),
            ("hSD01-017", 17, 2),
            ("hBP01-104", 145, 2),
            ("hBP01-108", 149, 2),
            ("hPR-002", 530, 4),
        ),
        cheer_deck=(("hY01-001", 168, 20),),
    ),
    StarterDeckPreset(
        deck_id="hSD06-001",
        display="hSD06 - Start Deck (Green) Kazama Iroha",
        name="Start Deck (Green) Kazama Iroha",
        oshi=("hSD06-001", 532, 1),
        main_deck=(
            ("hBP01-048", 533, 6),
            ("hSD06-002", 534, 4),
            ("hSD06-003", 535, 2),
            ("hSD06-004", 536, 4),
            ("hSD06-005", 537, 4),
            ("hBP01-050", 538, 2),
            ("hSD06-006", 539, 2),
            ("hSD06-007", 540, 2),
            ("hSD06-008", 541, 2),
            ("hSD06-009", 542, 2),
            ("hSD06-010", 543, 2),
            ("hSD06-011", 544, 2),
            ("hSD06-012", 545, 2),
            ("hSD01-016", 16, 4),
            ("hSD01-017", 17, 2),
            ("hBP01-104", 145, 2),
            ("hBP02-076", 343, 2),
            ("hBP02-080", 347, 4),
        ),
        cheer_deck=(("hY02-001", 169, 20),),
    ),
    StarterDeckPreset(
        deck_id="hSD07-001",
        display="hSD07 - Start Deck (Yellow) Shiranui Flare",
        name="Start Deck (Yellow) Shiranui Flare",
        oshi=("hSD07-001", 546, 1),
        main_deck=(
            ("hSD07-002", 547, 6),
            ("hSD07-003", 548, 4),
            ("hSD07-004", 549, 2),
            ("hSD07-005", 550, 4),
            ("hSD07-006", 551, 4),
            ("hSD07-007", 552, 2),
            ("hSD07-008", 553, 2),
            ("hSD07-009", 554, 2),
            ("hSD07-010", 555, 2),
            ("hSD07-011", 556, 2),
            ("hSD07-012", 557, 2),
            ("hSD07-013", 558, 2),
            ("hSD07-014", 559, 4),
            ("hSD07-015", 560, 2),
            ("hSD01-016", 16, 4),
            ("hSD01-017", 17, 2),
            ("hSD01-018", 18, 2),
            ("hBP01-104", 145, 2),
        ),
        cheer_deck=(("hY06-001", 561, 20),),
    ),
    StarterDeckPreset(
        deck_id="hSD08-001",
        display="hSD08 - Start Deck (White) Amane Kanata",
        name="Start Deck (White) Amane Kanata",
        oshi=("hSD08-001", 1138, 1),
        main_deck=(
            ("hBP01-009", 40, 12),
            ("hSD08-002", 1139, 2),
            ("hBP01-011", 42, 4),
            ("hBP01-013", 44, 4),
            ("hSD08-003", 1140, 2),
            ("hSD08-004", 1141, 2),
            ("hSD08-005", 1142, 2),
            ("hSD08-006", 1143, 2),
            ("hSD08-007", 1144, 2),
            ("hSD01-016", 1145, 4),
            ("hSD01-017", 17, 3),
            ("hBP01-108", 149, 2),
            ("hBP02-084", 351, 2),
            ("hBP03-093", 1146, 4),
            ("hBP01-116", 157, 3),
        ),
        cheer_deck=(("hY01-001", 168, 20),),
    ),
    StarterDeckPreset(
        deck_id="hSD09-001",
        display="hSD09 - Start Deck (Red) Houshou Marine",
        name="Start Deck (Red) Houshou Marine",
        oshi=("hSD09-001", 1147, 1),
        main_deck=(
            ("hBP02-028", 295, 12),
            ("hSD09-002", 1148, 2),
            ("hBP02-030", 297, 4),
            ("hBP02-032", 299, 4),
            ("hSD09-003", 1149, 2),
            ("hSD09-004", 1150, 2),
            ("hSD09-005", 1151, 2),
            ("hSD09-006", 1152, 2),
            ("hSD09-007", 1153, 2),
            ("hSD01-016", 1145, 4),
            ("hSD01-017", 17, 3),
            ("hBP01-108", 149, 2),
            ("hBP02-084", 351, 2),
            ("hBP02-085", 1154, 4),
            ("hBP02-095", 362, 3),
        ),
        cheer_deck=(("hY03-001", 170, 20),),
    ),
    StarterDeckPreset(
        deck_id="hSD10-001",
        display="hSD10 - Start Deck [FLOW GLOW] Rindo Chihaya",
        name="Start Deck [FLOW GLOW] Rindo Chihaya",
        oshi=("hSD10-001", 1456, 1),
        main_deck=(
            ("hSD10-002", 1457, 8),
            ("hSD10-003", 1458, 4),
            ("hSD10-004", 1459, 2),
            ("hSD10-005", 1460, 2),
            ("hSD10-006", 1461, 4),
            ("hSD10-007", 1462, 4),
            ("hSD10-008", 1463, 2),
            ("hSD10-009", 1464, 2),
            ("hSD10-010", 1465, 3),
            ("hSD10-011", 1466, 4),
            ("hSD10-012", 1467, 4),
            ("hSD10-013", 1468, 2),
            ("hSD01-016", 16, 4),
            ("hSD01-017", 17, 2),
            ("hBP01-104", 145, 2),
            ("hBP02-077", 344, 1),
        ),
        cheer_deck=(("hY02-001", 169, 13), ("hY05-001", 267, 7)),
    ),
    StarterDeckPreset(
        deck_id="hSD11-001",
        display="hSD11 - Start Deck [FLOW GLOW] Koganei Niko",
        name="Start Deck [FLOW GLOW] Koganei Niko",
        oshi=("hSD11-001", 1469, 1),
        main_deck=(
            ("hSD11-002", 1470, 8),
            ("hSD11-003", 1471, 4),
            ("hSD11-004", 1472, 2),
            ("hSD11-005", 1473, 2),
            ("hSD11-006", 1474, 4),
            ("hSD11-007", 1475, 4),
            ("hSD11-008", 1476, 2),
            ("hSD11-009", 1477, 2),
            ("hSD10-010", 1465, 3),
            ("hSD10-011", 1466, 4),
            ("hSD10-012", 1467, 4),
            ("hSD10-013", 1468, 2),
            ("hSD01-016", 16, 4),
            ("hSD01-017", 17, 2),
            ("hSD01-019", 19, 1),
            ("hBP01-104", 145, 2),
        ),
        cheer_deck=(("hY06-001", 561, 13), ("hY04-001", 171, 7)),
    ),
    StarterDeckPreset(
        deck_id="hSD12-001",
        display="hSD12 - Start Deck [Advent]",
        name="Start Deck [Advent]",
        oshi=("hSD12-001", 1750, 1),
        oshi_options=(("hSD12-001", 1750, 1), ("hSD12-002", 1751, 1)),
        main_deck=(
            ("hSD12-003", 1752, 2),
            ("hSD12-004", 1753, 2),
            ("hSD12-005", 1754, 2),
            ("hSD12-006", 1755, 2),
            ("hSD12-007", 1756, 3),
            ("hSD12-008", 1757, 2),
            ("hSD12-009", 1758, 3),
            ("hSD12-010", 1759, 3),
            ("hSD12-011", 1760, 3),
            ("hSD12-012", 1761, 2),
            ("hSD12-013", 1762, 2),
            ("hSD12-014", 1763, 2),
            ("hSD12-015", 1764, 2),
            ("hSD12-016", 1765, 2),
            ("hBP04-050", 1766, 3),
            ("hBP04-063", 1767, 3),
            ("hSD01-016", 16, 4),
            ("hBP01-108", 149, 1),
            ("hBP04-096", 960, 2),
            ("hBP01-104", 145, 2),
            ("hBP02-077", 344, 1),
            ("hBP05-074", 1768, 2),
        ),
        cheer_deck=(("hY04-001", 171, 10), ("hY05-001", 267, 10)),
    ),
    StarterDeckPreset(
        deck_id="hSD13-001",
        display="hSD13 - Start Deck [Justice]",
        name="Start Deck [Justice]",
        oshi=("hSD13-001", 1769, 1),
        oshi_options=(("hSD13-001", 1769, 1), ("hSD13-002", 1770, 1)),
        main_deck=(
            ("hSD13-003", 1771, 6),
            ("hSD13-004", 1772, 2),
            ("hSD13-005", 1773, 2),
            ("hSD13-006", 1774, 2),
            ("hSD13-007", 1775, 3),
            ("hSD13-008", 1776, 4),
            ("hSD13-009", 1777, 2),
            ("hSD13-010", 1778, 2),
            ("hSD13-011", 1779, 2),
            ("hSD13-012", 1780, 2),
            ("hSD13-013", 1781, 3),
            ("hSD13-014", 1782, 2),
            ("hSD13-015", 1783, 2),
            ("hSD13-016", 1784, 2),
            ("hSD13-017", 1785, 2),
            ("hSD13-018", 1786, 2),
            ("hSD01-016", 16, 4),
            ("hSD01-019", 19, 1),
            ("hBP01-104", 145, 2),
            ("hBP05-074", 1768, 2),
            ("hBP03-088", 652, 1),
        ),
        cheer_deck=(("hY03-001", 170, 10), ("hY06-001", 561, 10)),
    ),
)


def _english_line(resolver: CardResolver, card_number: str, amount: int) -> LineItem:
    """First printing released in English, else the first printing."""
    for entry in resolver.printings(card_number):
        if entry.release_en is not None:
            return LineItem(card_number=card_number, amount=amount, manage_id=entry.manage_id)
    return resolver.line_from_number(card_number, amount)


def build_starter_deck(preset: StarterDeckPreset, catalog: CardCatalog) -> StarterDeck:
    """Resolve a preset against the catalog."""
    resolver = CardResolver(catalog)

    def line(card: PresetCard) -> LineItem:
        card_number, manage_id, amount = card
        if manage_id is None and preset.english:
            return _english_line(resolver, card_number, amount)
        return resolver.line_from_manage_id(card_number, manage_id, amount)

    return StarterDeck(
        deck_id=preset.deck_id,
        display=preset.display,
        deck=CanonicalDeck(
            name=preset.name,
            oshi=line(preset.oshi),
            main_deck=[line(card) for card in preset.main_deck],
            cheer_deck=[line(card) for card in preset.cheer_deck],
        ),
        oshi_options=[line(card) for card in preset.oshi_options],
    )


def starter_decks(catalog: CardCatalog) -> list[StarterDeck]:
    """All presets, resolved."""
    return [build_starter_deck(preset, catalog) for preset in STARTER_DECK_PRESETS]


def get_starter_deck(deck_id: str, catalog: CardCatalog) -> StarterDeck | None:
    """One preset by id (case-insensitive), None when unknown."""
    for preset in STARTER_DECK_PRESETS:
        if preset.deck_id.lower() == deck_id.lower():
            return build_starter_deck(preset, catalog)
    return None
