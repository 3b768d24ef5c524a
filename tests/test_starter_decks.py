"""Tests for starter deck presets."""

import pytest

from hocgdeck.config import CHEER_DECK_SIZE, MAIN_DECK_SIZE
from hocgdeck.models.card import CardCatalog, CardInfo, CardType, CatalogEntry
from hocgdeck.models.deck import LineItem
from hocgdeck.services.starter_decks import (
    STARTER_DECK_PRESETS,
    StarterDeckPreset,
    build_starter_deck,
    get_starter_deck,
    starter_decks,
)


class TestPresets:
    @pytest.mark.parametrize("preset", STARTER_DECK_PRESETS, ids=lambda p: p.deck_id)
    def test_deck_sizes(self, preset) -> None:
        assert sum(amount for _, _, amount in preset.main_deck) == MAIN_DECK_SIZE
        assert sum(amount for _, _, amount in preset.cheer_deck) == CHEER_DECK_SIZE

    def test_ids_unique(self) -> None:
        ids = [preset.deck_id for preset in STARTER_DECK_PRESETS]
        assert len(ids) == len(set(ids))

    def test_every_start_deck_listed(self) -> None:
        ids = [preset.deck_id for preset in STARTER_DECK_PRESETS]
        assert ids[:2] == ["hSD01-001", "hSD01-001-EN"]
        assert [deck_id[:5] for deck_id in ids[2:]] == [f"hSD{n:02d}" for n in range(2, 14)]

    @pytest.mark.parametrize("preset", STARTER_DECK_PRESETS, ids=lambda p: p.deck_id)
    def test_only_english_presets_omit_printings(self, preset) -> None:
        cards = [preset.oshi, *preset.main_deck, *preset.cheer_deck, *preset.oshi_options]
        manage_ids = {manage_id for _, manage_id, _ in cards}
        if preset.english:
            assert manage_ids == {None}
        else:
            assert None not in manage_ids


class TestResolvedDecks:
    def test_all_presets_resolved(self, catalog: CardCatalog) -> None:
        decks = starter_decks(catalog)
        assert [deck.deck_id for deck in decks] == [p.deck_id for p in STARTER_DECK_PRESETS]

    def test_known_printings_resolve(self, catalog: CardCatalog) -> None:
        starter = get_starter_deck("hSD01-001", catalog)
        assert starter is not None

        assert starter.deck.oshi == LineItem("hSD01-001", 1, 1)
        assert starter.deck.main_deck[0] == LineItem("hSD01-003", 4, 3)
        assert starter.deck.cheer_deck == [
            LineItem("hY01-001", 10, 168),
            LineItem("hY02-001", 10, 169),
        ]
        assert [line.manage_id for line in starter.oshi_options] == [1, 2]

    def test_missing_printings_kept_as_unknown(self, catalog: CardCatalog) -> None:
        starter = get_starter_deck("hSD01-001", catalog)
        assert starter is not None

        line = next(line for line in starter.deck.main_deck if line.card_number == "hSD01-017")
        assert line.manage_id is None
        assert starter.deck.main_deck_total() == MAIN_DECK_SIZE

    def test_english_deck_uses_english_printings(self, catalog: CardCatalog) -> None:
        starter = get_starter_deck("hSD01-001-EN", catalog)
        assert starter is not None

        assert starter.deck.oshi == LineItem("hSD01-001", 1, 1)
        assert [line.manage_id for line in starter.oshi_options] == [1, 2]
        assert starter.deck.cheer_deck == [
            LineItem("hY01-001", 10, 168),
            LineItem("hY02-001", 10, 169),
        ]
        assert starter.deck.main_deck[0] == LineItem("hBP01-021", 4, None)
        assert starter.deck.main_deck_total() == MAIN_DECK_SIZE

    def test_english_preset_skips_japanese_only_printings(self) -> None:
        catalog = CardCatalog(
            [
                CardInfo(
                    card_number="hSD01-016",
                    card_type=CardType.SUPPORT_STAFF,
                    illustrations=(
                        CatalogEntry(manage_id=16, card_number="hSD01-016", release_ja="hSD01"),
                        CatalogEntry(
                            manage_id=1016,
                            card_number="hSD01-016",
                            release_ja="hSD01",
                            release_en="hSD01",
                        ),
                    ),
                )
            ]
        )
        preset = StarterDeckPreset(
            deck_id="test",
            display="test",
            name="test",
            oshi=("hSD01-001", None, 1),
            main_deck=(("hSD01-016", None, 4),),
            cheer_deck=(),
            english=True,
        )

        starter = build_starter_deck(preset, catalog)

        assert starter.deck.main_deck == [LineItem("hSD01-016", 4, 1016)]
        assert starter.deck.oshi == LineItem("hSD01-001", 1, None)

    def test_lookup_case_insensitive(self, catalog: CardCatalog) -> None:
        starter = get_starter_deck("HSD02-001", catalog)
        assert starter is not None
        assert starter.deck.name == "Start Deck (Red) Nakiri Ayame"

    def test_unknown_id(self, catalog: CardCatalog) -> None:
        assert get_starter_deck("hSD99-001", catalog) is None
