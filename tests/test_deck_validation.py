"""Tests for deck validation warnings."""

from dataclasses import replace

import pytest

from hocgdeck.models.card import CardCatalog
from hocgdeck.models.deck import CanonicalDeck, LineItem
from hocgdeck.services.deck_validation import validate_deck


def with_main_total(deck: CanonicalDeck, total: int) -> CanonicalDeck:
    """Adjust the unlimited debut line so the main deck has `total` cards."""
    lines = [line for line in deck.main_deck if line.card_number != "hBP01-009"]
    filler = total - sum(line.amount for line in lines)
    return replace(deck, main_deck=[*lines, LineItem("hBP01-009", filler, 40)])


class TestLegalDeck:
    def test_no_warnings(self, legal_deck: CanonicalDeck, catalog: CardCatalog) -> None:
        assert validate_deck(legal_deck, catalog) == []


class TestDeckSize:
    def test_not_enough(self, legal_deck: CanonicalDeck, catalog: CardCatalog) -> None:
        warnings = validate_deck(with_main_total(legal_deck, 49), catalog)
        assert warnings == ["Main deck has not enough cards (49 / 50)."]

    def test_too_many(self, legal_deck: CanonicalDeck, catalog: CardCatalog) -> None:
        warnings = validate_deck(with_main_total(legal_deck, 51), catalog)
        assert warnings == ["Main deck has too many cards (51 / 50)."]

    def test_exactly_fifty(self, legal_deck: CanonicalDeck, catalog: CardCatalog) -> None:
        assert validate_deck(with_main_total(legal_deck, 50), catalog) == []

    def test_cheer_deck(self, legal_deck: CanonicalDeck, catalog: CardCatalog) -> None:
        deck = replace(legal_deck, cheer_deck=[LineItem("hY01-001", 21, 168)])
        assert validate_deck(deck, catalog) == ["Cheer deck has too many cards (21 / 20)."]


class TestCardChecks:
    def test_unknown_cards(self, legal_deck: CanonicalDeck, catalog: CardCatalog) -> None:
        cheer_deck = [LineItem("hY01-001", 10, 168), LineItem("hY99-001", 10)]
        deck = replace(legal_deck, cheer_deck=cheer_deck)
        assert validate_deck(deck, catalog) == ["Contains unknown cards."]

    def test_missing_oshi(self, legal_deck: CanonicalDeck, catalog: CardCatalog) -> None:
        assert validate_deck(replace(legal_deck, oshi=None), catalog) == ["Missing oshi."]

    def test_unresolved_oshi(self, legal_deck: CanonicalDeck, catalog: CardCatalog) -> None:
        deck = replace(legal_deck, oshi=LineItem("hXX99-001", 1))
        assert validate_deck(deck, catalog) == ["Contains unknown cards.", "Missing oshi."]

    def test_too_many_copies_across_printings(self, catalog: CardCatalog) -> None:
        deck = CanonicalDeck(
            oshi=LineItem("hSD01-001", 1, 1),
            main_deck=[
                LineItem("hSD01-003", 3, 3),
                LineItem("hSD01-003", 2, 103),
                LineItem("hBP01-009", 45, 40),
            ],
            cheer_deck=[LineItem("hY01-001", 20, 168)],
        )
        assert validate_deck(deck, catalog) == ["Too many copies of hSD01-003 (5 / 4)."]

    def test_unknown_card_cap_is_fifty(self, catalog: CardCatalog) -> None:
        deck = CanonicalDeck(
            oshi=LineItem("hSD01-001", 1, 1),
            main_deck=[LineItem("hXX99-001", 51)],
            cheer_deck=[LineItem("hY01-001", 20, 168)],
        )
        assert validate_deck(deck, catalog) == [
            "Contains unknown cards.",
            "Main deck has too many cards (51 / 50).",
            "Too many copies of hXX99-001 (51 / 50).",
        ]


class TestIndependentChecks:
    def test_all_warnings_in_order(self, catalog: CardCatalog) -> None:
        deck = CanonicalDeck(main_deck=[LineItem("hSD01-016", 5, 16), LineItem("hXX99-001", 1)])
        assert validate_deck(deck, catalog) == [
            "Contains unknown cards.",
            "Missing oshi.",
            "Main deck has not enough cards (6 / 50).",
            "Cheer deck has not enough cards (0 / 20).",
            "Too many copies of hSD01-016 (5 / 4).",
        ]


class TestUnreleased:
    @pytest.fixture
    def deck(self, legal_deck: CanonicalDeck) -> CanonicalDeck:
        return replace(
            legal_deck,
            main_deck=[
                LineItem("hSD01-003", 3, 3),
                LineItem("hSD01-003", 1, 203),
                *legal_deck.main_deck[1:],
            ],
        )

    def test_allowed_by_default(self, deck: CanonicalDeck, catalog: CardCatalog) -> None:
        assert validate_deck(deck, catalog) == []

    def test_warns_when_not_allowed(self, deck: CanonicalDeck, catalog: CardCatalog) -> None:
        assert validate_deck(deck, catalog, allow_unreleased=False) == [
            "Contains unreleased cards."
        ]
