"""
Shared plumbing for deck format adapters.

Every external format is a pydantic model. Parsing validates the raw JSON
against that model; a structural problem surfaces as DeckParseError carrying
the validation message verbatim. Serialization is compact UTF-8 JSON with
absent optional fields omitted.
"""

import logging
from typing import ClassVar, Self

from pydantic import BaseModel, ConfigDict, ValidationError

logger = logging.getLogger(__name__)


# =============================================================================
# EXCEPTIONS
# =============================================================================


class DeckFormatError(Exception):
    """Base exception for deck conversion failures."""


class DeckParseError(DeckFormatError):
    """
    Raised when a payload is not a valid deck in the requested format.

    The message is the underlying structural error, unchanged.
    """

    def __init__(self, format_name: str, message: str) -> None:
        self.format_name = format_name
        self.message = message
        super().__init__(message)


class ExportError(DeckFormatError):
    """Raised when a deck cannot be written in the requested format."""

    def __init__(self, format_name: str, reason: str) -> None:
        self.format_name = format_name
        self.reason = reason
        super().__init__(f"Cannot export deck to {format_name}: {reason}")


class MissingIdentifierError(ExportError):
    """Raised when a format needs a printing identifier that a card lacks."""

    def __init__(self, format_name: str, card_numbers: list[str]) -> None:
        self.card_numbers = card_numbers
        shown = ", ".join(card_numbers[:10])
        if len(card_numbers) > 10:
            shown += f" (and {len(card_numbers) - 10} more)"
        super().__init__(format_name, f"unknown cards cannot be exported: {shown}")


# =============================================================================
# BASE MODEL
# =============================================================================


class JsonDeck(BaseModel):
    """
    Base class for JSON deck payloads.

    Subclasses set FORMAT_NAME and implement to_canonical/from_canonical.
    """

    FORMAT_NAME: ClassVar[str] = "json"

    model_config = ConfigDict(populate_by_name=True)

    @classmethod
    def parse(cls, data: bytes | str) -> Self:
        """
        Parse a deck from JSON bytes or text.

        Raises:
            DeckParseError: If the payload is not valid JSON for this format
        """
        try:
            deck = cls.model_validate_json(data)
        except ValidationError as e:
            logger.debug("Cannot parse %s deck: %s", cls.FORMAT_NAME, e)
            raise DeckParseError(cls.FORMAT_NAME, str(e)) from e
        return deck

    def to_text(self) -> str:
        """Compact JSON text."""
        return self.model_dump_json(by_alias=True, exclude_none=True)

    def serialize(self) -> bytes:
        """Compact UTF-8 JSON bytes."""
        return self.to_text().encode("utf-8")


def clean_deck_name(name: str | None) -> str | None:
    """Blank deck names are treated as no name."""
    if name is None or not name.strip():
        return None
    return name
