"""
Conversion of deck and price check errors into the failure envelope.

These errors are raised by the format, Deck Log and price check layers
without any HTTP knowledge; this module classifies them as KnownErrors.
Anything else that is not a KnownError becomes an unknown failure.
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from hocgdeck.formats.base import DeckFormatError, DeckParseError, ExportError
from hocgdeck.formats.deck_log import InvalidDeckCodeError
from hocgdeck.models.failure import ApiResponse, FailureKind, KnownError
from hocgdeck.services.deck_log_client import DeckLogRequestError
from hocgdeck.services.price_check import PriceCheckError

logger = logging.getLogger(__name__)


def known_error_from(exc: DeckFormatError | PriceCheckError) -> KnownError:
    """Classify a deck or price check error."""
    match exc:
        case InvalidDeckCodeError():
            return KnownError(
                kind=FailureKind.INVALID_INPUT,
                message=exc.reason,
                detail=exc.value,
                suggestion="Paste a Deck Log URL or the deck code only.",
            )
        case DeckParseError():
            return KnownError(
                kind=FailureKind.PARSE_ERROR,
                message=f"Cannot parse {exc.format_name} deck.",
                detail=exc.message,
                suggestion="Check that the file was exported in the selected format.",
            )
        case ExportError():
            return KnownError(
                kind=FailureKind.EXPORT_FAILED,
                message=str(exc),
                suggestion="Fix the deck warnings before exporting.",
                status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            )
        case DeckLogRequestError():
            return KnownError(
                kind=FailureKind.EXTERNAL_API_ERROR,
                message="Deck Log request failed.",
                detail=exc.message,
                suggestion="Try again later.",
                status_code=status.HTTP_502_BAD_GATEWAY,
            )
        case PriceCheckError():
            return KnownError(
                kind=FailureKind.EXTERNAL_API_ERROR,
                message="Price check failed.",
                detail=exc.message,
                suggestion="Try again later.",
                status_code=status.HTTP_502_BAD_GATEWAY,
            )
    return KnownError(kind=FailureKind.INVALID_INPUT, message=str(exc))


def _json(error: KnownError) -> JSONResponse:
    return JSONResponse(
        status_code=error.status_code,
        content=error.to_response().model_dump(mode="json"),
    )


async def known_error_handler(_request: Request, exc: KnownError) -> JSONResponse:
    return _json(exc)


async def deck_error_handler(_request: Request, exc: DeckFormatError) -> JSONResponse:
    logger.info("Deck error: %s", exc)
    return _json(known_error_from(exc))


async def price_check_error_handler(_request: Request, exc: PriceCheckError) -> JSONResponse:
    logger.info("Price check error: %s", exc)
    return _json(known_error_from(exc))


async def unknown_error_handler(_request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error", exc_info=exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=ApiResponse.unknown_failure(detail=type(exc).__name__).model_dump(mode="json"),
    )


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(KnownError, known_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(DeckFormatError, deck_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(PriceCheckError, price_check_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, unknown_error_handler)
