"""One-shot flash messages carried in a cookie.

A POST handler that fails sets a flash message on its redirect; the next
page render shows it once and clears the cookie. The payload is JSON,
stored URL-safe base64 encoded so that any text survives cookie quoting.
"""

from __future__ import annotations

import logging
from enum import Enum

from fastapi import Request, Response
from pydantic import BaseModel

from inkwell.storage.naming import decode_name, encode_name

logger = logging.getLogger(__name__)

FLASH_MAX_AGE = 60  # seconds


class FlashCategory(str, Enum):
    """Severity of a flash message."""

    ERROR = "error"
    WARNING = "warning"


class FlashMessage(BaseModel):
    """A message shown once on the next page."""

    category: FlashCategory
    message: str


def set_flash(
    response: Response,
    category: FlashCategory,
    message: str,
    cookie_name: str,
) -> None:
    """Attach a flash message to a response."""
    payload = FlashMessage(category=category, message=message).model_dump_json()
    response.set_cookie(
        cookie_name,
        encode_name(payload),
        max_age=FLASH_MAX_AGE,
        httponly=True,
        samesite="lax",
    )


def read_flash(request: Request, cookie_name: str) -> FlashMessage | None:
    """Read the pending flash message, if any.

    A malformed cookie is logged and ignored.
    """
    raw = request.cookies.get(cookie_name)
    if not raw:
        return None
    try:
        return FlashMessage.model_validate_json(decode_name(raw))
    except ValueError as exc:
        logger.warning(f"Ignoring malformed flash cookie: {exc}")
        return None


def clear_flash(response: Response, cookie_name: str) -> None:
    """Remove the flash cookie once it has been shown."""
    response.delete_cookie(cookie_name, httponly=True, samesite="lax")
