"""One-shot flash messages stored in the signed session cookie."""
from __future__ import annotations

from fastapi import Request

FLASH_KEY = "_flashes"


def flash(request: Request, message: str, category: str = "success") -> None:
    messages = list(request.session.get(FLASH_KEY, []))
    messages.append({"category": category, "message": message})
    request.session[FLASH_KEY] = messages


def pop_flashed_messages(request: Request) -> list[dict[str, str]]:
    """Return queued messages and clear them, so each shows exactly once."""

    # error pages rendered outside the session middleware have no session
    if "session" not in request.scope:
        return []
    return request.session.pop(FLASH_KEY, [])
