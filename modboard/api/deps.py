"""
modboard.api.deps — FastAPI dependency injection
=================================================

The web view runs inside the bot process and reads the bot's live state,
which :func:`modboard.api.main.create_app` stores on ``app.state.bot``.
"""

from __future__ import annotations

from fastapi import HTTPException, Request, status


def get_bot(request: Request):
    """The running :class:`~modboard.bot.core.ModboardBot`, or 503."""
    bot = getattr(request.app.state, "bot", None)
    if bot is None:
        raise HTTPException(status.HTTP_503_SERVICE_UNAVAILABLE, "Bot not attached")
    return bot
