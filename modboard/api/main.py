"""
modboard.api.main — FastAPI application & embedded web server
==============================================================

The web view shares the bot's process and event loop, so it reads the same
in-memory leaderboard without any database.  :class:`WebServer` runs
uvicorn as a task on the bot's loop; the bot's own shutdown path decides
when it stops, after the final snapshot is flushed.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
from typing import TYPE_CHECKING

import uvicorn
from fastapi import FastAPI

from modboard import __version__
from modboard.api.routes.public import router as public_router

if TYPE_CHECKING:
    from modboard.bot.core import ModboardBot

logger = logging.getLogger(__name__)


def create_app(bot: ModboardBot | None = None) -> FastAPI:
    """Build the FastAPI app bound to *bot*'s live state."""
    app = FastAPI(title="Modboard", version=__version__)
    app.state.bot = bot
    app.include_router(public_router)
    return app


class _EmbeddedServer(uvicorn.Server):
    """uvicorn server that leaves SIGINT/SIGTERM to the bot."""

    @contextlib.contextmanager
    def capture_signals(self):
        yield


class WebServer:
    """Runs *app* with uvicorn on the current event loop."""

    def __init__(self, app: FastAPI, host: str, port: int) -> None:
        self.host = host
        self.port = port
        self._server = _EmbeddedServer(
            uvicorn.Config(app, host=host, port=port, log_config=None, access_log=False)
        )
        self._task: asyncio.Task | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        if self._task is not None:
            return
        self._task = asyncio.get_running_loop().create_task(
            self._serve(), name="modboard-web",
        )

    async def _serve(self) -> None:
        try:
            await self._server.serve()
        except (OSError, SystemExit):
            # uvicorn calls sys.exit() when it cannot bind the port
            logger.exception("Web server on %s:%d stopped", self.host, self.port)

    async def stop(self) -> None:
        if self._task is None:
            return
        self._server.should_exit = True
        try:
            await asyncio.wait_for(self._task, timeout=5)
        except TimeoutError:
            self._task.cancel()
        self._task = None
        logger.info("Web server closed")
