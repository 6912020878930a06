"""Static file server exposing the log directory over HTTP.

Purpose
-------
Let operators browse the primary, view and archive files from a browser while
the logger keeps writing.

Contents
--------
* :func:`create_app` - aiohttp application with a browsable static route.
* :class:`StaticLogServer` - start/stop wrapper around ``AppRunner``.
* :func:`serve_forever` - blocking entry point used by the CLI.
* :func:`start_in_thread` - background variant used by the demo loop.

System Role
-----------
Outer collaborator; it only reads the directory and never touches the
logger's lock.
"""

from __future__ import annotations

import asyncio
import logging
import os
import threading
from pathlib import Path

from aiohttp import web

LOGGER = logging.getLogger(__name__)

DEFAULT_HOST = "0.0.0.0"
DEFAULT_PORT = 8100
DEFAULT_DIRECTORY = Path("./logs")


def create_app(directory: str | os.PathLike[str]) -> web.Application:
    """Return an application serving ``directory`` with index pages."""

    root = Path(directory).resolve()
    if not root.is_dir():
        raise ValueError(f"Not a directory: {root}")
    app = web.Application()
    app.router.add_static("/", root, show_index=True)
    return app


class StaticLogServer:
    """Serve a directory until :meth:`stop` is awaited."""

    def __init__(
        self,
        directory: str | os.PathLike[str] = DEFAULT_DIRECTORY,
        *,
        host: str = DEFAULT_HOST,
        port: int = DEFAULT_PORT,
    ) -> None:
        self.directory = Path(directory)
        self.host = host
        self.port = port
        self.runner: web.AppRunner | None = None

    async def start(self) -> None:
        """Bind the socket and begin serving; binding errors propagate."""
        self.runner = web.AppRunner(create_app(self.directory))
        await self.runner.setup()
        site = web.TCPSite(self.runner, self.host, self.port)
        try:
            await site.start()
        except OSError:
            await self.runner.cleanup()
            self.runner = None
            raise
        LOGGER.info("serving %s on http://%s:%s", self.directory, self.host, self.port)

    async def stop(self) -> None:
        if self.runner is not None:
            await self.runner.cleanup()
            self.runner = None
            LOGGER.info("static server stopped")


async def _serve(server: StaticLogServer, started: threading.Event | None = None) -> None:
    await server.start()
    if started is not None:
        started.set()
    try:
        await asyncio.Event().wait()
    finally:
        await server.stop()


def serve_forever(
    directory: str | os.PathLike[str] = DEFAULT_DIRECTORY,
    *,
    host: str = DEFAULT_HOST,
    port: int = DEFAULT_PORT,
) -> None:
    """Block serving ``directory``; an unbindable port raises :class:`OSError`."""

    asyncio.run(_serve(StaticLogServer(directory, host=host, port=port)))


def start_in_thread(
    directory: str | os.PathLike[str] = DEFAULT_DIRECTORY,
    *,
    host: str = DEFAULT_HOST,
    port: int = DEFAULT_PORT,
) -> threading.Thread:
    """Serve ``directory`` from a daemon thread and return that thread.

    The call waits until the socket is bound. A bind failure is re-raised in
    the calling thread.
    """

    started = threading.Event()
    failure: list[BaseException] = []
    server = StaticLogServer(directory, host=host, port=port)

    def _run() -> None:
        try:
            asyncio.run(_serve(server, started))
        except BaseException as exc:  # noqa: BLE001 - handed back to the caller
            failure.append(exc)
            started.set()

    thread = threading.Thread(target=_run, name="lib_log_rotate-static-server", daemon=True)
    thread.start()
    started.wait()
    if failure:
        raise failure[0]
    return thread


__all__ = [
    "DEFAULT_DIRECTORY",
    "DEFAULT_PORT",
    "StaticLogServer",
    "create_app",
    "serve_forever",
    "start_in_thread",
]
