"""Channel protocol and the Unix stream channel."""

from __future__ import annotations

import asyncio
import errno
import logging
import os
import socket
import stat
from typing import Protocol, Callable, Awaitable

logger = logging.getLogger(__name__)

ConnectionHandler = Callable[[asyncio.StreamReader, asyncio.StreamWriter], Awaitable[None]]


class Channel(Protocol):
    """A listening resource bound to one local endpoint."""

    @property
    def endpoint(self) -> str:
        """Local endpoint identity (e.g., socket path)."""
        ...

    @property
    def is_listening(self) -> bool:
        ...

    async def listen(self, on_connection: ConnectionHandler) -> None:
        """Start accepting connections."""
        ...

    async def close(self) -> None:
        """Stop listening and release the endpoint."""
        ...


def _remove_stale_socket(path: str) -> None:
    """Remove a leftover socket file at path, unless another process still accepts on it.

    The file is removed only when connecting to it is refused or times out;
    any other connect failure is raised and the file is left in place.
    """
    try:
        st = os.stat(path)
    except FileNotFoundError:
        return
    if not stat.S_ISSOCK(st.st_mode):
        raise OSError(f"{path} exists and is not a socket")

    sock = socket.socket(socket.AF_UNIX, socket.SOCK_STREAM)
    try:
        sock.connect(path)
    except OSError as e:
        if e.errno not in (errno.ECONNREFUSED, errno.ETIMEDOUT):
            raise OSError(e.errno, f"cannot check socket file at {path}: {e.strerror}") from e
        logger.info("Removing stale socket file %s", path)
        os.unlink(path)
        return
    finally:
        sock.close()
    raise OSError(f"socket file at {path} belongs to another process")


class UnixStreamChannel:
    """Stream-oriented Unix socket channel. The socket is bound at construction."""

    def __init__(self, path: str, backlog: int = 100) -> None:
        self._path = path
        self._backlog = backlog
        self._server: asyncio.AbstractServer | None = None

        _remove_stale_socket(path)
        sock = socket.socket(socket.AF_UNIX, socket.SOCK_STREAM)
        try:
            sock.bind(path)
            os.chmod(path, 0o666)
            # Claim the path right away so a second creator sees it as taken
            sock.listen(backlog)
        except OSError:
            sock.close()
            raise
        self._sock: socket.socket | None = sock
        logger.debug("Bound Unix stream channel %s", path)

    @property
    def endpoint(self) -> str:
        return self._path

    @property
    def is_listening(self) -> bool:
        return self._server is not None and self._server.is_serving()

    async def listen(self, on_connection: ConnectionHandler) -> None:
        if self.is_listening:
            return
        if self._sock is None:
            raise RuntimeError(f"Channel {self._path} is closed")
        self._server = await asyncio.start_unix_server(
            on_connection,
            sock=self._sock,
            backlog=self._backlog,
        )
        logger.info("Listening on unix://%s", self._path)

    async def close(self) -> None:
        if self._server is not None:
            self._server.close()
            await self._server.wait_closed()
            self._server = None
        elif self._sock is not None:
            self._sock.close()
        if self._sock is not None:
            self._sock = None
            try:
                os.unlink(self._path)
            except FileNotFoundError:
                pass
