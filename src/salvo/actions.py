import asyncio
import logging
import threading
from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import Any

import aiohttp
import pyRserve
from pyRserve.rexceptions import PyRserveClosed, PyRserveError, RConnectionRefused, REvalError

from .errors import ActionError, ConfigError, ConnectionUnusableError
from .utils import join_url

logger = logging.getLogger(__name__)

FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"


class Action(ABC):
    """One backend call. ``execute`` raises :class:`ActionError` on failure."""

    blocking = False

    async def open(self) -> None:
        """Acquire connections. Runs once before the first invocation."""

    async def close(self) -> None:
        """Release whatever ``open`` acquired."""

    @abstractmethod
    async def execute(self) -> None: ...


class BlockingAction(Action):
    """Action backed by a synchronous client.

    The run driver calls ``call`` on its own thread pool; ``execute`` is
    there for callers outside a run.
    """

    blocking = True

    @abstractmethod
    def call(self) -> None: ...

    async def execute(self) -> None:
        await asyncio.to_thread(self.call)


# ────────────────────────────────
# HTTP POST
# ────────────────────────────────


class HttpPostAction(Action):
    def __init__(
        self,
        host: str,
        path: str = "",
        data: str = "",
        timeout_s: float = 30.0,
        fail_fast: bool = False,
    ) -> None:
        try:
            self.url = join_url(host, path)
        except ValueError as e:
            raise ConfigError(f"Invalid http_post host {host!r}: {e}") from e
        self.data = data
        self.timeout_s = timeout_s
        self.fail_fast = fail_fast
        self._session: aiohttp.ClientSession | None = None

    def __repr__(self) -> str:
        return f"HttpPostAction(url={self.url!r})"

    async def open(self) -> None:
        if self._session is None:
            connector = aiohttp.TCPConnector(limit=0)
            timeout = aiohttp.ClientTimeout(total=self.timeout_s)
            self._session = aiohttp.ClientSession(connector=connector, timeout=timeout)
            logger.debug(f"Opened HTTP session for {self.url} (timeout={self.timeout_s}s)")

    async def close(self) -> None:
        if self._session is not None:
            session, self._session = self._session, None
            await session.close()
            logger.debug(f"Closed HTTP session for {self.url}")

    async def execute(self) -> None:
        if self._session is None:
            raise ConnectionUnusableError(f"HTTP session for {self.url} is not open")

        headers = {"Content-Type": FORM_CONTENT_TYPE}
        try:
            async with self._session.post(
                self.url, data=self.data.encode("utf-8"), headers=headers
            ) as resp:
                await resp.read()
                status = resp.status
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            if self.fail_fast:
                raise ConnectionUnusableError(f"POST {self.url} failed: {e!r}") from e
            logger.warning(f"Transport error for {self.url}: {e!r}")
            raise ActionError(f"transport error: {e!r}") from e

        if status != 200:
            logger.debug(f"POST {self.url} returned status {status}")
            raise ActionError(f"status code {status}", status=status)


# ────────────────────────────────
# Rserve
# ────────────────────────────────


class RServeAction(BlockingAction):
    """Evaluates ``data`` on one persistent Rserve connection.

    The connection is shared by every worker and is not thread-safe, so
    evaluations are serialized on it.
    """

    def __init__(
        self,
        host: str,
        port: int,
        data: str,
        connect: Callable[..., Any] | None = None,
    ) -> None:
        self.host = host
        self.port = port
        self.data = data
        self._connect = connect or pyRserve.connect
        self._conn = None
        self._lock = threading.Lock()

    def __repr__(self) -> str:
        return f"RServeAction(host={self.host!r}, port={self.port})"

    async def open(self) -> None:
        if self._conn is not None:
            return
        try:
            self._conn = await asyncio.to_thread(self._connect, host=self.host, port=self.port)
        except (RConnectionRefused, OSError) as e:
            raise ConnectionUnusableError(
                f"Failed to connect to Rserve at {self.host}:{self.port}: {e}"
            ) from e
        logger.info(f"Connected to Rserve at {self.host}:{self.port}")

    async def close(self) -> None:
        if self._conn is not None:
            conn, self._conn = self._conn, None
            await asyncio.to_thread(conn.close)
            logger.debug(f"Closed Rserve connection {self.host}:{self.port}")

    def call(self) -> None:
        with self._lock:
            if self._conn is None:
                raise ConnectionUnusableError(
                    f"Rserve connection {self.host}:{self.port} is not open"
                )
            try:
                self._conn.eval(self.data)
            except REvalError as e:
                logger.warning(f"Command failed: {e}")
                raise ActionError(f"Command failed: {e}") from e
            except (PyRserveClosed, OSError) as e:
                raise ConnectionUnusableError(
                    f"Rserve connection {self.host}:{self.port} lost: {e}"
                ) from e
            except PyRserveError as e:
                logger.warning(f"Rserve error: {e}")
                raise ActionError(f"Rserve error: {e}") from e
