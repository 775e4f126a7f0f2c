"""Connection handling on top of the nebula3 driver.

The driver owns pooling, the wire protocol and session management; this
module only opens one session for the console and closes it on exit.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any

from nebula_console.core.errors import ConfigError, ConnectionFailedError

if TYPE_CHECKING:
    from nebula3.common.ttypes import Value
    from nebula3.data.ResultSet import ResultSet

    from nebula_console.core.config import ConsoleConfig

logger = logging.getLogger(__name__)


class ConsoleSession:
    """The single driver session a console run talks to."""

    def __init__(self, session: Any, user: str) -> None:
        self._session = session
        self.user = user

    def execute(self, statement: str, params: dict[str, Value] | None = None) -> ResultSet:
        """Run one statement, binding parameters when any are defined.

        Driver I/O errors propagate to the caller.
        """
        logger.debug("execute: %s", statement)
        if params:
            return self._session.execute_parameter(statement, params)
        return self._session.execute(statement)

    def release(self) -> None:
        """Release the session back to the server."""
        self._session.release()


@contextmanager
def connect(config: ConsoleConfig) -> Iterator[ConsoleSession]:
    """Open a connection pool and a session for the configured user.

    Yields:
        ConsoleSession bound to config.user.

    Raises:
        ConnectionFailedError: If the pool cannot be initialized or login fails.
    """
    from nebula3.gclient.net import ConnectionPool

    pool = ConnectionPool()
    try:
        ssl_conf = config.ssl_config()
    except ConfigError as e:
        raise ConnectionFailedError(f"Fail to generate the ssl config, {e}") from e

    host = (config.address, config.port)
    try:
        ok = pool.init([host], config.pool_config(), ssl_conf)
    except Exception as e:
        raise ConnectionFailedError(
            f"Fail to initialize the connection pool, host: {config.address}, "
            f"port: {config.port}, {e}"
        ) from e
    if not ok:
        raise ConnectionFailedError(
            f"Fail to initialize the connection pool, host: {config.address}, port: {config.port}"
        )
    logger.info("connection pool ready: %s:%s", config.address, config.port)

    try:
        try:
            raw_session = pool.get_session(config.user, config.password)
        except Exception as e:
            raise ConnectionFailedError(
                f"Fail to create a new session from connection pool, {e}"
            ) from e

        session = ConsoleSession(raw_session, config.user)
        try:
            yield session
        finally:
            session.release()
    finally:
        pool.close()
        logger.info("connection pool closed")
