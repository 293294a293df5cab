"""Translate driver and connectivity failures into application errors."""
from __future__ import annotations

import functools
import logging
from collections.abc import Awaitable, Callable
from typing import ParamSpec, TypeVar

from sqlalchemy.exc import DBAPIError, InterfaceError, OperationalError

from messaging_service.application.exceptions import PersistenceError

logger = logging.getLogger(__name__)

P = ParamSpec("P")
R = TypeVar("R")


def translate_db_errors(fn: Callable[P, Awaitable[R]]) -> Callable[P, Awaitable[R]]:
    @functools.wraps(fn)
    async def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
        try:
            return await fn(*args, **kwargs)
        except (OperationalError, InterfaceError, OSError) as exc:
            logger.error("Database unavailable in %s: %s", fn.__qualname__, exc)
            raise PersistenceError("Database unavailable") from exc
        except DBAPIError as exc:
            logger.exception("Database error in %s", fn.__qualname__)
            raise PersistenceError("Database error") from exc

    return wrapper
