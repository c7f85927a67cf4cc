"""Helpers for :mod:`campus_accounts.controllers`."""

from typing import Any, Awaitable, Callable, TypeVar
from functools import wraps
import logging

from sqlalchemy.exc import SQLAlchemyError

from ..exceptions import MailDeliveryFailed, StorageFailed, Unexpected

logger = logging.getLogger(__name__)

T = TypeVar('T')

INFRASTRUCTURE_ERRORS = (SQLAlchemyError, MailDeliveryFailed, StorageFailed)


def flow_boundary(func: Callable[..., Awaitable[T]]) \
        -> Callable[..., Awaitable[T]]:
    """Report store, mail and storage failures as :class:`.Unexpected`."""
    @wraps(func)
    async def wrapper(*args: Any, **kwargs: Any) -> T:
        try:
            return await func(*args, **kwargs)
        except INFRASTRUCTURE_ERRORS as e:
            logger.exception('%s failed', func.__qualname__)
            raise Unexpected() from e
    return wrapper
