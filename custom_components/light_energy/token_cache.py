"""Single-slot cache for the account token issued by the Light API."""
from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime

from homeassistant.util import dt as dt_util

from .const import TOKEN_EXPIRY_BUFFER
from .models import CachedToken

_LOGGER = logging.getLogger(__name__)


def _parse_expiry(value: str | datetime | None) -> datetime | None:
    if isinstance(value, datetime):
        parsed: datetime | None = value
    elif isinstance(value, str):
        try:
            parsed = dt_util.parse_datetime(value)
        except ValueError:
            parsed = None
    else:
        parsed = None

    if parsed is None:
        return None
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=dt_util.UTC)
    return parsed


class TokenCache:
    """Hold at most one account token at a time.

    A token is handed out only while more than ``TOKEN_EXPIRY_BUFFER`` remains
    before it expires, so callers refresh before a request could fail mid-way.
    Storing a token for another account replaces the previous one.

    The cache is not locked. Two requests that miss at the same time will both
    fetch a token and the last ``set_token`` wins.
    """

    def __init__(self, clock: Callable[[], datetime] = dt_util.utcnow) -> None:
        self._clock = clock
        self._cached: CachedToken | None = None

    @property
    def expires_at(self) -> datetime | None:
        return self._cached.expires_at if self._cached else None

    def is_valid(self, account_uuid: str) -> bool:
        cached = self._cached
        if cached is None or cached.account_uuid != account_uuid:
            return False
        if cached.expires_at is None:
            return False
        return cached.expires_at - self._clock() > TOKEN_EXPIRY_BUFFER

    def get_token(self, account_uuid: str) -> str | None:
        if self.is_valid(account_uuid):
            return self._cached.token
        return None

    def set_token(self, account_uuid: str, token: str, expires_at: str | datetime | None) -> None:
        parsed = _parse_expiry(expires_at)
        if parsed is None:
            _LOGGER.warning("Account token expiry %r could not be parsed; token will not be reused", expires_at)
        self._cached = CachedToken(token=token, expires_at=parsed, account_uuid=account_uuid)

    def clear_if_expired(self) -> None:
        """Drop the token once its raw expiry has passed (no buffer)."""
        cached = self._cached
        if cached is None or cached.expires_at is None:
            return
        if cached.expires_at <= self._clock():
            _LOGGER.debug("Cached account token expired at %s", cached.expires_at.isoformat())
            self.clear_token()

    def clear_token(self) -> None:
        self._cached = None
