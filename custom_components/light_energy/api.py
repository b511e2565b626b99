"""Client for interacting with the Light API."""
from __future__ import annotations

import asyncio
import logging
from datetime import datetime
from typing import Any

import aiohttp
import async_timeout

from .const import API_TIMEOUT, API_VERSION_PATH, DEFAULT_API_URL
from .data_validation import (
    validate_account,
    validate_daily_usage_page,
    validate_invoices,
    validate_monthly_usage_page,
)
from .models import AccountInfo, DailyUsagePage, Invoice, MonthlyUsagePage
from .token_cache import TokenCache

_LOGGER = logging.getLogger(__name__)


class LightApiError(Exception):
    """Base error raised by the Light API client."""


class RequestError(LightApiError):
    """Raised for a non-success HTTP status or a transport failure."""

    def __init__(self, message: str, *, status: int | None = None) -> None:
        super().__init__(message)
        self.status = status


class LightApiAuthError(RequestError):
    """Raised when the account token is rejected or cannot be issued."""


async def _async_error_message(response: aiohttp.ClientResponse) -> str:
    try:
        data = await response.json(content_type=None)
    except (aiohttp.ClientError, ValueError):
        data = None
    if isinstance(data, dict) and data.get("error"):
        return str(data["error"])
    try:
        text = await response.text()
    except aiohttp.ClientError:
        text = ""
    return text.strip() or f"API request failed with status {response.status}"


class LightApiClient:
    """Small wrapper around the Light HTTP API for a single app.

    The app-level API secret is only used to exchange for short-lived account
    tokens. Account tokens are kept in the supplied :class:`TokenCache`.
    """

    def __init__(
        self,
        session: aiohttp.ClientSession,
        *,
        api_secret: str,
        token_cache: TokenCache,
        api_url: str = DEFAULT_API_URL,
    ) -> None:
        self._session = session
        self._api_secret = api_secret
        self._token_cache = token_cache
        self._base_url = f"{api_url.rstrip('/')}{API_VERSION_PATH}"

    @property
    def token_cache(self) -> TokenCache:
        return self._token_cache

    async def _async_send(
        self,
        method: str,
        url: str,
        *,
        headers: dict[str, str],
        params: dict[str, Any] | None = None,
    ) -> tuple[int, Any]:
        try:
            async with async_timeout.timeout(API_TIMEOUT):
                async with self._session.request(
                    method, url, headers=headers, params=params
                ) as response:
                    if not 200 <= response.status < 300:
                        return response.status, await _async_error_message(response)
                    if response.status == 204:
                        return response.status, None
                    return response.status, await response.json(content_type=None)
        except (aiohttp.ClientError, asyncio.TimeoutError, ValueError) as err:
            raise RequestError(f"Error communicating with Light API: {err}") from err

    async def async_get_account_token(self, account_uuid: str) -> tuple[str, datetime | None]:
        """Return a usable account token, exchanging the API secret on a miss."""
        self._token_cache.clear_if_expired()

        cached = self._token_cache.get_token(account_uuid)
        if cached:
            return cached, self._token_cache.expires_at

        _LOGGER.debug("Requesting a new account token for %s", account_uuid)
        status, data = await self._async_send(
            "POST",
            f"{self._base_url}/app/accounts/{account_uuid}/token",
            headers={
                "Authorization": f"Bearer {self._api_secret}",
                "Content-Type": "application/json",
            },
        )

        if status in (401, 403, 404):
            raise LightApiAuthError(f"Get account token failed: {status} {data}", status=status)
        if not 200 <= status < 300:
            raise RequestError(f"Get account token failed: {status} {data}", status=status)
        if not isinstance(data, dict) or not data.get("token"):
            raise RequestError("Get account token returned no token", status=status)

        self._token_cache.set_token(account_uuid, data["token"], data.get("expires_at"))
        return data["token"], self._token_cache.expires_at

    async def _async_request(
        self,
        account_uuid: str,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        method: str = "GET",
    ) -> Any:
        token, _ = await self.async_get_account_token(account_uuid)

        status, data = await self._async_send(
            method,
            f"{self._base_url}{path}",
            headers={
                "Authorization": f"Bearer {token}",
                "Content-Type": "application/json",
            },
            params=params,
        )

        if status in (401, 404):
            # The account token or the account itself is no longer valid.
            self._token_cache.clear_token()
            raise LightApiAuthError(str(data), status=status)
        if not 200 <= status < 300:
            raise RequestError(str(data), status=status)
        return data

    async def async_test_credentials(self, account_uuid: str) -> bool:
        """Attempt a token exchange, returning True if the secret is accepted."""
        try:
            await self.async_get_account_token(account_uuid)
        except LightApiAuthError as err:
            _LOGGER.debug("Credential validation failed: %s", err)
            return False
        return True

    async def async_get_account(self, account_uuid: str) -> AccountInfo:
        payload = await self._async_request(account_uuid, "/account")
        return validate_account(payload)

    async def async_get_monthly_usage(
        self,
        account_uuid: str,
        location_uuid: str,
        year: int | str,
    ) -> MonthlyUsagePage:
        """Return one year of monthly usage for a location."""
        payload = await self._async_request(
            account_uuid,
            f"/account/locations/{location_uuid}/usage/monthly",
            params={"year": str(year)},
        )
        return validate_monthly_usage_page(payload, year=int(year))

    async def async_get_daily_usage(
        self,
        account_uuid: str,
        location_uuid: str,
        month: int,
        year: int,
    ) -> DailyUsagePage:
        """Return the days with data for one month of a location."""
        payload = await self._async_request(
            account_uuid,
            f"/account/locations/{location_uuid}/usage/daily",
            params={"month": str(month), "year": str(year)},
        )
        return validate_daily_usage_page(payload, month=month, year=year)

    async def async_get_invoices(self, account_uuid: str) -> list[Invoice]:
        payload = await self._async_request(account_uuid, "/account/billing/invoices")
        return validate_invoices(payload)
