"""1secmail-compatible inbox provider."""

from __future__ import annotations

from typing import Any

import httpx
from loguru import logger

from dropwin.application.ports.inbox_provider import MessageListing
from dropwin.domain import MailboxAddress, Message
from dropwin.domain.errors import ListFetchError, MessageNotFoundError, ReadFetchError
from dropwin.infrastructure.email.providers.onesecmail.mapper import raw_to_message

NOT_FOUND_TEXT = "message not found"


class OneSecMailProvider:
    """Reads disposable inboxes through the 1secmail HTTP API.

    Listing never raises: any upstream failure degrades to an empty listing
    with an error string. Reading a single message raises ReadFetchError
    (or MessageNotFoundError) so the caller can report it.
    """

    BASE_URL = "https://www.1secmail.com/api/v1/"

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float = 10.0,
        client: httpx.AsyncClient | None = None,
    ):
        self.base_url = base_url or self.BASE_URL
        self.timeout = timeout
        self._client = client or httpx.AsyncClient()
        self._owns_client = client is None

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def _get(self, params: dict[str, Any]) -> httpx.Response:
        response = await self._client.get(self.base_url, params=params, timeout=self.timeout)
        response.raise_for_status()
        return response

    async def list_messages(self, address: MailboxAddress) -> MessageListing:
        """List the inbox of ``address``."""
        logger.debug(f"Checking messages for {address.email}")
        try:
            items = await self._fetch_list(address)
        except ListFetchError as e:
            logger.warning(f"Listing {address.email} failed: {e}")
            return MessageListing(messages=[], error="Could not fetch messages. Try again later.")

        messages = []
        for raw in items:
            try:
                messages.append(raw_to_message(raw))
            except (ValueError, TypeError) as e:
                logger.warning(f"Skipping malformed message for {address.email}: {e}")

        logger.debug(f"Found {len(messages)} message(s) for {address.email}")
        return MessageListing(messages=messages)

    async def _fetch_list(self, address: MailboxAddress) -> list[Any]:
        params = {"action": "getMessages", "login": address.username, "domain": address.domain}
        try:
            response = await self._get(params)
            data = response.json()
        except httpx.TimeoutException as e:
            raise ListFetchError("Request timeout") from e
        except httpx.HTTPStatusError as e:
            raise ListFetchError(f"HTTP {e.response.status_code}") from e
        except httpx.HTTPError as e:
            raise ListFetchError(str(e) or type(e).__name__) from e
        except ValueError as e:
            raise ListFetchError(f"Invalid JSON: {e}") from e

        if data is None:
            return []
        if not isinstance(data, list):
            raise ListFetchError(f"Expected a list, got {type(data).__name__}")
        return data

    async def read_message(self, address: MailboxAddress, message_id: int) -> Message:
        """Fetch one message with its HTML body and attachment metadata."""
        logger.info(f"Reading message {message_id} for {address.email}")
        params = {
            "action": "readMessage",
            "login": address.username,
            "domain": address.domain,
            "id": message_id,
        }
        try:
            response = await self._get(params)
        except httpx.TimeoutException as e:
            logger.error(f"Timeout reading message {message_id} for {address.email}")
            raise ReadFetchError("Request timeout") from e
        except httpx.HTTPStatusError as e:
            if e.response.status_code == 404:
                raise MessageNotFoundError(f"Message {message_id} not found") from e
            logger.error(f"Provider error {e.response.status_code} reading message {message_id}")
            raise ReadFetchError(f"HTTP {e.response.status_code}") from e
        except httpx.HTTPError as e:
            logger.error(f"Provider request failed reading message {message_id}: {e}")
            raise ReadFetchError(str(e) or type(e).__name__) from e

        text = response.text.strip()
        if not text or text.lower() == NOT_FOUND_TEXT:
            raise MessageNotFoundError(f"Message {message_id} not found")

        try:
            data = response.json()
        except ValueError as e:
            raise ReadFetchError(f"Invalid JSON: {e}") from e
        if not data:
            raise MessageNotFoundError(f"Message {message_id} not found")

        try:
            return raw_to_message(data, include_details=True)
        except (ValueError, TypeError) as e:
            raise ReadFetchError(f"Malformed message: {e}") from e
