"""
Google Cloud Translation Backend

Calls the Cloud Translation v2 REST endpoint with a batch of texts.

Authentication is resolved once at startup, either from a service-account
JSON blob (``GOOGLE_CLIENT_CREDENTIALS``) or from an API key
(``GOOGLE_TRANSLATE_API_KEY``). Service-account access tokens are refreshed
lazily when they expire.
"""

from __future__ import annotations

import asyncio
import json
from typing import Any, Optional

import google.auth.transport.requests
import httpx
import requests
from google.auth.exceptions import GoogleAuthError
from google.oauth2 import service_account

from src.feeds.errors import TranslationFailure
from src.utils.logging_config import get_logger

logger = get_logger(__name__)

TRANSLATE_URL = "https://translation.googleapis.com/language/translate/v2"
TRANSLATE_SCOPE = "https://www.googleapis.com/auth/cloud-translation"


def load_service_account_credentials(credentials_json: str) -> service_account.Credentials:
    """Build scoped credentials from a service-account JSON blob.

    Raises:
        ValueError: If the blob is not valid JSON or not a service-account key.
    """
    try:
        info = json.loads(credentials_json)
    except json.JSONDecodeError as e:
        raise ValueError(f"Credentials are not valid JSON: {e.msg}") from e

    return service_account.Credentials.from_service_account_info(info, scopes=[TRANSLATE_SCOPE])


def _parse_translations(payload: Any) -> list[str]:
    try:
        translations = payload["data"]["translations"]
        return [str(t["translatedText"]) for t in translations]
    except (KeyError, TypeError) as e:
        raise TranslationFailure(f"Malformed translation response: missing {e}") from e


class GoogleTranslateBackend:
    """Batch translator backed by Google Cloud Translation v2."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        credentials: Optional[service_account.Credentials] = None,
        api_key: Optional[str] = None,
        endpoint: str = TRANSLATE_URL,
    ) -> None:
        self._client = client
        self._credentials = credentials
        self._api_key = api_key
        self._endpoint = endpoint
        # One token transport for every refresh; only needed with a service account
        self._token_session: Optional[requests.Session] = None
        self._auth_request: Optional[google.auth.transport.requests.Request] = None
        if credentials is not None:
            self._token_session = requests.Session()
            self._auth_request = google.auth.transport.requests.Request(session=self._token_session)
        # Created lazily so it binds to the running event loop
        self._refresh_lock: asyncio.Lock | None = None

    @property
    def configured(self) -> bool:
        return self._credentials is not None or self._api_key is not None

    def close(self) -> None:
        """Release the token refresh session."""
        if self._token_session is not None:
            self._token_session.close()

    def _get_lock(self) -> asyncio.Lock:
        if self._refresh_lock is None:
            self._refresh_lock = asyncio.Lock()
        return self._refresh_lock

    async def _auth_headers(self) -> dict[str, str]:
        if self._credentials is None:
            return {}

        if not self._credentials.valid:
            async with self._get_lock():
                if not self._credentials.valid:
                    try:
                        await asyncio.to_thread(self._credentials.refresh, self._auth_request)
                    except GoogleAuthError as e:
                        raise TranslationFailure(f"Credential refresh failed: {e}") from e

        return {"Authorization": f"Bearer {self._credentials.token}"}

    async def translate_batch(self, texts: list[str], target_language: str) -> list[str]:
        """
        Translate *texts* into *target_language*, preserving order.

        Raises:
            TranslationFailure: If no credentials are configured, the backend
                rejects the call, the call times out, or the response body is
                malformed.
        """
        if not self.configured:
            raise TranslationFailure("No translation credentials configured")
        if not texts:
            return []

        headers = await self._auth_headers()
        params = {"key": self._api_key} if self._credentials is None else None
        body = {"q": texts, "target": target_language, "format": "text"}

        try:
            response = await self._client.post(self._endpoint, json=body, headers=headers, params=params)
            response.raise_for_status()
            payload = response.json()
        except httpx.HTTPStatusError as e:
            raise TranslationFailure(f"Translation backend returned HTTP {e.response.status_code}") from e
        except httpx.HTTPError as e:
            raise TranslationFailure(f"Translation request failed: {e!r}") from e
        except ValueError as e:
            raise TranslationFailure("Translation response is not JSON") from e

        return _parse_translations(payload)
