"""
Handles authentication with the catalog API using the stored credentials.
"""

import asyncio
import logging
from typing import TYPE_CHECKING, Any

import aiohttp

from gmplayer.exceptions import AuthenticationError

if TYPE_CHECKING:
    from .client import CatalogAPIClient

log = logging.getLogger(__name__)


class CatalogAuthenticator:
    """
    Manages the authentication flow for the catalog API client.
    """

    def __init__(self, api_client: "CatalogAPIClient"):
        """
        Initializes the authenticator.

        Args:
            api_client: A reference to the main CatalogAPIClient instance.
        """
        self._api_client = api_client

    @property
    def is_authenticated(self) -> bool:
        return self._api_client.auth_token is not None

    async def ensure_authenticated(self) -> None:
        """Logs in with the settings' credentials unless a token is already held."""
        if self.is_authenticated:
            return
        settings = self._api_client.settings
        await self.authenticate_with_credentials(settings.email, settings.password)

    async def authenticate_with_credentials(
        self, email: str, password: str
    ) -> dict[str, Any]:
        """
        Authenticates using an email and password.

        Args:
            email: The user's email address.
            password: The user's password.

        Returns:
            The login response dictionary from the API.
        """
        log.debug(f"Authenticating as: {email}")

        try:
            response = await self._api_client.api_call(
                "auth/login",
                method="POST",
                payload={"email": email, "password": password},
            )
        except aiohttp.ClientResponseError as e:
            if e.status in (401, 403):
                raise AuthenticationError(
                    f"Login rejected for {email}: invalid email or password."
                ) from e
            raise AuthenticationError(f"Login failed for {email}: {e}") from e
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise AuthenticationError(f"Could not reach the catalog: {e}") from e

        token = response.get("token")
        if not token:
            raise AuthenticationError("The catalog did not return an access token.")

        self._api_client.auth_token = token
        log.debug(f"Successfully authenticated as: {email}")
        return response
