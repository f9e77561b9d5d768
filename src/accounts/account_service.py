# src/accounts/account_service.py
# Created: 2026-10-19 09:12:40
# Author: accounts-client

from typing import Dict, Any, Optional, Awaitable, Callable
import logging
import aiohttp

from src.core.config import Config
from src.core.exceptions import AccountsError, ConfigError, StorageError
from src.utils.api import APIClient, APIConfig, APIResponse, RequestError, bearer
from src.utils.storage import TokenStore, FileTokenStore, ACCESS_TOKEN_KEY

logger = logging.getLogger(__name__)

REGISTER_ENDPOINT = "/register/"
LOGIN_ENDPOINT = "/login/"
PROFILE_ENDPOINT = "/profile/"
TOKEN_REFRESH_ENDPOINT = "/token/refresh/"

class AccountServiceError(AccountsError):
    """Base exception for account operations"""
    pass

class RegistrationError(AccountServiceError):
    """Raised when registration fails"""
    pass

class LoginError(AccountServiceError):
    """Raised when login fails"""
    pass

class ProfileError(AccountServiceError):
    """Raised when fetching or updating the profile fails"""
    pass

class TokenRefreshError(AccountServiceError):
    """Raised when the access token cannot be refreshed"""
    pass

class AccountService:
    """
    Account operations against the accounts REST API.

    Each operation returns the decoded response body or raises an
    AccountServiceError subclass whose message is meant for the user.
    Profile calls recover from an expired access token by refreshing it
    once, storing the new token and retrying the call once.
    """

    def __init__(self, client: APIClient, token_store: TokenStore):
        self.client = client
        self.token_store = token_store

    async def __aenter__(self) -> "AccountService":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    async def close(self) -> None:
        await self.client.close()

    async def register(
        self,
        username: str,
        email: str,
        password: str,
        is_creator: bool
    ) -> Any:
        """
        Register a new user

        Args:
            username: Desired username
            email: Email address
            password: Plain password, sent once and never stored
            is_creator: Whether the account is a creator account

        Returns:
            Decoded response body

        Raises:
            RegistrationError: With the server detail, the joined field
                errors, or a generic message
        """
        try:
            response = await self.client.post(REGISTER_ENDPOINT, data={
                "username": username,
                "email": email,
                "password": password,
                "is_creator": is_creator
            })
        except RequestError as e:
            message = e.payload.message("Registration failed", join_fields=True)
            logger.warning(f"Registration of '{username}' failed: {message}")
            raise RegistrationError(message) from e

        logger.info(f"Registered user '{username}'")
        return response.data

    async def login(self, username: str, password: str) -> Any:
        """Log in and return the token pair sent by the server"""
        try:
            response = await self.client.post(LOGIN_ENDPOINT, data={
                "username": username,
                "password": password
            })
        except RequestError as e:
            message = e.payload.message("Login failed")
            logger.warning(f"Login of '{username}' failed: {message}")
            raise LoginError(message) from e

        return response.data

    async def refresh_token(self, refresh_token: str) -> Any:
        """
        Exchange a refresh token for a new access token

        Raises:
            TokenRefreshError: On any failure, whatever the server said
        """
        try:
            response = await self.client.post(TOKEN_REFRESH_ENDPOINT, data={"refresh": refresh_token})
        except RequestError as e:
            logger.warning(f"Token refresh failed with status {e.payload.status}")
            raise TokenRefreshError("Failed to refresh token") from None

        return response.data

    async def fetch_profile(
        self,
        access_token: str,
        refresh_token: Optional[str] = None
    ) -> Any:
        """
        Fetch the profile of the user owning access_token

        Raises:
            ProfileError: When the call fails, including when the refreshed
                token cannot be stored
            TokenRefreshError: When the expired token cannot be refreshed
        """
        async def send(token: str) -> APIResponse:
            return await self.client.get(PROFILE_ENDPOINT, headers=bearer(token))

        return await self._with_token_refresh(
            send, access_token, refresh_token,
            fallback="Failed to fetch profile",
            join_fields=False
        )

    async def update_profile(
        self,
        access_token: str,
        data: Dict[str, Any],
        refresh_token: Optional[str] = None
    ) -> Any:
        """Partially update the profile with the given fields"""
        async def send(token: str) -> APIResponse:
            return await self.client.patch(PROFILE_ENDPOINT, data=data, headers=bearer(token))

        return await self._with_token_refresh(
            send, access_token, refresh_token,
            fallback="Failed to update profile",
            join_fields=True
        )

    async def _with_token_refresh(
        self,
        send: Callable[[str], Awaitable[APIResponse]],
        access_token: str,
        refresh_token: Optional[str],
        fallback: str,
        join_fields: bool
    ) -> Any:
        """Send a bearer request, refreshing the access token and retrying once if it expired"""
        try:
            response = await send(access_token)
            return response.data
        except RequestError as e:
            if not (e.payload.is_token_expired and refresh_token):
                raise ProfileError(e.payload.message(fallback, join_fields=join_fields)) from e
            logger.info("Access token expired, refreshing")

        try:
            new_token = await self._renew_access_token(refresh_token)
        except StorageError as e:
            logger.error(f"Could not store refreshed access token: {str(e)}")
            raise ProfileError(fallback) from e
        try:
            response = await send(new_token)
        except RequestError as e:
            # No second refresh, even if the new token is rejected too
            raise ProfileError(e.payload.message(fallback, join_fields=join_fields)) from e
        return response.data

    async def _renew_access_token(self, refresh_token: str) -> str:
        refresh_data = await self.refresh_token(refresh_token)
        new_token = refresh_data.get("access") if isinstance(refresh_data, dict) else None
        if not new_token:
            logger.error("Token refresh response carried no access token")
            raise TokenRefreshError("Failed to refresh token")

        await self.token_store.set(ACCESS_TOKEN_KEY, new_token)
        return new_token

def create_account_service(
    config: Config,
    token_store: Optional[TokenStore] = None,
    session: Optional[aiohttp.ClientSession] = None
) -> AccountService:
    """
    Build an AccountService from configuration

    Args:
        config: Configuration holding api.* and storage.* settings
        token_store: Store for refreshed access tokens, a FileTokenStore at
            storage.token_file when omitted
        session: Externally owned aiohttp session

    Raises:
        ConfigError: If api.base_url is not configured
    """
    base_url = config.get("api.base_url")
    if not base_url:
        raise ConfigError("api.base_url is not configured (set ACCOUNTS_API_BASE_URL)")

    client = APIClient(
        APIConfig(
            base_url=base_url,
            timeout=config.get("api.timeout", 30.0),
            verify_ssl=config.get("api.verify_ssl", True),
            user_agent=config.get("api.user_agent", "accounts-client/1.0")
        ),
        session=session
    )
    if token_store is None:
        token_store = FileTokenStore(config.get("storage.token_file"))
    return AccountService(client, token_store)
