"""Authentication and user-profile endpoint functions."""

from typing import Any, Optional

from common.logging_config import get_logger
from mediaclient.api_client import ApiClient
from mediaclient.schemas import (
    PasswordChangeRequest,
    ProfileUpdateRequest,
    RegisterRequest,
    TokenResponse,
    UserPayload,
    parse_payload,
)

logger = get_logger(__name__)


def login(client: ApiClient, email: str, password: str) -> TokenResponse:
    """
    Exchange credentials for an access token.

    The backend expects an OAuth2 password form, so the email goes in the
    ``username`` field.
    """
    logger.info(f"Attempting to login user: {email}")
    data = client.request(
        '/auth/login',
        'POST',
        data={'username': email, 'password': password},
    )
    return parse_payload(TokenResponse, data)


def register(client: ApiClient, email: str, password: str, full_name: str) -> Any:
    logger.info(f"Attempting to register user: {email}")
    body = RegisterRequest(email=email, password=password, full_name=full_name)
    return client.request('/auth/register', 'POST', json=body.model_dump())


def logout(client: ApiClient) -> Any:
    return client.request('/auth/logout', 'POST')


def get_current_user(client: ApiClient) -> UserPayload:
    return parse_payload(UserPayload, client.request('/users/me', 'GET'))


def update_profile(
    client: ApiClient,
    full_name: str,
    bio: Optional[str] = None,
    username: Optional[str] = None,
) -> Optional[UserPayload]:
    """
    Persist profile fields.

    Returns:
        The updated user, or None when the backend answers with a bare
        acknowledgement instead of a user record
    """
    body = ProfileUpdateRequest(full_name=full_name, username=username, bio=bio)
    data = client.request('/users/me', 'PUT', json=body.model_dump(exclude_none=True))
    if not (isinstance(data, dict) and 'id' in data and 'email' in data):
        logger.debug("Profile update acknowledged without a user record")
        return None
    return parse_payload(UserPayload, data)


def change_password(client: ApiClient, old_password: str, new_password: str) -> Any:
    logger.info("Changing password for current user")
    body = PasswordChangeRequest(old_password=old_password, new_password=new_password)
    return client.request('/users/me/password', 'PUT', json=body.model_dump())
