"""Authentication state: current user, session resume, login and profile."""

from dataclasses import dataclass, fields, replace
from datetime import datetime
from enum import Enum
from typing import Optional

from common.constants import MAX_BIO_LENGTH
from common.logging_config import get_logger
from mediaclient import auth_api
from mediaclient.api_client import ApiClient
from mediaclient.exceptions import MediaDashError, MissingTokenError, ValidationError
from mediaclient.schemas import UserPayload

logger = get_logger(__name__)


class AuthState(str, Enum):
    ANONYMOUS = "anonymous"
    LOADING = "loading"
    AUTHENTICATED = "authenticated"


@dataclass(frozen=True)
class User:
    """
    The signed-in user as seen by the client.
    """
    id: str
    email: str
    username: str
    full_name: Optional[str] = None
    bio: Optional[str] = None
    avatar_url: Optional[str] = None
    created_at: Optional[datetime] = None


USER_FIELDS = frozenset(f.name for f in fields(User))


def normalize_user(payload: UserPayload) -> User:
    """
    Build a User from a raw payload.

    The display username falls back from ``username`` to ``full_name`` to
    the local part of the email address.
    """
    username = payload.username or payload.full_name or payload.email.split('@')[0]
    return User(
        id=str(payload.id),
        email=payload.email,
        username=username,
        full_name=payload.full_name,
        bio=payload.bio,
        avatar_url=payload.avatar_url,
        created_at=payload.created_at,
    )


class AuthStore:
    """Owns the current user; all changes go through its methods."""

    def __init__(self, client: ApiClient, max_bio_length: int = MAX_BIO_LENGTH):
        self.client = client
        self.max_bio_length = max_bio_length
        self._user: Optional[User] = None
        self._loading = False

    @property
    def user(self) -> Optional[User]:
        return self._user

    @property
    def is_loading(self) -> bool:
        return self._loading

    @property
    def state(self) -> AuthState:
        if self._loading:
            return AuthState.LOADING
        if self._user is not None:
            return AuthState.AUTHENTICATED
        return AuthState.ANONYMOUS

    def _fetch_user(self) -> User:
        self._user = normalize_user(auth_api.get_current_user(self.client))
        return self._user

    def bootstrap(self) -> Optional[User]:
        """
        Resolve an existing session from the stored token.

        Any failure leaves the store anonymous; nothing is raised.
        """
        if not self.client.token_store.get_token():
            logger.debug("No stored token; starting anonymous")
            return None

        self._loading = True
        try:
            user = self._fetch_user()
            logger.info(f"Resumed session for {user.email}")
            return user
        except MediaDashError as e:
            logger.info(f"Stored session could not be resumed: {e}")
            self._user = None
            return None
        finally:
            self._loading = False

    def login(self, email: str, password: str) -> User:
        """
        Log in, store the access token and load the user.

        Raises:
            MissingTokenError: If the backend returns no access token
            ApiError: If the backend rejects the credentials
        """
        self._loading = True
        try:
            token = auth_api.login(self.client, email, password)
            if not token.access_token:
                raise MissingTokenError("Login succeeded but no access token was returned")
            self.client.token_store.set_token(token.access_token)
            user = self._fetch_user()
            logger.info(f"Login successful for user: {email}")
            return user
        finally:
            self._loading = False

    def signup(self, email: str, username: str, password: str) -> User:
        """Register a new account and log into it."""
        self._loading = True
        try:
            auth_api.register(self.client, email, password, full_name=username)
        finally:
            self._loading = False
        logger.info(f"Registration successful for user: {email}")
        return self.login(email, password)

    def logout(self) -> None:
        """
        End the session.

        Server-side revocation is best effort; the local token and user are
        always cleared.
        """
        try:
            auth_api.logout(self.client)
        except MediaDashError as e:
            logger.warning(f"Server logout failed, clearing local session anyway: {e}")
        self.client.token_store.set_token(None)
        self._user = None

    def update_profile(self, **updates) -> Optional[User]:
        """
        Merge fields into the in-memory user. No backend call is made.

        Raises:
            TypeError: If a field name is not a User field
        """
        unknown = set(updates) - USER_FIELDS
        if unknown:
            raise TypeError(f"Unknown user fields: {', '.join(sorted(unknown))}")
        if self._user is None:
            return None
        self._user = replace(self._user, **updates)
        return self._user

    def save_profile(self, full_name: str, bio: Optional[str] = None) -> User:
        """
        Persist name and bio, then merge the result locally.

        The server's user record wins when it returns one; otherwise the
        submitted fields are merged.

        Raises:
            ValidationError: If the bio is longer than max_bio_length
        """
        if bio and len(bio) > self.max_bio_length:
            raise ValidationError(f"Bio too long: maximum {self.max_bio_length} characters")

        payload = auth_api.update_profile(self.client, full_name=full_name, bio=bio)
        if payload is None:
            # Bare acknowledgement: merge what was sent.
            updates = {'full_name': full_name}
            if bio is not None:
                updates['bio'] = bio
            current = self._user
            if current is not None and current.username == current.full_name:
                updates['username'] = full_name or current.email.split('@')[0]
            return self.update_profile(**updates)

        updated = normalize_user(payload)
        user = self.update_profile(
            username=updated.username,
            full_name=updated.full_name,
            bio=updated.bio,
        )
        return user or updated

    def change_password(self, old_password: str, new_password: str, confirm_password: str) -> None:
        """
        Change the account password after checking the inputs locally.

        Raises:
            ValidationError: If a field is empty or the confirmation differs
        """
        if not old_password or not new_password or not confirm_password:
            raise ValidationError("All password fields are required")
        if new_password != confirm_password:
            raise ValidationError("New password and confirmation do not match")

        auth_api.change_password(self.client, old_password, new_password)
        logger.info("Password changed")
