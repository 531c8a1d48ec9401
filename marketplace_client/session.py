"""
Signed-in state for the marketplace client.
"""

import logging
from typing import Optional

from .exceptions import ClientError, RoleError
from .models import BUYER, ROLES, SELLER, User

logger = logging.getLogger('marketplace_client')


class AuthSession:
    def __init__(self, api):
        self.api = api
        self.user: Optional[User] = None
        self.is_loading = False

    def restore(self) -> Optional[User]:
        """Load the current user for a stored token; a rejected token is forgotten."""
        if not self.api.token_store.get():
            self.user = None
            return None

        self.is_loading = True
        try:
            self.user = User.from_json(self.api.get('/api/me'))
            logger.info(f"Restored session for {self.user.email}")
        except ClientError as e:
            logger.warning(f"Failed to restore session: {e}")
            self.api.token_store.clear()
            self.user = None
        finally:
            self.is_loading = False
        return self.user

    def login(self, email: str, password: str) -> User:
        data = self.api.post('/api/login', json={'email': email, 'password': password})
        return self._start(data)

    def register(self, email: str, password: str, name: str, role: str) -> User:
        if role not in ROLES:
            raise ValueError(f"Role must be one of {', '.join(ROLES)}")
        data = self.api.post('/api/register', json={
            'email': email,
            'password': password,
            'name': name,
            'role': role,
        })
        return self._start(data)

    def logout(self) -> None:
        self.api.token_store.clear()
        self.user = None

    @property
    def is_authenticated(self) -> bool:
        return self.user is not None

    @property
    def is_seller(self) -> bool:
        return self.user is not None and self.user.role == SELLER

    @property
    def is_buyer(self) -> bool:
        return self.user is not None and self.user.role == BUYER

    def require_role(self, role: str) -> User:
        if self.user is None:
            raise RoleError("You must be logged in")
        if self.user.role != role:
            raise RoleError(f"Only {role}s can do this")
        return self.user

    def _start(self, data) -> User:
        self.api.token_store.set(data['token'])
        self.user = User.from_json(data.get('user'))
        logger.info(f"Signed in as {self.user.email} ({self.user.role})")
        return self.user
