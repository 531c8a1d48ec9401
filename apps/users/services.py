import logging
from typing import Optional, Dict, Any
from django.contrib.auth import authenticate
from django.db import transaction
from rest_framework.authtoken.models import Token
from apps.common.exceptions import UserAlreadyExistsError, InvalidCredentialsError
from .repositories import UserRepository
from .models import User

logger = logging.getLogger('apps.users')


class UserService:
    def __init__(self):
        self.user_repo = UserRepository()

    def register_user(self, user_data: Dict[str, Any]) -> Dict[str, Any]:
        if self.user_repo.email_exists(user_data['email']):
            raise UserAlreadyExistsError()

        with transaction.atomic():
            user = self.user_repo.create_user(**user_data)
            token = Token.objects.create(user=user)

        logger.info(f"Registered {user.role} account {user.id}")
        return {
            'user': user,
            'token': token.key
        }

    def authenticate_user(self, email: str, password: str) -> Dict[str, Any]:
        user = authenticate(username=email, password=password)
        if not user or not user.is_active:
            logger.info("Rejected login attempt")
            raise InvalidCredentialsError()

        token, created = Token.objects.get_or_create(user=user)
        return {
            'user': user,
            'token': token.key
        }

    def get_user(self, user_id: int) -> Optional[User]:
        return self.user_repo.get_user_by_id(user_id)
