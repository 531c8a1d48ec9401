from typing import Optional
from django.contrib.auth import get_user_model

User = get_user_model()


class UserRepository:
    @staticmethod
    def create_user(email: str, password: str, name: str, role: str) -> User:
        # The email doubles as the username so ModelBackend can authenticate on it.
        user = User.objects.create_user(
            username=email,
            email=email,
            password=password,
            name=name,
            role=role
        )
        return user

    @staticmethod
    def get_user_by_id(user_id: int) -> Optional[User]:
        try:
            return User.objects.get(id=user_id)
        except User.DoesNotExist:
            return None

    @staticmethod
    def get_user_by_email(email: str) -> Optional[User]:
        try:
            return User.objects.get(email__iexact=email)
        except User.DoesNotExist:
            return None

    @staticmethod
    def email_exists(email: str) -> bool:
        return User.objects.filter(email__iexact=email).exists()
