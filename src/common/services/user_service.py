import logging
import re
import uuid

import bcrypt

from common.models.users import Requester, User, UserRole
from common.repository.user_repo import UserRepository
from common.utils.constants import MAX_RECENT_SEARCHES
from common.utils.custom_exceptions import (
    IncorrectCredentials,
    InvalidInput,
    NotFoundException,
    UserAlreadyExists,
)
from common.utils.jwt_service import create_jwt

logger = logging.getLogger(__name__)

PASSWORD_REGEX = re.compile(r"^(?=.*[a-z])(?=.*[A-Z])(?=.*\d)(?=.*[^A-Za-z0-9]).{12,}$")


def push_recent_city(cities: list[str], city: str, limit: int = MAX_RECENT_SEARCHES) -> list[str]:
    """Newest first, no duplicates, oldest evicted past the limit."""
    if any(c.lower() == city.lower() for c in cities):
        return list(cities)
    return [city, *cities][:limit]


class UserService:
    def __init__(self, user_repo: UserRepository):
        self.user_repo = user_repo

    def get_user_by_id(self, user_id: str) -> User:
        user = self.user_repo.get_by_id(user_id=user_id)
        if user is None:
            raise NotFoundException(resource="user", identifier=user_id, status_code=404)
        return user

    def get_user_by_mail(self, mail: str) -> User:
        user = self.user_repo.get_by_mail(mail=mail)
        if user is None:
            raise NotFoundException(resource="user", identifier=mail, status_code=404)
        return user

    def get_profile(self, requester: Requester) -> User:
        return self.get_user_by_id(requester.user_id)

    def add_recent_search(self, requester: Requester, city: str) -> list[str]:
        user = self.get_user_by_id(requester.user_id)
        cities = push_recent_city(user.recent_searched_cities, city.strip())
        if cities != user.recent_searched_cities:
            self.user_repo.update_recent_searches(user.user_id, cities)
        return cities

    def login(self, email: str, password: str) -> str:
        user = self.get_user_by_mail(email)

        if not user.password or not bcrypt.checkpw(
            password.encode("utf-8"),
            user.password.encode("utf-8"),
        ):
            raise IncorrectCredentials("Invalid email or password")

        return create_jwt(user.user_id, email, user.role.value)

    def signup(self, email: str, username: str, password: str) -> str:
        self._is_email_valid(email)
        self._is_password_valid(password)

        user_id = str(uuid.uuid4())
        self.user_repo.add_user(
            User(
                user_id=user_id,
                username=username,
                email=email,
                password=self._hash_password(password),
                role=UserRole.GUEST,
            )
        )
        logger.info("User %s signed up", user_id)
        return create_jwt(user_id, email, UserRole.GUEST.value)

    def _is_password_valid(self, password: str):
        if not PASSWORD_REGEX.fullmatch(password):
            raise InvalidInput(
                "Password must be at least 12 characters long and contain "
                "uppercase, lowercase, digit, and special character"
            )

    def _hash_password(self, password: str) -> str:
        return bcrypt.hashpw(password.encode(), bcrypt.gensalt()).decode()

    def _is_email_valid(self, email: str):
        pattern = r"^[\w\.-]+@[\w\.-]+\.\w+$"
        if not re.match(pattern, email):
            raise InvalidInput("Invalid email format")
        if self.user_repo.get_by_mail(mail=email):
            raise UserAlreadyExists("email is already in use")
