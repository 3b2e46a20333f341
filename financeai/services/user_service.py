"""User registration (no sessions or login)."""

from __future__ import annotations

from financeai.core.security import hash_password
from financeai.domain.models import PublicUser, UserCreate
from financeai.domain.validation import UserRequest
from financeai.repositories import DuplicateRecordError, Repository


class UserExistsError(Exception):
    def __init__(self, field: str):
        super().__init__(f"{field} already registered")
        self.field = field


class UserService:
    def __init__(self, repository: Repository) -> None:
        self.repository = repository

    def register(self, request: UserRequest) -> PublicUser:
        email = request.email.strip().lower()
        if self.repository.get_user_by_username(request.username):
            raise UserExistsError("username")
        if self.repository.get_user_by_email(email):
            raise UserExistsError("email")
        try:
            user = self.repository.create_user(
                UserCreate(username=request.username, email=email, password=hash_password(request.password))
            )
        except DuplicateRecordError as exc:
            raise UserExistsError(exc.field) from exc
        return PublicUser.model_validate(user.model_dump())
