from typing import Any

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from guardquote.core.errors import ValidationError
from guardquote.models import quote  # noqa: F401
from guardquote.models.user import User
from guardquote.repositories.base import storage_guard


class UserRepository:
    def __init__(self, db: Session):
        self.db = db

    def get_by_id(self, user_id: int) -> User | None:
        with storage_guard(self.db, "load user"):
            return self.db.get(User, user_id)

    def get_by_email(self, email: str) -> User | None:
        stmt = select(User).where(func.lower(User.email) == email.strip().lower())
        with storage_guard(self.db, "load user by email"):
            return self.db.scalars(stmt).first()

    def insert(self, values: dict[str, Any]) -> User:
        user = User(**{**values, "email": values["email"].strip().lower()})
        with storage_guard(self.db, "insert user"):
            self.db.add(user)
            try:
                self.db.commit()
            except IntegrityError:
                # lost a race with a concurrent registration of the same email
                self.db.rollback()
                raise ValidationError("Email already registered", ["email"])
            self.db.refresh(user)
        return user
