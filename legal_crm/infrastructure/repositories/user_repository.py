"""Persistence layer for the user directory."""

from __future__ import annotations

from sqlalchemy.orm import Session, joinedload

from legal_crm.domain.entities import Role, User
from legal_crm.infrastructure.models import UserModel
from legal_crm.utils import ensure_app_naive_datetime, ensure_app_timezone


class UserRepository:
    """Read access to users plus the inserts needed to seed them."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def get(self, user_id: int) -> User | None:
        model = (
            self.session.query(UserModel)
            .options(joinedload(UserModel.role))
            .filter(UserModel.id == user_id)
            .one_or_none()
        )
        return self._to_entity(model) if model else None

    def create(self, user: User) -> User:
        model = UserModel(
            role_id=user.role.id,
            name=user.name,
            email=user.email,
            mobile=user.mobile,
            is_active=user.is_active,
            deleted=user.deleted,
        )
        if user.created_at is not None:
            model.created_at = ensure_app_naive_datetime(user.created_at)
        self.session.add(model)
        self.session.commit()
        self.session.refresh(model)
        return self._to_entity(model)

    @staticmethod
    def _to_entity(model: UserModel) -> User:
        return User(
            id=model.id,
            role=Role(id=model.role.id, name=model.role.name, alias=model.role.alias),
            name=model.name,
            email=model.email or None,
            mobile=model.mobile or None,
            is_active=bool(model.is_active),
            deleted=bool(model.deleted),
            created_at=ensure_app_timezone(model.created_at),
        )


__all__ = ["UserRepository"]
