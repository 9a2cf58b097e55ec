"""Shared fixtures: a throwaway SQLite database and user factories."""

from __future__ import annotations

import os
import sys
from pathlib import Path
from typing import Callable

import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

TEST_DB_PATH = Path(__file__).parent / "test.db"
os.environ["DATABASE_URL"] = f"sqlite:///{TEST_DB_PATH}"
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["ACCESS_TOKEN_EXPIRE_MINUTES"] = "30"
os.environ["APP_TIMEZONE"] = "Europe/Athens"
os.environ["SMS_ENABLED"] = "false"
for _name in ("SENDGRID_API_KEY", "SENDGRID_SENDER"):
    os.environ.pop(_name, None)

from legal_crm.domain.entities import Notification, User  # noqa: E402
from legal_crm.infrastructure import database  # noqa: E402
from legal_crm.infrastructure.repositories import (  # noqa: E402
    NotificationRepository,
    RoleRepository,
    UserRepository,
)


@pytest.fixture()
def db_session():
    """Yield a session bound to freshly created tables."""

    from legal_crm.infrastructure import models  # noqa: F401

    database.Base.metadata.drop_all(bind=database.engine, checkfirst=True)
    database.Base.metadata.create_all(bind=database.engine)
    session = database.SessionLocal()
    try:
        yield session
    finally:
        session.close()
        database.Base.metadata.drop_all(bind=database.engine, checkfirst=True)


@pytest.fixture(scope="session", autouse=True)
def _remove_test_database():
    yield
    database.engine.dispose()
    if TEST_DB_PATH.exists():
        TEST_DB_PATH.unlink()


@pytest.fixture()
def make_user(db_session) -> Callable[..., User]:
    """Create users with sensible defaults; override any field by keyword."""

    counter = {"value": 0}

    def factory(
        *,
        role: str = "secretary",
        name: str | None = None,
        email: str | None = "",
        mobile: str | None = None,
        is_active: bool = True,
        deleted: bool = False,
    ) -> User:
        counter["value"] += 1
        role_entity = RoleRepository(db_session).ensure(role)
        if email == "":
            email = f"user{counter['value']}@lawoffice.gr"
        return UserRepository(db_session).create(
            User(
                id=None,
                role=role_entity,
                name=name or f"Χρήστης {counter['value']}",
                email=email,
                mobile=mobile,
                is_active=is_active,
                deleted=deleted,
            )
        )

    return factory


@pytest.fixture()
def make_notification(db_session) -> Callable[..., Notification]:
    """Persist a notification directly through the repository."""

    def factory(user_id: int, **overrides) -> Notification:
        fields = {
            "id": None,
            "user_id": user_id,
            "type": "system_announcement",
            "title": "Ανακοίνωση",
            "message": "Το γραφείο θα παραμείνει κλειστό την Παρασκευή.",
        }
        fields.update(overrides)
        return NotificationRepository(db_session).create(Notification(**fields))

    return factory
