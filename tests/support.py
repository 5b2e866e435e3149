"""Shared test scaffolding: SQLite in-memory database, fast settings, entity builders."""

import unittest

from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from app.core.config import Settings
from app.models import Base, Module, Role, User
from app.services.modules import create_module
from app.services.roles import create_role
from app.services.users import create_user

PASSWORD = "Passw0rd-test"


def make_settings(**overrides: object) -> Settings:
    """Settings with a fixed secret and cheap bcrypt rounds."""
    values: dict[str, object] = {
        "JWT_SECRET": "test-secret-for-unit-tests",
        "BCRYPT_ROUNDS": 4,
        "REFRESH_TOKEN_STATEFUL": True,
        "REFRESH_TOKEN_TRANSPORT": "cookie",
        "DEFAULT_ROLE_NAME": "user",
        "ADMIN_ROLE_NAME": "admin",
    }
    values.update(overrides)
    return Settings(**values)


def make_sessionmaker() -> sessionmaker:
    """Fresh in-memory SQLite database with all tables created."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


class DatabaseTestCase(unittest.TestCase):
    """Each test gets its own empty database and session."""

    def setUp(self) -> None:
        self.SessionLocal = make_sessionmaker()
        self.db: Session = self.SessionLocal()
        self.settings = make_settings()

    def tearDown(self) -> None:
        self.db.close()
        engine = self.SessionLocal.kw["bind"]
        Base.metadata.drop_all(bind=engine)
        engine.dispose()

    def make_role(self, name: str = "editor") -> Role:
        return create_role(self.db, name)

    def make_user(
        self,
        email: str = "user@example.com",
        role_id: int | None = None,
        approved: bool = True,
        active: bool = True,
        password: str = PASSWORD,
    ) -> User:
        return create_user(
            self.db,
            name="Test User",
            email=email,
            password=password,
            settings=self.settings,
            role_id=role_id,
            approved=approved,
            active=active,
        )

    def make_module(self, name: str, parent_id: int | None = None, active: bool = True) -> Module:
        return create_module(self.db, name, parent_id=parent_id, active=active)
