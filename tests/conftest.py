# tests/conftest.py
# Общие фикстуры: SQLite в памяти, демо-данные, TestClient с подменой get_db.
import os

# До импорта tailorcraft: engine модуля session создаётся при импорте
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["AUTH_PROVIDER"] = "password"
os.environ["ENVIRONMENT"] = "test"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from tailorcraft.core.security import create_access_token
from tailorcraft.db.base import Base
from tailorcraft.db.seed import seed_demo_data
from tailorcraft.db.session import get_db
from tailorcraft.main import app
from tailorcraft.models.user import RoleEnum


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    seed_demo_data(session)
    yield session
    session.close()


@pytest.fixture
def client(db, session_factory):
    def _get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = _get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


def _headers(user_id, role):
    return {"Authorization": f"Bearer {create_access_token(subject=user_id, role=role)}"}


@pytest.fixture
def admin_headers():
    return _headers("u1", RoleEnum.ADMIN)


@pytest.fixture
def customer_headers():
    return _headers("u2", RoleEnum.CUSTOMER)


@pytest.fixture
def other_customer_headers():
    return _headers("u3", RoleEnum.CUSTOMER)


@pytest.fixture
def worker_headers():
    return _headers("u4", RoleEnum.WORKER)
