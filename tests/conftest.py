"""Shared fixtures: a throwaway SQLite database per test and token helpers."""

import asyncio

import jwt
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import func, select

from app.core import config
from app.core.database.engine import build_engine, build_sessionmaker, get_db, init_db
from app.main import app

TEST_SECRET = "test-secret-key-that-is-long-enough-for-hs256"


def token_for(user_id: str) -> str:
    return jwt.encode({"sub": user_id}, TEST_SECRET, algorithm="HS256")


def auth(user_id: str) -> dict:
    return {"Authorization": f"Bearer {token_for(user_id)}"}


@pytest.fixture()
def session_factory(tmp_path, monkeypatch):
    monkeypatch.setattr(config, "JWT_SECRET", TEST_SECRET)
    monkeypatch.setattr(config, "JWT_ALGORITHM", "HS256")

    engine = build_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    asyncio.run(init_db(engine))
    yield build_sessionmaker(engine)
    asyncio.run(engine.dispose())


@pytest.fixture()
def client(session_factory):
    async def override_get_db():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture()
def count_rows(session_factory):
    """Count rows of ``model`` matching the given column values, straight from the store."""

    def count(model, **filters) -> int:
        async def run():
            async with session_factory() as session:
                stmt = select(func.count()).select_from(model)
                for column, value in filters.items():
                    stmt = stmt.where(getattr(model, column) == value)
                return (await session.execute(stmt)).scalar_one()

        return asyncio.run(run())

    return count


@pytest.fixture()
def make_org(client):
    """Create an organization owned by ``owner`` and return its JSON."""

    def make(name: str, owner: str = "owner-1", **extra) -> dict:
        response = client.post("/organizations", json={"name": name, **extra}, headers=auth(owner))
        assert response.status_code == 201, response.text
        return response.json()

    return make


@pytest.fixture()
def add_member(client):
    def add(org_id: str, user_id: str, role: str, owner: str = "owner-1") -> dict:
        response = client.post(
            f"/organizations/{org_id}/members",
            json={"user_id": user_id, "role": role},
            headers=auth(owner),
        )
        assert response.status_code == 201, response.text
        return response.json()

    return add


@pytest.fixture()
def make_doc(client):
    def make(org_id: str, title: str, user: str = "owner-1", **extra) -> dict:
        response = client.post(
            f"/organizations/{org_id}/documents",
            json={"title": title, **extra},
            headers=auth(user),
        )
        assert response.status_code == 201, response.text
        return response.json()

    return make
