"""
Shared fixtures: fresh in-memory storage and services per test.
"""

import asyncio
from datetime import datetime, timezone

import pytest
from fastapi.testclient import TestClient

from taskboard.api.app import app
from taskboard.core.schemas import RegisterRequest
from taskboard.services import (
    CommentService,
    LabelService,
    ProjectService,
    TicketService,
    UserService,
)
from taskboard.storage import create_local_storage, ensure_indexes

DUE = datetime(2026, 11, 1, tzinfo=timezone.utc)


# =============================================================================
# Services
# =============================================================================


@pytest.fixture
def storage():
    provider = create_local_storage()
    asyncio.run(ensure_indexes(provider))
    return provider


@pytest.fixture
def users(storage):
    return UserService(storage)


@pytest.fixture
def projects(storage):
    return ProjectService(storage)


@pytest.fixture
def tickets(storage):
    return TicketService(storage)


@pytest.fixture
def comments(storage):
    return CommentService(storage)


@pytest.fixture
def labels(storage):
    return LabelService(storage)


async def make_user(users: UserService, name: str, password: str = "secret-pw"):
    """Register <name>@x.com and return the stored user."""
    user, _ = await users.register(RegisterRequest(
        first_name=name.title(),
        last_name="Tester",
        phone="0600000000",
        email=f"{name}@x.com",
        password=password,
    ))
    return user


# =============================================================================
# HTTP
# =============================================================================


@pytest.fixture
def client():
    """Client with a fresh app state (the lifespan runs per test)."""
    with TestClient(app) as c:
        yield c


def register(client: TestClient, name: str, password: str = "secret-pw") -> dict:
    """Register over HTTP; returns {"id", "headers"}."""
    response = client.post("/api/auth/register", json={
        "firstName": name.title(),
        "lastName": "Tester",
        "phone": "0600000000",
        "email": f"{name}@x.com",
        "password": password,
    })
    assert response.status_code == 201, response.text
    body = response.json()
    return {
        "id": body["user"]["id"],
        "headers": {"Authorization": f"Bearer {body['token']}"},
    }
