import os
import sys

import pytest
from fastapi.testclient import TestClient

sys.path.append(os.path.dirname(__file__))

from crm.main import create_app
from crm.services.activities import ActivitiesService
from crm.services.auth import AuthService
from crm.services.communications import CommunicationsService
from crm.services.data_store import DataStore
from crm.services.latency import Latency
from crm.services.notes import NotesService
from crm.services.session_store import MemoryKeyValueStore
from crm.services.students import StudentsService
from factories import NOW

ADMIN_EMAIL = "admin@example.com"
ADMIN_PASSWORD = "password"


@pytest.fixture
def store():
    return DataStore.with_mock_data(seed=42, student_count=20, now=NOW)


@pytest.fixture
def empty_store():
    return DataStore()


def fixed_clock():
    return NOW


@pytest.fixture
def students_service(store):
    return StudentsService(store, Latency.none(), clock=fixed_clock)


@pytest.fixture
def communications_service(store):
    return CommunicationsService(store, Latency.none(), clock=fixed_clock)


@pytest.fixture
def notes_service(store):
    return NotesService(store, Latency.none(), clock=fixed_clock)


@pytest.fixture
def activities_service(store):
    return ActivitiesService(store, Latency.none(), clock=fixed_clock)


@pytest.fixture
def auth_service():
    return AuthService(
        MemoryKeyValueStore(),
        admin_email=ADMIN_EMAIL,
        admin_password=ADMIN_PASSWORD,
        latency=Latency.none(),
    )


@pytest.fixture
def client(store):
    app = create_app(
        store=store,
        session_store=MemoryKeyValueStore(),
        latency=Latency.none(),
        auth_latency=Latency.none(),
    )
    with TestClient(app) as c:
        yield c


@pytest.fixture
def auth_headers(client):
    resp = client.post("/auth/login", json={"email": ADMIN_EMAIL, "password": ADMIN_PASSWORD})
    assert resp.status_code == 200
    return {"Authorization": f"Bearer {resp.json()['token']}"}
