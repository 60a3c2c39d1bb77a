import os
import tempfile

# Settings are read at import time, so configure them before importing the app.
_TEST_DIR = tempfile.mkdtemp(prefix="legalmatters-tests-")
os.environ["DATABASE_URL"] = f"sqlite:///{os.path.join(_TEST_DIR, 'test.db')}"
os.environ["SECRET_KEY"] = "test-secret-key-that-is-long-enough-for-hs256"
os.environ["ADMIN_EMAIL"] = "admin@legalmatters.com"
os.environ["ADMIN_PASSWORD"] = "admin-password"

import pytest
from fastapi.testclient import TestClient

import main
from legalmatters.database import Base, SessionLocal, engine
from legalmatters import models  # noqa: F401

ADMIN_EMAIL = "admin@legalmatters.com"
ADMIN_PASSWORD = "admin-password"
DEFAULT_PASSWORD = "secret123"


def signup(client: TestClient, email: str, firm_name: str = "Smith & Partners") -> dict:
    """Register a lawyer on ``client`` (which keeps the session cookie)."""
    response = client.post(
        "/api/auth/signup",
        json={"email": email, "password": DEFAULT_PASSWORD, "firmName": firm_name},
    )
    assert response.status_code == 200, response.text
    me = client.get("/api/auth/me")
    assert me.status_code == 200, me.text
    return me.json()


@pytest.fixture(autouse=True)
def reset_database():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client():
    """Anonymous client. Entering it runs startup, which seeds the admin."""
    with TestClient(main.app) as c:
        yield c


@pytest.fixture
def lawyer_a(client):
    c = TestClient(main.app)
    c.user = signup(c, "alice@smithlaw.com", "Smith Law")
    yield c
    c.close()


@pytest.fixture
def lawyer_b(client):
    c = TestClient(main.app)
    c.user = signup(c, "bob@jonesllp.com", "Jones LLP")
    yield c
    c.close()


@pytest.fixture
def admin(client):
    c = TestClient(main.app)
    response = c.post("/api/auth/login", json={"email": ADMIN_EMAIL, "password": ADMIN_PASSWORD})
    assert response.status_code == 200, response.text
    c.user = c.get("/api/auth/me").json()
    yield c
    c.close()


@pytest.fixture
def customer_of_a(lawyer_a):
    response = lawyer_a.post("/api/customers", json={"name": "Acme Corp", "phone": "(555) 123-4567"})
    assert response.status_code == 201, response.text
    return response.json()
