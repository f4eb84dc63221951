import os
import tempfile
from datetime import timedelta

# Settings are read at import time, so the environment is prepared first
_TMP_DIR = tempfile.mkdtemp(prefix="skilli-tests-")
os.environ["DATABASE_URL"] = f"sqlite:///{_TMP_DIR}/test.db"
os.environ["JWT_SECRET"] = "test-jwt-secret"
os.environ["JWT_REFRESH_SECRET"] = "test-jwt-refresh-secret"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["UPLOAD_DIR"] = os.path.join(_TMP_DIR, "uploads")
os.environ["DB_LOG_SLOW_QUERIES"] = "false"
os.environ.pop("REDIS_URL", None)

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from skilli.database import Base, SessionLocal, engine  # noqa: E402
from skilli.main import app  # noqa: E402
from skilli.models import User  # noqa: E402
from skilli.rate_limiter import reset_rate_limits  # noqa: E402
from skilli.shared.dates import utcnow  # noqa: E402

PASSWORD = "secret123"

COMPLETE_PROFILE = {
    "bio": "Ingénieur logiciel, j'accompagne les étudiants en Python et en data depuis 5 ans.",
    "city": "Casablanca",
    "categories": ["Programmation & Développement"],
    "skills": ["Python", "JavaScript", "SQL"],
    "teachingFormat": "ONLINE",
    "experienceLevel": "JUNIOR_ENGINEER",
    "hourlyRateType": "STANDARD",
}


@pytest.fixture(autouse=True)
def reset_database():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    reset_rate_limits()
    yield


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def other_db():
    """A second, independent session standing in for a concurrent API call"""
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


def load_user(session, account: dict) -> User:
    return session.get(User, account["user"]["id"])


def auth_headers(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


def future(days: int = 7) -> str:
    return (utcnow() + timedelta(days=days)).isoformat()


@pytest.fixture
def register(client):
    """register(email, name=..., provider=False) -> {"user", "accessToken", "refreshToken", "headers"}"""

    def _register(email: str, name: str = "Test User", provider: bool = False, profile: dict = None):
        response = client.post(
            "/api/auth/register", json={"email": email, "password": PASSWORD, "name": name}
        )
        assert response.status_code == 201, response.text
        account = response.json()
        account["headers"] = auth_headers(account["accessToken"])
        if provider:
            saved = client.post(
                "/api/provider-profiles/me",
                json=profile or COMPLETE_PROFILE,
                headers=account["headers"],
            )
            assert saved.status_code == 200, saved.text
            account["profile"] = saved.json()
        return account

    return _register


@pytest.fixture
def provider(register):
    return register("provider@example.com", name="Yassine Provider", provider=True)


@pytest.fixture
def learner(register):
    return register("learner@example.com", name="Salma Client")


@pytest.fixture
def make_session(client):
    def _make_session(account: dict, **overrides):
        payload = {
            "title": "Initiation à Python",
            "description": "Les bases du langage en une séance.",
            "skills": ["Python"],
            "date": future(),
            "duration": 60,
            "isOnline": True,
            "price": 150,
            "maxParticipants": 2,
        }
        payload.update(overrides)
        response = client.post("/api/sessions", json=payload, headers=account["headers"])
        assert response.status_code == 201, response.text
        return response.json()

    return _make_session


@pytest.fixture
def make_request(client):
    def _make_request(account: dict, **overrides):
        payload = {
            "title": "Cours de maths niveau Bac",
            "description": "Besoin d'aide en analyse avant l'examen.",
            "skills": ["Mathématiques"],
            "requestType": "online",
            "budgetMin": 100,
            "budgetMax": 200,
        }
        payload.update(overrides)
        response = client.post("/api/requests", json=payload, headers=account["headers"])
        assert response.status_code == 201, response.text
        return response.json()

    return _make_request
