import os

# Settings are read at import time
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["CSRF_ENABLED"] = "false"
os.environ["SESSION_COOKIE_SECURE"] = "false"
os.environ["REDIS_URL"] = ""
os.environ["REDIS_HOST"] = ""
os.environ["RESEND_API_KEY"] = ""
os.environ["SMTP_HOST"] = ""
os.environ["DB_LOG_SLOW_QUERIES"] = "false"
os.environ["FRONTEND_URL"] = "http://localhost:3000"

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from serenibook import email_service  # noqa: E402
from serenibook.cache import processed_requests  # noqa: E402
from serenibook.database import Base, get_db  # noqa: E402
from serenibook.main import app  # noqa: E402
from serenibook.rate_limiter import reset_rate_limits  # noqa: E402

PASSWORD = "Secret123!"

BIO_TEXT = (
    "Professeure de yoga certifiée, j'accompagne chaque élève vers plus de souplesse, "
    "de calme et de confiance en soi, à son rythme."
)
APPROACH_TEXT = (
    "Des séances douces et progressives qui associent respiration, postures adaptées "
    "et relaxation guidée pour apaiser le corps et l'esprit."
)


def professional_onboarding_payload(**overrides) -> dict:
    payload = {
        "role": "PROFESSIONAL",
        "personalInfo": {
            "name": "Camille Martin",
            "phone": "06 12 34 56 78",
            "address": "12 rue des Lilas",
            "city": "Lyon",
            "postalCode": "69003",
            "companyName": "Camille Yoga",
            "siret": "12345678901234",
            "website": "https://camille-yoga.fr",
        },
        "activity": {
            "type": "YOGA_TEACHER",
            "yearsExperience": 5,
            "specialties": ["Hatha", "Vinyasa"],
            "certifications": ["RYT 200"],
        },
        "bio": {"bio": BIO_TEXT, "approach": APPROACH_TEXT},
        "preferences": {
            "languages": ["fr", "en"],
            "emailNotifications": True,
            "smsNotifications": True,
            "marketingEmails": False,
            "autoConfirmBookings": True,
        },
    }
    payload.update(overrides)
    return payload


def client_onboarding_payload(**overrides) -> dict:
    payload = {
        "role": "CLIENT",
        "personalInfo": {
            "name": "Louis Bernard",
            "phone": "+33 7 11 22 33 44",
            "address": "4 avenue Foch",
            "city": "Paris",
            "postalCode": "75016",
        },
        "preferences": {"preferredLanguage": "fr", "notes": "Looking for <b>yoga</b> classes"},
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def engine():
    test_engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=test_engine)
    yield test_engine
    Base.metadata.drop_all(bind=test_engine)
    test_engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db_session(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def client(session_factory):
    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    # No context manager: the lifespan would create tables on the default engine
    test_client = TestClient(app)
    yield test_client
    app.dependency_overrides.clear()


@pytest.fixture(autouse=True)
def reset_in_memory_state():
    reset_rate_limits()
    processed_requests.clear()
    yield
    reset_rate_limits()
    processed_requests.clear()


@pytest.fixture(autouse=True)
def sent_emails(monkeypatch):
    """Capture outgoing emails instead of sending them"""
    outbox = []

    async def fake_send_email(to, subject, mjml_content, from_address=None):
        outbox.append({"to": to, "subject": subject, "body": mjml_content})
        return {"id": f"test-{len(outbox)}"}

    monkeypatch.setattr(email_service, "send_email", fake_send_email)
    return outbox


def register(client, email, role="PROFESSIONAL", name="Camille Martin", password=PASSWORD):
    return client.post(
        "/register", json={"email": email, "password": password, "name": name, "role": role}
    )


def login(client, email, password=PASSWORD):
    response = client.post("/auth/login", json={"email": email, "password": password})
    assert response.status_code == 200, response.text
    return response.json()["token"]


def auth_headers(token):
    return {"Authorization": f"Bearer {token}"}


def make_account(client, email, role):
    response = register(client, email, role=role)
    assert response.status_code == 201, response.text
    user_id = response.json()["user"]["id"]
    token = login(client, email)
    # Later requests authenticate through the header only
    client.cookies.clear()
    return {"id": user_id, "email": email, "token": token, "headers": auth_headers(token)}


@pytest.fixture
def professional(client):
    return make_account(client, "camille@example.com", "PROFESSIONAL")


@pytest.fixture
def client_account(client):
    return make_account(client, "louis@example.com", "CLIENT")


@pytest.fixture
def onboarded_professional(client, professional):
    response = client.post(
        "/onboarding", json=professional_onboarding_payload(), headers=professional["headers"]
    )
    assert response.status_code == 200, response.text
    return professional
