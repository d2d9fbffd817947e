import os

os.environ.setdefault("SECRET_KEY", "test-secret-key-for-the-booking-api")
os.environ["DATABASE_URL"] = "sqlite://"
os.environ.setdefault("LOG_JSON", "false")
os.environ.setdefault("LOG_LEVEL", "WARNING")

import pytest
from fastapi.testclient import TestClient

from src.database import Base, SessionLocal, engine
from src.main import app
from src.models import UserRole
from src.auth.service import UserService
from src.notifications.email_service import EmailService, get_email_service
from src.exceptions import DependencyError

PASSWORD = "secret123"

class FakeEmailService(EmailService):
    """Records outgoing mail instead of talking to SMTP"""

    def __init__(self):
        super().__init__(host="localhost", port=25, sender="no-reply@yatri.in", use_tls=False)
        self.outbox = []
        self.fail = False

    def send(self, to, subject, html, text=None):
        if self.fail:
            raise DependencyError()
        self.outbox.append({"to": to, "subject": subject, "html": html, "text": text})

@pytest.fixture(autouse=True)
def database():
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)

@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()

@pytest.fixture
def mailer():
    return FakeEmailService()

@pytest.fixture
def client(mailer):
    app.dependency_overrides[get_email_service] = lambda: mailer
    yield TestClient(app)
    app.dependency_overrides.clear()

@pytest.fixture
def register(client):
    """Register through the API and return the issued token"""
    def _register(name="Asha Verma", email="asha@yatri.in", password=PASSWORD):
        response = client.post("/api/auth/register", json={"name": name, "email": email, "password": password})
        assert response.status_code == 201, response.text
        return response.json()["token"]
    return _register

@pytest.fixture
def admin_token(client, register):
    token = register(name="Site Admin", email="admin@yatri.in")
    session = SessionLocal()
    try:
        user = UserService.get_user_by_email(session, "admin@yatri.in")
        UserService.set_role(session, user, UserRole.ADMIN)
    finally:
        session.close()
    return token

@pytest.fixture
def create_package(client, admin_token):
    """Create a package through the admin API and return its JSON"""
    def _create(title="Kedarnath Yatra", price="12000", **overrides):
        body = {
            "title": title,
            "description": "Six days in the Garhwal Himalaya",
            "locations": ["Haridwar", "Guptkashi", "Kedarnath"],
            "price": price,
            "duration": "6 Days / 5 Nights",
            "imageUrl": "https://img.yatri.in/kedarnath.jpg",
        }
        body.update(overrides)
        response = client.post("/api/admin/createPackage", json=body, headers=bearer(admin_token))
        assert response.status_code == 201, response.text
        return response.json()["data"]
    return _create

def bearer(token):
    return {"Authorization": f"Bearer {token}"}

@pytest.fixture
def auth():
    return bearer
