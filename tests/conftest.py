"""
Test configuration for the KitaDocs backend.
"""
import os

# Settings are read at import time, so the environment must be ready first
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["MAIL_SUPPRESS_SEND"] = "true"
os.environ.pop("BOOTSTRAP_ADMIN_EMAIL", None)
os.environ.pop("BOOTSTRAP_ADMIN_PASSWORD", None)

import json
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from kitadocs.database import get_db
from kitadocs.main import app
from kitadocs.models import (
    Base, User, Doctor, Admin, AdminRole, Article, ArticleCategory, VerificationStatus
)
from kitadocs.core.llm import get_llm_client
from kitadocs.core.security import AccountRole, create_access_token, hash_password
from kitadocs.core.storage import StoredFile, generate_object_key, get_storage
from kitadocs.notifications.service import NotificationService, get_notification_service

# Test database URL
TEST_DATABASE_URL = "sqlite://"

# Create test database engine
engine = create_engine(
    TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)

# Create test session factory
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

DEFAULT_QUESTIONS = {
    "questions": [
        {"question": "Outline the management of acute inferior STEMI with right ventricular involvement."},
        {"question": "Which antiarrhythmics are contraindicated in Wolff-Parkinson-White with atrial fibrillation?"},
        {"question": "Describe the differential diagnosis of chest pain with normal coronary angiography."},
    ]
}


class FakeStorage:
    """In-memory stand-in for Cloudinary"""

    def __init__(self):
        self.objects = {}
        self.deleted = []

    def upload(self, content, prefix, filename=None, content_type=None):
        key = generate_object_key(prefix)
        self.objects[key] = content
        return StoredFile(
            url=f"https://storage.example.com/kitadocs/{key}",
            public_id=key,
            filename=filename,
            content_type=content_type
        )

    def delete(self, public_id):
        self.objects.pop(public_id, None)
        self.deleted.append(public_id)


class FakeLLM:
    """Returns a canned reply and records prompts"""

    def __init__(self):
        self.reply = json.dumps(DEFAULT_QUESTIONS)
        self.prompts = []

    async def complete(self, prompt, system_prompt=None):
        self.prompts.append(prompt)
        return self.reply


class FakeMailer:
    """Records messages; fails the next ``fail_times`` sends"""

    def __init__(self):
        self.sent = []
        self.fail_times = 0

    async def send(self, recipient, subject, template_name, context):
        if self.fail_times > 0:
            self.fail_times -= 1
            raise ConnectionError("SMTP server unavailable")
        self.sent.append({
            "recipient": recipient,
            "subject": subject,
            "template_name": template_name,
            "context": context,
        })


@pytest.fixture(scope="function")
def db():
    """
    Create a fresh database for each test.
    """
    Base.metadata.create_all(bind=engine)

    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()

    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def storage():
    return FakeStorage()


@pytest.fixture
def llm():
    return FakeLLM()


@pytest.fixture
def mailer():
    return FakeMailer()


@pytest.fixture
def notifications(mailer):
    return NotificationService(mailer, TestingSessionLocal, max_attempts=2, retry_delay=0)


@pytest.fixture(scope="function")
def client(db, storage, llm, notifications):
    """
    Create a test client with the test database and fake collaborators.
    """
    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_storage] = lambda: storage
    app.dependency_overrides[get_llm_client] = lambda: llm
    app.dependency_overrides[get_notification_service] = lambda: notifications

    with TestClient(app) as client:
        yield client

    app.dependency_overrides = {}


def auth_headers(account_id, role):
    token = create_access_token(account_id, role)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def make_user(db):
    def _make_user(email="reader@example.com", password="reader-pass-123", first_name="Rita", last_name="Reader"):
        user = User(
            first_name=first_name,
            last_name=last_name,
            email=email,
            password_hash=hash_password(password)
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        return user
    return _make_user


@pytest.fixture
def make_doctor(db):
    def _make_doctor(
        email="doctor@example.com",
        status=VerificationStatus.VERIFIED,
        password="initial-secret",
        is_initial=True,
        full_name="Dr. Amina Hassan",
        specialization=None
    ):
        doctor = Doctor(
            full_name=full_name,
            email=email,
            password=password if is_initial else hash_password(password),
            is_initial=is_initial,
            credentials="MBBS, FRCP",
            specialization=specialization or ["Cardiology"],
            current_institution="City General Hospital",
            years_of_experience=12,
            education="University Medical School",
            license_id="LIC-12345",
            verification_status=status
        )
        db.add(doctor)
        db.commit()
        db.refresh(doctor)
        return doctor
    return _make_doctor


@pytest.fixture
def make_admin(db):
    def _make_admin(email="admin@example.com", password="admin-secret", is_initial=True, role=AdminRole.ADMIN):
        admin = Admin(
            name="Ada Admin",
            email=email,
            password=password if is_initial else hash_password(password),
            is_initial=is_initial,
            role=role
        )
        db.add(admin)
        db.commit()
        db.refresh(admin)
        return admin
    return _make_admin


@pytest.fixture
def make_article(db):
    def _make_article(doctor, title="Heart health basics", content="Eat well and exercise.",
                      category=ArticleCategory.GENERAL_HEALTH):
        article = Article(title=title, content=content, category=category, doctor_id=doctor.id)
        db.add(article)
        db.commit()
        db.refresh(article)
        return article
    return _make_article


@pytest.fixture
def user_headers():
    return lambda user: auth_headers(user.id, AccountRole.USER)


@pytest.fixture
def doctor_headers():
    return lambda doctor: auth_headers(doctor.id, AccountRole.DOCTOR)


@pytest.fixture
def admin_headers():
    return lambda admin: auth_headers(admin.id, AccountRole.ADMIN)
