import os

# Must be set before the application modules read their settings
os.environ["TESTING"] = "1"
os.environ["TEST_DATABASE_URL"] = "sqlite:///./test.db"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["PATIENT_JWT_SECRET"] = "test-patient-secret"
os.environ["ADMIN_JWT_SECRET"] = "test-admin-secret"

from datetime import date

import pytest
import redis
from fastapi.testclient import TestClient

from clinic_api.main import app
from clinic_api.core.database import Base, SessionLocal, engine, get_redis
from clinic_api.core.errors import ImageUploadError
from clinic_api.core.security import UserRole, get_password_hash
from clinic_api.models.user import Gender, User
from clinic_api.services.image_host import UploadedImage, get_image_host


class FakeRedis:
    """Just enough of the redis client for the rate limiter."""

    def __init__(self):
        self.data = {}

    def incr(self, key):
        self.data[key] = self.data.get(key, 0) + 1
        return self.data[key]

    def expire(self, key, seconds):
        return True


class UnreachableRedis:
    """A redis client whose server is gone."""

    def incr(self, key):
        raise redis.ConnectionError("Error 111 connecting to 127.0.0.1:1. Connection refused.")

    def expire(self, key, seconds):
        raise redis.ConnectionError("Error 111 connecting to 127.0.0.1:1. Connection refused.")


class FakeImageHost:
    def __init__(self):
        self.uploads = []
        self.fail = False

    def upload(self, filename, content, content_type):
        if self.fail:
            raise ImageUploadError("Failed To Upload Doctor Avatar To Cloudinary")
        self.uploads.append((filename, content, content_type))
        return UploadedImage(
            public_id=f"doctors/{filename}",
            url=f"https://images.example.com/doctors/{filename}",
        )


PASSWORD = "Password123"

patient_data = {
    "first_name": "Alice",
    "last_name": "Walker",
    "email": "alice@example.com",
    "phone": "03001234567",
    "nic": "3520212345671",
    "dob": "1990-04-12",
    "gender": "Female",
    "password": PASSWORD,
}


@pytest.fixture(scope="function")
def test_db():
    # Create tables
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def fake_redis():
    fake = FakeRedis()
    app.dependency_overrides[get_redis] = lambda: fake
    yield fake
    app.dependency_overrides.pop(get_redis, None)


@pytest.fixture
def image_host():
    host = FakeImageHost()
    app.dependency_overrides[get_image_host] = lambda: host
    yield host
    app.dependency_overrides.pop(get_image_host, None)


@pytest.fixture
def client(test_db, fake_redis, image_host):
    with TestClient(app, base_url="https://testserver") as test_client:
        yield test_client


@pytest.fixture
def db_session(test_db):
    db = SessionLocal()
    yield db
    db.close()


def create_user(db, role, email, first_name="Staff", last_name="Member", **extra):
    """Insert a user directly, bypassing the admin-only endpoints."""
    user = User(
        email=email,
        password_hash=get_password_hash(PASSWORD),
        role=role,
        first_name=first_name,
        last_name=last_name,
        phone="03009876543",
        nic="3520298765432",
        dob=date(1980, 1, 1),
        gender=Gender.MALE,
        **extra
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


@pytest.fixture
def admin_user(db_session):
    return create_user(db_session, UserRole.ADMIN, "admin@example.com", "Grace", "Hopper")


@pytest.fixture
def doctor_user(db_session):
    return create_user(
        db_session,
        UserRole.DOCTOR,
        "house@example.com",
        "Gregory",
        "House",
        id="D1",
        doctor_department="Cardiology",
    )


def login(client, email, role, password=PASSWORD):
    return client.post(
        "/api/login",
        json={"email": email, "password": password, "role": role},
    )


@pytest.fixture
def admin_client(client, admin_user):
    response = login(client, "admin@example.com", "Admin")
    assert response.status_code == 200
    return client


@pytest.fixture
def patient_client(client):
    response = client.post("/api/patient/register", json=patient_data)
    assert response.status_code == 200
    return client
