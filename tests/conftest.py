import os
import tempfile

# Settings are read at import time, so point them somewhere disposable first.
TEST_DIR = tempfile.mkdtemp(prefix="storefront-tests-")
os.environ["DATABASE_URL"] = f"sqlite:///{os.path.join(TEST_DIR, 'startup.db')}"
os.environ["UPLOAD_DIR"] = os.path.join(TEST_DIR, "uploads")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.main import app
from app.database import Base, get_db, get_optional_db
from app.services.image_store import get_image_store


# Create test database (SQLite in-memory for testing)
SQLALCHEMY_DATABASE_URL = "sqlite:///:memory:"

engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def override_get_db():
    """Override database dependency for testing."""
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


# Override the dependencies
app.dependency_overrides[get_db] = override_get_db
app.dependency_overrides[get_optional_db] = override_get_db


@pytest.fixture(scope="function")
def client():
    """Create test client with fresh database for each test."""
    # Create tables
    Base.metadata.create_all(bind=engine)

    with TestClient(app) as test_client:
        yield test_client

    # Drop tables after test
    Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def db_session():
    """Create database session for direct database access in tests."""
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()

    yield session

    session.close()
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def upload_dir():
    return get_image_store().directory


@pytest.fixture
def image_file():
    """A small fake PNG upload for multipart requests."""
    return ("chair.png", b"\x89PNG\r\n\x1a\nfake-image-bytes", "image/png")


@pytest.fixture
def create_product(client, image_file):
    """Create a product through the API and return its id."""
    def _create(name="Sofa", category="Furniture", condition="Used", price="15000", desc="Comfy"):
        response = client.post(
            "/api/products",
            data={
                "name": name,
                "category": category,
                "condition": condition,
                "price": price,
                "desc": desc,
            },
            files={"image": image_file},
        )
        assert response.status_code == 200
        return response.json()["id"]
    return _create
