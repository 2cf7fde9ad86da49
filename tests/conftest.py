"""
Pytest fixtures for StockFlow tests.

Every test gets a fresh in-memory SQLite database, an app bound to it, a
session on the same database, and helpers to create users, stock items and
requests directly.
"""
import pytest
from fastapi.testclient import TestClient

from stockflow.auth import create_access_token, get_password_hash
from stockflow.config import Settings
from stockflow.database import Base, create_db_engine, create_session_factory
from stockflow.main import create_app
from stockflow.models import RequestStatus, Stock, StockRequest, User

TEST_PASSWORD = "secret123"
# Hashed once; bcrypt is slow on purpose
TEST_PASSWORD_HASH = get_password_hash(TEST_PASSWORD)


@pytest.fixture()
def settings():
    return Settings(
        DATABASE_URL="sqlite://",
        SECRET_KEY="test-secret-key",
        LOG_LEVEL="WARNING",
    )


@pytest.fixture()
def app(settings):
    app = create_app(settings)
    Base.metadata.create_all(bind=app.state.engine)
    yield app
    app.state.engine.dispose()


@pytest.fixture()
def db(app):
    session = app.state.session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def client(app):
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture()
def make_user(db):
    def _make_user(email, is_admin=False, is_active=True, first_name="Test", last_name="User"):
        user = User(
            email=email,
            password_hash=TEST_PASSWORD_HASH,
            first_name=first_name,
            last_name=last_name,
            is_admin=is_admin,
            is_active=is_active,
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        return user
    return _make_user


@pytest.fixture()
def make_stock(db):
    def _make_stock(code, quantity, name=None, category=None):
        stock = Stock(code=code, name=name or f"Item {code}", quantity=quantity, category=category)
        db.add(stock)
        db.commit()
        db.refresh(stock)
        return stock
    return _make_stock


@pytest.fixture()
def make_request(db):
    def _make_request(user, stock, quantity, reason=None):
        request = StockRequest(
            user_id=user.id,
            stock_id=stock.id,
            quantity=quantity,
            reason=reason,
            status=RequestStatus.PENDING.value,
        )
        db.add(request)
        db.commit()
        db.refresh(request)
        return request
    return _make_request


@pytest.fixture()
def admin_user(make_user):
    return make_user("admin@stockflow.io", is_admin=True, first_name="Ada", last_name="Admin")


@pytest.fixture()
def regular_user(make_user):
    return make_user("jamie@stockflow.io", first_name="Jamie", last_name="Doe")


@pytest.fixture()
def admin_headers(admin_user, settings):
    return {"Authorization": f"Bearer {create_access_token(admin_user, settings)}"}


@pytest.fixture()
def user_headers(regular_user, settings):
    return {"Authorization": f"Bearer {create_access_token(regular_user, settings)}"}


@pytest.fixture()
def file_session_factory(tmp_path):
    """Sessions on a file-backed database, each with its own connection."""
    engine = create_db_engine(f"sqlite:///{tmp_path / 'stockflow.db'}")
    Base.metadata.create_all(bind=engine)
    yield create_session_factory(engine)
    engine.dispose()
