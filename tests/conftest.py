import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool

from app.main import create_app
from app.services.db_service import Database
from helpers import COMPANY_CONFIG, add_user, fixed_clock, login


@pytest.fixture
def database():
    db = Database("sqlite://", poolclass=StaticPool)
    db.init_schema()
    yield db
    db.dispose()


@pytest.fixture
def app(database):
    return create_app(database=database, company_config=COMPANY_CONFIG, clock=fixed_clock)


@pytest.fixture
def client(app):
    with TestClient(app) as c:
        yield c


@pytest.fixture
def admin_client(client, database):
    add_user(database, "admin", role="admin")
    login(client, "admin")
    return client


@pytest.fixture
def superadmin_client(client, database):
    add_user(database, "root", role="superadmin")
    login(client, "root")
    return client
