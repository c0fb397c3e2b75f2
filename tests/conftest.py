import pytest
import os
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

# Set env before importing app components
os.environ["APP_ENV"] = "testing"
os.environ["DATABASE_URL"] = "sqlite:///:memory:"
os.environ["HOLIDAY_JURISDICTION"] = "GB-ENG"

from rota_engine.database import Base, get_db
from rota_engine.main import app
from rota_engine.models import Company, Employee
from rota_engine.services.leave_ledger import LeaveLedgerService
from rota_engine.services.notification import ChangeFeed
from rota_engine.services.rota_view import RotaViewService
from rota_engine.services.shift_placement import ShiftPlacementService
from fastapi.testclient import TestClient

# SQLite in-memory database configuration
SQLALCHEMY_DATABASE_URL = "sqlite:///:memory:"

engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(scope="function")
def db_session():
    """Fresh schema and session for each test function."""
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()

    yield session

    session.close()
    Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def company(db_session):
    company = Company(name="Acme Care Ltd")
    db_session.add(company)
    db_session.commit()
    return company


@pytest.fixture(scope="function")
def other_company(db_session):
    company = Company(name="Elsewhere Ltd")
    db_session.add(company)
    db_session.commit()
    return company


@pytest.fixture(scope="function")
def employee(db_session, company):
    emp = Employee(company_id=company.id, full_name="Ada Lovelace", department="Kitchen")
    db_session.add(emp)
    db_session.commit()
    return emp


@pytest.fixture(scope="function")
def colleague(db_session, company):
    emp = Employee(company_id=company.id, full_name="Grace Hopper", department="Front of House")
    db_session.add(emp)
    db_session.commit()
    return emp


@pytest.fixture(scope="function")
def events():
    """Change events published during the test, in order."""
    return []


@pytest.fixture(scope="function")
def feed(events):
    feed = ChangeFeed()
    feed.subscribe(events.append)
    return feed


@pytest.fixture(scope="function")
def shifts(db_session, feed):
    return ShiftPlacementService(db_session, feed)


@pytest.fixture(scope="function")
def ledger(db_session, feed):
    return LeaveLedgerService(db_session, feed)


@pytest.fixture(scope="function")
def rota_view(db_session):
    return RotaViewService(db_session)


@pytest.fixture(scope="function")
def admin_headers(company):
    return {"X-Company-Id": str(company.id), "X-Actor-Id": "900", "X-Actor-Role": "business_admin"}


@pytest.fixture(scope="function")
def employee_headers(company, employee):
    return {"X-Company-Id": str(company.id), "X-Actor-Id": str(employee.id), "X-Actor-Role": "employee"}


@pytest.fixture(scope="function")
def client(db_session):
    """Get a TestClient that uses the test database session via dependency override."""
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
