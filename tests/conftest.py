import pytest
from fastapi.testclient import TestClient

from healthvault.core.database import get_db, make_engine, make_sessionmaker
from healthvault.core.seed import init_db
from healthvault.main import app


@pytest.fixture
def engine(tmp_path):
    engine = make_engine(f"sqlite:///{tmp_path / 'healthvault-test.db'}")
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    factory = make_sessionmaker(engine)
    init_db(engine, factory, seed=True)
    return factory


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


def override_db(session_factory):
    def _get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = _get_db


@pytest.fixture
def client(session_factory):
    override_db(session_factory)
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def broken_client(tmp_path):
    """App wired to a database file that cannot be opened"""
    engine = make_engine(f"sqlite:///{tmp_path / 'missing' / 'nowhere.db'}")
    override_db(make_sessionmaker(engine))
    yield TestClient(app)
    app.dependency_overrides.clear()
    engine.dispose()


@pytest.fixture
def ibuprofen():
    return {
        "medicine": "Ibuprofen",
        "dosage": "200mg",
        "duration": "5 days",
        "startDate": "2024-11-01",
        "endDate": "2024-11-06",
        "condition": "Pain",
    }
