import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from core import stores
from core.auth import optional_uid, require_uid, require_admin_user
from core.database import Base
from utils.storage import MemoryJsonStore

USER_ID = "user-1"
ADMIN_ID = "admin-1"


@pytest.fixture(autouse=True)
def memory_store():
    """Every test starts with an empty in-memory local store and no database."""
    local = MemoryJsonStore()
    stores.configure(local=local, session_factory=None, local_only=False)
    yield local
    stores.configure(local=None, session_factory=None, local_only=False)


def _sqlite_engine():
    return create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )


@pytest.fixture
def session_factory():
    """SQLite-backed session factory with every table created."""
    import models.catalog  # noqa: F401
    import models.series  # noqa: F401
    import models.coins  # noqa: F401
    import models.orders  # noqa: F401
    import models.featured  # noqa: F401
    import models.shop_all  # noqa: F401
    import models.pages  # noqa: F401
    import models.user  # noqa: F401

    engine = _sqlite_engine()
    Base.metadata.create_all(bind=engine)
    yield sessionmaker(autocommit=False, autoflush=False, bind=engine)
    engine.dispose()


@pytest.fixture
def empty_session_factory():
    """Reachable database without any tables."""
    engine = _sqlite_engine()
    yield sessionmaker(autocommit=False, autoflush=False, bind=engine)
    engine.dispose()


@pytest.fixture
def client():
    from main import app

    app.dependency_overrides[optional_uid] = lambda: USER_ID
    app.dependency_overrides[require_uid] = lambda: USER_ID
    app.dependency_overrides[require_admin_user] = lambda: ADMIN_ID
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def anon_client():
    from main import app

    app.dependency_overrides.clear()
    with TestClient(app) as c:
        yield c
