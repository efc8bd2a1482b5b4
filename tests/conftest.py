# tests/conftest.py
import os
from collections.abc import Callable

import pytest
import pytest_asyncio
from dotenv import load_dotenv
from httpx import ASGITransport, AsyncClient

# Environment must be fixed before the app factory reads it
load_dotenv(".env.test", override=False)
os.environ["TESTING"] = "1"
os.environ.setdefault("APP_ENV", "test")
os.environ.setdefault("SENTRY_DSN", "")

from labreserve.core.config import Settings  # noqa: E402
from labreserve.infra.locks import EquipmentLocks  # noqa: E402
from labreserve.main import create_app  # noqa: E402
from labreserve.services.auth import AuthService  # noqa: E402
from labreserve.services.reservations import ReservationService  # noqa: E402
from tests.fakes import InMemoryStore  # noqa: E402

JWT_SECRET = "test-secret"


@pytest.fixture
def store() -> InMemoryStore:
    """Two users and two pieces of equipment; no reservations."""
    s = InMemoryStore()
    s.add_user("alice")
    s.add_user("bob")
    s.add_equipment(1, "Confocal Microscope A", "microscope")
    s.add_equipment(2, "Ultracentrifuge", "centrifuge")
    return s


@pytest.fixture
def service(store: InMemoryStore) -> ReservationService:
    return ReservationService(store.unit_of_work, EquipmentLocks())


@pytest.fixture
def settings() -> Settings:
    return Settings(jwt_secret=JWT_SECRET, app_env="test", allow_origins="")


@pytest.fixture
def app(settings: Settings, store: InMemoryStore):
    application = create_app(settings)
    # Storage is swapped for the in-memory Unit of Work
    application.state.uow_factory = store.unit_of_work
    return application


@pytest_asyncio.fixture
async def app_client(app):
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


@pytest.fixture
def auth_headers(store: InMemoryStore, settings: Settings) -> Callable[[int], dict[str, str]]:
    auth = AuthService(store.unit_of_work, secret=settings.jwt_secret)

    def _headers(user_id: int) -> dict[str, str]:
        return {"Authorization": f"Bearer {auth.issue_token(user_id)}"}

    return _headers
