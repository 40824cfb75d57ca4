import httpx
import pytest

from mock_backend.database import reset_all
from mock_backend.database.users import DEMO_EMAIL, DEMO_PASSWORD
from mock_backend.main import app as backend_app
from storefront.core.config import Settings
from storefront.core.events import STORAGE
from storefront.core.session import DeviceSession

BACKEND_URL = "http://lindo.test"


class FlakyTransport(httpx.AsyncBaseTransport):
    """Routes requests to the in-process backend; listed paths fail at the network level"""

    def __init__(self, app):
        self.inner = httpx.ASGITransport(app=app)
        self.fail_paths: set[str] = set()
        self.requests: list[httpx.Request] = []

    async def handle_async_request(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if any(request.url.path.startswith(path) for path in self.fail_paths):
            raise httpx.ConnectError("connection refused", request=request)
        return await self.inner.handle_async_request(request)

    def calls(self, path: str) -> int:
        return sum(1 for r in self.requests if r.url.path == path)


@pytest.fixture(scope="module")
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture(autouse=True)
def _reset_backend():
    reset_all()
    yield
    reset_all()


@pytest.fixture
def settings() -> Settings:
    return Settings(api_base_url=BACKEND_URL, storage_dir=None, debug=False)


@pytest.fixture
def transport() -> FlakyTransport:
    return FlakyTransport(backend_app)


@pytest.fixture
def http_client(transport) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=transport)


@pytest.fixture
def device(http_client, settings) -> DeviceSession:
    return DeviceSession.create("test-device", http_client=http_client, config=settings)


@pytest.fixture
def storage_writes(device) -> list[str]:
    """Keys written or removed in the device's local storage"""
    keys: list[str] = []
    device.events.add_listener(STORAGE, lambda detail: keys.append(detail["key"]))
    return keys


@pytest.fixture
def credentials() -> tuple[str, str]:
    return DEMO_EMAIL, DEMO_PASSWORD
