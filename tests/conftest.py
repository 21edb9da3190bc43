from collections.abc import AsyncIterator

import httpx
import pytest
import pytest_asyncio
from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from linkdb.api.deps import get_metadata_service
from linkdb.config import Settings
from linkdb.database import get_db
from linkdb.main import app
from linkdb.models import Base, User
from linkdb.services.metadata import MetadataService


class FakeWeb:
    """In-memory stand-in for the network, served through ``httpx.MockTransport``.

    Pages answer GET requests; ``images`` maps URLs to the status a HEAD
    request receives. Unknown URLs answer 404. Every request is recorded.
    """

    def __init__(self) -> None:
        self.pages: dict[str, dict] = {}
        self.images: dict[str, int] = {}
        self.errors: dict[str, Exception] = {}
        self.requests: list[httpx.Request] = []
        self.transport = httpx.MockTransport(self.handle)

    def page(
        self,
        url: str,
        html: str = "",
        status_code: int = 200,
        content_type: str = "text/html; charset=utf-8",
        **kwargs,
    ) -> None:
        headers = {"content-type": content_type, **kwargs.pop("headers", {})}
        self.pages[url] = dict(
            status_code=status_code, headers=headers, text=html, **kwargs
        )

    def image(self, url: str, status_code: int = 200) -> None:
        self.images[url] = status_code

    def fail(self, url: str, error: Exception) -> None:
        self.errors[url] = error

    @property
    def calls(self) -> list[tuple[str, str]]:
        return [(request.method, str(request.url)) for request in self.requests]

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        url = str(request.url)
        if url in self.errors:
            raise self.errors[url]
        if request.method == "HEAD":
            return httpx.Response(self.images.get(url, 404))
        if url in self.pages:
            return httpx.Response(**self.pages[url])
        return httpx.Response(404, text="Not Found")


@pytest.fixture
def settings() -> Settings:
    return Settings(metadata_fetch_timeout=2.0, metadata_head_timeout=1.0)


@pytest.fixture
def web() -> FakeWeb:
    return FakeWeb()


@pytest.fixture
def metadata_service(settings: Settings, web: FakeWeb) -> MetadataService:
    return MetadataService(settings, transport=web.transport)


@pytest_asyncio.fixture
async def session_factory() -> AsyncIterator[async_sessionmaker[AsyncSession]]:
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield async_sessionmaker(engine, expire_on_commit=False)
    await engine.dispose()


@pytest_asyncio.fixture
async def client(
    session_factory: async_sessionmaker[AsyncSession],
    metadata_service: MetadataService,
) -> AsyncIterator[AsyncClient]:
    async def override_get_db() -> AsyncIterator[AsyncSession]:
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_metadata_service] = lambda: metadata_service
    transport = httpx.ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


async def _create_user(
    session_factory: async_sessionmaker[AsyncSession], email: str, api_key: str
) -> dict[str, str]:
    async with session_factory() as session:
        session.add(User(email=email, api_key=api_key))
        await session.commit()
    return {"X-API-Key": api_key}


@pytest_asyncio.fixture
async def auth_headers(session_factory) -> dict[str, str]:
    return await _create_user(session_factory, "reader@example.com", "ldb_test_key")


@pytest_asyncio.fixture
async def other_auth_headers(session_factory) -> dict[str, str]:
    return await _create_user(session_factory, "other@example.com", "ldb_other_key")
