"""
Root conftest.py - Shared fixtures for all test types.

This file is automatically loaded by pytest and provides:
- Database session fixtures for integration tests
- FastAPI test client with git storage in a temp directory
- Fake GPG signer/verifier so no gpg binary is needed
- Object store fixtures for unit tests
"""
import shutil
import sys
import tempfile
from pathlib import Path
from typing import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

# Add backend and tdd to path for imports
backend_path = Path(__file__).parent.parent / "backend"
tdd_path = Path(__file__).parent
sys.path.insert(0, str(backend_path))
sys.path.insert(0, str(tdd_path))

from treesmith.config import Settings, get_settings
from treesmith.database import Base, get_db
from treesmith.dependencies import get_signer, get_verifier
from treesmith.main import app
from treesmith.services.repo_manager import GitRepoManager, get_repo_manager

from shared.factories import UserFactory
from shared.fakes import SERVER_KEY_ID, FakeSigner, FakeVerifier


# -----------------------------------------------------------------------------
# Database Fixtures
# -----------------------------------------------------------------------------

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest_asyncio.fixture
async def async_engine():
    """Create a test database engine."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        future=True,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(async_engine) -> AsyncGenerator[AsyncSession, None]:
    """Provide a database session for tests.

    Each test gets a fresh session that is rolled back after the test.
    """
    async_session_factory = async_sessionmaker(
        async_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )
    async with async_session_factory() as session:
        yield session
        await session.rollback()


# -----------------------------------------------------------------------------
# Git Storage Fixtures
# -----------------------------------------------------------------------------

@pytest.fixture
def temp_repos_dir():
    """Create a temporary directory for bare repos.

    Uses resolve() to get the full path and avoid Windows 8.3 short name issues
    that can cause dulwich init_bare to fail.
    """
    temp_dir = Path(tempfile.mkdtemp()).resolve()
    yield temp_dir
    shutil.rmtree(temp_dir, ignore_errors=True)


@pytest.fixture(scope="session", autouse=True)
def cleanup_git_repos_after_session():
    """Remove the default repos directory created when the app is imported."""
    yield

    git_repos_dir = backend_path / "git_repos"
    if git_repos_dir.exists():
        shutil.rmtree(git_repos_dir)


@pytest.fixture
def repo_manager(temp_repos_dir):
    """Create a GitRepoManager with temp directory."""
    return GitRepoManager(repos_dir=temp_repos_dir)


@pytest.fixture
def store(repo_manager):
    """An object store over a fresh, empty bare repository."""
    repo_manager.create_bare_repo("unit-repo")
    object_store = repo_manager.open_object_store("unit-repo")
    yield object_store
    object_store.close()


# -----------------------------------------------------------------------------
# Signing Fixtures
# -----------------------------------------------------------------------------

@pytest.fixture
def fake_signer():
    return FakeSigner()


@pytest.fixture
def fake_verifier(fake_signer):
    return FakeVerifier(fake_signer)


@pytest.fixture
def test_settings(temp_repos_dir):
    """Settings with a server signing key and the 'always' rule."""
    return Settings(
        database_url=TEST_DATABASE_URL,
        repos_dir=temp_repos_dir,
        signing_key=SERVER_KEY_ID,
        signing_name="Treesmith Server",
        signing_email="server@treesmith.test",
        signing_rules=["always"],
        default_trust_model="collaborator",
        trees_per_page=1000,
    )


# -----------------------------------------------------------------------------
# API Client
# -----------------------------------------------------------------------------

@pytest_asyncio.fixture
async def client(
    db_session: AsyncSession,
    repo_manager,
    test_settings,
    fake_signer,
    fake_verifier,
) -> AsyncGenerator[AsyncClient, None]:
    """Provide an async HTTP client for API testing.

    The client uses the test database session, a temporary repos directory,
    test settings and the fake signer/verifier.
    """
    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_repo_manager] = lambda: repo_manager
    app.dependency_overrides[get_settings] = lambda: test_settings
    app.dependency_overrides[get_signer] = lambda: fake_signer
    app.dependency_overrides[get_verifier] = lambda: fake_verifier
    # The lifespan does not run under ASGITransport; start from an empty cache
    app.state.account_cache.clear()

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()
    app.state.account_cache.clear()


# -----------------------------------------------------------------------------
# Marker-based fixtures
# -----------------------------------------------------------------------------

@pytest.fixture(autouse=True)
def _mark_test(request):
    """Automatically apply markers based on test location."""
    if "unit" in str(request.fspath):
        request.applymarker(pytest.mark.unit)
    elif "integration" in str(request.fspath):
        request.applymarker(pytest.mark.integration)


# -----------------------------------------------------------------------------
# Repo and User Fixtures
# -----------------------------------------------------------------------------

@pytest_asyncio.fixture
async def repo(client):
    """Create a test repository (record plus empty bare storage)."""
    from shared.factories import repo_create_payload

    response = await client.post(
        "/api/repos",
        json=repo_create_payload(name="test-repo"),
    )
    assert response.status_code == 201, f"Failed to create repo: {response.text}"
    return response.json()


@pytest_asyncio.fixture
async def acting_user(db_session):
    """A user to act as, addressed by the X-Acting-User header."""
    user = UserFactory.build(name="alice", full_name="Alice Example", email="alice@example.com")
    db_session.add(user)
    await db_session.commit()
    return user


@pytest.fixture
def acting_headers(acting_user):
    return {"X-Acting-User": acting_user.name}


@pytest.fixture
def anyio_backend():
    """Required for pytest-asyncio compatibility."""
    return "asyncio"
