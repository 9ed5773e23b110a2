"""Shared test fixtures and configuration."""

import pytest
from typing import Callable, Generator, AsyncGenerator, List, Tuple
import os
import tempfile

# Set TESTING flag to prevent loading .env file
os.environ['TESTING'] = '1'

# Set up test environment BEFORE any imports
TEST_STORAGE_PATH = tempfile.mkdtemp(prefix="pet-shelter-storage-")
os.environ['DATABASE_URL'] = 'sqlite+aiosqlite:///./test_app.db'
os.environ['SECRET_KEY'] = 'test_secret_key_at_least_32_characters_long_for_security'
os.environ['STORAGE_PATH'] = TEST_STORAGE_PATH
os.environ['EMAIL_USER'] = ''

from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker

from app.database import Base
from app.exceptions import NotificationError
from app.models import User, Pet
from app.models.enums import PetStatus, UserRole


class RecordingNotifier:
    """In-memory stand-in for EmailService that records every send."""

    def __init__(self):
        self.approvals: List[Tuple[str, str, str, str]] = []
        self.rejections: List[Tuple[str, str, str, str]] = []
        self.resets: List[Tuple[str, str, str]] = []
        self.fail = False

    async def send_approval_email(self, to, applicant_name, pet_name, reviewer_name):
        self.approvals.append((to, applicant_name, pet_name, reviewer_name))
        if self.fail:
            raise NotificationError(f"Failed to send email to {to}")

    async def send_rejection_email(self, to, applicant_name, pet_name, reviewer_name):
        self.rejections.append((to, applicant_name, pet_name, reviewer_name))
        if self.fail:
            raise NotificationError(f"Failed to send email to {to}")

    async def send_password_reset_email(self, to, token, name):
        self.resets.append((to, token, name))
        if self.fail:
            raise NotificationError(f"Failed to send email to {to}")


@pytest.fixture(autouse=True)
def setup_test_env() -> Generator[None, None, None]:
    """Set up test environment variables before each test."""
    original_env = os.environ.copy()

    os.environ['TESTING'] = '1'
    os.environ['DATABASE_URL'] = 'sqlite+aiosqlite:///./test_app.db'
    os.environ['SECRET_KEY'] = 'test_secret_key_at_least_32_characters_long_for_security'
    os.environ['STORAGE_PATH'] = TEST_STORAGE_PATH

    yield

    # Restore original environment
    os.environ.clear()
    os.environ.update(original_env)


@pytest.fixture(autouse=True)
def reset_rate_limiter() -> Generator[None, None, None]:
    """Start every test with an empty rate limit window."""
    from app.middleware.rate_limiter import rate_limiter

    rate_limiter.reset()
    yield
    rate_limiter.reset()


@pytest.fixture
def clean_env() -> Generator[None, None, None]:
    """Provide a clean environment for tests that need to test missing variables."""
    original_env = os.environ.copy()

    os.environ.clear()
    os.environ['TESTING'] = '1'

    yield

    os.environ.clear()
    os.environ.update(original_env)


@pytest.fixture
async def async_session(tmp_path) -> AsyncGenerator[AsyncSession, None]:
    """Provide async database session for tests."""
    test_database_url = os.environ.get(
        'TEST_DATABASE_URL',
        f"sqlite+aiosqlite:///{tmp_path / 'test.db'}"
    )

    engine = create_async_engine(test_database_url, echo=False)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async_session_maker = async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )

    async with async_session_maker() as session:
        yield session
        await session.rollback()

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


async def _create_user(
    session: AsyncSession,
    email: str,
    name: str,
    role: UserRole = UserRole.USER,
) -> User:
    user = User(
        email=email,
        hashed_password="hashed_password_placeholder",
        name=name,
        role=role.value,
        is_active=True,
        is_superuser=role is UserRole.ADMIN,
        is_verified=False
    )
    session.add(user)
    await session.commit()
    await session.refresh(user)
    return user


@pytest.fixture
async def test_user(async_session: AsyncSession) -> User:
    """Create a regular user."""
    return await _create_user(async_session, "test@example.com", "Test User")


@pytest.fixture
async def second_user(async_session: AsyncSession) -> User:
    """Create a second regular user."""
    return await _create_user(async_session, "second@example.com", "Second User")


@pytest.fixture
async def admin_user(async_session: AsyncSession) -> User:
    """Create an admin user."""
    return await _create_user(async_session, "admin@example.com", "Admin User", UserRole.ADMIN)


@pytest.fixture
async def test_pet(async_session: AsyncSession) -> Pet:
    """Create an Available pet."""
    pet = Pet(
        name="Buddy",
        species="Dog",
        breed="Golden Retriever",
        age=3,
        description="Friendly and loves long walks in the park.",
        image="https://images.example.com/buddy.jpg",
        status=PetStatus.AVAILABLE.value,
    )
    async_session.add(pet)
    await async_session.commit()
    await async_session.refresh(pet)
    return pet


@pytest.fixture
def notifier() -> RecordingNotifier:
    """Provide a notifier that records emails instead of sending them."""
    return RecordingNotifier()


@pytest.fixture
async def unauthenticated_client(async_session: AsyncSession, notifier: RecordingNotifier):
    """Create test client with database session and email overrides but NO auth override.

    Use this for tests that exercise the real authentication flow
    (registration, login, password reset).
    """
    from httpx import AsyncClient, ASGITransport
    from app.main import app
    from app.database import get_async_session
    from app.dependencies import get_email_service

    async def override_get_async_session():
        yield async_session

    app.dependency_overrides[get_async_session] = override_get_async_session
    app.dependency_overrides[get_email_service] = lambda: notifier

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test", follow_redirects=True) as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture
def login_as(unauthenticated_client) -> Callable[[User], None]:
    """Authenticate subsequent requests of the test client as the given user."""
    from app.main import app
    from app.dependencies import current_active_user

    def _login(user: User) -> None:
        app.dependency_overrides[current_active_user] = lambda: user

    return _login


@pytest.fixture
async def async_client(unauthenticated_client, login_as, test_user: User):
    """Test client authenticated as the regular test user."""
    login_as(test_user)
    return unauthenticated_client


@pytest.fixture
async def admin_client(unauthenticated_client, login_as, admin_user: User):
    """Test client authenticated as the admin user."""
    login_as(admin_user)
    return unauthenticated_client
