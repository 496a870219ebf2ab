"""
Thesis Archive - Test Configuration and Fixtures
"""
import os
import tempfile
from typing import AsyncGenerator, Callable

import pytest
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.pool import NullPool
from faker import Faker

# Set testing environment before the application reads its settings
_TEST_DIR = tempfile.mkdtemp(prefix="thesis_archive_tests_")
TEST_DATABASE_URL = f"sqlite+aiosqlite:///{os.path.join(_TEST_DIR, 'test.db')}"

os.environ['ENVIRONMENT'] = 'testing'
os.environ['DEBUG'] = 'false'
os.environ['DATABASE_URL'] = TEST_DATABASE_URL
os.environ['JWT_SECRET_KEY'] = 'test-jwt-secret-key-for-testing-only-0123456789'
os.environ['BCRYPT_ROUNDS'] = '4'
os.environ['RATE_LIMIT_ENABLED'] = 'false'
os.environ['STORAGE_MODE'] = 'local'
os.environ['UPLOAD_PATH'] = os.path.join(_TEST_DIR, 'uploads')
os.environ['LOG_FILE'] = ''
os.environ['LOG_LEVEL'] = 'WARNING'

from thesis_archive.main import app
from thesis_archive.core.database import Base, get_db
from thesis_archive.core.security import get_password_hash, create_access_token
from thesis_archive.models.thesis import Thesis, ThesisStatus, Department
from thesis_archive.models.user import User, UserRole

fake = Faker()

TEST_PASSWORD = 'testpassword123'
PDF_BYTES = b"%PDF-1.4\n1 0 obj\n<<>>\nendobj\ntrailer\n<<>>\n%%EOF\n"

test_engine = create_async_engine(TEST_DATABASE_URL, echo=False, poolclass=NullPool)
TestSessionLocal = async_sessionmaker(
    bind=test_engine,
    class_=AsyncSession,
    expire_on_commit=False
)


@pytest.fixture(scope='function')
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """Create a fresh database session for each test"""
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with TestSessionLocal() as session:
        yield session
        await session.rollback()

    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest.fixture
async def client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """Create test client with database override"""
    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url='http://test') as ac:
        yield ac

    app.dependency_overrides.clear()


def unique_username() -> str:
    return f"{fake.user_name()}{fake.random_int(1000, 9999)}"


async def _create_user(db: AsyncSession, role: UserRole, username: str = None) -> User:
    user = User(
        username=username or unique_username(),
        first_name=fake.first_name(),
        last_name=fake.last_name(),
        hashed_password=get_password_hash(TEST_PASSWORD),
        role=role,
        is_active=True,
    )
    db.add(user)
    await db.commit()
    await db.refresh(user)
    return user


def _headers_for(user: User) -> dict:
    token = create_access_token({'sub': str(user.id), 'role': user.role.value})
    return {'Authorization': f'Bearer {token}'}


@pytest.fixture
async def admin_user(db_session: AsyncSession) -> User:
    return await _create_user(db_session, UserRole.ADMIN)


@pytest.fixture
async def assistant_user(db_session: AsyncSession) -> User:
    return await _create_user(db_session, UserRole.STUDENT_ASSISTANT)


@pytest.fixture
async def student_user(db_session: AsyncSession) -> User:
    return await _create_user(db_session, UserRole.STUDENT)


@pytest.fixture
async def other_student(db_session: AsyncSession) -> User:
    return await _create_user(db_session, UserRole.STUDENT)


@pytest.fixture
def admin_headers(admin_user: User) -> dict:
    return _headers_for(admin_user)


@pytest.fixture
def assistant_headers(assistant_user: User) -> dict:
    return _headers_for(assistant_user)


@pytest.fixture
def student_headers(student_user: User) -> dict:
    return _headers_for(student_user)


@pytest.fixture
def other_student_headers(other_student: User) -> dict:
    return _headers_for(other_student)


@pytest.fixture
def make_thesis(db_session: AsyncSession) -> Callable:
    """Factory inserting a thesis row directly; keyword arguments override the defaults"""
    async def _make(**overrides) -> Thesis:
        values = {
            'title': fake.sentence(nb_words=5).rstrip('.'),
            'abstract': fake.paragraph(),
            'authors': [{'id': '1', 'name': fake.name()}],
            'advisors': [],
            'department': Department.COLLEGE,
            'program': 'BS Computer Science',
            'year': 2023,
            'status': ThesisStatus.APPROVED,
        }
        values.update(overrides)
        thesis = Thesis(**values)
        db_session.add(thesis)
        await db_session.commit()
        await db_session.refresh(thesis)
        return thesis

    return _make


@pytest.fixture
def pdf_file() -> tuple:
    """(filename, bytes, content type) tuple for httpx multipart uploads"""
    return ('thesis.pdf', PDF_BYTES, 'application/pdf')
