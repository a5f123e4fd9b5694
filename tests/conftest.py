"""
Pytest configuration and shared fixtures.

Service and API tests run against a fresh in-memory SQLite database per
test. Tests marked ``db`` need a real PostgreSQL (TEST_POSTGRES_URL).
"""

import os

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")

from types import SimpleNamespace
from typing import Optional
from uuid import UUID

import jwt
import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

import app.models  # noqa: F401
from app.core.config import settings
from app.core.permissions import Roles
from app.db.base import Base
from app.db.session import get_db
from app.main import app as fastapi_app
from app.models import Company, Customer, User
from app.schemas.user import AuthSession
from app.services.tenant_service import TenantContext


def pytest_configure(config):
    config.addinivalue_line("markers", "unit: fast tests, no external deps")
    config.addinivalue_line("markers", "db: requires a PostgreSQL database")
    config.addinivalue_line("markers", "server: requires running HTTP server")


def pytest_collection_modifyitems(config, items):
    run_db = os.environ.get("RUN_DB_TESTS") == "1"
    run_server = os.environ.get("RUN_SERVER_TESTS") == "1"

    skip_db = pytest.mark.skip(reason="db tests skipped by default; set RUN_DB_TESTS=1 to enable")
    skip_server = pytest.mark.skip(reason="server tests skipped by default; set RUN_SERVER_TESTS=1 to enable")

    for item in items:
        if "db" in item.keywords and not run_db:
            item.add_marker(skip_db)
        if "server" in item.keywords and not run_server:
            item.add_marker(skip_server)


@pytest_asyncio.fixture
async def engine():
    """In-memory SQLite engine with working SAVEPOINTs."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )

    # pysqlite's own transaction handling breaks SAVEPOINT; let SQLAlchemy emit BEGIN
    @event.listens_for(engine.sync_engine, "connect")
    def _disable_pysqlite_begin(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(engine.sync_engine, "begin")
    def _emit_begin(conn):
        conn.exec_driver_sql("BEGIN")

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def session_maker(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def seed(session_maker):
    """
    Two customers with one member each, a system admin without a customer,
    a customer success user and five companies.
    """
    customer_a = Customer(name="Acme")
    customer_b = Customer(name="Globex")
    async with session_maker() as db:
        db.add_all([customer_a, customer_b])
        await db.flush()

        alice = User(
            auth_user_id="auth-alice",
            customer_id=customer_a.customer_id,
            email="alice@acme.test",
            full_name="Alice Archer",
            role=Roles.MEMBER,
        )
        bob = User(
            auth_user_id="auth-bob",
            customer_id=customer_b.customer_id,
            email="bob@globex.test",
            full_name="Bob Baker",
            role=Roles.MEMBER,
        )
        admin = User(
            auth_user_id="auth-admin",
            customer_id=None,
            email="admin@platform.test",
            full_name="Ada Admin",
            role=Roles.SYSTEM_ADMIN,
        )
        success = User(
            auth_user_id="auth-cs",
            customer_id=customer_a.customer_id,
            email="cs@platform.test",
            full_name="Cass Success",
            role=Roles.CUSTOMER_SUCCESS,
        )
        companies = [
            Company(
                display_name=name,
                legal_name=f"{name} Inc.",
                domain=f"{name.lower()}.example",
                country="USA",
                employees=employees,
                categories=["Software"],
            )
            for name, employees in [
                ("Initech", 120),
                ("Hooli", 9000),
                ("Umbrella", 40000),
                ("Stark", 15000),
                ("Wayne", 800),
            ]
        ]
        db.add_all([alice, bob, admin, success, *companies])
        await db.commit()

    return SimpleNamespace(
        customer_a=customer_a.customer_id,
        customer_b=customer_b.customer_id,
        alice=alice,
        bob=bob,
        admin=admin,
        success=success,
        company_ids=[company.company_id for company in companies],
    )


@pytest_asyncio.fixture
async def db(session_maker, seed):
    """Session for service-level tests."""
    async with session_maker() as session:
        yield session


def tenant_for(customer_id: Optional[UUID], is_system_admin: bool = False) -> TenantContext:
    return TenantContext(effective_customer_id=customer_id, is_system_admin=is_system_admin)


def session_for(user: User) -> AuthSession:
    return AuthSession(auth_user_id=user.auth_user_id, email=user.email)


@pytest.fixture
def tenant_a(seed) -> TenantContext:
    return tenant_for(seed.customer_a)


@pytest.fixture
def tenant_b(seed) -> TenantContext:
    return tenant_for(seed.customer_b)


@pytest.fixture
def admin_tenant(seed) -> TenantContext:
    return tenant_for(None, is_system_admin=True)


@pytest.fixture
def alice_session(seed) -> AuthSession:
    return session_for(seed.alice)


@pytest.fixture
def bob_session(seed) -> AuthSession:
    return session_for(seed.bob)


def make_token(sub: str, customer_id: Optional[UUID] = None) -> str:
    """HS256 session token as issued by the auth provider."""
    claims = {"sub": sub, "email": f"{sub}@example.test"}
    if customer_id is not None:
        claims["app_metadata"] = {"customer_id": str(customer_id)}
    return jwt.encode(claims, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def _bearer(sub: str, customer_id: Optional[UUID] = None) -> dict:
    return {"Authorization": f"Bearer {make_token(sub, customer_id)}"}


@pytest.fixture
def auth_headers():
    """Build Authorization headers: auth_headers("auth-alice", customer_id=None)."""
    return _bearer


@pytest_asyncio.fixture
async def client(session_maker, seed):
    """HTTP client against the app, bound to the per-test database."""

    async def override_get_db():
        async with session_maker() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    fastapi_app.dependency_overrides[get_db] = override_get_db
    transport = ASGITransport(app=fastapi_app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    fastapi_app.dependency_overrides.clear()
