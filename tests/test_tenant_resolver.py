from uuid import uuid4

import pytest
from sqlalchemy import text
from sqlalchemy.exc import OperationalError

from app.errors import TenantResolutionFailed
from app.models.list import ListType
from app.repositories.user_repository import UserRepository
from app.schemas.user import AuthSession
from app.services.list_service import ListService
from app.services.tenant_service import TenantContext, resolve_effective_customer, resolve_tenant


@pytest.mark.unit
def test_claim_wins_over_oracle():
    claim, oracle = uuid4(), uuid4()

    ctx = resolve_tenant(f"  {claim} ", str(oracle), False)

    assert ctx.effective_customer_id == claim
    assert ctx.error is None


@pytest.mark.unit
def test_oracle_is_the_fallback():
    oracle = uuid4()

    assert resolve_tenant(None, str(oracle), False).effective_customer_id == oracle
    assert resolve_tenant("   ", oracle, False).effective_customer_id == oracle


@pytest.mark.unit
def test_oracle_list_value_is_unwrapped():
    first, second = uuid4(), uuid4()

    ctx = resolve_tenant(None, [str(first), str(second)], False)

    assert ctx.effective_customer_id == first


@pytest.mark.unit
@pytest.mark.parametrize("oracle", [None, "", "  ", []])
def test_blank_means_no_tenant(oracle):
    ctx = resolve_tenant("", oracle, False)

    assert ctx.effective_customer_id is None
    assert not ctx.is_scoped
    with pytest.raises(TenantResolutionFailed, match="Failed to get customer ID: not available"):
        ctx.ensure_usable()


@pytest.mark.unit
def test_malformed_value_is_reported():
    ctx = resolve_tenant("not-a-uuid", None, False)

    assert ctx.effective_customer_id is None
    assert "not-a-uuid" in ctx.error
    with pytest.raises(TenantResolutionFailed, match="not-a-uuid"):
        ctx.ensure_usable()


@pytest.mark.unit
def test_oracle_error_surfaces_on_use():
    ctx = resolve_tenant(None, None, False, oracle_error="connection refused")

    with pytest.raises(TenantResolutionFailed) as exc_info:
        ctx.ensure_usable()
    assert str(exc_info.value) == "Failed to get customer ID: connection refused"


@pytest.mark.unit
def test_admin_without_customer_is_usable_but_cannot_create():
    ctx = TenantContext(effective_customer_id=None, is_system_admin=True)

    ctx.ensure_usable()
    with pytest.raises(TenantResolutionFailed) as exc_info:
        ctx.require_customer("create list")
    assert str(exc_info.value) == (
        "Cannot create list: no customer context. Select a customer first."
    )


@pytest.mark.asyncio
async def test_resolve_member_from_users_table(db, seed):
    ctx = await resolve_effective_customer(db, AuthSession(auth_user_id="auth-alice"))

    assert ctx == TenantContext(effective_customer_id=seed.customer_a, is_system_admin=False)


@pytest.mark.asyncio
async def test_admin_selects_customer_through_claim(db, seed):
    session = AuthSession(
        auth_user_id="auth-admin",
        app_metadata={"customer_id": str(seed.customer_b)},
    )

    ctx = await resolve_effective_customer(db, session)

    assert ctx.effective_customer_id == seed.customer_b
    assert ctx.is_system_admin


@pytest.mark.asyncio
async def test_unknown_identity_has_no_tenant(db):
    ctx = await resolve_effective_customer(db, AuthSession(auth_user_id="auth-nobody"))

    assert ctx.effective_customer_id is None
    assert not ctx.is_system_admin


@pytest.mark.asyncio
async def test_oracle_failure_is_captured(db, monkeypatch):
    async def broken(self, auth_user_id):
        raise OperationalError("SELECT", {}, Exception("database is down"))

    monkeypatch.setattr(UserRepository, "is_system_admin", broken)

    ctx = await resolve_effective_customer(db, AuthSession(auth_user_id="auth-alice"))

    assert ctx.effective_customer_id is None
    assert ctx.error == "database is down"
    with pytest.raises(TenantResolutionFailed, match="database is down"):
        ctx.ensure_usable()


@pytest.mark.unit
def test_malformed_claim_blocks_admin():
    ctx = resolve_tenant("acme-corp", None, True)

    assert ctx.rejected
    assert ctx.is_system_admin
    with pytest.raises(TenantResolutionFailed, match="acme-corp"):
        ctx.ensure_usable()
    with pytest.raises(TenantResolutionFailed, match="acme-corp"):
        ctx.require_customer("create list")


@pytest.mark.unit
def test_malformed_claim_does_not_fall_back_to_oracle():
    ctx = resolve_tenant("acme-corp", str(uuid4()), False)

    assert ctx.effective_customer_id is None
    with pytest.raises(TenantResolutionFailed):
        ctx.ensure_usable()


@pytest.mark.asyncio
async def test_admin_with_malformed_claim_sees_nothing(db, seed):
    session = AuthSession(auth_user_id="auth-admin", app_metadata={"customer_id": "acme-corp"})

    ctx = await resolve_effective_customer(db, session)

    with pytest.raises(TenantResolutionFailed, match="acme-corp"):
        await ListService(db).list_collection(ctx, ListType.LIST)


@pytest.mark.asyncio
async def test_failed_lookup_leaves_session_usable(db, seed, monkeypatch):
    async def failing_query(self, auth_user_id):
        assert self.db.in_nested_transaction()
        await self.db.execute(text("SELECT no_such_column FROM users"))
        return False

    monkeypatch.setattr(UserRepository, "is_system_admin", failing_query)
    session = AuthSession(
        auth_user_id="auth-alice",
        app_metadata={"customer_id": str(seed.customer_a)},
    )

    ctx = await resolve_effective_customer(db, session)

    assert ctx.effective_customer_id == seed.customer_a
    assert ctx.error is not None
    assert not db.in_nested_transaction()
    page = await ListService(db).list_collection(ctx, ListType.LIST)
    assert page.meta.total == 0
