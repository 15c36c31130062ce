from datetime import date
from uuid import uuid4

import pytest
from sqlalchemy import inspect

from saas_platform.core.errors import AuthenticationError, BusinessRuleError, ConflictError, NotFoundError
from saas_platform.db.base import CustomerType, RecordStatus
from saas_platform.repositories.unit_of_work import UnitOfWork
from saas_platform.schemas.customer import CustomerCreate, CustomerUpdate
from saas_platform.schemas.tenant import TenantCreate, TenantUpdate
from saas_platform.schemas.user import UserCreate, UserUpdate
from saas_platform.services.auth import AuthService
from saas_platform.services.customer import CustomerService
from saas_platform.services.tenant import TenantService
from saas_platform.services.user import UserService

from conftest import ADMIN_PASSWORD, create_tenant, create_user


def _tenant_payload(code: str) -> TenantCreate:
    return TenantCreate(tenant_code=code, subscription_plan_id="PRO", contact_email="x@example.com", city="Lisbon")


def _customer_payload(code: str) -> CustomerCreate:
    return CustomerCreate(customer_code=code, first_name="Ada", last_name="Lovelace", email="ada@example.com")


async def test_duplicate_tenant_code_is_a_conflict(uow):
    service = TenantService(uow)
    await service.create(_tenant_payload("DUP"))
    with pytest.raises(ConflictError):
        await service.create(_tenant_payload("DUP"))


async def test_tenant_partial_update_and_soft_delete(uow):
    actor = uuid4()
    service = TenantService(uow, actor_id=actor)
    tenant = await service.create(_tenant_payload("PATCH"))
    assert tenant.created_by == actor

    updated = await service.update(tenant.id, TenantUpdate.model_validate({"tenantName": "Patched"}))
    assert updated.tenant_name == "Patched"
    assert updated.city == "Lisbon"
    assert updated.modified_by == actor
    assert updated.modified_date is not None

    cleared = await service.update(tenant.id, TenantUpdate.model_validate({"city": None}))
    assert cleared.city is None
    assert cleared.tenant_name == "Patched"

    await service.deactivate(tenant.id)
    reloaded = await service.get(tenant.id)
    assert reloaded.is_active is False
    assert reloaded.tenant_status == RecordStatus.INACTIVE


def _column_snapshot(entity) -> dict:
    return {attr.key: getattr(entity, attr.key) for attr in inspect(type(entity)).column_attrs}


async def test_partial_update_changes_only_the_supplied_field(session_maker):
    actor = uuid4()
    async with UnitOfWork(session_maker()) as uow:
        tenant = await TenantService(uow, actor_id=actor).create(_tenant_payload("SNAP"))
    async with UnitOfWork(session_maker()) as uow:
        before = _column_snapshot(await uow.tenants.get_by_id(tenant.id))

    async with UnitOfWork(session_maker()) as uow:
        await TenantService(uow, actor_id=actor).update(tenant.id, TenantUpdate.model_validate({"tenantName": "Renamed"}))
    async with UnitOfWork(session_maker()) as uow:
        after = _column_snapshot(await uow.tenants.get_by_id(tenant.id))

    changed = {key for key in before if before[key] != after[key]}
    assert changed == {"tenant_name", "modified_date", "modified_by"}
    assert after["tenant_name"] == "Renamed"
    assert after["modified_by"] == actor


async def test_update_keeps_subscription_window_ordered(uow):
    service = TenantService(uow)
    payload = _tenant_payload("WINDOW").model_copy(
        update={"subscription_start_date": date(2025, 1, 1), "subscription_end_date": date(2025, 12, 31)}
    )
    tenant = await service.create(payload)

    with pytest.raises(BusinessRuleError):
        await service.update(tenant.id, TenantUpdate.model_validate({"subscriptionEndDate": "2024-01-01"}))
    with pytest.raises(BusinessRuleError):
        await service.update(tenant.id, TenantUpdate.model_validate({"subscriptionStartDate": "2026-01-01"}))

    reloaded = await service.get(tenant.id)
    assert reloaded.subscription_end_date == date(2025, 12, 31)
    assert reloaded.modified_date is None

    cleared = await service.update(tenant.id, TenantUpdate.model_validate({"subscriptionEndDate": None}))
    assert cleared.subscription_end_date is None


async def test_unknown_tenant_is_not_found(uow):
    with pytest.raises(NotFoundError):
        await TenantService(uow).get(uuid4())
    with pytest.raises(NotFoundError):
        await TenantService(uow).get_by_code("NOPE")


async def test_customer_of_another_tenant_is_not_found(session_maker):
    first = await create_tenant(session_maker, "FIRST")
    second = await create_tenant(session_maker, "SECOND")
    async with UnitOfWork(session_maker()) as uow:
        customer = await CustomerService(uow, first.id).create(_customer_payload("C-1"))
        with pytest.raises(NotFoundError):
            await CustomerService(uow, second.id).get(customer.id)
        with pytest.raises(NotFoundError):
            await CustomerService(uow, second.id).update(customer.id, CustomerUpdate(city="Porto"))


async def test_customer_requires_existing_tenant(uow):
    with pytest.raises(NotFoundError):
        await CustomerService(uow, uuid4()).create(_customer_payload("C-1"))


async def test_customer_code_reuse_across_tenants(session_maker):
    first = await create_tenant(session_maker, "FIRST")
    second = await create_tenant(session_maker, "SECOND")
    async with UnitOfWork(session_maker()) as uow:
        await CustomerService(uow, first.id).create(_customer_payload("SHARED"))
        await CustomerService(uow, second.id).create(_customer_payload("SHARED"))
        with pytest.raises(ConflictError):
            await CustomerService(uow, first.id).create(_customer_payload("SHARED"))


async def test_user_created_with_roles_in_one_transaction(session_maker):
    tenant = await create_tenant(session_maker)
    roles = [uuid4(), uuid4()]
    async with UnitOfWork(session_maker()) as uow:
        service = UserService(uow, tenant.id)
        user = await service.create(
            UserCreate(username="jdoe", email="jdoe@example.com", password=ADMIN_PASSWORD, role_ids=roles + roles[:1])
        )
        assert user.password_hash and user.password_hash != ADMIN_PASSWORD
        assert sorted(await service.role_ids(user.id)) == sorted(roles)
        assert not uow.in_transaction


async def test_failed_role_assignment_leaves_no_user(session_maker, monkeypatch):
    tenant = await create_tenant(session_maker)
    async with UnitOfWork(session_maker()) as uow:
        async def broken_add_all(entities):
            raise RuntimeError("role store failure")

        monkeypatch.setattr(uow.user_roles, "add_all", broken_add_all)
        with pytest.raises(RuntimeError):
            await UserService(uow, tenant.id).create(
                UserCreate(username="ghost", email="ghost@example.com", password=ADMIN_PASSWORD, role_ids=[uuid4()])
            )
        assert not uow.in_transaction

    async with UnitOfWork(session_maker()) as uow:
        assert await uow.users.get_by_username(tenant.id, "ghost") is None


async def test_duplicate_username_and_email_conflict(session_maker):
    tenant = await create_tenant(session_maker)
    await create_user(session_maker, tenant.id, "taken")
    async with UnitOfWork(session_maker()) as uow:
        service = UserService(uow, tenant.id)
        with pytest.raises(ConflictError):
            await service.create(UserCreate(username="taken", email="new@example.com", password=ADMIN_PASSWORD))
        with pytest.raises(ConflictError):
            await service.create(
                UserCreate(username="fresh", email="taken@acme.example.com", password=ADMIN_PASSWORD)
            )


async def test_user_password_update_rehashes(session_maker):
    tenant = await create_tenant(session_maker)
    user = await create_user(session_maker, tenant.id)
    old_hash = user.password_hash
    async with UnitOfWork(session_maker()) as uow:
        updated = await UserService(uow, tenant.id).update(user.id, UserUpdate(password="another-pass-1"))
        assert updated.password_hash != old_hash


async def test_login_bookkeeping(session_maker):
    tenant = await create_tenant(session_maker)
    user = await create_user(session_maker, tenant.id)

    async with UnitOfWork(session_maker()) as uow:
        with pytest.raises(AuthenticationError):
            await AuthService(uow, tenant.id).login("admin", "wrong-password")
    async with UnitOfWork(session_maker()) as uow:
        assert (await uow.users.get_by_id(user.id)).failed_login_attempts == 1

    async with UnitOfWork(session_maker()) as uow:
        tokens = await AuthService(uow, tenant.id).login(user.email, ADMIN_PASSWORD)
    async with UnitOfWork(session_maker()) as uow:
        stored = await uow.users.get_by_id(user.id)
        assert stored.failed_login_attempts == 0
        assert stored.last_login_date is not None
        assert stored.refresh_token == tokens.refresh_token
        assert stored.refresh_token_expiry_time is not None

    async with UnitOfWork(session_maker()) as uow:
        await AuthService(uow, tenant.id).logout(user.id)
    async with UnitOfWork(session_maker()) as uow:
        stored = await uow.users.get_by_id(user.id)
        assert stored.refresh_token is None
        assert stored.logout_end_date is not None
        with pytest.raises(AuthenticationError):
            await AuthService(uow, tenant.id).refresh(tokens.refresh_token)


async def test_inactive_user_cannot_log_in(session_maker):
    tenant = await create_tenant(session_maker)
    user = await create_user(session_maker, tenant.id)
    async with UnitOfWork(session_maker()) as uow:
        await UserService(uow, tenant.id).deactivate(user.id)
        with pytest.raises(AuthenticationError):
            await AuthService(uow, tenant.id).login("admin", ADMIN_PASSWORD)


async def test_customer_update_keeps_names_required_for_type(session_maker):
    tenant = await create_tenant(session_maker)
    async with UnitOfWork(session_maker()) as uow:
        service = CustomerService(uow, tenant.id)
        person = await service.create(_customer_payload("IND-1"))
        company = await service.create(
            CustomerCreate(
                customer_code="CORP-1",
                customer_type=CustomerType.CORPORATE,
                company_name="Initech",
                email="info@initech.example.com",
            )
        )

        with pytest.raises(BusinessRuleError):
            await service.update(person.id, CustomerUpdate.model_validate({"firstName": None}))
        with pytest.raises(BusinessRuleError):
            await service.update(company.id, CustomerUpdate.model_validate({"companyName": "  "}))

        assert (await service.get(person.id)).full_name == "Ada Lovelace"
        assert (await service.get(company.id)).full_name == "Initech"
