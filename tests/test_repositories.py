from datetime import datetime, timedelta, timezone
from uuid import uuid4

from saas_platform.db.base import CustomerType, RecordStatus
from saas_platform.db.models.customer import Customer
from saas_platform.db.models.tenant import Tenant
from saas_platform.db.models.user import User, UserRole


def _tenant(code: str, **kwargs) -> Tenant:
    defaults = {
        "tenant_name": f"{code} Ltd",
        "tenant_code": code,
        "subscription_plan_id": "BASIC",
        "contact_email": f"{code.lower()}@example.com",
    }
    defaults.update(kwargs)
    return Tenant(**defaults)


def _customer(tenant_id, code: str, **kwargs) -> Customer:
    defaults = {
        "tenant_id": tenant_id,
        "customer_code": code,
        "customer_type": CustomerType.INDIVIDUAL,
        "first_name": "Grace",
        "last_name": "Hopper",
        "email": f"{code.lower()}@example.com",
    }
    defaults.update(kwargs)
    return Customer(**defaults)


async def test_add_then_get_by_id_returns_entity(uow):
    tenant = _tenant("T-1")
    await uow.tenants.add(tenant)
    assert await uow.save_changes() == 1

    loaded = await uow.tenants.get_by_id(tenant.id)
    assert loaded is not None
    assert loaded.tenant_code == "T-1"
    assert loaded.tenant_status == RecordStatus.ACTIVE
    assert loaded.is_active is True
    assert loaded.created_date is not None


async def test_get_by_id_unknown_returns_none(uow):
    assert await uow.tenants.get_by_id(uuid4()) is None


async def test_get_all_and_add_all(uow):
    await uow.tenants.add_all([_tenant("A"), _tenant("B"), _tenant("C")])
    assert await uow.save_changes() == 3
    codes = sorted(t.tenant_code for t in await uow.tenants.get_all())
    assert codes == ["A", "B", "C"]


async def test_tenant_lookups(uow):
    await uow.tenants.add_all(
        [
            _tenant("ALPHA", contact_email="ops@alpha.example.com"),
            _tenant("BETA", is_active=False, tenant_status=RecordStatus.INACTIVE),
        ]
    )
    await uow.save_changes()

    assert (await uow.tenants.get_by_code("ALPHA")).tenant_name == "ALPHA Ltd"
    assert await uow.tenants.get_by_code("MISSING") is None
    assert [t.tenant_code for t in await uow.tenants.get_by_contact_email("ops@alpha.example.com")] == ["ALPHA"]
    assert [t.tenant_code for t in await uow.tenants.get_active()] == ["ALPHA"]
    assert [t.tenant_code for t in await uow.tenants.search("bet")] == ["BETA"]


async def test_is_code_unique_honours_exclude_id(uow):
    tenant = _tenant("UNIQ")
    await uow.tenants.add(tenant)
    await uow.save_changes()

    assert await uow.tenants.is_code_unique("UNIQ") is False
    assert await uow.tenants.is_code_unique("UNIQ", exclude_id=tenant.id) is True
    assert await uow.tenants.is_code_unique("OTHER") is True


async def test_customer_codes_are_unique_per_tenant(uow):
    first, second = _tenant("ONE"), _tenant("TWO")
    await uow.tenants.add_all([first, second])
    await uow.save_changes()
    await uow.customers.add(_customer(first.id, "C-1"))
    await uow.save_changes()

    assert await uow.customers.is_code_unique(first.id, "C-1") is False
    assert await uow.customers.is_code_unique(second.id, "C-1") is True


async def test_paging_returns_newest_first_with_totals(uow):
    tenant = _tenant("PAGE")
    await uow.tenants.add(tenant)
    base = datetime(2024, 1, 1, tzinfo=timezone.utc)
    customers = [
        _customer(tenant.id, f"C-{i:02d}", created_date=base + timedelta(minutes=i))
        for i in range(15)
    ]
    await uow.customers.add_all(customers)
    await uow.save_changes()

    page_one, total = await uow.customers.get_paged(tenant.id, page_number=1, page_size=10)
    page_two, total_two = await uow.customers.get_paged(tenant.id, page_number=2, page_size=10)

    assert total == total_two == 15
    assert len(page_one) == 10
    assert len(page_two) == 5
    assert page_one[0].customer_code == "C-14"
    assert page_two[-1].customer_code == "C-00"
    codes = [c.customer_code for c in page_one + page_two]
    assert len(set(codes)) == 15

    beyond, total_beyond = await uow.customers.get_paged(tenant.id, page_number=3, page_size=10)
    assert beyond == []
    assert total_beyond == 15


async def test_paging_filters_combine_with_and(uow):
    tenant = _tenant("FILT")
    other = _tenant("OTHER")
    await uow.tenants.add_all([tenant, other])
    await uow.customers.add_all(
        [
            _customer(tenant.id, "VIP-1", customer_segment="VIP", first_name="Alan"),
            _customer(tenant.id, "VIP-2", customer_segment="VIP", customer_status=RecordStatus.BLOCKED),
            _customer(tenant.id, "STD-1", customer_segment="STD", first_name="Alan"),
            _customer(other.id, "VIP-1", customer_segment="VIP", first_name="Alan"),
        ]
    )
    await uow.save_changes()

    items, total = await uow.customers.get_paged(
        tenant.id, search_term="ALAN", segment="VIP", status=RecordStatus.ACTIVE
    )
    assert total == 1
    assert [c.customer_code for c in items] == ["VIP-1"]
    assert items[0].tenant_id == tenant.id


async def test_customer_search_matches_any_text_field(uow):
    tenant = _tenant("SRCH")
    await uow.tenants.add(tenant)
    await uow.customers.add_all(
        [
            _customer(tenant.id, "IND-1", first_name="Linus", last_name="Torvalds"),
            _customer(
                tenant.id,
                "CORP-1",
                customer_type=CustomerType.CORPORATE,
                first_name=None,
                last_name=None,
                company_name="Initech",
            ),
        ]
    )
    await uow.save_changes()

    assert [c.customer_code for c in await uow.customers.search(tenant.id, "torv")] == ["IND-1"]
    assert [c.customer_code for c in await uow.customers.search(tenant.id, "INITECH")] == ["CORP-1"]
    assert len(await uow.customers.search(tenant.id, "-1")) == 2


async def test_user_and_role_repositories(uow):
    tenant = _tenant("USR")
    await uow.tenants.add(tenant)
    user = User(tenant_id=tenant.id, username="jdoe", email="jdoe@example.com", is_active=True)
    inactive = User(tenant_id=tenant.id, username="old", email="old@example.com", is_active=False)
    await uow.users.add_all([user, inactive])
    await uow.save_changes()

    assert (await uow.users.get_by_username(tenant.id, "jdoe")).id == user.id
    assert [u.username for u in await uow.users.get_by_email("jdoe@example.com", tenant_id=tenant.id)] == ["jdoe"]
    assert [u.username for u in await uow.users.get_active(tenant.id)] == ["jdoe"]
    assert await uow.users.is_username_unique(tenant.id, "jdoe") is False
    assert await uow.users.is_email_unique(tenant.id, "jdoe@example.com", exclude_id=user.id) is True

    role_id = uuid4()
    await uow.user_roles.add(UserRole(user_id=user.id, role_id=role_id))
    await uow.save_changes()
    assert await uow.user_roles.is_assignment_unique(user.id, role_id) is False

    assignment = await uow.user_roles.get_assignment(user.id, role_id)
    await uow.user_roles.remove(assignment)
    assert await uow.save_changes() == 1
    assert await uow.user_roles.get_by_user_id(user.id) == []


async def test_update_tracks_changes_for_next_save(uow):
    tenant = _tenant("UPD")
    await uow.tenants.add(tenant)
    await uow.save_changes()

    tenant.tenant_name = "Renamed"
    tracked = await uow.tenants.update(tenant)
    assert tracked is tenant
    assert await uow.save_changes() == 1
    assert (await uow.tenants.get_by_code("UPD")).tenant_name == "Renamed"


async def test_new_entities_carry_an_id_before_staging(uow):
    tenant = _tenant("EARLY")
    assert tenant.id is not None
    customer = _customer(tenant.id, "C-1")
    await uow.tenants.add(tenant)
    await uow.customers.add(customer)
    assert await uow.save_changes() == 2

    assert (await uow.customers.get_by_id(customer.id)).tenant_id == tenant.id


async def test_search_treats_wildcards_literally(uow):
    tenant = _tenant("WILD")
    await uow.tenants.add(tenant)
    await uow.customers.add_all(
        [
            _customer(tenant.id, "PLAIN-1", first_name="Plain"),
            _customer(tenant.id, "PLAIN-2", first_name="Simple"),
            _customer(tenant.id, "ODD-1", first_name="Under_score", last_name="100%"),
        ]
    )
    await uow.save_changes()

    assert [c.customer_code for c in await uow.customers.search(tenant.id, "_")] == ["ODD-1"]
    assert [c.customer_code for c in await uow.customers.search(tenant.id, "%")] == ["ODD-1"]
    items, total = await uow.customers.get_paged(tenant.id, search_term="_")
    assert total == 1
    assert [c.customer_code for c in items] == ["ODD-1"]
    assert await uow.customers.search(tenant.id, "r_s") == []
