from uuid import uuid4

from fastapi import status

from conftest import auth_headers, caller_headers, create_tenant


def _customer_payload(code: str, **overrides):
    data = {
        "customerCode": code,
        "customerType": "Individual",
        "firstName": "Ada",
        "lastName": "Lovelace",
        "email": f"{code.lower()}@example.com",
        "customerSegment": "VIP",
    }
    data.update(overrides)
    return data


async def test_customer_crud_flow(client, session_maker):
    tenant = await create_tenant(session_maker)
    headers = await caller_headers(session_maker, tenant.id)

    create_resp = await client.post("/api/v1/customers", json=_customer_payload("C-001"), headers=headers)
    assert create_resp.status_code == status.HTTP_201_CREATED
    customer = create_resp.json()["data"]
    assert customer["tenantId"] == str(tenant.id)
    assert customer["fullName"] == "Ada Lovelace"
    assert customer["preferredLanguage"] == "en"
    customer_id = customer["id"]

    by_code = await client.get("/api/v1/customers/by-code/C-001", headers=headers)
    assert by_code.json()["data"]["id"] == customer_id

    patch_resp = await client.patch(
        f"/api/v1/customers/{customer_id}", json={"creditScore": 720, "city": "Porto"}, headers=headers
    )
    assert patch_resp.status_code == status.HTTP_200_OK
    patched = patch_resp.json()["data"]
    assert patched["creditScore"] == 720
    assert patched["firstName"] == "Ada"

    bad_patch = await client.patch(f"/api/v1/customers/{customer_id}", json={"creditScore": 900}, headers=headers)
    assert bad_patch.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY

    delete_resp = await client.delete(f"/api/v1/customers/{customer_id}", headers=headers)
    assert delete_resp.status_code == status.HTTP_200_OK
    after = (await client.get(f"/api/v1/customers/{customer_id}", headers=headers)).json()["data"]
    assert after["isActive"] is False
    assert after["customerStatus"] == "Inactive"


async def test_fifteen_customers_page_into_ten_and_five(client, session_maker):
    tenant = await create_tenant(session_maker)
    headers = await caller_headers(session_maker, tenant.id)
    for i in range(15):
        resp = await client.post("/api/v1/customers", json=_customer_payload(f"C-{i:03d}"), headers=headers)
        assert resp.status_code == status.HTTP_201_CREATED

    first = (await client.get("/api/v1/customers", params={"pageNumber": 1, "pageSize": 10}, headers=headers)).json()
    second = (await client.get("/api/v1/customers", params={"pageNumber": 2, "pageSize": 10}, headers=headers)).json()

    assert first["totalRecords"] == 15
    assert first["totalPages"] == 2
    assert len(first["data"]) == 10
    assert first["hasNextPage"] is True
    assert len(second["data"]) == 5
    assert second["hasNextPage"] is False
    assert second["hasPreviousPage"] is True
    ids = {c["id"] for c in first["data"]} | {c["id"] for c in second["data"]}
    assert len(ids) == 15


async def test_segment_and_status_filters(client, session_maker):
    tenant = await create_tenant(session_maker)
    headers = await caller_headers(session_maker, tenant.id)
    await client.post("/api/v1/customers", json=_customer_payload("VIP-1"), headers=headers)
    await client.post("/api/v1/customers", json=_customer_payload("STD-1", customerSegment="STD"), headers=headers)
    await client.post(
        "/api/v1/customers", json=_customer_payload("VIP-2", customerStatus="Blocked"), headers=headers
    )

    page = (
        await client.get("/api/v1/customers", params={"segment": "VIP", "status": "Active"}, headers=headers)
    ).json()
    assert [c["customerCode"] for c in page["data"]] == ["VIP-1"]

    active = (await client.get("/api/v1/customers/active", headers=headers)).json()
    assert {c["customerCode"] for c in active["data"]} == {"VIP-1", "STD-1"}


async def test_duplicate_code_conflicts_only_within_tenant(client, session_maker):
    first = await create_tenant(session_maker, "FIRST")
    second = await create_tenant(session_maker, "SECOND")
    first_headers = await caller_headers(session_maker, first.id)
    second_headers = await caller_headers(session_maker, second.id)

    assert (await client.post("/api/v1/customers", json=_customer_payload("C-1"), headers=first_headers)).status_code == 201
    dup = await client.post("/api/v1/customers", json=_customer_payload("C-1"), headers=first_headers)
    assert dup.status_code == status.HTTP_409_CONFLICT
    other = await client.post("/api/v1/customers", json=_customer_payload("C-1"), headers=second_headers)
    assert other.status_code == status.HTTP_201_CREATED


async def test_tenant_isolation(client, session_maker):
    first = await create_tenant(session_maker, "FIRST")
    second = await create_tenant(session_maker, "SECOND")
    first_headers = await caller_headers(session_maker, first.id)
    second_headers = await caller_headers(session_maker, second.id)
    customer_id = (
        await client.post("/api/v1/customers", json=_customer_payload("C-1"), headers=first_headers)
    ).json()["data"]["id"]

    foreign = await client.get(f"/api/v1/customers/{customer_id}", headers=second_headers)
    assert foreign.status_code == status.HTTP_404_NOT_FOUND

    listed = (await client.get("/api/v1/customers", headers=second_headers)).json()
    assert listed["totalRecords"] == 0

    mismatch = await client.get("/api/v1/customers", headers=auth_headers(first.id, uuid4(), header_tenant=second.id))
    assert mismatch.status_code == status.HTTP_403_FORBIDDEN


async def test_tenant_header_is_required(client, session_maker):
    tenant = await create_tenant(session_maker)
    headers = await caller_headers(session_maker, tenant.id)
    headers.pop("X-Tenant-ID")
    resp = await client.get("/api/v1/customers", headers=headers)
    assert resp.status_code == status.HTTP_400_BAD_REQUEST

    headers["X-Tenant-ID"] = "not-a-uuid"
    resp = await client.get("/api/v1/customers", headers=headers)
    assert resp.status_code == status.HTTP_400_BAD_REQUEST


async def test_corporate_customer_needs_company_name(client, session_maker):
    tenant = await create_tenant(session_maker)
    headers = await caller_headers(session_maker, tenant.id)
    payload = _customer_payload("CORP-1", customerType="Corporate", firstName=None, lastName=None)
    assert (await client.post("/api/v1/customers", json=payload, headers=headers)).status_code == 422

    payload["companyName"] = "Initech"
    resp = await client.post("/api/v1/customers", json=payload, headers=headers)
    assert resp.status_code == status.HTTP_201_CREATED
    assert resp.json()["data"]["fullName"] == "Initech"


async def test_patch_cannot_clear_required_names(client, session_maker):
    tenant = await create_tenant(session_maker)
    headers = await caller_headers(session_maker, tenant.id)
    customer_id = (
        await client.post("/api/v1/customers", json=_customer_payload("IND-1"), headers=headers)
    ).json()["data"]["id"]

    resp = await client.patch(
        f"/api/v1/customers/{customer_id}", json={"firstName": None, "lastName": None}, headers=headers
    )
    assert resp.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
    assert resp.json()["errorType"] == "validation_error"

    stored = (await client.get(f"/api/v1/customers/{customer_id}", headers=headers)).json()["data"]
    assert stored["fullName"] == "Ada Lovelace"

    renamed = await client.patch(f"/api/v1/customers/{customer_id}", json={"lastName": "King"}, headers=headers)
    assert renamed.status_code == status.HTTP_200_OK
    assert renamed.json()["data"]["fullName"] == "Ada King"
