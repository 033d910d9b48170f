def test_create_and_list_rooms(client):
    r = client.post("/rooms", json={"room_number": " 101 ", "type": "single", "rent_amount": 5000})
    assert r.status_code == 201
    room = r.json()
    assert room["room_number"] == "101"
    assert room["status"] == "available"

    client.post("/rooms", json={"room_number": "202", "type": "double", "rent_amount": 6500, "status": "maintenance"})

    assert len(client.get("/rooms").json()) == 2
    assert [r["room_number"] for r in client.get("/rooms", params={"status": "maintenance"}).json()] == ["202"]
    assert [r["room_number"] for r in client.get("/rooms", params={"search": "doub"}).json()] == ["202"]


def test_room_rejects_negative_rent(client):
    r = client.post("/rooms", json={"room_number": "101", "type": "single", "rent_amount": -1})
    assert r.status_code == 422


def test_tenant_moves_into_room(client, tenant, room):
    assert client.get(f"/rooms/{room['id']}").json()["status"] == "occupied"
    assert client.get(f"/tenants/{tenant['id']}").json()["name"] == "Maria Santos"


def test_tenant_user_is_unique(client, tenant, room):
    r = client.post(
        "/tenants",
        json={
            "user_id": "tenant-user-1",
            "room_id": room["id"],
            "name": "Someone Else",
            "contact": "0917",
            "start_date": "2024-01-01",
        },
    )
    assert r.status_code == 409


def test_tenant_needs_existing_room(client):
    r = client.post(
        "/tenants",
        json={"user_id": "u", "room_id": "missing", "name": "X", "contact": "0917", "start_date": "2024-01-01"},
    )
    assert r.status_code == 404


def test_room_with_tenant_cannot_be_deleted(client, tenant, room):
    assert client.delete(f"/rooms/{room['id']}").status_code == 400
    assert client.delete(f"/tenants/{tenant['id']}").status_code == 200
    assert client.delete(f"/rooms/{room['id']}").status_code == 204


def test_tenant_search(client, tenant):
    assert len(client.get("/tenants", params={"search": "santos"}).json()) == 1
    assert len(client.get("/tenants", params={"search": "101"}).json()) == 1
    assert client.get("/tenants", params={"search": "nobody"}).json() == []


def test_tenant_details(client, tenant):
    details = client.get(f"/tenants/{tenant['id']}/details").json()
    assert details["tenant"]["id"] == tenant["id"]
    assert details["room"]["room_number"] == "101"
    assert details["bills"] == []
    assert details["deposits"] == []


# --- Deposits ---

def test_deposit_recorded_with_new_tenant(client, room):
    r = client.post(
        "/tenants",
        json={
            "user_id": "tenant-user-9",
            "room_id": room["id"],
            "name": "Ana Cruz",
            "contact": "0917",
            "start_date": "2024-02-01",
            "deposit_amount": 5000,
        },
    )
    tenant = r.json()
    deposits = client.get(f"/tenants/{tenant['id']}/deposits").json()
    assert len(deposits) == 1
    assert deposits[0]["amount"] == 5000
    assert deposits[0]["status"] == "active"
    assert deposits[0]["deposit_date"] == "2024-02-01"


def test_refund_deposit_only_once(client, tenant):
    r = client.post(
        f"/tenants/{tenant['id']}/deposits",
        json={"amount": 5000, "deposit_date": "2024-01-15", "received_by": "Landlord"},
    )
    assert r.status_code == 201, r.text
    deposit = r.json()
    assert deposit["status"] == "active"
    assert deposit["room_id"] == tenant["room_id"]

    r = client.post(f"/deposits/{deposit['id']}/refund")
    assert r.status_code == 200
    assert r.json()["status"] == "refunded"
    assert r.json()["refund_date"] is not None

    assert client.post(f"/deposits/{deposit['id']}/refund").status_code == 400
    assert client.post(f"/deposits/{deposit['id']}/forfeit").status_code == 400


def test_forfeit_deposit(client, tenant):
    deposit = client.post(
        f"/tenants/{tenant['id']}/deposits",
        json={"amount": 1000, "deposit_date": "2024-01-15", "method": "gcash", "reference_number": "GC-9"},
    ).json()
    r = client.post(f"/deposits/{deposit['id']}/forfeit")
    assert r.json()["status"] == "forfeited"
    assert r.json()["refund_date"] is None
    assert [d["id"] for d in client.get("/deposits", params={"status": "forfeited"}).json()] == [deposit["id"]]


def test_deposit_needs_receiver_for_in_person(client, tenant):
    r = client.post(f"/tenants/{tenant['id']}/deposits", json={"amount": 1000, "deposit_date": "2024-01-15"})
    assert r.status_code == 422


def test_room_and_tenant_updates_reject_nulls(client, tenant, room):
    assert client.patch(f"/rooms/{room['id']}", json={"rent_amount": None}).status_code == 422
    assert client.patch(f"/rooms/{room['id']}", json={"status": None}).status_code == 422
    assert client.patch(f"/tenants/{tenant['id']}", json={"name": None}).status_code == 422

    r = client.patch(f"/rooms/{room['id']}", json={"description": None})
    assert r.status_code == 200
    r = client.patch(f"/tenants/{tenant['id']}", json={"emergency_contact_name": None})
    assert r.status_code == 200
